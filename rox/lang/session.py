"""Session control for rox. Runs the lexer, parser and interpreter over source text, either from a file or line by line
from the command-line shell, and reports every diagnostic through the session's ErrorHandler.
"""

import sys

from rox.lang.error import RoxException
from rox.lang.lexer import Lexer
from rox.lang.parser import DEFAULT_MAX_DEPTH, Parser
from rox.runtime.interpreter import Interpreter


class Session:
    """Governs a rox session. All source added to a session shares one Interpreter, and so one Environment: variables
    defined on one shell line are visible on the next.
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line=False, source=None, stdout=None, max_depth=DEFAULT_MAX_DEPTH,
                 show_tokens=False, show_ast=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path            # used for error messages
        self.cmd_line = cmd_line    # whether or not in command-line mode
        self.max_depth = max_depth
        self.show_tokens = show_tokens
        self.show_ast = show_ast

        self.interpreter = Interpreter(stdout)
        self.to_exec = []  # parsed statements that have not been run yet

        if self.cmd_line:
            self.error_handler.fatal = False

        if path == Session.SH_FILE:
            if not cmd_line:
                raise RoxException("'{}' is a reserved filename", path, diagnosis=False)

        elif source is None:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise RoxException("'{}' could not be opened", path, diagnosis=False)
            except UnicodeDecodeError:
                raise RoxException("'{}' could not be read as UTF-8", path, diagnosis=False)

        if source is not None:
            self.add(source)

    @property
    def stdout(self):
        return self.interpreter.stdout if self.interpreter.stdout is not None else sys.stdout

    def add(self, source, line_num=1):
        """Parses source and queues its statements. Every lexical/parse error is reported; the statements that could
        be recovered are queued anyway. Returns the list of errors.
        """
        # shell input is echoed back in error tracebacks; file errors point at their line instead
        self.error_handler.register_line(self.path, source.strip() if self.cmd_line else None, line_num)

        lexer = Lexer(source)
        tokens = lexer.tokenize()
        parser = Parser(source, tokens, max_depth=self.max_depth)
        statements = parser.parse()

        if self.show_tokens:
            for token in tokens:
                print(f"{token!r:<28} {token.lexeme(source)!r}", file=self.stdout)
        if self.show_ast:
            for stmt in statements:
                print(stmt.display(), file=self.stdout)

        errors = lexer.errors + parser.errors
        for error in sorted(errors, key=lambda error: error.start):
            self.error_handler.throw(error)

        self.to_exec.extend(statements)
        return errors

    def run(self):
        """Runs the queued statements. A runtime error stops only the top-level statement that raised it; each one is
        reported. Returns the list of runtime errors.
        """
        statements, self.to_exec = self.to_exec, []
        try:
            return self.interpreter.interpret(statements, reporter=self.error_handler.throw)
        finally:
            self.error_handler.remove_line(self.path)
