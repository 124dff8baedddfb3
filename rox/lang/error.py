"""Error handling for rox. Only RoxExceptions should be encountered during running: if another type of error is raised
and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Errors come in three tiers, none of which stop the whole run on their own:
    1. Lexical: unterminated strings (unknown characters become ERROR tokens that the parser reports)
    2. Syntax: one diagnostic per malformed statement, followed by synchronization
    3. Runtime: reported per top-level statement, after which execution continues
"""

import sys

from termcolor import colored


class RoxException(Exception):
    """Templates an error/warning message so that it can be used to throw a rox error/warning. The message is a
    format string whose '{}' slots are filled with exprs (highlighted when rendered in color).
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = list(exprs)
        self.msg = msg.format(*self.exprs)

        self.start = start
        self.end = end
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    def render(self, color=True):
        """Returns self.msg with expr snippets bolded."""
        if not color:
            return self.msg
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))

    def __str__(self):
        return self.msg


class RoxSyntaxError(RoxException):
    """Error located at a token of the source: either found while scanning or while parsing."""

    def __init__(self, msg, token, source, exprs=None):
        super().__init__(msg, exprs, start=token.start, end=token.end)
        self.token = token
        self.source = source
        self.line = line_of(source, token.start)

    def __str__(self):
        return f"{self.msg}\nAtLine [{self.line}] AtToken[{self.token!r}]"

    def render(self, color=True):
        return f"{super().render(color)}\nAtLine [{self.line}] AtToken[{self.token!r}]"


class LexicalError(RoxSyntaxError):
    """Found by the lexer. Never stops scanning."""


class ParseError(RoxSyntaxError):
    """Found by the parser. Triggers synchronization."""


class RoxRuntimeError(RoxException):
    """Raised while executing a statement. Reported as a plain message."""

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False)


class UndefinedVariable(RoxRuntimeError):

    def __init__(self, name):
        super().__init__("Undefined variable '{}'.", name)
        self.name = name


class UninitializedVariable(RoxRuntimeError):

    def __init__(self, name):
        super().__init__("Variable '{}' is not initialized.", name)
        self.name = name


class RoxTypeError(RoxRuntimeError):
    """Operand kinds do not fit the operator (or a condition is not a boolean)."""


def line_of(source, offset):
    """1-based line number of offset in source."""
    return source.count("\n", 0, max(offset, 0)) + 1


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report custom rox errors/warnings. Also used
    directly as the reporter for diagnostics that do not unwind the stack (syntax errors, per-statement runtime errors).
    """
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, color=True, stream=None):
        self.fatal = fatal
        self.color = color
        self.stream = stream
        self.traceback = {}
        self.errors = 0

    @property
    def had_error(self):
        return self.errors > 0

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def _colored(self, text, color=None, attrs=None):
        if not self.color:
            return text
        return colored(text, color, attrs=attrs)

    def _print(self, text):
        print(text, file=self.stream if self.stream is not None else sys.stderr)

    def diagnose(self, error):
        """Returns the source line holding the offending token, with the token highlighted and underlined."""
        color = ErrorHandler.ERROR
        source = error.source

        line_start = source.rfind("\n", 0, error.start) + 1
        line_end = source.find("\n", error.start)
        if line_end == -1:
            line_end = len(source)

        start = error.start - line_start
        end = max(min(error.end + 1, line_end) - line_start, start + 1)
        line = source[line_start:line_end]

        diagnosis = "  " + line[:start]
        diagnosis += self._colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += self._colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self, error):
        """'<file>:<line>: ' for syntax errors, '<file>: ' otherwise. line_num is the first line of the chunk being
        run (shell lines are chunks of their own).
        """
        for file, (__, line_num) in self.traceback.items():
            if isinstance(error, RoxSyntaxError):
                return f"{file}:{error.line + (line_num or 1) - 1}: "
            return f"{file}: "
        return ""

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = RoxException(*args, **kwargs)

        location = self._location(error)
        error_msg = self._colored(location, attrs=["bold"]) if location else ""
        error_msg += self._colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.render(self.color)
        self._print(error_msg)

    def throw(self, error):
        """Reports error using self.traceback. error must be a RoxException. Exits if self.fatal."""
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        location = self._location(error)
        if location:
            error_msg += self._colored(location, attrs=["bold"])
        if error.internal:
            error_msg += self._colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += self._colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.render(self.color)
        self._print(error_msg)

        if not error.internal and error.diagnosis and isinstance(error, RoxSyntaxError):
            self._print(self.diagnose(error))

        self.errors += 1
        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(RoxException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(RoxException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, RoxException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(RoxException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
