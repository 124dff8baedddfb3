"""Handles interactive/command-line mode for the rox interpreter. Uses cmd as backend."""

import cmd

from rox.lang.lexer import tokenize
from rox.lang.token import TokenKind


def open_braces(source):
    """Number of '{' tokens in source left unclosed. Braces inside strings and comments do not count."""
    kinds = [token.kind for token in tokenize(source)]
    return kinds.count(TokenKind.LEFT_BRACE) - kinds.count(TokenKind.RIGHT_BRACE)


class Shell(cmd.Cmd):
    """rox interpreter shell."""
    intro = "rox interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._tmp_start = 0  # line number where the continued chunk started
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary rox source. Lines are joined while a block is left open."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._tmp_start = self.line_num

            source = self._tmp_line + line + "\n"
            if open_braces(source) > 0:
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(source, self._tmp_start)
            self.sess.run()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the rox interpreter!\n\n"
              "rox is a small scripting language with numbers, strings, booleans and nil, \n"
              "block-scoped variables, 'if'/'else' and 'print'.\n\n"
              "Try it out by typing 'let greeting = \"hello\";'. Next, try typing \n"
              "'print greeting + \" world\";'. Statements end with ';'; a line that opens a \n"
              "'{' block continues until the block is closed.", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit("")

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            self.sess.error_handler.warn("unrecognized argument to exit: '{}'", arg)
            return False
        return True
