"""Lexical analysis for rox. Turns source text into a list of spanned tokens in a single left-to-right scan.

Tokenization is total: every input produces a token list terminated by exactly one EOF token. Characters the lexer
does not know become ERROR tokens, which are reported by the parser. Unterminated strings still produce a STRING
token; the problem is recorded in Lexer.errors.
"""

from rox.lang.error import LexicalError
from rox.lang.token import KEYWORDS, SINGLE_CHARS, WITH_EQUAL, Token, TokenKind


def is_digit(char):
    # str.isdigit accepts characters like '²' that float() rejects
    return "0" <= char <= "9"


def is_identifier_char(char):
    # ASCII only, both at the start of an identifier and inside it
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


class Lexer:
    """Scanner over one source string."""

    def __init__(self, source):
        self.source = source
        self.start = 0   # offset of the first char of the token being scanned
        self.cursor = 0  # offset of the next char to scan
        self.errors = []

    def tokenize(self):
        """Scans the whole source. Returns a list of Tokens ending with one EOF token."""
        tokens = []
        kind = self.next_token()
        while kind is not None:
            tokens.append(Token(kind, self.start, self.cursor - 1))
            kind = self.next_token()

        end = max(len(self.source) - 1, 0)
        tokens.append(Token(TokenKind.EOF, end, end))
        return tokens

    def next_token(self):
        """Returns the kind of the next token (its span is self.start..self.cursor - 1), or None at end of input."""
        self.skip_trivia()
        if self.is_at_end():
            return None

        self.start = self.cursor
        char = self.advance()

        if char in SINGLE_CHARS:
            return SINGLE_CHARS[char]
        if char in WITH_EQUAL:
            without, with_equal = WITH_EQUAL[char]
            return with_equal if self.consume_if("=") else without
        if char == "\"":
            return self.string()
        if is_digit(char):
            return self.number()
        if is_identifier_char(char):
            return self.identifier()
        return TokenKind.ERROR

    def skip_trivia(self):
        """Skips whitespace and '//' comments, which may alternate."""
        while True:
            self.consume_while(str.isspace)
            if not self.source.startswith("//", self.cursor):
                return
            self.consume_while(lambda char: char != "\n")

    def number(self):
        self.consume_while(is_digit)
        # a '.' only belongs to the number when digits follow it: '1.' is NUMBER DOT
        if self.peek() == "." and is_digit(self.peek(1)):
            self.advance()
            self.consume_while(is_digit)
        return TokenKind.NUMBER

    def identifier(self):
        self.consume_while(is_identifier_char)
        return KEYWORDS.get(self.source[self.start:self.cursor], TokenKind.IDENTIFIER)

    def string(self):
        self.consume_while(lambda char: char != "\"")
        if not self.consume_if("\""):
            token = Token(TokenKind.STRING, self.start, max(self.cursor - 1, self.start))
            self.errors.append(LexicalError("Unterminated string.", token, self.source))
        return TokenKind.STRING

    def is_at_end(self):
        return self.cursor >= len(self.source)

    def peek(self, ahead=0):
        """Returns the char ahead chars after the cursor, or '' past the end."""
        idx = self.cursor + ahead
        return self.source[idx] if idx < len(self.source) else ""

    def advance(self):
        char = self.source[self.cursor]
        self.cursor += 1
        return char

    def consume_if(self, char):
        if self.peek() == char:
            self.cursor += 1
            return True
        return False

    def consume_while(self, predicate):
        """Advances while predicate(char) holds. Returns the consumed text."""
        start = self.cursor
        while not self.is_at_end() and predicate(self.source[self.cursor]):
            self.cursor += 1
        return self.source[start:self.cursor]


def tokenize(source):
    """Tokenizes source. Lexical errors are dropped: use Lexer directly to get them."""
    return Lexer(source).tokenize()
