"""Token model shared by the lexer and the parser. Tokens do not store their text: the lexeme is recovered from the
source through the token's span when it is needed (literals, names, diagnostics).
"""

import enum
from dataclasses import dataclass


class TokenKind(enum.Enum):
    """All token kinds produced by the rox lexer."""

    # Single-character tokens
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACKET = "["
    RIGHT_BRACKET = "]"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    COMMA = ","
    DOT = "."
    MINUS = "-"
    PLUS = "+"
    SEMICOLON = ";"
    SLASH = "/"
    STAR = "*"

    # One or two character tokens
    NOT = "!"
    NOT_EQUAL = "!="
    EQUAL = "="
    EQUAL_EQUAL = "=="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Keywords
    AND = "and"
    ELSE = "else"
    FALSE = "false"
    FOR = "for"
    FUN = "fun"
    IF = "if"
    IN = "in"
    NIL = "nil"
    OR = "or"
    PRINT = "print"
    RETURN = "return"
    TRUE = "true"
    LET = "let"

    ERROR = "ERROR"
    EOF = "EOF"


KEYWORDS = {kind.value: kind for kind in (
    TokenKind.AND, TokenKind.ELSE, TokenKind.FALSE, TokenKind.FOR, TokenKind.FUN, TokenKind.IF, TokenKind.IN,
    TokenKind.NIL, TokenKind.OR, TokenKind.PRINT, TokenKind.RETURN, TokenKind.TRUE, TokenKind.LET,
)}

SINGLE_CHARS = {kind.value: kind for kind in (
    TokenKind.LEFT_PAREN, TokenKind.RIGHT_PAREN, TokenKind.LEFT_BRACKET, TokenKind.RIGHT_BRACKET,
    TokenKind.LEFT_BRACE, TokenKind.RIGHT_BRACE, TokenKind.COMMA, TokenKind.DOT, TokenKind.MINUS, TokenKind.PLUS,
    TokenKind.SEMICOLON, TokenKind.SLASH, TokenKind.STAR,
)}

# char: (kind without trailing '=', kind with trailing '=')
WITH_EQUAL = {
    "!": (TokenKind.NOT, TokenKind.NOT_EQUAL),
    "=": (TokenKind.EQUAL, TokenKind.EQUAL_EQUAL),
    ">": (TokenKind.GREATER, TokenKind.GREATER_EQUAL),
    "<": (TokenKind.LESS, TokenKind.LESS_EQUAL),
}


@dataclass(frozen=True)
class Token:
    """A token and its span. start and end are inclusive character offsets into the source: end is the offset of the
    lexeme's last character.
    """
    kind: TokenKind
    start: int
    end: int

    def lexeme(self, source):
        """Text of this token in source ('' for EOF)."""
        if self.kind is TokenKind.EOF:
            return ""
        return source[self.start:self.end + 1]

    def __repr__(self):
        return f"Token({self.kind.name}, {self.start}, {self.end})"
