"""Recursive-descent parser for rox. Builds the AST described in rox.lang.ast from the lexer's tokens.

Each binary precedence layer is parsed by iteratively folding to the left; assignment is the only right-associative
form. A malformed declaration produces one ParseError and the parser synchronizes to the next statement boundary, so
parsing always returns every statement it could recover along with the list of errors.
"""

import sys
from contextlib import contextmanager

from rox.lang.ast import (Assignment, Binary, BinaryOperator, Block, Boolean, Expression, If, Let, Logical,
                          LogicalOperator, Nil, Number, Print, String, Unary, UnaryOperator, Variable)
from rox.lang.error import ParseError
from rox.lang.lexer import Lexer
from rox.lang.token import TokenKind


# a nested grouping costs about 16 frames while parsing; the remainder is left to the caller's stack
FRAMES_PER_LEVEL = 24

# nested groupings/unaries/assignments/blocks before "Too much nesting."
DEFAULT_MAX_DEPTH = sys.getrecursionlimit() // FRAMES_PER_LEVEL


def _operators(enum_cls, *names):
    """Maps TokenKind.<name>: enum_cls.<name> for every name."""
    return {TokenKind[name]: enum_cls[name] for name in names}


EQUALITY = _operators(BinaryOperator, "NOT_EQUAL", "EQUAL_EQUAL")
COMPARISON = _operators(BinaryOperator, "GREATER", "GREATER_EQUAL", "LESS", "LESS_EQUAL")
TERM = _operators(BinaryOperator, "PLUS", "MINUS")
FACTOR = _operators(BinaryOperator, "STAR", "SLASH")
UNARY = _operators(UnaryOperator, "NOT", "MINUS")
OR = _operators(LogicalOperator, "OR")
AND = _operators(LogicalOperator, "AND")

LITERALS = {
    TokenKind.TRUE: Boolean(True),
    TokenKind.FALSE: Boolean(False),
    TokenKind.NIL: Nil(),
}

# statements that begin after a synchronization point
SYNC = {TokenKind.FOR, TokenKind.FUN, TokenKind.IF, TokenKind.PRINT, TokenKind.RETURN, TokenKind.LET, TokenKind.EOF}

# recognized by the lexer, but without semantics
UNSUPPORTED = {TokenKind.FOR, TokenKind.FUN, TokenKind.RETURN}


class Parser:
    """Parses one source string. If tokens is None, the source is tokenized here and lexical errors are collected into
    self.errors ahead of the parse errors.
    """

    def __init__(self, source, tokens=None, max_depth=DEFAULT_MAX_DEPTH):
        self.source = source
        if tokens is None:
            lexer = Lexer(source)
            tokens = lexer.tokenize()
            self.errors = list(lexer.errors)
        else:
            self.errors = []

        self.tokens = tokens
        self.cursor = 0
        self.depth = 0
        self.max_depth = max_depth

    def parse(self):
        """Returns the list of statements of the program. Never raises ParseError: see self.errors."""
        statements = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # ------------------------------------------------------------------------------------------------------------------
    # Statements

    def declaration(self):
        """Parses one declaration. On error, records it, synchronizes and returns None."""
        start = self.cursor
        try:
            if self.match(TokenKind.LET):
                return self.let_declaration()
            return self.statement()

        except ParseError as error:
            self.errors.append(error)
            if self.cursor == start:
                self.advance()  # always make progress
            self.synchronize()
            return None

    def let_declaration(self):
        name = self.consume(TokenKind.IDENTIFIER, "Expected variable name.").lexeme(self.source)

        initializer = None
        if self.match(TokenKind.EQUAL):
            initializer = self.expression()

        self.consume(TokenKind.SEMICOLON, "Expected '{}' after variable declaration.", ";")
        return Let(name, initializer)

    def statement(self):
        token = self.peek()
        if token.kind in UNSUPPORTED:
            raise self.error(token, "'{}' statements are not supported.", token.kind.value)

        if self.match(TokenKind.LEFT_BRACE):
            return self.block()
        if self.match(TokenKind.PRINT):
            return self.print_statement()
        if self.match(TokenKind.IF):
            return self.if_statement()
        return self.expression_statement()

    def block(self):
        """Assumes '{' has been consumed."""
        statements = []
        with self.nested(closing=TokenKind.RIGHT_BRACE):
            while not self.check(TokenKind.RIGHT_BRACE) and not self.is_at_end():
                stmt = self.declaration()
                if stmt is not None:
                    statements.append(stmt)

        self.consume(TokenKind.RIGHT_BRACE, "Expected '{}' after block.", "}")
        return Block(tuple(statements))

    def print_statement(self):
        value = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expected '{}' after value.", ";")
        return Print(value)

    def if_statement(self):
        """Assumes 'if' has been consumed. An 'else if' chain is read in a loop, so each arm costs no nesting."""
        arms = []
        else_branch = None
        while True:
            self.consume(TokenKind.LEFT_PAREN, "Expected '{}' after 'if'.", "(")
            condition = self.expression()
            self.consume(TokenKind.RIGHT_PAREN, "Expected '{}' after if condition.", ")")

            with self.nested():
                arms.append((condition, self.statement()))

            if not self.match(TokenKind.ELSE):
                break
            if not self.match(TokenKind.IF):
                with self.nested():
                    else_branch = self.statement()
                break

        for condition, then_branch in reversed(arms):
            else_branch = If(condition, then_branch, else_branch)
        return else_branch

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expected '{}' after expression.", ";")
        return Expression(expr)

    # ------------------------------------------------------------------------------------------------------------------
    # Expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if self.match(TokenKind.EQUAL):
            equals = self.previous()
            with self.nested():
                value = self.assignment()  # a = b = 3 assigns b first

            if isinstance(expr, Variable):
                return Assignment(expr.name, value)
            self.errors.append(self.error(equals, "Invalid assignment target."))  # not fatal: keep parsing

        return expr

    def logic_or(self):
        return self.left_fold(self.logic_and, OR, Logical)

    def logic_and(self):
        return self.left_fold(self.equality, AND, Logical)

    def equality(self):
        return self.left_fold(self.comparison, EQUALITY)

    def comparison(self):
        return self.left_fold(self.term, COMPARISON)

    def term(self):
        return self.left_fold(self.factor, TERM)

    def factor(self):
        return self.left_fold(self.unary, FACTOR)

    def left_fold(self, operand, operators, node=Binary):
        """Parses operand ( OPERATOR operand )* into a left-associated tree of nodes. operators maps each accepted
        TokenKind to the operator stored in the node.
        """
        left = operand()
        while self.peek().kind in operators:
            op = operators[self.advance().kind]
            left = node(left, op, operand())
        return left

    def unary(self):
        if self.peek().kind in UNARY:
            op = UNARY[self.advance().kind]
            with self.nested():
                return Unary(op, self.unary())
        return self.primary()

    def primary(self):
        token = self.peek()

        if token.kind in LITERALS:
            self.advance()
            return LITERALS[token.kind]

        if token.kind is TokenKind.NUMBER:
            self.advance()
            return Number(self.number_value(token))

        if token.kind is TokenKind.STRING:
            self.advance()
            return String(self.string_value(token))

        if token.kind is TokenKind.IDENTIFIER:
            self.advance()
            return Variable(token.lexeme(self.source))

        if token.kind is TokenKind.LEFT_PAREN:
            self.advance()
            with self.nested():
                expr = self.expression()
            self.consume(TokenKind.RIGHT_PAREN, "Expected '{}' after expression.", ")")
            return expr

        if token.kind is TokenKind.ERROR:
            raise self.error(token, "Unexpected character '{}'.", token.lexeme(self.source))

        raise self.error(token, "Expected expression.")

    # ------------------------------------------------------------------------------------------------------------------
    # Literals

    def number_value(self, token):
        text = token.lexeme(self.source)
        try:
            return float(text)
        except ValueError:
            raise self.error(token, "Invalid number literal '{}'.", text)

    def string_value(self, token):
        """Text between the quotes. An unterminated string runs to the end of the source."""
        text = token.lexeme(self.source)
        if len(text) > 1 and text.endswith("\""):
            return text[1:-1]
        return text[1:]

    # ------------------------------------------------------------------------------------------------------------------
    # Tokens

    def synchronize(self):
        """Discards tokens until just after a ';' or just before a token that starts a statement. Inside a block, the
        block's closing '}' is a boundary too.
        """
        while not self.is_at_end():
            if self.previous() is not None and self.previous().kind is TokenKind.SEMICOLON:
                return
            if self.peek().kind in SYNC:
                return
            if self.depth > 0 and self.check(TokenKind.RIGHT_BRACE):
                return
            self.advance()

    def skip_past(self, opening, closing):
        """Discards tokens up to and including the closing token matching an already consumed opening one."""
        level = 1
        while level > 0 and not self.is_at_end():
            kind = self.advance().kind
            if kind is opening:
                level += 1
            elif kind is closing:
                level -= 1

    @contextmanager
    def nested(self, closing=None):
        """Counts one level of nesting; raises ParseError past self.max_depth. Given the closing token kind of the
        construct just opened, the too deeply nested construct is skipped whole before raising.
        """
        if self.depth >= self.max_depth:
            error = self.error(self.previous() or self.peek(), "Too much nesting.")
            if closing is not None:
                self.skip_past(self.previous().kind, closing)
            raise error

        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def error(self, token, msg, *exprs):
        return ParseError(msg, token, self.source, list(exprs))

    def consume(self, kind, msg, *exprs):
        if self.check(kind):
            return self.advance()
        raise self.error(self.peek(), msg, *exprs)

    def match(self, kind):
        if self.check(kind):
            self.advance()
            return True
        return False

    def check(self, kind):
        return self.peek().kind is kind

    def advance(self):
        """Returns the current token and moves past it. Never moves past EOF."""
        token = self.tokens[self.cursor]
        if not self.is_at_end():
            self.cursor += 1
        return token

    def peek(self):
        return self.tokens[self.cursor]

    def previous(self):
        return self.tokens[self.cursor - 1] if self.cursor > 0 else None

    def is_at_end(self):
        return self.peek().kind is TokenKind.EOF


def parse(source, max_depth=DEFAULT_MAX_DEPTH):
    """Returns (statements, errors) for source. errors holds LexicalErrors and ParseErrors."""
    parser = Parser(source, max_depth=max_depth)
    return parser.parse(), parser.errors
