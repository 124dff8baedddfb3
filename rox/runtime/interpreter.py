"""Tree-walking evaluator for rox. Executes statements against one Environment and evaluates expressions to Values.

A runtime error aborts only the top-level statement it occurred in: interpret reports it and moves on to the next
statement. Scopes opened by blocks are always closed, including when a statement inside the block fails.
"""

import sys

from rox.lang import ast
from rox.lang.ast import LogicalOperator
from rox.lang.error import RoxRuntimeError
from rox.runtime import value
from rox.runtime.environment import Environment
from rox.runtime.value import Bool, Nil, Num, String


class Interpreter:
    """Holds the Environment of one program run. stdout is the stream print statements write to."""

    def __init__(self, stdout=None, environment=None):
        self.stdout = stdout
        self.environment = environment if environment is not None else Environment()

    def interpret(self, statements, reporter=None):
        """Executes statements in order. Returns the list of RoxRuntimeErrors raised, each of which stopped only its
        own statement. reporter, if given, is called with every error as soon as it happens.
        """
        errors = []
        for stmt in statements:
            error = None
            try:
                self.execute(stmt)
            except RoxRuntimeError as exc:
                error = exc
            except RecursionError:
                error = RoxRuntimeError("maximum recursion depth exceeded")

            if error is not None:
                errors.append(error)
                if reporter is not None:
                    reporter(error)
        return errors

    def execute(self, stmt):
        if isinstance(stmt, ast.Expression):
            self.evaluate(stmt.expression)

        elif isinstance(stmt, ast.Print):
            result = self.evaluate(stmt.expression)
            print(result, file=self.stdout if self.stdout is not None else sys.stdout)

        elif isinstance(stmt, ast.Let):
            initial = None if stmt.initializer is None else self.evaluate(stmt.initializer)
            self.environment.define(stmt.name, initial)

        elif isinstance(stmt, ast.Block):
            with self.environment.scope():
                for inner in stmt.statements:
                    self.execute(inner)

        elif isinstance(stmt, ast.If):
            if value.is_truthy(self.evaluate(stmt.condition), "'if' condition"):
                self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                self.execute(stmt.else_branch)

        else:
            raise TypeError(f"not a statement: {stmt!r}")

    def evaluate(self, expr):
        """Returns the Value of expr."""
        if isinstance(expr, ast.Number):
            return Num(expr.value)
        if isinstance(expr, ast.String):
            return String(expr.value)
        if isinstance(expr, ast.Boolean):
            return Bool(expr.value)
        if isinstance(expr, ast.Nil):
            return Nil()

        if isinstance(expr, ast.Variable):
            return self.environment.get(expr.name)

        if isinstance(expr, ast.Assignment):
            return self.environment.assign(expr.name, self.evaluate(expr.value))

        if isinstance(expr, ast.Logical):
            return self.logical(expr)

        if isinstance(expr, ast.Unary):
            return value.unary(expr.op, self.evaluate(expr.operand))

        if isinstance(expr, ast.Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return value.binary(expr.op, left, right)

        raise TypeError(f"not an expression: {expr!r}")

    def logical(self, expr):
        """'and' stops at false, 'or' stops at true. The left operand must be a boolean; the right one is returned
        as is.
        """
        left = self.evaluate(expr.left)
        truthy = value.is_truthy(left, f"Left operand of '{expr.op.value}'")

        if truthy == (expr.op is LogicalOperator.OR):
            return left
        return self.evaluate(expr.right)
