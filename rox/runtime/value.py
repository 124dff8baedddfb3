"""Runtime values of rox and the semantics of its operators. Operators are implemented as explicit dispatch functions
taking an operator tag and values, raising RoxTypeError when the operand kinds do not fit:

| operator          | operands                              | result                        |
|-------------------|---------------------------------------|-------------------------------|
| - * /             | Num, Num                              | Num (IEEE: 1 / 0 = inf)       |
| +                 | Num, Num or String, String            | Num or concatenated String    |
| < <= > >=         | two values of the same kind           | Bool                          |
| == !=             | anything                              | Bool (structural, never fails)|
| unary !           | Bool                                  | Bool                          |
| unary -           | Num                                   | Num                           |

Truthiness is strict: only Bool values can be conditions.
"""

import math
import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass

from rox.lang.ast import BinaryOperator, UnaryOperator
from rox.lang.error import RoxTypeError


class Value(ABC):
    """Superclass of every runtime value."""
    kind = "value"

    @abstractmethod
    def __str__(self):
        """Rendering used by print."""


@dataclass(frozen=True)
class Num(Value):
    value: float
    kind = "number"

    def __str__(self):
        if math.isnan(self.value):
            return "NaN"
        if math.isinf(self.value):
            return "inf" if self.value > 0 else "-inf"
        if self.value.is_integer():
            return str(int(self.value))
        return repr(self.value)


@dataclass(frozen=True)
class Bool(Value):
    value: bool
    kind = "boolean"

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Nil(Value):
    kind = "nil"

    def __str__(self):
        return "nil"


@dataclass(frozen=True)
class String(Value):
    value: str
    kind = "string"

    def __str__(self):
        return self.value


ARITHMETIC = {
    BinaryOperator.MINUS: operator.sub,
    BinaryOperator.STAR: operator.mul,
}

ORDERING = {
    BinaryOperator.GREATER: operator.gt,
    BinaryOperator.GREATER_EQUAL: operator.ge,
    BinaryOperator.LESS: operator.lt,
    BinaryOperator.LESS_EQUAL: operator.le,
}


def equals(left, right):
    """Structural equality: kinds and contents must match. NaN is unequal to itself, as with floats."""
    if type(left) is not type(right):
        return False
    if isinstance(left, Nil):
        return True
    return left.value == right.value


def divide(left, right):
    try:
        return left / right
    except ZeroDivisionError:
        if math.isnan(left) or left == 0:
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1, right)


def _type_error(op, left, right, expected):
    return RoxTypeError("Operands of '{}' must be " + expected + ", got {} and {}.", [op.value, left.kind, right.kind])


def binary(op, left, right):
    """Applies BinaryOperator op to two Values. Raises RoxTypeError if the operand kinds are not supported by op."""
    if op is BinaryOperator.EQUAL_EQUAL:
        return Bool(equals(left, right))
    if op is BinaryOperator.NOT_EQUAL:
        return Bool(not equals(left, right))

    if op in ORDERING:
        if type(left) is not type(right):
            raise _type_error(op, left, right, "of the same kind")
        if isinstance(left, Nil):
            return Bool(op in (BinaryOperator.GREATER_EQUAL, BinaryOperator.LESS_EQUAL))
        return Bool(ORDERING[op](left.value, right.value))

    if op is BinaryOperator.PLUS and isinstance(left, String) and isinstance(right, String):
        return String(left.value + right.value)

    if not (isinstance(left, Num) and isinstance(right, Num)):
        expected = "two numbers or two strings" if op is BinaryOperator.PLUS else "numbers"
        raise _type_error(op, left, right, expected)

    if op is BinaryOperator.PLUS:
        return Num(left.value + right.value)
    if op is BinaryOperator.SLASH:
        return Num(divide(left.value, right.value))
    return Num(ARITHMETIC[op](left.value, right.value))


def unary(op, operand):
    """Applies UnaryOperator op. '!' needs a Bool, '-' needs a Num."""
    if op is UnaryOperator.NOT:
        if not isinstance(operand, Bool):
            raise RoxTypeError("Operand of '{}' must be a boolean, got {}.", [op.value, operand.kind])
        return Bool(not operand.value)

    if not isinstance(operand, Num):
        raise RoxTypeError("Operand of '{}' must be a number, got {}.", [op.value, operand.kind])
    return Num(-operand.value)


def is_truthy(value, context):
    """Returns the bool held by value. context names the construct asking (e.g. "'if' condition") for the error."""
    if not isinstance(value, Bool):
        raise RoxTypeError("{} must be a boolean, got {}.", [context, value.kind])
    return value.value
