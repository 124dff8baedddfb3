"""Abstract syntax tree for rox. Nodes are immutable and strictly hierarchical: each composite node owns its children.

Grammar (expressions, lowest precedence first):

```
<expression> ::= <assignment>
<assignment> ::= IDENTIFIER "=" <assignment> | <logic_or>     ; right-associative
<logic_or>   ::= <logic_and> ( "or" <logic_and> )*
<logic_and>  ::= <equality> ( "and" <equality> )*
<equality>   ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison> ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>       ::= <factor> ( ( "+" | "-" ) <factor> )*
<factor>     ::= <unary> ( ( "*" | "/" ) <unary> )*
<unary>      ::= ( "!" | "-" ) <unary> | <primary>
<primary>    ::= NUMBER | STRING | "true" | "false" | "nil" | IDENTIFIER | "(" <expression> ")"
```

Statements:

```
<program>     ::= <declaration>* EOF
<declaration> ::= "let" IDENTIFIER ( "=" <expression> )? ";" | <statement>
<statement>   ::= <block> | "print" <expression> ";" | "if" "(" <expression> ")" <statement> ( "else" <statement> )?
                | <expression> ";"
<block>       ::= "{" <declaration>* "}"
```

All binary layers associate by left: 10 / 2 * 5 = ((10 / 2) * 5).
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple


class BinaryOperator(enum.Enum):
    MINUS = "-"
    PLUS = "+"
    SLASH = "/"
    STAR = "*"
    EQUAL_EQUAL = "=="
    NOT_EQUAL = "!="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="


class UnaryOperator(enum.Enum):
    NOT = "!"
    MINUS = "-"


class LogicalOperator(enum.Enum):
    AND = "and"
    OR = "or"


def _format_number(value):
    return str(int(value)) if value.is_integer() else repr(value)


class Node(ABC):
    """Superclass of every AST node."""

    @abstractmethod
    def display(self):
        """Parenthesized prefix rendering of this node, e.g. '(* (/ 10 2) 5)'."""

    def __str__(self):
        return self.display()


class Expr(Node):
    """An expression: evaluates to exactly one value."""


class Stmt(Node):
    """A statement: executed for its effect."""


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    op: BinaryOperator
    right: Expr

    def display(self):
        return f"({self.op.value} {self.left.display()} {self.right.display()})"


@dataclass(frozen=True)
class Unary(Expr):
    op: UnaryOperator
    operand: Expr

    def display(self):
        return f"({self.op.value} {self.operand.display()})"


@dataclass(frozen=True)
class Number(Expr):
    value: float

    def display(self):
        return _format_number(self.value)


@dataclass(frozen=True)
class Boolean(Expr):
    value: bool

    def display(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Nil(Expr):

    def display(self):
        return "nil"


@dataclass(frozen=True)
class String(Expr):
    value: str

    def display(self):
        return f"\"{self.value}\""


@dataclass(frozen=True)
class Variable(Expr):
    name: str

    def display(self):
        return self.name


@dataclass(frozen=True)
class Assignment(Expr):
    name: str
    value: Expr

    def display(self):
        return f"(= {self.name} {self.value.display()})"


@dataclass(frozen=True)
class Logical(Expr):
    """Short-circuiting and/or."""
    left: Expr
    op: LogicalOperator
    right: Expr

    def display(self):
        return f"({self.op.value} {self.left.display()} {self.right.display()})"


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]

    def display(self):
        return "(block" + "".join(" " + stmt.display() for stmt in self.statements) + ")"


@dataclass(frozen=True)
class Expression(Stmt):
    """Expression statement: the value is discarded."""
    expression: Expr

    def display(self):
        return f"(; {self.expression.display()})"


@dataclass(frozen=True)
class Let(Stmt):
    name: str
    initializer: Optional[Expr] = None

    def display(self):
        if self.initializer is None:
            return f"(let {self.name})"
        return f"(let {self.name} {self.initializer.display()})"


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr

    def display(self):
        return f"(print {self.expression.display()})"


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None

    def display(self):
        result = f"(if {self.condition.display()} {self.then_branch.display()}"
        if self.else_branch is not None:
            result += f" {self.else_branch.display()}"
        return result + ")"
