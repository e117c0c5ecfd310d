"""AST node types for the pplcore language.

Nodes are frozen dataclasses so a parsed program can be shared across any
number of interpreter runs without being mutated.
"""

from dataclasses import dataclass
from typing import Tuple, Union


class Node:
    """Base class for all AST nodes."""

    is_error = False


@dataclass(frozen=True)
class NumberLiteral(Node):
    value: float

    def __str__(self) -> str:
        return f"NumberLiteral({self.value:g})"


@dataclass(frozen=True)
class Variable(Node):
    name: str

    def __str__(self) -> str:
        return f"Variable({self.name})"


@dataclass(frozen=True)
class BinaryExpression(Node):
    op: str
    left: "Expression"
    right: "Expression"

    def __str__(self) -> str:
        return f"BinaryExpression({self.op!r}, {self.left}, {self.right})"


@dataclass(frozen=True)
class FunctionCall(Node):
    """A call such as `normal(0, 1)`. `sample` and `observe` are calls too."""

    name: str
    args: Tuple["Expression", ...] = ()

    def __str__(self) -> str:
        return f"FunctionCall({self.name}, [{', '.join(str(a) for a in self.args)}])"


@dataclass(frozen=True)
class Assignment(Node):
    name: str
    expr: "Expression"

    def __str__(self) -> str:
        return f"Assignment({self.name}, {self.expr})"


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple["Statement", ...] = ()

    def __str__(self) -> str:
        return f"Program([{', '.join(str(s) for s in self.statements)}])"


@dataclass(frozen=True)
class Error(Node):
    """
    Returned by `parse()` in place of a Program when the tokens are malformed.

    `position` is the source offset of the offending token, or -1 if unknown.
    """

    message: str
    position: int = -1

    is_error = True

    def __str__(self) -> str:
        return f"Error({self.message})"


Expression = Union[NumberLiteral, Variable, BinaryExpression, FunctionCall]
Statement = Union[Assignment, FunctionCall]
