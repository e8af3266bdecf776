"""AST node definitions for the Wall-E drawing language.

Nodes are frozen dataclasses. ``Expr`` and ``Stmt`` are closed unions of the
node classes below; consumers dispatch over them and raise on anything else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Union


# Base node for location info
@dataclass(frozen=True, kw_only=True)
class Node:
    line: Optional[int] = None
    col: Optional[int] = None


# Expressions
@dataclass(frozen=True)
class Literal(Node):
    value: Union[int, bool, str]


@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class Binary(Node):
    left: "Expr"
    op: str
    right: "Expr"


@dataclass(frozen=True)
class Grouping(Node):
    inner: "Expr"


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: tuple = ()


Expr = Union[Literal, Variable, Binary, Grouping, Call]


# Statements
@dataclass(frozen=True)
class Spawn(Node):
    x: Expr
    y: Expr


@dataclass(frozen=True)
class Color(Node):
    name: str


@dataclass(frozen=True)
class Size(Node):
    size: Expr


@dataclass(frozen=True)
class DrawLine(Node):
    dir_x: Expr
    dir_y: Expr
    distance: Expr


@dataclass(frozen=True)
class DrawCircle(Node):
    dir_x: Expr
    dir_y: Expr
    radius: Expr


@dataclass(frozen=True)
class DrawRectangle(Node):
    dir_x: Expr
    dir_y: Expr
    distance: Expr
    width: Expr
    height: Expr


@dataclass(frozen=True)
class Fill(Node):
    pass


@dataclass(frozen=True)
class Assign(Node):
    name: str
    expr: Expr


@dataclass(frozen=True)
class Label(Node):
    name: str


@dataclass(frozen=True)
class GoTo(Node):
    label: str
    cond: Expr


Stmt = Union[
    Spawn, Color, Size, DrawLine, DrawCircle, DrawRectangle, Fill, Assign, Label, GoTo
]

DIRECTED_STATEMENTS = (DrawLine, DrawCircle, DrawRectangle)


def int_literal(expr: Expr) -> Optional[int]:
    """Value of an integer literal, including a negated one such as ``-1``."""
    if isinstance(expr, Literal) and type(expr.value) is int:
        return expr.value
    if (
        isinstance(expr, Binary)
        and expr.op == "-"
        and isinstance(expr.left, Literal)
        and type(expr.left.value) is int
        and expr.left.value == 0
    ):
        inner = int_literal(expr.right)
        if inner is not None:
            return -inner
    return None


@dataclass
class Program:
    statements: List[Stmt] = field(default_factory=list)
    labels: Mapping[str, int] = field(default_factory=dict)

    def freeze(self) -> "Program":
        """Lock the label table once parsing is done."""
        self.labels = MappingProxyType(dict(self.labels))
        return self

    def __len__(self) -> int:
        return len(self.statements)


__all__ = [
    "Node",
    "Expr",
    "Stmt",
    "Program",
    "Literal",
    "Variable",
    "Binary",
    "Grouping",
    "Call",
    "Spawn",
    "Color",
    "Size",
    "DrawLine",
    "DrawCircle",
    "DrawRectangle",
    "Fill",
    "Assign",
    "Label",
    "GoTo",
    "DIRECTED_STATEMENTS",
    "int_literal",
]
