"""Semantic analysis for Wall-E programs.

Checks:
- Spawn is the first statement; labels are unique
- Integer/Boolean typing of expressions and binary operators
- Variables are assigned before they are read
- Direction arguments are integers, and literal ones lie in -1..1
- GoTo targets exist and GoTo conditions are boolean
- Called functions are known built-ins

Variable types follow program order: each assignment re-infers the type of
its target. The analyzer only reports; it never rewrites the program.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Set

from . import ast
from .parser import FUNCTION_ARITY

ARITHMETIC_OPS = {"+", "-", "*", "/", "%", "**"}
ORDERING_OPS = {">", "<", ">=", "<="}
EQUALITY_OPS = {"==", "!="}
LOGICAL_OPS = {"&&", "||"}


class SymbolType(Enum):
    INTEGER = "Integer"
    BOOLEAN = "Boolean"


class Analyzer:
    def __init__(self):
        self.errors: List[str] = []
        self.variables: Dict[str, SymbolType] = {}
        self.labels: Set[str] = set()

    def analyze(self, program: ast.Program) -> List[str]:
        statements = program.statements
        if not statements or not isinstance(statements[0], ast.Spawn):
            self._err("'Spawn' must be the first statement.")

        for stmt in statements:
            if isinstance(stmt, ast.Label):
                if stmt.name in self.labels:
                    self._err(f"Duplicate label '{stmt.name}'.")
                self.labels.add(stmt.name)

        for stmt in statements:
            self._stmt(stmt)
        return self.errors

    # --- statements ---
    def _stmt(self, node: ast.Stmt) -> None:
        if isinstance(node, ast.Spawn):
            if self._expr(node.x) is not SymbolType.INTEGER:
                self._err("Spawn X must evaluate to an integer.")
            if self._expr(node.y) is not SymbolType.INTEGER:
                self._err("Spawn Y must evaluate to an integer.")
            return
        if isinstance(node, ast.Size):
            if self._expr(node.size) is not SymbolType.INTEGER:
                self._err("Size must be an integer expression.")
            return
        if isinstance(node, ast.DrawLine):
            self._direction(node.dir_x, "DrawLine dirX")
            self._direction(node.dir_y, "DrawLine dirY")
            self._integer(node.distance, "DrawLine distance")
            return
        if isinstance(node, ast.DrawCircle):
            self._direction(node.dir_x, "DrawCircle dirX")
            self._direction(node.dir_y, "DrawCircle dirY")
            self._integer(node.radius, "DrawCircle radius")
            return
        if isinstance(node, ast.DrawRectangle):
            self._direction(node.dir_x, "DrawRectangle dirX")
            self._direction(node.dir_y, "DrawRectangle dirY")
            self._integer(node.distance, "DrawRectangle distance")
            self._integer(node.width, "DrawRectangle width")
            self._integer(node.height, "DrawRectangle height")
            return
        if isinstance(node, ast.Assign):
            self.variables[node.name] = self._expr(node.expr)
            return
        if isinstance(node, ast.GoTo):
            if node.label not in self.labels:
                self._err(f"Undefined label '{node.label}' in GoTo.")
            if self._expr(node.cond) is not SymbolType.BOOLEAN:
                self._err("GoTo condition must be boolean.")
            return
        if isinstance(node, (ast.Color, ast.Fill, ast.Label)):
            return
        self._err(f"Unhandled statement {type(node).__name__}.")

    def _direction(self, expr: ast.Expr, context: str) -> None:
        if self._expr(expr) is not SymbolType.INTEGER:
            self._err(f"{context} must be an integer expression.")
            return
        value = ast.int_literal(expr)
        if value is not None and not -1 <= value <= 1:
            self._err(f"{context} literal must be -1, 0 or 1.")

    def _integer(self, expr: ast.Expr, context: str) -> None:
        if self._expr(expr) is not SymbolType.INTEGER:
            self._err(f"{context} must be an integer expression.")

    # --- expressions ---
    def _expr(self, node: ast.Expr) -> SymbolType:
        if isinstance(node, ast.Literal):
            if isinstance(node.value, bool):
                return SymbolType.BOOLEAN
            if isinstance(node.value, str):
                self._err(f'String literal "{node.value}" cannot be used as a value.')
            return SymbolType.INTEGER
        if isinstance(node, ast.Variable):
            t = self.variables.get(node.name)
            if t is None:
                self._err(f"Undefined variable '{node.name}'.")
                return SymbolType.INTEGER
            return t
        if isinstance(node, ast.Grouping):
            return self._expr(node.inner)
        if isinstance(node, ast.Call):
            if node.name not in FUNCTION_ARITY:
                self._err(f"Unknown function '{node.name}'.")
            # Built-ins all yield integers; string arguments name colors.
            for arg in node.args:
                if isinstance(arg, ast.Literal) and isinstance(arg.value, str):
                    continue
                self._expr(arg)
            return SymbolType.INTEGER
        if isinstance(node, ast.Binary):
            return self._binary(node)
        self._err(f"Unhandled expression {type(node).__name__}.")
        return SymbolType.INTEGER

    def _binary(self, node: ast.Binary) -> SymbolType:
        lt = self._expr(node.left)
        rt = self._expr(node.right)
        op = node.op
        both_int = lt is SymbolType.INTEGER and rt is SymbolType.INTEGER
        both_bool = lt is SymbolType.BOOLEAN and rt is SymbolType.BOOLEAN
        if op in ARITHMETIC_OPS and both_int:
            return SymbolType.INTEGER
        if op in ORDERING_OPS and both_int:
            return SymbolType.BOOLEAN
        if op in EQUALITY_OPS:
            if both_int or both_bool:
                return SymbolType.BOOLEAN
            # A boolean may be compared with the literal 0 or 1.
            if lt is SymbolType.BOOLEAN and _is_bit_literal(node.right):
                return SymbolType.BOOLEAN
            if rt is SymbolType.BOOLEAN and _is_bit_literal(node.left):
                return SymbolType.BOOLEAN
        if op in LOGICAL_OPS and both_bool:
            return SymbolType.BOOLEAN
        self._err(f"Type mismatch in binary expression '{op}'.")
        return lt

    # --- error reporting ---
    def _err(self, msg: str) -> None:
        self.errors.append(f"Semantic Error: {msg}")


def _is_bit_literal(expr: ast.Expr) -> bool:
    return (
        isinstance(expr, ast.Literal)
        and type(expr.value) is int
        and expr.value in (0, 1)
    )


def analyze(program: ast.Program) -> List[str]:
    """Type-check ``program`` and return the list of semantic errors."""
    return Analyzer().analyze(program)


__all__ = ["Analyzer", "SymbolType", "analyze"]
