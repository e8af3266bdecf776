"""Interpreter.

Executes a parsed Wall-E program against an N x N canvas.

1. Execution Model
Statements live in one flat list. A program counter walks that list; a
taken ``GoTo`` sets the counter to ``label_index - 1`` and the loop's
unconditional ``+1`` lands on the label itself (a no-op statement). The run
ends when the counter reaches the end of the list. Nothing bounds the number
of steps unless the caller passes ``max_steps``.

2. State
The cursor, brush (size and color), variables and canvas are owned by one
``Interpreter`` and mutated only while ``execute()`` runs. Canvas cells hold
color codes from a ``ColorTable``; 0 is blank.

3. Expression Evaluation
Every expression evaluates to an ``int``. Booleans are 0/1 and any nonzero
value counts as true. Division truncates toward zero and ``%`` keeps the
sign of the dividend.

4. Error Handling
Runtime faults (spawn off the canvas, a non-positive brush size, division by
zero, undefined variables or labels, unknown functions) raise
``InterpreterError`` and stop the run. Whatever was painted before the fault
stays on the canvas.
"""

from __future__ import annotations

import math
from collections import deque
from typing import Dict, List, Optional, Tuple

from . import ast
from .colors import BLANK, ColorTable
from .parser import FUNCTION_ARITY

DEFAULT_BRUSH_COLOR = "Transparent"
CIRCLE_SAMPLES = 360
NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class InterpreterError(Exception):
    """
    Fatal runtime error.
    """

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"Line {line}: {message}"
        super().__init__(message)


class StepLimitExceeded(InterpreterError):
    """
    Raised when a run goes past the step budget given to ``execute``.
    """


class Interpreter:
    """Tree-walk interpreter for Wall-E programs."""

    def __init__(self, program: ast.Program, canvas_size: int):
        statements = program.statements
        if not statements or not isinstance(statements[0], ast.Spawn):
            raise InterpreterError("Missing initial Spawn.")
        if canvas_size <= 0:
            raise InterpreterError(f"Canvas size must be positive, got {canvas_size}.")

        self.program = program
        self.canvas_size = canvas_size
        self.canvas: List[List[int]] = [
            [BLANK] * canvas_size for _ in range(canvas_size)
        ]
        self.colors = ColorTable()
        self.variables: Dict[str, int] = {}
        self.x = 0
        self.y = 0
        self.brush_size = 1
        self.brush_color = DEFAULT_BRUSH_COLOR
        self._brush_code = self.colors.code(self.brush_color)
        self.pc = 0
        self.steps = 0
        self._line: Optional[int] = None

        labels: Dict[str, int] = {}
        for index, stmt in enumerate(statements):
            if isinstance(stmt, ast.Label):
                labels.setdefault(stmt.name, index)
        self.labels = labels

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, max_steps: Optional[int] = None) -> None:
        """
        Run the program to completion.

        Args:
            max_steps: Optional budget of executed statements. ``None`` runs
                without a bound, so a program that loops forever never returns.

        Raises:
            InterpreterError: On the first runtime fault.
            StepLimitExceeded: If the budget is spent before the program ends.
        """
        statements = self.program.statements
        self.pc = 0
        self.steps = 0
        while self.pc < len(statements):
            if max_steps is not None and self.steps >= max_steps:
                raise StepLimitExceeded(
                    f"Step limit of {max_steps} exceeded.", self._line
                )
            stmt = statements[self.pc]
            self._line = stmt.line
            self._step(stmt)
            self.pc += 1
            self.steps += 1

    def _step(self, stmt: ast.Stmt) -> None:
        if isinstance(stmt, ast.Spawn):
            x = self.eval_expr(stmt.x)
            y = self.eval_expr(stmt.y)
            if not self.in_bounds(x, y):
                raise self._error(f"Spawn coordinates ({x}, {y}) out of canvas bounds.")
            self.x, self.y = x, y
            return
        if isinstance(stmt, ast.Color):
            self.brush_color = stmt.name
            self._brush_code = self.colors.code(stmt.name)
            return
        if isinstance(stmt, ast.Size):
            size = self.eval_expr(stmt.size)
            if size <= 0:
                raise self._error("Brush size must be greater than 0.")
            self.brush_size = size - 1 if size % 2 == 0 else size
            return
        if isinstance(stmt, ast.DrawLine):
            self._draw_line(stmt)
            return
        if isinstance(stmt, ast.DrawCircle):
            self._draw_circle(stmt)
            return
        if isinstance(stmt, ast.DrawRectangle):
            self._draw_rectangle(stmt)
            return
        if isinstance(stmt, ast.Fill):
            self._fill()
            return
        if isinstance(stmt, ast.Assign):
            self.variables[stmt.name] = self.eval_expr(stmt.expr)
            return
        if isinstance(stmt, ast.GoTo):
            if self.eval_expr(stmt.cond) != 0:
                target = self.labels.get(stmt.label)
                if target is None:
                    raise self._error(f"Undefined label: {stmt.label}")
                self.pc = target - 1
            return
        if isinstance(stmt, ast.Label):
            return
        raise self._error(f"Unknown statement type: {type(stmt).__name__}")

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _draw_line(self, stmt: ast.DrawLine) -> None:
        dx = self.eval_expr(stmt.dir_x)
        dy = self.eval_expr(stmt.dir_y)
        steps = self.eval_expr(stmt.distance)
        self.paint(self.x, self.y)
        for _ in range(steps):
            self.x += dx
            self.y += dy
            self.paint(self.x, self.y)

    def _draw_circle(self, stmt: ast.DrawCircle) -> None:
        dx = self.eval_expr(stmt.dir_x)
        dy = self.eval_expr(stmt.dir_y)
        radius = self.eval_expr(stmt.radius)
        cx = self.x + dx * radius
        cy = self.y + dy * radius
        for angle in range(CIRCLE_SAMPLES):
            rad = math.radians(angle)
            self.paint(
                cx + int(radius * math.cos(rad)), cy + int(radius * math.sin(rad))
            )

    def _draw_rectangle(self, stmt: ast.DrawRectangle) -> None:
        dx = self.eval_expr(stmt.dir_x)
        dy = self.eval_expr(stmt.dir_y)
        distance = self.eval_expr(stmt.distance)
        width = self.eval_expr(stmt.width)
        height = self.eval_expr(stmt.height)
        base_x = self.x + dx * distance
        base_y = self.y + dy * distance
        for i in range(width):
            for j in range(height):
                self.paint(base_x + i, base_y + j)

    def _fill(self) -> None:
        if not self.in_bounds(self.x, self.y):
            raise self._error(f"Cursor ({self.x}, {self.y}) is outside the canvas.")
        target = self.canvas[self.y][self.x]
        replacement = self._brush_code
        if target == replacement:
            return
        self.canvas[self.y][self.x] = replacement
        queue = deque([(self.x, self.y)])
        while queue:
            cx, cy = queue.popleft()
            for dx, dy in NEIGHBOURS:
                nx, ny = cx + dx, cy + dy
                if self.in_bounds(nx, ny) and self.canvas[ny][nx] == target:
                    self.canvas[ny][nx] = replacement
                    queue.append((nx, ny))

    def paint(self, cx: int, cy: int) -> None:
        """Color the brush-sized square around ``(cx, cy)``, clipped to the canvas."""
        r = self.brush_size // 2
        for dx in range(-r, r + 1):
            for dy in range(-r, r + 1):
                nx, ny = cx + dx, cy + dy
                if self.in_bounds(nx, ny):
                    self.canvas[ny][nx] = self._brush_code

    # ------------------------------------------------------------------
    # Expression evaluation
    # ------------------------------------------------------------------

    def eval_expr(self, node: ast.Expr) -> int:
        """
        Evaluate an expression node to an integer.

        Raises:
            InterpreterError: For undefined variables, division by zero and
                values that are not numbers.
        """
        if isinstance(node, ast.Literal):
            if isinstance(node.value, bool):
                return 1 if node.value else 0
            if isinstance(node.value, int):
                return node.value
            raise self._error(f'String "{node.value}" is not a number.')
        if isinstance(node, ast.Variable):
            if node.name not in self.variables:
                raise self._error(f"Undefined variable {node.name}")
            return self.variables[node.name]
        if isinstance(node, ast.Grouping):
            return self.eval_expr(node.inner)
        if isinstance(node, ast.Binary):
            return self._eval_binary(node)
        if isinstance(node, ast.Call):
            return self._eval_call(node)
        raise self._error(f"Unsupported expression type: {type(node).__name__}")

    def _eval_binary(self, node: ast.Binary) -> int:
        left = self.eval_expr(node.left)
        right = self.eval_expr(node.right)
        op = node.op
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if op == "/":
            if right == 0:
                raise self._error("Division by zero.")
            return _trunc_div(left, right)
        if op == "%":
            if right == 0:
                raise self._error("Modulo by zero.")
            return left - right * _trunc_div(left, right)
        if op == "**":
            try:
                result = math.pow(left, right)
            except (OverflowError, ValueError):
                raise self._error(f"Cannot compute {left} ** {right}.") from None
            if not math.isfinite(result):
                raise self._error(f"Cannot compute {left} ** {right}.")
            return int(result)
        if op == "==":
            return int(left == right)
        if op == "!=":
            return int(left != right)
        if op == ">":
            return int(left > right)
        if op == "<":
            return int(left < right)
        if op == ">=":
            return int(left >= right)
        if op == "<=":
            return int(left <= right)
        if op == "&&":
            return int(left != 0 and right != 0)
        if op == "||":
            return int(left != 0 or right != 0)
        raise self._error(f"Unsupported binary operator {op}")

    def _eval_call(self, node: ast.Call) -> int:
        name = node.name
        args = node.args
        expected = FUNCTION_ARITY.get(name)
        if expected is None:
            raise self._error(f"Unknown function {name}")
        if len(args) != expected:
            raise self._error(f"Function '{name}' expects {expected} arguments.")

        if name == "GetActualX":
            return self.x
        if name == "GetActualY":
            return self.y
        if name == "GetCanvasSize":
            return self.canvas_size
        if name == "IsCanvasSize":
            return int(self.eval_expr(args[0]) == self.canvas_size)
        if name == "IsBrushColor":
            return int(self.brush_color == _color_name(args[0]))
        if name == "IsBrushSize":
            return int(self.brush_size == self.eval_expr(args[0]))
        if name == "GetColorCount":
            code = self.colors.lookup(_color_name(args[0]))
            x1, y1, x2, y2 = (self.eval_expr(a) for a in args[1:])
            return self._color_count(code, x1, y1, x2, y2)
        if name == "IsCanvasColor":
            code = self.colors.lookup(_color_name(args[0]))
            vertical = self.eval_expr(args[1])
            horizontal = self.eval_expr(args[2])
            tx, ty = self.x + horizontal, self.y + vertical
            if code is None or not self.in_bounds(tx, ty):
                return 0
            return int(self.canvas[ty][tx] == code)
        raise self._error(f"Unknown function {name}")

    def _color_count(
        self, code: Optional[int], x1: int, y1: int, x2: int, y2: int
    ) -> int:
        min_x, max_x = min(x1, x2), max(x1, x2)
        min_y, max_y = min(y1, y2), max(y1, y2)
        if not (self.in_bounds(min_x, min_y) and self.in_bounds(max_x, max_y)):
            return 0
        if code is None:
            return 0
        return sum(
            1
            for row in self.canvas[min_y : max_y + 1]
            for cell in row[min_x : max_x + 1]
            if cell == code
        )

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> Tuple[int, int]:
        return self.x, self.y

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.canvas_size and 0 <= y < self.canvas_size

    def cell(self, x: int, y: int) -> int:
        return self.canvas[y][x]

    def cell_color(self, x: int, y: int) -> Optional[str]:
        """Color name painted at ``(x, y)``, or ``None`` for a blank cell."""
        return self.colors.name(self.canvas[y][x])

    def painted_cells(self) -> List[Tuple[int, int]]:
        return [
            (x, y)
            for y, row in enumerate(self.canvas)
            for x, cell in enumerate(row)
            if cell != BLANK
        ]

    def render(self, blank: str = ".", ink: str = "#") -> str:
        return "\n".join(
            "".join(blank if cell == BLANK else ink for cell in row)
            for row in self.canvas
        )

    def _error(self, message: str) -> InterpreterError:
        return InterpreterError(message, self._line)


def _trunc_div(left: int, right: int) -> int:
    q = abs(left) // abs(right)
    return q if (left >= 0) == (right >= 0) else -q


def _color_name(expr: ast.Expr) -> str:
    if isinstance(expr, ast.Literal) and isinstance(expr.value, str):
        return expr.value
    return ""


__all__ = ["Interpreter", "InterpreterError", "StepLimitExceeded"]
