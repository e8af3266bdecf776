"""Recursive-descent parser for the Wall-E drawing language.

One statement per line. Errors are collected rather than raised: a
``ParseError`` inside a statement is recorded and the parser resynchronizes
at the next line or statement keyword, so one bad line yields one error.
Labels may be referenced before they are declared; GoTo targets are
checked once every statement has been parsed.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from . import lexer
from .ast import (
    Assign,
    Binary,
    Call,
    Color,
    DrawCircle,
    DrawLine,
    DrawRectangle,
    Expr,
    Fill,
    GoTo,
    Grouping,
    Label,
    Literal,
    Program,
    Size,
    Spawn,
    Stmt,
    Variable,
    int_literal,
)

TK = lexer.TokenKind

# Built-in name -> required argument count.
FUNCTION_ARITY = {
    "GetActualX": 0,
    "GetActualY": 0,
    "GetCanvasSize": 0,
    "GetColorCount": 5,
    "IsBrushColor": 1,
    "IsBrushSize": 1,
    "IsCanvasColor": 3,
    "IsCanvasSize": 1,
}

STATEMENT_STARTS = frozenset(
    {
        TK.SPAWN,
        TK.COLOR,
        TK.SIZE,
        TK.DRAW_LINE,
        TK.DRAW_CIRCLE,
        TK.DRAW_RECTANGLE,
        TK.FILL,
        TK.GOTO,
        TK.IDENT,
    }
)

# Binary precedence levels, lowest first.
_OR = (TK.OR,)
_AND = (TK.AND,)
_EQUALITY = (TK.EQEQ, TK.NEQ)
_COMPARISON = (TK.GT, TK.LT, TK.GTE, TK.LTE)
_TERM = (TK.PLUS, TK.MINUS)
_FACTOR = (TK.STAR, TK.SLASH, TK.PERCENT, TK.POWER)


class ParseError(Exception):
    def __init__(self, message: str, token: Optional[lexer.Token] = None):
        super().__init__(message)
        self.token = token


class Parser:
    def __init__(self, tokens: List[lexer.Token]):
        self.tokens = tokens
        self.current = 0
        self.errors: List[str] = []
        self._has_spawn = False
        self._spawn_order_reported = False
        self._labels: Dict[str, int] = {}
        self._label_refs: List[Tuple[str, lexer.Token]] = []

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def parse(self) -> Program:
        program = Program()
        while not self._is_at_end():
            stmt = self._statement(len(program.statements))
            if stmt is None:
                continue
            if not isinstance(stmt, Spawn) and not self._has_spawn:
                if not self._spawn_order_reported:
                    self._spawn_order_reported = True
                    self.errors.append(
                        f"[Line {stmt.line}] Error: "
                        "'Spawn' must be the first executable statement"
                    )
            program.statements.append(stmt)

        if not self._has_spawn:
            self.errors.append("Missing 'Spawn(...)' instruction at the beginning.")

        for name, tok in self._label_refs:
            if name not in self._labels:
                self._error(tok, f"Undefined label '{name}'")

        program.labels = self._labels
        return program.freeze()

    # --- statements ---
    def _statement(self, index: int) -> Optional[Stmt]:
        try:
            if self._match_kind(TK.NEWLINE):
                return None
            if self._match_kind(TK.SPAWN):
                return self._spawn()
            if self._match_kind(TK.COLOR):
                return self._color()
            if self._match_kind(TK.SIZE):
                return self._size()
            if self._match_kind(TK.DRAW_LINE):
                return self._draw_line()
            if self._match_kind(TK.DRAW_CIRCLE):
                return self._draw_circle()
            if self._match_kind(TK.DRAW_RECTANGLE):
                return self._draw_rectangle()
            if self._match_kind(TK.FILL):
                return self._fill()
            if self._check_kind(TK.IDENT) and self._peek_next().kind in (
                TK.NEWLINE,
                TK.EOF,
            ):
                return self._label(index)
            if self._check_kind(TK.IDENT) and self._peek_next().kind == TK.ASSIGN:
                return self._assign()
            if self._match_kind(TK.GOTO):
                return self._goto()
            raise ParseError("Expected a statement, assignment or label.")
        except ParseError as e:
            self._error(e.token or self._peek(), str(e))
            self._synchronize()
        return None

    def _spawn(self) -> Spawn:
        tok = self._previous()
        if self._has_spawn:
            raise ParseError("Only one 'Spawn' allowed.")
        self._has_spawn = True
        x, y = self._arguments("Spawn", 2)
        self._end_of_statement("Spawn")
        return Spawn(x, y, line=tok.line, col=tok.col)

    def _color(self) -> Color:
        tok = self._previous()
        self._consume(TK.LPAREN, "Expected '(' after Color.")
        if self._match_kind(TK.STRING) or self._match_kind(TK.IDENT):
            name = self._previous().literal
        else:
            raise ParseError(
                "Expected color name as string or identifier for Color."
            )
        self._consume(TK.RPAREN, "Expected ')' after Color argument.")
        self._end_of_statement("Color")
        return Color(name, line=tok.line, col=tok.col)

    def _size(self) -> Size:
        tok = self._previous()
        (size,) = self._arguments("Size", 1)
        self._end_of_statement("Size")
        return Size(size, line=tok.line, col=tok.col)

    def _draw_line(self) -> DrawLine:
        tok = self._previous()
        dir_x, dir_y, distance = self._arguments("DrawLine", 3, directed=True)
        self._end_of_statement("DrawLine")
        return DrawLine(dir_x, dir_y, distance, line=tok.line, col=tok.col)

    def _draw_circle(self) -> DrawCircle:
        tok = self._previous()
        dir_x, dir_y, radius = self._arguments("DrawCircle", 3, directed=True)
        self._end_of_statement("DrawCircle")
        return DrawCircle(dir_x, dir_y, radius, line=tok.line, col=tok.col)

    def _draw_rectangle(self) -> DrawRectangle:
        tok = self._previous()
        args = self._arguments("DrawRectangle", 5, directed=True)
        self._end_of_statement("DrawRectangle")
        return DrawRectangle(*args, line=tok.line, col=tok.col)

    def _fill(self) -> Fill:
        tok = self._previous()
        self._arguments("Fill", 0)
        self._end_of_statement("Fill")
        return Fill(line=tok.line, col=tok.col)

    def _label(self, index: int) -> Label:
        tok = self._advance()
        name = tok.literal
        if name in self._labels:
            self._error(tok, f"Duplicate label '{name}'")
        else:
            self._labels[name] = index
        self._end_of_statement("label")
        return Label(name, line=tok.line, col=tok.col)

    def _assign(self) -> Assign:
        name_tok = self._advance()
        self._consume(TK.ASSIGN, "Expected '<-' after variable name.")
        expr = self._expression()
        self._end_of_statement("<-")
        return Assign(name_tok.literal, expr, line=name_tok.line, col=name_tok.col)

    def _goto(self) -> GoTo:
        tok = self._previous()
        self._consume(TK.LBRACKET, "Expected '[' after GoTo.")
        label_tok = self._consume(TK.IDENT, "Expected label inside GoTo brackets.")
        self._consume(TK.RBRACKET, "Expected ']' after label.")
        self._label_refs.append((label_tok.literal, label_tok))
        self._consume(TK.LPAREN, "Expected '(' after GoTo label.")
        cond = self._expression()
        self._consume(TK.RPAREN, "Expected ')' after GoTo condition.")
        self._end_of_statement("GoTo")
        return GoTo(label_tok.literal, cond, line=tok.line, col=tok.col)

    def _arguments(
        self, keyword: str, count: int, directed: bool = False
    ) -> List[Expr]:
        """Parse ``( e1, ..., eN )`` for a statement with a fixed arity.

        For draw statements the first two arguments are directions and a
        literal direction must be -1, 0 or 1.
        """
        self._consume(TK.LPAREN, f"Expected '(' after {keyword}.")
        args: List[Expr] = []
        for i in range(count):
            if i > 0:
                self._consume(TK.COMMA, f"Expected ',' between {keyword} arguments.")
            start = self._peek()
            expr = self._expression()
            if directed and i < 2:
                field = "dirX" if i == 0 else "dirY"
                self._restrict_to_direction(expr, field, start)
            args.append(expr)
        if self._check_kind(TK.COMMA):
            raise ParseError(f"{keyword} takes exactly {count} arguments.")
        self._consume(TK.RPAREN, f"Expected ')' after {keyword} arguments.")
        return args

    def _end_of_statement(self, keyword: str) -> None:
        if self._match_kind(TK.NEWLINE) or self._is_at_end():
            return
        self._error(self._peek(), f"Expected end of line after {keyword}.")
        while not self._is_at_end() and not self._match_kind(TK.NEWLINE):
            self._advance()

    def _restrict_to_direction(
        self, expr: Expr, field: str, start: lexer.Token
    ) -> None:
        value = int_literal(expr)
        if value is not None and value not in (-1, 0, 1):
            raise ParseError(f"{field} must be -1, 0 or 1.", start)

    # --- expressions ---
    def _expression(self) -> Expr:
        return self._or_expr()

    def _binary(self, operand, ops) -> Expr:
        expr = operand()
        while self._match_any(ops):
            op_tok = self._previous()
            right = operand()
            expr = Binary(expr, op_tok.lexeme, right, line=op_tok.line, col=op_tok.col)
        return expr

    def _or_expr(self) -> Expr:
        return self._binary(self._and_expr, _OR)

    def _and_expr(self) -> Expr:
        return self._binary(self._equality, _AND)

    def _equality(self) -> Expr:
        return self._binary(self._comparison, _EQUALITY)

    def _comparison(self) -> Expr:
        return self._binary(self._term, _COMPARISON)

    def _term(self) -> Expr:
        return self._binary(self._factor, _TERM)

    def _factor(self) -> Expr:
        return self._binary(self._unary, _FACTOR)

    def _unary(self) -> Expr:
        if self._match_kind(TK.MINUS):
            op_tok = self._previous()
            right = self._unary()
            zero = Literal(0, line=op_tok.line, col=op_tok.col)
            return Binary(zero, "-", right, line=op_tok.line, col=op_tok.col)
        return self._primary()

    def _primary(self) -> Expr:
        if self._match_kind(TK.IDENT) or self._match_any(lexer.FUNCTION_KINDS):
            tok = self._previous()
            name = tok.lexeme
            if self._match_kind(TK.LPAREN):
                return self._call(tok, name)
            return Variable(name, line=tok.line, col=tok.col)
        if (
            self._match_kind(TK.TRUE)
            or self._match_kind(TK.FALSE)
            or self._match_kind(TK.NUMBER)
            or self._match_kind(TK.STRING)
        ):
            tok = self._previous()
            return Literal(tok.literal, line=tok.line, col=tok.col)
        if self._match_kind(TK.LPAREN):
            tok = self._previous()
            expr = self._expression()
            self._consume(TK.RPAREN, "Expected ')' after expression.")
            return Grouping(expr, line=tok.line, col=tok.col)
        raise ParseError(f"Unexpected token '{self._peek().lexeme}'.")

    def _call(self, name_tok: lexer.Token, name: str) -> Call:
        args: List[Expr] = []
        if not self._check_kind(TK.RPAREN):
            while True:
                args.append(self._expression())
                if not self._match_kind(TK.COMMA):
                    break
        close = self._consume(TK.RPAREN, "Expected ')' after function arguments.")
        expected = FUNCTION_ARITY.get(name)
        if expected is None:
            self._error(name_tok, f"Unknown function '{name}'")
        elif len(args) != expected:
            if expected == 0:
                self._error(close, f"Function '{name}' does not take arguments")
            else:
                plural = "argument" if expected == 1 else "arguments"
                self._error(close, f"Function '{name}' requires {expected} {plural}")
        return Call(name, tuple(args), line=name_tok.line, col=name_tok.col)

    # --- helpers ---
    def _error(self, tok: lexer.Token, msg: str) -> None:
        text = tok.lexeme.replace("\n", "\\n")
        self.errors.append(f"[Line {tok.line}] Error at '{text}': {msg}")

    def _synchronize(self) -> None:
        self._advance()
        while not self._is_at_end():
            if self._previous().kind == TK.NEWLINE:
                return
            if self._peek().kind in STATEMENT_STARTS:
                return
            self._advance()

    def _match_kind(self, kind: lexer.TokenKind) -> bool:
        if self._check_kind(kind):
            self._advance()
            return True
        return False

    def _match_any(self, kinds) -> bool:
        for kind in kinds:
            if self._match_kind(kind):
                return True
        return False

    def _consume(self, kind: lexer.TokenKind, msg: str) -> lexer.Token:
        if self._check_kind(kind):
            return self._advance()
        raise ParseError(msg)

    def _check_kind(self, kind: lexer.TokenKind) -> bool:
        if self._is_at_end():
            return False
        return self._peek().kind == kind

    def _advance(self) -> lexer.Token:
        if not self._is_at_end():
            self.current += 1
        return self.tokens[self.current - 1]

    def _peek(self) -> lexer.Token:
        return self.tokens[self.current]

    def _peek_next(self) -> lexer.Token:
        if self.current + 1 >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.current + 1]

    def _previous(self) -> lexer.Token:
        return self.tokens[self.current - 1]

    def _is_at_end(self) -> bool:
        return self._peek().kind == TK.EOF


def parse(tokens: List[lexer.Token]) -> Tuple[Program, List[str]]:
    """Parse ``tokens`` and return ``(program, errors)``."""
    parser = Parser(tokens)
    program = parser.parse()
    return program, list(parser.errors)


__all__ = ["Parser", "ParseError", "FUNCTION_ARITY", "parse"]
