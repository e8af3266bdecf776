"""
Wall-E language lexer.

Turns source text into tokens. Newlines are significant (they end
statements) so they are emitted as NEWLINE tokens instead of being skipped.
Bad characters are recorded in ``errors`` and scanning carries on, so the
token list always ends with exactly one EOF token.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Tuple, Union


class TokenKind(Enum):
    # Instructions
    SPAWN = auto()
    COLOR = auto()
    SIZE = auto()
    DRAW_LINE = auto()
    DRAW_CIRCLE = auto()
    DRAW_RECTANGLE = auto()
    FILL = auto()
    GOTO = auto()

    # Built-in functions
    GET_ACTUAL_X = auto()
    GET_ACTUAL_Y = auto()
    GET_CANVAS_SIZE = auto()
    GET_COLOR_COUNT = auto()
    IS_BRUSH_COLOR = auto()
    IS_BRUSH_SIZE = auto()
    IS_CANVAS_COLOR = auto()
    IS_CANVAS_SIZE = auto()

    # Literals / identifiers
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()
    TRUE = auto()
    FALSE = auto()

    # Single / multi-char operators
    ASSIGN = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    POWER = auto()
    EQ = auto()
    EQEQ = auto()
    NEQ = auto()
    BANG = auto()
    GT = auto()
    LT = auto()
    GTE = auto()
    LTE = auto()
    AND = auto()
    OR = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()

    NEWLINE = auto()
    EOF = auto()


KEYWORDS = {
    "Spawn": TokenKind.SPAWN,
    "Color": TokenKind.COLOR,
    "Size": TokenKind.SIZE,
    "DrawLine": TokenKind.DRAW_LINE,
    "DrawCircle": TokenKind.DRAW_CIRCLE,
    "DrawRectangle": TokenKind.DRAW_RECTANGLE,
    "Fill": TokenKind.FILL,
    "GoTo": TokenKind.GOTO,
    "GetActualX": TokenKind.GET_ACTUAL_X,
    "GetActualY": TokenKind.GET_ACTUAL_Y,
    "GetCanvasSize": TokenKind.GET_CANVAS_SIZE,
    "GetColorCount": TokenKind.GET_COLOR_COUNT,
    "IsBrushColor": TokenKind.IS_BRUSH_COLOR,
    "IsBrushSize": TokenKind.IS_BRUSH_SIZE,
    "IsCanvasColor": TokenKind.IS_CANVAS_COLOR,
    "IsCanvasSize": TokenKind.IS_CANVAS_SIZE,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
}

FUNCTION_KINDS = frozenset(
    {
        TokenKind.GET_ACTUAL_X,
        TokenKind.GET_ACTUAL_Y,
        TokenKind.GET_CANVAS_SIZE,
        TokenKind.GET_COLOR_COUNT,
        TokenKind.IS_BRUSH_COLOR,
        TokenKind.IS_BRUSH_SIZE,
        TokenKind.IS_CANVAS_COLOR,
        TokenKind.IS_CANVAS_SIZE,
    }
)

# Number literals share the 32-bit signed range of the canvas runtime.
MAX_INT = 2**31 - 1

LiteralValue = Union[int, bool, str, None]


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    lexeme: str
    literal: LiteralValue
    line: int
    col: int

    def __str__(self) -> str:
        return f"{self.kind.name} '{self.lexeme}'"


class LexerError(Exception):
    pass


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.length = len(source)
        self.pos = 0
        self.line = 1
        self.col = 1
        self.start = 0
        self.start_line = 1
        self.start_col = 1
        self.tokens: List[Token] = []
        self.errors: List[str] = []

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def scan(self) -> List[Token]:
        while not self._is_at_end():
            self.start = self.pos
            self.start_line = self.line
            self.start_col = self.col
            try:
                self._scan_token()
            except LexerError as e:
                self._error(str(e))

        self.tokens.append(Token(TokenKind.EOF, "", None, self.line, self.col))
        return self.tokens

    def _scan_token(self) -> None:
        c = self._advance()

        if c in " \t\r":
            return
        if c == "\n":
            self._add(TokenKind.NEWLINE)
            self.line += 1
            self.col = 1
            return

        if c == '"':
            self._string()
            return
        if _is_digit(c):
            self._number()
            return
        if _is_alpha(c):
            self._identifier()
            return

        # Operators / punctuation (longest match handled by branching)
        if c == "<":
            if self._match("-"):
                self._add(TokenKind.ASSIGN)
            elif self._match("="):
                self._add(TokenKind.LTE)
            else:
                self._add(TokenKind.LT)
            return
        if c == ">":
            self._add(TokenKind.GTE if self._match("=") else TokenKind.GT)
            return
        if c == "=":
            self._add(TokenKind.EQEQ if self._match("=") else TokenKind.EQ)
            return
        if c == "!":
            self._add(TokenKind.NEQ if self._match("=") else TokenKind.BANG)
            return
        if c == "*":
            self._add(TokenKind.POWER if self._match("*") else TokenKind.STAR)
            return
        # A lone '&' or '|' is dropped without a token or an error.
        if c == "&":
            if self._match("&"):
                self._add(TokenKind.AND)
            return
        if c == "|":
            if self._match("|"):
                self._add(TokenKind.OR)
            return

        kind = _SINGLE_CHAR.get(c)
        if kind is None:
            raise LexerError(f"Unexpected character '{c}'.")
        self._add(kind)

    def _add(self, kind: TokenKind, literal: LiteralValue = None) -> None:
        text = self.source[self.start : self.pos]
        self.tokens.append(
            Token(kind, text, literal, self.start_line, self.start_col)
        )

    def _error(self, message: str) -> None:
        self.errors.append(f"Line {self.line}: {message}")

    def _is_at_end(self) -> bool:
        return self.pos >= self.length

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        self.col += 1
        return ch

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self.source[self.pos]

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self.pos += 1
        self.col += 1
        return True

    def _string(self) -> None:
        chars: List[str] = []
        escaped = False
        while not self._is_at_end():
            ch = self._advance()
            if escaped:
                chars.append(ch)
                escaped = False
                continue
            if ch == "\\":
                escaped = True
                continue
            if ch == '"':
                self._add(TokenKind.STRING, "".join(chars))
                return
            if ch == "\n":
                self.line += 1
                self.col = 1
            chars.append(ch)
        raise LexerError("Unterminated string.")

    def _number(self) -> None:
        while _is_digit(self._peek()):
            self._advance()
        text = self.source[self.start : self.pos]
        value = int(text)
        if value > MAX_INT:
            raise LexerError(f"Invalid number '{text}'.")
        self._add(TokenKind.NUMBER, value)

    def _identifier(self) -> None:
        while _is_alpha(self._peek()) or _is_digit(self._peek()) or self._peek() == "_":
            self._advance()
        text = self.source[self.start : self.pos]
        kind = KEYWORDS.get(text, TokenKind.IDENT)
        if kind == TokenKind.TRUE:
            self._add(kind, True)
        elif kind == TokenKind.FALSE:
            self._add(kind, False)
        elif kind == TokenKind.IDENT:
            self._add(kind, text)
        else:
            self._add(kind)


_SINGLE_CHAR = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ",": TokenKind.COMMA,
}


def _is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z")


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def tokenize(source: str) -> Tuple[List[Token], List[str]]:
    """Scan ``source`` and return ``(tokens, errors)``."""
    lexer = Lexer(source)
    tokens = lexer.scan()
    return tokens, list(lexer.errors)


__all__ = [
    "Lexer",
    "Token",
    "TokenKind",
    "LexerError",
    "KEYWORDS",
    "FUNCTION_KINDS",
    "MAX_INT",
    "tokenize",
]
