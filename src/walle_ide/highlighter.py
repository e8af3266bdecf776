"""Syntax highlighting rules for the Wall-E language."""

from __future__ import annotations

from PySide6 import QtCore, QtGui

from walle.lexer import FUNCTION_KINDS, KEYWORDS

from .theme import SYNTAX_COLORS, ThemeMode

DEFAULT_COLORS = SYNTAX_COLORS[ThemeMode.LIGHT]


class WallEHighlighter(QtGui.QSyntaxHighlighter):
    def __init__(self, parent=None, colors: dict[str, str] | None = None):
        super().__init__(parent)
        self.rules = []
        self.set_colors(colors or DEFAULT_COLORS)

    def set_colors(self, colors: dict[str, str]) -> None:
        self.rules = []

        kw_format = QtGui.QTextCharFormat()
        kw_format.setForeground(QtGui.QColor(colors["keyword"]))
        kw_format.setFontWeight(QtGui.QFont.Bold)
        fn_format = QtGui.QTextCharFormat()
        fn_format.setForeground(QtGui.QColor(colors["function"]))
        for word, kind in KEYWORDS.items():
            pattern = QtCore.QRegularExpression(rf"\b{word}\b")
            fmt = fn_format if kind in FUNCTION_KINDS else kw_format
            self.rules.append((pattern, fmt))

        num_format = QtGui.QTextCharFormat()
        num_format.setForeground(QtGui.QColor(colors["number"]))
        self.rules.append((QtCore.QRegularExpression(r"\b\d+\b"), num_format))

        str_format = QtGui.QTextCharFormat()
        str_format.setForeground(QtGui.QColor(colors["string"]))
        self.rules.append(
            (QtCore.QRegularExpression(r'"[^"\\]*(?:\\.[^"\\]*)*"'), str_format)
        )
        self.rehighlight()

    def highlightBlock(self, text: str):
        for pattern, fmt in self.rules:
            it = pattern.globalMatch(text)
            while it.hasNext():
                match = it.next()
                self.setFormat(match.capturedStart(), match.capturedLength(), fmt)
