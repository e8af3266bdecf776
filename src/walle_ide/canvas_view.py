"""Widget that paints an interpreter's canvas grid."""

from __future__ import annotations

import colorsys
import zlib

from PySide6 import QtCore, QtGui, QtWidgets

from walle.interpreter import Interpreter

NAMED_COLORS = {
    "Red": "#e53935",
    "Blue": "#1e88e5",
    "Green": "#43a047",
    "Yellow": "#fdd835",
    "Orange": "#fb8c00",
    "Purple": "#8e24aa",
    "Black": "#000000",
    "White": "#ffffff",
    "Gray": "#9e9e9e",
    "Grey": "#9e9e9e",
    "Pink": "#ec407a",
    "Brown": "#6d4c41",
    "Cyan": "#00acc1",
}

# Painted like a blank cell.
CLEAR_COLORS = {"Transparent"}


def color_hex(name: str | None) -> str | None:
    """
    Display color for a brush color name.

    Blank cells and "Transparent" give ``None``. Known names use a fixed
    palette (case-insensitive); any other name gets a stable derived hue.
    """
    if name is None or name in CLEAR_COLORS:
        return None
    for known, value in NAMED_COLORS.items():
        if known.lower() == name.lower():
            return value
    hue = (zlib.crc32(name.encode("utf-8")) % 360) / 360.0
    r, g, b = colorsys.hls_to_rgb(hue, 0.5, 0.65)
    return "#{:02x}{:02x}{:02x}".format(int(r * 255), int(g * 255), int(b * 255))


class CanvasView(QtWidgets.QWidget):
    """Square grid view; one rectangle per canvas cell."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._interpreter: Interpreter | None = None
        self._size = 0
        self._background = QtGui.QColor("#fafafa")
        self._grid = QtGui.QColor("#e0e0e0")
        self.setMinimumSize(240, 240)

    def set_colors(self, colors: dict[str, str]) -> None:
        self._background = QtGui.QColor(colors["background"])
        self._grid = QtGui.QColor(colors["grid"])
        self.update()

    def show_blank(self, size: int) -> None:
        self._interpreter = None
        self._size = size
        self.update()

    def show_interpreter(self, interpreter: Interpreter) -> None:
        self._interpreter = interpreter
        self._size = interpreter.canvas_size
        self.update()

    def paintEvent(self, event: QtGui.QPaintEvent):
        painter = QtGui.QPainter(self)
        painter.fillRect(self.rect(), self.palette().color(QtGui.QPalette.Window))
        if self._size <= 0:
            return
        side = min(self.width(), self.height())
        cell = side / self._size
        origin_x = (self.width() - side) / 2
        origin_y = (self.height() - side) / 2
        painter.fillRect(
            QtCore.QRectF(origin_x, origin_y, side, side), self._background
        )

        if self._interpreter is not None:
            for y in range(self._size):
                for x in range(self._size):
                    value = color_hex(self._interpreter.cell_color(x, y))
                    if value is None:
                        continue
                    rect = QtCore.QRectF(
                        origin_x + x * cell, origin_y + y * cell, cell, cell
                    )
                    painter.fillRect(rect, QtGui.QColor(value))

        if cell >= 6:
            painter.setPen(self._grid)
            for i in range(self._size + 1):
                offset = i * cell
                painter.drawLine(
                    QtCore.QPointF(origin_x + offset, origin_y),
                    QtCore.QPointF(origin_x + offset, origin_y + side),
                )
                painter.drawLine(
                    QtCore.QPointF(origin_x, origin_y + offset),
                    QtCore.QPointF(origin_x + side, origin_y + offset),
                )
        painter.end()
