"""Light/dark/system theme handling for the Wall-E IDE."""

from __future__ import annotations

from enum import Enum

from PySide6 import QtCore, QtGui, QtWidgets


class ThemeMode(Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


# Window palette per concrete mode.
PALETTES = {
    ThemeMode.LIGHT: {
        QtGui.QPalette.Window: "#ffffff",
        QtGui.QPalette.WindowText: "#000000",
        QtGui.QPalette.Base: "#ffffff",
        QtGui.QPalette.Text: "#000000",
        QtGui.QPalette.Button: "#f0f0f0",
        QtGui.QPalette.ButtonText: "#000000",
        QtGui.QPalette.Highlight: "#0078d4",
    },
    ThemeMode.DARK: {
        QtGui.QPalette.Window: "#1e1e1e",
        QtGui.QPalette.WindowText: "#e0e0e0",
        QtGui.QPalette.Base: "#252526",
        QtGui.QPalette.Text: "#e0e0e0",
        QtGui.QPalette.Button: "#3e3e42",
        QtGui.QPalette.ButtonText: "#e0e0e0",
        QtGui.QPalette.Highlight: "#005a9e",
    },
}

SYNTAX_COLORS = {
    ThemeMode.LIGHT: {
        "keyword": "#0057b7",
        "function": "#6a1b9a",
        "number": "#b71c1c",
        "string": "#2e7d32",
    },
    ThemeMode.DARK: {
        "keyword": "#569cd6",
        "function": "#c586c0",
        "number": "#ce9178",
        "string": "#6a9955",
    },
}

CANVAS_COLORS = {
    ThemeMode.LIGHT: {"background": "#fafafa", "grid": "#e0e0e0"},
    ThemeMode.DARK: {"background": "#2d2d30", "grid": "#3e3e42"},
}


class ThemeManager:
    """Holds the chosen mode and persists it in ``QSettings``."""

    def __init__(self, settings: QtCore.QSettings | None = None):
        self.settings = settings or QtCore.QSettings("WallE", "WallE IDE")
        try:
            self.current_mode = ThemeMode(self.settings.value("theme_mode", "system"))
        except ValueError:
            self.current_mode = ThemeMode.SYSTEM

    def save_theme_mode(self, mode: ThemeMode) -> None:
        self.current_mode = mode
        self.settings.setValue("theme_mode", mode.value)

    def get_active_mode(self) -> ThemeMode:
        """Resolve SYSTEM to LIGHT or DARK from the running application."""
        if self.current_mode is not ThemeMode.SYSTEM:
            return self.current_mode
        app = QtWidgets.QApplication.instance()
        if app and app.palette().color(QtGui.QPalette.Window).lightness() < 128:
            return ThemeMode.DARK
        return ThemeMode.LIGHT

    def apply_theme(self, app: QtWidgets.QApplication) -> None:
        palette = QtGui.QPalette()
        for role, value in PALETTES[self.get_active_mode()].items():
            palette.setColor(role, QtGui.QColor(value))
        app.setPalette(palette)

    def get_syntax_colors(self) -> dict[str, str]:
        return dict(SYNTAX_COLORS[self.get_active_mode()])

    def get_canvas_colors(self) -> dict[str, str]:
        return dict(CANVAS_COLORS[self.get_active_mode()])
