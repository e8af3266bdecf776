"""PySide6 GUI for the Wall-E language."""

from __future__ import annotations

import sys
from pathlib import Path

from PySide6 import QtWidgets

from .main_window import MainWindow


def main():
    app = QtWidgets.QApplication(sys.argv)
    app.setOrganizationName("WallE")
    app.setApplicationName("WallE IDE")
    window = MainWindow()
    if len(sys.argv) > 1 and Path(sys.argv[1]).is_file():
        window.load_file(Path(sys.argv[1]))
    window.resize(1100, 750)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
