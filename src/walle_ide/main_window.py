"""Main window for the Wall-E IDE."""

from __future__ import annotations

from pathlib import Path

from PySide6 import QtCore, QtGui, QtWidgets

from walle.pipeline import RunResult, run_source

from .canvas_view import CanvasView
from .diagnostics import DiagnosticsHelper
from .highlighter import WallEHighlighter
from .theme import ThemeManager, ThemeMode

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SAMPLES_DIR = PROJECT_ROOT / "examples"
FILE_FILTER = "Wall-E Files (*.pw);;All Files (*)"

DEFAULT_CANVAS_SIZE = 20
MAX_CANVAS_SIZE = 256
# 0 disables the step budget.
DEFAULT_STEP_BUDGET = 100_000


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, settings: QtCore.QSettings | None = None):
        super().__init__()
        self.setWindowTitle("Wall-E IDE (PySide6)")
        self._current_path: Path | None = None
        self._editor_base_font_size = None
        self._last_errors: list[str] = []
        self.settings = settings or QtCore.QSettings("WallE", "WallE IDE")

        self.theme_manager = ThemeManager(self.settings)
        self.theme_manager.apply_theme(QtWidgets.QApplication.instance())

        self._lint_timer = QtCore.QTimer(self)
        self._lint_timer.setSingleShot(True)
        self._lint_timer.timeout.connect(self._run_lint_pass)

        self._build_ui()
        self._setup_menu()
        self._apply_theme_colors()
        self.canvas_view.show_blank(self.size_spin.value())

    def _build_ui(self):
        self.editor = QtWidgets.QPlainTextEdit()
        self.editor.setPlaceholderText("Write Wall-E code here…")
        self.editor.setFont(QtGui.QFont("Consolas", 12))
        self.editor.textChanged.connect(lambda: self._lint_timer.start(400))
        self.highlighter = WallEHighlighter(self.editor.document())
        self._editor_base_font_size = self.editor.font().pointSize()

        self.canvas_view = CanvasView()

        self.output_tabs = QtWidgets.QTabWidget()
        self.output_tabs.setTabPosition(QtWidgets.QTabWidget.South)

        self.log_view = QtWidgets.QPlainTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setPlaceholderText("Logs…")
        self.output_tabs.addTab(self.log_view, "Logs")

        self.error_view = QtWidgets.QPlainTextEdit()
        self.error_view.setReadOnly(True)
        self.error_view.setPlaceholderText("Errors…")
        self.output_tabs.addTab(self.error_view, "Errors")

        self.diagnostics_view = QtWidgets.QListWidget()
        self.diagnostics_view.itemClicked.connect(self._jump_to_diagnostic)
        self.output_tabs.addTab(self.diagnostics_view, "Diagnostics")

        clear_bar = QtWidgets.QHBoxLayout()
        clear_bar.setContentsMargins(0, 0, 0, 0)
        clear_bar.setSpacing(4)
        self._add_clear_button(clear_bar, "Clear Logs", self.log_view)
        self._add_clear_button(clear_bar, "Clear Errors", self.error_view)
        clear_bar.addStretch(1)

        tabs_container = QtWidgets.QWidget()
        tabs_layout = QtWidgets.QVBoxLayout(tabs_container)
        tabs_layout.setContentsMargins(0, 0, 0, 0)
        tabs_layout.setSpacing(4)
        tabs_layout.addLayout(clear_bar)
        tabs_layout.addWidget(self.output_tabs)

        open_btn = QtWidgets.QPushButton("Open…")
        open_btn.clicked.connect(self.open_file)
        save_btn = QtWidgets.QPushButton("Save As…")
        save_btn.clicked.connect(self.save_file)
        load_sample_btn = QtWidgets.QPushButton("Load Sample…")
        load_sample_btn.clicked.connect(self.open_sample)
        run_btn = QtWidgets.QPushButton("Run")
        run_btn.clicked.connect(self.run_program)

        self.size_spin = QtWidgets.QSpinBox()
        self.size_spin.setRange(1, MAX_CANVAS_SIZE)
        self.size_spin.setValue(
            int(self.settings.value("canvas_size", DEFAULT_CANVAS_SIZE))
        )
        self.size_spin.setPrefix("Canvas: ")
        self.size_spin.valueChanged.connect(self._on_size_changed)

        buttons = QtWidgets.QHBoxLayout()
        for b in [open_btn, save_btn, load_sample_btn, run_btn]:
            buttons.addWidget(b)
        buttons.addWidget(self.size_spin)
        buttons.addStretch(1)

        self.code_splitter = QtWidgets.QSplitter()
        self.code_splitter.setOrientation(QtCore.Qt.Horizontal)
        self.code_splitter.addWidget(self.editor)
        self.code_splitter.addWidget(self.canvas_view)
        self.code_splitter.setSizes([1, 1])

        splitter = QtWidgets.QSplitter()
        splitter.setOrientation(QtCore.Qt.Vertical)
        splitter.addWidget(self.code_splitter)
        splitter.addWidget(tabs_container)
        splitter.setSizes([3, 1])

        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.addLayout(buttons)
        layout.addWidget(splitter)
        self.setCentralWidget(central)

    def _setup_menu(self):
        menubar = self.menuBar()
        view_menu = menubar.addMenu("View")

        inc_font = QtGui.QAction("Increase Editor Font", self)
        inc_font.triggered.connect(lambda: self._adjust_editor_font(1))
        dec_font = QtGui.QAction("Decrease Editor Font", self)
        dec_font.triggered.connect(lambda: self._adjust_editor_font(-1))
        reset_font = QtGui.QAction("Reset Editor Font", self)
        reset_font.triggered.connect(self._reset_editor_font)
        theme = QtGui.QAction("Theme…", self)
        theme.triggered.connect(self._show_theme_dialog)

        view_menu.addAction(inc_font)
        view_menu.addAction(dec_font)
        view_menu.addAction(reset_font)
        view_menu.addSeparator()
        view_menu.addAction(theme)

        run_menu = menubar.addMenu("Run")
        run = QtGui.QAction("Run Program", self)
        run.setShortcut(QtGui.QKeySequence("F5"))
        run.triggered.connect(self.run_program)
        budget = QtGui.QAction("Step Budget…", self)
        budget.triggered.connect(self._set_step_budget)
        run_menu.addAction(run)
        run_menu.addAction(budget)

    # --- file ops ---
    def open_file(self):
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self,
            "Open Wall-E file",
            str(self._current_path.parent if self._current_path else SAMPLES_DIR),
            FILE_FILTER,
        )
        if not path:
            return
        self.load_file(Path(path))

    def open_sample(self):
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self, "Load sample", str(SAMPLES_DIR), FILE_FILTER
        )
        if not path:
            return
        self.load_file(Path(path))
        self._current_path = None

    def save_file(self):
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self,
            "Save Wall-E file",
            str(self._current_path.parent if self._current_path else PROJECT_ROOT),
            FILE_FILTER,
        )
        if not path:
            return
        self._current_path = Path(path)
        self._current_path.write_text(self.editor.toPlainText(), encoding="utf-8")
        self._log(f"Saved {self._current_path.name}")

    def load_file(self, path: Path):
        self._current_path = path
        self._last_errors = []
        self.editor.setPlainText(path.read_text(encoding="utf-8"))
        self._log(f"Opened {path.name}")

    # --- Actions ---
    def run_program(self) -> RunResult | None:
        src = self.editor.toPlainText()
        if not src.strip():
            self._error("No source to run")
            return None
        self.error_view.clear()
        self._clear_highlights()

        budget = self.step_budget()
        result = run_source(
            src,
            self.size_spin.value(),
            max_steps=budget or None,
            on_step=lambda step: self._log(f"{step}..."),
        )
        if result.interpreter is not None:
            self.canvas_view.show_interpreter(result.interpreter)
        else:
            self.canvas_view.show_blank(self.size_spin.value())

        if result.ok:
            steps = result.interpreter.steps
            self._log(f"Run completed in {steps} step(s)")
        else:
            self._log(f"Run failed during {result.stage}")
            for msg in result.errors:
                self._error(msg)
        self._last_errors = list(result.errors)
        self._show_diagnostics(self._last_errors)
        return result

    def step_budget(self) -> int:
        return int(self.settings.value("step_budget", DEFAULT_STEP_BUDGET))

    def _set_step_budget(self):
        value, ok = QtWidgets.QInputDialog.getInt(
            self,
            "Step Budget",
            "Maximum executed statements (0 = unlimited):",
            self.step_budget(),
            0,
            100_000_000,
        )
        if ok:
            self.settings.setValue("step_budget", value)
            self._log(f"Step budget set to {value or 'unlimited'}")

    def _on_size_changed(self, value: int):
        self.settings.setValue("canvas_size", value)
        self.canvas_view.show_blank(value)

    def _log(self, msg: str):
        self._append_to_tab(self.log_view, msg)

    def _error(self, msg: str):
        self._append_to_tab(self.error_view, msg, focus=True)

    def _append_to_tab(
        self, view: QtWidgets.QPlainTextEdit, msg: str, focus: bool = False
    ):
        view.appendPlainText(msg)
        if focus:
            self.output_tabs.setCurrentWidget(view)

    def _add_clear_button(
        self, layout: QtWidgets.QHBoxLayout, label: str, view: QtWidgets.QPlainTextEdit
    ):
        btn = QtWidgets.QPushButton(label)
        btn.setFixedHeight(22)
        btn.setToolTip(label)
        btn.clicked.connect(view.clear)
        layout.addWidget(btn)

    # --- diagnostics helpers ---
    def _show_diagnostics(self, errors: list[str], focus: bool = True):
        self.diagnostics_view.clear()
        entries = DiagnosticsHelper.collect(errors, self.editor.toPlainText())
        for line, label in entries:
            item = QtWidgets.QListWidgetItem(label)
            item.setData(QtCore.Qt.UserRole, line)
            self.diagnostics_view.addItem(item)

        first_line = DiagnosticsHelper.line_of(errors[0]) if errors else None
        if focus and first_line:
            self._highlight_line(first_line)
            self.output_tabs.setCurrentWidget(self.diagnostics_view)

    def _run_lint_pass(self):
        # Edits refresh the hints; run errors stay until the next Run.
        self._show_diagnostics(self._last_errors, focus=False)

    def _jump_to_diagnostic(self, item: QtWidgets.QListWidgetItem):
        line = item.data(QtCore.Qt.UserRole)
        if line:
            self._highlight_line(int(line))

    def _highlight_line(self, line: int):
        cursor = self.editor.textCursor()
        cursor.movePosition(QtGui.QTextCursor.Start)
        cursor.movePosition(QtGui.QTextCursor.Down, n=line - 1)
        cursor.select(QtGui.QTextCursor.LineUnderCursor)
        selection = QtWidgets.QTextEdit.ExtraSelection()
        fmt = QtGui.QTextCharFormat()
        fmt.setBackground(QtGui.QColor("#ffebee"))
        selection.format = fmt
        selection.cursor = cursor
        self.editor.setExtraSelections([selection])
        self.editor.setTextCursor(cursor)

    def _clear_highlights(self):
        self.editor.setExtraSelections([])

    # --- view helpers ---
    def _adjust_editor_font(self, delta: int):
        font = self.editor.font()
        size = font.pointSize() or self._editor_base_font_size or 10
        font.setPointSize(max(6, size + delta))
        self.editor.setFont(font)

    def _reset_editor_font(self):
        if not self._editor_base_font_size:
            return
        font = self.editor.font()
        font.setPointSize(self._editor_base_font_size)
        self.editor.setFont(font)

    def _apply_theme_colors(self):
        self.highlighter.set_colors(self.theme_manager.get_syntax_colors())
        self.canvas_view.set_colors(self.theme_manager.get_canvas_colors())

    def _show_theme_dialog(self):
        dialog = QtWidgets.QDialog(self)
        dialog.setWindowTitle("Theme Settings")
        dialog.setMinimumWidth(300)

        layout = QtWidgets.QVBoxLayout(dialog)
        group = QtWidgets.QGroupBox("Theme Mode")
        group_layout = QtWidgets.QVBoxLayout(group)

        radios = {
            ThemeMode.LIGHT: QtWidgets.QRadioButton("Light"),
            ThemeMode.DARK: QtWidgets.QRadioButton("Dark"),
            ThemeMode.SYSTEM: QtWidgets.QRadioButton("System"),
        }
        radios[self.theme_manager.current_mode].setChecked(True)
        for radio in radios.values():
            group_layout.addWidget(radio)
        layout.addWidget(group)

        buttons = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel
        )
        buttons.accepted.connect(dialog.accept)
        buttons.rejected.connect(dialog.reject)
        layout.addWidget(buttons)

        if dialog.exec() == QtWidgets.QDialog.Accepted:
            for mode, radio in radios.items():
                if radio.isChecked():
                    self.theme_manager.save_theme_mode(mode)
            self.theme_manager.apply_theme(QtWidgets.QApplication.instance())
            self._apply_theme_colors()
            self._log(f"Theme changed to {self.theme_manager.current_mode.value}")
