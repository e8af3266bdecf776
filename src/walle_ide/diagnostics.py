"""Diagnostics helpers for the Wall-E IDE."""

from __future__ import annotations

import re

# "[Line 3] Error at ..." from the parser, "Line 3: ..." from the lexer and
# the interpreter.
_LINE_PATTERNS = (
    re.compile(r"^\[Line (\d+)\]"),
    re.compile(r"^Line (\d+):"),
)


class DiagnosticsHelper:
    """Helper for mapping pipeline errors back to source lines."""

    @staticmethod
    def line_of(message: str) -> int | None:
        """Source line a message refers to, if it names one."""
        for pattern in _LINE_PATTERNS:
            m = pattern.search(message)
            if m:
                return int(m.group(1))
        return None

    @staticmethod
    def parse_diagnostics(errors: list[str]) -> list[tuple[int | None, str]]:
        return [(DiagnosticsHelper.line_of(msg), msg) for msg in errors]

    @staticmethod
    def collect(errors: list[str], text: str) -> list[tuple[int | None, str]]:
        """Errors from the last run followed by hints for the current text."""
        entries = DiagnosticsHelper.parse_diagnostics(errors)
        for line, hint in DiagnosticsHelper.compute_lightweight_hints(text):
            label = f"Hint (line {line}): {hint}" if line else f"Hint: {hint}"
            entries.append((line, label))
        return entries

    @staticmethod
    def compute_lightweight_hints(text: str) -> list[tuple[int | None, str]]:
        """Cheap source checks that run without the pipeline."""
        hints: list[tuple[int | None, str]] = []
        lines = text.splitlines()

        first = next(
            ((i + 1, ln.strip()) for i, ln in enumerate(lines) if ln.strip()), None
        )
        if first and not first[1].startswith("Spawn"):
            hints.append((first[0], "Programs must start with Spawn(x, y)"))

        for i, ln in enumerate(lines):
            stripped = ln.strip()
            if stripped.startswith("GoTo") and "[" not in stripped:
                hints.append((i + 1, "GoTo syntax: GoTo [label] (condition)"))
            if re.search(r"[^<]-\s*>|=\s*<|:=", stripped):
                hints.append((i + 1, "Assignment uses '<-': name <- expression"))
            if ln.rstrip() != ln:
                hints.append((i + 1, "Trailing whitespace"))

        return hints
