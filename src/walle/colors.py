"""Color identity for the canvas.

Every color name gets a small positive integer code the first time it is
seen. Code 0 is reserved for blank cells, so two names share a code only if
they are the same string.
"""

from __future__ import annotations

from typing import Dict, List, Optional

BLANK = 0


class ColorTable:
    def __init__(self):
        self._codes: Dict[str, int] = {}
        self._names: List[str] = []

    def code(self, name: str) -> int:
        """Code for ``name``, interning it on first use."""
        found = self._codes.get(name)
        if found is not None:
            return found
        self._names.append(name)
        code = len(self._names)
        self._codes[name] = code
        return code

    def lookup(self, name: str) -> Optional[int]:
        """Code for ``name`` without interning it."""
        return self._codes.get(name)

    def name(self, code: int) -> Optional[str]:
        if code == BLANK or not 0 < code <= len(self._names):
            return None
        return self._names[code - 1]

    def __contains__(self, name: str) -> bool:
        return name in self._codes

    def __len__(self) -> int:
        return len(self._names)


__all__ = ["BLANK", "ColorTable"]
