"""walle: run a Wall-E program and print the resulting canvas."""

from __future__ import annotations

import argparse
from pathlib import Path

from .pipeline import run_source

DEFAULT_CANVAS_SIZE = 20


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run a Wall-E drawing program")
    ap.add_argument("input", type=Path, help="Input .pw file")
    ap.add_argument(
        "--size",
        type=int,
        default=DEFAULT_CANVAS_SIZE,
        help=f"Canvas width and height in cells (default: {DEFAULT_CANVAS_SIZE})",
    )
    ap.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Abort after this many executed statements (default: unbounded)",
    )
    ap.add_argument("--tokens", action="store_true", help="Print the token stream")
    ap.add_argument("--ast", action="store_true", help="Print the parsed statements")
    ap.add_argument("--blank", default=".", help="Glyph for blank cells")
    ap.add_argument("--ink", default="#", help="Glyph for painted cells")
    args = ap.parse_args(argv)

    if args.size <= 0:
        log_error(f"canvas size must be positive: {args.size}")
        return 1

    try:
        src = args.input.read_text(encoding="utf-8")
    except FileNotFoundError:
        log_error(f"file not found: {args.input}")
        return 1

    result = run_source(src, args.size, max_steps=args.max_steps, on_step=log_step)

    if args.tokens:
        print("Tokens:")
        for t in result.tokens:
            print(f"  {t}")
    if args.ast and result.program is not None:
        print(f"Parsed {len(result.program)} statements:")
        for stmt in result.program.statements:
            print(f"  - {stmt}")

    for err in result.errors:
        log_error(err)
    if result.stage in {"lex", "parse", "semantic"}:
        return 1

    if result.interpreter is not None:
        print(result.interpreter.render(args.blank, args.ink))
    return 0 if result.ok else 1


def log_step(msg: str) -> None:
    print(f"[walle] {msg}...")


def log_error(msg: str) -> None:
    print(f"[walle:error] {msg}")


if __name__ == "__main__":
    raise SystemExit(main())
