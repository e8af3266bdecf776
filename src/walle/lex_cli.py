"""Simple CLI to lex a Wall-E source file and print tokens."""

import argparse
from pathlib import Path

from .lexer import tokenize


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Lex a Wall-E source file")
    parser.add_argument("path", type=Path, help="Path to Wall-E source (.pw)")
    args = parser.parse_args(argv)

    try:
        text = args.path.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"error: file not found: {args.path}")
        return 1

    tokens, errors = tokenize(text)
    for t in tokens:
        print(f"{t.kind.name}\t{t.lexeme!r}\t(line {t.line})")
    for err in errors:
        print(f"lexer error: {err}")
    return 1 if errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
