import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from walle import lex_cli, run_cli  # noqa: E402

PROGRAM = """Spawn(0, 0)
Color("Black")
DrawLine(1, 0, 3)
"""


def write_program(tmp_path: Path, text: str = PROGRAM) -> Path:
    path = tmp_path / "prog.pw"
    path.write_text(text, encoding="utf-8")
    return path


def test_run_prints_canvas(tmp_path, capsys):
    path = write_program(tmp_path)
    assert run_cli.main([str(path), "--size", "4"]) == 0
    out = capsys.readouterr().out
    assert "[walle] lexing..." in out
    assert "[walle] executing..." in out
    assert out.rstrip().splitlines()[-4:] == ["####", "....", "....", "...."]


def test_custom_glyphs(tmp_path, capsys):
    path = write_program(tmp_path)
    assert run_cli.main([str(path), "--size", "4", "--blank", " ", "--ink", "@"]) == 0
    assert "@@@@" in capsys.readouterr().out


def test_parse_error_exit_code(tmp_path, capsys):
    path = write_program(tmp_path, "Spawn(0, 0)\nDrawLine(3, 0, 1)\n")
    assert run_cli.main([str(path)]) == 1
    out = capsys.readouterr().out
    assert "[walle:error] [Line 2] Error at '3': dirX" in out
    assert "[walle] executing..." not in out


def test_runtime_error_still_prints_canvas(tmp_path, capsys):
    path = write_program(tmp_path, PROGRAM + "x <- 1 / 0\n")
    assert run_cli.main([str(path), "--size", "4"]) == 1
    out = capsys.readouterr().out
    assert "[walle:error] Line 4: Division by zero." in out
    assert "####" in out


def test_step_limit_flag(tmp_path, capsys):
    path = write_program(tmp_path, "Spawn(0, 0)\nagain\nGoTo [again] (true)\n")
    assert run_cli.main([str(path), "--max-steps", "10"]) == 1
    assert "Step limit of 10 exceeded." in capsys.readouterr().out


def test_debug_dumps(tmp_path, capsys):
    path = write_program(tmp_path)
    assert run_cli.main([str(path), "--tokens", "--ast"]) == 0
    out = capsys.readouterr().out
    assert "Tokens:" in out
    assert "SPAWN 'Spawn'" in out
    assert "Parsed 3 statements:" in out
    assert "DrawLine(" in out


def test_missing_file(tmp_path, capsys):
    assert run_cli.main([str(tmp_path / "nope.pw")]) == 1
    assert "[walle:error] file not found" in capsys.readouterr().out


def test_bad_canvas_size(tmp_path, capsys):
    path = write_program(tmp_path)
    assert run_cli.main([str(path), "--size", "0"]) == 1
    assert "canvas size must be positive" in capsys.readouterr().out


def test_lex_cli_lists_tokens(tmp_path, capsys):
    path = write_program(tmp_path, "Spawn(0, 0)\n")
    assert lex_cli.main([str(path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "SPAWN\t'Spawn'\t(line 1)"
    assert lines[-1] == "EOF\t''\t(line 2)"


def test_lex_cli_reports_errors(tmp_path, capsys):
    path = write_program(tmp_path, "x <- 1 ? 2\n")
    assert lex_cli.main([str(path)]) == 1
    out = capsys.readouterr().out
    assert "lexer error: Line 1: Unexpected character '?'." in out
