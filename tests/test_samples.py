import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from walle.pipeline import run_source  # noqa: E402

SAMPLES_DIR = ROOT / "examples"
CANVAS_SIZE = 20

GOOD_SAMPLES = [
    "line.pw",
    "loop.pw",
    "staircase.pw",
    "shapes.pw",
    "fill.pw",
]

NEGATIVE_SAMPLES = [
    ("diagnostics_showcase.pw", "parse"),
]


@pytest.mark.parametrize("filename", GOOD_SAMPLES)
def test_samples_run_to_completion(filename: str):
    source = (SAMPLES_DIR / filename).read_text(encoding="utf-8")
    result = run_source(source, CANVAS_SIZE, max_steps=100_000)
    assert result.ok, result.errors
    assert result.interpreter.painted_cells(), "sample should paint something"


@pytest.mark.parametrize("filename, stage", NEGATIVE_SAMPLES)
def test_negative_samples_fail(filename: str, stage: str):
    source = (SAMPLES_DIR / filename).read_text(encoding="utf-8")
    result = run_source(source, CANVAS_SIZE)
    assert result.stage == stage
    assert len(result.errors) > 1


def test_loop_sample_draws_four_cells():
    source = (SAMPLES_DIR / "loop.pw").read_text(encoding="utf-8")
    result = run_source(source, CANVAS_SIZE)
    assert sorted(result.interpreter.painted_cells()) == [
        (0, 0),
        (1, 0),
        (2, 0),
        (3, 0),
    ]


def test_fill_sample_counts_background():
    source = (SAMPLES_DIR / "fill.pw").read_text(encoding="utf-8")
    result = run_source(source, CANVAS_SIZE)
    interp = result.interpreter
    assert interp.variables["yellow"] == CANVAS_SIZE * CANVAS_SIZE - 36
    assert interp.variables["done"] == 1
    assert interp.cell_color(5, 8) == "White"
