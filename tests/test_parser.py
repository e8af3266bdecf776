import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from walle import ast as ast_nodes  # noqa: E402
from walle.lexer import tokenize  # noqa: E402
from walle.parser import parse  # noqa: E402


def log_feature(name: str):
    # Helps surface which language feature a test is exercising when run with -s
    print(f"[feature] {name}")


def parse_code(code: str):
    tokens, lex_errors = tokenize(code)
    assert lex_errors == []
    return parse(tokens)


def test_parse_drawing_statements():
    log_feature("drawing statements")
    program, errors = parse_code(
        'Spawn(1, 2)\nColor("Red")\nSize(3)\nDrawLine(1, 0, 4)\n'
        "DrawCircle(0, 1, 2)\nDrawRectangle(-1, -1, 1, 3, 4)\nFill()\n"
    )
    assert errors == []
    assert [type(s) for s in program.statements] == [
        ast_nodes.Spawn,
        ast_nodes.Color,
        ast_nodes.Size,
        ast_nodes.DrawLine,
        ast_nodes.DrawCircle,
        ast_nodes.DrawRectangle,
        ast_nodes.Fill,
    ]
    spawn = program.statements[0]
    assert spawn.x == ast_nodes.Literal(1, line=1, col=7)
    assert program.statements[1].name == "Red"
    assert program.statements[3].line == 4


def test_color_accepts_identifier():
    log_feature("color identifier")
    program, errors = parse_code("Spawn(0, 0)\nColor(Blue)")
    assert errors == []
    assert program.statements[1].name == "Blue"


def test_assignment_precedence():
    log_feature("operator precedence")
    program, errors = parse_code("Spawn(0, 0)\nx <- 1 + 2 * 3 > 4 && true")
    assert errors == []
    assign = program.statements[1]
    assert isinstance(assign, ast_nodes.Assign)
    expr = assign.expr
    assert expr.op == "&&"
    comparison = expr.left
    assert comparison.op == ">"
    assert comparison.left.op == "+"
    assert comparison.left.right.op == "*"


def test_binary_operators_are_left_associative():
    log_feature("left associativity")
    program, _ = parse_code("Spawn(0, 0)\nx <- 8 - 4 - 2")
    expr = program.statements[1].expr
    assert expr.op == "-"
    assert isinstance(expr.left, ast_nodes.Binary)
    assert expr.right.value == 2


def test_unary_minus_is_zero_minus_operand():
    log_feature("unary minus")
    program, errors = parse_code("Spawn(0, 0)\nx <- -5")
    assert errors == []
    expr = program.statements[1].expr
    assert isinstance(expr, ast_nodes.Binary)
    assert expr.op == "-"
    assert expr.left.value == 0
    assert expr.right.value == 5
    assert ast_nodes.int_literal(expr) == -5


def test_grouping_and_calls():
    log_feature("grouping and built-in calls")
    program, errors = parse_code(
        'Spawn(0, 0)\nx <- (GetActualX() + 1) * GetColorCount("Red", 0, 0, 2, 2)'
    )
    assert errors == []
    expr = program.statements[1].expr
    assert isinstance(expr.left, ast_nodes.Grouping)
    call = expr.right
    assert isinstance(call, ast_nodes.Call)
    assert call.name == "GetColorCount"
    assert len(call.args) == 5


def test_labels_and_goto():
    log_feature("labels and goto")
    program, errors = parse_code(
        "Spawn(0, 0)\nn <- 3\nloop\nDrawLine(1, 0, 1)\nn <- n - 1\nGoTo [loop] (n > 0)"
    )
    assert errors == []
    assert program.labels == {"loop": 2}
    assert isinstance(program.statements[2], ast_nodes.Label)
    goto = program.statements[-1]
    assert isinstance(goto, ast_nodes.GoTo)
    assert goto.label == "loop"


def test_forward_goto_is_allowed():
    log_feature("forward label reference")
    _, errors = parse_code("Spawn(0, 0)\nGoTo [end] (true)\nDrawLine(1, 0, 1)\nend")
    assert errors == []


def test_labels_are_frozen():
    program, _ = parse_code("Spawn(0, 0)\nstart")
    with pytest.raises(TypeError):
        program.labels["other"] = 5


def test_duplicate_label_keeps_first_definition():
    log_feature("duplicate labels")
    program, errors = parse_code("Spawn(0, 0)\nloop\nFill()\nloop\n")
    duplicates = [e for e in errors if "Duplicate label" in e]
    assert duplicates == ["[Line 4] Error at 'loop': Duplicate label 'loop'"]
    assert program.labels["loop"] == 1


def test_undefined_label():
    log_feature("undefined goto label")
    _, errors = parse_code("Spawn(0, 0)\nGoTo [nowhere] (true)")
    assert errors == ["[Line 2] Error at 'nowhere': Undefined label 'nowhere'"]


def test_spawn_must_come_first_reported_once():
    log_feature("spawn ordering")
    _, errors = parse_code('Color("Red")\nSize(2)\nSpawn(0, 0)')
    assert errors == ["[Line 1] Error: 'Spawn' must be the first executable statement"]


def test_missing_spawn():
    _, errors = parse_code("Fill()")
    assert "Missing 'Spawn(...)' instruction at the beginning." in errors


def test_second_spawn_rejected():
    _, errors = parse_code("Spawn(0, 0)\nSpawn(1, 1)")
    assert len(errors) == 1
    assert "Only one 'Spawn' allowed." in errors[0]


@pytest.mark.parametrize(
    "line, message",
    [
        ("DrawLine(2, 0, 1)", "dirX must be -1, 0 or 1."),
        ("DrawCircle(0, -2, 1)", "dirY must be -1, 0 or 1."),
        ("DrawRectangle(5, 0, 1, 1, 1)", "dirX must be -1, 0 or 1."),
    ],
)
def test_literal_direction_out_of_range(line: str, message: str):
    log_feature("direction literal range")
    _, errors = parse_code(f"Spawn(0, 0)\n{line}")
    assert len(errors) == 1
    assert errors[0].startswith("[Line 2]")
    assert errors[0].endswith(message)


@pytest.mark.parametrize(
    "line, at",
    [
        ("DrawLine(2, 0, 1)", "2"),
        ("DrawCircle(0, -2, 1)", "-"),
        ("DrawRectangle(1, 5, 1, 1, 1)", "5"),
    ],
)
def test_direction_error_points_at_the_argument(line: str, at: str):
    _, errors = parse_code(f"Spawn(0, 0)\n{line}")
    assert len(errors) == 1
    assert errors[0].startswith(f"[Line 2] Error at '{at}':")


def test_wrong_argument_count():
    _, errors = parse_code("Spawn(0, 0)\nDrawLine(1, 0, 1, 2)")
    assert len(errors) == 1
    assert errors[0].endswith("DrawLine takes exactly 3 arguments.")


@pytest.mark.parametrize(
    "expr, message",
    [
        ("GetActualX(1)", "Function 'GetActualX' does not take arguments"),
        ("IsBrushColor()", "Function 'IsBrushColor' requires 1 argument"),
        ('IsCanvasColor("Red", 1)', "Function 'IsCanvasColor' requires 3 arguments"),
    ],
)
def test_function_arity(expr: str, message: str):
    log_feature("built-in arity")
    _, errors = parse_code(f"Spawn(0, 0)\nx <- {expr}")
    assert len(errors) == 1
    assert errors[0].endswith(message)


def test_unknown_function_is_a_parse_error():
    log_feature("unknown function")
    _, errors = parse_code("Spawn(0, 0)\nx <- foo(1)")
    assert errors == ["[Line 2] Error at 'foo': Unknown function 'foo'"]


def test_recovers_at_next_line():
    log_feature("error recovery")
    program, errors = parse_code("Spawn(0, 0)\nDrawLine(1,\nSize(1)\nFill()")
    assert len(errors) == 1
    assert errors[0].startswith("[Line 2] Error at '\\n'")
    assert [type(s) for s in program.statements] == [
        ast_nodes.Spawn,
        ast_nodes.Size,
        ast_nodes.Fill,
    ]


def test_trailing_tokens_after_statement():
    program, errors = parse_code("Spawn(0, 0) extra\nFill()")
    assert errors == ["[Line 1] Error at 'extra': Expected end of line after Spawn."]
    assert [type(s) for s in program.statements] == [ast_nodes.Spawn, ast_nodes.Fill]
    assert program.labels == {}


def test_unknown_statement():
    _, errors = parse_code("Spawn(0, 0)\n5 <- 3")
    assert errors == [
        "[Line 2] Error at '5': Expected a statement, assignment or label."
    ]
