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
from walle.semantic import Analyzer, SymbolType  # noqa: E402


def log_feature(name: str):
    print(f"[feature] {name}")


def analyze(code: str):
    tokens, lex_errors = tokenize(code)
    program, parse_errors = parse(tokens)
    assert lex_errors == [] and parse_errors == []
    return Analyzer().analyze(program)


def test_valid_program():
    log_feature("well-typed program")
    errors = analyze(
        'Spawn(0, 0)\nColor("Red")\nn <- 3\nloop\nDrawLine(1, 0, n)\n'
        "n <- n - 1\nGoTo [loop] (n > 0 && IsBrushSize(1) == 1)"
    )
    assert errors == []


def test_arithmetic_on_boolean():
    log_feature("arithmetic type mismatch")
    errors = analyze("Spawn(0, 0)\nx <- true + 1")
    assert errors == ["Semantic Error: Type mismatch in binary expression '+'."]


def test_logical_on_integers():
    errors = analyze("Spawn(0, 0)\nx <- 1 && 0")
    assert errors == ["Semantic Error: Type mismatch in binary expression '&&'."]


@pytest.mark.parametrize("expr", ["b == 1", "b == 0", "1 == b", "b != 0"])
def test_boolean_compared_with_bit_literal(expr: str):
    log_feature("boolean vs 0/1 literal")
    errors = analyze(f"Spawn(0, 0)\nb <- true\nc <- {expr}")
    assert errors == []


def test_boolean_compared_with_other_integer():
    errors = analyze("Spawn(0, 0)\nb <- true\nc <- b == 2")
    assert errors == ["Semantic Error: Type mismatch in binary expression '=='."]


def test_boolean_compared_with_integer_variable():
    errors = analyze("Spawn(0, 0)\nb <- true\none <- 1\nc <- b == one")
    assert len(errors) == 1


def test_mismatch_keeps_checking():
    errors = analyze("Spawn(0, 0)\nx <- (true + 1) + y")
    assert errors == [
        "Semantic Error: Type mismatch in binary expression '+'.",
        "Semantic Error: Undefined variable 'y'.",
        "Semantic Error: Type mismatch in binary expression '+'.",
    ]


def test_undefined_variable():
    log_feature("undefined variable")
    errors = analyze("Spawn(0, 0)\nDrawLine(1, 0, steps)")
    assert errors == ["Semantic Error: Undefined variable 'steps'."]


def test_variable_type_follows_latest_assignment():
    log_feature("flow-ordered variable types")
    assert analyze("Spawn(0, 0)\nx <- true\nx <- 4\ny <- x + 1") == []
    errors = analyze("Spawn(0, 0)\nx <- 4\nx <- true\ny <- x + 1")
    assert len(errors) == 1


def test_goto_condition_must_be_boolean():
    log_feature("goto condition type")
    errors = analyze("Spawn(0, 0)\nloop\nGoTo [loop] (1)")
    assert errors == ["Semantic Error: GoTo condition must be boolean."]


def test_direction_must_be_integer():
    errors = analyze("Spawn(0, 0)\nDrawLine(true, 0, 1)")
    assert errors == ["Semantic Error: DrawLine dirX must be an integer expression."]


def test_direction_from_variable_is_not_range_checked():
    assert analyze("Spawn(0, 0)\nd <- 2\nDrawCircle(d, 0, 1)") == []


def test_rectangle_dimensions_must_be_integer():
    errors = analyze("Spawn(0, 0)\nDrawRectangle(1, 1, 1, false, 2)")
    assert errors == [
        "Semantic Error: DrawRectangle width must be an integer expression."
    ]


def test_spawn_and_size_must_be_integer():
    errors = analyze("Spawn(true, 0)\nSize(1 > 0)")
    assert errors == [
        "Semantic Error: Spawn X must evaluate to an integer.",
        "Semantic Error: Size must be an integer expression.",
    ]


def test_string_literal_as_value():
    log_feature("string used as value")
    errors = analyze('Spawn(0, 0)\nx <- "Red"')
    assert errors == ['Semantic Error: String literal "Red" cannot be used as a value.']


def test_string_arguments_to_builtins():
    errors = analyze(
        'Spawn(0, 0)\nn <- GetColorCount("Red", 0, 0, 2, 2)\n'
        'b <- IsBrushColor("Red") == 1'
    )
    assert errors == []


def test_builtin_arguments_are_checked():
    errors = analyze("Spawn(0, 0)\nb <- IsBrushSize(missing)")
    assert errors == ["Semantic Error: Undefined variable 'missing'."]


def test_analyzer_checks_hand_built_programs():
    log_feature("standalone analyzer")
    program = ast_nodes.Program(
        [
            ast_nodes.Fill(),
            ast_nodes.Label("again"),
            ast_nodes.Label("again"),
            ast_nodes.GoTo("gone", ast_nodes.Literal(True)),
        ]
    )
    errors = Analyzer().analyze(program)
    assert errors == [
        "Semantic Error: 'Spawn' must be the first statement.",
        "Semantic Error: Duplicate label 'again'.",
        "Semantic Error: Undefined label 'gone' in GoTo.",
    ]


def test_analyzer_records_variable_types():
    analyzer = Analyzer()
    tokens, _ = tokenize("Spawn(0, 0)\nn <- 1\nok <- n < 2")
    program, _ = parse(tokens)
    analyzer.analyze(program)
    assert analyzer.variables == {
        "n": SymbolType.INTEGER,
        "ok": SymbolType.BOOLEAN,
    }


def test_unknown_function_in_hand_built_program():
    program = ast_nodes.Program(
        [
            ast_nodes.Spawn(ast_nodes.Literal(0), ast_nodes.Literal(0)),
            ast_nodes.Assign(
                "x", ast_nodes.Call("foo", (ast_nodes.Literal(1),))
            ),
        ]
    )
    assert Analyzer().analyze(program) == [
        "Semantic Error: Unknown function 'foo'."
    ]
