"""Run source text through every stage, stopping at the first that fails."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .ast import Program
from .interpreter import Interpreter, InterpreterError
from .lexer import Token, tokenize
from .parser import parse
from .semantic import analyze

STAGES = ("lex", "parse", "semantic", "runtime")


@dataclass
class RunResult:
    stage: str  # failing stage, or "ok"
    errors: List[str] = field(default_factory=list)
    tokens: List[Token] = field(default_factory=list)
    program: Optional[Program] = None
    interpreter: Optional[Interpreter] = None

    @property
    def ok(self) -> bool:
        return self.stage == "ok"


def run_source(
    source: str,
    canvas_size: int,
    max_steps: Optional[int] = None,
    on_step: Optional[Callable[[str], None]] = None,
) -> RunResult:
    """
    Lex, parse, check and execute ``source`` on a ``canvas_size`` canvas.

    ``on_step`` is called with each stage name before it runs. A runtime
    failure still returns the interpreter so the partial canvas can be shown.
    """
    step = on_step or (lambda _stage: None)

    step("lexing")
    tokens, errors = tokenize(source)
    if errors:
        return RunResult("lex", errors, tokens)

    step("parsing")
    program, errors = parse(tokens)
    if errors:
        return RunResult("parse", errors, tokens, program)

    step("semantic checks")
    errors = analyze(program)
    if errors:
        return RunResult("semantic", errors, tokens, program)

    step("executing")
    interpreter = None
    try:
        interpreter = Interpreter(program, canvas_size)
        interpreter.execute(max_steps=max_steps)
    except InterpreterError as e:
        return RunResult("runtime", [str(e)], tokens, program, interpreter)
    return RunResult("ok", [], tokens, program, interpreter)


__all__ = ["RunResult", "STAGES", "run_source"]
