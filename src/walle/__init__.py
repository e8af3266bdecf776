from .lexer import Lexer, Token, TokenKind, LexerError, tokenize
from .parser import Parser, ParseError, parse
from .semantic import Analyzer, SymbolType, analyze
from .interpreter import Interpreter, InterpreterError, StepLimitExceeded
from .pipeline import RunResult, run_source

__all__ = [
    "Lexer",
    "Token",
    "TokenKind",
    "LexerError",
    "tokenize",
    "Parser",
    "ParseError",
    "parse",
    "Analyzer",
    "SymbolType",
    "analyze",
    "Interpreter",
    "InterpreterError",
    "StepLimitExceeded",
    "RunResult",
    "run_source",
]
