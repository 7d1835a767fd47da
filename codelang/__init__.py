# CODE language package
# This package provides a scanner, parser and tree-walking interpreter for the CODE language.
from .scanner import scan
from .parser import parse
from .interpreter import parse_program, run_program, Interpreter
from .errors import CodeRuntimeError, ErrorReporter

__all__ = [
    'scan',
    'parse',
    'parse_program',
    'run_program',
    'Interpreter',
    'CodeRuntimeError',
    'ErrorReporter',
]
