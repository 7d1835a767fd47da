from pathlib import Path

import pytest

from codelang.errors import CodeRuntimeError
from codelang.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_7_mixed_operands_halt(capsys):
    with open(EXAMPLES / 'program_7.code', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    assert interp.interpret(ast) is False
    captured = capsys.readouterr()
    # nothing after the failing statement runs
    assert captured.out.strip() == 'before'
    assert captured.err.strip() == '[line 5] Error: Can not perform operation on different datatype.'


def test_program_7_run_raises(capsys):
    with open(EXAMPLES / 'program_7.code', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    with pytest.raises(CodeRuntimeError) as excinfo:
        interp.run(ast)
    assert excinfo.value.token.line == 5
