"""CLI entry point for the CODE interpreter.

Usage:
    python -m codelang [-v|-vv|-vvv] <program_file>
    python -m codelang [-v...]
    python -m codelang --emit-ast <program_file>
    python -m codelang [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .code file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive prompt is started; each line is run
as its own program against variables that persist for the session.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from .interpreter import parse_program, Interpreter
from .ast_json import ast_to_obj, ast_from_obj
from .errors import ErrorReporter


def run_prompt(interpreter: Interpreter, reporter: ErrorReporter) -> None:
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            break
        statements = parse_program(line, reporter)
        if not reporter.had_fatal_error:
            interpreter.interpret(statements)
        reporter.reset()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="CODE language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='CODE_FILE', help='emit AST JSON for the given .code file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='CODE program file to execute')
    args = parser.parse_args(argv)
    reporter = ErrorReporter()

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        if not program_file.exists():
            print(f"Error: file {program_file} not found", file=sys.stderr)
            sys.exit(1)
        with open(program_file, 'r', encoding='utf-8') as f:
            source = f.read()
        statements = parse_program(source, reporter)
        if reporter.had_error:
            sys.exit(1)
        obj = ast_to_obj(statements)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        statements = ast_from_obj(data)
        interpreter = Interpreter(debug_level=args.v, reporter=reporter)
        try:
            ok = interpreter.interpret(statements)
        finally:
            interpreter.close()
        if not ok:
            sys.exit(1)
        return

    interpreter = Interpreter(debug_level=args.v, reporter=reporter)
    try:
        # Interactive mode
        if not args.program:
            run_prompt(interpreter, reporter)
            return

        program_file = Path(args.program)
        if not program_file.exists():
            print(f"Error: file {program_file} not found", file=sys.stderr)
            sys.exit(1)
        with open(program_file, 'r', encoding='utf-8') as f:
            source = f.read()
        statements = parse_program(source, reporter)
        if reporter.had_fatal_error:
            sys.exit(1)
        ok = interpreter.interpret(statements)
    finally:
        interpreter.close()
    if not ok or reporter.had_error:
        sys.exit(1)


if __name__ == '__main__':
    main()
