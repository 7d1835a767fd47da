"""Interpreter for the CODE language.

This module ties the toolchain together: :func:`parse_program` scans and
parses source text, and :class:`Interpreter` walks the resulting statement
list, evaluating expressions against a chain of
:class:`~codelang.environment.Environment` frames.

Every block runs in a fresh child frame that is passed down explicitly, so
the enclosing frame is back in effect as soon as the block finishes,
whether it completes normally or a runtime error propagates out of it.
"""

from __future__ import annotations

import builtins
import math
from typing import Any, List, Optional

from .ast import (
    Assign, Binary, Block, Declaration, DeclarationGroup, Display, Expr,
    ExpressionStmt, Grouping, If, Literal, Logical, NewLine, Scan, Stmt,
    Unary, Variable, While,
)
from .environment import Environment
from .errors import CodeRuntimeError, ErrorReporter
from .parser import parse
from .scanner import scan
from .tokens import Token, TokenKind
from .types import (
    TypeTag, CharVal, check_value, is_number, is_truthy, parse_input,
    to_string, type_name, values_equal, wrap_int,
)


def parse_program(source: str, reporter: Optional[ErrorReporter] = None) -> List[Optional[Stmt]]:
    """Scan and parse CODE source text into a statement list."""
    if reporter is None:
        reporter = ErrorReporter()
    tokens = scan(source, reporter)
    return parse(tokens, reporter)


###############################################################################
# Interpreter implementation
###############################################################################


class Interpreter:
    """Core interpreter that executes a CODE statement list."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 reporter: Optional[ErrorReporter] = None):
        self.global_env = Environment()
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str) -> None:
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: List[Optional[Stmt]]) -> bool:
        """Run ``statements``, reporting the first runtime error.

        Returns False if a runtime error halted the program.
        """
        try:
            self.run(statements)
        except CodeRuntimeError as error:
            self.debug(f"runtime error at line {error.token.line}: {error.message}")
            self.reporter.runtime_error(error)
            return False
        return True

    def run(self, statements: List[Optional[Stmt]], env: Optional[Environment] = None) -> None:
        if env is None:
            env = self.global_env
        self.debug(f"run {len(statements)} statements")
        self.execute_block(statements, env)
        self.debug('run finished')

    def execute_block(self, statements: List[Optional[Stmt]], env: Environment) -> None:
        for stmt in statements:
            # placeholders left by the parser for statements that failed
            if stmt is not None:
                self.execute(stmt, env)

    def execute(self, node: Stmt, env: Environment) -> None:
        if isinstance(node, ExpressionStmt):
            self.evaluate(node.expression, env)
            return
        if isinstance(node, Display):
            value = self.evaluate(node.expression, env)
            print(to_string(value))
            return
        if isinstance(node, NewLine):
            print()
            return
        if isinstance(node, Scan):
            self.execute_scan(node, env)
            return
        if isinstance(node, Declaration):
            value = self.evaluate(node.initializer, env) if node.initializer is not None else None
            env.define(node.name, value, node.tag)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme}: {node.tag.value} = {to_string(env.get(node.name))}")
            return
        if isinstance(node, DeclarationGroup):
            for declaration in node.declarations:
                self.execute(declaration, env)
            return
        if isinstance(node, Block):
            self.execute_block(node.statements, Environment(env))
            return
        if isinstance(node, If):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                self.execute(node.then_branch, env)
            elif node.else_branch is not None:
                self.execute(node.else_branch, env)
            return
        if isinstance(node, While):
            iterations = 0
            while is_truthy(self.evaluate(node.condition, env)):
                iterations += 1
                if self.debug_level >= 3:
                    self.debug(f"loop iteration {iterations}")
                self.execute(node.body, env)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_scan(self, node: Scan, env: Environment) -> None:
        name = node.name
        tag = env.type_tag_of(name.lexeme)
        if tag is None:
            raise CodeRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
        try:
            text = builtins.input().strip()
        except EOFError:
            raise CodeRuntimeError(name, 'No input available.')
        if tag is TypeTag.STRING:
            value: Any = text
        elif tag is TypeTag.CHAR and len(text) == 1:
            value = CharVal(text)
        else:
            try:
                value = check_value(parse_input(text), tag)
            except TypeError:
                article = 'an' if tag.value[0] in 'AEIOU' else 'a'
                raise CodeRuntimeError(name, f"Input must be {article} {tag.value}.")
        env.assign(name, value)
        if self.debug_level >= 2:
            self.debug(f"scan {name.lexeme}: {tag.value} = {to_string(value)}")

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return env.get(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            stored = env.assign(node.name, value)
            if self.debug_level >= 3:
                self.debug(f"assign {node.name.lexeme} = {to_string(stored)}")
            return stored
        if isinstance(node, Logical):
            left = self.evaluate(node.left, env)
            if node.operator.kind is TokenKind.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right, env)
        if isinstance(node, Unary):
            right = self.evaluate(node.right, env)
            if node.operator.kind is TokenKind.NOT:
                return not is_truthy(right)
            if not is_number(right):
                raise CodeRuntimeError(node.operator, 'Operand must be a number.')
            if isinstance(right, int):
                return wrap_int(-right)
            return -right
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.operator, left, right)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        kind = operator.kind
        if kind is TokenKind.AMPERSAND:
            return to_string(a) + to_string(b)
        if kind is TokenKind.DOLLAR:
            return to_string(a) + '\n' + to_string(b)
        if kind is TokenKind.EQUAL_EQUAL:
            return values_equal(a, b)
        if kind is TokenKind.NOT_EQUAL:
            return not values_equal(a, b)

        if not (is_number(a) and is_number(b)):
            raise CodeRuntimeError(operator, 'Operands must be numbers.')
        if type(a) is not type(b):
            raise CodeRuntimeError(operator, 'Can not perform operation on different datatype.')

        if kind is TokenKind.GREATER:
            return a > b
        if kind is TokenKind.GREATER_EQUAL:
            return a >= b
        if kind is TokenKind.LESS:
            return a < b
        if kind is TokenKind.LESS_EQUAL:
            return a <= b

        if kind in (TokenKind.SLASH, TokenKind.PERCENT) and b == 0:
            raise CodeRuntimeError(operator, 'Division by zero.')
        if isinstance(a, float):
            if kind is TokenKind.PLUS:
                return a + b
            if kind is TokenKind.MINUS:
                return a - b
            if kind is TokenKind.STAR:
                return a * b
            if kind is TokenKind.SLASH:
                return a / b
            if kind is TokenKind.PERCENT:
                return math.fmod(a, b)
        else:
            if kind is TokenKind.PLUS:
                return wrap_int(a + b)
            if kind is TokenKind.MINUS:
                return wrap_int(a - b)
            if kind is TokenKind.STAR:
                return wrap_int(a * b)
            if kind is TokenKind.SLASH:
                return wrap_int(truncating_div(a, b))
            if kind is TokenKind.PERCENT:
                return wrap_int(a - b * truncating_div(a, b))
        raise CodeRuntimeError(operator, f"Unknown operator '{operator.lexeme}' for {type_name(a)}.")


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def run_program(source: str, debug_level: int = 0,
                reporter: Optional[ErrorReporter] = None) -> bool:
    """Convenience function to scan, parse and run a CODE program from source.

    Statements that parsed are executed even when other statements had
    errors; nothing runs after a terminal parse error. Returns True when
    the program ran without any reported error.
    """
    if reporter is None:
        reporter = ErrorReporter()
    statements = parse_program(source, reporter)
    if reporter.had_fatal_error:
        return False
    interpreter = Interpreter(debug_level=debug_level, reporter=reporter)
    try:
        interpreter.interpret(statements)
    finally:
        interpreter.close()
    return not (reporter.had_error or reporter.had_runtime_error)
