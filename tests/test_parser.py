from codelang.ast import (
    Assign, Binary, Block, Declaration, DeclarationGroup, Display,
    ExpressionStmt, If, Literal, NewLine, Scan, Unary, Variable, While,
)
from codelang.errors import ErrorReporter
from codelang.parser import parse
from codelang.scanner import scan
from codelang.tokens import TokenKind
from codelang.types import TypeTag


def parse_source(source, reporter=None):
    if reporter is None:
        reporter = ErrorReporter()
    return parse(scan(source, reporter), reporter)


def test_precedence_climbing():
    [stmt] = parse_source('DISPLAY: 1 + 2 * 3')
    assert isinstance(stmt, Display)
    expr = stmt.expression
    assert isinstance(expr, Binary)
    assert expr.operator.kind is TokenKind.PLUS
    assert expr.left == Literal(1)
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.kind is TokenKind.STAR


def test_unary_binds_tighter_than_factor():
    [stmt] = parse_source('DISPLAY: -a / 7')
    expr = stmt.expression
    assert expr.operator.kind is TokenKind.SLASH
    assert isinstance(expr.left, Unary)


def test_assignment_is_right_associative():
    [stmt] = parse_source('x = y = 4')
    assert isinstance(stmt, ExpressionStmt)
    outer = stmt.expression
    assert isinstance(outer, Assign)
    assert outer.name.lexeme == 'x'
    assert isinstance(outer.value, Assign)
    assert outer.value.name.lexeme == 'y'


def test_invalid_assignment_target_is_reported():
    reporter = ErrorReporter()
    statements = parse_source('1 = 2', reporter)
    assert reporter.messages == ["line 1 Error at '=': Invalid assignment target."]
    assert statements == [ExpressionStmt(Literal(1))]


def test_declaration_group_shares_type():
    [stmt] = parse_source('INT x = 5, y, z = 10')
    assert isinstance(stmt, DeclarationGroup)
    assert [d.name.lexeme for d in stmt.declarations] == ['x', 'y', 'z']
    assert all(d.tag is TypeTag.INT for d in stmt.declarations)
    assert stmt.declarations[1].initializer is None


def test_single_declaration():
    [stmt] = parse_source("CHAR c = 'x'")
    assert isinstance(stmt, Declaration)
    assert stmt.tag is TypeTag.CHAR


def test_dollar_after_declaration_is_a_newline_statement():
    statements = parse_source('INT a = 5$DISPLAY: a + 1')
    assert isinstance(statements[0], Declaration)
    assert statements[1] == NewLine()
    assert isinstance(statements[2], Display)


def test_dollar_between_operands_joins():
    [stmt] = parse_source('DISPLAY: 1 $ 2')
    assert stmt.expression.operator.kind is TokenKind.DOLLAR


def test_dollar_operand_is_newline_literal():
    [stmt] = parse_source('DISPLAY: "a" & $ & "b"')
    assert stmt.expression.left.right == Literal('\n')


def test_code_block():
    [block] = parse_source('BEGIN CODE\nINT a = 1\nDISPLAY: a\nEND CODE')
    assert isinstance(block, Block)
    assert isinstance(block.statements[0], Declaration)
    assert isinstance(block.statements[1], Display)


def test_second_begin_code_is_terminal():
    reporter = ErrorReporter()
    statements = parse_source(
        'BEGIN CODE\nDISPLAY: 1\nEND CODE\nBEGIN CODE\nDISPLAY: 2\nEND CODE', reporter)
    assert reporter.had_fatal_error
    assert reporter.messages == ["line 4 Error at 'BEGIN': Only one 'BEGIN CODE' block is allowed."]
    assert isinstance(statements[0], Block)
    assert statements[-1] is None


def test_nested_begin_code_is_terminal():
    reporter = ErrorReporter()
    parse_source('BEGIN CODE\nBEGIN CODE\nEND CODE\nEND CODE', reporter)
    assert reporter.had_fatal_error


def test_declaration_after_executable_statement():
    reporter = ErrorReporter()
    statements = parse_source('BEGIN CODE\nDISPLAY: 1\nINT a = 2\nEND CODE', reporter)
    assert reporter.messages == [
        "line 3 Error at 'INT': Declarations must come before executable statements."
    ]
    assert statements[0].statements[1] is None


def test_declarations_allowed_at_top_of_nested_block():
    reporter = ErrorReporter()
    parse_source('BEGIN CODE\nDISPLAY: 1\nIF (TRUE)\nBEGIN IF\nINT a = 2\nEND IF\nEND CODE', reporter)
    assert not reporter.had_error


def test_missing_colon_recovers_at_next_statement():
    reporter = ErrorReporter()
    statements = parse_source('DISPLAY x\nDISPLAY: 2', reporter)
    assert reporter.messages == ["line 1 Error at 'x': Expect ':' after 'DISPLAY'."]
    assert statements[0] is None
    assert isinstance(statements[1], Display)


def test_error_at_end():
    reporter = ErrorReporter()
    parse_source('IF (TRUE)\nBEGIN IF\nDISPLAY: 1', reporter)
    assert reporter.messages == ["line 3 Error at end: Expect 'END IF' after block."]


def test_else_if_chain():
    [stmt] = parse_source(
        'IF (a) BEGIN IF DISPLAY: 1 END IF\n'
        'ELSE IF (b) BEGIN IF DISPLAY: 2 END IF\n'
        'ELSE BEGIN IF DISPLAY: 3 END IF')
    assert isinstance(stmt, If)
    assert isinstance(stmt.then_branch, Block)
    nested = stmt.else_branch
    assert isinstance(nested, If)
    assert nested.condition == Variable(nested.condition.name)
    assert nested.condition.name.line == 2
    assert isinstance(nested.else_branch, Block)


def test_while_statement():
    [stmt] = parse_source('WHILE (i < 3) BEGIN WHILE i = i + 1 END WHILE')
    assert isinstance(stmt, While)
    assert isinstance(stmt.body, Block)


def test_for_desugars_to_while():
    [stmt] = parse_source('FOR (INT i = 0; i < 3; i = i + 1) BEGIN FOR DISPLAY: i END FOR')
    assert isinstance(stmt, Block)
    init, loop = stmt.statements
    assert isinstance(init, Declaration)
    assert isinstance(loop, While)
    body, increment = loop.body.statements
    assert isinstance(body, Block)
    assert isinstance(body.statements[0], Display)
    assert isinstance(increment, ExpressionStmt)
    assert isinstance(increment.expression, Assign)


def test_for_without_clauses_loops_on_true():
    [stmt] = parse_source('FOR (;;) BEGIN FOR DISPLAY: 1 END FOR')
    assert isinstance(stmt, While)
    assert stmt.condition == Literal(True)


def test_scan_statement():
    [stmt] = parse_source('SCAN: x')
    assert isinstance(stmt, Scan)
    assert stmt.name.lexeme == 'x'


def test_dollar_separated_declarations_stay_contiguous():
    reporter = ErrorReporter()
    statements = parse_source('INT a = 5$INT b = 6$DISPLAY: a + b', reporter)
    assert not reporter.had_error
    assert [type(s) for s in statements] == [Declaration, NewLine, Declaration, NewLine, Display]
