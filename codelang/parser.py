"""Parser for the CODE language.

A recursive-descent parser turning the token list produced by
:mod:`codelang.scanner` into a list of statements. Expressions are parsed
by precedence climbing, one method per precedence level, from
``assignment`` (lowest) down to ``primary`` (highest).

A malformed statement does not end the parse. The error is reported, the
parser skips ahead to the next statement boundary and the statement is
replaced by ``None`` in the result. The only exception is a second
``BEGIN CODE``, which stops parsing altogether.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from .ast import (
    Assign, Binary, Block, Declaration, DeclarationGroup, Display, Expr,
    ExpressionStmt, Grouping, If, Literal, Logical, NewLine, Scan, Stmt,
    Unary, Variable, While,
)
from .errors import ErrorReporter, FatalParseError, ParseError
from .tokens import TYPE_KEYWORDS, Token, TokenKind
from .types import TypeTag


TYPE_TAGS = {
    TokenKind.INT: TypeTag.INT,
    TokenKind.FLOAT: TypeTag.FLOAT,
    TokenKind.CHAR: TypeTag.CHAR,
    TokenKind.STRING: TypeTag.STRING,
    TokenKind.BOOL: TypeTag.BOOL,
}

# Tokens a statement may start with, used to resynchronize after an error
STATEMENT_BOUNDARIES = frozenset(TYPE_KEYWORDS) | {
    TokenKind.IF,
    TokenKind.WHILE,
    TokenKind.FOR,
    TokenKind.DISPLAY,
    TokenKind.SCAN,
    TokenKind.BEGIN,
    TokenKind.END,
}

EXPRESSION_STARTS = frozenset({
    TokenKind.IDENTIFIER,
    TokenKind.NUMBER,
    TokenKind.STRING_LITERAL,
    TokenKind.CHAR_LITERAL,
    TokenKind.ESCAPE_CODE,
    TokenKind.TRUE,
    TokenKind.FALSE,
    TokenKind.NULL,
    TokenKind.LEFT_PAREN,
    TokenKind.NOT,
    TokenKind.MINUS,
    TokenKind.DOLLAR,
})


class BlockState(Enum):
    NOT_STARTED = 'not started'
    IN_BLOCK = 'in block'
    CLOSED = 'closed'


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        self.tokens = tokens
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.current = 0
        self.block_state = BlockState.NOT_STARTED
        # one flag per open block: has an executable statement been seen?
        self.executable_seen: List[bool] = [False]

    def parse(self) -> List[Optional[Stmt]]:
        statements: List[Optional[Stmt]] = []
        while not self.is_at_end():
            try:
                statements.append(self.declaration())
            except FatalParseError:
                self.reporter.had_fatal_error = True
                statements.append(None)
                break
        return statements

    # Statements

    def declaration(self) -> Optional[Stmt]:
        start = self.current
        try:
            if self.match(*TYPE_KEYWORDS):
                type_token = self.previous()
                stmt = self.var_declaration(type_token)
                if self.executable_seen[-1]:
                    self.reporter.token_error(
                        type_token, 'Declarations must come before executable statements.')
                    return None
                return stmt
            stmt = self.statement()
            # a bare '$' only terminates the previous statement
            if not isinstance(stmt, NewLine):
                self.executable_seen[-1] = True
            return stmt
        except FatalParseError:
            raise
        except ParseError:
            self.synchronize(start)
            return None

    def var_declaration(self, type_token: Token) -> Stmt:
        tag = TYPE_TAGS[type_token.kind]
        declarations = [self.declarator(tag)]
        while self.match(TokenKind.COMMA):
            declarations.append(self.declarator(tag))
        if len(declarations) == 1:
            return declarations[0]
        return DeclarationGroup(declarations)

    def declarator(self, tag: TypeTag) -> Declaration:
        name = self.consume(TokenKind.IDENTIFIER, 'Expect variable name.')
        initializer = None
        if self.match(TokenKind.EQUAL):
            initializer = self.expression()
        return Declaration(tag, name, initializer)

    def statement(self) -> Stmt:
        if self.match(TokenKind.BEGIN):
            return self.code_block()
        if self.match(TokenKind.IF):
            return self.if_statement()
        if self.match(TokenKind.WHILE):
            return self.while_statement()
        if self.match(TokenKind.FOR):
            return self.for_statement()
        if self.match(TokenKind.DISPLAY):
            return self.display_statement()
        if self.match(TokenKind.SCAN):
            return self.scan_statement()
        if self.match(TokenKind.DOLLAR):
            return NewLine()
        return ExpressionStmt(self.expression())

    def code_block(self) -> Stmt:
        begin = self.previous()
        self.consume(TokenKind.CODE, "Expect 'CODE' after 'BEGIN'.")
        if self.block_state is not BlockState.NOT_STARTED:
            raise self.fatal(begin, "Only one 'BEGIN CODE' block is allowed.")
        self.block_state = BlockState.IN_BLOCK
        statements = self.body(TokenKind.CODE)
        self.block_state = BlockState.CLOSED
        return Block(statements)

    def scoped_block(self, kind: TokenKind) -> Block:
        self.consume(TokenKind.BEGIN, f"Expect 'BEGIN {kind.name}' before block.")
        self.consume(kind, f"Expect 'BEGIN {kind.name}' before block.")
        return Block(self.body(kind))

    def body(self, kind: TokenKind) -> List[Optional[Stmt]]:
        statements: List[Optional[Stmt]] = []
        self.executable_seen.append(False)
        try:
            while not self.check_end(kind) and not self.is_at_end():
                statements.append(self.declaration())
        finally:
            self.executable_seen.pop()
        self.consume(TokenKind.END, f"Expect 'END {kind.name}' after block.")
        self.consume(kind, f"Expect 'END {kind.name}' after block.")
        return statements

    def if_statement(self) -> Stmt:
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'IF'.")
        condition = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.scoped_block(TokenKind.IF)
        else_branch = None
        if self.match(TokenKind.ELSE):
            if self.match(TokenKind.IF):
                else_branch = self.if_statement()
            else:
                else_branch = self.scoped_block(TokenKind.IF)
        return If(condition, then_branch, else_branch)

    def while_statement(self) -> Stmt:
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'WHILE'.")
        condition = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.scoped_block(TokenKind.WHILE)
        return While(condition, body)

    def for_statement(self) -> Stmt:
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'FOR'.")
        initializer: Optional[Stmt] = None
        if self.match(*TYPE_KEYWORDS):
            initializer = self.var_declaration(self.previous())
        elif not self.check(TokenKind.SEMICOLON):
            initializer = ExpressionStmt(self.expression())
        self.consume(TokenKind.SEMICOLON, "Expect ';' after loop initializer.")

        condition: Optional[Expr] = None
        if not self.check(TokenKind.SEMICOLON):
            condition = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check(TokenKind.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after for clauses.")

        body: Stmt = self.scoped_block(TokenKind.FOR)
        if increment is not None:
            body = Block([body, ExpressionStmt(increment)])
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block([initializer, body])
        return body

    def display_statement(self) -> Stmt:
        self.consume(TokenKind.COLON, "Expect ':' after 'DISPLAY'.")
        return Display(self.expression())

    def scan_statement(self) -> Stmt:
        self.consume(TokenKind.COLON, "Expect ':' after 'SCAN'.")
        name = self.consume(TokenKind.IDENTIFIER, 'Expect variable name.')
        return Scan(name)

    # Expressions

    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()
        if self.match(TokenKind.EQUAL):
            equals = self.previous()
            value = self.assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # reported only; the statement is still usable for recovery
            self.reporter.token_error(equals, 'Invalid assignment target.')
        return expr

    def logic_or(self) -> Expr:
        expr = self.logic_and()
        while self.match(TokenKind.OR):
            operator = self.previous()
            right = self.logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def logic_and(self) -> Expr:
        expr = self.equality()
        while self.match(TokenKind.AND):
            operator = self.previous()
            right = self.equality()
            expr = Logical(expr, operator, right)
        return expr

    def equality(self) -> Expr:
        expr = self.comparison()
        while self.match(TokenKind.NOT_EQUAL, TokenKind.EQUAL_EQUAL):
            operator = self.previous()
            right = self.comparison()
            expr = Binary(expr, operator, right)
        return expr

    def comparison(self) -> Expr:
        expr = self.term()
        while self.match(TokenKind.GREATER, TokenKind.GREATER_EQUAL,
                         TokenKind.LESS, TokenKind.LESS_EQUAL):
            operator = self.previous()
            right = self.term()
            expr = Binary(expr, operator, right)
        return expr

    def term(self) -> Expr:
        expr = self.factor()
        while self.match(TokenKind.PLUS, TokenKind.MINUS, TokenKind.AMPERSAND) or self.match_join():
            operator = self.previous()
            right = self.factor()
            expr = Binary(expr, operator, right)
        return expr

    def match_join(self) -> bool:
        """Consume ``$`` as the new-line join operator.

        ``$`` only joins when the operand after it starts on the same line.
        Otherwise it is left for the statement parser as a ``NewLine``.
        """
        if not self.check(TokenKind.DOLLAR):
            return False
        dollar = self.peek()
        following = self.tokens[self.current + 1]
        if following.kind not in EXPRESSION_STARTS or following.line != dollar.line:
            return False
        self.advance()
        return True

    def factor(self) -> Expr:
        expr = self.unary()
        while self.match(TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT):
            operator = self.previous()
            right = self.unary()
            expr = Binary(expr, operator, right)
        return expr

    def unary(self) -> Expr:
        if self.match(TokenKind.NOT, TokenKind.MINUS):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)
        return self.primary()

    def primary(self) -> Expr:
        if self.match(TokenKind.FALSE):
            return Literal(False)
        if self.match(TokenKind.TRUE):
            return Literal(True)
        if self.match(TokenKind.NULL):
            return Literal(None)
        if self.match(TokenKind.NUMBER, TokenKind.STRING_LITERAL,
                      TokenKind.CHAR_LITERAL, TokenKind.ESCAPE_CODE):
            return Literal(self.previous().literal)
        if self.match(TokenKind.DOLLAR):
            return Literal('\n')
        if self.match(TokenKind.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenKind.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), 'Expect expression.')

    # Token helpers

    def match(self, *kinds: TokenKind) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def consume(self, kind: TokenKind, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise self.error(self.peek(), message)

    def check(self, kind: TokenKind) -> bool:
        if self.is_at_end():
            return False
        return self.peek().kind is kind

    def check_end(self, kind: TokenKind) -> bool:
        if not self.check(TokenKind.END):
            return False
        return self.tokens[self.current + 1].kind is kind

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().kind is TokenKind.EOF

    def peek(self) -> Token:
        return self.tokens[self.current]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def error(self, token: Token, message: str) -> ParseError:
        self.reporter.token_error(token, message)
        return ParseError(token, message)

    def fatal(self, token: Token, message: str) -> FatalParseError:
        self.reporter.token_error(token, message)
        return FatalParseError(token, message)

    def synchronize(self, start: int) -> None:
        """Skip tokens until the next statement boundary."""
        if self.current == start:
            self.advance()
        while not self.is_at_end():
            if self.peek().kind in STATEMENT_BOUNDARIES:
                return
            self.advance()


def parse(tokens: List[Token], reporter: Optional[ErrorReporter] = None) -> List[Optional[Stmt]]:
    """Parse a token list into statements; ``None`` marks a failed statement."""
    return Parser(tokens, reporter).parse()
