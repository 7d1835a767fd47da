"""Abstract Syntax Tree (AST) definitions for the CODE language.

The tree has two closed node families. :class:`Expr` nodes produce a value
and :class:`Stmt` nodes produce effects. Nodes are built once by the parser
and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .tokens import Token
from .types import TypeTag


@dataclass(frozen=True)
class Expr:
    """Base class for expression nodes."""


@dataclass(frozen=True)
class Literal(Expr):
    value: Any  # int, float, bool, CharVal, str or None


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token  # AND or OR
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Stmt:
    """Base class for statement nodes."""


@dataclass(frozen=True)
class ExpressionStmt(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Display(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Scan(Stmt):
    name: Token


@dataclass(frozen=True)
class Declaration(Stmt):
    tag: TypeTag
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class DeclarationGroup(Stmt):
    declarations: List[Declaration] = field(default_factory=list)


@dataclass(frozen=True)
class Block(Stmt):
    # None entries are statements that failed to parse
    statements: List[Optional[Stmt]] = field(default_factory=list)


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class NewLine(Stmt):
    pass
