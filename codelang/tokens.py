"""Token vocabulary for the CODE language.

Tokens are produced by :mod:`codelang.scanner` and consumed by
:mod:`codelang.parser`. A token is immutable once created.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict


class TokenKind(Enum):
    # Single-character tokens.
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    COMMA = auto()
    COLON = auto()
    SEMICOLON = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    AMPERSAND = auto()
    DOLLAR = auto()

    # One or two character tokens.
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    NOT_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals.
    IDENTIFIER = auto()
    NUMBER = auto()
    STRING_LITERAL = auto()
    CHAR_LITERAL = auto()
    ESCAPE_CODE = auto()

    # Type keywords.
    INT = auto()
    FLOAT = auto()
    CHAR = auto()
    BOOL = auto()
    STRING = auto()

    # Other keywords.
    AND = auto()
    OR = auto()
    NOT = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    FOR = auto()
    BEGIN = auto()
    END = auto()
    CODE = auto()
    DISPLAY = auto()
    SCAN = auto()

    EOF = auto()


KEYWORDS: Dict[str, TokenKind] = {
    'INT': TokenKind.INT,
    'FLOAT': TokenKind.FLOAT,
    'CHAR': TokenKind.CHAR,
    'BOOL': TokenKind.BOOL,
    'STRING': TokenKind.STRING,
    'AND': TokenKind.AND,
    'OR': TokenKind.OR,
    'NOT': TokenKind.NOT,
    'TRUE': TokenKind.TRUE,
    'FALSE': TokenKind.FALSE,
    'true': TokenKind.TRUE,
    'false': TokenKind.FALSE,
    'NULL': TokenKind.NULL,
    'IF': TokenKind.IF,
    'ELSE': TokenKind.ELSE,
    'WHILE': TokenKind.WHILE,
    'FOR': TokenKind.FOR,
    'BEGIN': TokenKind.BEGIN,
    'END': TokenKind.END,
    'CODE': TokenKind.CODE,
    'DISPLAY': TokenKind.DISPLAY,
    'SCAN': TokenKind.SCAN,
}

TYPE_KEYWORDS = (
    TokenKind.INT,
    TokenKind.FLOAT,
    TokenKind.CHAR,
    TokenKind.BOOL,
    TokenKind.STRING,
)


@dataclass(frozen=True)
class Token:
    """A classified lexeme.

    ``literal`` holds the evaluated Python value for number, string and
    character tokens and is ``None`` for everything else. ``line`` is the
    1-based source line the token starts on.
    """
    kind: TokenKind
    lexeme: str
    literal: Any
    line: int

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.literal!r}, line={self.line})"
