"""Type definitions and helpers for CODE.

This module defines the runtime type system used by the interpreter: the
declared type tags, the character value type, and utilities for checking
values against a tag, printing values and comparing them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class TypeTag(Enum):
    """The fixed declared type of a variable binding."""
    INT = 'Integer'
    FLOAT = 'Float'
    CHAR = 'Character'
    STRING = 'String'
    BOOL = 'Boolean'


class CharVal(str):
    """A CODE character value.

    Characters are one-character strings that keep a distinct runtime type
    so that ``CHAR`` and ``STRING`` declarations can be told apart.
    """
    def __new__(cls, value: str) -> 'CharVal':
        if len(value) != 1:
            raise ValueError(f"character value must be exactly one character, got {value!r}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"CharVal({str.__repr__(self)})"


INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def wrap_int(value: int) -> int:
    """Wrap an integer into the 32-bit two's complement range."""
    return (value - INT_MIN) % 2 ** 32 + INT_MIN


def is_number(value: Any) -> bool:
    # bool is a subclass of int; it is not a number in CODE
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    """Return the CODE type name of a runtime value."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return TypeTag.BOOL.value
    if isinstance(value, int):
        return TypeTag.INT.value
    if isinstance(value, float):
        return TypeTag.FLOAT.value
    if isinstance(value, CharVal):
        return TypeTag.CHAR.value
    if isinstance(value, str):
        return TypeTag.STRING.value
    return type(value).__name__


def check_value(value: Any, tag: TypeTag) -> Any:
    """Check a runtime value against a declared type tag.

    Returns the value to store, which may be widened: an ``int`` stored in
    a ``FLOAT`` binding becomes a ``float`` and a character stored in a
    ``STRING`` binding becomes a plain ``str``. ``None`` is accepted by
    every tag. Raises a plain ``TypeError`` on mismatch; callers turn it
    into a runtime error carrying the offending token.
    """
    if value is None:
        return None
    if tag is TypeTag.INT:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif tag is TypeTag.FLOAT:
        if isinstance(value, float):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return float(value)
    elif tag is TypeTag.CHAR:
        if isinstance(value, CharVal):
            return value
    elif tag is TypeTag.STRING:
        if isinstance(value, str):
            return str(value)
    elif tag is TypeTag.BOOL:
        if isinstance(value, bool):
            return value
    raise TypeError(f"expected {tag.value}, got {type_name(value)}")


def to_string(value: Any) -> str:
    """Convert a CODE value to its printed form."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    if isinstance(value, float):
        text = repr(value)
        if text.endswith('.0'):
            text = text[:-2]
        return text
    return str(value)


def is_truthy(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def values_equal(a: Any, b: Any) -> bool:
    """Value equality; values of different runtime types are never equal."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    return type_name(a) == type_name(b) and a == b


def parse_input(text: str) -> Any:
    """Coerce one line of user input to the most specific CODE value.

    Tries, in order: a boolean keyword, an integer, a float, a single
    character, and falls back to the raw string.
    """
    upper = text.upper()
    if upper in ('TRUE', 'FALSE'):
        return upper == 'TRUE'
    number = _parse_int(text)
    if number is not None:
        return number
    real = _parse_float(text)
    if real is not None:
        return real
    if len(text) == 1:
        return CharVal(text)
    return text


def _parse_int(text: str) -> Optional[int]:
    body = text[1:] if text[:1] in ('+', '-') else text
    if not body or not (body.isascii() and body.isdigit()):
        return None
    value = int(text)
    if value < INT_MIN or value > INT_MAX:
        return None
    return value


def _parse_float(text: str) -> Optional[float]:
    # float() also takes underscores and surrounding whitespace
    if '_' in text or not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None
