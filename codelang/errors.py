"""Error types and the diagnostics channel for CODE."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from codelang.tokens import Token, TokenKind


class CodeError(Exception):
    """Base class for errors raised while processing a CODE program."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class ParseError(CodeError):
    """Signals a malformed statement; the parser resynchronizes on it."""


class FatalParseError(ParseError):
    """A parse error after which no further parsing is attempted."""


class CodeRuntimeError(CodeError):
    """Exception type used to propagate CODE runtime errors."""


class ErrorReporter:
    """Collects and prints scan, parse and runtime diagnostics.

    Messages are written to ``stream`` (standard error when not given) as
    soon as they are reported, and kept in ``messages`` for callers that
    want to inspect them.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.messages: List[str] = []
        self.had_error = False
        self.had_fatal_error = False
        self.had_runtime_error = False

    def reset(self) -> None:
        self.had_error = False
        self.had_fatal_error = False
        self.had_runtime_error = False

    def error(self, line: int, message: str) -> None:
        self.report(line, '', message)

    def token_error(self, token: Token, message: str) -> None:
        if token.kind is TokenKind.EOF:
            self.report(token.line, ' at end', message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def runtime_error(self, error: CodeRuntimeError) -> None:
        self.emit(f"[line {error.token.line}] Error: {error.message}")
        self.had_runtime_error = True

    def report(self, line: int, where: str, message: str) -> None:
        self.emit(f"line {line} Error{where}: {message}")
        self.had_error = True

    def emit(self, text: str) -> None:
        self.messages.append(text)
        stream = self.stream if self.stream is not None else sys.stderr
        print(text, file=stream)
