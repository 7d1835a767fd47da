"""Scanner for the CODE language.

Source text is split into lexemes by a Lark lexer configured with the
terminal definitions below. Each Lark token is then classified into a
:class:`~codelang.tokens.Token`: identifiers are looked up in the keyword
table and literal payloads are evaluated.

Lexical errors never stop the scan. Malformed numbers, literals and escape
codes are matched by dedicated terminals and reported, and characters that
no terminal accepts are reported and skipped; lexing then resumes on the
text after the offending character.
"""

from __future__ import annotations

from typing import List, Optional

from lark import Lark, Token as LarkToken, UnexpectedCharacters

from .errors import ErrorReporter
from .tokens import KEYWORDS, Token, TokenKind
from .types import INT_MAX, CharVal


SCANNER_GRAMMAR = r"""
    start: (IDENTIFIER | NUMBER
           | STRING_LITERAL | UNTERMINATED_STRING
           | CHAR_LITERAL | UNTERMINATED_CHAR | ESCAPE_CODE
           | LEFT_PAREN | RIGHT_PAREN | COMMA | COLON | SEMICOLON
           | PLUS | MINUS | STAR | SLASH | PERCENT | AMPERSAND | DOLLAR
           | EQUAL_EQUAL | EQUAL | NOT_EQUAL | LESS_EQUAL | LESS
           | GREATER_EQUAL | GREATER)*

    IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/
    // Letters glued to a number are kept in the lexeme and rejected later
    NUMBER: /[0-9]+(?:\.[0-9]+)?[A-Za-z0-9_]*/

    STRING_LITERAL: /"[^"]*"/
    UNTERMINATED_STRING: /"[^"]*\Z/
    CHAR_LITERAL: /'[^']*'/
    UNTERMINATED_CHAR: /'[^']*\Z/
    ESCAPE_CODE: /\[(?:\]|[^\]\n]*)\]/

    LEFT_PAREN: "("
    RIGHT_PAREN: ")"
    COMMA: ","
    COLON: ":"
    SEMICOLON: ";"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    PERCENT: "%"
    AMPERSAND: "&"
    DOLLAR: "$"
    EQUAL_EQUAL: "=="
    EQUAL: "="
    NOT_EQUAL: "<>"
    LESS_EQUAL: "<="
    LESS: "<"
    GREATER_EQUAL: ">="
    GREATER: ">"

    COMMENT: /(?:#|\/\/)[^\n]*/
    WS: /[ \t\f\r\n]+/
    %ignore COMMENT
    %ignore WS
"""


CODE_LEXER = Lark(
    SCANNER_GRAMMAR,
    parser='lalr',
    lexer='basic',
)


class Scanner:
    """Converts CODE source text into a list of tokens."""
    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.tokens: List[Token] = []

    def scan_tokens(self) -> List[Token]:
        """Lex the whole source, resuming after each unexpected character.

        Every resume starts a new Lark lex over the remaining text, so the
        cost grows quadratically with the number of bad characters. Programs
        are small enough for this not to matter.
        """
        offset = 0
        line = 1
        while True:
            try:
                for raw in CODE_LEXER.lex(self.source[offset:]):
                    self.add_token(raw, line + raw.line - 1)
                break
            except UnexpectedCharacters as e:
                line += e.line - 1
                self.reporter.error(line, 'Unexpected character.')
                offset += e.pos_in_stream + 1
        self.tokens.append(Token(TokenKind.EOF, '', None, self.source.count('\n') + 1))
        return self.tokens

    def add_token(self, raw: LarkToken, line: int) -> None:
        text = str(raw)
        kind = raw.type
        if kind == 'IDENTIFIER':
            self.tokens.append(Token(KEYWORDS.get(text, TokenKind.IDENTIFIER), text, None, line))
            return
        if kind == 'NUMBER':
            if any(ch.isalpha() or ch == '_' for ch in text):
                self.reporter.error(line, 'Invalid number.')
                return
            value = float(text) if '.' in text else int(text)
            if isinstance(value, int) and value > INT_MAX:
                self.reporter.error(line, 'Integer literal out of range.')
                return
            self.tokens.append(Token(TokenKind.NUMBER, text, value, line))
            return
        if kind == 'STRING_LITERAL':
            self.tokens.append(Token(TokenKind.STRING_LITERAL, text, text[1:-1], line))
            return
        if kind in ('UNTERMINATED_STRING', 'UNTERMINATED_CHAR'):
            # the literal swallowed the rest of the input
            self.reporter.error(line + text.count('\n'), 'Unterminated string.')
            return
        if kind == 'CHAR_LITERAL':
            body = text[1:-1]
            if len(body) != 1:
                self.reporter.error(line, 'Invalid character literal.')
                return
            self.tokens.append(Token(TokenKind.CHAR_LITERAL, text, CharVal(body), line))
            return
        if kind == 'ESCAPE_CODE':
            body = text[1:-1]
            if len(body) != 1:
                self.reporter.error(line, 'Invalid escape code.')
                return
            self.tokens.append(Token(TokenKind.ESCAPE_CODE, text, CharVal(body), line))
            return
        self.tokens.append(Token(TokenKind[kind], text, None, line))


def scan(source: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    """Scan ``source`` into tokens terminated by a single EOF token."""
    return Scanner(source, reporter).scan_tokens()
