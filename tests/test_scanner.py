from codelang.errors import ErrorReporter
from codelang.scanner import scan
from codelang.tokens import TokenKind
from codelang.types import CharVal


def kinds(tokens):
    return [t.kind for t in tokens]


def test_declaration_and_display_tokens():
    tokens = scan('INT a = 5$DISPLAY: a + 1')
    assert kinds(tokens) == [
        TokenKind.INT, TokenKind.IDENTIFIER, TokenKind.EQUAL, TokenKind.NUMBER,
        TokenKind.DOLLAR, TokenKind.DISPLAY, TokenKind.COLON, TokenKind.IDENTIFIER,
        TokenKind.PLUS, TokenKind.NUMBER, TokenKind.EOF,
    ]
    assert tokens[3].literal == 5 and isinstance(tokens[3].literal, int)


def test_two_character_operators():
    tokens = scan('< <> <= > >= = ==')
    assert kinds(tokens)[:-1] == [
        TokenKind.LESS, TokenKind.NOT_EQUAL, TokenKind.LESS_EQUAL, TokenKind.GREATER,
        TokenKind.GREATER_EQUAL, TokenKind.EQUAL, TokenKind.EQUAL_EQUAL,
    ]


def test_number_literals():
    tokens = scan('42 3.14')
    assert tokens[0].literal == 42
    assert isinstance(tokens[1].literal, float)
    assert tokens[1].literal == 3.14


def test_letter_after_number_is_an_error(capsys):
    reporter = ErrorReporter()
    tokens = scan('12abc', reporter)
    assert kinds(tokens) == [TokenKind.EOF]
    assert reporter.messages == ['line 1 Error: Invalid number.']
    assert 'Invalid number.' in capsys.readouterr().err


def test_keywords_are_case_sensitive():
    tokens = scan('BEGIN CODE begin')
    assert kinds(tokens) == [TokenKind.BEGIN, TokenKind.CODE, TokenKind.IDENTIFIER, TokenKind.EOF]


def test_string_and_char_literals():
    tokens = scan('"hello world" \'c\'')
    assert tokens[0].kind is TokenKind.STRING_LITERAL
    assert tokens[0].literal == 'hello world'
    assert tokens[1].kind is TokenKind.CHAR_LITERAL
    assert tokens[1].literal == CharVal('c')


def test_invalid_char_literal():
    reporter = ErrorReporter()
    tokens = scan("'ab' x", reporter)
    assert reporter.messages == ['line 1 Error: Invalid character literal.']
    assert kinds(tokens) == [TokenKind.IDENTIFIER, TokenKind.EOF]


def test_unterminated_string_is_reported():
    reporter = ErrorReporter()
    tokens = scan('DISPLAY: "abc', reporter)
    assert kinds(tokens) == [TokenKind.DISPLAY, TokenKind.COLON, TokenKind.EOF]
    assert reporter.messages == ['line 1 Error: Unterminated string.']


def test_unexpected_character_does_not_stop_scanning():
    reporter = ErrorReporter()
    tokens = scan('a @ b\nc ? d', reporter)
    assert [t.lexeme for t in tokens[:-1]] == ['a', 'b', 'c', 'd']
    assert [t.line for t in tokens[:-1]] == [1, 1, 2, 2]
    assert reporter.messages == [
        'line 1 Error: Unexpected character.',
        'line 2 Error: Unexpected character.',
    ]


def test_escape_codes():
    reporter = ErrorReporter()
    tokens = scan('[#] [[] []] [ab]', reporter)
    assert [t.literal for t in tokens[:-1]] == ['#', '[', ']']
    assert all(t.kind is TokenKind.ESCAPE_CODE for t in tokens[:-1])
    assert reporter.messages == ['line 1 Error: Invalid escape code.']


def test_comments_and_line_numbers():
    tokens = scan('# a comment\nINT x\n"multi\nline" y')
    assert [(t.lexeme, t.line) for t in tokens[:-1]] == [
        ('INT', 2), ('x', 2), ('"multi\nline"', 3), ('y', 4),
    ]
    assert tokens[-1].kind is TokenKind.EOF
    assert tokens[-1].line == 4


def test_single_eof_for_empty_source():
    tokens = scan('')
    assert kinds(tokens) == [TokenKind.EOF]
    assert tokens[0].line == 1


def test_lowercase_boolean_literals():
    tokens = scan('true false True')
    assert kinds(tokens) == [TokenKind.TRUE, TokenKind.FALSE, TokenKind.IDENTIFIER, TokenKind.EOF]


def test_integer_literal_out_of_range():
    reporter = ErrorReporter()
    tokens = scan('2147483647 2147483648 3000000000.5', reporter)
    assert [t.literal for t in tokens[:-1]] == [2147483647, 3000000000.5]
    assert reporter.messages == ['line 1 Error: Integer literal out of range.']
