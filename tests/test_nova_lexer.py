import pytest

from nova.nova_lexer import Lexer, tokenize
from nova.nova_token import Token, TokenType, lookup_ident, KEYWORDS


def types(source):
    return [t.type for t in tokenize(source)]


def test_next_token_covers_every_operator_and_delimiter():
    src = "=+-!*/<>==!=,;(){}->"
    expected = [
        TokenType.ASSIGN, TokenType.PLUS, TokenType.MINUS, TokenType.BANG,
        TokenType.ASTERISK, TokenType.SLASH, TokenType.LT, TokenType.GT,
        TokenType.EQ, TokenType.NOT_EQ, TokenType.COMMA, TokenType.SEMICOLON,
        TokenType.LPAREN, TokenType.RPAREN, TokenType.LBRACE, TokenType.RBRACE,
        TokenType.ARROW, TokenType.EOF,
    ]
    assert types(src) == expected


def test_realistic_line():
    src = "let add = fn(x, y) { x + y }; add(2, 10)"
    toks = tokenize(src)
    assert [(t.type, t.literal) for t in toks] == [
        (TokenType.LET, "let"),
        (TokenType.IDENT, "add"),
        (TokenType.ASSIGN, "="),
        (TokenType.FUNCTION, "fn"),
        (TokenType.LPAREN, "("),
        (TokenType.IDENT, "x"),
        (TokenType.COMMA, ","),
        (TokenType.IDENT, "y"),
        (TokenType.RPAREN, ")"),
        (TokenType.LBRACE, "{"),
        (TokenType.IDENT, "x"),
        (TokenType.PLUS, "+"),
        (TokenType.IDENT, "y"),
        (TokenType.RBRACE, "}"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.IDENT, "add"),
        (TokenType.LPAREN, "("),
        (TokenType.INT, 2),
        (TokenType.COMMA, ","),
        (TokenType.INT, 10),
        (TokenType.RPAREN, ")"),
        (TokenType.EOF, ""),
    ]


@pytest.mark.parametrize("word, expected", [
    ("fn", TokenType.FUNCTION),
    ("let", TokenType.LET),
    ("mut", TokenType.MUT),
    ("true", TokenType.TRUE),
    ("false", TokenType.FALSE),
    ("if", TokenType.IF),
    ("else", TokenType.ELSE),
    ("return", TokenType.RETURN),
    ("unsafe", TokenType.UNSAFE),
    ("zone", TokenType.ZONE),
    ("letter", TokenType.IDENT),
    ("_private", TokenType.IDENT),
    ("café", TokenType.IDENT),
])
def test_keyword_lookup(word, expected):
    assert lookup_ident(word) is expected
    assert tokenize(word)[0].type is expected


def test_keyword_table_is_closed():
    assert set(KEYWORDS) == {"fn", "let", "mut", "true", "false", "if", "else", "return", "unsafe", "zone"}


def test_identifiers_stop_at_digits():
    # Identifiers are letters and underscores only; digits start a new token.
    toks = tokenize("abc123")
    assert [(t.type, t.literal) for t in toks[:2]] == [(TokenType.IDENT, "abc"), (TokenType.INT, 123)]


def test_integers_are_scanned_as_python_ints():
    tok = tokenize("9223372036854775807")[0]
    assert tok.type is TokenType.INT
    assert tok.literal == 9223372036854775807
    # Out-of-range literals are left for the parser to reject.
    assert tokenize("99999999999999999999")[0].literal == 99999999999999999999


def test_two_char_operators_need_adjacent_characters():
    assert types("= =") == [TokenType.ASSIGN, TokenType.ASSIGN, TokenType.EOF]
    assert types("- >") == [TokenType.MINUS, TokenType.GT, TokenType.EOF]
    assert types("!x") == [TokenType.BANG, TokenType.IDENT, TokenType.EOF]


@pytest.mark.parametrize("ch", ["@", "#", "$", "\"", "[", ".", "\0"])
def test_unknown_characters_are_illegal(ch):
    tok = tokenize(ch)[0]
    assert tok.type is TokenType.ILLEGAL
    assert tok.literal == ch


def test_whitespace_is_skipped():
    assert types(" \t\r\n 5 \n") == [TokenType.INT, TokenType.EOF]


def test_eof_repeats_forever():
    lexer = Lexer("x")
    assert lexer.next_token().type is TokenType.IDENT
    for _ in range(3):
        assert lexer.next_token().type is TokenType.EOF


def test_empty_source_is_only_eof():
    assert tokenize("") == [Token(TokenType.EOF, "", 1, 1)]


def test_positions_are_one_based_and_track_lines():
    toks = tokenize("let x\n  = 10")
    assert [(t.line, t.col) for t in toks] == [(1, 1), (1, 5), (2, 3), (2, 5), (2, 7)]


def test_token_display_forms():
    let_tok, name, _, num, eof = tokenize("let x = 5")
    assert str(let_tok) == "let"
    assert str(name) == "x"
    assert str(num) == "5"
    assert name.describe() == "IDENT(x)"
    assert num.describe() == "INT(5)"
    assert let_tok.describe() == "'let'"
    assert eof.describe() == "EOF"
    assert str(TokenType.LBRACE) == "{"


def test_tokens_are_immutable():
    tok = tokenize("x")[0]
    with pytest.raises(AttributeError):
        tok.literal = "y"
