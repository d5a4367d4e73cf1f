"""
Converts Nova source text into a stream of tokens.

The lexer is pull-based: each call to `next_token` scans exactly one token
from the remaining input, looking at most one character ahead.
"""

from typing import Iterator, List, Optional

from nova.nova_token import Token, TokenType, lookup_ident

WHITESPACE = (' ', '\t', '\n', '\r')

# Single characters that are always a complete token.
SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '*': TokenType.ASTERISK,
    '/': TokenType.SLASH,
    '<': TokenType.LT,
    '>': TokenType.GT,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
}

# (first char, second char) -> (one-char type, two-char type)
TWO_CHAR_TOKENS = {
    '=': ('=', TokenType.ASSIGN, TokenType.EQ),
    '!': ('=', TokenType.BANG, TokenType.NOT_EQ),
    '-': ('>', TokenType.MINUS, TokenType.ARROW),
}


def is_letter(ch: Optional[str]) -> bool:
    return ch is not None and (ch.isalpha() or ch == '_')


def is_digit(ch: Optional[str]) -> bool:
    return ch is not None and '0' <= ch <= '9'


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.position = 0       # index of self.ch
        self.read_position = 0  # index of the next character to read
        self.ch: Optional[str] = None
        self.line = 1
        self.col = 0
        self._read_char()

    def _read_char(self):
        if self.ch == '\n':
            self.line += 1
            self.col = 0
        if self.read_position >= len(self.source):
            self.ch = None
        else:
            self.ch = self.source[self.read_position]
        self.position = self.read_position
        self.read_position += 1
        self.col += 1

    def _peek_char(self) -> Optional[str]:
        if self.read_position >= len(self.source):
            return None
        return self.source[self.read_position]

    def _skip_whitespace(self):
        while self.ch is not None and self.ch in WHITESPACE:
            self._read_char()

    def _read_while(self, pred) -> str:
        start = self.position
        while pred(self.ch):
            self._read_char()
        return self.source[start:self.position]

    def next_token(self) -> Token:
        """Scans and returns the next token. Returns EOF forever once input is exhausted."""
        self._skip_whitespace()
        line, col = self.line, self.col
        ch = self.ch

        if ch is None:
            return Token(TokenType.EOF, "", line, col)

        if ch in TWO_CHAR_TOKENS:
            second, one, two = TWO_CHAR_TOKENS[ch]
            if self._peek_char() == second:
                self._read_char()
                self._read_char()
                return Token(two, two.value, line, col)
            self._read_char()
            return Token(one, one.value, line, col)

        if ch in SINGLE_CHAR_TOKENS:
            tok_type = SINGLE_CHAR_TOKENS[ch]
            self._read_char()
            return Token(tok_type, tok_type.value, line, col)

        if is_letter(ch):
            word = self._read_while(is_letter)
            tok_type = lookup_ident(word)
            literal = word if tok_type is TokenType.IDENT else tok_type.value
            return Token(tok_type, literal, line, col)

        if is_digit(ch):
            digits = self._read_while(is_digit)
            return Token(TokenType.INT, int(digits), line, col)

        self._read_char()
        return Token(TokenType.ILLEGAL, ch, line, col)

    def __iter__(self) -> Iterator[Token]:
        """Yields tokens up to and including EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type is TokenType.EOF:
                return


def tokenize(source: str) -> List[Token]:
    """Scans the whole source, returning every token including the trailing EOF."""
    return list(Lexer(source))
