"""
Defines the lexical categories of the Nova language.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class TokenType(Enum):
    """Every lexical category, valued by the text it displays as."""
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers + literals
    IDENT = "IDENT"
    INT = "INT"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"

    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    ARROW = "->"

    # Keywords
    FUNCTION = "fn"
    LET = "let"
    MUT = "mut"
    TRUE = "true"
    FALSE = "false"
    IF = "if"
    ELSE = "else"
    RETURN = "return"
    UNSAFE = "unsafe"
    ZONE = "zone"

    def __str__(self) -> str:
        return self.value


KEYWORDS: Dict[str, TokenType] = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "mut": TokenType.MUT,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
    "unsafe": TokenType.UNSAFE,
    "zone": TokenType.ZONE,
}


def lookup_ident(ident: str) -> TokenType:
    """Resolves a scanned word to its keyword type, or IDENT."""
    return KEYWORDS.get(ident, TokenType.IDENT)


@dataclass(frozen=True)
class Token:
    """A single lexical unit.

    `literal` is the identifier text for IDENT, the integer value for INT,
    the offending character for ILLEGAL, and the fixed token text otherwise.
    `line` and `col` are 1-based and point at the token's first character.
    """
    type: TokenType
    literal: Any
    line: int = 0
    col: int = 0

    def __str__(self) -> str:
        match self.type:
            case TokenType.IDENT | TokenType.INT | TokenType.ILLEGAL:
                return str(self.literal)
            case _:
                return str(self.type)

    def describe(self) -> str:
        """Human-readable form used in parse error messages."""
        match self.type:
            case TokenType.IDENT:
                return f"IDENT({self.literal})"
            case TokenType.INT:
                return f"INT({self.literal})"
            case TokenType.ILLEGAL:
                return f"ILLEGAL({self.literal!r})"
            case TokenType.EOF:
                return "EOF"
            case _:
                return f"'{self.type}'"

    @property
    def loc(self) -> Dict[str, Any]:
        return {'line': self.line, 'col': self.col, 'tag': self.type.name, 'text': str(self)}
