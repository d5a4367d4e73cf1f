"""
Defines the abstract syntax tree produced by the Nova parser.

Nodes are frozen dataclasses: once the parser returns a node it is never
mutated. Each node keeps the token that introduced it so that diagnostics can
point back into the source. `str(node)` renders the canonical source form
(see `nova_printer.Printer`).
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from nova.nova_token import Token


class Node:
    """Base class for all AST nodes."""
    token: Token

    def token_literal(self) -> str:
        return str(self.token)

    @property
    def loc(self):
        return self.token.loc

    def __str__(self) -> str:
        from nova.nova_printer import Printer
        return Printer().pformat(self)


class Statement(Node):
    pass


class Expression(Node):
    pass


# =================================================================
# Expressions
# =================================================================

@dataclass(frozen=True)
class Identifier(Expression):
    token: Token = field(compare=False)
    value: str


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    token: Token = field(compare=False)
    value: int


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    token: Token = field(compare=False)
    value: bool


@dataclass(frozen=True)
class PrefixExpression(Expression):
    token: Token = field(compare=False)
    operator: str
    right: Expression


@dataclass(frozen=True)
class InfixExpression(Expression):
    token: Token = field(compare=False)
    left: Expression
    operator: str
    right: Expression


@dataclass(frozen=True)
class BlockStatement(Statement):
    token: Token = field(compare=False)
    statements: Tuple[Statement, ...]


@dataclass(frozen=True)
class IfExpression(Expression):
    token: Token = field(compare=False)
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    token: Token = field(compare=False)
    parameters: Tuple[Identifier, ...]
    body: BlockStatement


@dataclass(frozen=True)
class CallExpression(Expression):
    token: Token = field(compare=False)
    function: Expression
    arguments: Tuple[Expression, ...]


# =================================================================
# Statements
# =================================================================

@dataclass(frozen=True)
class LetStatement(Statement):
    token: Token = field(compare=False)
    name: Identifier
    value: Expression


@dataclass(frozen=True)
class ReturnStatement(Statement):
    token: Token = field(compare=False)
    return_value: Expression


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    token: Token = field(compare=False)
    expression: Expression


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    @property
    def loc(self):
        return self.statements[0].loc if self.statements else None
