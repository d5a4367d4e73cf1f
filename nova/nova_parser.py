"""
Builds a Nova AST from a token stream.

This is a Pratt (precedence-climbing) parser: each token type may have a
prefix parse function (when it starts an expression) and an infix parse
function (when it follows a complete left-hand expression). Binding power
comes from the PRECEDENCES table.

Parse errors never raise. They are appended to `Parser.errors`, the failing
statement is dropped, and parsing resumes at the next statement.
"""

from enum import IntEnum
from typing import Callable, Dict, List, Optional

from nova.nova_lexer import Lexer
from nova.nova_token import Token, TokenType
from nova.nova_datatypes import in_int64_range
from nova.nova_ast import (
    Program, Statement, LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Expression, Identifier, IntegerLiteral, BooleanLiteral, PrefixExpression, InfixExpression,
    IfExpression, FunctionLiteral, CallExpression
)


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # ==
    LESSGREATER = 3  # > or <
    SUM = 4          # +
    PRODUCT = 5      # *
    PREFIX = 6       # -X or !X
    CALL = 7         # myFunction(X)


PRECEDENCES: Dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}


def describe_type(tok_type: TokenType) -> str:
    if tok_type in (TokenType.IDENT, TokenType.INT, TokenType.EOF, TokenType.ILLEGAL):
        return tok_type.name
    return f"'{tok_type.value}'"


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[str] = []
        self.cur_token: Optional[Token] = None
        self.peek_token: Optional[Token] = None

        self._prefix_parse_fns: Dict[TokenType, Callable[[], Optional[Expression]]] = {
            TokenType.IDENT: self._parse_identifier,
            TokenType.INT: self._parse_integer_literal,
            TokenType.TRUE: self._parse_boolean,
            TokenType.FALSE: self._parse_boolean,
            TokenType.BANG: self._parse_prefix_expression,
            TokenType.MINUS: self._parse_prefix_expression,
            TokenType.LPAREN: self._parse_grouped_expression,
            TokenType.IF: self._parse_if_expression,
            TokenType.FUNCTION: self._parse_function_literal,
        }
        self._infix_parse_fns: Dict[TokenType, Callable[[Expression], Optional[Expression]]] = {
            TokenType.PLUS: self._parse_infix_expression,
            TokenType.MINUS: self._parse_infix_expression,
            TokenType.ASTERISK: self._parse_infix_expression,
            TokenType.SLASH: self._parse_infix_expression,
            TokenType.EQ: self._parse_infix_expression,
            TokenType.NOT_EQ: self._parse_infix_expression,
            TokenType.LT: self._parse_infix_expression,
            TokenType.GT: self._parse_infix_expression,
            TokenType.LPAREN: self._parse_call_expression,
        }

        # Fill cur_token and peek_token.
        self._next_token()
        self._next_token()

    @classmethod
    def from_source(cls, source: str) -> 'Parser':
        return cls(Lexer(source))

    # --- Token cursor ---

    def _next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def _cur_is(self, tok_type: TokenType) -> bool:
        return self.cur_token.type is tok_type

    def _peek_is(self, tok_type: TokenType) -> bool:
        return self.peek_token.type is tok_type

    def _expect_peek(self, tok_type: TokenType) -> bool:
        """Advances when the next token has the expected type, else records an error."""
        if self._peek_is(tok_type):
            self._next_token()
            return True
        self._peek_error(tok_type)
        return False

    def _peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def _cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    # --- Errors ---

    def _error(self, message: str, tok: Token):
        self.errors.append(f"{message} (line {tok.line}, col {tok.col})")

    def _peek_error(self, tok_type: TokenType):
        self._error(
            f"expected next token to be {describe_type(tok_type)}, got {self.peek_token.describe()} instead",
            self.peek_token,
        )

    def _no_prefix_parse_fn_error(self, tok: Token):
        self._error(f"no prefix parse function for {tok.describe()} found", tok)

    def _synchronize(self):
        """Skips the rest of a statement that failed to parse.

        Stops on the statement's `;`, at EOF, or just inside the `}` that
        closes the enclosing block.
        """
        while not (self._cur_is(TokenType.SEMICOLON) or self._cur_is(TokenType.EOF)
                   or self._cur_is(TokenType.RBRACE) or self._peek_is(TokenType.RBRACE)):
            self._next_token()

    # --- Statements ---

    def parse_program(self) -> Program:
        statements: List[Statement] = []
        while not self._cur_is(TokenType.EOF):
            stmt = self._parse_statement()
            if stmt is None:
                self._synchronize()
            else:
                statements.append(stmt)
            self._next_token()
        return Program(tuple(statements))

    def _parse_statement(self) -> Optional[Statement]:
        match self.cur_token.type:
            case TokenType.LET:
                return self._parse_let_statement()
            case TokenType.RETURN:
                return self._parse_return_statement()
            case _:
                return self._parse_expression_statement()

    def _skip_optional_semicolon(self):
        if self._peek_is(TokenType.SEMICOLON):
            self._next_token()

    def _parse_let_statement(self) -> Optional[LetStatement]:
        token = self.cur_token
        if not self._expect_peek(TokenType.IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.literal)
        if not self._expect_peek(TokenType.ASSIGN):
            return None
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        self._skip_optional_semicolon()
        return LetStatement(token, name, value)

    def _parse_return_statement(self) -> Optional[ReturnStatement]:
        token = self.cur_token
        self._next_token()

        return_value = self._parse_expression(Precedence.LOWEST)
        if return_value is None:
            return None
        self._skip_optional_semicolon()
        return ReturnStatement(token, return_value)

    def _parse_expression_statement(self) -> Optional[ExpressionStatement]:
        token = self.cur_token
        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        self._skip_optional_semicolon()
        return ExpressionStatement(token, expression)

    def _parse_block_statement(self) -> Optional[BlockStatement]:
        token = self.cur_token
        statements: List[Statement] = []
        self._next_token()

        while not self._cur_is(TokenType.RBRACE):
            if self._cur_is(TokenType.EOF):
                self._error(
                    f"expected next token to be {describe_type(TokenType.RBRACE)}, got EOF instead",
                    self.cur_token,
                )
                return None
            stmt = self._parse_statement()
            if stmt is None:
                self._synchronize()
                if self._cur_is(TokenType.RBRACE):
                    break
            else:
                statements.append(stmt)
            self._next_token()

        return BlockStatement(token, tuple(statements))

    # --- Pratt core ---

    def _parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = self._prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self._no_prefix_parse_fn_error(self.cur_token)
            return None
        left = prefix()
        if left is None:
            return None

        while not self._peek_is(TokenType.SEMICOLON) and precedence < self._peek_precedence():
            infix = self._infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self._next_token()
            left = infix(left)
            if left is None:
                return None
        return left

    # --- Prefix parse functions ---

    def _parse_identifier(self) -> Identifier:
        return Identifier(self.cur_token, self.cur_token.literal)

    def _parse_integer_literal(self) -> Optional[IntegerLiteral]:
        tok = self.cur_token
        if not in_int64_range(tok.literal):
            self._error(f"could not parse {tok.literal} as integer", tok)
            return None
        return IntegerLiteral(tok, tok.literal)

    def _parse_boolean(self) -> BooleanLiteral:
        return BooleanLiteral(self.cur_token, self._cur_is(TokenType.TRUE))

    def _parse_prefix_expression(self) -> Optional[PrefixExpression]:
        token = self.cur_token
        self._next_token()
        right = self._parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(token, str(token), right)

    def _parse_grouped_expression(self) -> Optional[Expression]:
        self._next_token()
        exp = self._parse_expression(Precedence.LOWEST)
        if exp is None or not self._expect_peek(TokenType.RPAREN):
            return None
        return exp

    def _parse_if_expression(self) -> Optional[IfExpression]:
        token = self.cur_token
        if not self._expect_peek(TokenType.LPAREN):
            return None
        self._next_token()
        condition = self._parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self._expect_peek(TokenType.RPAREN):
            return None
        if not self._expect_peek(TokenType.LBRACE):
            return None
        consequence = self._parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self._peek_is(TokenType.ELSE):
            self._next_token()
            if not self._expect_peek(TokenType.LBRACE):
                return None
            alternative = self._parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(token, condition, consequence, alternative)

    def _parse_function_literal(self) -> Optional[FunctionLiteral]:
        token = self.cur_token
        if not self._expect_peek(TokenType.LPAREN):
            return None
        parameters = self._parse_function_parameters()
        if parameters is None:
            return None
        if not self._expect_peek(TokenType.LBRACE):
            return None
        body = self._parse_block_statement()
        if body is None:
            return None
        return FunctionLiteral(token, tuple(parameters), body)

    def _parse_function_parameters(self) -> Optional[List[Identifier]]:
        identifiers: List[Identifier] = []
        if self._peek_is(TokenType.RPAREN):
            self._next_token()
            return identifiers

        if not self._expect_peek(TokenType.IDENT):
            return None
        identifiers.append(Identifier(self.cur_token, self.cur_token.literal))

        while self._peek_is(TokenType.COMMA):
            self._next_token()
            if not self._expect_peek(TokenType.IDENT):
                return None
            identifiers.append(Identifier(self.cur_token, self.cur_token.literal))

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return identifiers

    # --- Infix parse functions ---

    def _parse_infix_expression(self, left: Expression) -> Optional[InfixExpression]:
        token = self.cur_token
        precedence = self._cur_precedence()
        self._next_token()
        right = self._parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(token, left, str(token), right)

    def _parse_call_expression(self, function: Expression) -> Optional[CallExpression]:
        token = self.cur_token
        arguments = self._parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(token, function, tuple(arguments))

    def _parse_call_arguments(self) -> Optional[List[Expression]]:
        args: List[Expression] = []
        if self._peek_is(TokenType.RPAREN):
            self._next_token()
            return args

        self._next_token()
        arg = self._parse_expression(Precedence.LOWEST)
        if arg is None:
            return None
        args.append(arg)

        while self._peek_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            arg = self._parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            args.append(arg)

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return args
