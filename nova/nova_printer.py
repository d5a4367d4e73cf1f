"""
A pretty-printer for Nova runtime values and AST nodes.
"""

from nova.nova_ast import (
    Program, LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Identifier, IntegerLiteral, BooleanLiteral, PrefixExpression, InfixExpression,
    IfExpression, FunctionLiteral, CallExpression
)
from nova.nova_datatypes import NovaFunction


class Printer:
    """Formats Nova values for display and AST nodes as canonical source text."""

    def __init__(self):
        self._handlers = self._create_handlers()

    def pformat(self, obj) -> str:
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj)

    def _get_handler(self, obj):
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        # Default to Python's repr for unknown types
        return repr

    def _create_handlers(self):
        return {
            # Runtime values
            int: self._pformat_int,
            bool: self._pformat_bool,
            type(None): self._pformat_none,
            NovaFunction: self._pformat_function,
            # AST
            Program: self._pformat_statements,
            BlockStatement: self._pformat_statements,
            LetStatement: self._pformat_let,
            ReturnStatement: self._pformat_return,
            ExpressionStatement: self._pformat_expression_statement,
            Identifier: self._pformat_identifier,
            IntegerLiteral: self._pformat_literal,
            BooleanLiteral: self._pformat_boolean_literal,
            PrefixExpression: self._pformat_prefix,
            InfixExpression: self._pformat_infix,
            IfExpression: self._pformat_if,
            FunctionLiteral: self._pformat_function_literal,
            CallExpression: self._pformat_call,
        }

    # --- Values ---

    def _pformat_int(self, obj):
        return str(obj)

    def _pformat_bool(self, obj):
        return 'true' if obj else 'false'

    def _pformat_none(self, obj):
        return 'null'

    def _pformat_function(self, obj):
        # The body is deliberately elided.
        return f"fn({', '.join(obj.parameters)}) {{ ... }}"

    # --- Statements ---

    def _pformat_statements(self, obj):
        return "".join(self.pformat(s) for s in obj.statements)

    def _pformat_let(self, obj):
        return f"let {obj.name.value} = {self.pformat(obj.value)};"

    def _pformat_return(self, obj):
        return f"return {self.pformat(obj.return_value)};"

    def _pformat_expression_statement(self, obj):
        return self.pformat(obj.expression)

    # --- Expressions ---

    def _pformat_identifier(self, obj):
        return obj.value

    def _pformat_literal(self, obj):
        return str(obj.value)

    def _pformat_boolean_literal(self, obj):
        return self._pformat_bool(obj.value)

    def _pformat_prefix(self, obj):
        return f"({obj.operator}{self.pformat(obj.right)})"

    def _pformat_infix(self, obj):
        return f"({self.pformat(obj.left)} {obj.operator} {self.pformat(obj.right)})"

    def _pformat_if(self, obj):
        out = f"if {self.pformat(obj.condition)} {{ {self.pformat(obj.consequence)} }}"
        if obj.alternative is not None:
            out += f" else {{ {self.pformat(obj.alternative)} }}"
        return out

    def _pformat_function_literal(self, obj):
        params = ", ".join(p.value for p in obj.parameters)
        return f"fn({params}) {self.pformat(obj.body)}"

    def _pformat_call(self, obj):
        args = ", ".join(self.pformat(a) for a in obj.arguments)
        return f"{self.pformat(obj.function)}({args})"
