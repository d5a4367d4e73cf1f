"""
The core Nova interpreter: a tree-walking Evaluator.
"""
import os
import sys
from typing import Any, Dict, List, Optional

from nova.nova_ast import (
    Node, Program, Statement, LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Expression, Identifier, IntegerLiteral, BooleanLiteral, PrefixExpression, InfixExpression,
    IfExpression, FunctionLiteral, CallExpression
)
from nova.nova_datatypes import (
    Environment, NovaFunction, Continue, Return,
    NovaRuntimeError, TypeMismatch, UnknownOperator, NotCallable, ArityMismatch,
    DivisionByZero, IntegerOverflow, CallDepthExceeded,
    is_integer, type_name, in_int64_range
)

DEFAULT_MAX_CALL_DEPTH = None

# One Nova call nests about a dozen Python frames.
HOST_RECURSION_LIMIT = 10000
if sys.getrecursionlimit() < HOST_RECURSION_LIMIT:
    sys.setrecursionlimit(HOST_RECURSION_LIMIT)


def is_truthy(value: Any) -> bool:
    """`null` and `false` are falsy; every other value, including 0, is truthy."""
    return not (value is None or value is False)


def truncating_div(left: int, right: int) -> int:
    # Python's // floors; Nova truncates toward zero.
    q = abs(left) // abs(right)
    return -q if (left < 0) != (right < 0) else q


class ReturnUnwind(Exception):
    """Carries a `Return` out of an `if` that sits inside a larger expression.

    Only ever raised by the evaluator and always caught by the statement that
    contains the expression, which turns it back into a `Return` result.
    """
    def __init__(self, flow: Return):
        super().__init__("return")
        self.flow = flow


def max_call_depth_from_env(default: Optional[int] = DEFAULT_MAX_CALL_DEPTH) -> Optional[int]:
    """Reads NOVA_MAX_CALL_DEPTH. Unset or invalid means no Nova-level cap."""
    raw = os.environ.get("NOVA_MAX_CALL_DEPTH")
    if not raw:
        return default
    try:
        depth = int(raw)
    except ValueError:
        return default
    return depth if depth > 0 else default


class Evaluator:
    """The Nova execution engine.

    Walks the AST directly, threading one mutable Environment through every
    call. Operand-type faults (mismatched operands, unknown operators, calling
    a non-function) evaluate to `null`; with `strict=True` they raise typed
    errors instead. Division by zero, overflow, missing arguments and the
    optional call-depth cap raise in both modes.
    """
    def __init__(self, strict: bool = False, max_call_depth: Optional[int] = None):
        self.strict = strict
        self.max_call_depth = max_call_depth if max_call_depth is not None else max_call_depth_from_env()
        self.call_stack: List[Dict[str, Any]] = []
        self.current_node: Optional[Node] = None

    def _dbg(self, *parts):
        if os.environ.get("NOVA_DEBUG"):
            try:
                print("[DBG]", *parts, file=sys.stderr)
            except Exception:
                pass

    def _push_frame(self, name: str, func: NovaFunction, args: List[Any], call_site_node: Node):
        self.call_stack.append({
            'name': name,
            'func': func,
            'args': args,
            'call_site': getattr(call_site_node, 'loc', None),
        })

    def _pop_frame(self):
        if self.call_stack:
            self.call_stack.pop()

    def _operand_fault(self, error_cls, message: str, node: Node) -> None:
        """Raises a typed operand error in strict mode; yields `null` otherwise."""
        if self.strict:
            raise error_cls(message, node)
        self._dbg("lenient", error_cls.__name__, message)
        return None

    # --- Entry points ---

    def eval(self, node: Node, env: Environment) -> Any:
        """Public entry point. Evaluates any node and returns a plain value."""
        match node:
            case Program():
                return self.eval_program(node, env)
            case BlockStatement():
                return self._eval_block(node, env).value
            case Statement():
                return self._eval_statement(node, env).value
        try:
            return self._eval_expression(node, env)
        except ReturnUnwind as unwind:
            return unwind.flow.value

    def eval_program(self, program: Program, env: Environment) -> Any:
        result = None
        for statement in program.statements:
            flow = self._eval_statement(statement, env)
            if isinstance(flow, Return):
                self._dbg("program return", type_name(flow.value))
                return flow.value
            result = flow.value
        return result

    # --- Statements ---

    def _eval_block(self, block: BlockStatement, env: Environment):
        flow = Continue(None)
        for statement in block.statements:
            flow = self._eval_statement(statement, env)
            # Leave the signal wrapped: the enclosing call or program unwraps it.
            if isinstance(flow, Return):
                return flow
        return flow

    def _eval_statement(self, stmt: Statement, env: Environment):
        self.current_node = stmt
        try:
            return self._eval_statement_inner(stmt, env)
        except ReturnUnwind as unwind:
            return unwind.flow

    def _eval_statement_inner(self, stmt: Statement, env: Environment):
        match stmt:
            case ExpressionStatement(expression=expression):
                return Continue(self._eval_expression(expression, env))
            case LetStatement(name=name, value=value_expr):
                value = self._eval_expression(value_expr, env)
                self._dbg("let", name.value, "=", type_name(value))
                return Continue(env.set(name.value, value))
            case ReturnStatement(return_value=value_expr):
                return Return(self._eval_expression(value_expr, env))
            case BlockStatement():
                return self._eval_block(stmt, env)
        raise NovaRuntimeError(f"unsupported statement: {type(stmt).__name__}", stmt)

    # --- Expressions ---

    def _eval_expression(self, expr: Expression, env: Environment) -> Any:
        self.current_node = expr
        match expr:
            case IntegerLiteral(value=value):
                return value
            case BooleanLiteral(value=value):
                return value
            case Identifier(value=name):
                # An unbound name is `null`, not an error.
                return env.get(name)
            case PrefixExpression(operator=operator, right=right):
                return self._eval_prefix(operator, self._eval_expression(right, env), expr)
            case InfixExpression(left=left, operator=operator, right=right):
                lhs = self._eval_expression(left, env)
                rhs = self._eval_expression(right, env)
                return self._eval_infix(operator, lhs, rhs, expr)
            case IfExpression():
                return self._eval_if(expr, env)
            case FunctionLiteral(parameters=parameters, body=body):
                return NovaFunction([p.value for p in parameters], body)
            case CallExpression(function=function, arguments=arguments):
                func = self._eval_expression(function, env)
                args = [self._eval_expression(a, env) for a in arguments]
                name = function.value if isinstance(function, Identifier) else "<fn>"
                return self.call(func, args, name=name, node=expr)
        raise NovaRuntimeError(f"unsupported expression: {type(expr).__name__}", expr)

    def _eval_prefix(self, operator: str, right: Any, node: Node) -> Any:
        match operator:
            case '!':
                return not is_truthy(right)
            case '-':
                if not is_integer(right):
                    return self._operand_fault(UnknownOperator, f"unknown operator: -{type_name(right)}", node)
                result = -right
                if not in_int64_range(result):
                    raise IntegerOverflow(f"integer overflow: -({right})", node)
                return result
        return self._operand_fault(UnknownOperator, f"unknown operator: {operator}{type_name(right)}", node)

    def _eval_infix(self, operator: str, left: Any, right: Any, node: Node) -> Any:
        if is_integer(left) and is_integer(right):
            return self._eval_integer_infix(operator, left, right, node)
        if type_name(left) != type_name(right):
            return self._operand_fault(
                TypeMismatch, f"type mismatch: {type_name(left)} {operator} {type_name(right)}", node)
        return self._operand_fault(
            UnknownOperator, f"unknown operator: {type_name(left)} {operator} {type_name(right)}", node)

    def _eval_integer_infix(self, operator: str, left: int, right: int, node: Node) -> Any:
        match operator:
            case '<':
                return left < right
            case '>':
                return left > right
            case '==':
                return left == right
            case '!=':
                return left != right
            case '+':
                result = left + right
            case '-':
                result = left - right
            case '*':
                result = left * right
            case '/':
                if right == 0:
                    raise DivisionByZero(f"division by zero: {left} / {right}", node)
                result = truncating_div(left, right)
            case _:
                return self._operand_fault(
                    UnknownOperator, f"unknown operator: INTEGER {operator} INTEGER", node)
        if not in_int64_range(result):
            raise IntegerOverflow(f"integer overflow: {left} {operator} {right}", node)
        return result

    def _eval_if(self, expr: IfExpression, env: Environment) -> Any:
        condition = self._eval_expression(expr.condition, env)
        if is_truthy(condition):
            return self._block_value(expr.consequence, env)
        if expr.alternative is not None:
            return self._block_value(expr.alternative, env)
        return None

    def _block_value(self, block: BlockStatement, env: Environment) -> Any:
        flow = self._eval_block(block, env)
        if isinstance(flow, Return):
            raise ReturnUnwind(flow)
        return flow.value

    # --- Calls ---

    def call(self, func: Any, args: List[Any], name: str = "<fn>", node: Optional[Node] = None) -> Any:
        """Applies a function value to already-evaluated arguments."""
        if not isinstance(func, NovaFunction):
            return self._operand_fault(NotCallable, f"not a function: {type_name(func)}", node)
        # Extra arguments are ignored; missing ones are a fault.
        if len(args) < len(func.parameters):
            raise ArityMismatch(
                f"wrong number of arguments: want={len(func.parameters)}, got={len(args)}", node)
        if self.max_call_depth is not None and len(self.call_stack) >= self.max_call_depth:
            raise CallDepthExceeded(f"maximum call depth exceeded ({self.max_call_depth})", node)

        self._dbg("call", name, "argc", len(args))
        # A brand-new scope holding only the parameters: functions capture nothing.
        call_env = Environment(dict(zip(func.parameters, args)))
        self._push_frame(name, func, args, node)
        try:
            flow = self._eval_block(func.body, call_env)
        except NovaRuntimeError as e:
            if e.stacktrace is None:
                e.stacktrace = list(self.call_stack)
            raise
        finally:
            self._pop_frame()
        return flow.value
