"""
Defines the runtime data types of the Nova language.

Nova values map onto Python values where the host type fits:

    Integer  -> int (restricted to the signed 64-bit range)
    Boolean  -> bool
    Null     -> None
    Function -> NovaFunction

Statement evaluation does not return bare values; it returns a control-flow
result (`Continue` or `Return`) so that an early `return` can travel up through
nested blocks without ever becoming a value a program can hold.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from nova.nova_ast import BlockStatement

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


# =================================================================
# Errors
# =================================================================

class NovaRuntimeError(Exception):
    """Base class for every fault raised while evaluating Nova code."""
    def __init__(self, message: str, node: Any = None):
        super().__init__(message)
        self.message = message
        # The AST node being evaluated when the fault occurred, if known.
        self.node = node
        # Snapshot of the evaluator's call frames at the point of failure.
        self.stacktrace: Optional[List[Dict[str, Any]]] = None


class TypeMismatch(NovaRuntimeError):
    pass


class UnknownOperator(NovaRuntimeError):
    pass


class NotCallable(NovaRuntimeError):
    pass


class ArityMismatch(NovaRuntimeError):
    pass


class DivisionByZero(NovaRuntimeError):
    pass


class IntegerOverflow(NovaRuntimeError):
    pass


class CallDepthExceeded(NovaRuntimeError):
    pass


# =================================================================
# Values
# =================================================================

class NovaFunction:
    """A function value created by evaluating `fn(...) { ... }`.

    Holds only its parameter names and body. It captures no scope: a call
    runs against a fresh Environment seeded with the call's arguments.
    """
    def __init__(self, parameters: List[str], body: 'BlockStatement'):
        self.parameters = tuple(parameters)
        self.body = body

    def __repr__(self) -> str:
        from nova.nova_printer import Printer
        return Printer().pformat(self)

    def __eq__(self, other):
        if not isinstance(other, NovaFunction):
            return NotImplemented
        return self.parameters == other.parameters and self.body == other.body

    def __hash__(self):
        return hash((self.parameters, self.body))


def is_integer(value: Any) -> bool:
    # bool is a subclass of int; Nova keeps the two apart.
    return isinstance(value, int) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    """Returns the Nova type name of a runtime value, for diagnostics."""
    match value:
        case None:
            return "NULL"
        case bool():
            return "BOOLEAN"
        case int():
            return "INTEGER"
        case NovaFunction():
            return "FUNCTION"
    return type(value).__name__.upper()


def in_int64_range(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


# =================================================================
# Control flow
# =================================================================

@dataclass(frozen=True)
class Continue:
    """Normal completion of a statement or block, carrying its value."""
    value: Any = None


@dataclass(frozen=True)
class Return:
    """An early `return` still travelling up towards a call or the program."""
    value: Any = None


# =================================================================
# Environment
# =================================================================

class Environment:
    """A single flat scope mapping names to Nova values.

    There is no enclosing scope: lookups never consult another Environment.
    Setting a name that already exists overwrites it.
    """
    def __init__(self, bindings: Optional[Dict[str, Any]] = None):
        self.bindings: Dict[str, Any] = dict(bindings or {})

    def get(self, name: str, default: Any = None) -> Any:
        """Returns the bound value, or `default` when the name is unbound."""
        return self.bindings.get(name, default)

    def set(self, name: str, value: Any) -> Any:
        if not isinstance(name, str):
            raise TypeError(f"Environment key must be a str, not {type(name)}")
        self.bindings[name] = value
        return value

    def __contains__(self, name: Any) -> bool:
        return name in self.bindings

    def __len__(self) -> int:
        return len(self.bindings)

    def __iter__(self) -> Iterator[str]:
        return iter(self.bindings)

    def items(self) -> Iterator[Tuple[str, Any]]:
        return iter(self.bindings.items())

    def __repr__(self) -> str:
        return f"Environment({sorted(self.bindings)})"
