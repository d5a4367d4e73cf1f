# nova_runtime.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from nova.nova_lexer import Lexer, tokenize
from nova.nova_parser import Parser
from nova.nova_ast import Program
from nova.nova_interpreter import Evaluator
from nova.nova_printer import Printer
from nova.nova_datatypes import Environment, NovaRuntimeError, type_name

__all__ = ["tokenize", "parse", "evaluate", "ExecutionResult", "ScriptRunner"]


# ===================================================================
# Pipeline entry points
# ===================================================================

def parse(source: str) -> Tuple[Program, List[str]]:
    """Parses one unit of source, returning the program and any parse errors.

    When the error list is non-empty the program holds only the statements
    that parsed cleanly and should not be evaluated.
    """
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors


def evaluate(program: Program, environment: Environment, strict: bool = False) -> Any:
    """Evaluates a parsed program against a (mutable) environment."""
    return Evaluator(strict=strict).eval_program(program, environment)


# ===================================================================
# Script execution
# ===================================================================

Token = Dict[str, Any]


@dataclass
class ExecutionResult:
    """The structured result of handling one unit of source."""
    status: Literal['success', 'error']
    value: Any = None
    error_message: Optional[str] = None
    # Parse errors, one message each. Empty for runtime errors.
    errors: List[str] = field(default_factory=list)
    error_token: Optional[Token] = None

    def display(self) -> str:
        """The display form of the value, as the REPL prints it."""
        return Printer().pformat(self.value)

    def format_error(self) -> str:
        """Formats an error message with line and column if available."""
        if self.status != 'error':
            return ""
        if self.errors:
            return "\n".join(self.errors)
        msg = str(self.error_message or "Unknown error")

        if self.error_token and 'line' in self.error_token:
            line = self.error_token.get('line')
            col = self.error_token.get('col')
            if not msg.startswith("Error on line "):
                col_info = f", col {col}" if col is not None else ""
                return f"Error on line {line}{col_info}: {msg}"
        return msg


class ScriptRunner:
    """Parses and evaluates Nova source against one persistent Environment.

    A runner is a session: bindings made by one `handle_script` call are
    visible to every later call on the same runner.
    """

    def __init__(self, strict: bool = False, max_call_depth: Optional[int] = None,
                 environment: Optional[Environment] = None):
        self.environment = environment if environment is not None else Environment()
        self.evaluator = Evaluator(strict=strict, max_call_depth=max_call_depth)

    def _format_runtime_error(self, e: Exception, source: str, node) -> Tuple[str, Optional[Token]]:
        match e:
            case NovaRuntimeError():
                msg = f"{type(e).__name__}: {e.message}"
            case RecursionError():
                msg = "InternalError: maximum recursion depth exceeded"
            case _:
                msg = f"InternalError: {str(e)}"

        token = None
        loc = getattr(node, 'loc', None) if node is not None else None
        if loc and isinstance(loc, dict):
            line = loc.get('line'); col = loc.get('col')
            token = {'line': line, 'col': col, 'tag': loc.get('tag'), 'text': loc.get('text')}
            if line and col:
                context = self._source_context(source, line, col)
                if context:
                    msg = f"{msg}\n{context}"

        st = self._format_stacktrace(getattr(e, 'stacktrace', None))
        if st:
            msg += "\n" + st

        return msg, token

    def _source_context(self, source: str, line: int, col: Optional[int], radius: int = 2) -> str:
        lines = source.splitlines()
        if not line or line < 1 or line > len(lines):
            return ""
        start = max(1, line - radius)
        end = min(len(lines), line + radius)
        width = len(str(end))
        out = []
        for i in range(start, end + 1):
            prefix = ">" if i == line else " "
            ln = str(i).rjust(width)
            content = lines[i - 1]
            out.append(f"{prefix} {ln} | {content}")
            if i == line and col is not None:
                caret = " " * max(col - 1, 0)
                out.append(f"  {' ' * width} | {caret}^")
        return "\n".join(out)

    def _format_stacktrace(self, stack) -> str:
        if not stack:
            return ""
        pf = Printer().pformat
        frames = []
        for frame in stack:
            name = frame.get('name') or '<fn>'
            args = " ".join(pf(a) for a in frame.get('args') or [])
            frames.append(f"({name} {args})" if args else f"({name})")
        return "Nova stacktrace: " + " ".join(frames)

    def handle_script(self, source_code: str) -> ExecutionResult:
        """The main entry point to execute one unit of source."""
        self.evaluator.call_stack.clear()
        self.evaluator.current_node = None
        try:
            # 1. Parse
            program, errors = parse(source_code)
            if errors:
                self.evaluator._dbg("parse errors", len(errors))
                return ExecutionResult(
                    status='error',
                    error_message="\n".join(errors),
                    errors=list(errors),
                )

            # 2. Evaluate
            value = self.evaluator.eval_program(program, self.environment)
            self.evaluator._dbg("result", type_name(value))
            return ExecutionResult(status='success', value=value)

        except Exception as e:
            node = getattr(e, 'node', None) or self.evaluator.current_node
            err_msg, err_token = self._format_runtime_error(e, source_code, node)
            self.evaluator._dbg("runtime error", type(e).__name__)
            return ExecutionResult(
                status='error',
                error_message=err_msg,
                error_token=err_token,
            )
