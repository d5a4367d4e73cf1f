from nova.nova_token import Token, TokenType
from nova.nova_lexer import Lexer
from nova.nova_parser import Parser
from nova.nova_datatypes import Environment, NovaFunction, NovaRuntimeError
from nova.nova_interpreter import Evaluator
from nova.nova_printer import Printer
from nova.nova_runtime import tokenize, parse, evaluate, ExecutionResult, ScriptRunner

__all__ = [
    "Token", "TokenType", "Lexer", "Parser",
    "Environment", "NovaFunction", "NovaRuntimeError",
    "Evaluator", "Printer",
    "tokenize", "parse", "evaluate", "ExecutionResult", "ScriptRunner",
]
