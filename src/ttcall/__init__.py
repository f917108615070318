"""
ttcall: a call/return convention for token rewriting rules, and a Rust
path/type parser written in it.
"""

from .shared import (
    SourceLocation, Token, TokenKind, Delimiter, TokenSequence, ANY, EMPTY,
    ErrorReporter, TtCallError, TtCallSourceError, LexError,
    Fault, UnexpectedToken, UnexpectedEof, ProtocolError, RecursionLimitError,
)
from .runtime import (
    Callee, registry, callee, resolve,
    NamedArgument, Arguments, Continuation, Invocation,
    arg, to, tt_call, tail_call, tt_return, tt_if, no_rules, boolean,
    error_unexpected, error_unexpected_last, error_eof,
    Interpreter, expand,
)
from .rust import PARSE_PATH, PARSE_TYPE
from .frontend.lexer import Lexer, tokenize
from .compiler.driver import ExpansionDriver, ExpansionResult

__version__ = "0.1.0"
