"""
Call/return runtime: registry, protocol, fault reporter and interpreter.
"""

from .registry import Callee, CalleeRegistry, registry, callee, resolve
from .protocol import (
    NamedArgument, Arguments, Continuation, Invocation,
    arg, to, tt_call, tail_call, tt_return, tt_if, no_rules, boolean,
    IDENTITY_RETURN,
)
from .unexpected import error_unexpected, error_unexpected_last, error_eof
from .interpreter import Interpreter, expand
from . import predicates, debug
