"""
Expansion Driver

Rust Pattern: rustc_expand::expand (top-level macro expansion)

Lexes the source, invokes one entry callee on it and runs the interpreter to
completion. Faults in the user's tokens become diagnostics in the result;
broken callee contracts propagate as ProtocolError.
"""

from typing import Any, Optional
import logging

from ..frontend.lexer import Lexer
from ..runtime.interpreter import Interpreter
from ..runtime.protocol import Destination, arg, tt_call
from ..shared.errors import ErrorReporter, Fault, LexError
from ..shared.tokens import TokenSequence
from ..utils.config import DEFAULT_SOURCE_FILE

logger = logging.getLogger(__name__)


class ExpansionResult:
    """Expansion result"""
    def __init__(
        self,
        value: Any = None,
        reporter: Optional[ErrorReporter] = None,
        success: bool = False
    ):
        self.value = value
        self.reporter = reporter
        self.success = success

    def has_errors(self) -> bool:
        if self.reporter:
            return self.reporter.has_errors()
        return not self.success

    def get_errors(self) -> list:
        if self.reporter and self.reporter.has_errors():
            return [self.reporter.format_all_errors(color=False)]
        return []


class ExpansionDriver:
    """
    Expansion driver (Rust naming: rustc_expand).

    Stateless between calls: the lexer is built once and shared, and each
    expansion gets a fresh interpreter and reporter.
    """

    def __init__(self, recursion_limit: Optional[int] = None, step_limit: Optional[int] = None):
        self.lexer = Lexer()
        self.recursion_limit = recursion_limit
        self.step_limit = step_limit

    def expand(
        self,
        callee: str,
        source: str,
        source_file: str = DEFAULT_SOURCE_FILE,
        returns_to: Destination = None,
    ) -> ExpansionResult:
        """
        Lex `source` and expand `callee` with it as the `input` argument.

        Phases:
        1. Lexing (source → token trees)
        2. Expansion (call/return steps until a final value)
        """
        reporter = ErrorReporter({source_file: source})
        logger.debug(f"expanding {callee} on {source_file}")
        try:
            tokens = self.lexer.tokenize(source, source_file)
        except LexError as e:
            logger.debug(f"lexing failed: {e.message}")
            reporter.report(e)
            return ExpansionResult(reporter=reporter, success=False)
        return self._run(callee, tokens, reporter, returns_to)

    def expand_tokens(
        self,
        callee: str,
        tokens: TokenSequence,
        returns_to: Destination = None,
    ) -> ExpansionResult:
        """Expand on an already-built TokenSequence; no source text is known."""
        return self._run(callee, tokens, ErrorReporter({}), returns_to)

    def _run(self, callee: str, tokens: TokenSequence, reporter: ErrorReporter,
             returns_to: Destination) -> ExpansionResult:
        interpreter = Interpreter(self.recursion_limit, self.step_limit)
        try:
            value = interpreter.run(tt_call(callee, arg("input", tokens), returns_to=returns_to))
        except Fault as e:
            logger.debug(f"expansion of {callee} failed: {e.message}")
            reporter.report(e)
            return ExpansionResult(reporter=reporter, success=False)
        return ExpansionResult(value=value, reporter=reporter, success=True)
