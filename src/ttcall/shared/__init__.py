"""
Shared components: token model, spans and diagnostics.

Rust Pattern: proc_macro token model + rustc_errors
"""

from .source_location import SourceLocation
from .errors import (
    Error, ErrorReporter, TtCallError, TtCallSourceError, LexError,
    Fault, UnexpectedToken, UnexpectedEof, ProtocolError, RecursionLimitError,
)
from .tokens import Token, TokenKind, Delimiter, TokenSequence, ANY, EMPTY
