"""
Fault Reporter

Rust Pattern: tt-call error_unexpected! / error_unexpected_last! / error_eof!

Each primitive raises and never returns. The error is anchored at a token
whenever one exists; `error_eof` is the fallback when none does, and gives a
strictly worse diagnostic.
"""

from typing import NoReturn, Union

from ..shared.errors import ProtocolError, UnexpectedEof, UnexpectedToken
from ..shared.tokens import Token, TokenSequence


def _as_sequence(tokens: Union[Token, TokenSequence]) -> TokenSequence:
    if isinstance(tokens, Token):
        return TokenSequence((tokens,))
    return tokens


def error_unexpected(tokens: Union[Token, TokenSequence]) -> NoReturn:
    """Fail at the first token of a non-empty sequence."""
    tokens = _as_sequence(tokens)
    if not tokens:
        raise ProtocolError("error_unexpected requires at least one token")
    raise UnexpectedToken(tokens.first)


def error_unexpected_last(tokens: Union[Token, TokenSequence]) -> NoReturn:
    """Fail at the last token of a non-empty sequence."""
    tokens = _as_sequence(tokens)
    if not tokens:
        raise ProtocolError("error_unexpected_last requires at least one token")
    while len(tokens) > 1:
        tokens = tokens.skip(1)
    error_unexpected(tokens)


def error_eof() -> NoReturn:
    """Fail at end of input. Prefer the token-anchored primitives."""
    raise UnexpectedEof()
