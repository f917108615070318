"""
Predicates

Rust Pattern: tt-call tt_is_comma! / tt_is_ident! / tt_is_lifetime!

Each predicate takes one `input` token and returns one boolean output, which
makes it usable as the condition of `tt_if`.
"""

from typing import Callable, Optional

from ..shared.errors import ProtocolError
from ..shared.tokens import Token
from .protocol import Arguments, Continuation, Step, arg, boolean, tt_return
from .registry import callee


def _single_token(name: str, args: Arguments) -> Token:
    matched = args.match("input")
    if matched is None or len(matched[0]) != 1:
        raise ProtocolError("predicate input must be a single token", callee=name)
    return matched[0].first


def _predicate(name: str, output: str, test: Callable[[Token], bool]) -> None:
    @callee(name, outputs=(output,))
    def predicate(caller: Optional[Continuation], args: Arguments) -> Step:
        token = _single_token(name, args)
        return tt_return(caller, arg(output, boolean(test(token))))


_predicate("tt_is_comma", "is_comma", lambda token: token.is_punct(","))
_predicate("tt_is_ident", "is_ident", lambda token: token.is_ident)
_predicate("tt_is_lifetime", "is_lifetime", lambda token: token.is_lifetime)
