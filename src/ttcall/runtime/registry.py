"""
Callee Registry

Rust Pattern: macro_rules! name resolution

Maps callee names to handlers. Names are resolved when an invocation or
continuation is built, so the interpreter only ever sees resolved callees.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Union, TYPE_CHECKING
import logging

from ..shared.errors import ProtocolError

if TYPE_CHECKING:
    from .protocol import Arguments, Continuation

logger = logging.getLogger(__name__)

Handler = Callable[[Optional["Continuation"], "Arguments"], Any]


@dataclass(frozen=True, eq=False)
class Callee:
    """
    A named rewrite rule.

    `outputs` optionally declares the names the callee returns; when present,
    continuations whose state reuses one of them are rejected at call time.
    """
    name: str
    handler: Handler
    outputs: Optional[Tuple[str, ...]] = None

    def __repr__(self) -> str:
        return f"Callee({self.name})"


class CalleeRegistry:
    """Name → Callee table; one name per rule, no overriding."""

    def __init__(self):
        self._callees: Dict[str, Callee] = {}

    def register(self, name: str, handler: Handler, outputs: Optional[Tuple[str, ...]] = None) -> Callee:
        if name in self._callees:
            raise ProtocolError(f"callee `{name}` is already registered")
        entry = Callee(name, handler, tuple(outputs) if outputs is not None else None)
        self._callees[name] = entry
        logger.debug(f"registered callee {name}")
        return entry

    def callee(self, name: str, outputs: Optional[Tuple[str, ...]] = None) -> Callable[[Handler], Handler]:
        """Decorator form of `register`; returns the handler unchanged."""
        def decorator(handler: Handler) -> Handler:
            self.register(name, handler, outputs)
            return handler
        return decorator

    def resolve(self, name: Union[str, Callee]) -> Callee:
        if isinstance(name, Callee):
            return name
        try:
            return self._callees[name]
        except KeyError:
            raise ProtocolError(f"cannot find callee `{name}` in this scope") from None

    def __contains__(self, name: str) -> bool:
        return name in self._callees

    def __iter__(self) -> Iterator[str]:
        return iter(self._callees)


registry = CalleeRegistry()
callee = registry.callee
resolve = registry.resolve
