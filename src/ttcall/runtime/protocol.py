"""
Call/Return Protocol

Rust Pattern: tt-call tt_call! / tt_return! / tt_if!

Callees never call each other directly. A callee returns the next step: an
Invocation built by `tt_call` (sub-call), `tail_call` (same caller) or
`tt_return` (resume the caller), or a final value when it is a destination
with no caller. The Interpreter runs those steps.

A Continuation is an immutable frame: the callee to resume, the state to
re-emit in front of the outputs, and optionally its own caller. Frames link
to their enclosing frame, so no shared stack exists.
"""

from dataclasses import dataclass, field
from itertools import count
from typing import Any, Iterable, Iterator, NoReturn, Optional, Tuple, Union

from typing_extensions import TypeAlias

from ..shared.errors import ProtocolError
from ..shared.tokens import EMPTY, Token, TokenKind, TokenSequence
from ..utils.config import BOOLEAN_FALSE_LITERAL, BOOLEAN_TRUE_LITERAL
from .registry import Callee, callee, resolve
from .unexpected import error_unexpected

IDENTITY_RETURN = "tt_identity_return"
PRIVATE_IF_BRANCH = "private_if_branch"


@dataclass(frozen=True)
class NamedArgument:
    """
    (name, value) pair passed into or returned from a callee.

    The value is a TokenSequence; only the private branch continuation of
    `tt_if` stores pending steps.
    """
    name: str
    value: Any

    def render(self) -> str:
        value = self.value.render() if isinstance(self.value, TokenSequence) else repr(self.value)
        return f"{self.name} = [{{ {value} }}]"


def arg(name: str, *parts: Union[Token, TokenSequence, Iterable[Token]]) -> NamedArgument:
    """Build a token-valued argument by concatenating `parts`."""
    if not parts:
        return NamedArgument(name, EMPTY)
    if len(parts) == 1 and isinstance(parts[0], TokenSequence):
        return NamedArgument(name, parts[0])
    return NamedArgument(name, TokenSequence.of(*parts))


class Arguments:
    """
    Ordered argument list with unique names.

    Callees dispatch on `shape`, the ordered tuple of names.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[NamedArgument] = ()):
        items = tuple(items)
        seen = set()
        for item in items:
            if not isinstance(item, NamedArgument):
                raise TypeError(f"expected NamedArgument, got {type(item).__name__}")
            if item.name in seen:
                raise ProtocolError(f"duplicate argument `{item.name}`")
            seen.add(item.name)
        self._items: Tuple[NamedArgument, ...] = items

    @property
    def shape(self) -> Tuple[str, ...]:
        return tuple(item.name for item in self._items)

    def values(self) -> Tuple[Any, ...]:
        return tuple(item.value for item in self._items)

    def match(self, *names: str) -> Optional[Tuple[Any, ...]]:
        """Values in order if the shape is exactly `names`, else None."""
        if self.shape != names:
            return None
        return self.values()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[NamedArgument]:
        return iter(self._items)

    def __getitem__(self, index: int) -> NamedArgument:
        return self._items[index]

    def __add__(self, other: "Arguments") -> "Arguments":
        return Arguments(self._items + tuple(other))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Arguments):
            return self._items == other._items
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return "Arguments(" + " ".join(item.render() for item in self._items) + ")"


_frame_ids = count(1)


@dataclass(frozen=True)
class Continuation:
    """
    Who to resume, with what already-accumulated state.

    `frame_id` identifies the frame for fire-once checking and does not take
    part in equality.
    """
    callee: Callee
    state: Arguments = field(default_factory=Arguments)
    caller: Optional["Continuation"] = None
    frame_id: int = field(default_factory=lambda: next(_frame_ids), compare=False)


@dataclass(frozen=True)
class Invocation:
    """
    One pending rewrite step: run `callee` with `caller` and `args`.

    `fires` is the continuation this step consumes, when it was built by
    `tt_return`.
    """
    callee: Callee
    caller: Optional[Continuation]
    args: Arguments
    fires: Optional[Continuation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        return f"Invocation({self.callee.name} {self.args.shape})"


Step: TypeAlias = Any
Destination: TypeAlias = Union[None, str, Callee, Continuation]


def _check_disjoint(state: Arguments, outputs: Iterable[str], where: str) -> None:
    overlap = sorted(set(state.shape) & set(outputs))
    if overlap:
        names = ", ".join(f"`{name}`" for name in overlap)
        raise ProtocolError(f"continuation state reuses output name {names}", callee=where)


def to(destination: Union[str, Callee], *state: NamedArgument,
       caller: Optional[Continuation] = None) -> Continuation:
    """Continuation to `destination`, re-emitting `state` before the outputs."""
    return Continuation(resolve(destination), Arguments(state), caller)


def tt_call(target: Union[str, Callee], *args: NamedArgument,
            returns_to: Destination = None) -> Invocation:
    """
    Call Dispatcher.

    - returns_to=None: the single output becomes the result
    - returns_to="name": invoke `name` with exactly the outputs
    - returns_to=to("name", *state): invoke `name` with state ++ outputs
    - returns_to=to("name", *state, caller=k): same, and `name` receives `k`
      as its own caller
    """
    target = resolve(target)
    if returns_to is None:
        continuation = Continuation(resolve(IDENTITY_RETURN))
    elif isinstance(returns_to, Continuation):
        continuation = returns_to
    elif isinstance(returns_to, (str, Callee)):
        continuation = Continuation(resolve(returns_to))
    else:
        raise TypeError(f"returns_to must be a callee name or Continuation, got {type(returns_to).__name__}")
    if target.outputs is not None:
        _check_disjoint(continuation.state, target.outputs, target.name)
    return Invocation(target, continuation, Arguments(args))


def tail_call(target: Union[str, Callee], caller: Optional[Continuation],
              *args: NamedArgument) -> Invocation:
    """Continue in another rule, forwarding `caller` unchanged."""
    return Invocation(resolve(target), caller, Arguments(args))


def tt_return(caller: Continuation, *outputs: NamedArgument) -> Invocation:
    """Return Channel: resume `caller` with its state followed by `outputs`."""
    if caller is None:
        raise ProtocolError("tt_return needs a continuation to return to")
    outputs = Arguments(outputs)
    _check_disjoint(caller.state, outputs.shape, caller.callee.name)
    return Invocation(caller.callee, caller.caller, caller.state + outputs, fires=caller)


def tt_if(condition: Union[str, Callee], input: Union[Token, TokenSequence],
          then: Step, else_: Step) -> Invocation:
    """
    Conditional Branch: run the predicate on `input` and continue with
    `then` or `else_` verbatim.
    """
    return tt_call(
        condition,
        arg("input", input),
        returns_to=to(
            PRIVATE_IF_BRANCH,
            NamedArgument("true", then),
            NamedArgument("false", else_),
        ),
    )


def no_rules(name: str, args: Arguments) -> NoReturn:
    """Authoring error: no rule of `name` accepts this argument shape."""
    shape = ", ".join(args.shape) or "<empty>"
    raise ProtocolError(f"no rules expected arguments ({shape})", callee=name)


_TRUE = TokenSequence((Token(TokenKind.IDENT, BOOLEAN_TRUE_LITERAL),))
_FALSE = TokenSequence((Token(TokenKind.IDENT, BOOLEAN_FALSE_LITERAL),))


def boolean(value: bool) -> TokenSequence:
    return _TRUE if value else _FALSE


@callee(IDENTITY_RETURN)
def identity_return(caller: Optional[Continuation], args: Arguments) -> Step:
    # Callee returned one value
    if len(args) == 1:
        return args[0].value
    # Callee parsed part of the input: the remainder must be empty
    if len(args) == 2 and args.shape[1] == "rest":
        rest = args[1].value
        if rest:
            error_unexpected(rest)
        return args[0].value
    no_rules(IDENTITY_RETURN, args)


@callee(PRIVATE_IF_BRANCH)
def if_branch(caller: Optional[Continuation], args: Arguments) -> Step:
    if len(args) == 3 and args.shape[:2] == ("true", "false"):
        then, else_, result = args.values()
        if result == _TRUE:
            return then
        if result == _FALSE:
            return else_
    raise ProtocolError(
        "predicate must return exactly one output holding `true` or `false`",
        callee=PRIVATE_IF_BRANCH,
    )
