"""
Token Trees

Rust Pattern: proc_macro::TokenTree, proc_macro::TokenStream

A token is opaque beyond its kind: identifier, lifetime, literal, punctuation
or a bracket-delimited group. Groups are a single token from the outside and a
TokenSequence inside. Sequences are immutable views over a shared tuple, so
taking a suffix never copies.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple, Union, overload

from typing_extensions import TypeAlias

from .source_location import SourceLocation


class TokenKind(Enum):
    """Token classification (Rust pattern: macro fragment specifiers)."""
    IDENT = "ident"
    LIFETIME = "lifetime"
    LITERAL = "literal"
    PUNCT = "punct"
    GROUP = "group"


class Delimiter(Enum):
    """Group delimiter (Rust pattern: proc_macro::Delimiter)."""
    PAREN = ("(", ")")
    BRACKET = ("[", "]")
    BRACE = ("{", "}")

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]

    @classmethod
    def from_open(cls, text: str) -> "Delimiter":
        for delimiter in cls:
            if delimiter.open == text:
                return delimiter
        raise ValueError(f"not an opening delimiter: {text!r}")


@dataclass(frozen=True)
class Token:
    """
    A single token tree.

    `text` is the source spelling; for groups it is the opening delimiter and
    `stream` holds the inner tokens. Equality ignores the location so that
    sequences lexed from different sources compare by spelling.
    """
    kind: TokenKind
    text: str
    location: Optional[SourceLocation] = field(default=None, compare=False)
    delimiter: Optional[Delimiter] = None
    stream: Optional["TokenSequence"] = None

    @property
    def is_ident(self) -> bool:
        return self.kind is TokenKind.IDENT

    @property
    def is_lifetime(self) -> bool:
        return self.kind is TokenKind.LIFETIME

    @property
    def is_literal(self) -> bool:
        return self.kind is TokenKind.LITERAL

    @property
    def is_group(self) -> bool:
        return self.kind is TokenKind.GROUP

    def is_punct(self, text: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.text == text

    def split_first(self) -> Tuple["Token", "Token"]:
        """
        Split a fused two-character punctuation token such as `>>`.

        Both halves keep the location of the half of the source token they
        came from.
        """
        if self.kind is not TokenKind.PUNCT or len(self.text) != 2:
            raise ValueError(f"cannot split token `{self.text}`")
        if self.location is not None:
            head_loc, tail_loc = self.location.split_at(1)
        else:
            head_loc = tail_loc = None
        return (
            Token(TokenKind.PUNCT, self.text[0], head_loc),
            Token(TokenKind.PUNCT, self.text[1], tail_loc),
        )

    def render(self) -> str:
        if self.kind is TokenKind.GROUP:
            inner = self.stream.render() if self.stream else ""
            if not inner:
                return f"{self.delimiter.open}{self.delimiter.close}"
            return f"{self.delimiter.open} {inner} {self.delimiter.close}"
        return self.text

    def __str__(self) -> str:
        return self.render()


# A pattern is matched against one token: literal spelling, kind or delimiter
Pattern: TypeAlias = Union[str, TokenKind, Delimiter]

ANY = object()


def token_matches(token: Token, pattern: object) -> bool:
    if pattern is ANY:
        return True
    if isinstance(pattern, TokenKind):
        return token.kind is pattern
    if isinstance(pattern, Delimiter):
        return token.kind is TokenKind.GROUP and token.delimiter is pattern
    if token.kind in (TokenKind.PUNCT, TokenKind.IDENT):
        return token.text == pattern
    return False


class TokenSequence:
    """
    Immutable ordered view over a tuple of tokens.

    Rust Pattern: proc_macro::TokenStream

    Slicing and `skip` share the underlying tuple and only move the cursor.
    """

    __slots__ = ("_tokens", "_start", "_stop")

    def __init__(self, tokens: Iterable[Token] = (), _start: int = 0, _stop: Optional[int] = None):
        self._tokens: Tuple[Token, ...] = tokens if isinstance(tokens, tuple) else tuple(tokens)
        self._start = _start
        self._stop = len(self._tokens) if _stop is None else _stop

    @classmethod
    def of(cls, *parts: Union[Token, "TokenSequence", Iterable[Token]]) -> "TokenSequence":
        """Concatenate tokens and sequences into a new sequence."""
        tokens = []
        for part in parts:
            if isinstance(part, Token):
                tokens.append(part)
            else:
                tokens.extend(part)
        return cls(tuple(tokens))

    def __len__(self) -> int:
        return self._stop - self._start

    def __bool__(self) -> bool:
        return self._stop > self._start

    def __iter__(self) -> Iterator[Token]:
        for i in range(self._start, self._stop):
            yield self._tokens[i]

    @overload
    def __getitem__(self, index: int) -> Token: ...

    @overload
    def __getitem__(self, index: slice) -> "TokenSequence": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            start, stop, step = index.indices(len(self))
            if step != 1:
                raise ValueError("TokenSequence slices must be contiguous")
            stop = max(start, stop)
            return TokenSequence(self._tokens, self._start + start, self._start + stop)
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("token index out of range")
        return self._tokens[self._start + index]

    def __add__(self, other: Union[Token, "TokenSequence"]) -> "TokenSequence":
        return TokenSequence.of(self, other)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TokenSequence):
            return len(self) == len(other) and all(a == b for a, b in zip(self, other))
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self))

    def __repr__(self) -> str:
        return f"TokenSequence([{{ {self.render()} }}])"

    @property
    def first(self) -> Token:
        return self[0]

    @property
    def last(self) -> Token:
        return self[-1]

    def skip(self, count: int) -> "TokenSequence":
        """View without the first `count` tokens."""
        return TokenSequence(self._tokens, min(self._start + count, self._stop), self._stop)

    def starts_with(self, *patterns: object) -> bool:
        """Fixed-prefix shape test; never looks past len(patterns) tokens."""
        if len(self) < len(patterns):
            return False
        return all(token_matches(self[i], p) for i, p in enumerate(patterns))

    def is_exactly(self, *patterns: object) -> bool:
        return len(self) == len(patterns) and self.starts_with(*patterns)

    def texts(self) -> Tuple[str, ...]:
        return tuple(token.text for token in self)

    def render(self) -> str:
        return " ".join(token.render() for token in self)

    def __str__(self) -> str:
        return self.render()


EMPTY = TokenSequence(())
