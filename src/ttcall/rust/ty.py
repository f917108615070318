"""
Type Parser

Rust Pattern: syn::Type as a chain of macro_rules states

    Type         := "(" TypeList ")" | "[" Type (";" Tokens)? "]"
                  | ("&" | "&&") Lifetime? "mut"? Type
                  | "*" ("const" | "mut") Type
                  | "!" | "_"
                  | "unsafe"? ("extern" Literal?)? "fn" FnArgs
                  | ("dyn" | "impl") Bound
                  | "<" Type ("as" Path)? ">" "::" Ident PathTail
                  | Path
    TypeWithPlus := Type ("+" Bound)*
    Bound        := Lifetime | "(" ... ")" | "?"? Path
"""

from typing import Optional

from ..runtime.protocol import (
    Arguments, Continuation, Step, arg, no_rules, tail_call, to, tt_call, tt_return,
)
from ..runtime.registry import callee
from ..runtime.unexpected import error_eof, error_unexpected, error_unexpected_last
from ..shared.tokens import Delimiter, TokenKind, TokenSequence
from .names import (
    AFTER_FN_ARGS, AFTER_IDENT, BOUND, BRACKETED_TYPE, FN_POINTER, PARSE_PATH, PARSE_TYPE,
    QUALIFIED_PATH, TYPE_WITH_PLUS, VALIDATE_FN_ARGS, VALIDATE_TYPE_LIST,
)
from .path import validate_list

IDENT = TokenKind.IDENT
LIFETIME = TokenKind.LIFETIME


@callee(PARSE_TYPE, outputs=("type", "rest"))
def parse_type(caller: Optional[Continuation], args: Arguments) -> Step:
    matched = args.match("input")
    if matched is not None:
        return _parse_type(caller, matched[0])

    # Returns from the sub-rules below, all normalized to `type`
    matched = args.match("type", "rest")
    if matched is not None:
        ty, rest = matched
        return tt_return(caller, arg("type", ty), arg("rest", rest))

    matched = args.match("path", "rest")
    if matched is not None:
        path, rest = matched
        return tt_return(caller, arg("type", path), arg("rest", rest))

    matched = args.match("prefix", "type", "rest")
    if matched is not None:
        prefix, ty, rest = matched
        return tt_return(caller, arg("type", prefix, ty), arg("rest", rest))

    # `dyn A + B`: each `+` continues the bound list
    matched = args.match("prefix", "bound", "rest")
    if matched is not None:
        prefix, bound, rest = matched
        if rest.starts_with("+"):
            if len(rest) == 1:
                error_unexpected(rest)
            return tt_call(
                BOUND,
                arg("input", rest.skip(1)),
                returns_to=to(PARSE_TYPE, arg("prefix", prefix, bound, rest[:1]), caller=caller),
            )
        return tt_return(caller, arg("type", prefix, bound), arg("rest", rest))

    no_rules(PARSE_TYPE, args)


def _parse_type(caller: Optional[Continuation], tokens: TokenSequence) -> Step:
    if not tokens:
        error_eof()

    # Tuple or parenthesized type
    if tokens.starts_with(Delimiter.PAREN):
        return tt_call(
            VALIDATE_TYPE_LIST,
            arg("tokens", tokens.first.stream),
            returns_to=to(PARSE_TYPE, arg("type", tokens[:1]), arg("rest", tokens.skip(1)), caller=caller),
        )

    # Slice or array
    if tokens.starts_with(Delimiter.BRACKET):
        inner = tokens.first.stream
        if not inner:
            error_unexpected(tokens)
        return tt_call(
            PARSE_TYPE,
            arg("input", inner),
            returns_to=to(BRACKETED_TYPE, arg("group", tokens[:1]), arg("tokens", tokens.skip(1)), caller=caller),
        )

    # Reference: up to three prefix tokens `& 'a mut`
    if tokens.starts_with("&") or tokens.starts_with("&&"):
        width = 1
        if tokens.skip(width).starts_with(LIFETIME):
            width += 1
        if tokens.skip(width).starts_with("mut"):
            width += 1
        if len(tokens) == width:
            error_unexpected_last(tokens)
        return _prefixed(caller, tokens[:width], tokens.skip(width))

    # Raw pointer
    if tokens.starts_with("*", "const") or tokens.starts_with("*", "mut"):
        if len(tokens) == 2:
            error_unexpected_last(tokens)
        return _prefixed(caller, tokens[:2], tokens.skip(2))
    if tokens.starts_with("*"):
        error_unexpected(tokens.skip(1) or tokens)

    # Never type and inferred type
    if tokens.starts_with("!") or tokens.starts_with("_"):
        return tt_return(caller, arg("type", tokens[:1]), arg("rest", tokens.skip(1)))

    # Function pointer
    if tokens.starts_with("fn") or tokens.starts_with("unsafe") or tokens.starts_with("extern"):
        return tt_call(
            FN_POINTER,
            arg("prefix"),
            arg("tokens", tokens),
            returns_to=to(PARSE_TYPE, caller=caller),
        )

    # Trait object or impl trait
    if tokens.starts_with("dyn") or tokens.starts_with("impl"):
        if len(tokens) == 1:
            error_unexpected(tokens)
        return tt_call(
            BOUND,
            arg("input", tokens.skip(1)),
            returns_to=to(PARSE_TYPE, arg("prefix", tokens[:1]), caller=caller),
        )

    # Qualified path
    if tokens.starts_with("<"):
        if len(tokens) == 1:
            error_unexpected(tokens)
        return tt_call(
            PARSE_TYPE,
            arg("input", tokens.skip(1)),
            returns_to=to(QUALIFIED_PATH, arg("prefix", tokens[:1]), caller=to(PARSE_TYPE, caller=caller)),
        )

    # Qualified path whose self type is itself qualified
    if tokens.starts_with("<<"):
        lt, inner_lt = tokens.first.split_first()
        return tt_call(
            PARSE_TYPE,
            arg("input", inner_lt, tokens.skip(1)),
            returns_to=to(QUALIFIED_PATH, arg("prefix", lt), caller=to(PARSE_TYPE, caller=caller)),
        )

    if tokens.starts_with("::") or tokens.starts_with(IDENT):
        return tt_call(PARSE_PATH, arg("input", tokens), returns_to=to(PARSE_TYPE, caller=caller))

    error_unexpected(tokens)


def _prefixed(caller: Optional[Continuation], prefix: TokenSequence, tokens: TokenSequence) -> Step:
    return tt_call(
        PARSE_TYPE,
        arg("input", tokens),
        returns_to=to(PARSE_TYPE, arg("prefix", prefix), caller=caller),
    )


@callee(TYPE_WITH_PLUS, outputs=("type", "rest"))
def parse_type_with_plus(caller: Optional[Continuation], args: Arguments) -> Step:
    matched = args.match("input")
    if matched is not None:
        (tokens,) = matched
        return tt_call(PARSE_TYPE, arg("input", tokens), returns_to=to(TYPE_WITH_PLUS, caller=caller))

    matched = args.match("prefix", "bound", "rest")
    if matched is not None:
        prefix, bound, rest = matched
        return tail_call(TYPE_WITH_PLUS, caller, arg("type", prefix, bound), arg("rest", rest))

    matched = args.match("type", "rest")
    if matched is None:
        no_rules(TYPE_WITH_PLUS, args)
    ty, rest = matched

    if rest.starts_with("+"):
        if len(rest) == 1:
            error_unexpected(rest)
        return tt_call(
            BOUND,
            arg("input", rest.skip(1)),
            returns_to=to(TYPE_WITH_PLUS, arg("prefix", ty, rest[:1]), caller=caller),
        )

    return tt_return(caller, arg("type", ty), arg("rest", rest))


@callee(BOUND, outputs=("bound", "rest"))
def parse_bound(caller: Optional[Continuation], args: Arguments) -> Step:
    matched = args.match("input")
    if matched is not None:
        (tokens,) = matched

        if tokens.starts_with(LIFETIME) or tokens.starts_with(Delimiter.PAREN):
            return tt_return(caller, arg("bound", tokens[:1]), arg("rest", tokens.skip(1)))

        # Relaxed bound `?Sized`
        if tokens.starts_with("?"):
            if len(tokens) == 1:
                error_unexpected(tokens)
            return tt_call(
                PARSE_PATH,
                arg("input", tokens.skip(1)),
                returns_to=to(BOUND, arg("prefix", tokens[:1]), caller=caller),
            )

        if tokens.starts_with("::") or tokens.starts_with(IDENT):
            return tt_call(PARSE_PATH, arg("input", tokens), returns_to=to(BOUND, arg("prefix"), caller=caller))

        if tokens:
            error_unexpected(tokens)
        error_eof()

    matched = args.match("prefix", "path", "rest")
    if matched is not None:
        prefix, path, rest = matched
        return tt_return(caller, arg("bound", prefix, path), arg("rest", rest))

    no_rules(BOUND, args)


@callee(VALIDATE_TYPE_LIST, outputs=())
def validate_type_list(caller: Optional[Continuation], args: Arguments) -> Step:
    """Parse and discard the element types of a tuple type."""
    return validate_list(VALIDATE_TYPE_LIST, TYPE_WITH_PLUS, caller, args)


@callee(BRACKETED_TYPE, outputs=("type", "rest"))
def parse_bracketed_type(caller: Optional[Continuation], args: Arguments) -> Step:
    """`[T]` or `[T; N]`; the length expression is kept opaque."""
    matched = args.match("group", "tokens", "type", "rest")
    if matched is None:
        no_rules(BRACKETED_TYPE, args)
    group, tokens, _, inner_rest = matched

    if not inner_rest or (inner_rest.starts_with(";") and len(inner_rest) > 1):
        return tt_return(caller, arg("type", group), arg("rest", tokens))
    error_unexpected(inner_rest)


@callee(FN_POINTER, outputs=("path", "rest"))
def parse_fn_pointer(caller: Optional[Continuation], args: Arguments) -> Step:
    """Qualifiers one at a time, then `fn(...)` and an optional return type."""
    matched = args.match("prefix", "tokens")
    if matched is None:
        no_rules(FN_POINTER, args)
    prefix, tokens = matched

    if tokens.starts_with("fn", Delimiter.PAREN):
        return tt_call(
            VALIDATE_FN_ARGS,
            arg("tokens", tokens[1].stream),
            returns_to=to(
                AFTER_FN_ARGS,
                arg("path", prefix, tokens[:2]),
                arg("tokens", tokens.skip(2)),
                caller=caller,
            ),
        )

    if tokens.starts_with("unsafe"):
        return tail_call(FN_POINTER, caller, arg("prefix", prefix, tokens[:1]), arg("tokens", tokens.skip(1)))
    if tokens.starts_with("extern", TokenKind.LITERAL):
        return tail_call(FN_POINTER, caller, arg("prefix", prefix, tokens[:2]), arg("tokens", tokens.skip(2)))
    if tokens.starts_with("extern"):
        return tail_call(FN_POINTER, caller, arg("prefix", prefix, tokens[:1]), arg("tokens", tokens.skip(1)))

    if tokens.starts_with("fn") and len(tokens) > 1:
        error_unexpected(tokens.skip(1))
    if tokens:
        error_unexpected(tokens)
    error_unexpected_last(prefix)


@callee(QUALIFIED_PATH, outputs=("path", "rest"))
def parse_qualified_path(caller: Optional[Continuation], args: Arguments) -> Step:
    """`<T as Trait>::Name...` after the self type has been parsed."""
    matched = args.match("prefix", "type", "rest")
    if matched is not None:
        prefix, ty, rest = matched
        if rest.starts_with("as") and len(rest) > 1:
            return tt_call(
                PARSE_PATH,
                arg("input", rest.skip(1)),
                returns_to=to(QUALIFIED_PATH, arg("prefix", prefix, ty, rest[:1]), caller=caller),
            )
        return _close_qualified_self(caller, TokenSequence.of(prefix, ty), rest)

    matched = args.match("prefix", "path", "rest")
    if matched is not None:
        prefix, path, rest = matched
        return _close_qualified_self(caller, TokenSequence.of(prefix, path), rest)

    no_rules(QUALIFIED_PATH, args)


def _close_qualified_self(caller: Optional[Continuation], prefix: TokenSequence, rest: TokenSequence) -> Step:
    if rest.starts_with(">", "::", IDENT):
        return tail_call(AFTER_IDENT, caller, arg("path", prefix, rest[:3]), arg("tokens", rest.skip(3)))

    # `<T>` must be followed by `::` and an associated item
    if rest.starts_with(">", "::") and len(rest) > 2:
        error_unexpected(rest.skip(2))
    if rest.starts_with(">") or rest.starts_with(">>"):
        error_unexpected_last(rest[:2])
    if rest:
        error_unexpected(rest)
    error_unexpected_last(prefix)
