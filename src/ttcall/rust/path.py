"""
Path Parser

Rust Pattern: syn::Path as a chain of macro_rules states

    Path        := "::"? Ident PathTail
    PathTail    := "::"? Ident GenericOrTail | GenericArgs PathTail2 | ε
    GenericArgs := "<" ">" | "<" Param ("," Param)* ","? ">" | "::" "<" ... ">"
    Param       := Lifetime | Ident "=" Type | ConstArg | Type
    FnArgs      := "(" (Type ("," Type)*)? ")" ("->" Type)?

Every rule looks at a fixed prefix of at most three tokens and the first
applicable shape wins; there is no backtracking.
"""

from typing import Optional

from ..runtime.protocol import (
    Arguments, Continuation, Step, arg, no_rules, tail_call, to, tt_call, tt_return,
)
from ..runtime.registry import callee
from ..runtime.unexpected import error_eof, error_unexpected, error_unexpected_last
from ..shared.tokens import EMPTY, Delimiter, TokenKind, TokenSequence
from .names import (
    AFTER_CLOSE_ANGLE, AFTER_FN_ARGS, AFTER_IDENT, GENERIC_PARAM, IN_ANGLE_BRACKETS,
    PARSE_PATH, PARSE_TYPE, TYPE_WITH_PLUS, VALIDATE_FN_ARGS,
)

IDENT = TokenKind.IDENT


@callee(PARSE_PATH, outputs=("path", "rest"))
def parse_path(caller: Optional[Continuation], args: Arguments) -> Step:
    """Entry point: absolute or relative path, then the first segment."""
    matched = args.match("input")
    if matched is not None:
        (tokens,) = matched

        # Absolute path
        if tokens.starts_with("::", IDENT):
            return tt_call(
                AFTER_IDENT,
                arg("input", tokens.skip(2)),
                returns_to=to(PARSE_PATH, arg("prefix", tokens[:2]), caller=caller),
            )

        # Relative path
        if tokens.starts_with(IDENT):
            return tt_call(
                AFTER_IDENT,
                arg("input", tokens.skip(1)),
                returns_to=to(PARSE_PATH, arg("prefix", tokens[:1]), caller=caller),
            )

        if tokens.starts_with("::") and len(tokens) > 1:
            error_unexpected(tokens.skip(1))
        if tokens:
            error_unexpected(tokens)
        error_eof()

    matched = args.match("prefix", "path", "rest")
    if matched is not None:
        prefix, path, rest = matched
        return tt_return(caller, arg("path", prefix, path), arg("rest", rest))

    no_rules(PARSE_PATH, args)


@callee(AFTER_IDENT, outputs=("path", "rest"))
def parse_possibly_empty_path_after_ident(caller: Optional[Continuation], args: Arguments) -> Step:
    matched = args.match("input")
    if matched is not None:
        path, tokens = EMPTY, matched[0]
    else:
        matched = args.match("path", "tokens")
        if matched is None:
            no_rules(AFTER_IDENT, args)
        path, tokens = matched

    # Empty angle brackets
    if tokens.starts_with("<", ">"):
        return tail_call(
            AFTER_CLOSE_ANGLE, caller,
            arg("path", path, tokens[:2]),
            arg("tokens", tokens.skip(2)),
        )

    # Empty angle brackets closed by the first half of `>>`
    if tokens.starts_with("<", ">>"):
        gt, reopened = tokens[1].split_first()
        return tt_return(
            caller,
            arg("path", path, tokens[:1], gt),
            arg("rest", reopened, tokens.skip(2)),
        )

    # Input ends after open angle bracket
    if tokens.is_exactly("<"):
        error_unexpected(tokens)

    # Generic params inside angle brackets
    if tokens.starts_with("<"):
        return _open_generic_args(caller, path, tokens[:1], tokens.skip(1))

    # `<<` opens the list and a qualified path inside it
    if tokens.starts_with("<<"):
        lt, inner_lt = tokens.first.split_first()
        return _open_generic_args(caller, path, TokenSequence((lt,)), TokenSequence.of(inner_lt, tokens.skip(1)))

    # Empty turbofish
    if tokens.starts_with("::", "<", ">"):
        return tail_call(
            AFTER_CLOSE_ANGLE, caller,
            arg("path", path, tokens[:3]),
            arg("tokens", tokens.skip(3)),
        )

    if tokens.starts_with("::", "<", ">>"):
        gt, reopened = tokens[2].split_first()
        return tt_return(
            caller,
            arg("path", path, tokens[:2], gt),
            arg("rest", reopened, tokens.skip(3)),
        )

    # Generic params inside turbofish
    if tokens.starts_with("::", "<") and len(tokens) > 2:
        return _open_generic_args(caller, path, tokens[:2], tokens.skip(2))

    if tokens.starts_with("::", "<<") and len(tokens) > 2:
        lt, inner_lt = tokens[1].split_first()
        return _open_generic_args(caller, path, TokenSequence.of(tokens[:1], lt), TokenSequence.of(inner_lt, tokens.skip(2)))

    # Parenthesized function arguments
    if tokens.starts_with(Delimiter.PAREN):
        return tt_call(
            VALIDATE_FN_ARGS,
            arg("tokens", tokens.first.stream),
            returns_to=to(
                AFTER_FN_ARGS,
                arg("path", path, tokens[:1]),
                arg("tokens", tokens.skip(1)),
                caller=caller,
            ),
        )

    # Anything allowed after a close angle is allowed after an ident
    return tail_call(AFTER_CLOSE_ANGLE, caller, arg("path", path), arg("tokens", tokens))


def _open_generic_args(caller: Optional[Continuation], path: TokenSequence,
                       opening: TokenSequence, rest: TokenSequence) -> Step:
    return tt_call(
        GENERIC_PARAM,
        arg("input", rest),
        returns_to=to(IN_ANGLE_BRACKETS, arg("prefix", path, opening), caller=caller),
    )


@callee(AFTER_CLOSE_ANGLE, outputs=("path", "rest"))
def parse_possibly_empty_path_after_close_angle(caller: Optional[Continuation], args: Arguments) -> Step:
    matched = args.match("path", "tokens")
    if matched is None:
        no_rules(AFTER_CLOSE_ANGLE, args)
    path, tokens = matched

    # Next path segment
    if tokens.starts_with("::", IDENT):
        return tail_call(
            AFTER_IDENT, caller,
            arg("path", path, tokens[:2]),
            arg("tokens", tokens.skip(2)),
        )

    # Double colon followed by something other than an ident
    if tokens.starts_with("::") and len(tokens) > 1:
        error_unexpected(tokens.skip(1))

    # End of path
    return tt_return(caller, arg("path", path), arg("rest", tokens))


@callee(IN_ANGLE_BRACKETS, outputs=("path", "rest"))
def parse_in_angle_brackets(caller: Optional[Continuation], args: Arguments) -> Step:
    """
    After one generic param: close, split `>>`, or parse the next param.

    The lexer fuses `>>` into one token. Its first half closes this list and
    its second half goes back to the caller at the front of `rest`, where the
    enclosing list closes on it.
    """
    matched = args.match("prefix", "param", "rest")
    if matched is None:
        no_rules(IN_ANGLE_BRACKETS, args)
    prefix, param, rest = matched

    if rest.starts_with(">"):
        return tail_call(
            AFTER_CLOSE_ANGLE, caller,
            arg("path", prefix, param, rest[:1]),
            arg("tokens", rest.skip(1)),
        )

    if rest.starts_with(">>"):
        gt, reopened = rest.first.split_first()
        return tt_return(
            caller,
            arg("path", prefix, param, gt),
            arg("rest", reopened, rest.skip(1)),
        )

    # Trailing comma
    if rest.starts_with(",", ">"):
        return tail_call(
            AFTER_CLOSE_ANGLE, caller,
            arg("path", prefix, param, rest[:2]),
            arg("tokens", rest.skip(2)),
        )

    if rest.starts_with(",", ">>"):
        gt, reopened = rest[1].split_first()
        return tt_return(
            caller,
            arg("path", prefix, param, rest[:1], gt),
            arg("rest", reopened, rest.skip(2)),
        )

    # Next generic param after comma
    if rest.starts_with(",") and len(rest) > 1:
        return tt_call(
            GENERIC_PARAM,
            arg("input", rest.skip(1)),
            returns_to=to(IN_ANGLE_BRACKETS, arg("prefix", prefix, param, rest[:1]), caller=caller),
        )

    # Param not followed by `>` or comma
    if rest:
        error_unexpected(rest)

    # Input ends inside angle brackets: no token at the missing `>`
    error_unexpected_last(param)


@callee(GENERIC_PARAM, outputs=("param", "rest"))
def parse_generic_param(caller: Optional[Continuation], args: Arguments) -> Step:
    matched = args.match("input")
    if matched is not None:
        (tokens,) = matched

        if tokens.starts_with(TokenKind.LIFETIME):
            return tt_return(caller, arg("param", tokens[:1]), arg("rest", tokens.skip(1)))

        # Associated type binding
        if tokens.starts_with(IDENT, "=") and len(tokens) > 2:
            return tt_call(
                PARSE_TYPE,
                arg("input", tokens.skip(2)),
                returns_to=to(GENERIC_PARAM, arg("assoc", tokens[:2]), caller=caller),
            )

        # Const argument: literal or block
        if tokens.starts_with(TokenKind.LITERAL) or tokens.starts_with(Delimiter.BRACE):
            return tt_return(caller, arg("param", tokens[:1]), arg("rest", tokens.skip(1)))

        # Negative literal
        if tokens.starts_with("-", TokenKind.LITERAL):
            return tt_return(caller, arg("param", tokens[:2]), arg("rest", tokens.skip(2)))

        if tokens:
            return tt_call(TYPE_WITH_PLUS, arg("input", tokens), returns_to=to(GENERIC_PARAM, caller=caller))
        error_eof()

    matched = args.match("assoc", "type", "rest")
    if matched is not None:
        assoc, ty, rest = matched
        return tt_return(caller, arg("param", assoc, ty), arg("rest", rest))

    matched = args.match("type", "rest")
    if matched is not None:
        ty, rest = matched
        return tt_return(caller, arg("param", ty), arg("rest", rest))

    no_rules(GENERIC_PARAM, args)


def validate_list(name: str, element: str, caller: Optional[Continuation], args: Arguments) -> Step:
    """
    Shared body of the comma-separated type list validators.

    Returns no outputs; a trailing comma is accepted.
    """
    matched = args.match("tokens")
    if matched is not None:
        (tokens,) = matched
        if not tokens:
            return tt_return(caller)
        return tt_call(element, arg("input", tokens), returns_to=to(name, caller=caller))

    matched = args.match("type", "rest")
    if matched is not None:
        _, rest = matched
        if not rest:
            return tt_return(caller)
        if rest.starts_with(","):
            return tail_call(name, caller, arg("tokens", rest.skip(1)))
        error_unexpected(rest)

    no_rules(name, args)


@callee(VALIDATE_FN_ARGS, outputs=())
def validate_fn_path_args(caller: Optional[Continuation], args: Arguments) -> Step:
    """Parse and discard the argument types of `Fn(A, B)`."""
    return validate_list(VALIDATE_FN_ARGS, PARSE_TYPE, caller, args)


@callee(AFTER_FN_ARGS, outputs=("path", "rest"))
def parse_path_after_fn_args(caller: Optional[Continuation], args: Arguments) -> Step:
    matched = args.match("path", "tokens")
    if matched is not None:
        path, tokens = matched

        # Return type
        if tokens.starts_with("->"):
            if len(tokens) == 1:
                error_unexpected(tokens)
            return tt_call(
                PARSE_TYPE,
                arg("input", tokens.skip(1)),
                returns_to=to(AFTER_FN_ARGS, arg("path", path, tokens[:1]), caller=caller),
            )

        # Default return type
        return tt_return(caller, arg("path", path), arg("rest", tokens))

    matched = args.match("path", "type", "rest")
    if matched is not None:
        path, ret, rest = matched
        return tt_return(caller, arg("path", path, ret), arg("rest", rest))

    no_rules(AFTER_FN_ARGS, args)
