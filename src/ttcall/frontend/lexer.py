"""
Lexer

Rust Pattern: rustc_parse::lexer (token trees)

Turns source text into a TokenSequence of token trees: bracket-delimited
groups become single GROUP tokens whose inner tokens are a nested sequence.
"""

from pathlib import Path
from typing import List, Optional, Union
import logging

from lark import Lark, Transformer
from lark import Token as LarkToken
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedToken

from ..shared.errors import LexError
from ..shared.source_location import SourceLocation
from ..shared.tokens import Delimiter, Token, TokenKind, TokenSequence
from ..utils.config import DEFAULT_LEXER_CACHE_FILE, DEFAULT_SOURCE_FILE

logger = logging.getLogger(__name__)

_KINDS = {
    "IDENT": TokenKind.IDENT,
    "LIFETIME": TokenKind.LIFETIME,
    "STRING": TokenKind.LITERAL,
    "CHAR": TokenKind.LITERAL,
    "NUMBER": TokenKind.LITERAL,
    "PUNCT": TokenKind.PUNCT,
}

_OPENERS = {"LPAR", "LSQB", "LBRACE"}
_CLOSERS = {"RPAR", "RSQB", "RBRACE"}


def _location(tok: LarkToken, source_file: str) -> SourceLocation:
    return SourceLocation(
        file=source_file,
        line=tok.line,
        column=tok.column,
        start=tok.start_pos,
        end=tok.end_pos,
        end_line=tok.end_line,
        end_column=tok.end_column,
    )


class TokenTreeBuilder(Transformer):
    """Converts the lark parse tree into Token / TokenSequence values."""

    def __init__(self, source_file: str = DEFAULT_SOURCE_FILE):
        super().__init__(visit_tokens=False)
        self.current_file = source_file

    def _token(self, child: Union[Token, LarkToken]) -> Token:
        if isinstance(child, Token):
            return child
        kind = _KINDS[child.type]
        # `_` is punctuation, not an identifier (Rust pattern: `$i:ident` rejects it)
        if kind is TokenKind.IDENT and child.value == "_":
            kind = TokenKind.PUNCT
        return Token(kind, str(child.value), _location(child, self.current_file))

    def start(self, children: List[Union[Token, LarkToken]]) -> TokenSequence:
        return TokenSequence(tuple(self._token(c) for c in children))

    def group(self, children: List[Union[Token, LarkToken]]) -> Token:
        open_tok, close_tok = children[0], children[-1]
        inner = TokenSequence(tuple(self._token(c) for c in children[1:-1]))
        location = SourceLocation(
            file=self.current_file,
            line=open_tok.line,
            column=open_tok.column,
            start=open_tok.start_pos,
            end=close_tok.end_pos,
            end_line=close_tok.end_line,
            end_column=close_tok.end_column,
        )
        return Token(
            TokenKind.GROUP,
            str(open_tok.value),
            location,
            delimiter=Delimiter.from_open(str(open_tok.value)),
            stream=inner,
        )


class Lexer:
    """
    Token-tree lexer built on lark.

    Uses a cached LALR grammar with a basic lexer; the grammar only checks
    delimiter balance, everything else is a flat terminal.
    """

    def __init__(self, cache_file: Optional[str] = DEFAULT_LEXER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "tokens.lark"
        self.parser = Lark.open(
            grammar_path,
            start="start",
            parser="lalr",
            lexer="basic",
            cache=cache_file if cache_file else False,
            propagate_positions=True,
            maybe_placeholders=False,
        )

    def tokenize(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> TokenSequence:
        """
        Lex source text into token trees.

        Raises LexError anchored at the offending character or delimiter.
        """
        try:
            tree = self.parser.parse(source)
        except UnexpectedCharacters as e:
            char = source[e.pos_in_stream] if 0 <= e.pos_in_stream < len(source) else ""
            location = SourceLocation(
                file=source_file, line=e.line, column=e.column,
                start=e.pos_in_stream, end=e.pos_in_stream + 1,
                end_line=e.line, end_column=e.column + 1,
            )
            raise LexError(f"unknown start of token: `{char}`", location, source_code=source) from e
        except UnexpectedToken as e:
            if e.token.type in _CLOSERS:
                location = _location(e.token, source_file)
                raise LexError(
                    f"unexpected closing delimiter: `{e.token.value}`",
                    location,
                    source_code=source,
                    label="unexpected closing delimiter",
                ) from e
            raise self._unclosed(source, source_file) from e
        except UnexpectedEOF as e:
            raise self._unclosed(source, source_file) from e

        builder = TokenTreeBuilder(source_file)
        tokens = builder.transform(tree)
        logger.debug(f"lexed {len(tokens)} top-level token trees from {source_file}")
        return tokens

    def _unclosed(self, source: str, source_file: str) -> LexError:
        """Anchor an end-of-input lexing error at the innermost unclosed delimiter."""
        stack: List[LarkToken] = []
        for tok in self.parser.lex(source):
            if tok.type in _OPENERS:
                stack.append(tok)
            elif tok.type in _CLOSERS and stack:
                stack.pop()
        location = _location(stack[-1], source_file) if stack else None
        return LexError(
            "this input contains an unclosed delimiter",
            location,
            source_code=source,
            label="unclosed delimiter",
        )


_default_lexer: Optional[Lexer] = None


def tokenize(source: str, source_file: str = DEFAULT_SOURCE_FILE) -> TokenSequence:
    """Lex with a shared module-level Lexer."""
    global _default_lexer
    if _default_lexer is None:
        _default_lexer = Lexer()
    return _default_lexer.tokenize(source, source_file)
