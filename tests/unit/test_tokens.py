"""
Tests for the token model: kinds, groups, sequence views and shape matching.
"""

import pytest
from ttcall.shared.source_location import SourceLocation
from ttcall.shared.tokens import ANY, EMPTY, Delimiter, Token, TokenKind, TokenSequence


def ident(text):
    return Token(TokenKind.IDENT, text)


def punct(text):
    return Token(TokenKind.PUNCT, text)


def seq(*tokens):
    return TokenSequence(tokens)


class TestToken:

    def test_kind_properties(self):
        assert ident("Vec").is_ident
        assert Token(TokenKind.LIFETIME, "'a").is_lifetime
        assert Token(TokenKind.LITERAL, "1").is_literal
        assert punct(",").is_punct(",")
        assert not punct(",").is_punct(";")
        assert not ident(",").is_punct(",")

    def test_equality_ignores_location(self):
        a = Token(TokenKind.IDENT, "x", SourceLocation("a", 1, 1))
        b = Token(TokenKind.IDENT, "x", SourceLocation("b", 9, 9))
        assert a == b
        assert hash(a) == hash(b)

    def test_group_render(self):
        inner = seq(ident("u8"), punct(","), ident("u16"))
        group = Token(TokenKind.GROUP, "(", delimiter=Delimiter.PAREN, stream=inner)
        assert group.render() == "( u8 , u16 )"
        empty = Token(TokenKind.GROUP, "[", delimiter=Delimiter.BRACKET, stream=EMPTY)
        assert empty.render() == "[]"

    def test_split_first_halves_location(self):
        loc = SourceLocation("<t>", 1, 8, start=7, end=9, end_line=1, end_column=10)
        head, tail = Token(TokenKind.PUNCT, ">>", loc).split_first()
        assert (head.text, tail.text) == (">", ">")
        assert (head.location.column, head.location.end_column) == (8, 9)
        assert (tail.location.column, tail.location.end_column) == (9, 10)
        assert (tail.location.start, tail.location.end) == (8, 9)

    def test_split_first_rejects_single_char(self):
        with pytest.raises(ValueError):
            punct(">").split_first()
        with pytest.raises(ValueError):
            ident("ab").split_first()


class TestDelimiter:

    def test_open_close(self):
        assert Delimiter.PAREN.open == "("
        assert Delimiter.BRACE.close == "}"
        assert Delimiter.from_open("[") is Delimiter.BRACKET

    def test_from_open_rejects_closer(self):
        with pytest.raises(ValueError):
            Delimiter.from_open(")")


class TestTokenSequence:

    def test_len_bool_iter(self):
        s = seq(ident("a"), punct("::"), ident("b"))
        assert len(s) == 3
        assert s
        assert not EMPTY
        assert [t.text for t in s] == ["a", "::", "b"]

    def test_skip_shares_storage(self):
        s = seq(ident("a"), punct(","), ident("b"))
        rest = s.skip(2)
        assert rest.texts() == ("b",)
        assert rest._tokens is s._tokens
        assert not s.skip(10)

    def test_slice_and_index(self):
        s = seq(ident("a"), punct(","), ident("b"))
        assert s[:1].texts() == ("a",)
        assert s[1:].texts() == (",", "b")
        assert s[-1].text == "b"
        assert s.skip(1)[0].text == ","
        assert s.first.text == "a"
        assert s.last.text == "b"
        with pytest.raises(IndexError):
            s.skip(3)[0]

    def test_non_contiguous_slice_rejected(self):
        with pytest.raises(ValueError):
            seq(ident("a"), ident("b"))[::2]

    def test_of_concatenates(self):
        s = TokenSequence.of(seq(ident("a")), punct(","), [ident("b")], EMPTY)
        assert s.texts() == ("a", ",", "b")
        assert (seq(ident("a")) + punct(",")).texts() == ("a", ",")

    def test_equality_by_content(self):
        long = seq(ident("x"), ident("a"), ident("b"))
        assert long.skip(1) == seq(ident("a"), ident("b"))
        assert hash(long.skip(1)) == hash(seq(ident("a"), ident("b")))
        assert long != seq(ident("a"))

    def test_starts_with_patterns(self):
        group = Token(TokenKind.GROUP, "(", delimiter=Delimiter.PAREN, stream=EMPTY)
        s = seq(punct("::"), ident("Vec"), group)
        assert s.starts_with("::", TokenKind.IDENT, Delimiter.PAREN)
        assert s.starts_with("::", "Vec")
        assert s.starts_with(ANY, ANY, ANY)
        assert not s.starts_with("::", "Vec", Delimiter.BRACKET)
        assert not s.starts_with("::", "Vec", ANY, ANY)

    def test_literal_text_is_not_a_pattern_match(self):
        s = seq(Token(TokenKind.LITERAL, "\"x\""))
        assert not s.starts_with("\"x\"")
        assert s.starts_with(TokenKind.LITERAL)

    def test_is_exactly(self):
        s = seq(punct("<"))
        assert s.is_exactly("<")
        assert not seq(punct("<"), punct(">")).is_exactly("<")

    def test_render(self):
        assert seq(ident("Vec"), punct("<"), ident("u8"), punct(">")).render() == "Vec < u8 >"
        assert repr(seq(ident("a"))) == "TokenSequence([{ a }])"
