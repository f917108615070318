"""
Tests for the Rust type grammar built on the path callees.
"""

import pytest
from tests.test_utils import joined, parse_type


def compact(source):
    return "".join(source.split())


class TestTypeForms:

    @pytest.mark.parametrize("source", [
        "u8",
        "::std::string::String",
        "()",
        "(u8,)",
        "(u8, Vec<String>)",
        "[u8]",
        "[u8; 4]",
        "[[u8; 4]; N * 2]",
        "&str",
        "&'a str",
        "&mut T",
        "&'a mut [u8]",
        "&&T",
        "*const u8",
        "*mut *const T",
        "!",
        "_",
        "fn()",
        "fn(u8, u16) -> bool",
        "unsafe fn()",
        "extern fn(i32)",
        "unsafe extern \"C\" fn(i32) -> i32",
        "dyn Error",
        "dyn Error + Send + 'static",
        "impl Iterator<Item = &'a u8> + 'a",
        "impl Fn(u8) -> u8",
        "dyn (Trait)",
        "<T as Trait>::Assoc",
        "<T>::Assoc",
        "<Vec<T>>::new",
        "<T as Iterator>::Item::Inner<u8>",
        "<<A as B>::C as D>::E",
        "Box<dyn Fn(&mut Vec<u8>) -> Result<(), E> + Send>",
    ])
    def test_whole_input_is_a_type(self, driver, source):
        result = parse_type(source, driver)
        assert result.success, result.errors
        assert not result.outputs["rest"]
        assert joined(result.outputs["type"]) == compact(source)

    @pytest.mark.parametrize("source,ty,rest", [
        ("u8 = 1", "u8", "=1"),
        ("&T, U", "&T", ",U"),
        ("[u8] rest", "[u8]", "rest"),
        ("T + Send", "T", "+Send"),
        ("fn() -> u8 where", "fn()->u8", "where"),
    ])
    def test_prefix_then_rest(self, driver, source, ty, rest):
        result = parse_type(source, driver)
        assert result.success, result.errors
        assert joined(result.outputs["type"]) == ty
        assert joined(result.outputs["rest"]) == rest

    def test_output_names(self, driver):
        result = parse_type("u8", driver)
        assert list(result.outputs) == ["type", "rest"]


class TestTypeFaults:

    @pytest.mark.parametrize("source,token", [
        ("1", "1"),
        ("&", "&"),
        ("&'a", "'a"),
        ("*", "*"),
        ("* T", "T"),
        ("*const", "const"),
        ("[]", "[]"),
        ("[u8 4]", "4"),
        ("[u8;]", ";"),
        ("(u8 u16)", "u16"),
        ("fn", "fn"),
        ("fn x", "x"),
        ("unsafe", "unsafe"),
        ("dyn", "dyn"),
        ("impl", "impl"),
        ("dyn 1", "1"),
        ("<", "<"),
        ("<T>", ">"),
        ("<T> x", "x"),
        ("<T>::1", "1"),
        ("<T as>::X", ">"),
        ("Foo<T + >", ">"),
        ("Foo<T +", "+"),
        ("dyn A +", "+"),
    ])
    def test_fault_anchor(self, driver, source, token):
        result = parse_type(source, driver)
        assert not result.success
        (message,) = result.errors
        assert f"no rules expected the token `{token}`" in message

    def test_empty_input_is_eof(self, driver):
        result = parse_type("", driver)
        assert not result.success
        assert "unexpected end of input" in result.errors[0]
