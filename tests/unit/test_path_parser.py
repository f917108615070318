"""
Tests for the Rust path grammar: segments, generic arguments, turbofish,
`>>` splitting, function-style arguments and fault anchoring.
"""

import pytest
from tests.test_utils import joined, parse_path


def compact(source):
    return "".join(source.split())


class TestPathRoundTrip:

    @pytest.mark.parametrize("source", [
        "a",
        "::std",
        "std::vec::Vec",
        "::std::collections::HashMap<K, V>",
        "Vec<u8>",
        "Foo<>",
        "Foo::<>",
        "Foo<Bar<>>",
        "Foo<Bar::<>>",
        "Foo::<Bar<>>",
        "Vec::<u8>",
        "Foo<Bar<u8>>",
        "Vec<Vec<Vec<u8>>>",
        "Foo<'a, T>",
        "Iterator<Item = u8>",
        "HashMap<K, V,>",
        "Foo<Bar<u8>,>",
        "Array<u8, 4>",
        "Array<u8, { N + 1 }>",
        "Foo<-1>",
        "Array<u8, -4,>",
        "Fn()",
        "Fn(u8, u8) -> bool",
        "Fn(u8,)",
        "FnMut(&str) -> Option<usize>",
        "a::b<c>::d<e>",
        "Foo<<T as Trait>::Assoc>",
        "Foo<dyn Error + Send + 'static>",
        "Foo<T + ?Sized>",
    ])
    def test_whole_input_is_a_path(self, driver, source):
        result = parse_path(source, driver)
        assert result.success, result.errors
        assert not result.outputs["rest"]
        assert joined(result.outputs["path"]) == compact(source)

    @pytest.mark.parametrize("source,path,rest", [
        ("Vec<u8> = x", "Vec<u8>", "=x"),
        ("a::b c d", "a::b", "cd"),
        ("Foo<Bar<u8>> , 1", "Foo<Bar<u8>>", ",1"),
        ("Fn(u8) -> u8; next", "Fn(u8)->u8", ";next"),
        ("Fn(u8) { body }", "Fn(u8)", "{body}"),
        ("T as Trait", "T", "asTrait"),
        ("Foo<>> x", "Foo<>", ">x"),
        ("Foo::<>> x", "Foo::<>", ">x"),
    ])
    def test_prefix_then_rest(self, driver, source, path, rest):
        result = parse_path(source, driver)
        assert result.success, result.errors
        assert joined(result.outputs["path"]) == path
        assert joined(result.outputs["rest"]) == rest

    def test_consumed_plus_rest_reproduces_input(self, driver):
        source = "::a::b<C, D<E>>::f(G) -> H rest of input"
        result = parse_path(source, driver)
        assert result.success, result.errors
        assert joined(result.outputs["path"]) + joined(result.outputs["rest"]) == compact(source)

    def test_reparse_of_rest_is_consistent(self, driver):
        first = parse_path("a::b c::d<e> f", driver)
        assert first.success
        second = parse_path(first.outputs["rest"].render(), driver)
        assert second.success
        assert joined(second.outputs["path"]) == "c::d<e>"
        assert joined(second.outputs["rest"]) == "f"

    def test_deterministic(self, driver):
        source = "Foo<Bar<u8>, 'a, Item = Baz::<T>>"
        outputs = [parse_path(source, driver).outputs for _ in range(3)]
        assert outputs[0] == outputs[1] == outputs[2]


class TestTurbofishAndSplitting:

    def test_turbofish_equivalence(self, driver):
        plain = parse_path("Vec<u8>", driver)
        turbofish = parse_path("Vec::<u8>", driver)
        assert plain.success and turbofish.success
        plain_texts = plain.outputs["path"].texts()
        turbofish_texts = tuple(t for t in turbofish.outputs["path"].texts() if t != "::")
        assert plain_texts == turbofish_texts

    def test_shift_right_is_split(self, driver):
        result = parse_path("Foo<Bar<u8>>", driver)
        assert result.success, result.errors
        assert result.outputs["path"].texts() == ("Foo", "<", "Bar", "<", "u8", ">", ">")

    def test_split_halves_keep_locations(self, driver):
        result = parse_path("Foo<Bar<u8>>", driver)
        closing = list(result.outputs["path"])[-2:]
        assert [t.location.column for t in closing] == [11, 12]

    def test_shift_left_opens_qualified_param(self, driver):
        result = parse_path("Vec<<T as Trait>::Out>", driver)
        assert result.success, result.errors
        assert result.outputs["path"].texts()[:3] == ("Vec", "<", "<")

    def test_trailing_comma_before_shift_right(self, driver):
        result = parse_path("A<B<C,>>", driver)
        assert result.success, result.errors
        assert joined(result.outputs["path"]) == "A<B<C,>>"

    def test_empty_generics_closed_by_shift_right(self, driver):
        result = parse_path("Foo<Bar<>>", driver)
        assert result.success, result.errors
        assert result.outputs["path"].texts() == ("Foo", "<", "Bar", "<", ">", ">")
        closing = list(result.outputs["path"])[-2:]
        assert [t.location.column for t in closing] == [9, 10]

    def test_extra_close_angle_is_rest(self, driver):
        result = parse_path("Vec<u8>> x", driver)
        assert result.success, result.errors
        assert joined(result.outputs["rest"]) == ">x"


class TestPathFaults:

    def _fault(self, driver, source):
        result = parse_path(source, driver)
        assert not result.success
        (message,) = result.errors
        return message

    def test_unclosed_generics_fault_at_last_param(self, driver):
        message = self._fault(driver, "Foo<u8")
        assert "error[E0001]: no rules expected the token `u8`" in message
        assert "<test>:1:5" in message
        assert "1 | Foo<u8" in message
        assert "    ^^ no rules expected this token" in message

    def test_open_angle_at_end(self, driver):
        message = self._fault(driver, "Foo<")
        assert "no rules expected the token `<`" in message
        assert "<test>:1:4" in message

    def test_unclosed_after_comma(self, driver):
        message = self._fault(driver, "Foo<u8,")
        assert "no rules expected the token `,`" in message

    def test_missing_comma_between_params(self, driver):
        message = self._fault(driver, "Foo<u8 u16>")
        assert "no rules expected the token `u16`" in message

    def test_double_colon_then_non_ident(self, driver):
        message = self._fault(driver, "Foo::1")
        assert "no rules expected the token `1`" in message

    def test_leading_double_colon_then_non_ident(self, driver):
        message = self._fault(driver, "::<u8>")
        assert "no rules expected the token `<`" in message

    def test_non_ident_start(self, driver):
        message = self._fault(driver, "'a")
        assert "no rules expected the token `'a`" in message

    def test_empty_input_is_eof(self, driver):
        message = self._fault(driver, "")
        assert "error[E0002]: unexpected end of input" in message
        assert "<end of input>" in message

    def test_dangling_arrow(self, driver):
        message = self._fault(driver, "Fn(u8) ->")
        assert "no rules expected the token `->`" in message

    def test_bad_fn_arg_separator(self, driver):
        message = self._fault(driver, "Fn(u8; u16)")
        assert "no rules expected the token `;`" in message

    def test_fault_inside_group_keeps_inner_location(self, driver):
        message = self._fault(driver, "Fn(u8, 1)")
        assert "no rules expected the token `1`" in message
        assert "<test>:1:8" in message

    def test_aborting_summary(self, driver):
        message = self._fault(driver, "Foo<u8")
        assert message.rstrip().endswith("error: aborting due to 1 previous error")

    def test_negative_literal_needs_a_literal(self, driver):
        message = self._fault(driver, "Foo<-T>")
        assert "no rules expected the token `-`" in message
