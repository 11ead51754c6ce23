"""Tests for pointerkit.parser and pointerkit.formatting."""

from __future__ import annotations

import random
import re
import urllib.parse

import pytest

from pointerkit import (
    EndInEscape,
    InvalidEscape,
    InvalidPercentEncoding,
    JsonPointer,
    MissingLeadingSlash,
    ParseError,
    escape_token,
    parse,
    to_string,
    to_uri_fragment,
    unescape_token,
)
from pointerkit.formatting import percent_encode
from pointerkit.parser import parse_tokens, percent_decode

_PLAIN_RE = re.compile(r"(/([^/~]|~[01])*)*")
_PERCENT_RE = re.compile(r"%[0-9A-Fa-f]{2}")

# Fragment-safe characters beyond the letters, digits and "_.-~" that
# urllib.parse.quote always leaves alone.
_FRAGMENT_LITERALS = "!$&'()*+,/:;=?@"

# Characters chosen so random strings hit every escape and percent edge case.
_ALPHABET = ["/", "/", "~", "0", "1", "2", "a", "%", "5", "F", "C", "3", " ", "é", "#"]


def _upper_hex(text: str) -> str:
    return _PERCENT_RE.sub(lambda m: m.group().upper(), text)


def _corpus(seed: int, *, prefix: str = "", count: int = 2000) -> list[str]:
    rng = random.Random(seed)
    return [
        prefix + "".join(rng.choice(_ALPHABET) for _ in range(rng.randint(0, 8)))
        for _ in range(count)
    ]


def _parses(text: str) -> bool:
    try:
        parse(text)
    except ParseError:
        return False
    return True


# ===================================================================
# Plain form
# ===================================================================


class TestPlainParsing:
    def test_empty_is_root(self):
        assert parse("").tokens == ()

    def test_single_slash_is_empty_key(self):
        assert parse("/").tokens == ("",)

    def test_repeated_slash_gives_empty_tokens(self):
        assert parse("//").tokens == ("", "")
        assert parse("/a//b/").tokens == ("a", "", "b", "")

    def test_simple_path(self):
        assert parse("/foo/0/bar").tokens == ("foo", "0", "bar")

    def test_tokens_stay_strings(self):
        assert all(isinstance(t, str) for t in parse("/0/1"))

    def test_escapes(self):
        assert parse("/a~1b/m~0n").tokens == ("a/b", "m~n")

    def test_escapes_decode_left_to_right(self):
        assert parse("/~01").tokens == ("~1",)
        assert parse("/~10").tokens == ("/0",)

    def test_percent_is_literal_in_plain_form(self):
        assert parse("/c%25d").tokens == ("c%25d",)

    def test_parse_tokens_returns_list(self):
        assert parse_tokens("/a/b") == ["a", "b"]


class TestParseErrors:
    def test_missing_leading_slash(self):
        with pytest.raises(MissingLeadingSlash, match="must start with '/'"):
            parse("foo/bar")

    def test_end_in_escape(self):
        with pytest.raises(EndInEscape) as ei:
            parse("/a~")
        assert ei.value.position == 2
        assert ei.value.text == "/a~"

    def test_end_in_escape_mid_pointer(self):
        with pytest.raises(EndInEscape):
            parse("/a~/b")

    def test_invalid_escape_reports_char(self):
        with pytest.raises(InvalidEscape, match="'~2'") as ei:
            parse("/ok/a~2b")
        assert ei.value.char == "2"
        assert ei.value.position == 5

    def test_first_error_wins(self):
        with pytest.raises(InvalidEscape):
            parse("/a~x/b~")

    def test_parse_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            parse("nope")

    def test_errors_support_match_statement(self):
        with pytest.raises(InvalidEscape) as ei:
            parse("/~q")
        match ei.value:
            case InvalidEscape(char):
                assert char == "q"
            case _:
                pytest.fail("pattern did not match")


# ===================================================================
# URI fragment form
# ===================================================================


class TestFragmentParsing:
    def test_hash_alone_is_root(self):
        assert parse("#").tokens == ()

    def test_hash_slash(self):
        assert parse("#/").tokens == ("",)

    def test_percent_decoding(self):
        assert parse("#/c%25d/%20").tokens == ("c%d", " ")

    def test_lowercase_hex_accepted(self):
        assert parse("#/e%5ef").tokens == ("e^f",)

    def test_multibyte_utf8(self):
        assert parse("#/%C3%A9").tokens == ("é",)

    def test_encoded_slash_is_rejected(self):
        with pytest.raises(InvalidPercentEncoding, match="Needlessly percent-encoded") as ei:
            parse("#/a%2Fb")
        assert ei.value.sequence == "%2F"
        assert ei.value.position == 3

    def test_encoded_tilde_is_rejected(self):
        with pytest.raises(InvalidPercentEncoding) as ei:
            parse("#/a%7E1b")
        assert ei.value.sequence == "%7E"

    @pytest.mark.parametrize(
        ("text", "position"),
        [("#/a b", 3), ("#/é", 2), ("#/e^f", 3), ("#/a#b", 3), ('#/k"l', 3)],
    )
    def test_unsafe_literal_characters_are_rejected(self, text, position):
        with pytest.raises(InvalidPercentEncoding, match="must be percent-encoded") as ei:
            parse(text)
        assert ei.value.position == position
        assert ei.value.sequence == text[position]

    @pytest.mark.parametrize("text", ["#/%41", "#/%61", "#/%7e0", "#/%30", "#/%21"])
    def test_safe_characters_must_appear_literally(self, text):
        with pytest.raises(InvalidPercentEncoding, match="Needlessly") as ei:
            parse(text)
        assert ei.value.position == 2

    def test_missing_leading_slash(self):
        with pytest.raises(MissingLeadingSlash) as ei:
            parse("#foo")
        assert ei.value.position == 1

    def test_truncated_percent_sequence(self):
        with pytest.raises(InvalidPercentEncoding) as ei:
            parse("#/a%2")
        assert ei.value.sequence == "%2"
        assert ei.value.position == 3

    def test_non_hex_percent_sequence(self):
        with pytest.raises(InvalidPercentEncoding) as ei:
            parse("#/%zz")
        assert ei.value.sequence == "%zz"

    def test_invalid_utf8(self):
        with pytest.raises(InvalidPercentEncoding) as ei:
            parse("#/%C3")
        assert ei.value.sequence == "%C3"
        assert ei.value.position == 2

    def test_escape_errors_point_into_raw_text(self):
        text = "#/%C3%A9~2"
        with pytest.raises(InvalidEscape) as ei:
            parse(text)
        assert ei.value.text == text
        assert ei.value.position == 8
        assert text[ei.value.position] == "~"

    def test_end_in_escape_points_into_raw_text(self):
        text = "#/%25/b~"
        with pytest.raises(EndInEscape) as ei:
            parse(text)
        assert text[ei.value.position] == "~"

    def test_percent_decode_without_escapes_is_identity(self):
        assert percent_decode("/plain") == "/plain"

    def test_percent_decode_reports_offsets_into_text(self):
        with pytest.raises(InvalidPercentEncoding) as ei:
            percent_decode("/a b", text="#/a b", offset=1)
        assert ei.value.position == 3


# ===================================================================
# Formatting
# ===================================================================


class TestFormatting:
    def test_root(self):
        assert to_string([]) == ""
        assert to_uri_fragment([]) == "#"

    def test_escape_token(self):
        assert escape_token("a/b~c") == "a~1b~0c"

    def test_unescape_token(self):
        assert unescape_token("a~1b~0c") == "a/b~c"

    def test_plain(self):
        assert to_string(["foo", "a/b", "m~n", ""]) == "/foo/a~1b/m~0n/"

    def test_fragment_percent_encodes_unsafe_bytes(self):
        assert to_uri_fragment(["c%d", "e^f", " ", "é"]) == "#/c%25d/e%5Ef/%20/%C3%A9"

    def test_fragment_keeps_escapes_literal(self):
        assert to_uri_fragment(["a/b", "m~n"]) == "#/a~1b/m~0n"

    def test_fragment_encodes_hash(self):
        assert percent_encode("#") == "%23"

    def test_fragment_uses_uppercase_hex(self):
        assert parse("#/e%5ef").uri_fragment() == "#/e%5Ef"

    def test_fragment_unparses(self):
        for text in ("#/", "#/per%25/%25cent"):
            assert parse(text).uri_fragment() == text

    def test_pointer_and_token_list_render_the_same(self):
        assert to_string(JsonPointer(["x", "y"])) == to_string(["x", "y"]) == "/x/y"


# ===================================================================
# Properties over a seeded corpus
# ===================================================================


class TestProperties:
    def test_plain_acceptance_matches_grammar(self):
        for text in _corpus(6901):
            if text.startswith("#"):
                continue
            assert _parses(text) == bool(_PLAIN_RE.fullmatch(text)), text

    def test_fragment_acceptance_matches_grammar(self):
        accepted = 0
        for text in _corpus(3986, prefix="#"):
            body = text[1:]
            try:
                decoded = urllib.parse.unquote_to_bytes(body).decode("utf-8")
            except UnicodeDecodeError:
                expected = False
            else:
                canonical = urllib.parse.quote(decoded, safe=_FRAGMENT_LITERALS)
                expected = canonical == _upper_hex(body) and bool(_PLAIN_RE.fullmatch(decoded))
            assert _parses(text) == expected, text
            accepted += expected
        assert accepted > 50

    def test_plain_round_trip(self):
        for text in _corpus(42):
            if text.startswith("#") or not _parses(text):
                continue
            assert str(parse(text)) == text

    def test_fragment_round_trip_over_accepted_input(self):
        for text in _corpus(1738, prefix="#"):
            if _parses(text):
                assert parse(text).uri_fragment() == _upper_hex(text), text

    def test_fragment_round_trip(self):
        rng = random.Random(7)
        for _ in range(500):
            tokens = [
                "".join(rng.choice(_ALPHABET) for _ in range(rng.randint(0, 5)))
                for _ in range(rng.randint(0, 4))
            ]
            text = to_uri_fragment(tokens)
            pointer = parse(text)
            assert list(pointer) == tokens
            assert pointer.uri_fragment() == text
