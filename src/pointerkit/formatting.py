"""Render reference tokens back into JSON Pointer text."""

from __future__ import annotations

from collections.abc import Iterable

# Bytes that may appear literally in the fragment form.  ``~`` is included so
# that ``~0``/``~1`` escapes stay literal, as in RFC 6901 section 6.
FRAGMENT_SAFE = frozenset(
    [0x21, 0x24, *range(0x26, 0x3C), 0x3D, *range(0x3F, 0x5B), 0x5F, *range(0x61, 0x7B), 0x7E]
)


def escape_token(token: str) -> str:
    """Escape a single JSON Pointer token (RFC 6901)."""
    return token.replace("~", "~0").replace("/", "~1")


def percent_encode(text: str) -> str:
    """Percent-encode every UTF-8 byte of *text* outside the fragment-safe set.

    Hex digits are always uppercase.
    """
    return "".join(
        chr(b) if b in FRAGMENT_SAFE else f"%{b:02X}"
        for b in text.encode("utf-8", "surrogatepass")
    )


def to_string(tokens: Iterable[str]) -> str:
    """Build the plain pointer form, e.g. ``/foo/a~1b``.

    The root pointer renders as ``""``.
    """
    return "".join("/" + escape_token(token) for token in tokens)


def to_uri_fragment(tokens: Iterable[str]) -> str:
    """Build the URI fragment form, e.g. ``#/foo/c%25d``.

    Always starts with ``#``; the root pointer renders as ``"#"``.
    """
    return "#" + "".join("/" + percent_encode(escape_token(token)) for token in tokens)


__all__ = ["FRAGMENT_SAFE", "escape_token", "percent_encode", "to_string", "to_uri_fragment"]
