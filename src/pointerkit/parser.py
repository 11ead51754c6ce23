"""Parse JSON Pointer text (RFC 6901) into decoded reference tokens.

Two textual forms are accepted:

* the plain form, e.g. ``/foo/0/a~1b``;
* the URI Fragment Identifier Representation (RFC 6901 section 6), detected
  by a leading ``#``, e.g. ``#/foo/0/c%25d``.  The body is percent-decoded
  before it is split and unescaped.

Fragment input must be in canonical form: characters outside the
fragment-safe set are percent-encoded, and characters inside it are not.
Hex digits may be either case; the formatter always writes uppercase.

Parsing fails fast: the first problem raises the matching
:class:`~pointerkit.errors.ParseError` subclass.  Error positions are
offsets into the text as given.
"""

from __future__ import annotations

import string
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .errors import EndInEscape, InvalidEscape, InvalidPercentEncoding, MissingLeadingSlash
from .formatting import FRAGMENT_SAFE

if TYPE_CHECKING:
    from .pointer import JsonPointer

_HEXDIGITS = frozenset(string.hexdigits)


def _percent_decode(body: str, text: str, offset: int) -> tuple[str, list[int]]:
    """Decode *body*; also return the offset in *text* of each decoded char."""
    raw = bytearray()
    # Offset into *text* that produced each byte.
    origins: list[int] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "%":
            pair = body[i + 1 : i + 3]
            if len(pair) != 2 or not _HEXDIGITS.issuperset(pair):
                raise InvalidPercentEncoding(body[i : i + 3], text=text, position=offset + i)
            byte = int(pair, 16)
            if byte in FRAGMENT_SAFE:
                raise InvalidPercentEncoding(
                    body[i : i + 3],
                    text=text,
                    position=offset + i,
                    reason="Needlessly percent-encoded character",
                )
            raw.append(byte)
            origins.append(offset + i)
            i += 3
        else:
            if ord(ch) not in FRAGMENT_SAFE:
                raise InvalidPercentEncoding(
                    ch,
                    text=text,
                    position=offset + i,
                    reason="Character must be percent-encoded",
                )
            raw.append(ord(ch))
            origins.append(offset + i)
            i += 1

    try:
        decoded = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        bad = "".join(f"%{b:02X}" for b in raw[exc.start : exc.end])
        raise InvalidPercentEncoding(bad, text=text, position=origins[exc.start]) from None

    char_origins: list[int] = []
    pos = 0
    for ch in decoded:
        char_origins.append(origins[pos])
        pos += len(ch.encode("utf-8"))
    return decoded, char_origins


def percent_decode(body: str, *, text: str | None = None, offset: int = 0) -> str:
    """Decode the body of a URI fragment (without its ``#``).

    Unlike :func:`urllib.parse.unquote` this is strict: malformed ``%XX``
    sequences, invalid UTF-8, literal characters outside the fragment-safe
    set, and ``%XX`` sequences encoding a fragment-safe character all raise
    :class:`~pointerkit.errors.InvalidPercentEncoding`.  *text* is the
    original input and *offset* the position of *body* inside it, both used
    only for error reporting.
    """
    return _percent_decode(body, body if text is None else text, offset)[0]


def _unescape(segment: str, text: str, positions: Sequence[int]) -> str:
    if "~" not in segment:
        return segment

    out: list[str] = []
    chars = iter(enumerate(segment))
    for idx, ch in chars:
        if ch != "~":
            out.append(ch)
            continue
        nxt = next(chars, None)
        if nxt is None:
            raise EndInEscape(text=text, position=positions[idx])
        if nxt[1] == "0":
            out.append("~")
        elif nxt[1] == "1":
            out.append("/")
        else:
            raise InvalidEscape(nxt[1], text=text, position=positions[idx])
    return "".join(out)


def unescape_token(segment: str, *, text: str | None = None, offset: int = 0) -> str:
    """Decode ``~0`` and ``~1`` in a single reference token.

    Escapes are decoded left to right, so ``~01`` becomes ``~1`` and not
    ``/``.  *offset* is the position of *segment* inside *text*.
    """
    return _unescape(
        segment, segment if text is None else text, range(offset, offset + len(segment))
    )


def parse_tokens(text: str) -> list[str]:
    """Split pointer *text* into a list of unescaped reference tokens.

    The root pointers ``""`` and ``"#"`` return an empty list.
    """
    if text.startswith("#"):
        body, origins = _percent_decode(text[1:], text, 1)
    else:
        body, origins = text, range(len(text))
    if body == "":
        return []
    if not body.startswith("/"):
        raise MissingLeadingSlash(text=text, position=origins[0])

    tokens: list[str] = []
    start = 1
    for segment in body[1:].split("/"):
        tokens.append(_unescape(segment, text, origins[start : start + len(segment)]))
        start += len(segment) + 1
    return tokens


def parse(text: str) -> JsonPointer:
    """Parse *text* into a :class:`~pointerkit.pointer.JsonPointer`.

    Raises
    ------
    MissingLeadingSlash
        Non-empty pointer body that does not start with ``/``.
    EndInEscape
        A token ends with a bare ``~``.
    InvalidEscape
        ``~`` followed by something other than ``0`` or ``1``.
    InvalidPercentEncoding
        Fragment form that is not canonically percent-encoded.
    """
    from .pointer import JsonPointer

    return JsonPointer(parse_tokens(text))


__all__ = ["parse", "parse_tokens", "percent_decode", "unescape_token"]
