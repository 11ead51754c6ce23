"""Error taxonomy for JSON Pointer parsing and resolution.

Two families that never overlap:

* :class:`ParseError` -- the pointer *text* is malformed.
* :class:`PointerIndexError` -- a well-formed pointer does not resolve
  against a particular document.

Both derive from :class:`PointerError` so callers can catch everything the
library raises with a single ``except`` clause.
"""

from __future__ import annotations

from collections.abc import Sequence

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class PointerError(Exception):
    """Base exception for all JSON Pointer errors."""


# ---------------------------------------------------------------------------
# Parse-time errors
# ---------------------------------------------------------------------------


class ParseError(PointerError, ValueError):
    """Raised when pointer text does not follow RFC 6901 syntax.

    Attributes
    ----------
    text : str
        The full input that failed to parse.
    position : int
        Offset into ``text`` where the problem was found, so
        ``text[position]`` is the offending character (or the start of the
        offending ``%XX`` sequence).
    """

    def __init__(self, message: str, *, text: str, position: int = 0) -> None:
        super().__init__(message)
        self.text = text
        self.position = position


class EndInEscape(ParseError):
    """A ``~`` appeared as the last character of a reference token."""

    __match_args__ = ("position",)

    def __init__(self, *, text: str, position: int) -> None:
        super().__init__(
            f"Incomplete escape sequence at offset {position} in {text!r}",
            text=text,
            position=position,
        )


class InvalidEscape(ParseError):
    """A ``~`` was followed by something other than ``0`` or ``1``."""

    __match_args__ = ("char",)

    def __init__(self, char: str, *, text: str, position: int) -> None:
        super().__init__(
            f"Invalid escape sequence '~{char}' at offset {position} in {text!r}",
            text=text,
            position=position,
        )
        self.char = char


class MissingLeadingSlash(ParseError):
    """A non-empty pointer did not start with ``/``."""

    def __init__(self, *, text: str, position: int = 0) -> None:
        super().__init__(
            f"JSON Pointer must start with '/' or be empty, got: {text!r}",
            text=text,
            position=position,
        )


class InvalidPercentEncoding(ParseError):
    """A URI fragment was not in canonical percent-encoded form.

    Covers broken ``%XX`` sequences, invalid UTF-8, characters that must be
    percent-encoded but appear literally, and ``%XX`` sequences that encode a
    character which must appear literally.
    """

    __match_args__ = ("sequence",)

    def __init__(
        self, sequence: str, *, text: str, position: int, reason: str = "Invalid percent-encoding"
    ) -> None:
        super().__init__(
            f"{reason} {sequence!r} at offset {position} in {text!r}",
            text=text,
            position=position,
        )
        self.sequence = sequence


# ---------------------------------------------------------------------------
# Resolution-time errors
# ---------------------------------------------------------------------------


class PointerIndexError(PointerError, LookupError):
    """Raised when a pointer cannot be resolved against a document.

    ``at`` holds the reference tokens that were successfully walked before
    the failing token, so ``at + [token]`` is the prefix that failed.
    """

    def __init__(self, message: str, *, at: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.at = list(at)


class NoSuchKey(PointerIndexError):
    """The token named a missing object key, or was not a usable array index."""

    __match_args__ = ("key",)

    def __init__(self, key: str, *, at: Sequence[str] = ()) -> None:
        super().__init__(f"Key {key!r} not found while resolving path", at=at)
        self.key = key


class NotIndexable(PointerIndexError):
    """Tokens remained but the current node is a scalar."""

    def __init__(self, token: str, type_name: str, *, at: Sequence[str] = ()) -> None:
        super().__init__(f"Cannot traverse into {type_name} with token {token!r}", at=at)
        self.token = token
        self.type_name = type_name


class OutOfBounds(PointerIndexError):
    """The array index was at or past the end of the array."""

    __match_args__ = ("index",)

    def __init__(self, index: int, length: int, *, at: Sequence[str] = ()) -> None:
        super().__init__(f"Array index {index} out of bounds (length {length})", at=at)
        self.index = index
        self.length = length


__all__ = [
    "EndInEscape",
    "InvalidEscape",
    "InvalidPercentEncoding",
    "MissingLeadingSlash",
    "NoSuchKey",
    "NotIndexable",
    "OutOfBounds",
    "ParseError",
    "PointerError",
    "PointerIndexError",
]
