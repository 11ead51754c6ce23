from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pointerkit")
except PackageNotFoundError:  # pragma: no cover - local source tree without installed metadata
    __version__ = "0.1.0"

from .errors import (
    EndInEscape,
    InvalidEscape,
    InvalidPercentEncoding,
    MissingLeadingSlash,
    NoSuchKey,
    NotIndexable,
    OutOfBounds,
    ParseError,
    PointerError,
    PointerIndexError,
)
from .formatting import escape_token, to_string, to_uri_fragment
from .parser import parse, unescape_token
from .pointer import JsonPointer
from .resolve import ResolveOptions, Slot, contains, get, get_mut, get_owned, resolve
from .tree import JsonTree, ModelTree, TreeAdapter
from .validation import pointers_from_validation_error

__all__ = [
    "EndInEscape",
    "InvalidEscape",
    "InvalidPercentEncoding",
    "JsonPointer",
    "JsonTree",
    "MissingLeadingSlash",
    "ModelTree",
    "NoSuchKey",
    "NotIndexable",
    "OutOfBounds",
    "ParseError",
    "PointerError",
    "PointerIndexError",
    "ResolveOptions",
    "Slot",
    "TreeAdapter",
    "contains",
    "escape_token",
    "get",
    "get_mut",
    "get_owned",
    "parse",
    "pointers_from_validation_error",
    "resolve",
    "to_string",
    "to_uri_fragment",
    "unescape_token",
]
