"""The in-memory JSON Pointer: an ordered list of unescaped reference tokens."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, overload

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from .formatting import to_string, to_uri_fragment
from .parser import parse_tokens

if TYPE_CHECKING:
    from .resolve import ResolveOptions, Slot
    from .tree import TreeAdapter


class JsonPointer:
    """A JSON Pointer (RFC 6901).

    Build one from reference tokens, or parse one from text::

        >>> JsonPointer(["foo", "bar"]) == JsonPointer.parse("/foo/bar")
        True
        >>> str(JsonPointer(["a/b", "m~n"]))
        '/a~1b/m~0n'

    Tokens are stored unescaped.  Non-``str`` tokens (e.g. the integer
    positions of a pydantic error ``loc``) are converted with ``str()``.  A
    bare string is rejected rather than split into characters.

    Equality and hashing are structural over the tokens.  The pointer is
    immutable apart from :meth:`push` and :meth:`pop`.
    """

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Iterable[Any] = ()) -> None:
        if isinstance(tokens, (str, bytes, bytearray)):
            raise TypeError(
                f"JsonPointer() takes a sequence of reference tokens, not "
                f"{type(tokens).__name__}; use JsonPointer.parse({tokens!r}) for pointer text"
            )
        self._tokens: list[str] = [t if isinstance(t, str) else str(t) for t in tokens]

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> JsonPointer:
        """Parse plain (``/a/b``) or fragment (``#/a/b``) pointer text."""
        return cls(parse_tokens(text))

    @classmethod
    def root(cls) -> JsonPointer:
        return cls()

    # ------------------------------------------------------------------
    # Token access
    # ------------------------------------------------------------------

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(self._tokens)

    @property
    def is_root(self) -> bool:
        return not self._tokens

    @property
    def last(self) -> str | None:
        """The final reference token, or ``None`` for the root pointer."""
        return self._tokens[-1] if self._tokens else None

    def parent(self) -> JsonPointer:
        """Return the pointer to the containing node.  The root is its own parent."""
        return type(self)(self._tokens[:-1])

    def join(self, *tokens: Any) -> JsonPointer:
        """Return a new pointer with *tokens* appended."""
        return type(self)([*self._tokens, *tokens])

    def __truediv__(self, token: Any) -> JsonPointer:
        return self.join(token)

    def push(self, token: Any) -> None:
        """Append a reference token in place."""
        self._tokens.append(token if isinstance(token, str) else str(token))

    def pop(self) -> str | None:
        """Remove and return the last token, or ``None`` on the root pointer."""
        return self._tokens.pop() if self._tokens else None

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> JsonPointer: ...

    def __getitem__(self, index: int | slice) -> str | JsonPointer:
        if isinstance(index, slice):
            return type(self)(self._tokens[index])
        return self._tokens[index]

    def startswith(self, other: JsonPointer) -> bool:
        """``True`` if *other* is a prefix of this pointer (or equal to it)."""
        return self._tokens[: len(other)] == list(other)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return to_string(self._tokens)

    def uri_fragment(self) -> str:
        """Render in URI Fragment Identifier Representation (leading ``#``)."""
        return to_uri_fragment(self._tokens)

    def __repr__(self) -> str:
        return f"JsonPointer.parse({to_string(self._tokens)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonPointer):
            return NotImplemented
        return self._tokens == other._tokens

    def __hash__(self) -> int:
        return hash(tuple(self._tokens))

    # ------------------------------------------------------------------
    # Resolution shortcuts
    # ------------------------------------------------------------------

    def get(
        self, doc: Any, *, tree: TreeAdapter | None = None, options: ResolveOptions | None = None
    ) -> Any:
        """See :func:`pointerkit.resolve.get`."""
        from .resolve import get

        return get(self, doc, tree=tree, options=options)

    def get_mut(
        self, doc: Any, *, tree: TreeAdapter | None = None, options: ResolveOptions | None = None
    ) -> Slot:
        """See :func:`pointerkit.resolve.get_mut`."""
        from .resolve import get_mut

        return get_mut(self, doc, tree=tree, options=options)

    def get_owned(
        self, doc: Any, *, tree: TreeAdapter | None = None, options: ResolveOptions | None = None
    ) -> Any:
        """See :func:`pointerkit.resolve.get_owned`."""
        from .resolve import get_owned

        return get_owned(self, doc, tree=tree, options=options)

    # ------------------------------------------------------------------
    # Pydantic integration
    # ------------------------------------------------------------------

    @classmethod
    def _validate(cls, value: Any) -> JsonPointer:
        if isinstance(value, JsonPointer):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, (list, tuple)) and all(isinstance(v, (str, int)) for v in value):
            return cls(value)
        raise ValueError(
            f"Expected a JSON Pointer string or list of tokens, got {type(value).__name__}"
        )

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(cls.parse),
                ]
            ),
            python_schema=core_schema.no_info_plain_validator_function(cls._validate),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {"type": "string", "format": "json-pointer"}


__all__ = ["JsonPointer"]
