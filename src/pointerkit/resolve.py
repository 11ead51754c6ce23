"""Resolve JSON Pointers against documents.

Every entry point folds over the pointer's reference tokens starting at the
document root:

* object nodes look the token up as a key (:class:`~pointerkit.errors.NoSuchKey`
  when absent);
* array nodes read the token as an index.  ``-`` means "one past the end" and
  is therefore always out of bounds here.  Tokens that are not array indices
  raise :class:`~pointerkit.errors.NoSuchKey`, and indices at or past the end
  raise :class:`~pointerkit.errors.OutOfBounds`;
* any other node raises :class:`~pointerkit.errors.NotIndexable`.

The walk stops at the first failure.  Documents are accessed only through a
:class:`~pointerkit.tree.TreeAdapter`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Literal

from .errors import NoSuchKey, NotIndexable, OutOfBounds, PointerIndexError
from .pointer import JsonPointer
from .tree import TreeAdapter, default_tree

log = logging.getLogger(__name__)

_MISSING: Any = object()


@dataclass(frozen=True, slots=True)
class ResolveOptions:
    """Resolution policy.

    Attributes
    ----------
    removal : ``"swap"`` or ``"shift"``
        How :func:`get_owned` removes an array element.  ``"swap"`` moves
        the last element into the removed position (O(1), reorders
        siblings); ``"shift"`` preserves the order of the remaining
        elements.
    allow_leading_zeros : bool
        Whether tokens such as ``"01"`` count as array indices.  RFC 6901
        forbids leading zeros, so by default ``"01"`` against an array is
        :class:`~pointerkit.errors.NoSuchKey`.
    """

    removal: Literal["swap", "shift"] = "swap"
    allow_leading_zeros: bool = False


_DEFAULT_OPTIONS = ResolveOptions()


@dataclass(slots=True)
class Slot:
    """Location of a resolved node, used to modify it in place.

    ``container`` and ``key`` are ``None`` for the document root.  ``key`` is
    a ``str`` for object members and an ``int`` for array elements.
    """

    tree: TreeAdapter
    container: Any
    key: str | int | None
    value: Any

    @property
    def is_root(self) -> bool:
        return self.key is None

    def set(self, value: Any) -> None:
        """Replace the node inside its parent container."""
        if self.key is None:
            raise TypeError("Cannot replace the document root in place")
        if isinstance(self.key, int):
            self.tree.set_index(self.container, self.key, value)
        else:
            self.tree.set_key(self.container, self.key, value)
        self.value = value


def _as_pointer(ptr: JsonPointer | str | Iterable[str]) -> JsonPointer:
    if isinstance(ptr, JsonPointer):
        return ptr
    if isinstance(ptr, str):
        return JsonPointer.parse(ptr)
    return JsonPointer(ptr)


def _is_array_index(token: str, *, allow_leading_zeros: bool) -> bool:
    if not token or not (token.isascii() and token.isdigit()):
        return False
    return allow_leading_zeros or token == "0" or token[0] != "0"


def _step(
    tree: TreeAdapter, node: Any, token: str, at: list[str], options: ResolveOptions
) -> tuple[str | int, Any]:
    """Descend one level; return ``(key, child)``."""
    if tree.is_object(node):
        if not tree.has_key(node, token):
            raise NoSuchKey(token, at=at)
        return token, tree.lookup_key(node, token)
    if tree.is_array(node):
        length = tree.length(node)
        if token == "-":
            index = length
        elif _is_array_index(token, allow_leading_zeros=options.allow_leading_zeros):
            index = int(token)
        else:
            raise NoSuchKey(token, at=at)
        if index >= length:
            raise OutOfBounds(index, length, at=at)
        return index, tree.lookup_index(node, index)
    raise NotIndexable(token, type(node).__name__, at=at)


def _walk(
    ptr: JsonPointer, doc: Any, tree: TreeAdapter, options: ResolveOptions
) -> Slot:
    container: Any = None
    key: str | int | None = None
    node = doc
    at: list[str] = []
    try:
        for token in ptr:
            container = node
            key, node = _step(tree, node, token, at, options)
            at.append(token)
    except PointerIndexError as exc:
        log.debug("Failed to resolve %s: %s", ptr, exc)
        raise
    return Slot(tree=tree, container=container, key=key, value=node)


def get(
    ptr: JsonPointer | str | Iterable[str],
    doc: Any,
    *,
    tree: TreeAdapter | None = None,
    options: ResolveOptions | None = None,
) -> Any:
    """Return the node *ptr* refers to inside *doc*.

    *ptr* may be a :class:`JsonPointer`, pointer text, or a token list.  The
    adapter defaults to :func:`~pointerkit.tree.default_tree` for *doc*.

    Raises
    ------
    NoSuchKey, NotIndexable, OutOfBounds
        When the pointer does not resolve.
    ParseError
        Only when *ptr* is given as malformed text.
    """
    ptr = _as_pointer(ptr)
    options = options if options is not None else _DEFAULT_OPTIONS
    tree = tree if tree is not None else default_tree(doc)
    return _walk(ptr, doc, tree, options).value


def get_mut(
    ptr: JsonPointer | str | Iterable[str],
    doc: Any,
    *,
    tree: TreeAdapter | None = None,
    options: ResolveOptions | None = None,
) -> Slot:
    """Resolve *ptr* for modification.

    Same traversal as :func:`get`, but returns a :class:`Slot` whose
    :meth:`Slot.set` replaces the target inside its parent.  Container
    targets can also be mutated directly through ``slot.value``.
    """
    ptr = _as_pointer(ptr)
    options = options if options is not None else _DEFAULT_OPTIONS
    tree = tree if tree is not None else default_tree(doc)
    return _walk(ptr, doc, tree, options)


def get_owned(
    ptr: JsonPointer | str | Iterable[str],
    doc: Any,
    *,
    tree: TreeAdapter | None = None,
    options: ResolveOptions | None = None,
) -> Any:
    """Detach the node *ptr* refers to from its parent and return it.

    The document is consumed: after the call it no longer contains the
    target, and with the default ``removal="swap"`` policy the siblings of an
    extracted array element are reordered.  The root pointer returns *doc*
    itself.
    """
    ptr = _as_pointer(ptr)
    options = options if options is not None else _DEFAULT_OPTIONS
    tree = tree if tree is not None else default_tree(doc)
    slot = _walk(ptr, doc, tree, options)
    if slot.key is None:
        return doc
    if isinstance(slot.key, int):
        log.debug("Removing %s with %s policy", ptr, options.removal)
        return tree.remove_index(slot.container, slot.key, swap=options.removal == "swap")
    return tree.remove_key(slot.container, slot.key)


def resolve(
    ptr: JsonPointer | str | Iterable[str],
    doc: Any,
    default: Any = _MISSING,
    *,
    tree: TreeAdapter | None = None,
    options: ResolveOptions | None = None,
) -> Any:
    """Like :func:`get`, but return *default* instead of raising when given."""
    try:
        return get(ptr, doc, tree=tree, options=options)
    except PointerIndexError:
        if default is _MISSING:
            raise
        return default


def contains(
    ptr: JsonPointer | str | Iterable[str],
    doc: Any,
    *,
    tree: TreeAdapter | None = None,
    options: ResolveOptions | None = None,
) -> bool:
    """``True`` if *ptr* resolves inside *doc*."""
    try:
        get(ptr, doc, tree=tree, options=options)
    except PointerIndexError:
        return False
    return True


__all__ = ["ResolveOptions", "Slot", "contains", "get", "get_mut", "get_owned", "resolve"]
