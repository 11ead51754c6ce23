"""Document adapters: the capability set the resolver needs from a tree value.

The resolver never inspects documents directly.  It asks a
:class:`TreeAdapter` whether a node is an object or an array, and how to
look up, replace and remove children.  Two adapters ship with the library:

* :class:`JsonTree` for plain Python JSON values (``dict``/``list`` and
  other ``collections.abc`` mappings and sequences);
* :class:`ModelTree` which additionally treats pydantic models as objects.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class TreeAdapter(Protocol):
    """Capability set for a tree-shaped document type."""

    def is_object(self, node: Any) -> bool: ...

    def is_array(self, node: Any) -> bool: ...

    def has_key(self, node: Any, key: str) -> bool: ...

    def lookup_key(self, node: Any, key: str) -> Any: ...

    def lookup_index(self, node: Any, index: int) -> Any: ...

    def length(self, node: Any) -> int: ...

    def set_key(self, node: Any, key: str, value: Any) -> None: ...

    def set_index(self, node: Any, index: int, value: Any) -> None: ...

    def remove_key(self, node: Any, key: str) -> Any: ...

    def remove_index(self, node: Any, index: int, *, swap: bool) -> Any: ...


_NOT_ARRAYS = (str, bytes, bytearray)


@dataclass(frozen=True, slots=True)
class JsonTree:
    """Adapter for ``json.loads``-style documents.

    Objects are any :class:`~collections.abc.Mapping`; arrays are any
    :class:`~collections.abc.Sequence` except ``str``/``bytes``.  Mutating
    operations require the mutable ABCs and raise ``TypeError`` otherwise.
    """

    def is_object(self, node: Any) -> bool:
        return isinstance(node, Mapping)

    def is_array(self, node: Any) -> bool:
        return isinstance(node, Sequence) and not isinstance(node, _NOT_ARRAYS)

    def has_key(self, node: Any, key: str) -> bool:
        return key in node

    def lookup_key(self, node: Any, key: str) -> Any:
        return node[key]

    def lookup_index(self, node: Any, index: int) -> Any:
        return node[index]

    def length(self, node: Any) -> int:
        return len(node)

    def set_key(self, node: Any, key: str, value: Any) -> None:
        _require(node, MutableMapping)[key] = value

    def set_index(self, node: Any, index: int, value: Any) -> None:
        _require(node, MutableSequence)[index] = value

    def remove_key(self, node: Any, key: str) -> Any:
        return _require(node, MutableMapping).pop(key)

    def remove_index(self, node: Any, index: int, *, swap: bool) -> Any:
        """Remove ``node[index]`` and return it.

        With ``swap=True`` the last element is moved into the hole (O(1),
        sibling order changes).  Otherwise later elements shift down.
        """
        seq = _require(node, MutableSequence)
        if not swap:
            return seq.pop(index)
        value = seq[index]
        tail = seq.pop()
        if index < len(seq):
            seq[index] = tail
        return value


def _require(node: Any, abc: type) -> Any:
    if not isinstance(node, abc):
        raise TypeError(f"Cannot modify immutable {type(node).__name__}")
    return node


@dataclass(frozen=True, slots=True)
class ModelTree(JsonTree):
    """Adapter for documents made of pydantic models, dicts and lists.

    A :class:`~pydantic.BaseModel` is an object whose keys are its field names
    (or aliases when ``by_alias`` is set) plus any extra fields.  Assignment
    goes through ``setattr`` so ``validate_assignment`` models still
    validate; removal deletes the attribute from the instance.
    """

    by_alias: bool = False

    def _field_name(self, model: BaseModel, key: str) -> str | None:
        fields = type(model).model_fields
        if self.by_alias:
            for name, info in fields.items():
                if (info.alias or name) == key:
                    return name if name in model.__dict__ else None
        elif key in fields:
            return key if key in model.__dict__ else None
        extra = model.__pydantic_extra__
        if extra is not None and key in extra:
            return key
        return None

    def is_object(self, node: Any) -> bool:
        return isinstance(node, (BaseModel, Mapping))

    def has_key(self, node: Any, key: str) -> bool:
        if isinstance(node, BaseModel):
            return self._field_name(node, key) is not None
        return key in node

    def lookup_key(self, node: Any, key: str) -> Any:
        if isinstance(node, BaseModel):
            name = self._field_name(node, key)
            if name is None:
                raise KeyError(key)
            return getattr(node, name)
        return node[key]

    def set_key(self, node: Any, key: str, value: Any) -> None:
        if isinstance(node, BaseModel):
            setattr(node, self._field_name(node, key) or key, value)
            return
        _require(node, MutableMapping)[key] = value

    def remove_key(self, node: Any, key: str) -> Any:
        if isinstance(node, BaseModel):
            name = self._field_name(node, key)
            if name is None:
                raise KeyError(key)
            value = getattr(node, name)
            delattr(node, name)
            node.__pydantic_fields_set__.discard(name)
            return value
        return _require(node, MutableMapping).pop(key)


def default_tree(doc: Any) -> TreeAdapter:
    """Pick the adapter for *doc*: :class:`ModelTree` for models, else :class:`JsonTree`."""
    if isinstance(doc, BaseModel):
        return ModelTree()
    return JsonTree()


__all__ = ["JsonTree", "ModelTree", "TreeAdapter", "default_tree"]
