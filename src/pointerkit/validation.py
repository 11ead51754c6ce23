"""Bridge pydantic validation errors to JSON Pointers."""

from __future__ import annotations

from pydantic import ValidationError

from .pointer import JsonPointer


def pointers_from_validation_error(error: ValidationError) -> list[JsonPointer]:
    """Convert Pydantic ``ValidationError`` loc tuples to JSON Pointers.

    Each ``loc`` tuple like ``('user', 'pets', 0, 'age')`` becomes the pointer
    ``/user/pets/0/age``.  Returns a deduplicated list in the order the
    locations first appear.
    """
    seen: set[JsonPointer] = set()
    pointers: list[JsonPointer] = []
    for err in error.errors():
        pointer = JsonPointer(err.get("loc", ()))
        if pointer not in seen:
            seen.add(pointer)
            pointers.append(pointer)
    return pointers


__all__ = ["pointers_from_validation_error"]
