"""pointerkit demo: address, edit and extract parts of a document."""

import json

from pydantic import BaseModel, ValidationError

import pointerkit as pk

# ── 1. Build pointers ────────────────────────────────────────────────

from_tokens = pk.JsonPointer(["foo", "bar"])
parsed = pk.parse("/foo/bar")
from_dotted = pk.JsonPointer("foo.bar".split("."))

assert from_tokens == parsed == from_dotted
print("1) three ways to build /foo/bar")
print(f"   {str(from_tokens)!r}  fragment={from_tokens.uri_fragment()!r}")
print()


# ── 2. Read, write, take ─────────────────────────────────────────────

document = json.loads('{"foo": {"bar": 0, "baz": [1, 2, 3]}, "quux": "xyzzy"}')

print("2) get / get_mut / get_owned")
print(f"   get /foo/bar        -> {pk.get(parsed, document)!r}")
pk.get_mut("/foo/bar", document).set(42)
print(f"   after set           -> {document['foo']!r}")
taken = pk.get_owned("/foo/baz/0", document)
print(f"   took /foo/baz/0     -> {taken!r}, left {document['foo']['baz']!r}")
print()


# ── 3. Failures are typed ────────────────────────────────────────────

print("3) errors")
for text in ("/foo/baz/9", "/quux/0", "/foo/nope", "foo", "/a~2"):
    try:
        pk.get(text, document)
    except pk.PointerError as exc:
        print(f"   {text!r:14} {type(exc).__name__}: {exc}")
print()


# ── 4. Pydantic ──────────────────────────────────────────────────────


class Pet(BaseModel):
    name: str
    age: int


class Household(BaseModel):
    pets: list[Pet]


payload = {"pets": [{"name": "Rex", "age": "three"}]}
try:
    Household.model_validate(payload)
except ValidationError as err:
    for pointer in pk.pointers_from_validation_error(err):
        print(f"4) invalid value at {pointer}: {pk.get(pointer, payload)!r}")

house = Household(pets=[Pet(name="Rex", age=3)])
print(f"   model lookup /pets/0/name -> {pk.get('/pets/0/name', house)!r}")
