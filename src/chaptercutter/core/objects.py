"""Value model for PDF objects and the object store contract.

Every PDF object the outline pipeline inspects is converted into one of
the frozen dataclasses below. Any field of a PDF dictionary may hold
either a direct value or a ``Reference``, so consumers call
``ObjectStore.resolve`` before looking at a value's variant.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import NamedTuple, Union

from chaptercutter.exceptions import ObjectNotFoundError


class ObjectRef(NamedTuple):
    """Identifier of an indirect object: ``<number> <generation> R``."""

    number: int
    generation: int = 0

    def __str__(self) -> str:
        return f"{self.number} {self.generation} R"


@dataclass(frozen=True)
class Null:
    """The PDF ``null`` object."""


@dataclass(frozen=True)
class Boolean:
    value: bool


@dataclass(frozen=True)
class Integer:
    value: int


@dataclass(frozen=True)
class Real:
    value: float


@dataclass(frozen=True)
class ByteString:
    """A PDF string. ``is_text`` is False when the parser found no text encoding for it."""

    value: bytes
    is_text: bool = True


@dataclass(frozen=True)
class Name:
    """A PDF name, stored without its leading slash."""

    value: bytes


@dataclass(frozen=True)
class Array:
    items: tuple[Value, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]


@dataclass(frozen=True)
class Dictionary:
    """A PDF dictionary keyed by name bytes (without the slash).

    Instances are treated as read-only; nothing in the pipeline mutates
    ``entries`` after construction.
    """

    entries: Mapping[bytes, Value] = field(default_factory=dict)

    def get(self, key: bytes) -> Value | None:
        return self.entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def items(self):
        return self.entries.items()


@dataclass(frozen=True)
class Stream:
    """A stream object. The payload is carried but never inspected."""

    dictionary: Dictionary
    data: bytes = field(default=b"", repr=False)


@dataclass(frozen=True)
class Reference:
    ref: ObjectRef


Value = Union[
    Null, Boolean, Integer, Real, ByteString, Name, Array, Dictionary, Stream, Reference
]


def string_key(value: Value | None) -> bytes | None:
    """Return the raw bytes of a name or string, else None."""
    if isinstance(value, (ByteString, Name)):
        return value.value
    return None


class ObjectStore(ABC):
    """Read-only access to the indirect objects of a document."""

    @abstractmethod
    def get(self, ref: ObjectRef) -> Value:
        """Fetch the object addressed by ``ref``.

        Raises:
            ObjectNotFoundError: If the identifier is absent or malformed.
        """

    def resolve(self, value: Value | None) -> Value | None:
        """Dereference ``value`` once if it is a ``Reference``.

        Non-reference values (and None) are returned unchanged. A dangling
        reference propagates ``ObjectNotFoundError``.
        """
        if isinstance(value, Reference):
            return self.get(value.ref)
        return value

    def try_resolve(self, value: Value | None) -> Value | None:
        """Like ``resolve`` but maps a dangling reference to None."""
        try:
            return self.resolve(value)
        except ObjectNotFoundError:
            return None


class MemoryStore(ObjectStore):
    """Dictionary-backed object store for synthetic documents."""

    def __init__(self, objects: Mapping[ObjectRef, Value] | None = None):
        self._objects: dict[ObjectRef, Value] = dict(objects or {})
        self._next_number = max((ref.number for ref in self._objects), default=0) + 1

    def get(self, ref: ObjectRef) -> Value:
        try:
            return self._objects[ref]
        except (KeyError, TypeError):
            raise ObjectNotFoundError(ref) from None

    def add(self, value: Value) -> ObjectRef:
        """Store ``value`` under a freshly allocated identifier."""
        ref = ObjectRef(self._next_number, 0)
        self._next_number += 1
        self._objects[ref] = value
        return ref

    def put(self, ref: ObjectRef, value: Value) -> None:
        """Store (or replace) ``value`` under an explicit identifier."""
        self._objects[ref] = value
        self._next_number = max(self._next_number, ref.number + 1)

    def __len__(self) -> int:
        return len(self._objects)
