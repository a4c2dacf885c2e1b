"""Resolution of outline destinations to page numbers."""

from __future__ import annotations

import logging

from chaptercutter.core.objects import (
    Array,
    Dictionary,
    ObjectStore,
    Reference,
    Value,
    string_key,
)
from chaptercutter.outline.named_dests import NamedDestinationTable
from chaptercutter.outline.page_index import PageIndex

logger = logging.getLogger(__name__)


class DestinationResolver:
    """Turns a destination value into a 1-based page number.

    Supported forms:

    - an explicit destination array ``[page_ref /XYZ ...]``
    - a name or string key into the named destination table, whose entry
      is either an explicit array or a dictionary with a ``/D`` array

    Named lookups are followed exactly one level deep; a ``/D`` entry that
    is itself a name is left unresolved.
    """

    def __init__(
        self,
        store: ObjectStore,
        page_index: PageIndex,
        named: NamedDestinationTable | None = None,
    ):
        self.store = store
        self.page_index = page_index
        self.named = named if named is not None else NamedDestinationTable.empty()

    def resolve(self, value: Value | None) -> int | None:
        """Resolve a destination value.

        Args:
            value: A ``/Dest`` or GoTo ``/D`` value, direct or indirect.

        Returns:
            The page number, or None when the destination cannot be mapped
            to a page of this document.
        """
        dest = self.store.try_resolve(value)
        if isinstance(dest, Array):
            return self._page_from_array(dest)

        key = string_key(dest)
        if key is None:
            return None
        return self._resolve_named(key)

    def _resolve_named(self, key: bytes) -> int | None:
        entry = self.named.get(key)
        if entry is None:
            logger.debug(f"Named destination {key!r} not found")
            return None

        target = self.store.try_resolve(entry)
        if isinstance(target, Array):
            return self._page_from_array(target)
        if isinstance(target, Dictionary) and b"D" in target:
            inner = self.store.try_resolve(target.get(b"D"))
            if isinstance(inner, Array):
                return self._page_from_array(inner)
            logger.debug(f"Named destination {key!r} has a non-array /D; not following")
        return None

    def _page_from_array(self, dest: Array) -> int | None:
        if not len(dest):
            return None
        # An indirect array element is dereferenced once before the page check.
        first = dest[0]
        if isinstance(first, Reference) and first.ref not in self.page_index:
            inner = self.store.try_resolve(first)
            if isinstance(inner, Reference):
                first = inner
        if not isinstance(first, Reference):
            return None
        return self.page_index.get(first.ref)


def resolve_destination(
    store: ObjectStore,
    value: Value | None,
    page_index: PageIndex,
    named: NamedDestinationTable | None = None,
) -> int | None:
    """Resolve a single destination without keeping a resolver around."""
    return DestinationResolver(store, page_index, named).resolve(value)
