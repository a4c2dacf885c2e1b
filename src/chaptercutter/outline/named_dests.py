"""Named destination table: flattens the /Dests name tree and legacy dictionary."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from chaptercutter.core.objects import (
    Array,
    Dictionary,
    ObjectRef,
    ObjectStore,
    Reference,
    Value,
    string_key,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_NODES = 100_000


class NamedDestinationTable(Mapping[bytes, Value]):
    """Read-only ``key -> destination`` lookup.

    Entries from the catalog's legacy ``/Dests`` dictionary take precedence
    over name-tree entries with the same key.
    """

    def __init__(self, tree_entries: Mapping[bytes, Value], legacy_entries: Mapping[bytes, Value]):
        merged = dict(tree_entries)
        self.overridden = sorted(key for key in legacy_entries if key in merged)
        merged.update(legacy_entries)
        self._entries = merged

    @classmethod
    def empty(cls) -> NamedDestinationTable:
        return cls({}, {})

    def __getitem__(self, key: bytes) -> Value:
        return self._entries[key]

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"NamedDestinationTable({len(self._entries)} entries)"


def collect_name_tree(
    store: ObjectStore,
    root: Value | None,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> dict[bytes, Value]:
    """Flatten a name tree into a dict, visiting nodes in document order.

    Leaf ``/Names`` arrays hold alternating key/value pairs; intermediate
    ``/Kids`` arrays point at child nodes. Each node object is visited at
    most once, so a self-referencing tree terminates.

    Args:
        store: Object store used to dereference nodes.
        root: The tree root (a dictionary or a reference to one).
        max_nodes: Hard ceiling on the number of nodes visited.

    Returns:
        Mapping of key bytes to the (unresolved) destination value.
    """
    entries: dict[bytes, Value] = {}
    visited: set[ObjectRef] = set()
    stack: list[Value] = [root] if root is not None else []
    seen = 0

    while stack:
        item = stack.pop()
        if isinstance(item, Reference):
            if item.ref in visited:
                logger.warning(f"Name tree node {item.ref} visited twice; skipping")
                continue
            visited.add(item.ref)

        seen += 1
        if seen > max_nodes:
            logger.warning(f"Name tree exceeds {max_nodes} nodes; stopping")
            break

        node = store.try_resolve(item)
        if not isinstance(node, Dictionary):
            continue

        names = store.try_resolve(node.get(b"Names"))
        if isinstance(names, Array):
            for i in range(0, len(names) - 1, 2):
                key = string_key(names[i])
                if key is None:
                    logger.debug(f"Ignoring name tree key of type {type(names[i]).__name__}")
                    continue
                entries[key] = names[i + 1]

        kids = store.try_resolve(node.get(b"Kids"))
        if isinstance(kids, Array):
            # Reversed so the first kid is popped first.
            stack.extend(kid for kid in reversed(kids.items) if isinstance(kid, (Reference, Dictionary)))

    return entries


def build_named_destinations(
    store: ObjectStore,
    catalog: Dictionary,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> NamedDestinationTable:
    """Build the named destination table for a document.

    Args:
        store: Object store of the document.
        catalog: The resolved document catalog.
        max_nodes: Hard ceiling on name tree nodes visited.

    Returns:
        The merged table. Empty when the document defines no destinations.
    """
    tree_entries: dict[bytes, Value] = {}
    names = store.try_resolve(catalog.get(b"Names"))
    if isinstance(names, Dictionary) and b"Dests" in names:
        tree_entries = collect_name_tree(store, names.get(b"Dests"), max_nodes=max_nodes)

    legacy_entries: dict[bytes, Value] = {}
    legacy = store.try_resolve(catalog.get(b"Dests"))
    if isinstance(legacy, Dictionary):
        legacy_entries = dict(legacy.items())

    table = NamedDestinationTable(tree_entries, legacy_entries)
    if table.overridden:
        logger.debug(f"{len(table.overridden)} name tree destinations overridden by /Dests")
    return table
