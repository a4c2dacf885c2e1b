"""Traversal of the document outline (bookmark) tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from chaptercutter.core.objects import (
    ByteString,
    Dictionary,
    Name,
    ObjectRef,
    ObjectStore,
    Reference,
    Value,
)
from chaptercutter.core.text import decode_pdf_string
from chaptercutter.exceptions import ObjectNotFoundError
from chaptercutter.outline.destinations import DestinationResolver

logger = logging.getLogger(__name__)

UNTITLED = "No Title"
DEFAULT_MAX_NODES = 100_000


@dataclass(frozen=True)
class OutlineEntry:
    """A bookmark that resolved to a page."""

    page: int  # 1-indexed
    title: str
    level: int = 1  # 1 = top-level bookmark


@dataclass(frozen=True)
class SkippedBookmark:
    """A bookmark that could not be mapped to a page."""

    title: str
    reason: str
    level: int = 1

    def __str__(self) -> str:
        return f"Skipped: '{self.title}' ({self.reason})"


@dataclass
class OutlineWalk:
    """Result of walking an outline tree."""

    entries: list[OutlineEntry] = field(default_factory=list)
    skipped: list[SkippedBookmark] = field(default_factory=list)
    nodes_visited: int = 0


class OutlineWalker:
    """Depth-first, pre-order walk over ``/First`` and ``/Next`` links.

    Children are visited before the node's next sibling. Every node object
    is visited at most once, so malformed self-referencing outlines end.
    """

    def __init__(
        self,
        store: ObjectStore,
        resolver: DestinationResolver,
        max_depth: int | None = None,
        max_nodes: int = DEFAULT_MAX_NODES,
    ):
        """Initialize the walker.

        Args:
            store: Object store of the document.
            resolver: Resolver used for ``/Dest`` and GoTo ``/D`` values.
            max_depth: Deepest outline level to report (1 = top-level
                only). None walks the whole tree.
            max_nodes: Hard ceiling on the number of nodes visited.
        """
        if max_depth is not None and max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.store = store
        self.resolver = resolver
        self.max_depth = max_depth
        self.max_nodes = max_nodes

    def walk(self, first: ObjectRef | None) -> OutlineWalk:
        """Walk the outline starting at the first top-level node.

        Args:
            first: Reference to the first top-level item, usually the
                ``/First`` entry of the catalog's ``/Outlines`` dictionary.

        Returns:
            Resolved entries in traversal order plus skipped bookmarks.
        """
        result = OutlineWalk()
        visited: set[ObjectRef] = set()
        stack: list[tuple[ObjectRef, int]] = [(first, 1)] if first is not None else []

        while stack:
            ref, level = stack.pop()
            if ref in visited:
                logger.warning(f"Outline item {ref} visited twice; stopping this branch")
                continue
            if result.nodes_visited >= self.max_nodes:
                logger.warning(f"Outline exceeds {self.max_nodes} items; stopping")
                break
            visited.add(ref)

            try:
                node = self.store.get(ref)
            except ObjectNotFoundError:
                logger.debug(f"Outline item {ref} cannot be fetched; branch ends")
                continue
            if not isinstance(node, Dictionary):
                logger.debug(f"Outline item {ref} is not a dictionary; branch ends")
                continue
            result.nodes_visited += 1

            self._visit(node, level, result)

            # Pushed in reverse: the child branch is walked before the sibling.
            next_ref = _link(node, b"Next")
            if next_ref is not None:
                stack.append((next_ref, level))
            first_child = _link(node, b"First")
            if first_child is not None and (self.max_depth is None or level < self.max_depth):
                stack.append((first_child, level + 1))

        return result

    def _visit(self, node: Dictionary, level: int, result: OutlineWalk) -> None:
        title = self._title(node)
        page, reason = bookmark_target(self.store, self.resolver, node)

        if page is None:
            logger.debug(f"Skipping bookmark '{title}': {reason}")
            result.skipped.append(SkippedBookmark(title=title, reason=reason, level=level))
        else:
            logger.debug(f"Bookmark '{title}' -> page {page}")
            result.entries.append(OutlineEntry(page=page, title=title, level=level))

    def _title(self, node: Dictionary) -> str:
        title = self.store.try_resolve(node.get(b"Title"))
        if isinstance(title, ByteString):
            return decode_pdf_string(title.value)
        return UNTITLED


def bookmark_target(
    store: ObjectStore,
    resolver: DestinationResolver,
    node: Dictionary,
) -> tuple[int | None, str]:
    """Find the page an outline item points at.

    ``/Dest`` is tried first, then the ``/D`` of a GoTo ``/A`` action.

    Returns:
        ``(page, "")`` on success, otherwise ``(None, reason)``.
    """
    page = None
    reason = "no destination"

    if b"Dest" in node:
        page = resolver.resolve(node.get(b"Dest"))
        reason = "unresolvable destination"

    if page is None and b"A" in node:
        action = store.try_resolve(node.get(b"A"))
        subtype = store.try_resolve(action.get(b"S")) if isinstance(action, Dictionary) else None
        if isinstance(subtype, Name) and subtype.value == b"GoTo":
            page = resolver.resolve(action.get(b"D"))
            if page is None:
                reason = "unresolvable GoTo destination"
        elif b"Dest" not in node:
            kind = subtype.value.decode("latin-1") if isinstance(subtype, Name) else "unknown"
            reason = f"{kind} action"

    return page, "" if page is not None else reason


def _link(node: Dictionary, key: bytes) -> ObjectRef | None:
    value: Value | None = node.get(key)
    if isinstance(value, Reference):
        return value.ref
    return None
