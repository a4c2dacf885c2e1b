"""Outline scan: builds the lookup tables and walks the bookmarks of a document."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from chaptercutter.core.objects import Dictionary, ObjectRef, ObjectStore, Reference
from chaptercutter.outline.destinations import DestinationResolver
from chaptercutter.outline.named_dests import NamedDestinationTable, build_named_destinations
from chaptercutter.outline.page_index import PageIndex
from chaptercutter.outline.walker import (
    DEFAULT_MAX_NODES,
    OutlineEntry,
    OutlineWalker,
    SkippedBookmark,
)

logger = logging.getLogger(__name__)


@dataclass
class OutlineScan:
    """Everything learned from a document's outline."""

    page_index: PageIndex
    named_destinations: NamedDestinationTable
    has_outline: bool
    entries: list[OutlineEntry] = field(default_factory=list)
    skipped: list[SkippedBookmark] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return self.page_index.page_count


def analyze_outline(
    store: ObjectStore,
    catalog: Dictionary,
    page_refs: Iterable[ObjectRef],
    max_depth: int | None = None,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> OutlineScan:
    """Resolve every bookmark of a document to a page number.

    The page index and named destination table are built first and are
    read-only while the outline is walked.

    Args:
        store: Object store of the document.
        catalog: The resolved document catalog.
        page_refs: Page objects in document order.
        max_depth: Deepest outline level to report (None = all).
        max_nodes: Hard ceiling on nodes visited per tree.

    Returns:
        OutlineScan with resolved entries in traversal order.
    """
    page_index = PageIndex(page_refs)
    named = build_named_destinations(store, catalog, max_nodes=max_nodes)
    logger.info(f"Loaded {len(named)} named destinations")

    outlines = store.try_resolve(catalog.get(b"Outlines"))
    if not isinstance(outlines, Dictionary):
        logger.info("Document has no Outlines dictionary")
        return OutlineScan(page_index=page_index, named_destinations=named, has_outline=False)

    first = outlines.get(b"First")
    first_ref = first.ref if isinstance(first, Reference) else None

    walker = OutlineWalker(
        store,
        DestinationResolver(store, page_index, named),
        max_depth=max_depth,
        max_nodes=max_nodes,
    )
    walk = walker.walk(first_ref)
    logger.info(
        f"Outline scan: {len(walk.entries)} resolved, {len(walk.skipped)} skipped "
        f"({walk.nodes_visited} items)"
    )
    return OutlineScan(
        page_index=page_index,
        named_destinations=named,
        has_outline=True,
        entries=walk.entries,
        skipped=walk.skipped,
    )
