"""Outline resolution: page index, named destinations and bookmark traversal."""

from chaptercutter.outline.destinations import DestinationResolver, resolve_destination
from chaptercutter.outline.named_dests import (
    NamedDestinationTable,
    build_named_destinations,
    collect_name_tree,
)
from chaptercutter.outline.page_index import PageIndex
from chaptercutter.outline.scan import OutlineScan, analyze_outline
from chaptercutter.outline.walker import (
    OutlineEntry,
    OutlineWalk,
    OutlineWalker,
    SkippedBookmark,
)

__all__ = [
    "DestinationResolver",
    "NamedDestinationTable",
    "OutlineEntry",
    "OutlineScan",
    "OutlineWalk",
    "OutlineWalker",
    "PageIndex",
    "SkippedBookmark",
    "analyze_outline",
    "build_named_destinations",
    "collect_name_tree",
    "resolve_destination",
]
