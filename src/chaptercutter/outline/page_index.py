"""Mapping between page objects and 1-based page numbers."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from chaptercutter.core.objects import ObjectRef

logger = logging.getLogger(__name__)


class PageIndex(Mapping[ObjectRef, int]):
    """Immutable ``ObjectRef -> page number`` mapping.

    Built once from the document's page collection. The reverse lookup
    (page number to object) is available through ``ref_for``.
    """

    def __init__(self, page_refs: Iterable[ObjectRef]):
        numbers: dict[ObjectRef, int] = {}
        refs: list[ObjectRef] = []
        for ref in page_refs:
            refs.append(ref)
            if ref in numbers:
                # A shared page object keeps its first position.
                logger.warning(f"Page object {ref} appears twice in the page tree")
                continue
            numbers[ref] = len(refs)
        self._numbers = MappingProxyType(numbers)
        self._refs = tuple(refs)

    def __getitem__(self, ref: ObjectRef) -> int:
        return self._numbers[ref]

    def __iter__(self) -> Iterator[ObjectRef]:
        return iter(self._numbers)

    def __len__(self) -> int:
        return len(self._numbers)

    @property
    def page_count(self) -> int:
        return len(self._refs)

    def ref_for(self, page_number: int) -> ObjectRef:
        """Return the page object for a 1-based page number."""
        if not 1 <= page_number <= len(self._refs):
            raise IndexError(f"Page {page_number} out of range 1-{len(self._refs)}")
        return self._refs[page_number - 1]

    def __repr__(self) -> str:
        return f"PageIndex({len(self._refs)} pages)"
