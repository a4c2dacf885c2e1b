"""pypdf-backed document store.

``PdfSource`` exposes a parsed PDF through the ``ObjectStore`` contract so
the outline pipeline never touches pypdf types directly. It also produces
independent ``ChapterDocument`` copies for splitting. The source bytes are
read once and never modified; every clone parses its own reader over them,
so clones can be processed from several threads at once.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from io import BytesIO
from pathlib import Path

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError
from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    ByteStringObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
    PdfObject,
    StreamObject,
    TextStringObject,
)

from chaptercutter.core.objects import (
    Array,
    Boolean,
    ByteString,
    Dictionary,
    Integer,
    Name,
    Null,
    ObjectRef,
    ObjectStore,
    Real,
    Reference,
    Stream,
    Value,
)
from chaptercutter.exceptions import ChapterSaveError, DocumentLoadError, ObjectNotFoundError
from chaptercutter.outline.destinations import DestinationResolver
from chaptercutter.outline.named_dests import build_named_destinations
from chaptercutter.outline.page_index import PageIndex
from chaptercutter.outline.walker import bookmark_target

logger = logging.getLogger(__name__)

# Compaction passes; each pass frees one more level of orphaned objects.
MAX_COMPACT_PASSES = 32


def _name_bytes(name: str) -> bytes:
    return name[1:].encode("utf-8") if name.startswith("/") else name.encode("utf-8")


def to_value(obj: PdfObject | None) -> Value:
    """Convert a pypdf object into the value model.

    Indirect references are kept as ``Reference``; they are only followed
    through ``PdfSource.get``.
    """
    if obj is None or isinstance(obj, NullObject):
        return Null()
    if isinstance(obj, IndirectObject):
        return Reference(ObjectRef(obj.idnum, obj.generation))
    if isinstance(obj, BooleanObject):
        return Boolean(bool(obj.value))
    if isinstance(obj, NameObject):
        return Name(_name_bytes(obj))
    if isinstance(obj, TextStringObject):
        return ByteString(bytes(obj.original_bytes))
    if isinstance(obj, ByteStringObject):
        return ByteString(bytes(obj), is_text=False)
    if isinstance(obj, FloatObject):
        return Real(float(obj))
    if isinstance(obj, NumberObject):
        return Integer(int(obj))
    if isinstance(obj, ArrayObject):
        return Array(tuple(to_value(item) for item in obj))
    if isinstance(obj, StreamObject):
        # Stream payloads are never inspected.
        return Stream(_to_dictionary(obj))
    if isinstance(obj, DictionaryObject):
        return _to_dictionary(obj)
    raise TypeError(f"Unsupported PDF object type: {type(obj).__name__}")


def _to_dictionary(obj: DictionaryObject) -> Dictionary:
    return Dictionary({_name_bytes(str(key)): to_value(value) for key, value in obj.items()})


def _open_reader(data: bytes, password: str = "") -> PdfReader:
    reader = PdfReader(BytesIO(data), strict=False)
    if reader.is_encrypted and not reader.decrypt(password):
        raise DocumentLoadError(
            "PDF is encrypted",
            hint="Only PDFs without a user password can be split",
        )
    return reader


class PdfSource(ObjectStore):
    """A loaded PDF, read-only."""

    def __init__(self, data: bytes, name: str = "<memory>"):
        """Parse a PDF from bytes.

        Args:
            data: Complete PDF file contents.
            name: Label used in messages (usually the file path).

        Raises:
            DocumentLoadError: If the bytes cannot be parsed as a PDF.
        """
        self.data = data
        self.name = name
        self._cache: dict[ObjectRef, Value] = {}
        try:
            self._reader = _open_reader(data)
            self._page_refs = [
                ObjectRef(page.indirect_reference.idnum, page.indirect_reference.generation)
                for page in self._reader.pages
            ]
        except DocumentLoadError:
            raise
        except Exception as e:
            raise DocumentLoadError(
                f"Failed to load PDF: {name}",
                details=f"{type(e).__name__}: {e}",
            ) from e

    @classmethod
    def load(cls, path: Path) -> PdfSource:
        """Read and parse a PDF file.

        Raises:
            DocumentLoadError: If the file cannot be read or parsed.
        """
        path = Path(path)
        start = time.perf_counter()
        try:
            data = path.read_bytes()
        except OSError as e:
            raise DocumentLoadError(f"Failed to open file: {path}", details=str(e)) from e
        source = cls(data, name=str(path))
        logger.info(f"Loaded {path} ({source.page_count} pages) in {time.perf_counter() - start:.2f}s")
        return source

    @property
    def page_count(self) -> int:
        return len(self._page_refs)

    def page_refs(self) -> list[ObjectRef]:
        """Page objects in document order."""
        return list(self._page_refs)

    def catalog(self) -> Dictionary:
        """The resolved document catalog (trailer ``/Root``)."""
        root = self.try_resolve(to_value(self._reader.trailer.raw_get("/Root")))
        if not isinstance(root, Dictionary):
            raise DocumentLoadError(f"PDF has no document catalog: {self.name}")
        return root

    def get(self, ref: ObjectRef) -> Value:
        cached = self._cache.get(ref)
        if cached is not None:
            return cached
        try:
            obj = self._reader.get_object(IndirectObject(ref.number, ref.generation, self._reader))
        except (PyPdfError, ValueError, KeyError, OSError) as e:
            raise ObjectNotFoundError(ref, details=str(e)) from e
        if obj is None or isinstance(obj, NullObject):
            raise ObjectNotFoundError(ref)
        value = to_value(obj)
        self._cache[ref] = value
        return value

    def clone(self) -> ChapterDocument:
        """Create an independent, writable copy of the whole document."""
        return ChapterDocument(PdfWriter(clone_from=_open_reader(self.data)))


class _WriterStore(ObjectStore):
    """Read view of a ``PdfWriter`` through the ``ObjectStore`` contract."""

    def __init__(self, writer: PdfWriter):
        self._writer = writer

    def get(self, ref: ObjectRef) -> Value:
        if ref.number < 1:
            raise ObjectNotFoundError(ref)
        try:
            obj = self._writer.get_object(ref.number)
        except (PyPdfError, IndexError) as e:
            raise ObjectNotFoundError(ref, details=str(e)) from e
        if obj is None or isinstance(obj, NullObject):
            raise ObjectNotFoundError(ref)
        return to_value(obj)


class ChapterDocument:
    """A writable copy of the source document."""

    def __init__(self, writer: PdfWriter):
        self._writer = writer

    @property
    def page_count(self) -> int:
        return len(self._writer.pages)

    def delete_pages(self, pages: Iterable[int]) -> None:
        """Remove pages by their 1-based number in the original document.

        Deleted page objects are replaced by null, and bookmarks that no
        longer lead to a remaining page are removed, so nothing keeps the
        deleted pages reachable.
        """
        for number in sorted(set(pages), reverse=True):
            self._writer.remove_page(number - 1, clean=True)
        removed = self.prune_outline()
        if removed:
            logger.debug(f"Removed {removed} bookmark(s) pointing outside the kept pages")

    def prune_outline(self) -> int:
        """Remove outline items whose target is not a page of this document.

        An item stays when its own target is a remaining page or when one of
        its descendants stays. An outline left empty is removed entirely.

        Returns:
            Number of outline items removed.
        """
        root = self._writer.root_object
        if "/Outlines" not in root:
            return 0
        outlines = root["/Outlines"]
        if not isinstance(outlines, DictionaryObject):
            del root[NameObject("/Outlines")]
            return 0

        store = _WriterStore(self._writer)
        page_index = PageIndex(
            ObjectRef(page.indirect_reference.idnum, page.indirect_reference.generation)
            for page in self._writer.pages
        )
        named = build_named_destinations(store, _to_dictionary(root))
        resolver = DestinationResolver(store, page_index, named)

        removed = _prune_children(outlines, store, resolver, set())
        if "/First" not in outlines:
            del root[NameObject("/Outlines")]
        return removed

    def compact(self) -> None:
        """Drop objects that are no longer reachable from the document."""
        for _ in range(MAX_COMPACT_PASSES):
            before = self._live_objects()
            self._writer.compress_identical_objects(remove_duplicates=False, remove_unreferenced=True)
            if self._live_objects() == before:
                break

    def _live_objects(self) -> int:
        return sum(1 for obj in self._writer._objects if obj is not None)

    def save(self, path: Path) -> None:
        """Serialize to ``path``.

        Raises:
            ChapterSaveError: If the document cannot be written.
        """
        path = Path(path)
        try:
            with open(path, "wb") as f:
                self._writer.write(f)
        except (OSError, PyPdfError, ValueError) as e:
            if path.is_file():
                path.unlink()
            raise ChapterSaveError(f"Error saving {path.name}", details=str(e)) from e


def _prune_children(
    parent: DictionaryObject,
    store: ObjectStore,
    resolver: DestinationResolver,
    visited: set[int],
) -> int:
    kept: list[IndirectObject] = []
    removed = 0
    link = parent.raw_get("/First") if "/First" in parent else None
    while isinstance(link, IndirectObject) and link.idnum not in visited:
        visited.add(link.idnum)
        node = link.get_object()
        if not isinstance(node, DictionaryObject):
            break
        removed += _prune_children(node, store, resolver, visited)
        page, _ = bookmark_target(store, resolver, _to_dictionary(node))
        if page is not None or "/First" in node:
            kept.append(link)
        else:
            removed += 1
        link = node.raw_get("/Next") if "/Next" in node else None

    _relink(parent, kept)
    return removed


def _relink(parent: DictionaryObject, kept: list[IndirectObject]) -> None:
    for key in ("/First", "/Last"):
        parent.pop(key, None)
    for i, link in enumerate(kept):
        node = link.get_object()
        node.pop("/Prev", None)
        node.pop("/Next", None)
        if i > 0:
            node[NameObject("/Prev")] = kept[i - 1]
        if i + 1 < len(kept):
            node[NameObject("/Next")] = kept[i + 1]
    if kept:
        parent[NameObject("/First")] = kept[0]
        parent[NameObject("/Last")] = kept[-1]

    # /Count keeps its sign (open or closed); its size follows the kept children.
    if "/Count" in parent:
        if kept:
            sign = -1 if parent["/Count"] < 0 else 1
            parent[NameObject("/Count")] = NumberObject(sign * len(kept))
        else:
            del parent["/Count"]
