"""Pytest fixtures for Chaptercutter tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    NameObject,
    TextStringObject,
)
from typer.testing import CliRunner

from chaptercutter.config.settings import Settings
from chaptercutter.core.objects import (
    Array,
    ByteString,
    Dictionary,
    Integer,
    MemoryStore,
    Name,
    Null,
    ObjectRef,
    Reference,
    Value,
)
from chaptercutter.outline.scan import OutlineScan, analyze_outline


class OutlineDoc:
    """Builds a synthetic document (pages, outline, destinations) in memory."""

    def __init__(self, pages: int = 10):
        self.store = MemoryStore()
        self.pages_ref = self.store.add(Null())
        self.page_refs = [
            self.store.add(Dictionary({b"Type": Name(b"Page"), b"Parent": Reference(self.pages_ref)}))
            for _ in range(pages)
        ]
        self.store.put(
            self.pages_ref,
            Dictionary({
                b"Type": Name(b"Pages"),
                b"Kids": Array(tuple(Reference(r) for r in self.page_refs)),
                b"Count": Integer(pages),
            }),
        )
        self.catalog_entries: dict[bytes, Value] = {
            b"Type": Name(b"Catalog"),
            b"Pages": Reference(self.pages_ref),
        }

    @property
    def catalog(self) -> Dictionary:
        return Dictionary(dict(self.catalog_entries))

    def page(self, number: int) -> Reference:
        return Reference(self.page_refs[number - 1])

    def dest(self, number: int) -> Array:
        """Explicit destination array for a 1-based page."""
        return Array((self.page(number), Name(b"Fit")))

    def ref(self, value: Value) -> Reference:
        """Store ``value`` as an indirect object."""
        return Reference(self.store.add(value))

    def outline(self, items: list[dict[str, Any]]) -> ObjectRef:
        """Install an outline built from nested item specs.

        Each spec may hold ``title`` (str, bytes or None to omit it), ``dest``, ``action``
        and ``kids`` (a list of specs).
        """
        root = self.store.add(Null())
        first, last = self._chain(items, root)
        entries: dict[bytes, Value] = {b"Type": Name(b"Outlines")}
        if first is not None:
            entries[b"First"] = Reference(first)
            entries[b"Last"] = Reference(last)
        self.store.put(root, Dictionary(entries))
        self.catalog_entries[b"Outlines"] = Reference(root)
        return root

    def _chain(self, items, parent: ObjectRef):
        refs = [self.store.add(Null()) for _ in items]
        for i, (ref, spec) in enumerate(zip(refs, items)):
            entries: dict[bytes, Value] = {b"Parent": Reference(parent)}
            title = spec.get("title", "")
            if title is not None:
                raw = title if isinstance(title, bytes) else title.encode("utf-8")
                entries[b"Title"] = ByteString(raw)
            if "dest" in spec:
                entries[b"Dest"] = spec["dest"]
            if "action" in spec:
                entries[b"A"] = spec["action"]
            if i + 1 < len(refs):
                entries[b"Next"] = Reference(refs[i + 1])
            if i > 0:
                entries[b"Prev"] = Reference(refs[i - 1])
            kids = spec.get("kids") or []
            if kids:
                first, last = self._chain(kids, ref)
                entries[b"First"] = Reference(first)
                entries[b"Last"] = Reference(last)
            self.store.put(ref, Dictionary(entries))
        if not refs:
            return None, None
        return refs[0], refs[-1]

    def name_tree(self, root: Value) -> None:
        self.catalog_entries[b"Names"] = Dictionary({b"Dests": root})

    def legacy_dests(self, entries: dict[bytes, Value]) -> None:
        self.catalog_entries[b"Dests"] = self.ref(Dictionary(entries))

    def analyze(self, **kwargs) -> OutlineScan:
        return analyze_outline(self.store, self.catalog, self.page_refs, **kwargs)

    @staticmethod
    def goto(dest: Value) -> Dictionary:
        return Dictionary({b"S": Name(b"GoTo"), b"D": dest})

    @staticmethod
    def uri(target: str) -> Dictionary:
        return Dictionary({b"S": Name(b"URI"), b"URI": ByteString(target.encode())})


def write_pdf(
    path: Path,
    pages: int,
    outline: list[tuple[str, int]] | None = None,
    nested: dict[str, list[tuple[str, int]]] | None = None,
    filler: int = 0,
) -> Path:
    """Write a PDF with blank pages and an outline of ``(title, page)`` items.

    ``filler`` adds a content stream of roughly that many bytes to every page.
    """
    writer = PdfWriter()
    for i in range(pages):
        # Varying widths make pages distinguishable after splitting.
        page = writer.add_blank_page(width=100 + i, height=200)
        if filler:
            stream = DecodedStreamObject()
            stream.set_data(f"% page {i + 1}\n".encode() + b"0 0 m 1 1 l S\n" * (filler // 14))
            page.replace_contents(stream)
    for title, page in outline or []:
        parent = writer.add_outline_item(title, page - 1)
        for child_title, child_page in (nested or {}).get(title, []):
            writer.add_outline_item(child_title, child_page - 1, parent=parent)
    with open(path, "wb") as f:
        writer.write(f)
    return path


def write_linked_pdf(path: Path, pages: int = 10) -> Path:
    """Write a PDF whose bookmarks use ``/Dest`` instead of GoTo actions.

    - "Direct" (page 2): ``/Dest`` is an explicit page array.
    - "Named" (page 5): ``/Dest`` is a string key of the ``/Names`` tree.
    - "Legacy" (page 7): ``/Dest`` is a name key of the catalog ``/Dests``.
    - "Shadowed" (page 9): the key exists in both tables; ``/Dests`` wins.
    """
    writer = PdfWriter()
    for i in range(pages):
        writer.add_blank_page(width=100 + i, height=200)

    def page_dest(number: int) -> ArrayObject:
        return ArrayObject([writer.pages[number - 1].indirect_reference, NameObject("/Fit")])

    writer.add_named_destination("named-five", 4)
    writer.add_named_destination("shadowed", 0)
    writer.root_object[NameObject("/Dests")] = writer._add_object(
        DictionaryObject({
            NameObject("/legacy-seven"): page_dest(7),
            NameObject("/shadowed"): page_dest(9),
        })
    )

    for title, dest in [
        ("Direct", page_dest(2)),
        ("Named", TextStringObject("named-five")),
        ("Legacy", NameObject("/legacy-seven")),
        ("Shadowed", TextStringObject("shadowed")),
    ]:
        item = writer.add_outline_item(title, None).get_object()
        item[NameObject("/Dest")] = dest

    with open(path, "wb") as f:
        writer.write(f)
    return path


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def output_dir(tmp_path) -> Path:
    """Create a temporary output directory."""
    output = tmp_path / "output"
    output.mkdir()
    return output


@pytest.fixture
def make_pdf():
    """Factory writing small PDFs with an outline, see ``write_pdf``."""
    return write_pdf


@pytest.fixture
def outline_doc() -> OutlineDoc:
    """A ten-page synthetic document without outline."""
    return OutlineDoc(pages=10)


@pytest.fixture
def book_pdf(tmp_path) -> Path:
    """A 12-page PDF with three top-level bookmarks (pages 1, 4, 9)."""
    return write_pdf(
        tmp_path / "book.pdf",
        pages=12,
        outline=[("Intro", 1), ("Part/One: Basics", 4), ("第2章", 9)],
    )


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of any user config file."""
    return Settings()


@pytest.fixture
def linked_pdf(tmp_path) -> Path:
    """A 10-page PDF whose bookmarks use direct and named ``/Dest`` values."""
    return write_linked_pdf(tmp_path / "linked.pdf")
