"""Tests for the named destination table."""

from chaptercutter.core.objects import (
    Array,
    ByteString,
    Dictionary,
    Integer,
    MemoryStore,
    Name,
    ObjectRef,
    Reference,
)
from chaptercutter.outline.named_dests import (
    NamedDestinationTable,
    build_named_destinations,
    collect_name_tree,
)


def _leaf(*pairs):
    items = []
    for key, value in pairs:
        items.extend([ByteString(key), value])
    return Dictionary({b"Names": Array(tuple(items))})


class TestCollectNameTree:
    """Tests for name tree flattening."""

    def test_flat_names_array(self, outline_doc):
        root = _leaf((b"a", outline_doc.dest(1)), (b"b", outline_doc.dest(2)))

        entries = collect_name_tree(outline_doc.store, root)

        assert list(entries) == [b"a", b"b"]
        assert entries[b"a"] == outline_doc.dest(1)

    def test_kids_are_visited_in_document_order(self, outline_doc):
        kid1 = outline_doc.ref(_leaf((b"a", Integer(1)), (b"dup", Integer(1))))
        kid2 = outline_doc.ref(_leaf((b"b", Integer(2)), (b"dup", Integer(2))))
        root = Dictionary({b"Kids": Array((kid1, kid2))})

        entries = collect_name_tree(outline_doc.store, root)

        assert list(entries) == [b"a", b"dup", b"b"]
        # Later entries win on collision.
        assert entries[b"dup"] == Integer(2)

    def test_nested_kids_and_indirect_names_array(self, outline_doc):
        names = outline_doc.ref(Array((ByteString(b"deep"), Integer(7))))
        leaf = outline_doc.ref(Dictionary({b"Names": names}))
        middle = outline_doc.ref(Dictionary({b"Kids": Array((leaf,))}))
        root = outline_doc.ref(Dictionary({b"Kids": Array((middle,))}))

        assert collect_name_tree(outline_doc.store, root) == {b"deep": Integer(7)}

    def test_name_keys_are_accepted(self):
        store = MemoryStore()
        root = Dictionary({b"Names": Array((Name(b"chap1"), Integer(1)))})

        assert collect_name_tree(store, root) == {b"chap1": Integer(1)}

    def test_odd_length_and_bad_keys_are_ignored(self):
        store = MemoryStore()
        root = Dictionary({
            b"Names": Array((Integer(5), Integer(1), ByteString(b"ok"), Integer(2), ByteString(b"dangling")))
        })

        assert collect_name_tree(store, root) == {b"ok": Integer(2)}

    def test_cyclic_kids_terminate(self):
        store = MemoryStore()
        node_ref = store.add(Dictionary())
        store.put(
            node_ref,
            Dictionary({
                b"Names": Array((ByteString(b"x"), Integer(1))),
                b"Kids": Array((Reference(node_ref),)),
            }),
        )

        assert collect_name_tree(store, Reference(node_ref)) == {b"x": Integer(1)}

    def test_dangling_kid_is_skipped(self, outline_doc):
        root = Dictionary({
            b"Kids": Array((Reference(ObjectRef(999)), outline_doc.ref(_leaf((b"a", Integer(1)))))),
        })

        assert collect_name_tree(outline_doc.store, root) == {b"a": Integer(1)}

    def test_node_ceiling(self, outline_doc):
        kids = tuple(outline_doc.ref(_leaf((bytes([65 + i]), Integer(i)))) for i in range(5))
        root = Dictionary({b"Kids": Array(kids)})

        entries = collect_name_tree(outline_doc.store, root, max_nodes=3)

        # Root plus two kids.
        assert list(entries) == [b"A", b"B"]


class TestBuildNamedDestinations:
    """Tests for merging the name tree with the legacy /Dests dictionary."""

    def test_no_destinations_is_empty(self, outline_doc):
        table = build_named_destinations(outline_doc.store, outline_doc.catalog)

        assert len(table) == 0

    def test_name_tree_only(self, outline_doc):
        outline_doc.name_tree(outline_doc.ref(_leaf((b"chap1", outline_doc.dest(7)))))

        table = build_named_destinations(outline_doc.store, outline_doc.catalog)

        assert table[b"chap1"] == outline_doc.dest(7)

    def test_names_dictionary_may_be_indirect(self, outline_doc):
        names = outline_doc.ref(Dictionary({b"Dests": _leaf((b"k", Integer(1)))}))
        outline_doc.catalog_entries[b"Names"] = names

        table = build_named_destinations(outline_doc.store, outline_doc.catalog)

        assert list(table) == [b"k"]

    def test_legacy_entries_override_name_tree(self, outline_doc):
        outline_doc.name_tree(_leaf((b"shared", outline_doc.dest(1)), (b"tree", outline_doc.dest(2))))
        outline_doc.legacy_dests({b"shared": outline_doc.dest(9), b"legacy": outline_doc.dest(3)})

        table = build_named_destinations(outline_doc.store, outline_doc.catalog)

        assert table[b"shared"] == outline_doc.dest(9)
        assert table[b"tree"] == outline_doc.dest(2)
        assert table[b"legacy"] == outline_doc.dest(3)
        assert table.overridden == [b"shared"]

    def test_non_dictionary_entries_are_ignored(self, outline_doc):
        outline_doc.catalog_entries[b"Names"] = Integer(3)
        outline_doc.catalog_entries[b"Dests"] = Array(())

        assert len(build_named_destinations(outline_doc.store, outline_doc.catalog)) == 0


class TestNamedDestinationTable:
    """Tests for the table itself."""

    def test_precedence_is_explicit(self):
        table = NamedDestinationTable({b"k": Integer(1)}, {b"k": Integer(2)})

        assert table[b"k"] == Integer(2)
        assert table.overridden == [b"k"]

    def test_empty(self):
        assert len(NamedDestinationTable.empty()) == 0
