"""Tests for the insertion-ordered keyed table."""

import pytest

from mapping_tables.table import IndexedTable


class TestIndexedTable:
    """Tests for IndexedTable."""

    def test_insert_returns_positions(self):
        """Test that inserts are numbered in insertion order."""
        table: IndexedTable[str, int] = IndexedTable()
        assert table.insert("a", 1) == 0
        assert table.insert("b", 2) == 1
        assert table.count == 2
        assert len(table) == 2

    def test_positional_and_keyed_access(self):
        """Test get by position and by key."""
        table = IndexedTable.from_items([("x", 10), ("y", 20)])
        assert table.get(1) == 20
        assert table.get_by_key("x") == 10
        assert table["y"] == 20

    def test_missing_key(self):
        """Test that missing keys return None or raise KeyError."""
        table = IndexedTable.from_items([("x", 10)])
        assert table.get_by_key("nope") is None
        assert "nope" not in table
        with pytest.raises(KeyError):
            table["nope"]

    def test_get_out_of_range(self):
        """Test that positional access is bounds checked."""
        table = IndexedTable.from_items([("x", 10)])
        with pytest.raises(IndexError):
            table.get(1)
        with pytest.raises(IndexError):
            table.get(-1)

    def test_duplicate_key_replaces_in_place(self):
        """Test that a repeated key keeps its position and takes the new value."""
        table: IndexedTable[str, int] = IndexedTable()
        table.insert("a", 1)
        table.insert("b", 2)
        assert table.insert("a", 3) == 0
        assert table.keys() == ["a", "b"]
        assert table.values() == [3, 2]
        assert len(table) == 2

    def test_iteration_order(self):
        """Test that keys, values and items follow insertion order."""
        table = IndexedTable.from_items([("c", 3), ("a", 1), ("b", 2)])
        assert list(table) == ["c", "a", "b"]
        assert list(table.items()) == [("c", 3), ("a", 1), ("b", 2)]

    def test_freeze_rejects_inserts(self):
        """Test that a frozen table is read-only."""
        table = IndexedTable.from_items([("a", 1)])
        assert table.freeze() is table
        assert table.frozen
        with pytest.raises(TypeError):
            table.insert("b", 2)
        assert table.get_by_key("a") == 1

    def test_equality(self):
        """Test that tables compare by content and order."""
        a = IndexedTable.from_items([("x", 1), ("y", 2)])
        b = IndexedTable.from_items([("x", 1), ("y", 2)])
        c = IndexedTable.from_items([("y", 2), ("x", 1)])
        assert a == b
        assert a != c

    def test_tuple_keys(self):
        """Test composite keys as used for schema properties."""
        table = IndexedTable.from_items([(("Slots", 0), "first"), (("Slots", 1), "second")])
        assert table.get_by_key(("Slots", 1)) == "second"
        assert ("Slots", 2) not in table

    def test_frozen_table_is_hashable(self):
        """Test that frozen tables hash by content."""
        a = IndexedTable.from_items([("x", 1), ("y", 2)]).freeze()
        b = IndexedTable.from_items([("x", 1), ("y", 2)]).freeze()
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_mutable_table_is_unhashable(self):
        """Test that a table still accepting inserts cannot be hashed."""
        with pytest.raises(TypeError):
            hash(IndexedTable.from_items([("x", 1)]))
