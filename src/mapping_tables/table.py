"""Insertion-ordered keyed table used for every decoded mapping table."""

from __future__ import annotations

import logging
from typing import Any, Generic, Hashable, Iterator, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class IndexedTable(Generic[K, V]):
    """Ordered table with positional and keyed access.

    Entries keep their insertion position. Inserting a key that is already
    present replaces the value in place, so positions stay dense. Once
    frozen the table rejects further inserts and becomes hashable.
    """

    def __init__(self) -> None:
        self._keys: list[K] = []
        self._values: list[V] = []
        self._positions: dict[K, int] = {}
        self._frozen = False

    @property
    def count(self) -> int:
        """Return the number of entries in the table."""
        return len(self._values)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> IndexedTable[K, V]:
        """Make the table read-only and return it."""
        self._frozen = True
        return self

    def insert(self, key: K, value: V) -> int:
        """Insert a value under key and return its position."""
        if self._frozen:
            raise TypeError("Cannot insert into a frozen table")

        position = self._positions.get(key)
        if position is not None:
            logger.debug("Replacing duplicate key %r at position %d", key, position)
            self._values[position] = value
            return position

        position = len(self._values)
        self._keys.append(key)
        self._values.append(value)
        self._positions[key] = position
        return position

    def get(self, index: int) -> V:
        """Get a value by position."""
        if index < 0 or index >= len(self._values):
            raise IndexError(f"Index {index} out of range [0, {len(self._values)})")
        return self._values[index]

    def get_by_key(self, key: K) -> V | None:
        """Get a value by key, or None if the key is absent."""
        position = self._positions.get(key)
        if position is None:
            return None
        return self._values[position]

    def keys(self) -> list[K]:
        return list(self._keys)

    def values(self) -> list[V]:
        return list(self._values)

    def items(self) -> Iterator[tuple[K, V]]:
        """Iterate (key, value) pairs in insertion order."""
        return zip(self._keys, self._values)

    def __getitem__(self, key: K) -> V:
        position = self._positions.get(key)
        if position is None:
            raise KeyError(key)
        return self._values[position]

    def __contains__(self, key: object) -> bool:
        return key in self._positions

    def __iter__(self) -> Iterator[K]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexedTable):
            return NotImplemented
        return self._keys == other._keys and self._values == other._values

    def __hash__(self) -> int:
        # Only frozen tables are hashable; their content can no longer change
        if not self._frozen:
            raise TypeError("unhashable type: mutable IndexedTable")
        return hash((tuple(self._keys), tuple(self._values)))

    def __repr__(self) -> str:
        return f"IndexedTable({len(self._values)} entries)"

    @classmethod
    def from_items(cls, items: Any) -> IndexedTable[K, V]:
        """Build a table from an iterable of (key, value) pairs."""
        table: IndexedTable[K, V] = cls()
        for key, value in items:
            table.insert(key, value)
        return table
