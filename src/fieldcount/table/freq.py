from __future__ import annotations

from collections import Counter
from typing import Iterator, Protocol

FNV_OFFSET_BASIS = 14695981039346656037
FNV_PRIME = 1099511628211
_MASK64 = (1 << 64) - 1

INITIAL_BUCKETS = 4096
LOAD_FACTOR_NUM = 3
LOAD_FACTOR_DEN = 4

TABLE_KINDS = ("dict", "chained")


def fnv1a_64(data: bytes) -> int:
    h = FNV_OFFSET_BASIS
    for b in data:
        h ^= b
        h = (h * FNV_PRIME) & _MASK64
    return h


class FrequencyTable(Protocol):
    def increment(self, key: str) -> None:
        ...

    def get(self, key: str) -> int:
        ...

    def size(self) -> int:
        ...

    def items(self) -> Iterator[tuple[str, int]]:
        ...


class _Entry:
    __slots__ = ("key", "hash", "count", "next")

    def __init__(self, key: str, h: int, nxt: _Entry | None) -> None:
        self.key = key
        self.hash = h
        self.count = 1
        self.next = nxt


class ChainedTable:
    """Separate-chaining hash table of string -> count.

    Buckets double whenever the entry count reaches 3/4 of the bucket count, checked
    before each insert. New entries are prepended to their chain.
    """

    def __init__(self, initial_buckets: int = INITIAL_BUCKETS) -> None:
        if initial_buckets <= 0:
            raise ValueError(f"initial_buckets must be positive, got {initial_buckets}")
        self._buckets: list[_Entry | None] = [None] * initial_buckets
        self._size = 0

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)

    def _rehash(self) -> None:
        new_count = len(self._buckets) * 2
        new_buckets: list[_Entry | None] = [None] * new_count
        for head in self._buckets:
            e = head
            while e is not None:
                nxt = e.next
                idx = e.hash % new_count
                e.next = new_buckets[idx]
                new_buckets[idx] = e
                e = nxt
        self._buckets = new_buckets

    def increment(self, key: str) -> None:
        if self._size * LOAD_FACTOR_DEN >= len(self._buckets) * LOAD_FACTOR_NUM:
            self._rehash()
        h = fnv1a_64(key.encode("utf-8", "surrogateescape"))
        idx = h % len(self._buckets)
        e = self._buckets[idx]
        while e is not None:
            if e.hash == h and e.key == key:
                e.count += 1
                return
            e = e.next
        self._buckets[idx] = _Entry(key, h, self._buckets[idx])
        self._size += 1

    def get(self, key: str) -> int:
        h = fnv1a_64(key.encode("utf-8", "surrogateescape"))
        e = self._buckets[h % len(self._buckets)]
        while e is not None:
            if e.hash == h and e.key == key:
                return e.count
            e = e.next
        return 0

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def items(self) -> Iterator[tuple[str, int]]:
        for head in self._buckets:
            e = head
            while e is not None:
                yield e.key, e.count
                e = e.next


class DictTable:
    """Counter-backed table with the same interface as ChainedTable."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()

    def increment(self, key: str) -> None:
        self._counts[key] += 1

    def get(self, key: str) -> int:
        return self._counts.get(key, 0)

    def size(self) -> int:
        return len(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def items(self) -> Iterator[tuple[str, int]]:
        return iter(self._counts.items())


def make_table(kind: str = "dict", initial_buckets: int = INITIAL_BUCKETS) -> FrequencyTable:
    if kind == "dict":
        return DictTable()
    if kind == "chained":
        return ChainedTable(initial_buckets)
    raise ValueError(f"unknown table kind {kind!r}, expected one of {TABLE_KINDS}")
