from __future__ import annotations

from typing import Dict, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


class IdCounter:
    """
    Monotonically increasing id source.

    Starts at 0 ("no entity yet"); the first allocated id is 1. Ids are never
    reused. Two repositories may share one counter.
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("Counter cannot start below 0")
        self._value = start

    @property
    def current(self) -> int:
        """Last id handed out (0 when nothing has been allocated)."""
        return self._value

    def peek(self) -> int:
        """Id the next allocate() call will return."""
        return self._value + 1

    def allocate(self) -> int:
        self._value += 1
        return self._value


class RecordStore(Generic[T]):
    """Append-only map from integer id to record. Records are never removed."""

    def __init__(self) -> None:
        self._records: Dict[int, T] = {}

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[int]:
        return iter(self._records)

    def get(self, record_id: int) -> Optional[T]:
        return self._records.get(record_id)

    def insert(self, record_id: int, record: T) -> None:
        if record_id in self._records:
            raise KeyError(f"Record {record_id} already exists")
        self._records[record_id] = record

    def replace(self, record_id: int, record: T) -> None:
        if record_id not in self._records:
            raise KeyError(f"Record {record_id} does not exist")
        self._records[record_id] = record


class BaseRepository(Generic[T]):
    """
    Base class for registry repositories: one record store plus the counter
    its ids are drawn from.

    Note:
      Repositories do no validation and no authorization; services decide
      whether a write is allowed before calling into them.
    """

    def __init__(self, counter: Optional[IdCounter] = None, store: Optional[RecordStore[T]] = None) -> None:
        self.counter = counter if counter is not None else IdCounter()
        self.store: RecordStore[T] = store if store is not None else RecordStore()

    def get(self, record_id: int) -> Optional[T]:
        """Return the record or None."""
        return self.store.get(record_id)

    def exists(self, record_id: int) -> bool:
        return record_id in self.store

    def next_id(self) -> int:
        """Allocate the next id from the counter."""
        return self.counter.allocate()

    def add(self, record_id: int, record: T) -> T:
        """Store a freshly created record."""
        self.store.insert(record_id, record)
        return record

    def save(self, record_id: int, record: T) -> T:
        """Overwrite an existing record in place."""
        self.store.replace(record_id, record)
        return record
