"""Unit tests for the id counter, the append-only record store and the ledger."""

from __future__ import annotations

import pytest

from municipal_registry.core.ledger import Ledger
from municipal_registry.repositories.base import IdCounter, RecordStore


class TestIdCounter:

    def test_starts_at_zero(self):
        counter = IdCounter()
        assert counter.current == 0
        assert counter.peek() == 1

    def test_allocate_increments_by_one(self):
        counter = IdCounter()
        assert [counter.allocate() for _ in range(3)] == [1, 2, 3]
        assert counter.current == 3

    def test_negative_start_rejected(self):
        with pytest.raises(ValueError):
            IdCounter(start=-1)


class TestRecordStore:

    def test_insert_and_get(self):
        store: RecordStore[str] = RecordStore()
        store.insert(1, "a")
        assert store.get(1) == "a"
        assert 1 in store
        assert len(store) == 1

    def test_get_missing_returns_none(self):
        assert RecordStore().get(42) is None

    def test_insert_existing_id_refused(self):
        store: RecordStore[str] = RecordStore()
        store.insert(1, "a")
        with pytest.raises(KeyError):
            store.insert(1, "b")
        assert store.get(1) == "a"

    def test_replace_missing_id_refused(self):
        with pytest.raises(KeyError):
            RecordStore().replace(7, "x")

    def test_iterates_in_insertion_order(self):
        store: RecordStore[str] = RecordStore()
        for i in (1, 2, 3):
            store.insert(i, str(i))
        assert list(store) == [1, 2, 3]


class TestLedger:

    def test_advance(self):
        ledger = Ledger(height=5)
        assert ledger.advance() == 6
        assert ledger.advance(4) == 10
        assert ledger.height == 10

    @pytest.mark.parametrize("blocks", [0, -1])
    def test_advance_must_be_positive(self, blocks):
        ledger = Ledger(height=5)
        with pytest.raises(ValueError):
            ledger.advance(blocks)
        assert ledger.height == 5

    def test_negative_height_rejected(self):
        with pytest.raises(ValueError):
            Ledger(height=-1)

    def test_accepted_write_opens_a_block(self):
        ledger = Ledger(height=10, advance_on_write=True)
        with ledger.transaction() as write:
            assert write.height == 11
            assert ledger.height == 10
            write.accept()
        assert ledger.height == 11

    def test_unaccepted_write_keeps_height(self):
        ledger = Ledger(height=10, advance_on_write=True)
        with ledger.transaction() as write:
            assert write.height == 11
        assert ledger.height == 10

    def test_write_that_raises_keeps_height(self):
        ledger = Ledger(height=10, advance_on_write=True)
        with pytest.raises(KeyError):
            with ledger.transaction() as write:
                write.accept()
                raise KeyError("boom")
        assert ledger.height == 10

    def test_transaction_without_auto_advance(self):
        ledger = Ledger(height=10, advance_on_write=False)
        with ledger.transaction() as write:
            assert write.height == 10
            write.accept()
        assert ledger.height == 10

