"""Tests for the append-only response store."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.errors import DuplicateResponseError, StoreError
from app.models import ResponseRecord
from app.services.response_store import ResponseStore


def _record(sender: str = "U1", text: str = "reply", flag: int = 1, mid: str | None = None) -> ResponseRecord:
    return ResponseRecord(
        sender_id=sender,
        response_text=text,
        completed_transaction=flag,
        message_id=mid,
    )


class TestAppendAndList:
    def test_round_trip(self, store: ResponseStore) -> None:
        record_id = store.append(_record(sender="U1", text="Thanks!", flag=1, mid="m1"))

        records = list(store.list_all())

        assert len(records) == 1
        stored = records[0]
        assert stored.id == record_id
        assert stored.sender_id == "U1"
        assert stored.response_text == "Thanks!"
        assert stored.completed_transaction == 1
        assert stored.message_id == "m1"
        assert stored.created_at is not None

    def test_insertion_order(self, store: ResponseStore) -> None:
        ids = [store.append(_record(sender=f"U{n}")) for n in range(5)]
        assert [r.id for r in store.list_all()] == ids
        assert ids == sorted(ids)

    def test_empty_store(self, store: ResponseStore) -> None:
        assert list(store.list_all()) == []

    def test_list_all_is_single_use(self, store: ResponseStore) -> None:
        store.append(_record())
        records = store.list_all()
        assert len(list(records)) == 1
        assert list(records) == []

    def test_records_without_message_id_are_not_duplicates(self, store: ResponseStore) -> None:
        store.append(_record(mid=None))
        store.append(_record(mid=None))
        assert len(list(store.list_all())) == 2


class TestIdempotency:
    def test_duplicate_message_id_rejected(self, store: ResponseStore) -> None:
        store.append(_record(mid="m1"))
        with pytest.raises(DuplicateResponseError):
            store.append(_record(mid="m1"))
        assert len(list(store.list_all())) == 1

    def test_has_message(self, store: ResponseStore) -> None:
        assert store.has_message("m1") is False
        store.append(_record(mid="m1"))
        assert store.has_message("m1") is True

    def test_invalid_flag_is_store_error(self, store: ResponseStore) -> None:
        with pytest.raises(StoreError) as excinfo:
            store.append(_record(flag=7))
        assert not isinstance(excinfo.value, DuplicateResponseError)


class TestConcurrency:
    def test_concurrent_appends_keep_every_record(self, store: ResponseStore) -> None:
        n = 60

        def append(i: int) -> int:
            return store.append(_record(sender=f"U{i}", text=f"reply {i}", mid=f"m{i}"))

        with ThreadPoolExecutor(max_workers=12) as pool:
            ids = list(pool.map(append, range(n)))

        assert len(set(ids)) == n
        records = list(store.list_all())
        assert len(records) == n
        assert {r.sender_id for r in records} == {f"U{i}" for i in range(n)}


class TestFailures:
    def test_read_failure_yields_empty(self, store: ResponseStore) -> None:
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("disk I/O error"))
        broken = ResponseStore(engine=MagicMock(), session_factory=lambda: session)

        assert list(broken.list_all()) == []
        session.close.assert_called_once()

    def test_write_failure_raises_store_error(self) -> None:
        session = MagicMock()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("database is locked"))
        broken = ResponseStore(engine=MagicMock(), session_factory=lambda: session)

        with pytest.raises(StoreError):
            broken.append(_record())
        session.rollback.assert_called_once()
        session.close.assert_called_once()
