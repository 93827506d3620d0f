"""
Tests for the in-memory account registry.
"""

import json
import threading
import time
from datetime import datetime, timezone

import pytest

from wasignup.core.errors import NotFoundError, PersistenceError
from wasignup.domain.models.account import Account, PhoneNumberRecord
from wasignup.persistence.memory.account_registry import AccountRegistry
from wasignup.persistence.memory.utils.rw_lock import ReadWriteLock


def make_account(waba_id: str = "waba-1", **overrides) -> Account:
    fields = {
        "id": f"ba_{waba_id}",
        "waba_id": waba_id,
        "business_name": "Acme",
        "access_token": "secret-token",
        "phone_numbers": [PhoneNumberRecord(id="phone-1", phone_number="+1 555")],
    }
    fields.update(overrides)
    return Account(**fields)


class TestSaveAndGet:
    def test_get_missing_raises_not_found(self, registry):
        with pytest.raises(NotFoundError, match="Account not found"):
            registry.get("nope")

    def test_save_sets_timestamps(self, registry):
        saved = registry.save(make_account())

        assert saved.created_at is not None
        assert saved.updated_at == saved.created_at
        assert registry.get("waba-1").business_name == "Acme"

    def test_resave_keeps_created_at_and_advances_updated_at(self, registry):
        first = registry.save(make_account())
        second = registry.save(make_account(business_name="Acme Renamed"))

        stored = registry.get("waba-1")
        assert stored.business_name == "Acme Renamed"
        assert stored.created_at == first.created_at
        assert stored.updated_at > first.updated_at
        assert second.updated_at == stored.updated_at

    def test_created_at_from_caller_ignored_on_resave(self, registry):
        first = registry.save(make_account())
        registry.save(
            make_account(created_at=datetime(2000, 1, 1, tzinfo=timezone.utc))
        )

        assert registry.get("waba-1").created_at == first.created_at

    def test_returned_records_are_copies(self, registry):
        account = make_account()
        registry.save(account)
        account.business_name = "Mutated after save"

        fetched = registry.get("waba-1")
        fetched.phone_numbers.clear()

        stored = registry.get("waba-1")
        assert stored.business_name == "Acme"
        assert len(stored.phone_numbers) == 1

    def test_save_after_close_fails(self):
        registry = AccountRegistry()
        registry.close()

        assert registry.is_closed
        with pytest.raises(PersistenceError):
            registry.save(make_account())


class TestListDeleteExport:
    def test_list_snapshot(self, registry):
        registry.save(make_account("waba-1"))
        registry.save(make_account("waba-2"))

        assert sorted(a.waba_id for a in registry.list()) == ["waba-1", "waba-2"]
        assert registry.count() == 2

    def test_delete_is_idempotent(self, registry):
        registry.save(make_account())

        registry.delete("waba-1")
        registry.delete("waba-1")

        assert registry.count() == 0
        with pytest.raises(NotFoundError):
            registry.get("waba-1")

    def test_export_is_deterministic_and_keyed_by_waba(self, registry):
        registry.save(make_account("waba-2"))
        registry.save(make_account("waba-1"))

        exported = registry.export()

        assert exported == registry.export()
        data = json.loads(exported)
        assert list(data) == ["waba-1", "waba-2"]
        assert data["waba-1"]["access_token"] == "secret-token"
        assert "\n  " in exported

    def test_export_empty(self, registry):
        assert json.loads(registry.export()) == {}


class TestConcurrency:
    def test_concurrent_saves_keep_updated_at_monotonic(self, registry):
        errors: list[Exception] = []
        stamps: dict[int, list[datetime]] = {}

        def writer(n: int) -> None:
            stamps[n] = []
            try:
                for i in range(50):
                    saved = registry.save(make_account(business_name=f"w{n}-{i}"))
                    stamps[n].append(saved.updated_at)
            except Exception as err:
                errors.append(err)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert registry.count() == 1
        for per_thread in stamps.values():
            assert len(per_thread) == 50
            assert all(a < b for a, b in zip(per_thread, per_thread[1:]))

        everything = [stamp for per_thread in stamps.values() for stamp in per_thread]
        assert len(set(everything)) == len(everything)
        assert registry.get("waba-1").updated_at == max(everything)


class TestReadWriteLock:
    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        lock.acquire_read()
        lock.acquire_read()

        assert lock.readers == 2
        lock.release_read()
        lock.release_read()
        with lock.write():
            assert lock.readers == 0

    def test_writer_waits_for_reader(self):
        lock = ReadWriteLock()
        acquired = threading.Event()

        def writer() -> None:
            with lock.write():
                acquired.set()

        lock.acquire_read()
        thread = threading.Thread(target=writer)
        thread.start()

        assert not acquired.wait(0.2)
        lock.release_read()
        assert acquired.wait(2)
        thread.join(2)

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        read_done = threading.Event()

        def reader() -> None:
            with lock.read():
                read_done.set()

        lock.acquire_write()
        thread = threading.Thread(target=reader)
        thread.start()

        assert not read_done.wait(0.2)
        lock.release_write()
        assert read_done.wait(2)
        thread.join(2)

    def test_waiting_writer_blocks_new_readers(self):
        lock = ReadWriteLock()
        order: list[str] = []
        late_reader_done = threading.Event()

        def writer() -> None:
            with lock.write():
                order.append("writer")

        def late_reader() -> None:
            with lock.read():
                order.append("reader")
            late_reader_done.set()

        lock.acquire_read()
        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        # Give the writer time to register as waiting
        deadline = time.monotonic() + 2
        while lock.waiting_writers == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert lock.waiting_writers == 1

        reader_thread = threading.Thread(target=late_reader)
        reader_thread.start()
        assert not late_reader_done.wait(0.2)

        lock.release_read()
        writer_thread.join(2)
        reader_thread.join(2)

        assert order == ["writer", "reader"]
