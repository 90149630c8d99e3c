"""Tests for KeyValueSessionRepository."""

import itertools
import json
import threading

import pytest

from typing_coach.domain.entities import SessionSummary, TypingSessionRecord
from typing_coach.domain.services import aggregate
from typing_coach.infrastructure.in_memory_key_value_store import InMemoryKeyValueStore
from typing_coach.infrastructure.key_value_session_repository import (
    DEFAULT_STORAGE_KEY,
    MAX_RECORDS,
    KeyValueSessionRepository,
)


class FixedClock:
    def __init__(self, now_ms: int = 1_700_000_000_000):
        self.now = now_ms

    def now_ms(self) -> int:
        return self.now


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store):
    counter = itertools.count(1)
    return KeyValueSessionRepository(
        store,
        id_generator=lambda: f"record-{next(counter)}",
        clock=FixedClock(),
    )


@pytest.fixture
def summary():
    return SessionSummary(duration_ms=3000, wpm=12, cpm=60, accuracy=100, error_rate=0.0, star_rating=2)


def make_record(index: int, summary: SessionSummary) -> TypingSessionRecord:
    return TypingSessionRecord(
        id=f"record-{index}",
        lesson_id="tj-001",
        lesson_title="Home Keys J and F",
        summary=summary,
        timestamp=1_700_000_000_000 + index,
    )


def test_empty_store_lists_nothing(repository):
    assert repository.list_records() == []


def test_record_session_builds_the_record(repository, summary):
    record = repository.record_session(
        lesson_id="tj-001",
        lesson_title="Home Keys J and F",
        summary=summary,
        track_id="typing-jungle",
        track_name="Typing Jungle",
    )

    assert record.id == "record-1"
    assert record.timestamp == 1_700_000_000_000
    assert repository.list_records() == [record]


def test_records_are_newest_first(repository, summary):
    for index in range(3):
        repository.append(make_record(index, summary))

    assert [record.id for record in repository.list_records()] == ["record-2", "record-1", "record-0"]


def test_cap_evicts_exactly_the_oldest(repository, summary):
    for index in range(MAX_RECORDS + 1):
        repository.append(make_record(index, summary))

    records = repository.list_records()

    assert len(records) == MAX_RECORDS
    assert records[0].id == f"record-{MAX_RECORDS}"
    assert records[-1].id == "record-1"
    assert "record-0" not in {record.id for record in records}


def test_custom_cap(store, summary):
    repository = KeyValueSessionRepository(store, max_records=2)
    for index in range(5):
        repository.append(make_record(index, summary))

    assert [record.id for record in repository.list_records()] == ["record-4", "record-3"]


def test_invalid_cap_is_rejected(store):
    with pytest.raises(ValueError):
        KeyValueSessionRepository(store, max_records=0)


def test_blob_is_camel_case_json(repository, store, summary):
    repository.append(make_record(1, summary))

    blob = json.loads(store.get(DEFAULT_STORAGE_KEY))

    assert blob[0]["lessonId"] == "tj-001"
    assert blob[0]["lessonTitle"] == "Home Keys J and F"
    assert blob[0]["summary"]["durationMs"] == 3000
    assert blob[0]["summary"]["starRating"] == 2
    assert "trackId" not in blob[0]


@pytest.mark.parametrize("blob", ["not json", "{\"lessonId\": \"tj-001\"}", "42"])
def test_corrupt_blob_is_treated_as_empty(repository, store, blob):
    store.set(DEFAULT_STORAGE_KEY, blob)

    assert repository.list_records() == []


def test_invalid_records_are_skipped(repository, store, summary):
    valid = make_record(1, summary).model_dump(mode="json", by_alias=True)
    store.set(DEFAULT_STORAGE_KEY, json.dumps([{"id": "broken"}, valid]))

    records = repository.list_records()

    assert [record.id for record in records] == ["record-1"]


def test_append_recovers_from_a_corrupt_blob(repository, store, summary):
    store.set(DEFAULT_STORAGE_KEY, "not json")

    repository.append(make_record(1, summary))

    assert len(repository.list_records()) == 1


def test_clear_removes_the_history(repository, store, summary):
    repository.append(make_record(1, summary))

    repository.clear()

    assert repository.list_records() == []
    assert store.get(DEFAULT_STORAGE_KEY) is None


def test_replace_all_round_trip_keeps_analytics(repository, summary):
    for index in range(4):
        repository.append(make_record(index, summary.model_copy(update={"wpm": 10 + index})))
    before = repository.list_records()

    repository.replace_all(before)

    after = repository.list_records()
    assert after == before
    assert aggregate(after, now_ms=1_700_000_000_100) == aggregate(before, now_ms=1_700_000_000_100)


def test_storage_info(repository):
    info = repository.get_storage_info()

    assert info["backend"] == "InMemoryKeyValueStore"
    assert info["storage_key"] == DEFAULT_STORAGE_KEY
    assert info["max_records"] == MAX_RECORDS


def test_concurrent_appends_lose_nothing(store, summary):
    repository = KeyValueSessionRepository(store)

    def writer(offset):
        for index in range(offset, offset + 30):
            repository.append(make_record(index, summary))

    threads = [threading.Thread(target=writer, args=(offset,)) for offset in range(0, 300, 30)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    records = repository.list_records()
    assert len(records) == MAX_RECORDS
    assert len({record.id for record in records}) == MAX_RECORDS


def test_concurrent_appends_below_the_cap(store, summary):
    repository = KeyValueSessionRepository(store)
    threads = [
        threading.Thread(target=repository.append, args=(make_record(index, summary),))
        for index in range(40)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(record.id for record in repository.list_records()) == sorted(
        f"record-{index}" for index in range(40)
    )
