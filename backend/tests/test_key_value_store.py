import pytest

from mindcare.config import STORAGE_KEYS
from mindcare.services.key_value_store import (
    InMemoryKeyValueStore,
    SqlKeyValueStore,
    read_activity_logs,
    append_activity_entry,
    set_streak,
)


async def test_absent_keys_read_as_defaults():
    logs = await read_activity_logs(InMemoryKeyValueStore(), 1)
    assert logs.streak == {"currentStreak": 0}
    assert logs.mood_entries == []
    assert logs.stress_logs == []


async def test_logs_are_filtered_by_user():
    store = InMemoryKeyValueStore({
        STORAGE_KEYS["mood_entries"]: [
            {"userId": "1", "mood": 4},
            {"userId": "2", "mood": 2},
            {"userId": 1, "mood": 5},
            "not an entry",
        ],
    })
    logs = await read_activity_logs(store, 1)
    assert [e["mood"] for e in logs.mood_entries] == [4, 5]


async def test_corrupt_or_misshapen_values_fall_back():
    store = InMemoryKeyValueStore({STORAGE_KEYS["cbt_records"]: {"oops": True}})
    store.set_raw(STORAGE_KEYS["streak"], "{not json")
    store.set_raw(STORAGE_KEYS["gratitude_entries"], "[]]")

    logs = await read_activity_logs(store, 1)
    assert logs.streak == {"currentStreak": 0}
    assert logs.cbt_records == []
    assert logs.gratitude_entries == []


async def test_append_and_streak_round_trip_through_sql(db):
    store = SqlKeyValueStore(db)

    record = await append_activity_entry(store, "stress_logs", 7, {"effectiveness": 8})
    assert record == {"effectiveness": 8, "userId": "7"}
    await append_activity_entry(store, "stress_logs", 8, {"effectiveness": 2})
    await set_streak(store, 12)

    logs = await read_activity_logs(store, 7)
    assert logs.stress_logs == [{"effectiveness": 8, "userId": "7"}]
    assert logs.streak == {"currentStreak": 12}
    assert len(await store.get(STORAGE_KEYS["stress_logs"])) == 2


async def test_append_rejects_unknown_log():
    with pytest.raises(KeyError):
        await append_activity_entry(InMemoryKeyValueStore(), "dreams", 1, {})
