"""
Key-value storage for per-user activity logs.

The web client used to keep these logs in browser storage as JSON arrays under
fixed keys. The achievement engine reads them through the small KeyValueStore
interface so it does not care where they live: memory in tests, a SQL table
in production.
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mindcare.config import STORAGE_KEYS
from mindcare.models import KeyValueEntry

logger = logging.getLogger(__name__)

ACTIVITY_LOG_NAMES = (
    "mood_entries",
    "cbt_records",
    "gratitude_entries",
    "exposure_sessions",
    "video_progress",
    "stress_logs",
)


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[Any]: ...

    async def set(self, key: str, value: Any) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        # values are held encoded, the same way the SQL store keeps them
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[key] = json.dumps(value)

    async def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def set_raw(self, key: str, raw: str) -> None:
        self._data[key] = raw


class SqlKeyValueStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Optional[Any]:
        try:
            entry = await self.db.get(KeyValueEntry, key)
        except SQLAlchemyError:
            # leave the shared session usable for the caller
            await self.db.rollback()
            raise
        if entry is None:
            return None
        return json.loads(entry.value)

    async def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        entry = await self.db.get(KeyValueEntry, key)
        if entry is None:
            self.db.add(KeyValueEntry(key=key, value=encoded))
        else:
            entry.value = encoded
        await self.db.commit()


@dataclass
class ActivityLogs:
    """One user's slice of every activity log."""
    streak: Dict[str, Any] = field(default_factory=lambda: {"currentStreak": 0})
    mood_entries: List[dict] = field(default_factory=list)
    cbt_records: List[dict] = field(default_factory=list)
    gratitude_entries: List[dict] = field(default_factory=list)
    exposure_sessions: List[dict] = field(default_factory=list)
    video_progress: List[dict] = field(default_factory=list)
    stress_logs: List[dict] = field(default_factory=list)


async def _read(store: KeyValueStore, key: str, default: Any) -> Any:
    try:
        value = await store.get(key)
    except (ValueError, TypeError, SQLAlchemyError) as e:
        logger.warning("Unreadable value under %s, using default: %s", key, e)
        return default
    if value is None:
        return default
    if not isinstance(value, type(default)):
        logger.warning("Unexpected %s under %s, using default", type(value).__name__, key)
        return default
    return value


def _belongs_to(entry: Any, user_id: Any) -> bool:
    return isinstance(entry, dict) and str(entry.get("userId")) == str(user_id)


async def read_activity_logs(store: KeyValueStore, user_id: Any) -> ActivityLogs:
    """Load every log and keep only the entries written for `user_id`.

    Missing keys read as empty logs. The streak counter is not per user.
    """
    streak = await _read(store, STORAGE_KEYS["streak"], {"currentStreak": 0})
    logs = ActivityLogs(streak=streak)
    for name in ACTIVITY_LOG_NAMES:
        entries = await _read(store, STORAGE_KEYS[name], [])
        setattr(logs, name, [e for e in entries if _belongs_to(e, user_id)])
    return logs


async def append_activity_entry(
    store: KeyValueStore, log_name: str, user_id: Any, entry: Dict[str, Any]
) -> Dict[str, Any]:
    if log_name not in ACTIVITY_LOG_NAMES:
        raise KeyError(log_name)
    key = STORAGE_KEYS[log_name]
    entries = await _read(store, key, [])
    record = {**entry, "userId": str(user_id)}
    entries.append(record)
    await store.set(key, entries)
    return record


async def set_streak(store: KeyValueStore, current_streak: int) -> Dict[str, Any]:
    streak = await _read(store, STORAGE_KEYS["streak"], {"currentStreak": 0})
    streak["currentStreak"] = current_streak
    await store.set(STORAGE_KEYS["streak"], streak)
    return streak
