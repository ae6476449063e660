from __future__ import annotations
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from mindcare.db import get_db
from mindcare.models import User
from mindcare.schemas import StreakUpdate
from mindcare.services.auth_service import get_current_user
from mindcare.services.key_value_store import (
    ACTIVITY_LOG_NAMES, KeyValueStore, SqlKeyValueStore,
    read_activity_logs, append_activity_entry, set_streak
)

router = APIRouter(prefix="/activity", tags=["activity"])

async def get_activity_store(db: AsyncSession = Depends(get_db)) -> KeyValueStore:
    return SqlKeyValueStore(db)

def _check_log_name(log_name: str):
    if log_name not in ACTIVITY_LOG_NAMES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown activity log '{log_name}'. Expected one of: {', '.join(ACTIVITY_LOG_NAMES)}",
        )

@router.get("/streak")
async def get_streak(
    store: KeyValueStore = Depends(get_activity_store),
    current_user: User = Depends(get_current_user)
):
    logs = await read_activity_logs(store, current_user.id)
    return logs.streak

@router.put("/streak")
async def update_streak(
    req: StreakUpdate,
    store: KeyValueStore = Depends(get_activity_store),
    current_user: User = Depends(get_current_user)
):
    return await set_streak(store, req.current_streak)

@router.get("/{log_name}", response_model=List[Dict[str, Any]])
async def list_entries(
    log_name: str,
    store: KeyValueStore = Depends(get_activity_store),
    current_user: User = Depends(get_current_user)
):
    """The current user's entries in one activity log."""
    _check_log_name(log_name)
    logs = await read_activity_logs(store, current_user.id)
    return getattr(logs, log_name)

@router.post("/{log_name}", status_code=status.HTTP_201_CREATED)
async def add_entry(
    log_name: str,
    entry: Dict[str, Any] = Body(...),
    store: KeyValueStore = Depends(get_activity_store),
    current_user: User = Depends(get_current_user)
):
    _check_log_name(log_name)
    return await append_activity_entry(store, log_name, current_user.id, entry)
