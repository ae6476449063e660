from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mindcare.db import get_db
from mindcare.models import User
from mindcare.schemas import (
    AchievementPublic, UserAchievementPublic, AchievementRefreshResponse,
    ActivityMetricsPublic, SeedResponse
)
from mindcare.services.auth_service import get_current_user, require_admin
from mindcare.services.key_value_store import KeyValueStore
from mindcare.api.routers.activity import get_activity_store
from mindcare.services.achievement_service import (
    get_all_achievements, get_user_achievements, update_all_achievements,
    seed_default_achievements
)

router = APIRouter(prefix="/achievements", tags=["achievements"])

@router.get("", response_model=List[AchievementPublic])
async def list_achievements(db: AsyncSession = Depends(get_db)):
    """Achievement catalog, easiest first."""
    return await get_all_achievements(db)

@router.get("/my", response_model=List[UserAchievementPublic])
async def my_achievements(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await get_user_achievements(db, current_user.id)

@router.post("/my/refresh", response_model=AchievementRefreshResponse)
async def refresh_my_achievements(
    db: AsyncSession = Depends(get_db),
    store: KeyValueStore = Depends(get_activity_store),
    current_user: User = Depends(get_current_user)
):
    metrics = await update_all_achievements(db, store, current_user.id)
    rows = await get_user_achievements(db, current_user.id)
    return AchievementRefreshResponse(
        metrics=ActivityMetricsPublic(**metrics.as_dict()),
        achievements=[UserAchievementPublic.model_validate(r) for r in rows],
    )

@router.post("/seed", response_model=SeedResponse)
async def seed_achievements(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin)
):
    return SeedResponse(inserted=await seed_default_achievements(db))
