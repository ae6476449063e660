from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mindcare.models import Therapy
from mindcare.repository import Repository

logger = logging.getLogger(__name__)

# fields the admin editor may change
GENERAL_SETTINGS_FIELDS = (
    "title", "description", "duration", "sessions", "difficulty",
    "category", "icon", "color", "tags", "status",
)


def general_settings_of(therapy: Therapy) -> Dict[str, Any]:
    return {name: getattr(therapy, name) for name in GENERAL_SETTINGS_FIELDS}


async def get_all_therapies(db: AsyncSession) -> List[Therapy]:
    try:
        return await Repository(db, Therapy).list(order_by="title")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error fetching therapies: %s", e)
        return []


async def get_therapy(db: AsyncSession, therapy_id: str) -> Optional[Therapy]:
    try:
        return await Repository(db, Therapy).get(therapy_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error fetching therapy %s: %s", therapy_id, e)
        return None


async def update_therapy(
    db: AsyncSession, therapy_id: str, changes: Dict[str, Any]
) -> Optional[Therapy]:
    """Partial update by id. Returns the updated record, or None when nothing was written."""
    values = {k: v for k, v in changes.items() if k in GENERAL_SETTINGS_FIELDS}
    if not values:
        return await get_therapy(db, therapy_id)

    repo = Repository(db, Therapy)
    try:
        count = await repo.update_where(values, id=therapy_id)
        if not count:
            return None
        updated = await repo.list({"id": therapy_id})
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error updating therapy %s: %s", therapy_id, e)
        return None
    return updated[0] if updated else None
