"""
Achievement engine.

Progress is always recomputed from the raw activity logs, never incremented,
so running a pass twice over the same logs leaves every row unchanged apart
from `updated_at`. The `earned` flag only ever moves from False to True and
`earned_at` is stamped on that move alone.

Backend failures are logged and degrade to empty results; nothing here raises
to the caller.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from mindcare.config import MORNING_MEDITATIONS_PLACEHOLDER
from mindcare.models import Achievement, UserAchievement
from mindcare.repository import Repository
from mindcare.services.key_value_store import ActivityLogs, KeyValueStore, read_activity_logs

logger = logging.getLogger(__name__)

GOOD_STRESS_EFFECTIVENESS = 7


class AchievementMetric(str, Enum):
    CURRENT_STREAK = "current_streak"
    MOOD_TRACK_DAYS = "mood_track_days"
    MINDFULNESS_SESSIONS = "mindfulness_sessions"
    GOOD_STRESS_DAYS = "good_stress_days"
    COMPLETED_MODULES = "completed_modules"
    TOTAL_THERAPY_SESSIONS = "total_therapy_sessions"
    MORNING_MEDITATIONS = "morning_meditations"


# metric used when an achievement row does not name one
TYPE_DEFAULT_METRICS = {
    "streak": AchievementMetric.CURRENT_STREAK,
    "stress": AchievementMetric.GOOD_STRESS_DAYS,
    "mood": AchievementMetric.MOOD_TRACK_DAYS,
    "therapy": AchievementMetric.TOTAL_THERAPY_SESSIONS,
}

DEFAULT_ACHIEVEMENTS: List[Dict[str, Any]] = [
    {"title": "First Step", "description": "Check in one day in a row",
     "type": "streak", "requirement": 1, "icon": "Flame", "metric": None},
    {"title": "Week Warrior", "description": "Keep a 7-day streak",
     "type": "streak", "requirement": 7, "icon": "Flame", "metric": None},
    {"title": "Monthly Master", "description": "Keep a 30-day streak",
     "type": "streak", "requirement": 30, "icon": "Crown", "metric": None},
    {"title": "Mood Tracker", "description": "Log your mood on 7 days",
     "type": "mood", "requirement": 7, "icon": "Smile", "metric": None},
    {"title": "Mood Master", "description": "Log your mood on 30 days",
     "type": "mood", "requirement": 30, "icon": "Heart", "metric": None},
    {"title": "Stress Buster", "description": "Record 5 stress logs rated 7 or higher",
     "type": "stress", "requirement": 5, "icon": "Shield", "metric": None},
    {"title": "Mindful meditation", "description": "Complete 5 mindfulness sessions",
     "type": "therapy", "requirement": 5, "icon": "Brain",
     "metric": AchievementMetric.MINDFULNESS_SESSIONS.value},
    {"title": "Early Riser", "description": "Complete 5 morning meditations",
     "type": "therapy", "requirement": 5, "icon": "Sunrise",
     "metric": AchievementMetric.MORNING_MEDITATIONS.value},
    {"title": "Therapy Explorer", "description": "Complete 10 therapy activities",
     "type": "therapy", "requirement": 10, "icon": "Compass",
     "metric": AchievementMetric.TOTAL_THERAPY_SESSIONS.value},
    {"title": "Program Graduate", "description": "Complete all 5 therapy modules",
     "type": "therapy", "requirement": 5, "icon": "GraduationCap",
     "metric": AchievementMetric.COMPLETED_MODULES.value},
]


@dataclass(frozen=True)
class ActivityMetrics:
    current_streak: int
    mood_track_days: int
    mindfulness_sessions: int
    good_stress_days: int
    completed_modules: int
    total_therapy_sessions: int
    morning_meditations: int

    def value_of(self, metric: AchievementMetric) -> int:
        return getattr(self, metric.value)

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def compute_activity_metrics(logs: ActivityLogs) -> ActivityMetrics:
    """Derive the seven progress metrics from one user's activity logs."""
    streak = _number(logs.streak.get("currentStreak")) or 0
    mood = len(logs.mood_entries)
    cbt = len(logs.cbt_records)
    gratitude = len(logs.gratitude_entries)
    exposure = len(logs.exposure_sessions)
    video = len(logs.video_progress)
    stress = len(logs.stress_logs)

    mindfulness = math.floor(mood * 0.3) + math.floor(gratitude * 0.5) + exposure
    good_stress_days = sum(
        1 for entry in logs.stress_logs
        if (_number(entry.get("effectiveness")) or 0) >= GOOD_STRESS_EFFECTIVENESS
    )
    completed_modules = sum([
        cbt >= 3,
        gratitude >= 7,
        stress >= 3,
        mindfulness >= 5,
        video >= 2,
    ])

    return ActivityMetrics(
        # fractional streaks are truncated
        current_streak=int(streak),
        mood_track_days=mood,
        mindfulness_sessions=mindfulness,
        good_stress_days=good_stress_days,
        completed_modules=completed_modules,
        total_therapy_sessions=cbt + gratitude + exposure + video + stress,
        morning_meditations=MORNING_MEDITATIONS_PLACEHOLDER,
    )


def resolve_metric(achievement: Achievement) -> Optional[AchievementMetric]:
    if achievement.metric:
        try:
            return AchievementMetric(achievement.metric)
        except ValueError:
            logger.warning(
                "Achievement %s has unknown metric %r, using type default",
                achievement.id, achievement.metric,
            )
    return TYPE_DEFAULT_METRICS.get(achievement.type)


def progress_for(achievement: Achievement, metrics: ActivityMetrics) -> int:
    metric = resolve_metric(achievement)
    if metric is None:
        return 0
    return metrics.value_of(metric)


async def get_all_achievements(db: AsyncSession) -> List[Achievement]:
    try:
        return await Repository(db, Achievement).list(order_by="requirement")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error fetching achievements: %s", e)
        return []


async def get_user_achievements(db: AsyncSession, user_id: int) -> List[UserAchievement]:
    try:
        return await Repository(db, UserAchievement).list(
            {"user_id": user_id},
            order_by="created_at",
            descending=True,
            options=[selectinload(UserAchievement.achievement)],
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error fetching user achievements for user %s: %s", user_id, e)
        return []


async def initialize_user_achievements(db: AsyncSession, user_id: int) -> int:
    """Create a zero-progress row for every catalog entry the user lacks.

    Returns how many rows were inserted.
    """
    achievements = await get_all_achievements(db)
    rows = Repository(db, UserAchievement)
    try:
        existing = await rows.list({"user_id": user_id})
        existing_ids = {ua.achievement_id for ua in existing}

        new_rows = [
            {"user_id": user_id, "achievement_id": a.id, "progress": 0, "earned": False}
            for a in achievements
            if a.id not in existing_ids
        ]
        await rows.insert_many(new_rows)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error initializing achievements for user %s: %s", user_id, e)
        return 0
    return len(new_rows)


async def update_achievement_progress(
    db: AsyncSession, user_id: int, achievement_id: int, progress: int
) -> None:
    try:
        achievement = await Repository(db, Achievement).get(achievement_id)
        if achievement is None:
            return

        rows = Repository(db, UserAchievement)
        found = await rows.list({"user_id": user_id, "achievement_id": achievement_id})
        current = found[0] if found else None

        already_earned = bool(current and current.earned)
        earned = already_earned or progress >= achievement.requirement
        now = datetime.now(timezone.utc)
        values: Dict[str, Any] = {"progress": progress, "earned": earned, "updated_at": now}

        # just earned
        if earned and current is not None and not already_earned:
            values["earned_at"] = now

        await rows.update_where(values, user_id=user_id, achievement_id=achievement_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "Error updating achievement %s for user %s: %s", achievement_id, user_id, e
        )


async def update_all_achievements(
    db: AsyncSession, store: KeyValueStore, user_id: int
) -> ActivityMetrics:
    """Recompute progress for every catalog achievement for one user."""
    # 1) make sure every achievement has a row
    await initialize_user_achievements(db, user_id)

    # 2) activity logs -> metrics
    logs = await read_activity_logs(store, user_id)
    metrics = compute_activity_metrics(logs)

    # 3) write back per achievement
    achievements = await get_all_achievements(db)
    for achievement in achievements:
        await update_achievement_progress(
            db, user_id, achievement.id, progress_for(achievement, metrics)
        )

    logger.info(
        "Recomputed %d achievements for user %s: %s",
        len(achievements), user_id, metrics.as_dict(),
    )
    return metrics


async def seed_default_achievements(db: AsyncSession) -> int:
    """Insert the default catalog entries whose titles are not present yet."""
    repo = Repository(db, Achievement)
    try:
        titles = {a.title for a in await repo.list()}
        missing = [dict(a) for a in DEFAULT_ACHIEVEMENTS if a["title"] not in titles]
        await repo.insert_many(missing)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error seeding achievements: %s", e)
        return 0
    return len(missing)
