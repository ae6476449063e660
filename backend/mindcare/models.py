from __future__ import annotations
from typing import Optional, Literal
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    BigInteger, String, Text, Integer, DateTime, CheckConstraint,
    ForeignKey, Index, Boolean, JSON, UniqueConstraint
)
from sqlalchemy.sql import func
from sqlalchemy.sql.expression import false

from mindcare.db import Base

# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntPK = BigInteger().with_variant(Integer, "sqlite")

Role = Literal["user", "admin"]

class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role in ('user','admin')", name="ck_users_role"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    password_hash: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String, default="user", nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    achievements: Mapped[list["UserAchievement"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

Difficulty = Literal["Beginner", "Intermediate", "Advanced"]
TherapyStatus = Literal["Active", "Inactive"]

class Therapy(Base):
    """
    Therapy program shown in the catalog and edited from the admin screen.
    Updated wholesale by id; no versioning.
    """
    __tablename__ = "therapies"
    __table_args__ = (
        CheckConstraint(
            "difficulty in ('Beginner','Intermediate','Advanced')",
            name="ck_therapies_difficulty",
        ),
        CheckConstraint("status in ('Active','Inactive')", name="ck_therapies_status"),
        Index("idx_therapies_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    duration: Mapped[str] = mapped_column(String(64), default="", nullable=False)  # e.g. "15-30 min"
    sessions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    difficulty: Mapped[str] = mapped_column(String, default="Beginner", nullable=False)
    category: Mapped[str] = mapped_column(String, default="", nullable=False)
    icon: Mapped[str] = mapped_column(String, default="Brain", nullable=False)
    color: Mapped[str] = mapped_column(String, default="from-blue-500 to-cyan-500", nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    status: Mapped[str] = mapped_column(String, default="Active", nullable=False)

    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

AchievementType = Literal["streak", "therapy", "stress", "mood"]

class Achievement(Base):
    __tablename__ = "achievements"
    __table_args__ = (
        Index("idx_achievements_requirement", "requirement"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    requirement: Mapped[int] = mapped_column(Integer, nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # which activity metric feeds progress; null falls back to the type default
    metric: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

class UserAchievement(Base):
    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
        Index("idx_user_achievements_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    achievement_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("achievements.id", ondelete="CASCADE"), nullable=False
    )
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    earned: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, server_default=false()
    )
    earned_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="achievements")
    achievement: Mapped[Optional["Achievement"]] = relationship()

class KeyValueEntry(Base):
    """JSON document per key; replaces the browser's local activity storage."""
    __tablename__ = "key_value_entries"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
