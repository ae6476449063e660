from __future__ import annotations
from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, Field, EmailStr
from datetime import datetime

# --- auth ---
class UserCreate(BaseModel):
    """
    /auth/register request.
    """
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserPublic(BaseModel):
    id: int
    email: EmailStr
    name: Optional[str] = None
    role: str

    class Config:
        from_attributes = True

# --- therapy editor ---
class TherapyGeneralSettings(BaseModel):
    """
    Editable fields of the admin "General settings" form.
    Constraints mirror the form inputs, nothing more.
    """
    title: str
    description: str
    duration: str
    sessions: int = Field(0, ge=0)
    difficulty: Literal["Beginner", "Intermediate", "Advanced"] = "Beginner"
    category: str
    icon: str = "Brain"
    color: str = "from-blue-500 to-cyan-500"
    tags: List[str] = []
    status: Literal["Active", "Inactive"] = "Active"

    class Config:
        from_attributes = True

class TherapyPublic(TherapyGeneralSettings):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class TherapyEditorView(BaseModel):
    therapy: TherapyPublic
    general: TherapyGeneralSettings

class TherapySaveResponse(BaseModel):
    therapy: TherapyPublic
    message: str
    back_to: str

# --- achievements ---
class AchievementPublic(BaseModel):
    id: int
    title: str
    description: str
    type: str
    requirement: int
    icon: Optional[str] = None
    metric: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserAchievementPublic(BaseModel):
    id: int
    user_id: int
    achievement_id: int
    progress: int
    earned: bool
    earned_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    achievement: Optional[AchievementPublic] = None

    class Config:
        from_attributes = True

class ActivityMetricsPublic(BaseModel):
    current_streak: int
    mood_track_days: int
    mindfulness_sessions: int
    good_stress_days: int
    completed_modules: int
    total_therapy_sessions: int
    morning_meditations: int

    class Config:
        from_attributes = True

class AchievementRefreshResponse(BaseModel):
    metrics: ActivityMetricsPublic
    achievements: List[UserAchievementPublic] = []

class SeedResponse(BaseModel):
    inserted: int

# --- activity logs ---
class StreakUpdate(BaseModel):
    current_streak: int = Field(..., ge=0)

# --- bookings ---
class BookingSummaryReq(BaseModel):
    bookings: List[Dict[str, Any]] = []
    month: int = Field(..., ge=0, le=11, description="zero-indexed, January is 0")
    year: int

class BookingSummary(BaseModel):
    month: int
    year: int
    bookings_count: int
    completed_count: int
    revenue: float
