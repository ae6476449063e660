# backend/mindcare/config.py
import os
from dotenv import load_dotenv

load_dotenv()

ASYNC_DB_URL = os.getenv("ASYNC_DATABASE_URL", "sqlite+aiosqlite:///./mindcare.db")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Keys the web client used for its local activity logs; kept so exported data loads as-is.
STORAGE_KEYS = {
    "streak": "mindcare_streak",
    "mood_entries": "mindcare_mood_entries",
    "cbt_records": "mindcare_cbt_records",
    "gratitude_entries": "mindcare_gratitude_entries",
    "exposure_sessions": "mindcare_exposure_sessions",
    "video_progress": "mindcare_video_progress",
    "stress_logs": "mindcare_stress_logs",
}

# No time-of-day tracking exists for meditations yet.
MORNING_MEDITATIONS_PLACEHOLDER = 5

BOOKING_MAX_FUTURE_YEARS = 2
BOOKING_CURRENCY_SYMBOLS = "$₹€£¥"
BOOKING_DATE_FIELDS = ("date", "createdAt", "timestamp")

THERAPY_MANAGEMENT_PATH = "/admin/therapy-management"
