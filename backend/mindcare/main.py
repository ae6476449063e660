# /backend/mindcare/main.py

from __future__ import annotations
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from mindcare.config import CORS_ORIGINS, LOG_LEVEL
from mindcare.db import get_db, engine
from mindcare.api.routers import auth, therapy, achievements, activity, bookings

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("MindCare API starting")
    try:
        yield
    finally:
        await engine.dispose()

app = FastAPI(
    title="MindCare API",
    lifespan=lifespan,
)

# CORS first so every route gets it
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(therapy.router)
app.include_router(achievements.router)
app.include_router(activity.router)
app.include_router(bookings.router)


@app.get("/health")
async def health():
    return {"ok": True}

@app.get("/db-health")
async def db_health(db: AsyncSession = Depends(get_db)):
    result = await db.execute(text("SELECT 1"))
    return {"db": "ok", "result": result.scalar_one()}
