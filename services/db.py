"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* Two document tables (`foods`, `meals`); nested records live in JSON
  columns so a row maps 1:1 onto the pydantic Food / Meal models
* Session helpers for routers (dependency) and scripts (context manager)
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import JSON, Boolean, DateTime, Float, String, func
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None


async def _create_engine() -> AsyncEngine:
    # 1) plain URL (local SQLite by default)
    if settings.database_url:
        return create_async_engine(settings.database_url, pool_pre_ping=True)

    # 2) Cloud SQL connector (only if URL not supplied)
    if not settings.cloud_sql_connection_name:
        raise RuntimeError(
            "Set either DATABASE_URL or CLOUD_SQL_CONNECTION_NAME env var"
        )

    # lazy import here
    try:
        from google.cloud.sql.connector import ConnectorAsync, IPTypes  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "cloud-sql-python-connector missing. Run:\n"
            "pip install '.[cloudsql]'"
        ) from exc

    connector = ConnectorAsync()

    async def _getconn():  # type: ignore[name-defined]
        return await connector.connect_async(
            settings.cloud_sql_connection_name,
            "asyncpg",
            user=settings.db_user,
            password=settings.db_pass,
            db=settings.db_name,
            ip_type=IPTypes.PRIVATE,
        )

    return create_async_engine(
        "postgresql+asyncpg://",
        creator=_getconn,
        pool_pre_ping=True,
    )


async def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = await _create_engine()
    return _ENGINE


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class FoodRow(Base):
    __tablename__ = "foods"

    id:                 Mapped[str] = mapped_column(String, primary_key=True)
    name:               Mapped[str] = mapped_column(String, index=True)
    kurdish_name:       Mapped[str | None] = mapped_column(String)
    arabic_name:        Mapped[str | None] = mapped_column(String)
    base_name:          Mapped[str | None] = mapped_column(String)
    brand:              Mapped[str | None] = mapped_column(String)
    category:           Mapped[str] = mapped_column(String, index=True)
    food_type:          Mapped[str] = mapped_column(String)
    available_units:    Mapped[list | None] = mapped_column(JSON)
    nutrition_per100:   Mapped[dict] = mapped_column(JSON)
    custom_conversions: Mapped[dict | None] = mapped_column(JSON)

    vegetarian:         Mapped[bool | None] = mapped_column(Boolean)
    vegan:              Mapped[bool | None] = mapped_column(Boolean)
    gluten_free:        Mapped[bool | None] = mapped_column(Boolean)
    dairy_free:         Mapped[bool | None] = mapped_column(Boolean)
    meal_planner:       Mapped[bool | None] = mapped_column(Boolean)
    allow_duplication:  Mapped[bool | None] = mapped_column(Boolean)
    low_calorie:        Mapped[bool | None] = mapped_column(Boolean)
    calorie_adjustment: Mapped[bool | None] = mapped_column(Boolean)
    min_portion:        Mapped[float | None] = mapped_column(Float)
    max_portion:        Mapped[float | None] = mapped_column(Float)
    meal_timing:        Mapped[list | None] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class MealRow(Base):
    __tablename__ = "meals"

    id:                Mapped[str] = mapped_column(String, primary_key=True)
    name:              Mapped[str] = mapped_column(String, index=True)
    meal_arabic_name:  Mapped[str | None] = mapped_column(String)
    meal_kurdish_name: Mapped[str | None] = mapped_column(String)
    meal_type:         Mapped[list] = mapped_column(JSON)
    foods:             Mapped[list] = mapped_column(JSON)   # serialized MealFood list

    base_calories: Mapped[float] = mapped_column(Float, default=0)
    base_protein:  Mapped[float] = mapped_column(Float, default=0)
    base_carbs:    Mapped[float] = mapped_column(Float, default=0)
    base_fat:      Mapped[float] = mapped_column(Float, default=0)

    min_scale:  Mapped[float] = mapped_column(Float)
    max_scale:  Mapped[float] = mapped_column(Float)
    prep_time:  Mapped[float] = mapped_column(Float, default=0)
    difficulty: Mapped[str] = mapped_column(String)
    cultural:   Mapped[list] = mapped_column(JSON)
    tags:       Mapped[list] = mapped_column(JSON)
    is_active:  Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


# ───────── schema / session helpers ──────────────────────────────────

async def init_models(eng: AsyncEngine | None = None) -> None:
    eng = eng or await engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    eng = await engine()
    async_session = async_sessionmaker(eng, expire_on_commit=False)
    async with async_session() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """`async with session_scope() as db:` for scripts outside FastAPI."""
    eng = await engine()
    async with async_sessionmaker(eng, expire_on_commit=False)() as session:
        yield session
