"""
services/store.py
────────────────────────────────────────────────────────────────────────
Small DAO helpers over the `foods` / `meals` tables used by routers and
scripts: get · list · create · update · delete.

Meals never store nutrition the client sends; `base_*` fields are
re-derived through `core.nutrition_scaling.aggregate_meal` whenever the
food list, or a referenced food's nutrition, changes.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models import Food, FoodIn, Meal, MealFood, MealIn
from core.nutrition_scaling import MealNutrition, aggregate_meal
from services.db import FoodRow, MealRow

_LOG = logging.getLogger(__name__)


def _now() -> datetime:
    # naive UTC – the DateTime columns are timezone-less
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


# ───────────────────────── foods ─────────────────────────────
class FoodStore:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, food_id: str) -> Food | None:
        row = await self._db.get(FoodRow, food_id)
        return Food.model_validate(row) if row else None

    async def list(self, category: str | None = None) -> list[Food]:
        stmt = select(FoodRow).order_by(FoodRow.name)
        if category:
            stmt = stmt.where(FoodRow.category == category)
        rows = (await self._db.execute(stmt)).scalars().all()
        return [Food.model_validate(r) for r in rows]

    async def get_many(self, food_ids: Iterable[str]) -> dict[str, Food]:
        ids = set(food_ids)
        if not ids:
            return {}
        rows = (
            await self._db.execute(select(FoodRow).where(FoodRow.id.in_(ids)))
        ).scalars().all()
        return {r.id: Food.model_validate(r) for r in rows}

    async def create(self, body: FoodIn) -> Food:
        now = _now()
        row = FoodRow(
            id=_new_id("food"),
            created_at=now,
            updated_at=now,
            **body.model_dump(mode="json"),
        )
        self._db.add(row)
        await self._db.commit()
        return Food.model_validate(row)

    async def update(self, food_id: str, changes: dict[str, Any]) -> Food | None:
        """Apply a partial (already JSON-safe) update. Last write wins.

        The merged record is validated before anything is written, so a bad
        patch raises `pydantic.ValidationError` and leaves the row untouched.
        """
        row = await self._db.get(FoodRow, food_id)
        if row is None:
            return None
        current = Food.model_validate(row).model_dump(mode="json")
        merged = Food.model_validate({**current, **changes}).model_dump(mode="json")
        for key in changes:
            setattr(row, key, merged[key])
        row.updated_at = _now()
        await self._db.commit()
        return Food.model_validate(row)

    async def delete(self, food_id: str) -> bool:
        row = await self._db.get(FoodRow, food_id)
        if row is None:
            return False
        await self._db.delete(row)
        await self._db.commit()
        return True


# ───────────────────────── meals ─────────────────────────────
class MealStore:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db
        self._foods = FoodStore(db)

    async def get(self, meal_id: str) -> Meal | None:
        row = await self._db.get(MealRow, meal_id)
        return Meal.model_validate(row) if row else None

    async def list(self, active_only: bool = False) -> list[Meal]:
        stmt = select(MealRow).order_by(MealRow.name)
        if active_only:
            stmt = stmt.where(MealRow.is_active.is_(True))
        rows = (await self._db.execute(stmt)).scalars().all()
        return [Meal.model_validate(r) for r in rows]

    async def nutrition(self, foods: list[MealFood]) -> MealNutrition:
        """Aggregate against the current snapshot of the referenced foods."""
        resolved = await self._foods.get_many(f.food_id for f in foods)
        return aggregate_meal(foods, resolved)

    async def create(self, body: MealIn) -> tuple[Meal, MealNutrition]:
        nutrition = await self.nutrition(body.foods)
        now = _now()
        payload = body.model_dump(mode="json")
        payload.update(nutrition.as_base_fields())
        row = MealRow(id=_new_id("meal"), created_at=now, updated_at=now, **payload)
        self._db.add(row)
        await self._db.commit()
        return Meal.model_validate(row), nutrition

    async def update(
        self, meal_id: str, changes: dict[str, Any]
    ) -> tuple[Meal, MealNutrition | None] | None:
        """Partial update; raises `pydantic.ValidationError` before writing."""
        row = await self._db.get(MealRow, meal_id)
        if row is None:
            return None

        nutrition: MealNutrition | None = None
        # derived fields are never taken from the client
        for key in ("base_calories", "base_protein", "base_carbs", "base_fat"):
            changes.pop(key, None)
        current = Meal.model_validate(row).model_dump(mode="json")
        merged = Meal.model_validate({**current, **changes})
        payload = merged.model_dump(mode="json")
        if "foods" in changes:
            nutrition = await self.nutrition(merged.foods)
            changes.update(nutrition.as_base_fields())
            payload.update(nutrition.as_base_fields())

        for key in changes:
            setattr(row, key, payload[key])
        row.updated_at = _now()
        await self._db.commit()
        return Meal.model_validate(row), nutrition

    async def recompute(self, meal_id: str) -> tuple[Meal, MealNutrition] | None:
        row = await self._db.get(MealRow, meal_id)
        if row is None:
            return None
        meal = Meal.model_validate(row)
        nutrition = await self.nutrition(meal.foods)
        for key, value in nutrition.as_base_fields().items():
            setattr(row, key, value)
        row.updated_at = _now()
        await self._db.commit()
        return Meal.model_validate(row), nutrition

    async def delete(self, meal_id: str) -> bool:
        row = await self._db.get(MealRow, meal_id)
        if row is None:
            return False
        await self._db.delete(row)
        await self._db.commit()
        return True

    async def referencing(self, food_id: str) -> list[str]:
        # JSON column → filter in Python; the catalogue is small
        rows = (await self._db.execute(select(MealRow))).scalars().all()
        return [
            r.id for r in rows
            if any(f.get("food_id") == food_id for f in (r.foods or []))
        ]


async def refresh_meals_for_food(db: AsyncSession, food_id: str) -> list[str]:
    """Re-derive base nutrition of every meal that uses `food_id`."""
    meals = MealStore(db)
    meal_ids = await meals.referencing(food_id)
    for meal_id in meal_ids:
        await meals.recompute(meal_id)
    if meal_ids:
        _LOG.info("food %s changed – recomputed %d meal(s)", food_id, len(meal_ids))
    return meal_ids
