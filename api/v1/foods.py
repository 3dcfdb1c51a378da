# api/v1/foods.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NutritionError
from core.food_keywords import match_food_keyword, piece_size_variants, suggested_conversions
from core.models import Food, FoodCategory, FoodIn, ServingUnit
from core.nutrition_scaling import nutrition_for_serving
from services.db import get_session
from services.store import FoodStore, refresh_meals_for_food
from api.v1.schemas import (
    ConversionSuggestionOut,
    FoodDeleted,
    FoodPatch,
    FoodUpdated,
    ServingNutritionOut,
)

router = APIRouter()


# ───────────────────────── list / create ─────────────────────
@router.get("", response_model=list[Food], summary="List foods")
async def list_foods(
    category: FoodCategory | None = None,
    db: AsyncSession = Depends(get_session),
) -> list[Food]:
    return await FoodStore(db).list(category.value if category else None)


@router.post("", response_model=Food, status_code=status.HTTP_201_CREATED)
async def create_food(
    body: FoodIn,
    db: AsyncSession = Depends(get_session),
) -> Food:
    return await FoodStore(db).create(body)


# ───────────────────────── conversion hints ──────────────────
@router.get(
    "/conversions/suggest",
    response_model=ConversionSuggestionOut,
    summary="Keyword-table conversions to pre-fill a food's custom conversions",
)
async def suggest_conversions(name: str = Query(..., min_length=1)) -> ConversionSuggestionOut:
    return ConversionSuggestionOut(
        name=name,
        keyword=match_food_keyword(name),
        conversions=suggested_conversions(name),
        piece_sizes=piece_size_variants(name),
    )


# ───────────────────────── fetch / update / delete ───────────
@router.get("/{food_id}", response_model=Food)
async def fetch_food(
    food_id: str,
    db: AsyncSession = Depends(get_session),
) -> Food:
    food = await FoodStore(db).get(food_id)
    if food is None:
        raise HTTPException(status_code=404, detail="Food not found")
    return food


@router.patch("/{food_id}", response_model=FoodUpdated)
async def update_food(
    food_id: str,
    body: FoodPatch,
    db: AsyncSession = Depends(get_session),
) -> FoodUpdated:
    changes = body.model_dump(mode="json", exclude_unset=True)
    try:
        food = await FoodStore(db).update(food_id, changes)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(
            include_url=False, include_context=False, include_input=False
        )) from exc
    if food is None:
        raise HTTPException(status_code=404, detail="Food not found")

    recomputed: list[str] = []
    if "nutrition_per100" in changes:
        recomputed = await refresh_meals_for_food(db, food_id)
    return FoodUpdated(food=food, recomputed_meals=recomputed)


@router.delete(
    "/{food_id}",
    response_model=FoodDeleted,
    summary="Delete a food; meals that used it are recomputed without it",
)
async def delete_food(
    food_id: str,
    db: AsyncSession = Depends(get_session),
) -> FoodDeleted:
    if not await FoodStore(db).delete(food_id):
        raise HTTPException(status_code=404, detail="Food not found")
    # meals keep the dangling id; aggregation reports it as missing
    recomputed = await refresh_meals_for_food(db, food_id)
    return FoodDeleted(food_id=food_id, recomputed_meals=recomputed)


# ───────────────────────── serving preview ───────────────────
@router.get(
    "/{food_id}/nutrition",
    response_model=ServingNutritionOut,
    response_model_exclude_none=True,
    summary="Nutrition of one serving of a food in any supported unit",
)
async def serving_nutrition(
    food_id: str,
    quantity: float = Query(..., description="serving size, > 0"),
    unit: ServingUnit = Query(ServingUnit.g),
    db: AsyncSession = Depends(get_session),
) -> ServingNutritionOut:
    food = await FoodStore(db).get(food_id)
    if food is None:
        raise HTTPException(status_code=404, detail="Food not found")

    try:
        result = nutrition_for_serving(food, quantity, unit)
    except NutritionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    serving = result.serving
    return ServingNutritionOut(
        food_id=food.id,
        quantity=serving.quantity,
        unit=serving.unit,
        amount=serving.amount,
        base_unit=food.base_unit,
        ratio=serving.ratio,
        source=serving.source,
        nutrition=result.nutrition,
    )
