# api/v1/meals.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NutritionError
from core.models import Meal, MealIn
from core.nutrition_scaling import MealNutrition, scale_meal_nutrition
from services.db import get_session
from services.store import MealStore
from api.v1.schemas import FoodContributionOut, MealNutritionOut, MealPatch, MealSaved

router = APIRouter()


def _nutrition_out(meal: Meal, nutrition: MealNutrition, scale: float) -> MealNutritionOut:
    totals = nutrition.totals
    if scale != 1.0:
        live = meal.model_copy(update=nutrition.as_base_fields())
        totals = scale_meal_nutrition(live, scale)
    return MealNutritionOut(
        meal_id=meal.id,
        scale=scale,
        calories=totals.calories,
        protein=totals.protein,
        carbs=totals.carbs,
        fat=totals.fat,
        contributions=[
            FoodContributionOut(
                food_id=c.food_id,
                base_portion=c.base_portion,
                calories=c.nutrition.calories,
                protein=c.nutrition.protein,
                carbs=c.nutrition.carbs,
                fat=c.nutrition.fat,
            )
            for c in nutrition.contributions
        ],
        missing_food_ids=list(nutrition.missing_food_ids),
    )


@router.get("", response_model=list[Meal], summary="List meals")
async def list_meals(
    active_only: bool = False,
    db: AsyncSession = Depends(get_session),
) -> list[Meal]:
    return await MealStore(db).list(active_only=active_only)


@router.post(
    "",
    response_model=MealSaved,
    status_code=status.HTTP_201_CREATED,
    summary="Create a meal; base nutrition is derived from its foods",
)
async def create_meal(
    body: MealIn,
    db: AsyncSession = Depends(get_session),
) -> MealSaved:
    meal, nutrition = await MealStore(db).create(body)
    return MealSaved(meal=meal, missing_food_ids=list(nutrition.missing_food_ids))


@router.get("/{meal_id}", response_model=Meal)
async def fetch_meal(
    meal_id: str,
    db: AsyncSession = Depends(get_session),
) -> Meal:
    meal = await MealStore(db).get(meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal


@router.patch("/{meal_id}", response_model=MealSaved)
async def update_meal(
    meal_id: str,
    body: MealPatch,
    db: AsyncSession = Depends(get_session),
) -> MealSaved:
    changes = body.model_dump(mode="json", exclude_unset=True)
    try:
        saved = await MealStore(db).update(meal_id, changes)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(
            include_url=False, include_context=False, include_input=False
        )) from exc
    if saved is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    meal, nutrition = saved
    missing = list(nutrition.missing_food_ids) if nutrition else []
    return MealSaved(meal=meal, missing_food_ids=missing)


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    meal_id: str,
    db: AsyncSession = Depends(get_session),
) -> Response:
    if not await MealStore(db).delete(meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{meal_id}/recompute", response_model=MealSaved)
async def recompute_meal(
    meal_id: str,
    db: AsyncSession = Depends(get_session),
) -> MealSaved:
    saved = await MealStore(db).recompute(meal_id)
    if saved is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    meal, nutrition = saved
    return MealSaved(meal=meal, missing_food_ids=list(nutrition.missing_food_ids))


@router.get(
    "/{meal_id}/nutrition",
    response_model=MealNutritionOut,
    summary="Live aggregation over the meal's current foods, optionally scaled",
)
async def meal_nutrition(
    meal_id: str,
    scale: float = Query(1.0, gt=0),
    db: AsyncSession = Depends(get_session),
) -> MealNutritionOut:
    store = MealStore(db)
    meal = await store.get(meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")

    nutrition = await store.nutrition(meal.foods)
    try:
        return _nutrition_out(meal, nutrition, scale)
    except NutritionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
