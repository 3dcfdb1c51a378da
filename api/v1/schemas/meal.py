from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from core.models.meal import Cultural, Difficulty, Meal, MealFood, MealType


class MealPatch(BaseModel):
    name: str | None = Field(None, min_length=1)
    meal_arabic_name: str | None = None
    meal_kurdish_name: str | None = None
    meal_type: list[MealType] | None = Field(None, min_length=1)
    foods: list[MealFood] | None = None
    min_scale: float | None = Field(None, ge=0.1, le=1)
    max_scale: float | None = Field(None, ge=1, le=5)
    prep_time: float | None = Field(None, ge=0)
    difficulty: Difficulty | None = None
    cultural: list[Cultural] | None = None
    tags: list[str] | None = None
    is_active: bool | None = None

    @field_validator(
        "name", "meal_type", "foods", "min_scale", "max_scale",
        "prep_time", "difficulty", "cultural", "tags", "is_active",
    )
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class MealSaved(BaseModel):
    """A persisted meal plus the food ids its nutrition could not include."""

    meal: Meal
    missing_food_ids: list[str] = []


class FoodContributionOut(BaseModel):
    food_id: str
    base_portion: float
    calories: int
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None


class MealNutritionOut(BaseModel):
    meal_id: str
    scale: float = 1.0
    calories: int
    protein: float
    carbs: float
    fat: float
    contributions: list[FoodContributionOut] = []
    missing_food_ids: list[str] = []
