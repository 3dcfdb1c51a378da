from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from core.models.food import (
    CustomConversions,
    Food,
    FoodCategory,
    FoodType,
    MealTiming,
    NutritionPer100,
    ServingUnit,
)
from core.nutrition_scaling import ScaledNutrition


class FoodPatch(BaseModel):
    """Partial update – only the fields sent are written."""

    name: str | None = Field(None, min_length=1)
    kurdish_name: str | None = None
    arabic_name: str | None = None
    base_name: str | None = None
    brand: str | None = None
    category: FoodCategory | None = None
    food_type: FoodType | None = None
    available_units: list[ServingUnit] | None = None
    nutrition_per100: NutritionPer100 | None = None
    custom_conversions: CustomConversions | None = None
    vegetarian: bool | None = None
    vegan: bool | None = None
    gluten_free: bool | None = None
    dairy_free: bool | None = None
    meal_planner: bool | None = None
    allow_duplication: bool | None = None
    low_calorie: bool | None = None
    calorie_adjustment: bool | None = None
    min_portion: float | None = Field(None, ge=0)
    max_portion: float | None = Field(None, ge=0)
    meal_timing: list[MealTiming] | None = None

    @field_validator("name", "category", "food_type", "nutrition_per100")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class FoodUpdated(BaseModel):
    food: Food
    recomputed_meals: list[str] = []


class FoodDeleted(BaseModel):
    food_id: str
    recomputed_meals: list[str] = []


class ServingNutritionOut(BaseModel):
    food_id: str
    quantity: float
    unit: ServingUnit
    amount: float = Field(..., description="grams (solid) or ml (liquid)")
    base_unit: str
    ratio: float
    source: str = Field(..., examples=["exact", "custom", "keyword", "default"])
    nutrition: ScaledNutrition


class ConversionSuggestionOut(BaseModel):
    name: str
    keyword: str | None
    conversions: dict[str, float | None] | None
    piece_sizes: dict[str, float] | None
