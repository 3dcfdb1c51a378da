from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FoodCategory(str, Enum):
    fruits = "fruits"
    vegetables = "vegetables"
    grains = "grains"
    proteins = "proteins"
    dairy = "dairy"
    beverages = "beverages"
    snacks = "snacks"
    condiments = "condiments"
    protein_supplements = "protein supplements"


class FoodType(str, Enum):
    solid = "solid"
    liquid = "liquid"


class ServingUnit(str, Enum):
    ml = "ml"
    l = "l"  # noqa: E741
    g = "g"
    cup = "cup"
    tbsp = "tbsp"
    tsp = "tsp"
    plate = "plate"
    fist = "fist"
    piece = "piece"


class MealTiming(str, Enum):
    morning = "morning"
    lunch = "lunch"
    dinner = "dinner"


class NutritionPer100(BaseModel):
    """Nutrient amounts per 100 g (solid) or 100 ml (liquid)."""

    calories: float = Field(..., ge=0)
    protein: float | None = Field(None, ge=0)
    carbs: float | None = Field(None, ge=0)
    fat: float | None = Field(None, ge=0)
    fiber: float | None = Field(None, ge=0)
    sugar: float | None = Field(None, ge=0)
    sodium: float | None = Field(None, ge=0)
    calcium: float | None = Field(None, ge=0)
    potassium: float | None = Field(None, ge=0)
    vitamin_b12: float | None = Field(None, ge=0)
    vitamin_a: float | None = Field(None, ge=0)
    vitamin_e: float | None = Field(None, ge=0)
    vitamin_d: float | None = Field(None, ge=0)
    vitamin_c: float | None = Field(None, ge=0)
    iron: float | None = Field(None, ge=0)
    magnesium: float | None = Field(None, ge=0)


class CustomConversions(BaseModel):
    """Per-food grams (or ml) for one unit of each fuzzy serving unit."""

    cup: float | None = Field(None, gt=0)
    plate: float | None = Field(None, gt=0)
    fist: float | None = Field(None, gt=0)
    piece: float | None = Field(None, gt=0)
    tbsp: float | None = Field(None, gt=0)
    tsp: float | None = Field(None, gt=0)


class FoodIn(BaseModel):
    name: str = Field(..., min_length=1, description="English display name")
    kurdish_name: str | None = None
    arabic_name: str | None = None
    base_name: str | None = None
    brand: str | None = None
    category: FoodCategory
    food_type: FoodType
    available_units: list[ServingUnit] | None = None
    nutrition_per100: NutritionPer100
    custom_conversions: CustomConversions | None = None

    # dietary flags
    vegetarian: bool | None = None
    vegan: bool | None = None
    gluten_free: bool | None = None
    dairy_free: bool | None = None

    # meal planner hints
    meal_planner: bool | None = None
    allow_duplication: bool | None = None
    low_calorie: bool | None = None
    calorie_adjustment: bool | None = None
    min_portion: float | None = Field(None, ge=0)
    max_portion: float | None = Field(None, ge=0)
    meal_timing: list[MealTiming] | None = None


class Food(FoodIn):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @property
    def base_unit(self) -> str:
        return "ml" if self.food_type == FoodType.liquid else "g"
