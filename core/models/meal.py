from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FoodRole(str, Enum):
    protein_primary = "protein_primary"
    carb_primary = "carb_primary"
    filler = "filler"
    fat_primary = "fat_primary"
    vegetable = "vegetable"
    fruit = "fruit"
    snack = "snack"


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class Cultural(str, Enum):
    arabic = "arabic"
    kurdish = "kurdish"
    western = "western"
    mediterranean = "mediterranean"
    asian = "asian"


class MealFood(BaseModel):
    food_id: str
    base_portion: float = Field(..., gt=0, description="grams (or ml) in the base recipe")
    role: FoodRole
    allowed_portions: list[float] | None = None

    @model_validator(mode="after")
    def _positive_portions(self) -> "MealFood":
        if self.allowed_portions and any(p <= 0 for p in self.allowed_portions):
            raise ValueError("allowed_portions must all be positive")
        return self


class MealIn(BaseModel):
    name: str = Field(..., min_length=1)
    meal_arabic_name: str | None = None
    meal_kurdish_name: str | None = None
    meal_type: list[MealType] = Field(..., min_length=1)
    foods: list[MealFood] = []

    # derived from `foods`; whatever the client sends is overwritten on save
    base_calories: float = Field(0, ge=0)
    base_protein: float = Field(0, ge=0)
    base_carbs: float = Field(0, ge=0)
    base_fat: float = Field(0, ge=0)

    min_scale: float = Field(0.5, ge=0.1, le=1)
    max_scale: float = Field(2.0, ge=1, le=5)
    prep_time: float = Field(0, ge=0, description="minutes")
    difficulty: Difficulty = Difficulty.easy
    cultural: list[Cultural] = []
    tags: list[str] = []
    is_active: bool = True


class Meal(MealIn):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
