"""Food and meal record shapes shared by the core, the store and the API."""

from .food import (
    CustomConversions,
    Food,
    FoodCategory,
    FoodIn,
    FoodType,
    MealTiming,
    NutritionPer100,
    ServingUnit,
)
from .meal import Cultural, Difficulty, FoodRole, Meal, MealFood, MealIn, MealType

__all__ = [
    "CustomConversions",
    "Food",
    "FoodCategory",
    "FoodIn",
    "FoodType",
    "MealTiming",
    "NutritionPer100",
    "ServingUnit",
    "Cultural",
    "Difficulty",
    "FoodRole",
    "Meal",
    "MealFood",
    "MealIn",
    "MealType",
]
