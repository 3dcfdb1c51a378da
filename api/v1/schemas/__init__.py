"""Re-export individual schema modules for easy imports."""

from .food import (
    ConversionSuggestionOut,
    FoodDeleted,
    FoodPatch,
    FoodUpdated,
    ServingNutritionOut,
)
from .meal import FoodContributionOut, MealNutritionOut, MealPatch, MealSaved

__all__ = [
    "ConversionSuggestionOut",
    "FoodDeleted",
    "FoodPatch",
    "FoodUpdated",
    "ServingNutritionOut",
    "FoodContributionOut",
    "MealNutritionOut",
    "MealPatch",
    "MealSaved",
]
