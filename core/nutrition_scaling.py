"""
core/nutrition_scaling.py
────────────────────────────────────────────────────────────────────────
Applies a resolved ratio to a food's nutrition_per100 and sums the
per-food contributions of a meal.

Rounding (half-up, on the decimal value of the inputs):
  • calories            → whole number
  • every other nutrient → one decimal
Absent optional nutrients stay absent at every serving size; only the
meal totals treat them as 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Tuple, Union

from pydantic import BaseModel

from core.errors import PortionNotAllowedError, ScaleOutOfRangeError
from core.models.food import Food, NutritionPer100, ServingUnit
from core.models.meal import Meal, MealFood
from core.unit_conversion import NUTRITION_BASIS, ResolvedServing, UnitConversionResolver
from core.unit_conversion import resolver as _default_resolver

_LOG = logging.getLogger(__name__)

OPTIONAL_NUTRIENTS: tuple[str, ...] = tuple(
    name for name in NutritionPer100.model_fields if name != "calories"
)
MEAL_MACROS: tuple[str, ...] = ("calories", "protein", "carbs", "fat")

_WHOLE = Decimal("1")
_TENTH = Decimal("0.1")


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


def _round(value: Decimal, step: Decimal) -> Decimal:
    return value.quantize(step, rounding=ROUND_HALF_UP)


class ScaledNutrition(BaseModel):
    """Same shape as NutritionPer100, for one concrete serving."""

    calories: int
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    calcium: float | None = None
    potassium: float | None = None
    vitamin_b12: float | None = None
    vitamin_a: float | None = None
    vitamin_e: float | None = None
    vitamin_d: float | None = None
    vitamin_c: float | None = None
    iron: float | None = None
    magnesium: float | None = None


# ──────────────────────────────────────────────────────────────────────
#  Single food
# ──────────────────────────────────────────────────────────────────────
def scale_nutrition(nutrition: NutritionPer100, ratio: float) -> ScaledNutrition:
    if ratio < 0:
        raise ValueError(f"ratio must be >= 0, got {ratio}")
    r = _dec(ratio)

    scaled: dict[str, float | int] = {
        "calories": int(_round(_dec(nutrition.calories) * r, _WHOLE)),
    }
    for name in OPTIONAL_NUTRIENTS:
        value = getattr(nutrition, name)
        if value is not None:
            scaled[name] = float(_round(_dec(value) * r, _TENTH))
    return ScaledNutrition(**scaled)


@dataclass(frozen=True)
class ServingNutrition:
    serving: ResolvedServing
    nutrition: ScaledNutrition


def nutrition_for_serving(
    food: Food,
    quantity: float,
    unit: str | ServingUnit,
    resolver: UnitConversionResolver | None = None,
) -> ServingNutrition:
    """Resolve `quantity unit` of `food` and scale its nutrition to it."""
    serving = (resolver or _default_resolver).resolve(food, quantity, unit)
    return ServingNutrition(serving, scale_nutrition(food.nutrition_per100, serving.ratio))


# ──────────────────────────────────────────────────────────────────────
#  Meals
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class MacroTotals:
    calories: int
    protein: float
    carbs: float
    fat: float

    def as_base_fields(self) -> dict[str, float]:
        return {
            "base_calories": self.calories,
            "base_protein": self.protein,
            "base_carbs": self.carbs,
            "base_fat": self.fat,
        }


@dataclass(frozen=True)
class FoodContribution:
    food_id: str
    base_portion: float
    nutrition: ScaledNutrition


@dataclass(frozen=True)
class MealNutrition:
    totals: MacroTotals
    contributions: tuple[FoodContribution, ...]
    missing_food_ids: tuple[str, ...]

    @property
    def complete(self) -> bool:
        return not self.missing_food_ids

    def as_base_fields(self) -> dict[str, float]:
        return self.totals.as_base_fields()


MealEntry = Union[MealFood, Tuple[str, float]]


def _entry(item: MealEntry) -> tuple[str, float]:
    if isinstance(item, MealFood):
        return item.food_id, item.base_portion
    food_id, portion = item
    return food_id, portion


def _totals(calories: Decimal, protein: Decimal, carbs: Decimal, fat: Decimal) -> MacroTotals:
    return MacroTotals(
        calories=int(_round(calories, _WHOLE)),
        protein=float(_round(protein, _TENTH)),
        carbs=float(_round(carbs, _TENTH)),
        fat=float(_round(fat, _TENTH)),
    )


def aggregate_meal(
    meal_foods: Iterable[MealEntry],
    foods_by_id: Mapping[str, Food],
) -> MealNutrition:
    """
    Sum calories/protein/carbs/fat over the meal's foods, each scaled by
    base_portion / 100. Ids missing from `foods_by_id` contribute nothing
    and are reported in `missing_food_ids`.
    """
    sums = {name: Decimal(0) for name in MEAL_MACROS}
    contributions: list[FoodContribution] = []
    missing: list[str] = []

    for item in meal_foods:
        food_id, portion = _entry(item)
        food = foods_by_id.get(food_id)
        if food is None:
            missing.append(food_id)
            continue

        scaled = scale_nutrition(food.nutrition_per100, portion / NUTRITION_BASIS)
        contributions.append(FoodContribution(food_id, portion, scaled))
        for name in MEAL_MACROS:
            sums[name] += _dec(getattr(scaled, name) or 0)

    if missing:
        _LOG.warning("meal aggregation skipped %d unresolved food id(s): %s",
                     len(missing), ", ".join(missing))

    return MealNutrition(
        totals=_totals(sums["calories"], sums["protein"], sums["carbs"], sums["fat"]),
        contributions=tuple(contributions),
        missing_food_ids=tuple(missing),
    )


def scale_meal_nutrition(meal: Meal, scale: float) -> MacroTotals:
    """Base nutrition × a consumer-chosen multiplier within the meal's bounds."""
    if not meal.min_scale <= scale <= meal.max_scale:
        raise ScaleOutOfRangeError(scale, meal.min_scale, meal.max_scale)
    s = _dec(scale)
    return _totals(
        _dec(meal.base_calories) * s,
        _dec(meal.base_protein) * s,
        _dec(meal.base_carbs) * s,
        _dec(meal.base_fat) * s,
    )


def check_portion(meal_food: MealFood, grams: float) -> float:
    """Accept the base portion or one of the allowed discrete portions."""
    if grams == meal_food.base_portion:
        return grams
    allowed = meal_food.allowed_portions or []
    if grams not in allowed:
        raise PortionNotAllowedError(meal_food.food_id, grams, [meal_food.base_portion, *allowed])
    return grams
