"""
core/unit_conversion.py
────────────────────────────────────────────────────────────────────────
Serving quantity + unit  ➜  amount in the food's base unit (g | ml).

1. Exact units      g ×1 · ml ×1 · l ×1000        (no lookup)
2. Fuzzy units      cup · tbsp · tsp · plate · fist · piece
     a. per-food custom conversion   (always wins)
     b. food-name keyword table      (core.food_keywords)
     c. generic defaults             (cup/tbsp/tsp depend on food type)

ratio = amount / 100, the multiplier applied to nutrition_per100.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from core.errors import InvalidServingError, UnsupportedUnitError
from core.food_keywords import keyword_conversions
from core.models.food import Food, FoodType, ServingUnit

_LOG = logging.getLogger(__name__)

NUTRITION_BASIS = 100.0

EXACT_UNITS: Mapping[str, float] = MappingProxyType({"g": 1, "ml": 1, "l": 1000})

FUZZY_UNITS: tuple[str, ...] = ("cup", "tbsp", "tsp", "plate", "fist", "piece")

# ── generic defaults, per food type ──────────────────────────────────
DEFAULT_CONVERSIONS: Mapping[FoodType, Mapping[str, float]] = MappingProxyType({
    FoodType.liquid: MappingProxyType({
        "cup": 240, "tbsp": 15, "tsp": 5,       # true liquid volumes (ml)
        "plate": 200, "fist": 80, "piece": 50,
    }),
    FoodType.solid: MappingProxyType({
        "cup": 200, "tbsp": 12, "tsp": 4,       # weight approximations (g)
        "plate": 200, "fist": 80, "piece": 50,
    }),
})


@dataclass(frozen=True)
class ResolvedServing:
    quantity: float
    unit: str
    amount: float      # grams for solids, ml for liquids
    source: str        # exact | custom | keyword | default

    @property
    def ratio(self) -> float:
        return self.amount / NUTRITION_BASIS


def _unit_token(unit: str | ServingUnit) -> str:
    if isinstance(unit, ServingUnit):
        return unit.value
    return str(unit).strip().lower()


class UnitConversionResolver:
    """Resolves a serving to base-unit grams/ml. Holds no state between calls."""

    def __init__(
        self,
        defaults: Mapping[FoodType, Mapping[str, float]] = DEFAULT_CONVERSIONS,
    ) -> None:
        self._defaults = defaults

    # --------------- public entrypoint --------------------------------
    def resolve(
        self, food: Food, quantity: float, unit: str | ServingUnit
    ) -> ResolvedServing:
        if isinstance(quantity, bool) or not math.isfinite(quantity) or quantity <= 0:
            raise InvalidServingError(quantity)

        token = _unit_token(unit)
        if token in EXACT_UNITS:
            return ResolvedServing(quantity, token, quantity * EXACT_UNITS[token], "exact")

        if token not in FUZZY_UNITS:
            raise UnsupportedUnitError(token, food.id)

        if food.available_units and token not in {u.value for u in food.available_units}:
            _LOG.debug("unit %s not listed for food %s – resolving anyway", token, food.id)

        per_unit, source = self.per_unit_amount(food, token)
        return ResolvedServing(quantity, token, quantity * per_unit, source)

    def resolve_ratio(self, food: Food, quantity: float, unit: str | ServingUnit) -> float:
        return self.resolve(food, quantity, unit).ratio

    # --------------- tiers --------------------------------------------
    def per_unit_amount(self, food: Food, unit: str) -> tuple[float, str]:
        """Base-unit amount for ONE fuzzy unit of `food`, plus the tier used."""
        if food.custom_conversions is not None:
            custom = getattr(food.custom_conversions, unit, None)
            if custom is not None:
                return float(custom), "custom"

        table = keyword_conversions(food.name)
        if table is not None:
            specific = table.get(unit)
            if specific is not None:
                return float(specific), "keyword"

        default = self._defaults.get(food.food_type, {}).get(unit)
        if default is None:
            raise UnsupportedUnitError(unit, food.id)
        return float(default), "default"


resolver = UnitConversionResolver()
