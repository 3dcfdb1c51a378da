"""Errors raised by the conversion and aggregation core."""

from __future__ import annotations


class NutritionError(ValueError):
    """Base class for caller-visible conversion/aggregation failures."""


class InvalidServingError(NutritionError):
    def __init__(self, quantity: float) -> None:
        super().__init__(f"serving quantity must be a positive number, got {quantity!r}")
        self.quantity = quantity


class UnsupportedUnitError(NutritionError):
    """Unit not resolvable for this food."""

    def __init__(self, unit: str, food_id: str | None = None) -> None:
        where = f" for food {food_id}" if food_id else ""
        super().__init__(f"unit {unit!r} not resolvable{where}")
        self.unit = unit
        self.food_id = food_id


class ScaleOutOfRangeError(NutritionError):
    def __init__(self, scale: float, min_scale: float, max_scale: float) -> None:
        super().__init__(
            f"scale {scale} outside allowed range {min_scale}–{max_scale}"
        )
        self.scale = scale
        self.min_scale = min_scale
        self.max_scale = max_scale


class PortionNotAllowedError(NutritionError):
    def __init__(self, food_id: str, grams: float, allowed: list[float]) -> None:
        super().__init__(
            f"portion {grams}g not allowed for food {food_id}; choose one of {allowed}"
        )
        self.food_id = food_id
        self.grams = grams
        self.allowed = allowed
