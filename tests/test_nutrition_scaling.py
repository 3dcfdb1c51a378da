# tests/test_nutrition_scaling.py
from __future__ import annotations

from datetime import datetime

import pytest

from core.models import Food, NutritionPer100
from core.nutrition_scaling import OPTIONAL_NUTRIENTS, nutrition_for_serving, scale_nutrition

_NOW = datetime(2024, 1, 1)

RICE_PER100 = NutritionPer100(calories=205, protein=4.3, carbs=45, fat=0.4)

COOKED_RICE = Food(
    id="food_rice",
    name="Cooked white rice",
    category="grains",
    food_type="solid",
    nutrition_per100=RICE_PER100,
    created_at=_NOW,
    updated_at=_NOW,
)

MILK = Food(
    id="food_milk",
    name="Whole milk",
    category="dairy",
    food_type="liquid",
    nutrition_per100=NutritionPer100(calories=61, protein=3.2, carbs=4.8, fat=3.3, calcium=113),
    created_at=_NOW,
    updated_at=_NOW,
)


# ── concrete servings ────────────────────────────────────────────────
def test_150g_serving():
    out = nutrition_for_serving(COOKED_RICE, 150, "g")
    assert out.serving.ratio == 1.5
    n = out.nutrition
    assert (n.calories, n.protein, n.carbs, n.fat) == (308, 6.5, 67.5, 0.6)


def test_one_cup_uses_rice_keyword_table():
    out = nutrition_for_serving(COOKED_RICE, 1, "cup")
    assert out.serving.amount == 185
    assert out.nutrition.calories == 379          # round(205 × 1.85)
    assert out.nutrition.protein == 8.0           # 7.955
    assert out.nutrition.carbs == 83.3            # 83.25
    assert out.nutrition.fat == 0.7


def test_tablespoon_of_liquid():
    out = nutrition_for_serving(MILK, 2, "tbsp")
    assert out.serving.amount == 30
    assert out.nutrition.calories == 18           # 18.3
    assert out.nutrition.calcium == 33.9


# ── shape & rounding ─────────────────────────────────────────────────
@pytest.mark.parametrize("ratio", [0.0, 0.37, 1.0, 1.85, 2.5, 33.3])
def test_rounding_law(ratio):
    n = scale_nutrition(MILK.nutrition_per100, ratio)
    assert isinstance(n.calories, int)
    for name in OPTIONAL_NUTRIENTS:
        value = getattr(n, name)
        if value is not None:
            assert round(value, 1) == value


@pytest.mark.parametrize("ratio", [0.0, 1.0, 2.5])
def test_absent_nutrients_stay_absent(ratio):
    n = scale_nutrition(RICE_PER100, ratio)
    assert n.sugar is None
    assert n.fiber is None
    assert n.calcium is None


def test_zero_valued_nutrient_is_kept_as_zero():
    n = scale_nutrition(NutritionPer100(calories=0, protein=0), 3)
    assert n.protein == 0.0
    assert n.carbs is None


def test_zero_ratio():
    n = scale_nutrition(RICE_PER100, 0)
    assert (n.calories, n.protein, n.carbs, n.fat) == (0, 0.0, 0.0, 0.0)


def test_no_upper_bound_on_ratio():
    out = nutrition_for_serving(COOKED_RICE, 10, "cup")
    assert out.nutrition.calories == 3793        # 205 × 18.5 = 3792.5


def test_negative_ratio_rejected():
    with pytest.raises(ValueError):
        scale_nutrition(RICE_PER100, -0.1)


def test_scaling_is_pure():
    a = scale_nutrition(RICE_PER100, 1.85)
    b = scale_nutrition(RICE_PER100, 1.85)
    assert a == b
    assert RICE_PER100.calories == 205


def test_negative_nutrition_rejected_at_schema_boundary():
    with pytest.raises(ValueError):
        NutritionPer100(calories=-1)
