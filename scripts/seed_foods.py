"""
Seed demo foods plus one meal built from them into the document store.

Usage
-----

    # default hard-coded foods + "Chicken & Rice Plate"
    python -m scripts.seed_foods

    # custom food list (FoodIn schema) in a JSON file, no demo meal
    python -m scripts.seed_foods --file path/to/foods.json
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, List

from dotenv import load_dotenv
load_dotenv()

from core.models import FoodIn, MealIn  # noqa: E402
from services.db import init_models, session_scope  # noqa: E402
from services.store import FoodStore, MealStore  # noqa: E402

# ────────────────────────────────────────────────────────────────────
_DEFAULT_FOODS: List[dict[str, Any]] = [
    {
        "name": "White Rice (cooked)",
        "arabic_name": "أرز أبيض",
        "category": "grains",
        "food_type": "solid",
        "nutrition_per100": {"calories": 130, "protein": 2.7, "carbs": 28.2, "fat": 0.3, "fiber": 0.4},
    },
    {
        "name": "Grilled Chicken Breast",
        "category": "proteins",
        "food_type": "solid",
        "nutrition_per100": {"calories": 165, "protein": 31, "carbs": 0, "fat": 3.6, "sodium": 74},
        "custom_conversions": {"piece": 170},
    },
    {
        "name": "Whole Milk",
        "category": "dairy",
        "food_type": "liquid",
        "available_units": ["ml", "l", "cup", "tbsp", "tsp"],
        "nutrition_per100": {"calories": 61, "protein": 3.2, "carbs": 4.8, "fat": 3.3, "sugar": 5.1, "calcium": 113},
    },
    {
        "name": "Cucumber Salad",
        "category": "vegetables",
        "food_type": "solid",
        "nutrition_per100": {"calories": 16, "protein": 0.7, "carbs": 3.6, "fat": 0.1},
    },
]


async def _seed(foods: list[dict[str, Any]], with_meal: bool) -> None:
    await init_models()
    async with session_scope() as db:
        store = FoodStore(db)
        created = [await store.create(FoodIn.model_validate(f)) for f in foods]
        print(f"✓ inserted {len(created)} foods")

        if not with_meal:
            return

        rice, chicken, _, salad = created
        meal, nutrition = await MealStore(db).create(
            MealIn(
                name="Chicken & Rice Plate",
                meal_type=["lunch", "dinner"],
                foods=[
                    {"food_id": chicken.id, "base_portion": 150, "role": "protein_primary"},
                    {"food_id": rice.id, "base_portion": 200, "role": "carb_primary",
                     "allowed_portions": [150, 250]},
                    {"food_id": salad.id, "base_portion": 80, "role": "vegetable"},
                ],
                cultural=["arabic", "kurdish"],
                tags=["high-protein"],
            )
        )
    t = nutrition.totals
    print(f"✓ inserted meal {meal.id}: {t.calories} kcal, P {t.protein} g, C {t.carbs} g, F {t.fat} g")


def _load_json(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text())
    if not isinstance(data, list):
        raise ValueError("JSON file must contain a list of food dictionaries")
    return data


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--file",
        type=Path,
        help="optional JSON file with foods to seed (overrides defaults)",
    )
    args = parser.parse_args()

    foods = _load_json(args.file) if args.file else _DEFAULT_FOODS
    asyncio.run(_seed(foods, with_meal=args.file is None))


if __name__ == "__main__":
    main()
