#!/usr/bin/env python3
"""
Re-derive base nutrition for stored meals from their current foods.
Reports meals whose food list points at deleted foods.

Usage:
    python -m scripts.recompute_meals            # every meal
    python -m scripts.recompute_meals <meal_id>  # one meal
"""
import sys
import asyncio

from dotenv import load_dotenv
load_dotenv()

from services.db import session_scope  # noqa: E402
from services.store import MealStore  # noqa: E402


async def recompute_meals(meal_id: str | None = None) -> None:
    async with session_scope() as db:
        store = MealStore(db)
        ids = [meal_id] if meal_id else [m.id for m in await store.list()]
        if not ids:
            print("No meals found")
            return

        dangling = 0
        for mid in ids:
            saved = await store.recompute(mid)
            if saved is None:
                print(f"Meal {mid} not found")
                continue
            meal, nutrition = saved
            if nutrition.missing_food_ids:
                dangling += 1
                print(f"⚠ {meal.id} ({meal.name}): missing foods {', '.join(nutrition.missing_food_ids)}")

        print(f"✓ recomputed {len(ids)} meal(s), {dangling} with dangling food references")


def main():
    if len(sys.argv) > 2:
        print("Usage: python -m scripts.recompute_meals [meal_id]")
        sys.exit(1)

    asyncio.run(recompute_meals(sys.argv[1] if len(sys.argv) == 2 else None))


if __name__ == "__main__":
    main()
