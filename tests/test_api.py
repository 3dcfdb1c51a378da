# tests/test_api.py
"""
HTTP round-trips against a throw-away SQLite file (aiosqlite).
The `get_session` dependency is swapped for one bound to that file.
"""
from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from main import app
from services.db import get_session, init_models
from services.store import FoodStore

RICE = {
    "name": "Cooked white rice",
    "category": "grains",
    "food_type": "solid",
    "nutrition_per100": {"calories": 205, "protein": 4.3, "carbs": 45, "fat": 0.4},
}
BROTH = {
    "name": "Vegetable broth",
    "category": "beverages",
    "food_type": "liquid",
    "nutrition_per100": {"calories": 100},
}


@pytest.fixture()
def maker(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(init_models(eng))
    yield async_sessionmaker(eng, expire_on_commit=False)
    asyncio.run(eng.dispose())


@pytest.fixture()
def client(maker):
    async def _session():
        async with maker() as session:
            yield session

    app.dependency_overrides[get_session] = _session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create(client: TestClient, body: dict) -> str:
    r = client.post("/api/v1/foods", json=body)
    assert r.status_code == 201, r.text
    return r.json()["id"]


def _meal(food_ids: list[tuple[str, float]]) -> dict:
    return {
        "name": "Rice & broth",
        "meal_type": ["lunch"],
        "foods": [
            {"food_id": fid, "base_portion": portion, "role": "filler"}
            for fid, portion in food_ids
        ],
        "min_scale": 0.5,
        "max_scale": 2.5,
        # ignored: derived on save
        "base_calories": 9999,
    }


# ── foods ────────────────────────────────────────────────────────────
def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_food_crud(client):
    food_id = _create(client, RICE)
    assert food_id.startswith("food_")

    r = client.get(f"/api/v1/foods/{food_id}")
    assert r.status_code == 200
    assert r.json()["nutrition_per100"]["calories"] == 205

    assert [f["id"] for f in client.get("/api/v1/foods?category=grains").json()] == [food_id]
    assert client.get("/api/v1/foods?category=dairy").json() == []

    r = client.patch(f"/api/v1/foods/{food_id}", json={"brand": "Acme"})
    assert r.status_code == 200
    assert r.json()["food"]["brand"] == "Acme"
    assert r.json()["recomputed_meals"] == []

    r = client.delete(f"/api/v1/foods/{food_id}")
    assert r.status_code == 200
    assert r.json() == {"food_id": food_id, "recomputed_meals": []}
    assert client.get(f"/api/v1/foods/{food_id}").status_code == 404


def test_negative_calories_rejected(client):
    body = {**RICE, "nutrition_per100": {"calories": -5}}
    assert client.post("/api/v1/foods", json=body).status_code == 422


def test_serving_preview(client):
    food_id = _create(client, RICE)

    r = client.get(f"/api/v1/foods/{food_id}/nutrition", params={"quantity": 150, "unit": "g"})
    assert r.status_code == 200
    body = r.json()
    assert body["ratio"] == 1.5
    assert body["source"] == "exact"
    assert body["nutrition"] == {"calories": 308, "protein": 6.5, "carbs": 67.5, "fat": 0.6}

    r = client.get(f"/api/v1/foods/{food_id}/nutrition", params={"quantity": 1, "unit": "cup"})
    assert r.json()["amount"] == 185
    assert r.json()["nutrition"]["calories"] == 379


def test_serving_preview_errors(client):
    food_id = _create(client, RICE)
    url = f"/api/v1/foods/{food_id}/nutrition"
    assert client.get(url, params={"quantity": 0, "unit": "g"}).status_code == 422
    assert client.get(url, params={"quantity": 1, "unit": "oz"}).status_code == 422
    assert client.get("/api/v1/foods/nope/nutrition", params={"quantity": 1}).status_code == 404


def test_conversion_suggestions(client):
    r = client.get("/api/v1/foods/conversions/suggest", params={"name": "Large egg"})
    assert r.status_code == 200
    body = r.json()
    assert body["keyword"] == "egg"
    assert body["conversions"] == {"cup": None, "plate": None, "piece": 50}
    assert body["piece_sizes"]["piece_large"] == 60


# ── meals ────────────────────────────────────────────────────────────
def test_meal_nutrition_is_derived_on_create(client):
    rice = _create(client, RICE)
    broth = _create(client, BROTH)

    r = client.post("/api/v1/meals", json=_meal([(rice, 100), (broth, 50)]))
    assert r.status_code == 201, r.text
    meal = r.json()["meal"]
    assert meal["base_calories"] == 255
    assert meal["base_protein"] == 4.3
    assert r.json()["missing_food_ids"] == []


def test_meal_with_dangling_food_still_saves(client):
    rice = _create(client, RICE)
    r = client.post("/api/v1/meals", json=_meal([(rice, 100), ("food_gone", 50)]))
    assert r.status_code == 201
    assert r.json()["meal"]["base_calories"] == 205
    assert r.json()["missing_food_ids"] == ["food_gone"]


def test_food_edit_recomputes_referencing_meals(client):
    rice = _create(client, RICE)
    broth = _create(client, BROTH)
    meal_id = client.post("/api/v1/meals", json=_meal([(rice, 100), (broth, 50)])).json()["meal"]["id"]

    r = client.patch(f"/api/v1/foods/{broth}", json={"nutrition_per100": {"calories": 200}})
    assert r.json()["recomputed_meals"] == [meal_id]
    assert client.get(f"/api/v1/meals/{meal_id}").json()["base_calories"] == 305


def test_meal_patch_recomputes_when_foods_change(client):
    rice = _create(client, RICE)
    meal_id = client.post("/api/v1/meals", json=_meal([(rice, 100)])).json()["meal"]["id"]

    r = client.patch(
        f"/api/v1/meals/{meal_id}",
        json={"foods": [{"food_id": rice, "base_portion": 200, "role": "carb_primary"}]},
    )
    assert r.status_code == 200
    assert r.json()["meal"]["base_calories"] == 410

    r = client.patch(f"/api/v1/meals/{meal_id}", json={"tags": ["quick"]})
    assert r.json()["meal"]["base_calories"] == 410
    assert r.json()["meal"]["tags"] == ["quick"]


def test_food_delete_recomputes_referencing_meals(client):
    rice = _create(client, RICE)
    broth = _create(client, BROTH)
    meal_id = client.post("/api/v1/meals", json=_meal([(rice, 100), (broth, 50)])).json()["meal"]["id"]
    r = client.delete(f"/api/v1/foods/{broth}")
    assert r.json()["recomputed_meals"] == [meal_id]

    r = client.get(f"/api/v1/meals/{meal_id}/nutrition")
    assert r.status_code == 200
    body = r.json()
    assert body["calories"] == 205
    assert body["missing_food_ids"] == [broth]
    assert [c["food_id"] for c in body["contributions"]] == [rice]

    assert client.get(f"/api/v1/meals/{meal_id}").json()["base_calories"] == 205
    r = client.post(f"/api/v1/meals/{meal_id}/recompute")
    assert r.json()["meal"]["base_calories"] == 205
    assert r.json()["missing_food_ids"] == [broth]


def test_scaled_meal_nutrition(client):
    rice = _create(client, RICE)
    meal_id = client.post("/api/v1/meals", json=_meal([(rice, 100)])).json()["meal"]["id"]
    url = f"/api/v1/meals/{meal_id}/nutrition"

    assert client.get(url, params={"scale": 2}).json()["calories"] == 410
    assert client.get(url, params={"scale": 3}).status_code == 422


def test_meal_delete(client):
    rice = _create(client, RICE)
    meal_id = client.post("/api/v1/meals", json=_meal([(rice, 100)])).json()["meal"]["id"]
    assert client.delete(f"/api/v1/meals/{meal_id}").status_code == 204
    assert client.get(f"/api/v1/meals/{meal_id}").status_code == 404
    assert client.delete(f"/api/v1/meals/{meal_id}").status_code == 404


# ── partial updates ──────────────────────────────────────────────────
@pytest.mark.parametrize("field", ["name", "category", "food_type", "nutrition_per100"])
def test_food_patch_rejects_null_for_required_field(client, field):
    food_id = _create(client, RICE)

    r = client.patch(f"/api/v1/foods/{food_id}", json={field: None})
    assert r.status_code == 422

    # row unchanged, catalogue still readable
    assert client.get(f"/api/v1/foods/{food_id}").json()["nutrition_per100"]["calories"] == 205
    assert [f["id"] for f in client.get("/api/v1/foods").json()] == [food_id]


def test_food_patch_clears_nullable_field(client):
    food_id = _create(client, {**RICE, "brand": "Acme"})
    r = client.patch(f"/api/v1/foods/{food_id}", json={"brand": None})
    assert r.status_code == 200
    assert r.json()["food"]["brand"] is None


@pytest.mark.parametrize("field", ["name", "meal_type", "foods", "min_scale", "tags", "is_active"])
def test_meal_patch_rejects_null_for_required_field(client, field):
    rice = _create(client, RICE)
    meal_id = client.post("/api/v1/meals", json=_meal([(rice, 100)])).json()["meal"]["id"]

    r = client.patch(f"/api/v1/meals/{meal_id}", json={field: None})
    assert r.status_code == 422

    meal = client.get(f"/api/v1/meals/{meal_id}").json()
    assert meal["base_calories"] == 205
    assert [f["food_id"] for f in meal["foods"]] == [rice]
    assert client.get(f"/api/v1/meals/{meal_id}/nutrition").status_code == 200


def test_store_update_validates_before_writing(maker, client):
    food_id = _create(client, RICE)

    async def _patch_then_read():
        async with maker() as db:
            with pytest.raises(ValidationError):
                await FoodStore(db).update(food_id, {"nutrition_per100": None})
        async with maker() as db:
            return await FoodStore(db).get(food_id)

    food = asyncio.run(_patch_then_read())
    assert food.nutrition_per100.calories == 205
