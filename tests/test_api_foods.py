"""Foods API against a stubbed nutrition service."""

from __future__ import annotations

from conftest import NUTRITION_URL


def test_search(client, auth, app_nutrition):
    app_nutrition.add(
        "GET",
        f"{NUTRITION_URL}/food-database/v2/parser",
        {"text": "apple", "hints": [{"food": {"label": "Apple"}}]},
    )
    response = client.get("/api/v1/foods/search?name=apple", headers=auth["headers"])
    assert response.status_code == 200
    assert response.get_json()["data"]["hints"][0]["food"]["label"] == "Apple"


def test_search_requires_name(client, auth):
    response = client.get("/api/v1/foods/search", headers=auth["headers"])
    assert response.status_code == 400
    assert "name" in response.get_json()["errors"]


def test_search_nothing_found(client, auth, app_nutrition):
    app_nutrition.add("GET", f"{NUTRITION_URL}/food-database/v2/parser", {"hints": []})
    assert client.get("/api/v1/foods/search?name=xyzzy", headers=auth["headers"]).status_code == 404


def test_nutrition(client, auth, app_nutrition):
    app_nutrition.add("POST", f"{NUTRITION_URL}/nutrition-details", {"calories": 130})
    response = client.post(
        "/api/v1/foods/nutrition",
        json={"ingredients": ["100 rice"]},
        headers=auth["headers"],
    )
    assert response.status_code == 200
    assert response.get_json()["data"] == {"calories": 130}
    assert app_nutrition.calls[0].kwargs["json"]["ingr"] == ["100 rice gr"]


def test_nutrition_validation(client, auth):
    response = client.post("/api/v1/foods/nutrition", json={"ingredients": []}, headers=auth["headers"])
    assert response.status_code == 422


def test_nutrition_upstream_failure(client, auth, app_nutrition):
    app_nutrition.add("POST", f"{NUTRITION_URL}/nutrition-details", status=555)
    response = client.post("/api/v1/foods/nutrition", json={"ingredients": ["1 egg"]}, headers=auth["headers"])
    assert response.status_code == 502


def test_foods_require_authentication(client):
    assert client.get("/api/v1/foods/search?name=apple").status_code == 401
