"""FoodService against a stubbed nutrition API."""

import pytest
import requests

from app.domain.exceptions import BadRequestError, ExternalServiceError, NotFoundError

NUTRITION = "http://nutrition.test/api"


def test_search_sends_credentials_and_name(food_service, nutrition_stub):
    nutrition_stub.add(
        "GET",
        f"{NUTRITION}/food-database/v2/parser",
        {"text": "apple", "hints": [{"food": {"label": "Apple"}}]},
    )

    data = food_service.search(" apple ")

    assert data["hints"][0]["food"]["label"] == "Apple"
    params = nutrition_stub.calls[0].kwargs["params"]
    assert params == {"app_id": "search-id", "app_key": "search-key", "ingr": "apple"}


@pytest.mark.parametrize("name", [None, "", "   "])
def test_search_requires_a_name(food_service, nutrition_stub, name):
    with pytest.raises(BadRequestError):
        food_service.search(name)
    assert not nutrition_stub.calls


def test_search_without_hints_is_not_found(food_service, nutrition_stub):
    nutrition_stub.add("GET", f"{NUTRITION}/food-database/v2/parser", {"hints": []})
    with pytest.raises(NotFoundError):
        food_service.search("xyzzy")


def test_nutrition_measures_ingredients_in_weight_unit(food_service, nutrition_stub):
    nutrition_stub.add("POST", f"{NUTRITION}/nutrition-details", {"calories": 130})

    data = food_service.nutrition(["100 rice", "50 chicken"], title="Lunch")

    assert data == {"calories": 130}
    call = nutrition_stub.calls[0]
    assert call.kwargs["params"] == {"app_id": "analysis-id", "app_key": "analysis-key"}
    assert call.kwargs["json"] == {"ingr": ["100 rice gr", "50 chicken gr"], "title": "Lunch"}


def test_nutrition_without_weight_sensor_type(food_service, db_handler):
    with db_handler.connection() as conn:
        conn.execute("DELETE FROM sensor_types WHERE name = 'Peso'")
    with pytest.raises(BadRequestError):
        food_service.nutrition(["100 rice"])


def test_nutrition_upstream_failure(food_service, nutrition_stub):
    nutrition_stub.add("POST", f"{NUTRITION}/nutrition-details", {"error": "low_quality"}, status=500)
    with pytest.raises(ExternalServiceError) as excinfo:
        food_service.nutrition(["100 rice"])
    assert excinfo.value.detail == {"status": 500}


def test_nutrition_unreachable(food_service, nutrition_stub):
    nutrition_stub.add(
        "POST",
        f"{NUTRITION}/nutrition-details",
        error=requests.exceptions.ConnectionError("refused"),
    )
    with pytest.raises(ExternalServiceError):
        food_service.nutrition(["100 rice"])
