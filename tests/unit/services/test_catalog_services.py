"""Sensor, habit and configuration services."""

import pytest

from app.domain.exceptions import ConflictError, NotFoundError, ValidationError


@pytest.fixture()
def habit_service(habit_repo, user_repo):
    from app.services.application.habit_service import HabitService

    return HabitService(repository=habit_repo, user_repo=user_repo)


# --- Sensors -------------------------------------------------------------------


def test_create_sensor_validates_parents(sensor_service):
    with pytest.raises(ValidationError) as excinfo:
        sensor_service.create_sensor(device_id=404, sensor_type_id=404, value=1)
    assert set(excinfo.value.errors) == {"device_id", "sensor_type_id"}


def test_toggle_sensor(sensor_service, seed):
    sensor_id = seed.create_sensor(seed.create_device(seed.create_user()))
    assert sensor_service.toggle_sensor(sensor_id)["active"] == 0
    assert sensor_service.toggle_sensor(sensor_id)["active"] == 1
    with pytest.raises(NotFoundError):
        sensor_service.toggle_sensor(404)


def test_sensor_type_names_are_unique(sensor_service):
    with pytest.raises(ConflictError):
        sensor_service.create_type(name="Peso", unit="kg")

    created = sensor_service.create_type(name="Glucosa", unit="mg/dL")
    with pytest.raises(ConflictError):
        sensor_service.update_type(created["id"], {"name": "Ritmo"})


def test_sensor_type_in_use_is_a_conflict(sensor_service, seed):
    seed.create_sensor(seed.create_device(seed.create_user()), "Ritmo")
    ritmo = sensor_service.get_type_by_name("Ritmo")
    with pytest.raises(ConflictError):
        sensor_service.delete_type(ritmo["id"])


def test_sensor_type_partial_update(sensor_service):
    ritmo = sensor_service.get_type_by_name("Ritmo")
    updated = sensor_service.update_type(ritmo["id"], {"unit": "lpm"})
    assert updated["name"] == "Ritmo"
    assert updated["unit"] == "lpm"


# --- Habits --------------------------------------------------------------------


def test_habit_crud(habit_service, seed):
    user_id = seed.create_user()
    habit = habit_service.create_habit(name="Walk", description="Daily walk", user_id=user_id)
    assert habit["user_id"] == user_id

    updated = habit_service.update_habit(habit["id"], {"name": "Run"})
    assert updated["description"] == "Daily walk"

    assert habit_service.delete_habit(habit["id"])["name"] == "Run"
    with pytest.raises(NotFoundError):
        habit_service.delete_habit(habit["id"])


def test_habit_owner_must_exist(habit_service):
    with pytest.raises(ValidationError) as excinfo:
        habit_service.create_habit(name="Walk", description="Daily walk", user_id=404)
    assert "user_id" in excinfo.value.errors


# --- Configurations ------------------------------------------------------------


def test_configuration_is_expanded_with_user_and_type(configuration_service, configuration_repo, seed):
    user_id = seed.create_user()
    type_id = configuration_repo.get_type_by_name("alarma_pasos")["id"]

    created = configuration_service.create_configuration(user_id=user_id, configuration_type_id=type_id, data="5000")

    assert created["configuration_type"]["name"] == "alarma_pasos"
    assert created["user"]["id"] == user_id
    assert "password_hash" not in created["user"]


def test_configuration_parents_must_exist(configuration_service):
    with pytest.raises(ValidationError) as excinfo:
        configuration_service.create_configuration(user_id=404, configuration_type_id=404, data="1")
    assert set(excinfo.value.errors) == {"user_id", "configuration_type_id"}


def test_list_user_configurations_for_missing_user(configuration_service):
    with pytest.raises(NotFoundError):
        configuration_service.list_user_configurations(404)


def test_find_user_goal(configuration_service, seed):
    user_id = seed.create_user()
    seed.create_goal(user_id, "alarma_pasos", "8000")
    assert configuration_service.find_user_goal(user_id, "alarma_pasos")["data"] == "8000"
    with pytest.raises(NotFoundError):
        configuration_service.find_user_goal(user_id, "alarma_distancia")


def test_configuration_type_in_use_is_a_conflict(configuration_service, seed):
    user_id = seed.create_user()
    seed.create_goal(user_id, "alarma_pasos", "8000")
    type_id = next(t["id"] for t in configuration_service.list_types() if t["name"] == "alarma_pasos")
    with pytest.raises(ConflictError):
        configuration_service.delete_type(type_id)
