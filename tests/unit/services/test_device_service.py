"""DeviceService: CRUD, device types and provisioning."""

import pytest

from app.domain.exceptions import BadRequestError, ConflictError, NotFoundError, ServiceError, ValidationError


def test_provision_bracelet_creates_its_sensor_set(device_service, seed):
    user_id = seed.create_user()

    device = device_service.provision(user_id=user_id, category="brazalete", name="My band")

    assert device["user_id"] == user_id
    assert device["device_type"]["name"] == "brazalete"
    names = [sensor["sensor_type"]["name"] for sensor in device["sensors"]]
    assert names == ["Pantalla", "Ritmo", "Temperatura", "Alcohol", "Distancia", "Pasos"]
    assert all(sensor["value"] == 5 and sensor["active"] == 1 for sensor in device["sensors"])


def test_provision_scale_creates_weight_sensor(device_service, seed):
    device = device_service.provision(user_id=seed.create_user(), category="pesa", name="Scale")

    assert [s["sensor_type"]["name"] for s in device["sensors"]] == ["Peso"]
    assert device["sensors"][0]["value"] == 1


def test_provision_rejects_unknown_category(device_service, seed):
    with pytest.raises(BadRequestError) as excinfo:
        device_service.provision(user_id=seed.create_user(), category="reloj", name="Watch")
    assert "category" in excinfo.value.errors
    assert seed.count("devices") == 0


def test_provision_caps_one_device_per_category(device_service, seed):
    user_id = seed.create_user()
    device_service.provision(user_id=user_id, category="pesa", name="Scale")

    with pytest.raises(BadRequestError):
        device_service.provision(user_id=user_id, category="pesa", name="Second scale")

    # Another category is still allowed.
    device_service.provision(user_id=user_id, category="brazalete", name="Band")
    assert seed.count("devices") == 2


def test_provision_creates_missing_device_type(device_service, device_repo, db_handler, seed):
    user_id = seed.create_user()
    with db_handler.connection() as conn:
        conn.execute("DELETE FROM device_types WHERE name = 'pesa'")

    device = device_service.provision(user_id=user_id, category="pesa", name="Scale")

    assert device_repo.get_type_by_name("pesa")["id"] == device["device_type_id"]


def test_provision_is_all_or_nothing_when_a_sensor_type_is_missing(
    device_service, device_repo, db_handler, seed, mock_audit_logger
):
    user_id = seed.create_user()
    with db_handler.connection() as conn:
        conn.execute("DELETE FROM sensor_types WHERE name = 'Pasos'")
        conn.execute("DELETE FROM device_types WHERE name = 'brazalete'")

    with pytest.raises(ServiceError):
        device_service.provision(user_id=user_id, category="brazalete", name="Band")

    assert seed.count("devices") == 0
    assert seed.count("sensors") == 0
    assert device_repo.get_type_by_name("brazalete") is None
    assert not any(call.kwargs.get("outcome") == "success" for call in mock_audit_logger.log_event.call_args_list)


def test_ensure_type_is_idempotent(device_service):
    first, created = device_service.ensure_type("pesa")
    again, created_again = device_service.ensure_type("pesa")
    assert created is False
    assert created_again is False
    assert first == again

    with pytest.raises(BadRequestError):
        device_service.ensure_type("tostadora")


def test_create_device_validates_parents(device_service):
    with pytest.raises(ValidationError) as excinfo:
        device_service.create_device(user_id=404, device_type_id=404, name="Ghost")
    assert set(excinfo.value.errors) == {"user_id", "device_type_id"}


def test_update_and_delete_device(device_service, seed):
    device_id = seed.create_device(seed.create_user(), "pesa", name="Scale")
    seed.create_sensor(device_id, "Peso")

    assert device_service.update_device(device_id, {})["name"] == "Scale"
    assert device_service.update_device(device_id, {"name": "Kitchen scale"})["name"] == "Kitchen scale"

    deleted = device_service.delete_device(device_id)
    assert len(deleted["sensors"]) == 1
    assert seed.count("sensors") == 0
    with pytest.raises(NotFoundError):
        device_service.get_device(device_id)


def test_update_type_keeps_names_to_known_categories(device_service, device_repo, db_handler):
    pesa = device_repo.get_type_by_name("pesa")

    with pytest.raises(ConflictError):
        device_service.update_type(pesa["id"], {"name": "brazalete"})
    with pytest.raises(BadRequestError):
        device_service.update_type(pesa["id"], {"name": "tostadora"})
    assert device_service.update_type(pesa["id"], {}) == pesa

    with db_handler.connection() as conn:
        conn.execute("DELETE FROM device_types WHERE name = 'brazalete'")
    renamed = device_service.update_type(pesa["id"], {"name": "brazalete"})
    assert renamed["id"] == pesa["id"]
    assert renamed["name"] == "brazalete"


def test_delete_type_refuses_while_devices_use_it(device_service, device_repo, seed):
    device_id = seed.create_device(seed.create_user(), "pesa", name="Scale")
    pesa = device_repo.get_type_by_name("pesa")

    with pytest.raises(ConflictError):
        device_service.delete_type(pesa["id"])

    device_service.delete_device(device_id)
    assert device_service.delete_type(pesa["id"])["name"] == "pesa"
    assert device_repo.get_type_by_name("pesa") is None
    with pytest.raises(NotFoundError):
        device_service.delete_type(pesa["id"])
