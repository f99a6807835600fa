"""Devices, provisioning, sensors and type endpoints."""

from __future__ import annotations


def _provision(client, auth, category="brazalete", name="My band"):
    return client.post(
        "/api/v1/devices/provision",
        json={"category": category, "name": name},
        headers=auth["headers"],
    )


def test_provision_bracelet(client, auth):
    response = _provision(client, auth)
    assert response.status_code == 201
    device = response.get_json()["data"]
    assert device["user_id"] == auth["user_id"]
    assert device["device_type"]["name"] == "brazalete"
    assert len(device["sensors"]) == 6
    assert {s["sensor_type"]["name"] for s in device["sensors"]} == {
        "Pantalla",
        "Ritmo",
        "Temperatura",
        "Alcohol",
        "Distancia",
        "Pasos",
    }


def test_provision_cap_and_unknown_category(client, auth):
    assert _provision(client, auth, "pesa", "Scale").status_code == 201
    again = _provision(client, auth, "pesa", "Scale 2")
    assert again.status_code == 400
    assert again.get_json()["type"] == "error"

    assert _provision(client, auth, "reloj", "Watch").status_code == 400


def test_provision_requires_authentication(client):
    response = client.post("/api/v1/devices/provision", json={"category": "pesa", "name": "Scale"})
    assert response.status_code == 401


def test_provision_missing_sensor_type_leaves_nothing(client, auth, container):
    with container.database.connection() as conn:
        conn.execute("DELETE FROM sensor_types WHERE name = 'Peso'")

    response = _provision(client, auth, "pesa", "Scale")

    assert response.status_code == 500
    body = response.get_json()
    assert body["message"] == "An internal error occurred"
    assert "Peso" not in body["message"]
    assert container.device_repo.list_devices() == []


def test_device_crud(client, auth):
    headers = auth["headers"]
    types = client.get("/api/v1/device-types/", headers=headers).get_json()["data"]
    pesa = next(t for t in types if t["name"] == "pesa")

    created = client.post(
        "/api/v1/devices/",
        json={"user_id": auth["user_id"], "device_type_id": pesa["id"], "name": "Scale"},
        headers=headers,
    )
    assert created.status_code == 201
    device_id = created.get_json()["data"]["id"]

    listed = client.get("/api/v1/devices/", headers=headers).get_json()["data"]
    assert listed[0]["sensors"] == []

    renamed = client.put(f"/api/v1/devices/{device_id}", json={"name": "Kitchen scale"}, headers=headers)
    assert renamed.get_json()["data"]["name"] == "Kitchen scale"

    assert client.delete(f"/api/v1/devices/{device_id}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/devices/{device_id}", headers=headers).status_code == 404


def test_device_type_create_is_idempotent_and_literal(client, auth):
    headers = auth["headers"]
    existing = client.post("/api/v1/device-types/", json={"name": "pesa"}, headers=headers)
    assert existing.status_code == 200
    assert existing.get_json()["data"]["name"] == "pesa"

    assert client.post("/api/v1/device-types/", json={"name": "tostadora"}, headers=headers).status_code == 400


def test_device_type_update_and_delete(client, auth):
    headers = auth["headers"]
    types = {t["name"]: t for t in client.get("/api/v1/device-types/", headers=headers).get_json()["data"]}
    pesa_id, band_id = types["pesa"]["id"], types["brazalete"]["id"]

    taken = client.put(f"/api/v1/device-types/{pesa_id}", json={"name": "brazalete"}, headers=headers)
    assert taken.status_code == 409
    unknown = client.put(f"/api/v1/device-types/{pesa_id}", json={"name": "tostadora"}, headers=headers)
    assert unknown.status_code == 400
    unchanged = client.put(f"/api/v1/device-types/{pesa_id}", json={}, headers=headers)
    assert unchanged.status_code == 200
    assert unchanged.get_json()["data"]["name"] == "pesa"

    assert _provision(client, auth, "pesa", "Scale").status_code == 201
    in_use = client.delete(f"/api/v1/device-types/{pesa_id}", headers=headers)
    assert in_use.status_code == 409
    assert in_use.get_json()["type"] == "error"

    deleted = client.delete(f"/api/v1/device-types/{band_id}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.get_json()["data"]["name"] == "brazalete"
    assert client.get(f"/api/v1/device-types/{band_id}", headers=headers).status_code == 404
    assert client.delete(f"/api/v1/device-types/{band_id}", headers=headers).status_code == 404


def test_sensor_crud_and_toggle(client, auth):
    headers = auth["headers"]
    device = _provision(client, auth, "pesa", "Scale").get_json()["data"]
    peso = device["sensors"][0]

    toggled = client.post(f"/api/v1/sensors/{peso['id']}/toggle", headers=headers)
    assert toggled.status_code == 200
    assert toggled.get_json()["data"]["active"] == 0

    updated = client.put(f"/api/v1/sensors/{peso['id']}", json={"value": 72.5}, headers=headers)
    assert updated.get_json()["data"]["value"] == 72.5
    assert updated.get_json()["data"]["active"] == 0

    invalid = client.put(f"/api/v1/sensors/{peso['id']}", json={"active": 2}, headers=headers)
    assert invalid.status_code == 422

    created = client.post(
        "/api/v1/sensors/",
        json={"device_id": device["id"], "sensor_type_id": peso["sensor_type_id"], "value": 0},
        headers=headers,
    )
    assert created.status_code == 201
    assert created.get_json()["data"]["active"] == 1

    by_device = client.get(f"/api/v1/sensors/?device_id={device['id']}", headers=headers).get_json()["data"]
    assert len(by_device) == 2

    assert client.delete(f"/api/v1/sensors/{peso['id']}", headers=headers).status_code == 200
    assert client.post(f"/api/v1/sensors/{peso['id']}/toggle", headers=headers).status_code == 404


def test_sensor_type_crud(client, auth):
    headers = auth["headers"]
    created = client.post("/api/v1/sensor-types/", json={"name": "Glucosa", "unit": "mg/dL"}, headers=headers)
    assert created.status_code == 201
    type_id = created.get_json()["data"]["id"]

    assert client.post("/api/v1/sensor-types/", json={"name": "Glucosa", "unit": "x"}, headers=headers).status_code == 409

    updated = client.put(f"/api/v1/sensor-types/{type_id}", json={"unit": "mmol/L"}, headers=headers)
    assert updated.get_json()["data"]["name"] == "Glucosa"
    assert updated.get_json()["data"]["unit"] == "mmol/L"

    assert client.delete(f"/api/v1/sensor-types/{type_id}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/sensor-types/{type_id}", headers=headers).status_code == 404
