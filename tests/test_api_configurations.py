"""Configurations and configuration types API."""

from __future__ import annotations


def _type_id(client, headers, name):
    types = client.get("/api/v1/configuration-types/", headers=headers).get_json()["data"]
    return next(t["id"] for t in types if t["name"] == name)


def test_configuration_crud(client, auth):
    headers = auth["headers"]
    type_id = _type_id(client, headers, "alarma_pasos")

    created = client.post(
        "/api/v1/configurations/",
        json={"configuration_type_id": type_id, "data": 5000, "user_id": auth["user_id"]},
        headers=headers,
    )
    assert created.status_code == 201
    configuration = created.get_json()["data"]
    assert configuration["data"] == "5000"
    assert configuration["configuration_type"]["name"] == "alarma_pasos"
    assert "password_hash" not in configuration["user"]

    mine = client.get(f"/api/v1/configurations/user/{auth['user_id']}", headers=headers).get_json()["data"]
    assert [c["id"] for c in mine] == [configuration["id"]]
    assert client.get("/api/v1/configurations/user/404", headers=headers).status_code == 404

    updated = client.put(f"/api/v1/configurations/{configuration['id']}", json={"data": "6000"}, headers=headers)
    assert updated.get_json()["data"]["data"] == "6000"
    kept = client.put(f"/api/v1/configurations/{configuration['id']}", json={}, headers=headers)
    assert kept.get_json()["data"]["data"] == "6000"

    assert client.delete(f"/api/v1/configurations/{configuration['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/configurations/{configuration['id']}", headers=headers).status_code == 404


def test_configuration_parents_must_exist(client, auth):
    response = client.post(
        "/api/v1/configurations/",
        json={"configuration_type_id": 404, "data": "1", "user_id": 404},
        headers=auth["headers"],
    )
    assert response.status_code == 422
    assert set(response.get_json()["errors"]) == {"user_id", "configuration_type_id"}


def test_configuration_type_crud(client, auth):
    headers = auth["headers"]
    created = client.post("/api/v1/configuration-types/", json={"name": "alarma_calorias"}, headers=headers)
    assert created.status_code == 201
    type_id = created.get_json()["data"]["id"]

    duplicate = client.post("/api/v1/configuration-types/", json={"name": "alarma_calorias"}, headers=headers)
    assert duplicate.status_code == 409

    renamed = client.put(f"/api/v1/configuration-types/{type_id}", json={"name": "alarma_kcal"}, headers=headers)
    assert renamed.get_json()["data"]["name"] == "alarma_kcal"

    assert client.delete(f"/api/v1/configuration-types/{type_id}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/configuration-types/{type_id}", headers=headers).status_code == 404


def test_configuration_type_in_use_cannot_be_deleted(client, auth):
    headers = auth["headers"]
    type_id = _type_id(client, headers, "alarma_distancia")
    client.post(
        "/api/v1/configurations/",
        json={"configuration_type_id": type_id, "data": "3", "user_id": auth["user_id"]},
        headers=headers,
    )
    assert client.delete(f"/api/v1/configuration-types/{type_id}", headers=headers).status_code == 409
