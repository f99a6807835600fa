"""
Shared test fixtures for the Healthy Habits backend test suite.

Provides:
- In-memory SQLite database with all tables created and reference rows seeded
- Repository instances wired to the test database
- Mock services for mail and audit logging
- Stubbed ``requests`` sessions for the broker and nutrition APIs
- Service factories for the application services
- A Flask app / test client built through ``create_app`` on a temp database
- Helpers for seeding users and obtaining bearer tokens

Usage:
    def test_example(db_handler, device_repo):
        device_id = device_repo.create_device(...)
        assert device_id is not None
"""

from __future__ import annotations

import json
import logging
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from app.schemas import Envelope
from app.services.application.auth_service import UserAuthManager
from infrastructure.database.repositories import (
    ConfigurationRepository,
    DeviceRepository,
    HabitRepository,
    SensorRepository,
    UserRepository,
)

# ---------------------------------------------------------------------------
# Database & Repositories
# ---------------------------------------------------------------------------
from infrastructure.database.sqlite_handler import SQLiteDatabaseHandler

# ---------------------------------------------------------------------------
# Logging: keep test output clean
# ---------------------------------------------------------------------------
logging.getLogger("infrastructure").setLevel(logging.WARNING)
logging.getLogger("app").setLevel(logging.WARNING)

BROKER_URL = "http://broker.test/api/v5"
NUTRITION_URL = "http://nutrition.test/api"
PASSWORD = "correct-horse-battery"


# ========================== Database Fixtures ==============================


@pytest.fixture()
def db_handler():
    """In-memory SQLite database with all tables created.

    Each test gets a fresh database, no cross-test contamination.
    """
    handler = SQLiteDatabaseHandler(":memory:")
    handler.create_tables()
    yield handler


# ========================== Repository Fixtures ============================


@pytest.fixture()
def user_repo(db_handler):
    return UserRepository(db_handler)


@pytest.fixture()
def habit_repo(db_handler):
    return HabitRepository(db_handler)


@pytest.fixture()
def configuration_repo(db_handler):
    return ConfigurationRepository(db_handler)


@pytest.fixture()
def device_repo(db_handler):
    return DeviceRepository(db_handler)


@pytest.fixture()
def sensor_repo(db_handler):
    return SensorRepository(db_handler)


# ========================== Mock Service Fixtures ==========================


@pytest.fixture()
def mock_audit_logger():
    """Mock AuditLogger."""
    logger = MagicMock()
    logger.log_event = MagicMock()
    return logger


@pytest.fixture()
def mock_email_service():
    """Mock EmailService that records every message instead of sending it."""
    svc = MagicMock()
    svc.enabled = True
    svc.send_code_email = MagicMock(return_value=True)
    svc.send_notice_email = MagicMock(return_value=True)
    return svc


# ========================== Upstream HTTP Stubs ============================


def upstream_response(status: int = 200, payload: Any = None) -> requests.Response:
    """A real ``requests.Response`` carrying *payload* as its JSON body."""
    response = requests.Response()
    response.status_code = status
    response.encoding = "utf-8"
    response._content = b"" if payload is None else json.dumps(payload).encode("utf-8")
    return response


class UpstreamStub:
    """Canned answers for a client's ``requests.Session``, keyed by method and URL.

    Unknown routes fail like an unreachable host.
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], Any] = {}
        self.session = MagicMock()
        self.session.request.side_effect = self._dispatch

    def add(self, method: str, url: str, payload: Any = None, *, status: int = 200, error: Exception | None = None):
        self._routes[(method, url)] = error if error is not None else upstream_response(status, payload)

    @property
    def calls(self):
        return self.session.request.call_args_list

    def _dispatch(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        outcome = self._routes.get((method, url))
        if outcome is None:
            raise requests.exceptions.ConnectionError(f"No stub for {method} {url}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture()
def broker_stub():
    return UpstreamStub()


@pytest.fixture()
def nutrition_stub():
    return UpstreamStub()


# ========================== Service Factory Fixtures =======================


@pytest.fixture()
def auth_manager(user_repo, mock_audit_logger):
    return UserAuthManager(user_repo=user_repo, audit_logger=mock_audit_logger)


@pytest.fixture()
def user_service(user_repo, device_repo, sensor_repo, configuration_repo, auth_manager, mock_email_service):
    from app.services.application.user_service import UserService

    return UserService(
        user_repo=user_repo,
        device_repo=device_repo,
        sensor_repo=sensor_repo,
        configuration_repo=configuration_repo,
        auth=auth_manager,
        email_service=mock_email_service,
    )


@pytest.fixture()
def configuration_service(configuration_repo, user_repo):
    from app.services.application.configuration_service import ConfigurationService

    return ConfigurationService(repository=configuration_repo, user_repo=user_repo)


@pytest.fixture()
def device_service(device_repo, sensor_repo, user_repo, mock_audit_logger):
    from app.services.application.device_service import DeviceService

    return DeviceService(
        repository=device_repo,
        sensor_repo=sensor_repo,
        user_repo=user_repo,
        audit_logger=mock_audit_logger,
    )


@pytest.fixture()
def sensor_service(sensor_repo, device_repo):
    from app.services.application.sensor_service import SensorService

    return SensorService(repository=sensor_repo, device_repo=device_repo)


@pytest.fixture()
def broker_client(broker_stub):
    from app.services.utilities.broker_gateway import BrokerGatewayClient

    client = BrokerGatewayClient(BROKER_URL, "key", "secret", timeout=2, session=broker_stub.session)
    yield client
    client.close()


@pytest.fixture()
def nutrition_client(nutrition_stub):
    from app.services.utilities.nutrition_client import NutritionClient

    client = NutritionClient(
        NUTRITION_URL,
        app_id="search-id",
        app_key="search-key",
        analysis_app_id="analysis-id",
        analysis_app_key="analysis-key",
        timeout=2,
        session=nutrition_stub.session,
    )
    yield client
    client.close()


@pytest.fixture()
def gateway_service(broker_client, sensor_repo, configuration_service):
    from app.services.application.gateway_service import GatewayService

    return GatewayService(broker=broker_client, sensor_repo=sensor_repo, configuration_service=configuration_service)


@pytest.fixture()
def food_service(nutrition_client, sensor_repo):
    from app.services.application.food_service import FoodService

    return FoodService(client=nutrition_client, sensor_repo=sensor_repo)


# ========================== Seed Data Helpers ==============================


class SeedData:
    """Helper to create commonly needed test data.

    Usage in tests::

        def test_something(seed):
            user_id = seed.create_user("ana@example.com")
            device_id = seed.create_device(user_id, "brazalete")
    """

    def __init__(self, db_handler: SQLiteDatabaseHandler):
        self._db = db_handler
        self._users = UserRepository(db_handler)
        self._devices = DeviceRepository(db_handler)
        self._sensors = SensorRepository(db_handler)
        self._configurations = ConfigurationRepository(db_handler)

    def create_user(
        self,
        email: str = "ana@example.com",
        *,
        name: str = "Ana",
        lastname: str = "García",
        password_hash: str = "not-a-real-hash",
        verification_code: str | None = None,
    ) -> int:
        return self._users.create_user(
            name=name,
            lastname=lastname,
            email=email,
            password_hash=password_hash,
            verification_code=verification_code,
        )

    def create_device(self, user_id: int, category: str = "brazalete", name: str = "My device") -> int:
        device_type = self._devices.get_type_by_name(category)
        return self._devices.create_device(user_id=user_id, device_type_id=device_type["id"], name=name)

    def create_sensor(self, device_id: int, sensor_type: str = "Pasos", *, value: float = 0, active: int = 1) -> int:
        row = self._sensors.get_type_by_name(sensor_type)
        return self._sensors.create_sensor(
            device_id=device_id, sensor_type_id=row["id"], value=value, active=active
        )

    def create_goal(self, user_id: int, type_name: str, data: str) -> int:
        row = self._configurations.get_type_by_name(type_name)
        return self._configurations.create_configuration(
            user_id=user_id, configuration_type_id=row["id"], data=data
        )

    def count(self, table: str) -> int:
        with self._db.connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


@pytest.fixture()
def seed(db_handler):
    """SeedData helper for quickly populating the test database."""
    return SeedData(db_handler)


# ========================== Application Fixtures ===========================


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("HEALTHY_SECRET_KEY", "test-secret")
    monkeypatch.setenv("HEALTHY_SMTP_HOST", "")
    from app import create_app

    flask_app = create_app(
        {
            "database_path": str(tmp_path / "test.db"),
            "audit_log_path": str(tmp_path / "audit.log"),
            "log_path": str(tmp_path / "healthy.log"),
            "broker_url": BROKER_URL,
            "nutrition_url": NUTRITION_URL,
            "nutrition_app_id": "search-id",
            "nutrition_app_key": "search-key",
            "nutrition_analysis_app_id": "analysis-id",
            "nutrition_analysis_app_key": "analysis-key",
        }
    )
    flask_app.config["TESTING"] = True
    try:
        yield flask_app
    finally:
        container = flask_app.config.get("CONTAINER")
        if container is not None:
            container.shutdown()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def container(app):
    return app.config["CONTAINER"]


@pytest.fixture()
def app_broker(container, broker_stub, monkeypatch):
    """Route the app's broker client through :class:`UpstreamStub`."""
    monkeypatch.setattr(container.broker_client, "_session", broker_stub.session)
    return broker_stub


@pytest.fixture()
def app_nutrition(container, nutrition_stub, monkeypatch):
    monkeypatch.setattr(container.nutrition_client, "_session", nutrition_stub.session)
    return nutrition_stub


def read_envelope(response, status: int | None = None) -> Envelope:
    """Check *response* against the JSON envelope and return it parsed."""
    if status is not None:
        assert response.status_code == status, response.get_json()
    return Envelope.model_validate(response.get_json())


def register_and_login(client, email: str = "ana@example.com", *, password: str = PASSWORD) -> dict[str, Any]:
    """Register, verify and log in a user through the API.

    Returns ``{"user_id", "token", "headers"}``.
    """
    response = client.post(
        "/api/v1/users/",
        json={"name": "Ana", "lastname": "García", "email": email, "password": password},
    )
    assert response.status_code == 201, response.get_json()
    user_id = response.get_json()["data"]["id"]

    user_repo = client.application.config["CONTAINER"].user_repo
    code = user_repo.get_user(user_id, with_credentials=True)["verification_code"]
    response = client.post(
        "/api/v1/users/verify",
        json={"email": email, "password": password, "verification_code": code},
    )
    assert response.status_code == 200, response.get_json()

    response = client.post("/api/v1/users/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.get_json()
    token = response.get_json()["data"]["token"]["token"]
    return {"user_id": user_id, "token": token, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture()
def auth(client):
    """A verified, logged-in user with ready-made request headers."""
    return register_and_login(client)


@pytest.fixture()
def login_user(client):
    """Factory fixture: ``login_user("bea@example.com")`` for extra accounts."""

    def _login(email: str, *, password: str = PASSWORD) -> dict[str, Any]:
        return register_and_login(client, email, password=password)

    return _login
