"""
Broker Gateway Client
=====================

HTTP client for the message broker's REST gateway (retained-message reads
and publishes). Authenticates with the API key / secret pair as HTTP basic
auth. TLS verification and timeouts are per-client settings.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from app.domain.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class BrokerGatewayClient:
    """Thin wrapper around ``requests.Session`` for the broker REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        secret_key: str = "",
        *,
        verify: bool = True,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.verify = verify
        if api_key or secret_key:
            self._session.auth = (api_key, secret_key)

    def get_retained_message(self, topic: str) -> dict[str, Any]:
        """Return the broker's retained-message record for *topic*.

        The record carries the message body base64-encoded under ``payload``.
        """
        url = f"{self.base_url}/mqtt/retainer/message/{quote(topic, safe='')}"
        data = self._request("GET", url, action=f"reading retained message for '{topic}'")
        if not isinstance(data, dict):
            raise ExternalServiceError("Unexpected retained message format from broker")
        return data

    def publish(self, topic: str, payload: str, *, retain: bool = True) -> Any:
        """Publish a plain-text *payload* to *topic* (QoS 0)."""
        body = {
            "payload_encoding": "plain",
            "topic": topic,
            "qos": 0,
            "payload": payload,
            "retain": retain,
        }
        return self._request("POST", f"{self.base_url}/publish", json=body, action=f"publishing to '{topic}'")

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    def _request(self, method: str, url: str, *, action: str, **kwargs: Any) -> Any:
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as exc:
            logger.warning("Broker timeout while %s", action)
            raise ExternalServiceError(f"Broker timeout while {action}") from exc
        except requests.exceptions.RequestException as exc:
            logger.warning("Broker unreachable while %s: %s", action, exc)
            raise ExternalServiceError(f"Broker unreachable while {action}") from exc

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Broker answered %s while %s: %s",
                response.status_code,
                action,
                response.text[:200],
            )
            raise ExternalServiceError(
                f"Broker answered {response.status_code} while {action}",
                detail={"status": response.status_code},
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise ExternalServiceError(f"Broker sent an invalid JSON body while {action}") from exc
