"""
Nutrition API Client
====================

HTTP client for the food-database parser and nutrition-analysis endpoints.
Both endpoints authenticate with ``app_id`` / ``app_key`` query parameters;
the analysis endpoint uses its own credential pair.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.domain.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class NutritionClient:
    """Thin wrapper around ``requests.Session`` for the nutrition API."""

    def __init__(
        self,
        base_url: str,
        *,
        app_id: str = "",
        app_key: str = "",
        analysis_app_id: str = "",
        analysis_app_key: str = "",
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._search_credentials = {"app_id": app_id, "app_key": app_key}
        self._analysis_credentials = {"app_id": analysis_app_id, "app_key": analysis_app_key}
        self._session = session or requests.Session()

    def search_food(self, name: str) -> dict[str, Any]:
        """Query the food-database parser for *name*."""
        params = {**self._search_credentials, "ingr": name}
        return self._request(
            "GET",
            f"{self.base_url}/food-database/v2/parser",
            params=params,
            action="searching foods",
        )

    def nutrition_details(self, ingredients: list[str], *, title: str | None = None) -> dict[str, Any]:
        """Request the nutrition analysis of a recipe made of *ingredients*."""
        body: dict[str, Any] = {"ingr": ingredients}
        if title:
            body["title"] = title
        return self._request(
            "POST",
            f"{self.base_url}/nutrition-details",
            params=dict(self._analysis_credentials),
            json=body,
            action="analysing nutrition",
        )

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    def _request(self, method: str, url: str, *, action: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.exceptions.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            body = exc.response.text[:200] if exc.response is not None else ""
            logger.warning("Nutrition API answered %s while %s: %s", status, action, body)
            raise ExternalServiceError(
                f"Nutrition API answered {status} while {action}",
                detail={"status": status},
            ) from exc
        except requests.exceptions.RequestException as exc:
            logger.warning("Nutrition API unreachable while %s: %s", action, exc)
            raise ExternalServiceError(f"Nutrition API unreachable while {action}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise ExternalServiceError(f"Nutrition API sent an invalid JSON body while {action}") from exc
        if not isinstance(data, dict):
            raise ExternalServiceError(f"Unexpected nutrition API response while {action}")
        return data
