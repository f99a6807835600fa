"""
Database Utilities
==================

Shared helpers for the operation mixins: row conversion and translation of
``sqlite3`` failures into :class:`~app.domain.exceptions.RepositoryError`.
"""

from __future__ import annotations

import functools
import logging
import sqlite3
from typing import Any, Callable, TypeVar

from app.domain.exceptions import RepositoryError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def row_to_dict(row) -> dict[str, Any]:
    """
    Convert database row to dictionary.

    Args:
        row: Database row (sqlite3.Row, dict, or None)

    Returns:
        Dictionary representation of the row, empty for ``None``
    """
    if row is None:
        return {}
    if isinstance(row, dict):
        return row
    return {k: row[k] for k in row.keys()}


def rows_to_dicts(rows) -> list[dict[str, Any]]:
    return [row_to_dict(row) for row in rows]


def db_operation(action: str) -> Callable[[F], F]:
    """Log ``sqlite3`` errors raised by an operation and re-raise them as
    :class:`RepositoryError` so the API layer answers with a sanitized 500.
    """

    def decorator(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return fn(*args, **kwargs)
            except sqlite3.Error as exc:
                logger.error("Database error while %s: %s", action, exc)
                raise RepositoryError(f"Database error while {action}") from exc

        return wrapper  # type: ignore[return-value]

    return decorator
