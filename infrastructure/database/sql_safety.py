"""
SQL Safety Utilities
====================

Partial updates interpolate column names into ``UPDATE … SET`` fragments.
``safe_columns()`` filters the incoming mapping to an explicit allowlist
of columns so request keys can never reach the SQL text.

Usage::

    from infrastructure.database.sql_safety import safe_columns, build_set_clause

    cols = safe_columns(fields, {"name", "description"}, context="update_habit")
    clause, values = build_set_clause(cols)
    db.execute(f"UPDATE habits SET {clause} WHERE id = ?", [*values, habit_id])
"""

from __future__ import annotations

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def safe_columns(
    data: dict[str, Any],
    allowed: frozenset[str] | set[str],
    *,
    context: str = "",
    drop_none: bool = True,
) -> dict[str, Any]:
    """Return *data* filtered to keys present in *allowed*.

    ``None`` values are dropped by default: an omitted field in a partial
    update must leave the stored value unchanged.
    """
    filtered: dict[str, Any] = {}
    rejected: list[str] = []

    for key, value in data.items():
        if key not in allowed or not _IDENT_RE.match(key):
            rejected.append(key)
            continue
        if drop_none and value is None:
            continue
        filtered[key] = value

    if rejected:
        logger.warning("safe_columns(%s): dropped non-allowed keys: %s", context or "?", rejected)
    return filtered


def build_set_clause(cols: dict[str, Any]) -> tuple[str, list[Any]]:
    """Build a ``SET col1 = ?, col2 = ?`` fragment from *cols*.

    >>> build_set_clause({"name": "Walk", "description": "30 min"})
    ('name = ?, description = ?', ['Walk', '30 min'])
    """
    clause = ", ".join(f"{k} = ?" for k in cols)
    return clause, list(cols.values())
