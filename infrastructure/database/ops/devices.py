from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from app.utils.time import iso_now
from infrastructure.database.sql_safety import build_set_clause, safe_columns
from infrastructure.database.utils import db_operation, row_to_dict, rows_to_dicts

logger = logging.getLogger(__name__)

DEVICE_UPDATE_COLUMNS = frozenset({"name"})
DEVICE_TYPE_UPDATE_COLUMNS = frozenset({"name"})

_DEVICE_SELECT = """
    SELECT d.*, t.name AS device_type_name
    FROM devices d
    JOIN device_types t ON t.id = d.device_type_id
"""


class DeviceOperations:
    """Device and device type helpers shared across database handlers."""

    # --- Device types ------------------------------------------------------------
    @db_operation("inserting device type")
    def insert_device_type(self, name: str) -> int:
        now = iso_now()
        with self.connection() as db:
            cursor = db.execute(
                "INSERT INTO device_types (name, created_at, updated_at) VALUES (?, ?, ?)",
                (name, now, now),
            )
            return int(cursor.lastrowid)

    @db_operation("fetching device type")
    def get_device_type(self, type_id: int) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute("SELECT * FROM device_types WHERE id = ?", (type_id,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("fetching device type by name")
    def get_device_type_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute("SELECT * FROM device_types WHERE name = ?", (name,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("listing device types")
    def get_device_types(self) -> List[Dict[str, Any]]:
        rows = self.get_db().execute("SELECT * FROM device_types ORDER BY id ASC").fetchall()
        return rows_to_dicts(rows)

    @db_operation("updating device type")
    def update_device_type_fields(self, type_id: int, fields: Dict[str, Any]) -> bool:
        cols = safe_columns(fields, DEVICE_TYPE_UPDATE_COLUMNS, context="update_device_type_fields")
        if not cols:
            return self.get_device_type(type_id) is not None
        clause, values = build_set_clause(cols)
        with self.connection() as db:
            cursor = db.execute(
                f"UPDATE device_types SET {clause}, updated_at = ? WHERE id = ?",
                [*values, iso_now(), type_id],
            )
            return cursor.rowcount > 0

    @db_operation("deleting device type")
    def delete_device_type(self, type_id: int) -> bool:
        with self.connection() as db:
            cursor = db.execute("DELETE FROM device_types WHERE id = ?", (type_id,))
            return cursor.rowcount > 0

    @db_operation("counting devices of a type")
    def count_devices_of_type(self, type_id: int) -> int:
        row = self.get_db().execute("SELECT COUNT(*) FROM devices WHERE device_type_id = ?", (type_id,)).fetchone()
        return int(row[0])

    # --- Devices -----------------------------------------------------------------
    @db_operation("inserting device")
    def insert_device(self, *, user_id: int, device_type_id: int, name: str) -> int:
        now = iso_now()
        with self.connection() as db:
            cursor = db.execute(
                """
                INSERT INTO devices (user_id, device_type_id, name, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, device_type_id, name, now, now),
            )
            logger.info("Device '%s' inserted for user %s", name, user_id)
            return int(cursor.lastrowid)

    @db_operation("fetching device")
    def get_device(self, device_id: int) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute(_DEVICE_SELECT + " WHERE d.id = ?", (device_id,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("listing devices")
    def get_devices(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        db = self.get_db()
        if user_id is None:
            rows = db.execute(_DEVICE_SELECT + " ORDER BY d.id ASC").fetchall()
        else:
            rows = db.execute(_DEVICE_SELECT + " WHERE d.user_id = ? ORDER BY d.id ASC", (user_id,)).fetchall()
        return rows_to_dicts(rows)

    @db_operation("counting user devices by category")
    def count_user_devices_of_type(self, user_id: int, type_name: str) -> int:
        row = self.get_db().execute(
            """
            SELECT COUNT(*)
            FROM devices d
            JOIN device_types t ON t.id = d.device_type_id
            WHERE d.user_id = ? AND t.name = ?
            """,
            (user_id, type_name),
        ).fetchone()
        return int(row[0])

    @db_operation("updating device")
    def update_device_fields(self, device_id: int, fields: Dict[str, Any]) -> bool:
        cols = safe_columns(fields, DEVICE_UPDATE_COLUMNS, context="update_device_fields")
        if not cols:
            return self.get_device(device_id) is not None
        clause, values = build_set_clause(cols)
        with self.connection() as db:
            cursor = db.execute(
                f"UPDATE devices SET {clause}, updated_at = ? WHERE id = ?",
                [*values, iso_now(), device_id],
            )
            return cursor.rowcount > 0

    @db_operation("deleting device")
    def delete_device(self, device_id: int) -> bool:
        with self.connection() as db:
            cursor = db.execute("DELETE FROM devices WHERE id = ?", (device_id,))
            return cursor.rowcount > 0
