from __future__ import annotations

from typing import Any, Dict, List, Optional

from app.utils.time import iso_now
from infrastructure.database.sql_safety import build_set_clause, safe_columns
from infrastructure.database.utils import db_operation, row_to_dict, rows_to_dicts

SENSOR_UPDATE_COLUMNS = frozenset({"value", "active"})
SENSOR_TYPE_UPDATE_COLUMNS = frozenset({"name", "unit"})

_SENSOR_SELECT = """
    SELECT s.*, t.name AS sensor_type_name, t.unit AS sensor_type_unit
    FROM sensors s
    JOIN sensor_types t ON t.id = s.sensor_type_id
"""


class SensorOperations:
    """Sensor and sensor type helpers shared across database handlers."""

    # --- Sensor types ------------------------------------------------------------
    @db_operation("inserting sensor type")
    def insert_sensor_type(self, *, name: str, unit: str) -> int:
        now = iso_now()
        with self.connection() as db:
            cursor = db.execute(
                "INSERT INTO sensor_types (name, unit, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (name, unit, now, now),
            )
            return int(cursor.lastrowid)

    @db_operation("fetching sensor type")
    def get_sensor_type(self, type_id: int) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute("SELECT * FROM sensor_types WHERE id = ?", (type_id,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("fetching sensor type by name")
    def get_sensor_type_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute("SELECT * FROM sensor_types WHERE name = ?", (name,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("listing sensor types")
    def get_sensor_types(self) -> List[Dict[str, Any]]:
        rows = self.get_db().execute("SELECT * FROM sensor_types ORDER BY id ASC").fetchall()
        return rows_to_dicts(rows)

    @db_operation("updating sensor type")
    def update_sensor_type_fields(self, type_id: int, fields: Dict[str, Any]) -> bool:
        cols = safe_columns(fields, SENSOR_TYPE_UPDATE_COLUMNS, context="update_sensor_type_fields")
        if not cols:
            return self.get_sensor_type(type_id) is not None
        clause, values = build_set_clause(cols)
        with self.connection() as db:
            cursor = db.execute(
                f"UPDATE sensor_types SET {clause}, updated_at = ? WHERE id = ?",
                [*values, iso_now(), type_id],
            )
            return cursor.rowcount > 0

    @db_operation("deleting sensor type")
    def delete_sensor_type(self, type_id: int) -> bool:
        with self.connection() as db:
            cursor = db.execute("DELETE FROM sensor_types WHERE id = ?", (type_id,))
            return cursor.rowcount > 0

    @db_operation("counting sensors of a type")
    def count_sensors_of_type(self, type_id: int) -> int:
        row = self.get_db().execute("SELECT COUNT(*) FROM sensors WHERE sensor_type_id = ?", (type_id,)).fetchone()
        return int(row[0])

    # --- Sensors -----------------------------------------------------------------
    @db_operation("inserting sensor")
    def insert_sensor(self, *, device_id: int, sensor_type_id: int, value: float, active: int = 1) -> int:
        now = iso_now()
        with self.connection() as db:
            cursor = db.execute(
                """
                INSERT INTO sensors (device_id, sensor_type_id, value, active, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (device_id, sensor_type_id, value, active, now, now),
            )
            return int(cursor.lastrowid)

    @db_operation("fetching sensor")
    def get_sensor(self, sensor_id: int) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute(_SENSOR_SELECT + " WHERE s.id = ?", (sensor_id,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("listing sensors")
    def get_sensors(self, device_id: Optional[int] = None) -> List[Dict[str, Any]]:
        db = self.get_db()
        if device_id is None:
            rows = db.execute(_SENSOR_SELECT + " ORDER BY s.id ASC").fetchall()
        else:
            rows = db.execute(_SENSOR_SELECT + " WHERE s.device_id = ? ORDER BY s.id ASC", (device_id,)).fetchall()
        return rows_to_dicts(rows)

    @db_operation("updating sensor")
    def update_sensor_fields(self, sensor_id: int, fields: Dict[str, Any]) -> bool:
        cols = safe_columns(fields, SENSOR_UPDATE_COLUMNS, context="update_sensor_fields")
        if not cols:
            return self.get_sensor(sensor_id) is not None
        clause, values = build_set_clause(cols)
        with self.connection() as db:
            cursor = db.execute(
                f"UPDATE sensors SET {clause}, updated_at = ? WHERE id = ?",
                [*values, iso_now(), sensor_id],
            )
            return cursor.rowcount > 0

    @db_operation("toggling sensor")
    def toggle_sensor_active(self, sensor_id: int) -> bool:
        with self.connection() as db:
            cursor = db.execute(
                "UPDATE sensors SET active = 1 - active, updated_at = ? WHERE id = ?",
                (iso_now(), sensor_id),
            )
            return cursor.rowcount > 0

    @db_operation("deleting sensor")
    def delete_sensor(self, sensor_id: int) -> bool:
        with self.connection() as db:
            cursor = db.execute("DELETE FROM sensors WHERE id = ?", (sensor_id,))
            return cursor.rowcount > 0
