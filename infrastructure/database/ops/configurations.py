from __future__ import annotations

from typing import Any, Dict, List, Optional

from app.utils.time import iso_now
from infrastructure.database.sql_safety import build_set_clause, safe_columns
from infrastructure.database.utils import db_operation, row_to_dict, rows_to_dicts

CONFIGURATION_UPDATE_COLUMNS = frozenset({"data"})
CONFIGURATION_TYPE_UPDATE_COLUMNS = frozenset({"name"})


class ConfigurationOperations:
    """Per-user configuration (goal) and configuration type helpers."""

    # --- Configuration types -----------------------------------------------------
    @db_operation("inserting configuration type")
    def insert_configuration_type(self, name: str) -> int:
        now = iso_now()
        with self.connection() as db:
            cursor = db.execute(
                "INSERT INTO configuration_types (name, created_at, updated_at) VALUES (?, ?, ?)",
                (name, now, now),
            )
            return int(cursor.lastrowid)

    @db_operation("fetching configuration type")
    def get_configuration_type(self, type_id: int) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute("SELECT * FROM configuration_types WHERE id = ?", (type_id,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("fetching configuration type by name")
    def get_configuration_type_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute("SELECT * FROM configuration_types WHERE name = ?", (name,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("listing configuration types")
    def get_configuration_types(self) -> List[Dict[str, Any]]:
        rows = self.get_db().execute("SELECT * FROM configuration_types ORDER BY id ASC").fetchall()
        return rows_to_dicts(rows)

    @db_operation("updating configuration type")
    def update_configuration_type_fields(self, type_id: int, fields: Dict[str, Any]) -> bool:
        cols = safe_columns(fields, CONFIGURATION_TYPE_UPDATE_COLUMNS, context="update_configuration_type")
        if not cols:
            return self.get_configuration_type(type_id) is not None
        clause, values = build_set_clause(cols)
        with self.connection() as db:
            cursor = db.execute(
                f"UPDATE configuration_types SET {clause}, updated_at = ? WHERE id = ?",
                [*values, iso_now(), type_id],
            )
            return cursor.rowcount > 0

    @db_operation("deleting configuration type")
    def delete_configuration_type(self, type_id: int) -> bool:
        with self.connection() as db:
            cursor = db.execute("DELETE FROM configuration_types WHERE id = ?", (type_id,))
            return cursor.rowcount > 0

    @db_operation("counting configurations of a type")
    def count_configurations_of_type(self, type_id: int) -> int:
        row = self.get_db().execute(
            "SELECT COUNT(*) FROM configurations WHERE configuration_type_id = ?", (type_id,)
        ).fetchone()
        return int(row[0])

    # --- Configurations ----------------------------------------------------------
    @db_operation("inserting configuration")
    def insert_configuration(self, *, user_id: int, configuration_type_id: int, data: str) -> int:
        now = iso_now()
        with self.connection() as db:
            cursor = db.execute(
                """
                INSERT INTO configurations (user_id, configuration_type_id, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, configuration_type_id, data, now, now),
            )
            return int(cursor.lastrowid)

    @db_operation("fetching configuration")
    def get_configuration(self, configuration_id: int) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute("SELECT * FROM configurations WHERE id = ?", (configuration_id,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("listing configurations")
    def get_configurations(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        db = self.get_db()
        if user_id is None:
            rows = db.execute("SELECT * FROM configurations ORDER BY id ASC").fetchall()
        else:
            rows = db.execute(
                "SELECT * FROM configurations WHERE user_id = ? ORDER BY id ASC", (user_id,)
            ).fetchall()
        return rows_to_dicts(rows)

    @db_operation("fetching user configuration by type")
    def get_user_configuration_by_type_name(self, user_id: int, type_name: str) -> Optional[Dict[str, Any]]:
        """Most recently created configuration of *type_name* for the user."""
        row = self.get_db().execute(
            """
            SELECT c.*
            FROM configurations c
            JOIN configuration_types t ON t.id = c.configuration_type_id
            WHERE c.user_id = ? AND t.name = ?
            ORDER BY c.id DESC
            LIMIT 1
            """,
            (user_id, type_name),
        ).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("updating configuration")
    def update_configuration_fields(self, configuration_id: int, fields: Dict[str, Any]) -> bool:
        cols = safe_columns(fields, CONFIGURATION_UPDATE_COLUMNS, context="update_configuration")
        if not cols:
            return self.get_configuration(configuration_id) is not None
        clause, values = build_set_clause(cols)
        with self.connection() as db:
            cursor = db.execute(
                f"UPDATE configurations SET {clause}, updated_at = ? WHERE id = ?",
                [*values, iso_now(), configuration_id],
            )
            return cursor.rowcount > 0

    @db_operation("deleting configuration")
    def delete_configuration(self, configuration_id: int) -> bool:
        with self.connection() as db:
            cursor = db.execute("DELETE FROM configurations WHERE id = ?", (configuration_id,))
            return cursor.rowcount > 0
