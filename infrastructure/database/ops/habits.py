from __future__ import annotations

from typing import Any, Dict, List, Optional

from app.utils.time import iso_now
from infrastructure.database.sql_safety import build_set_clause, safe_columns
from infrastructure.database.utils import db_operation, row_to_dict, rows_to_dicts

HABIT_UPDATE_COLUMNS = frozenset({"name", "description", "user_id"})


class HabitOperations:
    """Habit helpers shared across database handlers."""

    @db_operation("inserting habit")
    def insert_habit(self, *, name: str, description: str, user_id: Optional[int] = None) -> int:
        now = iso_now()
        with self.connection() as db:
            cursor = db.execute(
                """
                INSERT INTO habits (name, description, user_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, description, user_id, now, now),
            )
            return int(cursor.lastrowid)

    @db_operation("fetching habit")
    def get_habit(self, habit_id: int) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute("SELECT * FROM habits WHERE id = ?", (habit_id,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("listing habits")
    def get_habits(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        db = self.get_db()
        if user_id is None:
            rows = db.execute("SELECT * FROM habits ORDER BY id ASC").fetchall()
        else:
            rows = db.execute("SELECT * FROM habits WHERE user_id = ? ORDER BY id ASC", (user_id,)).fetchall()
        return rows_to_dicts(rows)

    @db_operation("updating habit")
    def update_habit_fields(self, habit_id: int, fields: Dict[str, Any]) -> bool:
        cols = safe_columns(fields, HABIT_UPDATE_COLUMNS, context="update_habit_fields")
        if not cols:
            return self.get_habit(habit_id) is not None
        clause, values = build_set_clause(cols)
        with self.connection() as db:
            cursor = db.execute(
                f"UPDATE habits SET {clause}, updated_at = ? WHERE id = ?",
                [*values, iso_now(), habit_id],
            )
            return cursor.rowcount > 0

    @db_operation("deleting habit")
    def delete_habit(self, habit_id: int) -> bool:
        with self.connection() as db:
            cursor = db.execute("DELETE FROM habits WHERE id = ?", (habit_id,))
            return cursor.rowcount > 0
