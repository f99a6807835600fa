from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from app.utils.time import iso_now
from infrastructure.database.sql_safety import build_set_clause, safe_columns
from infrastructure.database.utils import db_operation, row_to_dict, rows_to_dicts

logger = logging.getLogger(__name__)

USER_UPDATE_COLUMNS = frozenset({"name", "lastname", "email"})


class UserOperations:
    """User account and API token helpers shared across database handlers."""

    # --- Users -------------------------------------------------------------------
    @db_operation("inserting user")
    def insert_user(
        self,
        *,
        name: str,
        lastname: str,
        email: str,
        password_hash: str,
        verification_code: Optional[str],
    ) -> int:
        now = iso_now()
        with self.connection() as db:
            cursor = db.execute(
                """
                INSERT INTO users (
                    name, lastname, email, password_hash, verification_code, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (name, lastname, email, password_hash, verification_code, now, now),
            )
            logger.info("User %s registered", cursor.lastrowid)
            return int(cursor.lastrowid)

    @db_operation("fetching user")
    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("fetching user by e-mail")
    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute(
            "SELECT * FROM users WHERE email = ? COLLATE NOCASE", (email.strip(),)
        ).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("listing users")
    def get_users(self) -> List[Dict[str, Any]]:
        rows = self.get_db().execute("SELECT * FROM users ORDER BY id ASC").fetchall()
        return rows_to_dicts(rows)

    @db_operation("updating user")
    def update_user_fields(self, user_id: int, fields: Dict[str, Any]) -> bool:
        cols = safe_columns(fields, USER_UPDATE_COLUMNS, context="update_user_fields")
        if not cols:
            return self.get_user(user_id) is not None
        clause, values = build_set_clause(cols)
        with self.connection() as db:
            cursor = db.execute(
                f"UPDATE users SET {clause}, updated_at = ? WHERE id = ?",
                [*values, iso_now(), user_id],
            )
            return cursor.rowcount > 0

    @db_operation("storing verification code")
    def set_verification_code(self, user_id: int, code: Optional[str]) -> bool:
        with self.connection() as db:
            cursor = db.execute(
                "UPDATE users SET verification_code = ?, updated_at = ? WHERE id = ?",
                (code, iso_now(), user_id),
            )
            return cursor.rowcount > 0

    @db_operation("verifying user")
    def mark_user_verified(self, user_id: int) -> bool:
        now = iso_now()
        with self.connection() as db:
            cursor = db.execute(
                """
                UPDATE users
                SET verification_code = NULL,
                    email_verified_at = COALESCE(email_verified_at, ?),
                    updated_at = ?
                WHERE id = ?
                """,
                (now, now, user_id),
            )
            return cursor.rowcount > 0

    @db_operation("updating password")
    def update_password_hash(self, user_id: int, password_hash: str, *, clear_code: bool = False) -> bool:
        query = "UPDATE users SET password_hash = ?, updated_at = ?"
        if clear_code:
            query += ", verification_code = NULL"
        with self.connection() as db:
            cursor = db.execute(query + " WHERE id = ?", (password_hash, iso_now(), user_id))
            return cursor.rowcount > 0

    @db_operation("deleting user")
    def delete_user(self, user_id: int) -> bool:
        with self.connection() as db:
            cursor = db.execute("DELETE FROM users WHERE id = ?", (user_id,))
            return cursor.rowcount > 0

    # --- API tokens --------------------------------------------------------------
    @db_operation("storing API token")
    def insert_api_token(self, *, user_id: int, token_hash: str, expires_at: str, name: str = "api") -> int:
        now = iso_now()
        with self.connection() as db:
            cursor = db.execute(
                """
                INSERT INTO api_tokens (user_id, token_hash, name, expires_at, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, token_hash, name, expires_at, now, now),
            )
            return int(cursor.lastrowid)

    @db_operation("fetching API token")
    def get_api_token(self, token_hash: str) -> Optional[Dict[str, Any]]:
        row = self.get_db().execute(
            "SELECT id, user_id, name, expires_at, created_at FROM api_tokens WHERE token_hash = ?",
            (token_hash,),
        ).fetchone()
        return row_to_dict(row) if row else None

    @db_operation("revoking API token")
    def delete_api_token(self, token_hash: str) -> bool:
        with self.connection() as db:
            cursor = db.execute("DELETE FROM api_tokens WHERE token_hash = ?", (token_hash,))
            return cursor.rowcount > 0

    @db_operation("revoking user tokens")
    def delete_user_tokens(self, user_id: int, *, keep_hash: Optional[str] = None) -> int:
        with self.connection() as db:
            if keep_hash:
                cursor = db.execute(
                    "DELETE FROM api_tokens WHERE user_id = ? AND token_hash != ?",
                    (user_id, keep_hash),
                )
            else:
                cursor = db.execute("DELETE FROM api_tokens WHERE user_id = ?", (user_id,))
            return cursor.rowcount

    @db_operation("pruning expired tokens")
    def delete_expired_tokens(self, cutoff_iso: str) -> int:
        with self.connection() as db:
            cursor = db.execute("DELETE FROM api_tokens WHERE expires_at <= ?", (cutoff_iso,))
            return cursor.rowcount
