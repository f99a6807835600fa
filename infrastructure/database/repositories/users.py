"""
User Repository
===============

Repository for user accounts, verification codes and API tokens.
Rows leave this layer without ``password_hash`` unless the caller asks for
credentials explicitly (``with_credentials=True``).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from infrastructure.database.ops.users import UserOperations

logger = logging.getLogger(__name__)

_SECRET_FIELDS = ("password_hash", "verification_code")


def public_user(row: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return a copy of *row* without credential columns."""
    if row is None:
        return None
    return {k: v for k, v in row.items() if k not in _SECRET_FIELDS}


class UserRepository:
    """Repository for user-account database operations."""

    def __init__(self, backend: UserOperations) -> None:
        """
        Args:
            backend: Database handler exposing the user operations
                     (SQLiteDatabaseHandler).
        """
        self._backend = backend

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(
        self,
        *,
        name: str,
        lastname: str,
        email: str,
        password_hash: str,
        verification_code: Optional[str],
    ) -> int:
        return self._backend.insert_user(
            name=name,
            lastname=lastname,
            email=email,
            password_hash=password_hash,
            verification_code=verification_code,
        )

    def get_user(self, user_id: int, *, with_credentials: bool = False) -> Optional[Dict[str, Any]]:
        row = self._backend.get_user(user_id)
        return row if with_credentials else public_user(row)

    def get_user_by_email(self, email: str, *, with_credentials: bool = False) -> Optional[Dict[str, Any]]:
        row = self._backend.get_user_by_email(email)
        return row if with_credentials else public_user(row)

    def list_users(self) -> List[Dict[str, Any]]:
        return [public_user(row) for row in self._backend.get_users()]

    def update_profile(self, user_id: int, fields: Dict[str, Any]) -> bool:
        return self._backend.update_user_fields(user_id, fields)

    def set_verification_code(self, user_id: int, code: Optional[str]) -> bool:
        return self._backend.set_verification_code(user_id, code)

    def mark_verified(self, user_id: int) -> bool:
        return self._backend.mark_user_verified(user_id)

    def update_password(self, user_id: int, password_hash: str, *, clear_code: bool = False) -> bool:
        return self._backend.update_password_hash(user_id, password_hash, clear_code=clear_code)

    def delete_user(self, user_id: int) -> bool:
        return self._backend.delete_user(user_id)

    # ------------------------------------------------------------------
    # API tokens
    # ------------------------------------------------------------------

    def store_token(self, *, user_id: int, token_hash: str, expires_at: str, name: str = "api") -> int:
        return self._backend.insert_api_token(
            user_id=user_id, token_hash=token_hash, expires_at=expires_at, name=name
        )

    def find_token(self, token_hash: str) -> Optional[Dict[str, Any]]:
        return self._backend.get_api_token(token_hash)

    def revoke_token(self, token_hash: str) -> bool:
        return self._backend.delete_api_token(token_hash)

    def revoke_user_tokens(self, user_id: int, *, keep_hash: Optional[str] = None) -> int:
        revoked = self._backend.delete_user_tokens(user_id, keep_hash=keep_hash)
        if revoked:
            logger.info("Revoked %d token(s) for user %s", revoked, user_id)
        return revoked

    def prune_expired_tokens(self, cutoff_iso: str) -> int:
        return self._backend.delete_expired_tokens(cutoff_iso)
