"""
User Authentication Service
===========================
Password hashing, one-time codes and opaque API tokens.

Tokens are random URL-safe strings handed to the client once; only their
SHA-256 digest is stored, together with an expiry.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional

import bcrypt

from app.utils.time import coerce_datetime, iso_in, iso_now, utc_now
from infrastructure.database.repositories.users import UserRepository
from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


@dataclass
class UserAuthManager:
    """
    Manages credentials: bcrypt hashes, verification codes and API tokens.
    """

    user_repo: UserRepository
    audit_logger: Optional[AuditLogger] = None
    token_lifetime_days: int = 3
    code_length: int = 4

    # --- Passwords -------------------------------------------------------------
    def hash_password(self, password: str) -> str:
        """Hash the provided password using bcrypt."""
        hashed_password = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
        return hashed_password.decode("utf-8")

    def check_password(self, stored_password: str, provided_password: str) -> bool:
        """Validate a plaintext password against the stored hash."""
        try:
            return bcrypt.checkpw(provided_password.encode("utf-8"), stored_password.encode("utf-8"))
        except ValueError:
            logger.error("Stored password hash is malformed")
            return False

    # --- One-time codes --------------------------------------------------------
    def generate_code(self) -> str:
        """Return a random numeric code of ``code_length`` digits."""
        return "".join(str(secrets.randbelow(10)) for _ in range(self.code_length))

    @staticmethod
    def codes_match(stored: Optional[str], provided: Optional[str]) -> bool:
        if not stored or provided is None:
            return False
        return secrets.compare_digest(str(stored), str(provided))

    # --- API tokens ------------------------------------------------------------
    @staticmethod
    def hash_token(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def issue_token(self, user_id: int, *, name: str = "api") -> Dict[str, Any]:
        """Create a token for *user_id*; the plain value is only returned here."""
        token = secrets.token_urlsafe(TOKEN_BYTES)
        expires_at = iso_in(timedelta(days=self.token_lifetime_days))
        self.user_repo.store_token(
            user_id=user_id,
            token_hash=self.hash_token(token),
            expires_at=expires_at,
            name=name,
        )
        return {"type": "bearer", "token": token, "expires_at": expires_at}

    def resolve_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the public user owning *token*, or None if unknown / expired."""
        if not token:
            return None
        token_hash = self.hash_token(token)
        record = self.user_repo.find_token(token_hash)
        if not record:
            return None

        expires_at = coerce_datetime(record.get("expires_at"))
        if expires_at is None or expires_at <= utc_now():
            logger.info("Expired token presented for user %s", record.get("user_id"))
            self.user_repo.revoke_token(token_hash)
            return None

        return self.user_repo.get_user(record["user_id"])

    def revoke_token(self, token: str) -> bool:
        return self.user_repo.revoke_token(self.hash_token(token))

    def revoke_user_tokens(self, user_id: int, *, keep_token: Optional[str] = None) -> int:
        keep_hash = self.hash_token(keep_token) if keep_token else None
        return self.user_repo.revoke_user_tokens(user_id, keep_hash=keep_hash)

    def prune_expired_tokens(self) -> int:
        removed = self.user_repo.prune_expired_tokens(iso_now())
        if removed:
            logger.info("Pruned %d expired API token(s)", removed)
        return removed

    # --- Audit -----------------------------------------------------------------
    def audit(self, actor: Any, action: str, outcome: str, **metadata: Any) -> None:
        if self.audit_logger:
            self.audit_logger.log_event(
                actor=str(actor),
                action=action,
                resource="user",
                outcome=outcome,
                **metadata,
            )
