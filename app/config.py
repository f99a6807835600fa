"""
Configuration for the Healthy Habits backend
============================================
Main application runtime settings and outbound service configuration.
Sets up the logging configuration as well.
"""

import os
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any

from dotenv import load_dotenv

from app.domain.exceptions import ConfigurationError


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be an integer.") from None


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be a number.") from None


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("HEALTHY_ENV", "development"))
    secret_key: str = field(default_factory=lambda: os.getenv("HEALTHY_SECRET_KEY", "HealthyDevSecretKey"))
    database_path: str = field(default_factory=lambda: os.getenv("HEALTHY_DATABASE_PATH", "database/healthy.db"))

    DEBUG: bool = field(default_factory=lambda: _env_bool("HEALTHY_DEBUG", False))
    log_level: str = field(default_factory=lambda: os.getenv("HEALTHY_LOG_LEVEL", "INFO"))
    log_path: str = field(default_factory=lambda: os.getenv("HEALTHY_LOG_PATH", "logs/healthy.log"))
    audit_log_path: str = field(default_factory=lambda: os.getenv("HEALTHY_AUDIT_LOG_PATH", "logs/audit.log"))

    # Accounts and tokens
    token_lifetime_days: int = field(default_factory=lambda: _env_int("HEALTHY_TOKEN_LIFETIME_DAYS", 3))
    verification_code_length: int = field(default_factory=lambda: _env_int("HEALTHY_VERIFICATION_CODE_LENGTH", 4))
    password_min_length: int = field(default_factory=lambda: _env_int("HEALTHY_PASSWORD_MIN_LENGTH", 8))

    # Broker REST gateway
    broker_url: str = field(default_factory=lambda: os.getenv("HEALTHY_BROKER_URL", "http://localhost:18083/api/v5"))
    broker_api_key: str = field(default_factory=lambda: os.getenv("HEALTHY_BROKER_API_KEY", ""))
    broker_secret_key: str = field(default_factory=lambda: os.getenv("HEALTHY_BROKER_SECRET_KEY", ""))
    broker_verify_tls: bool = field(default_factory=lambda: _env_bool("HEALTHY_BROKER_VERIFY_TLS", True))
    broker_timeout: float = field(default_factory=lambda: _env_float("HEALTHY_BROKER_TIMEOUT", 10.0))

    # Nutrition lookup API
    nutrition_url: str = field(
        default_factory=lambda: os.getenv("HEALTHY_NUTRITION_URL", "https://api.edamam.com/api")
    )
    nutrition_app_id: str = field(default_factory=lambda: os.getenv("HEALTHY_NUTRITION_APP_ID", ""))
    nutrition_app_key: str = field(default_factory=lambda: os.getenv("HEALTHY_NUTRITION_APP_KEY", ""))
    nutrition_analysis_app_id: str = field(
        default_factory=lambda: os.getenv("HEALTHY_NUTRITION_ANALYSIS_APP_ID", "")
    )
    nutrition_analysis_app_key: str = field(
        default_factory=lambda: os.getenv("HEALTHY_NUTRITION_ANALYSIS_APP_KEY", "")
    )
    nutrition_timeout: float = field(default_factory=lambda: _env_float("HEALTHY_NUTRITION_TIMEOUT", 15.0))

    # Outgoing mail (verification / recovery codes)
    smtp_host: str = field(default_factory=lambda: os.getenv("HEALTHY_SMTP_HOST", ""))
    smtp_port: int = field(default_factory=lambda: _env_int("HEALTHY_SMTP_PORT", 587))
    smtp_username: str = field(default_factory=lambda: os.getenv("HEALTHY_SMTP_USERNAME", ""))
    smtp_password: str = field(default_factory=lambda: os.getenv("HEALTHY_SMTP_PASSWORD", ""))
    smtp_use_tls: bool = field(default_factory=lambda: _env_bool("HEALTHY_SMTP_USE_TLS", True))
    smtp_from_name: str = field(default_factory=lambda: os.getenv("HEALTHY_SMTP_FROM_NAME", "Healthy Habits"))

    # Upload / request size limits
    max_upload_mb: int = field(default_factory=lambda: _env_int("HEALTHY_MAX_UPLOAD_MB", 2))

    # Default insecure secret key - used only for detection
    _DEFAULT_SECRET_KEY: str = field(default="HealthyDevSecretKey", init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.environment == "production" and self.secret_key == self._DEFAULT_SECRET_KEY:
            raise RuntimeError(
                "SECURITY ERROR: Cannot use default secret key in production!\n"
                "Set HEALTHY_SECRET_KEY environment variable to a secure random value."
            )
        if self.verification_code_length < 1:
            raise ConfigurationError("HEALTHY_VERIFICATION_CODE_LENGTH must be at least 1.")
        if self.token_lifetime_days < 1:
            raise ConfigurationError("HEALTHY_TOKEN_LIFETIME_DAYS must be at least 1.")

    def as_flask_config(self) -> dict[str, Any]:
        """Render configuration values for Flask application."""
        return {
            "ENV": self.environment,
            "SECRET_KEY": self.secret_key,
            "DATABASE_PATH": self.database_path,
            "AUDIT_LOG_PATH": self.audit_log_path,
            "DEBUG": self.DEBUG,
            "MAX_CONTENT_LENGTH": self.max_upload_mb * 1024 * 1024,
            "JSON_AS_ASCII": False,
        }


def setup_logging(debug: bool = False, *, level: str = "INFO", log_path: str = "logs/healthy.log") -> None:
    """Setup logging configuration."""
    import logging
    import sys
    from logging.handlers import RotatingFileHandler

    log_level = logging.DEBUG if debug else logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    # Root logger
    root = logging.getLogger()
    root.setLevel(log_level)

    # Keep existing handlers but avoid adding duplicates when create_app is called multiple times
    has_console = any(getattr(h, "name", "") == "healthy_console" for h in root.handlers)
    has_file = any(getattr(h, "name", "") == "healthy_file" for h in root.handlers)
    added_handler = False

    stream = sys.stdout
    with suppress(AttributeError, ValueError):
        stream.reconfigure(encoding="utf-8", errors="replace")
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not has_console:
        console_handler = logging.StreamHandler(stream=stream)
        console_handler.name = "healthy_console"
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        added_handler = True

    if not has_file:
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.name = "healthy_file"
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        added_handler = True

    for handler in root.handlers:
        if getattr(handler, "name", "") in {"healthy_console", "healthy_file"}:
            handler.setLevel(log_level)

    if added_handler:
        root.info("Logging initialized at level: %s", logging.getLevelName(log_level))

    if _env_bool("HEALTHY_SILENCE_WERKZEUG", True):
        logging.getLogger("werkzeug").setLevel(logging.WARNING)
    # urllib3 logs every outbound connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def load_config() -> AppConfig:
    """Helper for callers to load and validate configuration.

    Values from a ``.env`` file in the working directory are loaded first;
    variables already present in the environment win.
    """
    load_dotenv(override=False)
    return AppConfig()
