import json
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict


class AuditLogger:
    """Structured audit logger that writes append-only JSON records.

    One record per security-relevant action (register, login, logout,
    password changes, account deletion, device provisioning).
    """

    def __init__(self, log_path: str, level: str = "INFO") -> None:
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger("healthy.audit")
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.propagate = False

        target = os.path.abspath(str(self.log_path))
        for handler in list(self.logger.handlers):
            if isinstance(handler, RotatingFileHandler) and handler.baseFilename != target:
                # A new app instance points the audit trail somewhere else.
                self.logger.removeHandler(handler)
                handler.close()

        if not any(isinstance(handler, RotatingFileHandler) for handler in self.logger.handlers):
            handler = RotatingFileHandler(
                filename=str(self.log_path),
                maxBytes=5 * 1024 * 1024,
                backupCount=10,
                encoding="utf-8",
                delay=True,
            )
            formatter = logging.Formatter(
                fmt="%(asctime)sZ | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_event(self, actor: str, action: str, resource: str, outcome: str, **metadata: Any) -> None:
        payload: Dict[str, Any] = {
            "actor": actor,
            "action": action,
            "resource": resource,
            "outcome": outcome,
        }
        if metadata:
            payload["meta"] = metadata

        self.logger.info(json.dumps(payload, default=str))
