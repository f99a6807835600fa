"""
Users API Blueprint
===================

Account lifecycle endpoints organized into sub-modules:
- accounts.py: listing, registration, verification, login/logout, profile
- recovery.py: password-recovery codes and password reset

All routes are registered under /api/v1/users.
"""

from __future__ import annotations

import logging

from flask import Blueprint

users_api = Blueprint("users_api", __name__)
logger = logging.getLogger("users_api")

# Import sub-modules to register their routes on users_api
from . import accounts, recovery

_ = (accounts, recovery)

__all__ = ["users_api"]
