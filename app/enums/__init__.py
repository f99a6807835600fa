"""
Enums Module
============

This module provides enumeration types for the Healthy Habits application.
Enums ensure type safety and consistency across the codebase.
"""

from app.enums.device import DeviceCategory, GatewayMetric, GoalKind

__all__ = [
    "DeviceCategory",
    "GatewayMetric",
    "GoalKind",
]
