"""
Configuration for the Repair Planner.

Settings come from config/base.yaml, environment variables and an optional
.env file. See config/settings.py.
"""

from .settings import PlannerSettings, get_settings, reset_settings

__all__ = ["PlannerSettings", "get_settings", "reset_settings"]
