"""
Schedules Domain - due schedules and completion tracking
"""

from .router import router

__all__ = ["router"]
