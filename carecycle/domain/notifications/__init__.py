"""
Notifications Domain - upcoming due dates as notifications
"""

from .router import router

__all__ = ["router"]
