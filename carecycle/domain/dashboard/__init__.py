"""
Dashboard Domain - aggregates, trends and live change events
"""

from .router import router

__all__ = ["router"]
