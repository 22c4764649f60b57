"""
Items Domain - schedulable tests and injections
"""

from .router import router

__all__ = ["router"]
