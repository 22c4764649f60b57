"""
Care Items Domain - procedure and medication catalog
"""

from .router import router

__all__ = ["router"]
