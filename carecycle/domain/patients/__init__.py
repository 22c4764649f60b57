"""
Patients Domain - registration and patient records
"""

from .router import router

__all__ = ["router"]
