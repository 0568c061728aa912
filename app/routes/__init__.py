"""
Routes package.
"""

from .auth import router as auth_router
from .training import router as training_router

__all__ = [
    "auth_router",
    "training_router",
]
