"""
API v1 package.

Contains versioned REST routes for the registration service.
"""

from src.api.v1.routes import router

__all__ = ["router"]
