"""API Routers package."""

from edugen.routers import exercises as exercises_router
from edugen.routers import health as health_router

__all__ = ["exercises_router", "health_router"]
