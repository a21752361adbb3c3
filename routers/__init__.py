# routers/__init__.py

from .profiles import router as profiles_router
from .health import router as health_router

__all__ = ["profiles_router", "health_router"]
