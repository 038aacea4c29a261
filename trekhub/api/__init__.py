# API endpoints and routers

from .auth_endpoints import router as auth_router
from .treks_endpoints import router as treks_router

__all__ = [
    "auth_router",
    "treks_router",
]
