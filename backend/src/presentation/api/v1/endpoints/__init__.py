"""
API V1 Endpoints Package
Exports routers used by main app
"""
from .auth import router as auth_router
from .users import router as users_router
from .jobs import router as jobs_router
from .applications import router as applications_router
from .notifications import router as notifications_router
from .profiles import router as profiles_router
from .cv import router as cv_router
from .enhance import router as enhance_router
from .matching import router as matching_router

__all__ = [
    "auth_router",
    "users_router",
    "jobs_router",
    "applications_router",
    "notifications_router",
    "profiles_router",
    "cv_router",
    "enhance_router",
    "matching_router",
]
