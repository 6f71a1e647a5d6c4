"""
API Routers.

All routers are imported here for easy access.
"""

from auction_app.routers.auth import router as auth_router
from auction_app.routers.user import router as user_router

__all__ = [
    "auth_router",
    "user_router",
]
