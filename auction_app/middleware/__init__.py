"""Request middleware."""

from auction_app.middleware.auth import AuthMiddleware

__all__ = ["AuthMiddleware"]
