"""User services."""

from auction_app.services.user.user_service import UserService, normalize_email, public_profile

__all__ = ["UserService", "normalize_email", "public_profile"]
