"""
Online auction application settings.

Extends the base settings with auction-specific configuration.
"""

from typing import Optional
from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Auction-specific settings."""

    # ==========================================================================
    # Session Cookie
    # ==========================================================================
    AUTH_COOKIE_NAME: str = "auth_token"

    # ==========================================================================
    # Geo Lookup
    # ==========================================================================
    # HTTP lookup, "{ip}" is substituted with the client address
    GEO_LOOKUP_URL: str = "http://ip-api.com/json/{ip}?fields=status,message,country,regionName,city,isp"
    GEO_LOOKUP_TIMEOUT_SECONDS: float = 3.0

    # Local MaxMind GeoLite2 City database; takes precedence over the HTTP lookup
    GEOIP_DATABASE_PATH: Optional[str] = None

    # ==========================================================================
    # Users
    # ==========================================================================
    DEFAULT_AVATAR_URL: str = "https://avatar.iran.liara.run/public/7"
    DEFAULT_USER_ROLE: str = "user"

    def validate_required(self) -> None:
        super().validate_required()
        if self.GEO_LOOKUP_TIMEOUT_SECONDS <= 0:
            raise ValueError("Configuration errors:\n- GEO_LOOKUP_TIMEOUT_SECONDS must be positive")


# Global settings instance
settings = Settings()
