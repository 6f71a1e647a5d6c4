"""Auth services."""

from auction_app.services.auth.geo_resolver import (
    GeoRecord,
    GeoLookupResult,
    GeoResolver,
    default_geo_record,
)
from auction_app.services.auth.cookie_policy import SessionCookiePolicy
from auction_app.services.auth.login_audit import LoginAuditWriter, LoginEvent

__all__ = [
    "GeoRecord",
    "GeoLookupResult",
    "GeoResolver",
    "default_geo_record",
    "SessionCookiePolicy",
    "LoginAuditWriter",
    "LoginEvent",
]
