"""
FastAPI dependencies for the auction application.

Services are built once at startup by init_all_services() and handed out
through the getters below.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import JWTAuth, PasswordHasher
from auction_app.config import Settings, settings as default_settings
from auction_app.middleware.auth import AuthMiddleware
from auction_app.services.auth.cookie_policy import SessionCookiePolicy
from auction_app.services.auth.geo_resolver import GeoResolver
from auction_app.services.auth.login_audit import LoginAuditWriter
from auction_app.services.user.user_service import UserService

logger = logging.getLogger(__name__)

_password_hasher: Optional[PasswordHasher] = None
_jwt_auth: Optional[JWTAuth] = None
_cookie_policy: Optional[SessionCookiePolicy] = None
_geo_resolver: Optional[GeoResolver] = None
_audit_writer: Optional[LoginAuditWriter] = None
_user_service: Optional[UserService] = None
_auth_middleware: Optional[AuthMiddleware] = None


def init_all_services(
    db: AsyncIOMotorDatabase,
    app_settings: Optional[Settings] = None,
    geo_resolver: Optional[GeoResolver] = None,
) -> None:
    """
    Initialize all services with database and settings.

    Called once at application startup.

    Args:
        db: MongoDB database connection
        app_settings: Settings to use (defaults to the global instance)
        geo_resolver: Pre-built resolver (tests pass one with a mock transport)

    Raises:
        ValueError: If the signing secret is missing
    """
    global _password_hasher, _jwt_auth, _cookie_policy, _geo_resolver
    global _audit_writer, _user_service, _auth_middleware

    cfg = app_settings or default_settings

    _password_hasher = PasswordHasher()
    _jwt_auth = JWTAuth(
        secret=cfg.JWT_SECRET,
        algorithm=cfg.JWT_ALGORITHM,
        expire_days=cfg.JWT_EXPIRE_DAYS,
    )
    _cookie_policy = SessionCookiePolicy(
        cookie_name=cfg.AUTH_COOKIE_NAME,
        secure=cfg.is_production(),
        max_age_seconds=_jwt_auth.max_age_seconds,
    )
    _geo_resolver = geo_resolver or GeoResolver(
        lookup_url=cfg.GEO_LOOKUP_URL,
        timeout_seconds=cfg.GEO_LOOKUP_TIMEOUT_SECONDS,
        database_path=cfg.GEOIP_DATABASE_PATH,
    )
    _audit_writer = LoginAuditWriter(db=db)
    _user_service = UserService(
        db=db,
        default_avatar=cfg.DEFAULT_AVATAR_URL,
        default_role=cfg.DEFAULT_USER_ROLE,
    )
    _auth_middleware = AuthMiddleware(
        jwt_auth=_jwt_auth,
        cookie_policy=_cookie_policy,
        user_service=_user_service,
    )
    logger.info("Auth services initialized")


def shutdown_services() -> None:
    """Release resources held by services."""
    if _geo_resolver is not None:
        _geo_resolver.close()


def _require(service, name: str):
    if service is None:
        raise RuntimeError(f"{name} not initialized. Call init_all_services first.")
    return service


def get_password_hasher() -> PasswordHasher:
    return _require(_password_hasher, "PasswordHasher")


def get_jwt_auth() -> JWTAuth:
    return _require(_jwt_auth, "JWTAuth")


def get_cookie_policy() -> SessionCookiePolicy:
    return _require(_cookie_policy, "SessionCookiePolicy")


def get_geo_resolver() -> GeoResolver:
    return _require(_geo_resolver, "GeoResolver")


def get_audit_writer() -> LoginAuditWriter:
    return _require(_audit_writer, "LoginAuditWriter")


def get_user_service() -> UserService:
    return _require(_user_service, "UserService")


def get_auth_middleware() -> AuthMiddleware:
    return _require(_auth_middleware, "AuthMiddleware")


async def require_auth(
    request: Request,
    auth_middleware: Annotated[AuthMiddleware, Depends(get_auth_middleware)],
) -> dict:
    """
    Dependency that requires a valid session cookie.

    Usage:
        @router.get("/protected")
        async def protected_route(user: Annotated[dict, Depends(require_auth)]):
            return {"user_id": str(user["_id"])}
    """
    return await auth_middleware.require_auth(request)


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request."""
    return GeoResolver.extract_client_address(request)


def get_user_agent(request: Request) -> str:
    """Extract User-Agent from request."""
    return request.headers.get("User-Agent", "")
