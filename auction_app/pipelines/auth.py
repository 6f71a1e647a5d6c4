"""
Auth pipeline functions.

Stateless orchestration logic for the login and signup flows. Each pipeline
returns the issued token; the router attaches the cookie only when the whole
flow succeeded.
"""

import logging
from typing import TYPE_CHECKING

from starlette.concurrency import run_in_threadpool

from common.auth import JWTAuth, PasswordHasher
from common.utils.exceptions import (
    APIException,
    AuthenticationError,
    ConflictError,
    DependencyError,
    NotFoundError,
    PartialAuditError,
    ValidationError,
)
from auction_app.services.auth.geo_resolver import GeoResolver
from auction_app.services.auth.login_audit import LoginAuditWriter
from auction_app.services.user.user_service import normalize_email

if TYPE_CHECKING:
    from auction_app.services.user.user_service import UserService

logger = logging.getLogger(__name__)

LOGIN_SERVER_ERROR = "Server error during login"
SIGNUP_SERVER_ERROR = "Server error during signup"


def _present(*values) -> bool:
    return all(isinstance(v, str) and v.strip() for v in values)


async def login_pipeline(
    user_service: "UserService",
    password_hasher: PasswordHasher,
    jwt_auth: JWTAuth,
    geo_resolver: GeoResolver,
    audit_writer: LoginAuditWriter,
    email: str,
    password: str,
    ip_address: str,
    user_agent: str,
) -> dict:
    """
    Orchestrates the user login flow.

    Returns:
        dict with user, token and the recorded login event

    Raises:
        ValidationError: email or password missing
        NotFoundError: no user with that email
        AuthenticationError: wrong password
        DependencyError: database or hashing failure
    """
    if not _present(email, password):
        raise ValidationError()

    try:
        user = await user_service.get_user_by_email(email)
        if not user:
            raise NotFoundError()

        password_valid = await run_in_threadpool(
            password_hasher.verify, password, user.get("password") or ""
        )
        if not password_valid:
            logger.info(f"Rejected password for user {user['_id']}")
            raise AuthenticationError()

        token = jwt_auth.issue(user["_id"], user.get("role"))

        geo = await geo_resolver.lookup(ip_address)
        if not geo.resolved:
            logger.warning(f"Geo lookup unresolved (login): {geo.error}")

        event = await audit_writer.record_login(
            user_id=user["_id"],
            ip_address=ip_address,
            user_agent=user_agent,
            geo=geo.record,
        )
    except PartialAuditError as e:
        raise PartialAuditError(e.failed, message=LOGIN_SERVER_ERROR) from e
    except APIException:
        raise
    except Exception as e:
        logger.exception(f"Login error: {e!r}")
        raise DependencyError(LOGIN_SERVER_ERROR) from e

    logger.info(f"User logged in: {user['_id']}")
    return {"user": user, "token": token, "event": event}


async def signup_pipeline(
    user_service: "UserService",
    password_hasher: PasswordHasher,
    jwt_auth: JWTAuth,
    geo_resolver: GeoResolver,
    audit_writer: LoginAuditWriter,
    name: str,
    email: str,
    password: str,
    ip_address: str,
    user_agent: str,
) -> dict:
    """
    Orchestrates the user signup flow.

    Returns:
        dict with user, token and the recorded login event

    Raises:
        ValidationError: name, email or password missing
        ConflictError: email already registered
        DependencyError: database or hashing failure
    """
    if not _present(name, email, password):
        raise ValidationError()

    email = normalize_email(email)

    try:
        existing_user = await user_service.get_user_by_email(email)
        if existing_user:
            raise ConflictError()

        geo = await geo_resolver.lookup(ip_address)
        if not geo.resolved:
            logger.warning(f"Geo lookup unresolved (signup): {geo.error}")

        password_hash = await run_in_threadpool(password_hasher.hash, password)

        user = await user_service.create_user(
            name=name,
            email=email,
            password_hash=password_hash,
            ip_address=ip_address,
            user_agent=user_agent,
            location=geo.record,
        )

        try:
            event = await audit_writer.record(
                user_id=user["_id"],
                ip_address=ip_address,
                user_agent=user_agent,
                geo=geo.record,
            )
        except Exception as e:
            logger.error(f"Failed to write login event for new user {user['_id']}: {e!r}")
            raise PartialAuditError(["audit"], message=SIGNUP_SERVER_ERROR) from e

        token = jwt_auth.issue(user["_id"], user.get("role"))
    except APIException:
        raise
    except Exception as e:
        logger.exception(f"Signup error: {e!r}")
        raise DependencyError(SIGNUP_SERVER_ERROR) from e

    logger.info(f"User registered: {user['_id']}")
    return {"user": user, "token": token, "event": event}
