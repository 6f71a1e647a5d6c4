"""
FastAPI router for Auth endpoints.

Provides login, signup and logout. Sessions are JWTs carried in an
http-only cookie.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from common.auth import JWTAuth, PasswordHasher
from common.utils import success_response
from auction_app.dependencies import (
    get_audit_writer,
    get_client_ip,
    get_cookie_policy,
    get_geo_resolver,
    get_jwt_auth,
    get_password_hasher,
    get_user_agent,
    get_user_service,
)
from auction_app.pipelines import auth as auth_pipelines
from auction_app.schemas.auth import LoginRequest, SignupRequest, MessageResponse
from auction_app.services.auth.cookie_policy import SessionCookiePolicy
from auction_app.services.auth.geo_resolver import GeoResolver
from auction_app.services.auth.login_audit import LoginAuditWriter
from auction_app.services.user.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=MessageResponse)
async def login(
    request: Request,
    body: LoginRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
    password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    jwt_auth: Annotated[JWTAuth, Depends(get_jwt_auth)],
    geo_resolver: Annotated[GeoResolver, Depends(get_geo_resolver)],
    audit_writer: Annotated[LoginAuditWriter, Depends(get_audit_writer)],
    cookie_policy: Annotated[SessionCookiePolicy, Depends(get_cookie_policy)],
):
    """
    Login to an existing account.

    Verifies the password, records the login and sets the session cookie.
    """
    result = await auth_pipelines.login_pipeline(
        user_service=user_service,
        password_hasher=password_hasher,
        jwt_auth=jwt_auth,
        geo_resolver=geo_resolver,
        audit_writer=audit_writer,
        email=body.email,
        password=body.password,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )

    response = JSONResponse(
        status_code=status.HTTP_200_OK,
        content=success_response(message="Login successful"),
    )
    cookie_policy.attach(response, result["token"])
    return response


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
async def signup(
    request: Request,
    body: SignupRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
    password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    jwt_auth: Annotated[JWTAuth, Depends(get_jwt_auth)],
    geo_resolver: Annotated[GeoResolver, Depends(get_geo_resolver)],
    audit_writer: Annotated[LoginAuditWriter, Depends(get_audit_writer)],
    cookie_policy: Annotated[SessionCookiePolicy, Depends(get_cookie_policy)],
):
    """
    Register a new user account and sign it in.
    """
    result = await auth_pipelines.signup_pipeline(
        user_service=user_service,
        password_hasher=password_hasher,
        jwt_auth=jwt_auth,
        geo_resolver=geo_resolver,
        audit_writer=audit_writer,
        name=body.name,
        email=body.email,
        password=body.password,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )

    response = JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=success_response(message="User registered successfully"),
    )
    cookie_policy.attach(response, result["token"])
    return response


@router.post("/logout", response_model=MessageResponse)
async def logout(
    cookie_policy: Annotated[SessionCookiePolicy, Depends(get_cookie_policy)],
):
    """
    Logout from the current browser.

    Only clears the cookie; a copied token stays valid until it expires.
    """
    response = JSONResponse(
        status_code=status.HTTP_200_OK,
        content=success_response(message="Logged out successfully"),
    )
    cookie_policy.clear(response)
    return response
