"""
FastAPI router for the current user.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from common.utils import success_response
from auction_app.dependencies import get_audit_writer, require_auth
from auction_app.schemas.user import LoginHistoryResponse, UserProfileResponse
from auction_app.services.auth.geo_resolver import merge_geo_record
from auction_app.services.auth.login_audit import LoginAuditWriter
from auction_app.services.user.user_service import public_profile

router = APIRouter(prefix="/user", tags=["user"])


@router.get("", response_model=UserProfileResponse)
async def get_current_user(
    user: Annotated[dict, Depends(require_auth)],
):
    """Return the authenticated user's profile."""
    return success_response(public_profile(user))


@router.get("/logins", response_model=LoginHistoryResponse)
async def get_login_history(
    user: Annotated[dict, Depends(require_auth)],
    audit_writer: Annotated[LoginAuditWriter, Depends(get_audit_writer)],
    limit: int = Query(20, ge=1, le=100),
):
    """Return the authenticated user's most recent logins."""
    events = await audit_writer.list_for_user(user["_id"], limit=limit)
    return success_response([
        {
            "id": str(event["_id"]),
            "ipAddress": event.get("ipAddress"),
            "userAgent": event.get("userAgent"),
            "location": merge_geo_record(event.get("location")),
            "loginAt": event["loginAt"].isoformat() if event.get("loginAt") else None,
        }
        for event in events
    ])
