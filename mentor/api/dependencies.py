"""Request identity resolution.

Authentication is handled upstream; by the time a request reaches this
service the caller's id is forwarded in the X-User-Id header. Pre-onboarding
clients without a session may instead pass user_id in the query or body.
"""

from __future__ import annotations

from fastapi import Header, HTTPException, Query, Request, status
from loguru import logger


def get_forwarded_user_id(
    x_user_id: str | None = Header(default=None),
    user_id: str | None = Query(default=None),
) -> str | None:
    """FastAPI dependency returning the forwarded user id, if any."""
    return x_user_id or user_id


def require_user_id(request: Request, forwarded: str | None, body_user_id: str | None = None) -> str:
    """Resolve the caller's user id or reject the request.

    Raises:
        HTTPException: 401 if no user id is available
    """
    resolved = forwarded or body_user_id
    if not resolved:
        logger.warning(f"Missing user id: Path: {request.url.path}, Method: {request.method}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return resolved
