"""Pre-onboarding API routes.

HTTP boundary for the pre-onboarding conversation. Contains only FastAPI
routing logic. All business logic lives in mentor.onboarding.service.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from mentor.api.dependencies import get_forwarded_user_id, require_user_id
from mentor.db.session import get_session
from mentor.onboarding.errors import ConsentRequiredError, PreviewNotFoundError
from mentor.onboarding.schemas import (
    ConsentRequest,
    ConsentResponse,
    ConvertRequest,
    ConvertResponse,
    MessageRequest,
    MessageResponse,
    PreviewResponse,
    StartRequest,
    StartResponse,
    StateResponse,
)
from mentor.onboarding.service import (
    convert,
    get_preview,
    get_state,
    handle_message,
    record_consent,
    start_preonboarding,
)
from mentor.plans.errors import PlanVersionConflictError

router = APIRouter(prefix="/api/preonboarding", tags=["preonboarding"])


@router.post("/start", response_model=StartResponse)
def start(
    request: Request,
    body: StartRequest | None = None,
    forwarded: str | None = Depends(get_forwarded_user_id),
):
    """Start the pre-onboarding conversation and return the coach's opener."""
    user_id = require_user_id(request, forwarded, body.user_id if body else None)
    with get_session() as session:
        return start_preonboarding(session, user_id)


@router.post("/message", response_model=MessageResponse)
def message(
    request: Request,
    body: MessageRequest,
    forwarded: str | None = Depends(get_forwarded_user_id),
):
    """Record one onboarding answer.

    Generates (or refreshes) the plan preview once enough of the profile
    is known.
    """
    user_id = require_user_id(request, forwarded, body.user_id)
    try:
        with get_session() as session:
            return handle_message(session, user_id, body.message, body.patch)
    except ConsentRequiredError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.post("/consent", response_model=ConsentResponse)
def consent(
    request: Request,
    body: ConsentRequest,
    forwarded: str | None = Depends(get_forwarded_user_id),
):
    user_id = require_user_id(request, forwarded, body.user_id)
    with get_session() as session:
        return record_consent(session, user_id, body.health_data)


@router.get("/preview", response_model=PreviewResponse)
def preview(
    request: Request,
    forwarded: str | None = Depends(get_forwarded_user_id),
):
    user_id = require_user_id(request, forwarded)
    try:
        with get_session() as session:
            return PreviewResponse(preview=get_preview(session, user_id))
    except PreviewNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/convert", response_model=ConvertResponse)
def convert_lead(
    request: Request,
    body: ConvertRequest,
    forwarded: str | None = Depends(get_forwarded_user_id),
):
    """Convert to trial/subscription and seed the first plan versions from the preview."""
    user_id = require_user_id(request, forwarded, body.user_id)
    try:
        with get_session() as session:
            return convert(session, user_id, body.plan_type)
    except PlanVersionConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.get("/state", response_model=StateResponse)
def state(
    request: Request,
    forwarded: str | None = Depends(get_forwarded_user_id),
):
    user_id = require_user_id(request, forwarded)
    with get_session() as session:
        return get_state(session, user_id)
