"""Plan adjustment API routes.

Coach-initiated or automated changes to a user's current plan. Each route
computes a patch with the rule engine and stores the result as a new plan
version.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from mentor.api.dependencies import get_forwarded_user_id, require_user_id
from mentor.db.session import get_session
from mentor.plans import adjustments
from mentor.plans.errors import NoCurrentPlanError, PlanVersionConflictError
from mentor.plans.materialize import get_current_nutrition_version, get_current_training_version
from mentor.plans.profile import Injury

router = APIRouter(prefix="/api/plan", tags=["plan"])


class SwapRequest(BaseModel):
    day: str = "Mon"
    from_name: str
    to_name: str


class DaysPerWeekRequest(BaseModel):
    days_per_week: int = Field(ge=1, le=7)


class InjuriesRequest(BaseModel):
    injuries: list[Injury]


class KcalRequest(BaseModel):
    kcal: int = Field(gt=0)


class AdjustmentResponse(BaseModel):
    ok: bool = True
    applied: bool = True
    summary: str
    version: int | None = None


def _run(request: Request, forwarded: str | None, action, *args) -> AdjustmentResponse:
    user_id = require_user_id(request, forwarded)
    try:
        with get_session() as session:
            result = action(session, user_id, *args)
    except NoCurrentPlanError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except PlanVersionConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return AdjustmentResponse(applied=result.applied, summary=result.summary, version=result.version)


@router.get("/current")
def current_plan(
    request: Request,
    forwarded: str | None = Depends(get_forwarded_user_id),
):
    """Get the current training and nutrition versions."""
    user_id = require_user_id(request, forwarded)
    with get_session() as session:
        training = get_current_training_version(session, user_id)
        nutrition = get_current_nutrition_version(session, user_id)
        if training is None and nutrition is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No current plan")
        return {
            "training": {"version": training.version, "reason": training.reason, "days": training.days}
            if training
            else None,
            "nutrition": {
                "version": nutrition.version,
                "reason": nutrition.reason,
                "kcal": nutrition.kcal,
                "protein_grams": nutrition.protein_grams,
                "carbs_grams": nutrition.carbs_grams,
                "fat_grams": nutrition.fat_grams,
            }
            if nutrition
            else None,
        }


@router.post("/swap", response_model=AdjustmentResponse)
def swap(request: Request, body: SwapRequest, forwarded: str | None = Depends(get_forwarded_user_id)):
    return _run(request, forwarded, adjustments.swap_exercise, body.day, body.from_name, body.to_name)


@router.post("/days-per-week", response_model=AdjustmentResponse)
def days_per_week(request: Request, body: DaysPerWeekRequest, forwarded: str | None = Depends(get_forwarded_user_id)):
    return _run(request, forwarded, adjustments.set_days_per_week, body.days_per_week)


@router.post("/progression", response_model=AdjustmentResponse)
def progression(request: Request, forwarded: str | None = Depends(get_forwarded_user_id)):
    return _run(request, forwarded, adjustments.progress)


@router.post("/deload", response_model=AdjustmentResponse)
def deload(request: Request, forwarded: str | None = Depends(get_forwarded_user_id)):
    return _run(request, forwarded, adjustments.deload)


@router.post("/injuries", response_model=AdjustmentResponse)
def injuries(request: Request, body: InjuriesRequest, forwarded: str | None = Depends(get_forwarded_user_id)):
    """Swap exercises for reported injuries; applied=false when nothing needed changing."""
    return _run(request, forwarded, adjustments.adjust_for_injuries, body.injuries)


@router.post("/nutrition/from-profile", response_model=AdjustmentResponse)
def nutrition_from_profile(request: Request, forwarded: str | None = Depends(get_forwarded_user_id)):
    return _run(request, forwarded, adjustments.nutrition_from_stored_profile)


@router.post("/nutrition/kcal", response_model=AdjustmentResponse)
def nutrition_kcal(request: Request, body: KcalRequest, forwarded: str | None = Depends(get_forwarded_user_id)):
    return _run(request, forwarded, adjustments.set_kcal, body.kcal)
