from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.security import CurrentUser
from schemas.common import COMMON_ERRORS
from services import analytics as analytics_service
from services.academic_records import list_semesters, to_grade_groups, user_scale
from services.grade_aggregator import (
    classify_requirement,
    cumulative_cgpa,
    required_average_for_target,
)
from utils.exceptions import AppError

router = APIRouter(prefix="/analytics", tags=["analytics"], responses=COMMON_ERRORS)


def _round(value, places: int = 2):
    return round(value, places) if isinstance(value, float) else value


def _rounded(data: dict) -> dict:
    return {key: _round(value) for key, value in data.items()}


def _user_groups(db: Session, user):
    return to_grade_groups(list_semesters(db, user))


# ✅ [CGPA] across every semester
@router.get("/cgpa")
def read_cgpa(user: CurrentUser, db: Session = Depends(get_db)):
    semesters = list_semesters(db, user)
    groups = to_grade_groups(semesters)
    result = cumulative_cgpa(groups)
    graded_count = sum(1 for g in groups for item in g.items if item.grade_point is not None)
    scale, maximum = user_scale(user)

    return {
        "success": True,
        "data": {
            "cgpa": round(result.cgpa, 2),
            "total_credits": round(result.total_credits, 2),
            "graded_subjects": graded_count,
            "semester_count": len(semesters),
            "grading_scale": scale,
            "scale_max": maximum,
        },
    }


# ✅ [TREND] SGPA and running CGPA per semester
@router.get("/trend")
def read_trend(user: CurrentUser, db: Session = Depends(get_db)):
    trend = analytics_service.semester_trend(_user_groups(db, user))
    return {"success": True, "data": [_rounded(point) for point in trend]}


# ✅ [DISTRIBUTION] graded subjects per grade-point bucket
@router.get("/distribution")
def read_distribution(user: CurrentUser, db: Session = Depends(get_db)):
    groups = _user_groups(db, user)
    scale, _ = user_scale(user)
    items = [item for g in groups for item in g.items]
    distribution = analytics_service.grade_distribution(items, scale)
    return {
        "success": True,
        "data": {"grading_scale": scale, "total": sum(distribution.values()), "distribution": distribution},
    }


# ✅ [SUMMARY] consistency / trend / streaks
@router.get("/summary")
def read_summary(user: CurrentUser, db: Session = Depends(get_db)):
    _, maximum = user_scale(user)
    summary = analytics_service.performance_summary(_user_groups(db, user), maximum)
    return {"success": True, "data": _rounded(summary)}


# ✅ [GOAL] progress toward a target CGPA (query param or the stored target)
@router.get("/goal")
def read_goal(
    user: CurrentUser,
    target: Optional[float] = Query(default=None, ge=0),
    program_semesters: Optional[int] = Query(default=None, ge=1, le=20),
    db: Session = Depends(get_db),
):
    target = target if target is not None else user.target_cgpa
    if target is None:
        return {"success": True, "data": None, "message": "No target CGPA set"}

    _, maximum = user_scale(user)
    if target > maximum:
        raise AppError(f"Target CGPA must be between 0 and {maximum:g}", field="target")

    goal = analytics_service.goal_progress(
        target,
        _user_groups(db, user),
        maximum,
        program_semesters or settings.PROGRAM_SEMESTERS,
        settings.DEFAULT_SEMESTER_CREDITS,
    )
    return {"success": True, "data": _rounded(goal)}


# ✅ [CALCULATOR] SGPA needed over a given number of remaining credits
@router.get("/required-sgpa")
def read_required_sgpa(
    user: CurrentUser,
    target: float = Query(..., ge=0),
    remaining_credits: float = Query(...),
    db: Session = Depends(get_db),
):
    _, maximum = user_scale(user)
    groups = _user_groups(db, user)
    completed = [item for g in groups for item in g.items]
    current = cumulative_cgpa(groups)

    # raises NoRemainingCapacityError (422) when remaining_credits <= 0
    required = required_average_for_target(target, completed, remaining_credits)

    return {
        "success": True,
        "data": {
            "target_cgpa": target,
            "current_cgpa": round(current.cgpa, 2),
            "earned_credits": round(current.total_credits, 2),
            "remaining_credits": remaining_credits,
            "required_sgpa": round(required, 2),
            "status": classify_requirement(required, maximum),
            "scale_max": maximum,
        },
    }
