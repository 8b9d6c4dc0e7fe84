"""
services/analytics.py

Dashboard views derived from a user's semesters: SGPA/CGPA trend, grade
distribution, performance summary and goal tracking.
Everything is computed through grade_aggregator; nothing here touches the DB.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from services.grade_aggregator import (
    GradeGroup,
    GradedItem,
    NoRemainingCapacityError,
    classify_requirement,
    cumulative_cgpa,
    required_average_for_target,
    semester_sgpa,
)
from services.grade_scale import FOUR_POINT

TREND_THRESHOLD = 0.2
DEFAULT_SEMESTER_CREDITS = 20.0
NO_REMAINING_CAPACITY = "no_remaining_capacity"

# (label, lower bound inclusive, upper bound exclusive)
_TEN_POINT_BUCKETS = [
    ("9-10", 9.0, None),
    ("8-9", 8.0, 9.0),
    ("7-8", 7.0, 8.0),
    ("6-7", 6.0, 7.0),
    ("5-6", 5.0, 6.0),
    ("below 5", None, 5.0),
]
_FOUR_POINT_BUCKETS = [
    ("3.5-4", 3.5, None),
    ("3-3.5", 3.0, 3.5),
    ("2.5-3", 2.5, 3.0),
    ("2-2.5", 2.0, 2.5),
    ("below 2", None, 2.0),
]


def semester_trend(groups: Sequence[GradeGroup]) -> List[dict]:
    """SGPA per semester next to the CGPA accumulated up to that semester."""
    trend = []
    for index, group in enumerate(groups):
        result = semester_sgpa(group)
        to_date = cumulative_cgpa(groups[: index + 1])
        trend.append({
            "label": group.label or f"Semester {index + 1}",
            "sgpa": result.sgpa,
            "cgpa_to_date": to_date.cgpa,
            "credits": result.total_credits,
            "graded_count": result.graded_count,
        })
    return trend


def grade_distribution(items: Sequence[GradedItem], scale: str) -> Dict[str, int]:
    buckets = _FOUR_POINT_BUCKETS if scale == FOUR_POINT else _TEN_POINT_BUCKETS
    distribution = {label: 0 for label, _, _ in buckets}

    for item in items:
        if item.grade_point is None:
            continue
        for label, low, high in buckets:
            if (low is None or item.grade_point >= low) and (high is None or item.grade_point < high):
                distribution[label] += 1
                break
    return distribution


def _graded_sgpas(groups: Sequence[GradeGroup]) -> List[float]:
    sgpas = []
    for group in groups:
        result = semester_sgpa(group)
        if result.graded_count:
            sgpas.append(result.sgpa)
    return sgpas


def _trend_direction(sgpas: List[float]) -> str:
    if len(sgpas) < 2:
        return "stable"
    recent, previous = sgpas[-1], sgpas[-2]
    if recent > previous + TREND_THRESHOLD:
        return "improving"
    if recent < previous - TREND_THRESHOLD:
        return "declining"
    return "stable"


def _streaks(sgpas: List[float], threshold: float) -> tuple:
    current = longest = running = 0
    for value in sgpas:
        running = running + 1 if value >= threshold else 0
        longest = max(longest, running)
    for value in reversed(sgpas):
        if value < threshold:
            break
        current += 1
    return current, longest


def performance_summary(groups: Sequence[GradeGroup], scale_max: float) -> dict:
    """
    Semester-level statistics for the analytics page.
    Semesters without any graded subject are left out of the SGPA statistics.
    """
    sgpas = _graded_sgpas(groups)
    overall = cumulative_cgpa(groups)

    consistency = None
    if sgpas:
        mean = sum(sgpas) / len(sgpas)
        variance = sum((value - mean) ** 2 for value in sgpas) / len(sgpas)
        consistency = max(0.0, 100 - variance * 20)

    graded_items = [item for group in groups for item in group.items if item.grade_point is not None]
    excellent = [item for item in graded_items if item.grade_point >= 0.9 * scale_max]
    current_streak, max_streak = _streaks(sgpas, 0.8 * scale_max)

    return {
        "cgpa": overall.cgpa,
        "total_credits": overall.total_credits,
        "semester_count": len(groups),
        "graded_semester_count": len(sgpas),
        "average_sgpa": sum(sgpas) / len(sgpas) if sgpas else 0.0,
        "highest_sgpa": max(sgpas) if sgpas else None,
        "lowest_sgpa": min(sgpas) if sgpas else None,
        "consistency": consistency,
        "trend": _trend_direction(sgpas),
        "current_streak": current_streak,
        "max_streak": max_streak,
        "excellence_ratio": len(excellent) / len(graded_items) if graded_items else 0.0,
        "progress_percent": overall.cgpa / scale_max * 100 if scale_max > 0 else 0.0,
    }


def goal_progress(
    target: float,
    groups: Sequence[GradeGroup],
    scale_max: float,
    program_semesters: int,
    default_semester_credits: float = DEFAULT_SEMESTER_CREDITS,
) -> dict:
    """
    Where the user stands against a target CGPA and the SGPA needed in the
    semesters still to come. Remaining credits are estimated from the average
    credits per completed semester, or default_semester_credits before any
    semester has a grade.
    """
    overall = cumulative_cgpa(groups)
    completed_semesters = len(_graded_sgpas(groups))
    remaining_semesters = max(0, program_semesters - completed_semesters)
    average_credits = overall.total_credits / completed_semesters if completed_semesters else default_semester_credits
    remaining_credits = average_credits * remaining_semesters

    completed_items = [item for group in groups for item in group.items]

    required_sgpa: Optional[float]
    try:
        required_sgpa = required_average_for_target(target, completed_items, remaining_credits)
        status = classify_requirement(required_sgpa, scale_max)
    except NoRemainingCapacityError:
        required_sgpa = None
        status = NO_REMAINING_CAPACITY

    return {
        "target_cgpa": target,
        "current_cgpa": overall.cgpa,
        "difference": target - overall.cgpa,
        "achieved": overall.total_credits > 0 and overall.cgpa >= target,
        "progress_percent": min(overall.cgpa / target * 100, 100.0) if target > 0 else 100.0,
        "completed_semesters": completed_semesters,
        "remaining_semesters": remaining_semesters,
        "estimated_remaining_credits": remaining_credits,
        "required_sgpa": required_sgpa,
        "status": status,
    }
