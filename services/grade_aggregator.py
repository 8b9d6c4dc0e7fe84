"""
services/grade_aggregator.py

Credit-weighted grade point aggregation (SGPA/CGPA) and target projection.

- Pure functions only: no DB access, no settings lookups, no rounding.
  Routers round to 2 decimals when building responses.
- The scale maximum (10-point, 4-point, ...) is always passed in by the caller.
- The only error raised while aggregating is NoRemainingCapacityError.
  Empty inputs produce 0.0 plus a zero count, never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence

WEIGHT_SUM_TOLERANCE = 0.01


class NoRemainingCapacityError(Exception):
    """A target was requested but there is no weight left to earn it with."""

    def __init__(self, message: str = "No remaining credits or components to reach the target"):
        super().__init__(message)
        self.message = message


class InvalidWeightSumError(ValueError):
    """Assessment component weights do not add up to 100%."""

    def __init__(self, total: float):
        self.total = total
        self.message = f"Total weightage must equal 100%. Current total: {total:g}%"
        super().__init__(self.message)


# =========================================================
# Input types
# =========================================================

@dataclass(frozen=True)
class GradedItem:
    credit_weight: float
    grade_point: Optional[float] = None

    @property
    def is_graded(self) -> bool:
        return self.grade_point is not None


@dataclass(frozen=True)
class GradeGroup:
    items: Sequence[GradedItem] = field(default_factory=tuple)
    label: Optional[str] = None


@dataclass(frozen=True)
class AssessmentComponent:
    name: str
    weight_percent: float
    max_score: float
    ref: Any = None

    @property
    def key(self) -> Any:
        return self.ref if self.ref is not None else self.name


@dataclass(frozen=True)
class AssessmentScore:
    component_ref: Any
    score_obtained: float
    max_score: float


# =========================================================
# Result types
# =========================================================

@dataclass(frozen=True)
class SemesterResult:
    sgpa: float
    total_credits: float
    graded_count: int
    total_count: int


@dataclass(frozen=True)
class CumulativeResult:
    cgpa: float
    total_credits: float


@dataclass(frozen=True)
class ComponentRecommendation:
    component: AssessmentComponent
    recommended_score: float
    recommended_percent: float


@dataclass(frozen=True)
class ComponentProjection:
    required_percent_remaining: float
    per_component: List[ComponentRecommendation]
    completed_weighted: float
    remaining_weight: float


# =========================================================
# Credit-weighted averages
# =========================================================

def _graded(items: Iterable[GradedItem]) -> List[GradedItem]:
    return [item for item in items if item.is_graded]


def weighted_average(items: Iterable[GradedItem]) -> float:
    """
    Σ(grade_point × credit_weight) / Σ(credit_weight) over graded items.

    Returns 0.0 when nothing is graded; pair it with a graded count to tell
    "no data yet" apart from a real zero average.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for item in _graded(items):
        weighted_sum += item.grade_point * item.credit_weight
        total_weight += item.credit_weight

    if total_weight <= 0:
        return 0.0
    return weighted_sum / total_weight


def semester_sgpa(group: GradeGroup) -> SemesterResult:
    items = list(group.items)
    graded = _graded(items)
    return SemesterResult(
        sgpa=weighted_average(graded),
        total_credits=sum(item.credit_weight for item in graded),
        graded_count=len(graded),
        total_count=len(items),
    )


def cumulative_cgpa(groups: Iterable[GradeGroup]) -> CumulativeResult:
    graded = [item for group in groups for item in _graded(group.items)]
    return CumulativeResult(
        cgpa=weighted_average(graded),
        total_credits=sum(item.credit_weight for item in graded),
    )


# =========================================================
# Target projection
# =========================================================

def required_average_for_target(
    target: float,
    completed: Iterable[GradedItem],
    remaining_credit_weight: float,
) -> float:
    """
    Average grade point needed over the remaining credit weight to reach ``target``.

        required = (target × (completed + remaining) − Σ(gp × cw)) / remaining

    The result is not clamped: a value above the scale maximum means the
    target cannot be reached, a negative value means it already is.
    Use classify_requirement() to turn it into a status.
    """
    if remaining_credit_weight <= 0:
        raise NoRemainingCapacityError()

    graded = _graded(completed)
    completed_weight = sum(item.credit_weight for item in graded)
    earned = sum(item.grade_point * item.credit_weight for item in graded)

    return (target * (completed_weight + remaining_credit_weight) - earned) / remaining_credit_weight


def _scores_by_component(scores: Iterable[AssessmentScore]) -> dict:
    return {score.component_ref: score for score in scores}


def required_component_score(
    target: float,
    components: Sequence[AssessmentComponent],
    scores: Iterable[AssessmentScore],
) -> ComponentProjection:
    """
    Percentage every pending component has to score for the subject to finish at ``target``%.

    Completed components contribute score/max × weight. The gap to the target is
    spread uniformly: every pending component is asked for the same percentage,
    no attempt is made to find a cheaper allocation.

    Weights are expected to add up to 100 (see validate_weight_sum); that is
    checked when a template is saved, not here.
    """
    by_component = _scores_by_component(scores)

    completed_weighted = 0.0
    pending: List[AssessmentComponent] = []
    for component in components:
        score = by_component.get(component.key)
        if score is None:
            pending.append(component)
            continue
        completed_weighted += _score_ratio(score) * component.weight_percent

    remaining_weight = sum(component.weight_percent for component in pending)
    if remaining_weight <= 0:
        raise NoRemainingCapacityError("All assessment components already have scores")

    required_percent = (target - completed_weighted) / remaining_weight * 100

    return ComponentProjection(
        required_percent_remaining=required_percent,
        per_component=[
            ComponentRecommendation(
                component=component,
                recommended_score=required_percent / 100 * component.max_score,
                recommended_percent=required_percent,
            )
            for component in pending
        ],
        completed_weighted=completed_weighted,
        remaining_weight=remaining_weight,
    )


def _score_ratio(score: AssessmentScore) -> float:
    if score.max_score <= 0:
        return 0.0
    return score.score_obtained / score.max_score


def projected_percentage(
    components: Sequence[AssessmentComponent],
    scores: Iterable[AssessmentScore],
) -> float:
    """
    Predicted final percentage for a subject from the scores recorded so far.

    The average percentage over scored components is assumed to carry over to
    the unscored ones.
    """
    by_component = _scores_by_component(scores)

    weighted = 0.0
    weight_used = 0.0
    for component in components:
        score = by_component.get(component.key)
        if score is None:
            continue
        weighted += _score_ratio(score) * component.weight_percent
        weight_used += component.weight_percent

    if weight_used <= 0:
        return 0.0
    if weight_used >= 100:
        return weighted

    current_average = weighted / weight_used * 100
    return weighted + current_average * (100 - weight_used) / 100


# =========================================================
# Caller-side helpers
# =========================================================

ACHIEVED = "achieved"
ACHIEVABLE = "achievable"
UNACHIEVABLE = "unachievable"


def classify_requirement(required: float, scale_max: float) -> str:
    if required <= 0:
        return ACHIEVED
    if required <= scale_max:
        return ACHIEVABLE
    return UNACHIEVABLE


def validate_weight_sum(weights: Iterable[float], tolerance: float = WEIGHT_SUM_TOLERANCE) -> float:
    total = sum(weights)
    if abs(total - 100) > tolerance:
        raise InvalidWeightSumError(total)
    return total
