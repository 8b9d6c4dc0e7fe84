"""
services/assessment_service.py

Component-weighted predictions for a subject linked to an assessment template.
"""

import logging
from typing import List

from models.assessments import (
    AssessmentTemplate as TemplateModel,
    SubjectAssessment as SubjectAssessmentModel,
)
from services.grade_aggregator import (
    AssessmentComponent,
    AssessmentScore,
    ComponentProjection,
    projected_percentage,
    required_component_score,
)
from services.grade_scale import GradeBand, grade_for_percentage

logger = logging.getLogger(__name__)


def to_components(template: TemplateModel) -> List[AssessmentComponent]:
    return [
        AssessmentComponent(name=c.name, weight_percent=c.weightage, max_score=c.max_score, ref=c.id)
        for c in template.components
    ]


def to_scores(assessment: SubjectAssessmentModel) -> List[AssessmentScore]:
    return [
        AssessmentScore(component_ref=s.component_id, score_obtained=s.score_obtained, max_score=s.max_score)
        for s in assessment.scores
    ]


def refresh_prediction(assessment: SubjectAssessmentModel, bands: List[GradeBand]) -> dict:
    """Recomputes the predicted percentage/grade and stores it on the row (caller commits)."""
    percentage = projected_percentage(to_components(assessment.template), to_scores(assessment))

    if assessment.scores:
        letter, point = grade_for_percentage(percentage, bands)
        assessment.predicted_percentage = percentage
        assessment.predicted_grade = letter
        assessment.predicted_grade_point = point
    else:
        assessment.predicted_percentage = None
        assessment.predicted_grade = None
        assessment.predicted_grade_point = None

    logger.debug(
        "prediction subject_assessment=%s percentage=%.2f grade=%s",
        assessment.id, percentage, assessment.predicted_grade,
    )
    return {
        "percentage": assessment.predicted_percentage,
        "grade": assessment.predicted_grade,
        "grade_point": assessment.predicted_grade_point,
    }


def required_scores(assessment: SubjectAssessmentModel, target_percentage: float) -> ComponentProjection:
    return required_component_score(
        target_percentage,
        to_components(assessment.template),
        to_scores(assessment),
    )
