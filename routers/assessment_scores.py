import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser
from models.assessments import (
    AssessmentComponent as ComponentModel,
    AssessmentScore as ScoreModel,
    SubjectAssessment as SubjectAssessmentModel,
)
from models.semesters import Semester as SemesterModel
from models.subjects import Subject as SubjectModel
from models.users import User as UserModel
from routers.assessment_templates import get_owned_template
from schemas.assessments import ScoreCreate, Score as ScoreSchema, SubjectAssessment as SubjectAssessmentSchema, SubjectAssessmentCreate
from schemas.common import COMMON_ERRORS
from services.academic_records import college_bands, get_owned_semester, get_owned_subject, user_scale
from services.assessment_service import refresh_prediction, required_scores
from services.grade_aggregator import GradedItem, classify_requirement, weighted_average
from utils.exceptions import AppError, ConflictError, NotFoundError

router = APIRouter(prefix="/assessment-scores", tags=["assessment scores"], responses=COMMON_ERRORS)
logger = logging.getLogger(__name__)


def _get_owned_assessment(db: Session, user: UserModel, subject_assessment_id: int) -> SubjectAssessmentModel:
    assessment = (
        db.query(SubjectAssessmentModel)
        .join(SubjectModel, SubjectModel.id == SubjectAssessmentModel.subject_id)
        .join(SemesterModel, SemesterModel.id == SubjectModel.semester_id)
        .filter(SubjectAssessmentModel.id == subject_assessment_id, SemesterModel.user_id == user.id)
        .first()
    )
    if assessment is None:
        raise NotFoundError("Subject assessment not found")
    return assessment


def _assessment_for_subject(db: Session, user: UserModel, subject_id: int) -> SubjectAssessmentModel:
    subject = get_owned_subject(db, user, subject_id)
    if subject.assessment is None:
        raise NotFoundError("No assessment found for this subject")
    return subject.assessment


def _serialize(assessment: SubjectAssessmentModel) -> dict:
    return SubjectAssessmentSchema.model_validate(assessment).model_dump()


# ✅ [CREATE] link a subject to a template
@router.post("/subject-assessment", status_code=201)
def create_subject_assessment(request: SubjectAssessmentCreate, user: CurrentUser, db: Session = Depends(get_db)):
    subject = get_owned_subject(db, user, request.subject_id)
    template = get_owned_template(db, user, request.template_id)
    if subject.assessment is not None:
        raise ConflictError("Subject already has an assessment")

    assessment = SubjectAssessmentModel(subject_id=subject.id, template_id=template.id)
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    logger.info("linked subject=%s template=%s", subject.id, template.id)
    return {"success": True, "data": _serialize(assessment), "message": "Subject assessment created successfully"}


# ✅ [UPSERT] score for one component, then recompute the prediction
@router.post("/")
def add_score(request: ScoreCreate, user: CurrentUser, db: Session = Depends(get_db)):
    assessment = _get_owned_assessment(db, user, request.subject_assessment_id)
    component = (
        db.query(ComponentModel)
        .filter(ComponentModel.id == request.component_id, ComponentModel.template_id == assessment.template_id)
        .first()
    )
    if component is None:
        raise NotFoundError("Component not found in this subject's template")

    max_score = request.max_score if request.max_score is not None else component.max_score
    if request.score_obtained > max_score:
        raise AppError("Score obtained cannot exceed the maximum score", field="score_obtained")

    score = next((s for s in assessment.scores if s.component_id == component.id), None)
    if score is None:
        score = ScoreModel(component_id=component.id, score_obtained=request.score_obtained, max_score=max_score)
        assessment.scores.append(score)
    else:
        score.score_obtained = request.score_obtained
        score.max_score = max_score

    db.flush()
    prediction = refresh_prediction(assessment, college_bands(user.college))
    db.commit()
    db.refresh(score)

    return {
        "success": True,
        "data": {"score": ScoreSchema.model_validate(score).model_dump(), "prediction": prediction},
        "message": "Score added successfully",
    }


# ✅ [READ] assessment + scores of a subject
@router.get("/subject/{subject_id}")
def read_scores_by_subject(subject_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    return {"success": True, "data": _serialize(_assessment_for_subject(db, user, subject_id))}


# ✅ [PROJECTION] percentage needed on each pending component
@router.get("/subject/{subject_id}/required")
def read_required_scores(
    subject_id: int,
    user: CurrentUser,
    target: float = Query(..., ge=0, le=100, description="target final percentage"),
    db: Session = Depends(get_db),
):
    assessment = _assessment_for_subject(db, user, subject_id)
    projection = required_scores(assessment, target)

    return {
        "success": True,
        "data": {
            "subject_id": subject_id,
            "target_percentage": target,
            "completed_weighted": round(projection.completed_weighted, 2),
            "remaining_weight": round(projection.remaining_weight, 2),
            "required_percent_remaining": round(projection.required_percent_remaining, 2),
            "status": classify_requirement(projection.required_percent_remaining, 100),
            "components": [
                {
                    "component_id": r.component.ref,
                    "name": r.component.name,
                    "max_score": r.component.max_score,
                    "recommended_score": round(r.recommended_score, 2),
                    "recommended_percent": round(r.recommended_percent, 2),
                }
                for r in projection.per_component
            ],
        },
    }


# ✅ [READ] predictions of every assessed subject in a semester + predicted SGPA
@router.get("/predictions/{semester_id}")
def read_predictions_by_semester(semester_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    semester = get_owned_semester(db, user, semester_id)
    assessments = [s.assessment for s in semester.subjects if s.assessment is not None]

    items = [
        GradedItem(credit_weight=a.subject.credits, grade_point=a.predicted_grade_point)
        for a in assessments
    ]
    predicted = [item for item in items if item.grade_point is not None]
    _, maximum = user_scale(user)

    return {
        "success": True,
        "data": {
            "predictions": [
                dict(_serialize(a), subject_name=a.subject.name, credits=a.subject.credits)
                for a in assessments
            ],
            "predicted_sgpa": round(weighted_average(predicted), 2) if predicted else None,
            "scale_max": maximum,
        },
    }
