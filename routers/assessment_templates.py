import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser
from models.assessments import AssessmentComponent as ComponentModel, AssessmentTemplate as TemplateModel
from models.users import User as UserModel
from schemas.assessments import Template as TemplateSchema, TemplateCreate, TemplateUpdate
from schemas.common import COMMON_ERRORS
from services.academic_records import college_bands
from services.assessment_service import refresh_prediction
from services.grade_aggregator import validate_weight_sum
from utils.exceptions import AppError, NotFoundError

router = APIRouter(prefix="/assessment-templates", tags=["assessment templates"], responses=COMMON_ERRORS)
logger = logging.getLogger(__name__)


def get_owned_template(db: Session, user: UserModel, template_id: int) -> TemplateModel:
    template = (
        db.query(TemplateModel)
        .filter(TemplateModel.id == template_id, TemplateModel.user_id == user.id)
        .first()
    )
    if template is None:
        raise NotFoundError("Template not found")
    return template


def _serialize(template: TemplateModel) -> dict:
    data = TemplateSchema.model_validate(template).model_dump()
    data["total_weightage"] = sum(c.weightage for c in template.components)
    data["subject_ids"] = [sa.subject_id for sa in template.subject_assessments]
    return data


# ✅ [CREATE] template with components (weightage must add up to 100)
@router.post("/", status_code=201)
def create_template(template: TemplateCreate, user: CurrentUser, db: Session = Depends(get_db)):
    validate_weight_sum(c.weightage for c in template.components)

    db_template = TemplateModel(
        user_id=user.id,
        name=template.name,
        description=template.description,
        components=[ComponentModel(**c.model_dump()) for c in template.components],
    )
    db.add(db_template)
    db.commit()
    db.refresh(db_template)
    logger.info("created assessment template id=%s user=%s", db_template.id, user.id)
    return {"success": True, "data": _serialize(db_template), "message": "Assessment template created successfully"}


# ✅ [READ] caller's templates, newest first
@router.get("/")
def read_templates(user: CurrentUser, db: Session = Depends(get_db)):
    records = (
        db.query(TemplateModel)
        .filter(TemplateModel.user_id == user.id)
        .order_by(TemplateModel.created_at.desc(), TemplateModel.id.desc())
        .all()
    )
    return {"success": True, "data": [_serialize(r) for r in records]}


# ✅ [READ] one template
@router.get("/{template_id}")
def read_template(template_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    return {"success": True, "data": _serialize(get_owned_template(db, user, template_id))}


# ✅ [UPDATE] name / description / full component list
@router.put("/{template_id}")
def update_template(template_id: int, updated: TemplateUpdate, user: CurrentUser, db: Session = Depends(get_db)):
    template = get_owned_template(db, user, template_id)
    fields = updated.model_dump(exclude_unset=True)
    if not fields:
        raise AppError("No data provided for update")

    if updated.components is not None:
        validate_weight_sum(c.weightage for c in updated.components)
        # replacing components drops the scores recorded against the old ones
        template.components = [ComponentModel(**c.model_dump()) for c in updated.components]

        # predictions were built from the scores that just went away
        db.flush()
        bands = college_bands(user.college)
        for assessment in template.subject_assessments:
            db.refresh(assessment)
            refresh_prediction(assessment, bands)

    if updated.name is not None:
        template.name = updated.name
    if "description" in fields:
        template.description = updated.description

    db.commit()
    db.refresh(template)
    return {"success": True, "data": _serialize(template), "message": "Template updated successfully"}


# ✅ [DELETE] template (linked subject assessments go with it)
@router.delete("/{template_id}")
def delete_template(template_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    template = get_owned_template(db, user, template_id)
    db.delete(template)
    db.commit()
    logger.info("deleted assessment template id=%s user=%s", template_id, user.id)
    return {"success": True, "data": {"template_id": template_id}, "message": "Template deleted successfully"}
