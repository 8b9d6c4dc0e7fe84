import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser
from models.subjects import Subject as SubjectModel
from models.users import User as UserModel
from schemas.common import COMMON_ERRORS
from schemas.subjects import Subject as SubjectSchema, SubjectCreate, SubjectUpdate
from services.academic_records import college_bands, get_owned_semester, get_owned_subject, user_scale
from services.grade_scale import point_for_letter
from utils.exceptions import AppError, ConflictError

router = APIRouter(prefix="/subjects", tags=["subjects"], responses=COMMON_ERRORS)
logger = logging.getLogger(__name__)


def _serialize(subject: SubjectModel) -> dict:
    return SubjectSchema.model_validate(subject).model_dump()


def _name_taken(db: Session, semester_id: int, name: str, exclude_id: int = None) -> bool:
    query = db.query(SubjectModel).filter(SubjectModel.semester_id == semester_id, SubjectModel.name == name)
    if exclude_id is not None:
        query = query.filter(SubjectModel.id != exclude_id)
    return query.first() is not None


def _resolve_grade(user: UserModel, grade, grade_point):
    """
    Fills grade_point from the college bands when only a letter is given and
    checks the point against the scale maximum.
    """
    if grade is not None:
        grade = grade.strip().upper() or None
    if grade is not None and grade_point is None:
        grade_point = point_for_letter(grade, college_bands(user.college))
        if grade_point is None:
            raise AppError(f"Unknown grade letter: {grade}", code="INVALID_GRADE", field="grade")

    _, maximum = user_scale(user)
    if grade_point is not None and grade_point > maximum:
        raise AppError(f"Grade point must be between 0 and {maximum:g}", code="INVALID_GRADE", field="grade_point")
    return grade, grade_point


# ✅ [CREATE] subject in one of the caller's semesters
@router.post("/", status_code=201)
def create_subject(subject: SubjectCreate, user: CurrentUser, db: Session = Depends(get_db)):
    semester = get_owned_semester(db, user, subject.semester_id)
    if _name_taken(db, semester.id, subject.name):
        raise ConflictError("A subject with this name already exists in this semester")

    grade, grade_point = _resolve_grade(user, subject.grade, subject.grade_point)
    db_subject = SubjectModel(
        semester_id=semester.id,
        name=subject.name,
        credits=subject.credits,
        grade=grade,
        grade_point=grade_point,
    )
    db.add(db_subject)
    db.commit()
    db.refresh(db_subject)
    logger.info("created subject id=%s semester=%s", db_subject.id, semester.id)
    return {"success": True, "data": _serialize(db_subject), "message": "Subject created successfully"}


# ✅ [READ] subjects of one semester
@router.get("/semester/{semester_id}")
def read_subjects_by_semester(semester_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    semester = get_owned_semester(db, user, semester_id)
    return {"success": True, "data": [_serialize(s) for s in semester.subjects]}


# ✅ [READ] one subject
@router.get("/{subject_id}")
def read_subject(subject_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    return {"success": True, "data": _serialize(get_owned_subject(db, user, subject_id))}


# ✅ [UPDATE] name / credits / grade
@router.put("/{subject_id}")
def update_subject(subject_id: int, updated: SubjectUpdate, user: CurrentUser, db: Session = Depends(get_db)):
    subject = get_owned_subject(db, user, subject_id)
    fields = updated.model_dump(exclude_unset=True)
    if not fields:
        raise AppError("No data provided for update")

    if fields.get("name") and fields["name"] != subject.name and _name_taken(db, subject.semester_id, fields["name"], subject.id):
        raise ConflictError("A subject with this name already exists in this semester")

    if "grade" in fields or "grade_point" in fields:
        # a letter alone re-derives the point, a point alone drops the old letter
        grade = fields.pop("grade", None)
        grade_point = fields.pop("grade_point", None)
        subject.grade, subject.grade_point = _resolve_grade(user, grade, grade_point)

    for key, value in fields.items():
        if value is not None:
            setattr(subject, key, value)

    db.commit()
    db.refresh(subject)
    return {"success": True, "data": _serialize(subject), "message": "Subject updated successfully"}


# ✅ [DELETE] subject
@router.delete("/{subject_id}")
def delete_subject(subject_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    subject = get_owned_subject(db, user, subject_id)
    db.delete(subject)
    db.commit()
    logger.info("deleted subject id=%s user=%s", subject_id, user.id)
    return {"success": True, "data": {"subject_id": subject_id}, "message": "Subject deleted successfully"}
