import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser
from models.semesters import Semester as SemesterModel
from schemas.common import COMMON_ERRORS
from schemas.semesters import Semester as SemesterSchema, SemesterCreate, SemesterUpdate
from services.academic_records import get_owned_semester, list_semesters, to_grade_group
from services.grade_aggregator import semester_sgpa
from utils.exceptions import AppError, ConflictError

router = APIRouter(prefix="/semesters", tags=["semesters"], responses=COMMON_ERRORS)
logger = logging.getLogger(__name__)


def _serialize(semester: SemesterModel) -> dict:
    return SemesterSchema.model_validate(semester).model_dump(mode="json")


def _number_taken(db: Session, user_id: int, number: int, exclude_id: int = None) -> bool:
    query = db.query(SemesterModel).filter(
        SemesterModel.user_id == user_id,
        SemesterModel.semester_number == number,
    )
    if exclude_id is not None:
        query = query.filter(SemesterModel.id != exclude_id)
    return query.first() is not None


# ==========================================================
# CRUD
# ==========================================================

# ✅ [CREATE] semester
@router.post("/", status_code=201)
def create_semester(semester: SemesterCreate, user: CurrentUser, db: Session = Depends(get_db)):
    if _number_taken(db, user.id, semester.semester_number):
        raise ConflictError("Semester already exists for this user")

    db_semester = SemesterModel(user_id=user.id, **semester.model_dump())
    db.add(db_semester)
    db.commit()
    db.refresh(db_semester)
    logger.info("created semester id=%s user=%s number=%s", db_semester.id, user.id, db_semester.semester_number)
    return {"success": True, "data": _serialize(db_semester), "message": "Semester created successfully"}


# ✅ [READ] all semesters of the caller
@router.get("/")
def read_semesters(user: CurrentUser, db: Session = Depends(get_db)):
    records = list_semesters(db, user)
    return {"success": True, "data": [_serialize(r) for r in records], "count": len(records)}


# ✅ [READ] one semester with its subjects
@router.get("/{semester_id}")
def read_semester(semester_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    return {"success": True, "data": _serialize(get_owned_semester(db, user, semester_id))}


# ✅ [UPDATE] semester number / dates
@router.put("/{semester_id}")
def update_semester(semester_id: int, updated: SemesterUpdate, user: CurrentUser, db: Session = Depends(get_db)):
    semester = get_owned_semester(db, user, semester_id)
    fields = updated.model_dump(exclude_unset=True)
    if not fields:
        raise AppError("No data provided for update")

    number = fields.get("semester_number")
    if number is not None and number != semester.semester_number and _number_taken(db, user.id, number, semester.id):
        raise ConflictError("Semester number already exists for this user")
    if number is None:
        fields.pop("semester_number", None)

    for key, value in fields.items():
        setattr(semester, key, value)
    if semester.start_date and semester.end_date and semester.end_date < semester.start_date:
        raise AppError("end_date must not be before start_date")

    db.commit()
    db.refresh(semester)
    return {"success": True, "data": _serialize(semester), "message": "Semester updated successfully"}


# ✅ [DELETE] semester and its subjects
@router.delete("/{semester_id}")
def delete_semester(semester_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    semester = get_owned_semester(db, user, semester_id)
    db.delete(semester)
    db.commit()
    logger.info("deleted semester id=%s user=%s", semester_id, user.id)
    return {
        "success": True,
        "data": {"semester_id": semester_id},
        "message": "Semester and all related data deleted successfully",
    }


# ==========================================================
# SGPA
# ==========================================================

# ✅ [SGPA] weighted average over graded subjects
@router.get("/{semester_id}/sgpa")
def read_semester_sgpa(semester_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    semester = get_owned_semester(db, user, semester_id)
    result = semester_sgpa(to_grade_group(semester))

    data = {
        "semester_id": semester.id,
        "semester_number": semester.semester_number,
        "sgpa": round(result.sgpa, 2),
        "total_credits": round(result.total_credits, 2),
        "total_subjects": result.total_count,
        "completed_subjects": result.graded_count,
        "subjects": [
            {
                "id": s.id,
                "name": s.name,
                "credits": s.credits,
                "grade": s.grade,
                "grade_point": s.grade_point,
            }
            for s in semester.subjects
            if s.grade_point is not None
        ],
    }
    if result.graded_count == 0:
        data["message"] = "No completed subjects with grades"
    return {"success": True, "data": data}
