import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from models.colleges import College as CollegeModel, GradeBandRow
from schemas.colleges import College as CollegeSchema, CollegeCreate, GradeBand as GradeBandSchema
from services.academic_records import college_bands
from services.grade_scale import default_bands, scale_max
from utils.exceptions import ConflictError, NotFoundError

router = APIRouter(prefix="/colleges", tags=["colleges"])
logger = logging.getLogger(__name__)


# ✅ [READ] college list (public, used by the signup form)
@router.get("/")
def read_colleges(db: Session = Depends(get_db)):
    records = db.query(CollegeModel).order_by(CollegeModel.name.asc()).all()
    return {
        "success": True,
        "data": [CollegeSchema.model_validate(r).model_dump() for r in records],
    }


# ✅ [CREATE] college, seeded with the default bands of its scale
@router.post("/", status_code=201)
def create_college(college: CollegeCreate, db: Session = Depends(get_db)):
    existing = db.query(CollegeModel).filter(CollegeModel.name == college.name).first()
    if existing is not None:
        raise ConflictError("College already exists")

    db_college = CollegeModel(name=college.name, grading_scale=college.grading_scale)
    db_college.grade_bands = [
        GradeBandRow(letter=b.letter, grade_point=b.grade_point, min_percentage=b.min_percentage)
        for b in default_bands(college.grading_scale)
    ]
    db.add(db_college)
    db.commit()
    db.refresh(db_college)
    logger.info("created college id=%s name=%s", db_college.id, db_college.name)
    return {
        "success": True,
        "data": CollegeSchema.model_validate(db_college).model_dump(),
        "message": "College created successfully",
    }


# ✅ [READ] grading bands of one college
@router.get("/{college_id}/grades")
def read_college_grades(college_id: int, db: Session = Depends(get_db)):
    college = db.query(CollegeModel).filter(CollegeModel.id == college_id).first()
    if college is None:
        raise NotFoundError("College not found")

    bands = sorted(college_bands(college), key=lambda b: b.min_percentage, reverse=True)
    return {
        "success": True,
        "data": {
            "college_id": college.id,
            "grading_scale": college.grading_scale,
            "scale_max": scale_max(college.grading_scale),
            "grades": [GradeBandSchema.model_validate(b).model_dump() for b in bands],
        },
    }
