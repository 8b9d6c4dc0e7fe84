"""
services/academic_records.py

Glue between the ORM rows and the pure calculators:
- owner-scoped lookups (a row owned by someone else is reported as not found)
- Subject/Semester rows -> GradedItem/GradeGroup
- College -> grading scale and grade bands
"""

from typing import List, Tuple

from sqlalchemy.orm import Session

from models.colleges import College as CollegeModel
from models.semesters import Semester as SemesterModel
from models.subjects import Subject as SubjectModel
from models.users import User as UserModel
from services.grade_aggregator import GradeGroup, GradedItem
from services.grade_scale import GradeBand, TEN_POINT, default_bands, scale_max
from utils.exceptions import NotFoundError


# ==========================================================
# [lookup] owner-scoped queries
# ==========================================================
def get_owned_semester(db: Session, user: UserModel, semester_id: int) -> SemesterModel:
    semester = (
        db.query(SemesterModel)
        .filter(SemesterModel.id == semester_id, SemesterModel.user_id == user.id)
        .first()
    )
    if semester is None:
        raise NotFoundError("Semester not found")
    return semester


def get_owned_subject(db: Session, user: UserModel, subject_id: int) -> SubjectModel:
    subject = (
        db.query(SubjectModel)
        .join(SemesterModel, SemesterModel.id == SubjectModel.semester_id)
        .filter(SubjectModel.id == subject_id, SemesterModel.user_id == user.id)
        .first()
    )
    if subject is None:
        raise NotFoundError("Subject not found")
    return subject


def list_semesters(db: Session, user: UserModel) -> List[SemesterModel]:
    return (
        db.query(SemesterModel)
        .filter(SemesterModel.user_id == user.id)
        .order_by(SemesterModel.semester_number.asc())
        .all()
    )


# ==========================================================
# [convert] ORM rows -> calculator inputs
# ==========================================================
def to_graded_item(subject: SubjectModel) -> GradedItem:
    return GradedItem(credit_weight=subject.credits, grade_point=subject.grade_point)


def to_grade_group(semester: SemesterModel) -> GradeGroup:
    return GradeGroup(
        items=tuple(to_graded_item(s) for s in semester.subjects),
        label=f"Semester {semester.semester_number}",
    )


def to_grade_groups(semesters: List[SemesterModel]) -> List[GradeGroup]:
    return [to_grade_group(s) for s in semesters]


# ==========================================================
# [scale] college grading configuration
# ==========================================================
def college_bands(college: CollegeModel) -> List[GradeBand]:
    if college is None:
        return default_bands(TEN_POINT)
    if not college.grade_bands:
        return default_bands(college.grading_scale)
    return [
        GradeBand(letter=row.letter, grade_point=row.grade_point, min_percentage=row.min_percentage)
        for row in college.grade_bands
    ]


def user_scale(user: UserModel) -> Tuple[str, float]:
    """(scale name, scale maximum) of the user's college; 10-point when no college is set."""
    scale = user.college.grading_scale if user.college is not None else TEN_POINT
    return scale, scale_max(scale)
