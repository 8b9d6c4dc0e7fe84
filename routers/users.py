import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.security import CurrentUser
from models.assessments import AssessmentTemplate as TemplateModel
from models.colleges import College as CollegeModel
from schemas.common import COMMON_ERRORS
from schemas.users import PasswordChange, User as UserSchema, UserUpdate
from services.academic_records import user_scale
from utils.exceptions import AppError, AuthError
from utils.security import hash_password, verify_password

router = APIRouter(prefix="/users", tags=["users"], responses=COMMON_ERRORS)
logger = logging.getLogger(__name__)


# ✅ [READ] own profile
@router.get("/me")
def read_me(user: CurrentUser):
    data = UserSchema.model_validate(user).model_dump()
    data["college"] = (
        {"id": user.college.id, "name": user.college.name, "grading_scale": user.college.grading_scale}
        if user.college else None
    )
    return {"success": True, "data": data}


# ✅ [UPDATE] college / target CGPA
@router.put("/me")
def update_me(updated: UserUpdate, user: CurrentUser, db: Session = Depends(get_db)):
    fields = updated.model_dump(exclude_unset=True)
    if not fields:
        raise AppError("No data provided for update")

    if "college_id" in fields:
        college = db.query(CollegeModel).filter(CollegeModel.id == fields["college_id"]).first()
        if college is None:
            raise AppError("Invalid college ID.", code="INVALID_COLLEGE", field="college_id")
        user.college = college

        # a target kept from a wider scale would no longer be valid
        _, maximum = user_scale(user)
        if "target_cgpa" not in fields and user.target_cgpa is not None and user.target_cgpa > maximum:
            user.target_cgpa = None

    if "target_cgpa" in fields:
        target = fields["target_cgpa"]
        _, maximum = user_scale(user)
        if target is not None and target > maximum:
            raise AppError(f"Target CGPA must be between 0 and {maximum:g}", field="target_cgpa")
        user.target_cgpa = target

    db.commit()
    db.refresh(user)
    return {
        "success": True,
        "data": UserSchema.model_validate(user).model_dump(),
        "message": "Profile updated successfully",
    }


# ✅ [UPDATE] password
@router.put("/me/password")
def change_password(request: PasswordChange, user: CurrentUser, db: Session = Depends(get_db)):
    if not verify_password(request.current_password, user.password_hash):
        raise AuthError("Current password is incorrect", field="current_password")

    user.password_hash = hash_password(request.new_password)
    db.commit()
    return {"success": True, "message": "Password changed successfully"}


# ✅ [DELETE] account with all semesters, subjects and templates
@router.delete("/me")
def delete_me(response: Response, user: CurrentUser, db: Session = Depends(get_db)):
    user_id = user.id
    for template in db.query(TemplateModel).filter(TemplateModel.user_id == user_id).all():
        db.delete(template)
    db.delete(user)
    db.commit()
    logger.info("deleted user id=%s", user_id)

    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True, "data": {"user_id": user_id}, "message": "Account deleted successfully"}
