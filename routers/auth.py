import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy import or_
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.colleges import College as CollegeModel
from models.users import User as UserModel
from schemas.users import LoginRequest, RegisterRequest, User as UserSchema
from utils.exceptions import AppError, AuthError, ConflictError
from utils.security import create_session_token, hash_password, verify_password

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.ENV == "prod",
        samesite="lax",
        max_age=settings.SESSION_TTL_MINUTES * 60,
    )


# ✅ [REGISTER] new account
@router.post("/register", status_code=201)
def register(request: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    existing = (
        db.query(UserModel)
        .filter(or_(UserModel.email == request.email, UserModel.username == request.username))
        .first()
    )
    if existing is not None:
        if existing.email == request.email:
            raise ConflictError("Email is already registered.", field="email")
        raise ConflictError("Username is already taken.", field="username")

    college = db.query(CollegeModel).filter(CollegeModel.id == request.college_id).first()
    if college is None:
        raise AppError("Invalid college ID.", code="INVALID_COLLEGE", field="college_id")

    user = UserModel(
        username=request.username,
        email=request.email,
        password_hash=hash_password(request.password),
        college_id=college.id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("registered user id=%s", user.id)

    token = create_session_token(user.id)
    _set_session_cookie(response, token)
    return {
        "success": True,
        "data": {"user": UserSchema.model_validate(user).model_dump(), "token": token},
        "message": "User created successfully",
    }


# ✅ [LOGIN] email or username + password
@router.post("/login")
def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)):
    identifier = request.identifier.strip().lower()
    user = (
        db.query(UserModel)
        .filter(or_(UserModel.email == identifier, UserModel.username == identifier))
        .first()
    )
    if user is None or not verify_password(request.password, user.password_hash):
        raise AuthError("Invalid credentials")

    token = create_session_token(user.id)
    _set_session_cookie(response, token)
    return {
        "success": True,
        "data": {"user": UserSchema.model_validate(user).model_dump(), "token": token},
        "message": "Logged in",
    }


# ✅ [LOGOUT] drop the session cookie
@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True, "message": "Logged out"}
