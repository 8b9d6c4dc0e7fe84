from typing import Optional, Annotated

from fastapi import Cookie, Depends, Header
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.users import User as UserModel
from utils.exceptions import AuthError
from utils.security import read_session_token

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]
SessionCookie = Annotated[Optional[str], Cookie(alias=settings.SESSION_COOKIE_NAME)]


def _extract_token(authorization: Optional[str], session_cookie: Optional[str]) -> Optional[str]:
    if session_cookie:
        return session_cookie
    if not authorization:
        return None

    # "Bearer <token>"
    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise AuthError("Invalid Authorization header format")
    if scheme.lower() != "bearer":
        raise AuthError("Invalid auth scheme")
    return token


def get_current_user(
    authorization: AuthHeader = None,
    session_cookie: SessionCookie = None,
    db: Session = Depends(get_db),
) -> UserModel:
    token = _extract_token(authorization, session_cookie)
    if not token:
        raise AuthError("Not authenticated. Please log in.")

    user_id = read_session_token(token)
    if user_id is None:
        raise AuthError("Session expired or invalid. Please log in again.")

    user = db.query(UserModel).filter(UserModel.id == user_id).first()
    if user is None:
        raise AuthError("User for this session no longer exists")
    return user


CurrentUser = Annotated[UserModel, Depends(get_current_user)]
