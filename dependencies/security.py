from typing import Optional, Annotated
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db
from models.enums import UserRole
from models.users import User as UserModel
from utils.security import InvalidToken, decode_access_token

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# ✅ 현재 로그인 사용자 (모든 보호 라우터에서 사용)
def get_current_user(authorization: AuthHeader = None, db: Session = Depends(get_db)) -> UserModel:
    if not authorization:
        raise _unauthorized("Missing Authorization header")

    # "Bearer <token>" 파싱
    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise _unauthorized("Invalid Authorization header format")

    if scheme.lower() != "bearer":
        raise _unauthorized("Invalid auth scheme")

    try:
        user_id = decode_access_token(token)
    except InvalidToken as e:
        raise _unauthorized(str(e))

    user = db.query(UserModel).filter(UserModel.id == user_id).first()
    if user is None or not user.is_active:
        raise _unauthorized("User not found")

    return user


# ✅ 역할 제한 (예: Depends(require_roles(UserRole.PROFESSOR, UserRole.ADMIN)))
def require_roles(*roles: UserRole):
    def _checker(user: UserModel = Depends(get_current_user)) -> UserModel:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient role for this operation")
        return user

    return _checker


CurrentUser = Annotated[UserModel, Depends(get_current_user)]
