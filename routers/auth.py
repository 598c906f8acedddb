import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser
from models.users import User as UserModel
from schemas.common import ok
from schemas.users import AuthResponse, LoginRequest, RegisterRequest, UserOut
from utils.security import create_access_token

router = APIRouter(prefix="/auth", tags=["인증"])

logger = logging.getLogger(__name__)


def _auth_response(user: UserModel) -> AuthResponse:
    return AuthResponse(access_token=create_access_token(user.id), user=UserOut.model_validate(user))


# ✅ [REGISTER] 회원가입
@router.post("/register", status_code=201)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    existing = (
        db.query(UserModel)
        .filter(or_(UserModel.username == request.username, UserModel.email == request.email))
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail="Username or email already exists")

    user = UserModel(
        username=request.username,
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        role=request.role,
    )
    user.set_password(request.password)
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"회원가입: id={user.id} username={user.username} role={user.role.value}")
    return ok(_auth_response(user), "회원가입이 완료되었습니다")


# ✅ [LOGIN] 로그인 API
@router.post("/login")
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(UserModel).filter(UserModel.username == request.username).first()
    if not user or not user.is_active or not user.check_password(request.password):
        raise HTTPException(status_code=401, detail="잘못된 아이디 또는 비밀번호입니다.")
    return ok(_auth_response(user), "로그인 성공")


# ✅ [ME] 현재 로그인 사용자
@router.get("/me")
def me(user: CurrentUser):
    return ok(UserOut.model_validate(user))
