from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

from models.enums import UserRole


# ✅ 회원가입 요청
class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)   # 로그인 아이디
    email: str = Field(..., max_length=100)                   # 이메일
    password: str = Field(..., min_length=6)                  # 비밀번호 (평문, 저장 시 해시)
    first_name: str                                           # 이름
    last_name: str                                            # 성
    role: UserRole = UserRole.STUDENT                         # 역할

    @field_validator("role")
    @classmethod
    def _no_self_admin(cls, v):
        # 관리자 계정은 회원가입으로 만들 수 없음
        if v == UserRole.ADMIN:
            raise ValueError("Self-registration is limited to student and professor roles")
        return v


# ✅ 로그인 요청
class LoginRequest(BaseModel):
    username: str
    password: str


# ✅ 사용자 정보 수정 (부분 수정)
class UserUpdate(BaseModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6)


# ✅ 관리자 전용 수정 (역할/활성 여부 포함)
class AdminUserUpdate(UserUpdate):
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


# ✅ 출력용
class UserOut(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ 다른 응답에 포함되는 간단한 사용자 정보
class UserBrief(BaseModel):
    id: int
    username: str
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)


# ✅ 로그인/회원가입 응답
class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
