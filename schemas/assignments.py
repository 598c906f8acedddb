from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from models.enums import AssignmentStatus, AssignmentType
from schemas.users import UserBrief


# ✅ 입력용 (POST)
class AssignmentCreate(BaseModel):
    course_id: int                                   # 소속 강의 ID
    title: str                                       # 과제명
    description: Optional[str] = None
    type: AssignmentType                             # 유형
    max_score: float = Field(..., gt=0)              # 만점
    weight: float = Field(0.0, ge=0, le=100)         # 반영 비율
    due_date: Optional[datetime] = None              # 마감일
    status: AssignmentStatus = AssignmentStatus.DRAFT


# ✅ 수정용 (PUT, 부분 수정)
class AssignmentUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[AssignmentType] = None
    max_score: Optional[float] = Field(default=None, gt=0)
    weight: Optional[float] = Field(default=None, ge=0, le=100)
    due_date: Optional[datetime] = None
    status: Optional[AssignmentStatus] = None


# ✅ 출력용
class AssignmentOut(BaseModel):
    id: int
    course_id: int
    title: str
    description: Optional[str] = None
    type: AssignmentType
    max_score: float
    weight: float
    due_date: Optional[datetime] = None
    status: AssignmentStatus
    created_at: Optional[datetime] = None
    created_by: Optional[UserBrief] = None

    model_config = ConfigDict(from_attributes=True)
