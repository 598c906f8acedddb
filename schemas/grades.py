from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from models.enums import AssignmentType
from schemas.users import UserBrief


# ✅ 입력용 (학생이 과제 점수 등록)
class GradeCreate(BaseModel):
    assignment_id: int                                   # 과제 ID
    course_id: int                                       # 강의 ID
    score: float = Field(..., ge=0)                      # 획득 점수
    max_score: Optional[float] = Field(default=None, gt=0)  # 미지정 시 과제 만점
    feedback: Optional[str] = None
    is_submitted: bool = False
    is_graded: bool = False


# ✅ 수정용
class GradeUpdate(BaseModel):
    score: Optional[float] = Field(default=None, ge=0)
    max_score: Optional[float] = Field(default=None, gt=0)
    feedback: Optional[str] = None
    is_submitted: Optional[bool] = None
    is_graded: Optional[bool] = None


class GradeAssignmentBrief(BaseModel):
    id: int
    title: str
    type: AssignmentType
    max_score: float
    weight: float

    model_config = ConfigDict(from_attributes=True)


class GradeCourseBrief(BaseModel):
    id: int
    code: str
    name: str

    model_config = ConfigDict(from_attributes=True)


# ✅ 출력용
class GradeOut(BaseModel):
    id: int
    score: float
    max_score: Optional[float] = None
    feedback: Optional[str] = None
    is_submitted: bool
    is_graded: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    student: UserBrief
    assignment: GradeAssignmentBrief
    course: GradeCourseBrief

    model_config = ConfigDict(from_attributes=True)
