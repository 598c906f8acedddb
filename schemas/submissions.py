from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from models.enums import SubmissionStatus
from schemas.users import UserBrief


# ✅ 입력용 (학생 제출)
class SubmissionCreate(BaseModel):
    assignment_id: int                                       # 과제 ID
    notes: Optional[str] = None                              # 메모
    status: SubmissionStatus = SubmissionStatus.SUBMITTED    # 초기 상태


# ✅ 완료 처리 (없으면 생성)
class MarkCompleted(BaseModel):
    assignment_id: int


# ✅ 수정용
class SubmissionUpdate(BaseModel):
    status: Optional[SubmissionStatus] = None
    notes: Optional[str] = None


class SubmissionAssignmentBrief(BaseModel):
    id: int
    title: str
    due_date: Optional[datetime] = None
    max_score: float

    model_config = ConfigDict(from_attributes=True)


# ✅ 출력용
class SubmissionOut(BaseModel):
    id: int
    status: SubmissionStatus
    notes: Optional[str] = None
    submitted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    is_late: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    student: UserBrief
    assignment: SubmissionAssignmentBrief

    model_config = ConfigDict(from_attributes=True)
