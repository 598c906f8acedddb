from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from models.enums import EnrollmentStatus
from schemas.grades import GradeCourseBrief


# ✅ 관리자/교수가 학생을 수강 등록
class EnrollmentCreate(BaseModel):
    student_id: int
    course_id: int


# ✅ 학생 본인 수강 신청
class SelfEnrollmentCreate(BaseModel):
    course_id: int


class EnrollmentOut(BaseModel):
    id: int
    student_id: int
    status: EnrollmentStatus
    enrolled_at: Optional[datetime] = None
    course: GradeCourseBrief

    model_config = ConfigDict(from_attributes=True)
