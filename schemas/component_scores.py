from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from schemas.users import UserBrief


class ComponentScoreCreate(BaseModel):
    grade_component_id: int                  # 성적 구성요소 ID
    course_id: int                           # 강의 ID
    points_earned: float                     # 획득 점수 (0 ~ 구성요소 만점)
    feedback: Optional[str] = None
    is_submitted: bool = False


class ComponentScoreUpdate(BaseModel):
    points_earned: Optional[float] = None
    feedback: Optional[str] = None
    is_submitted: Optional[bool] = None
    is_graded: Optional[bool] = None


class ComponentBrief(BaseModel):
    id: int
    name: str
    total_points: float

    model_config = ConfigDict(from_attributes=True)


class ComponentScoreOut(BaseModel):
    id: int
    course_id: int
    points_earned: float
    feedback: Optional[str] = None
    is_submitted: bool
    is_graded: bool
    created_at: Optional[datetime] = None
    student: UserBrief
    grade_component: ComponentBrief
    percentage: Optional[float] = Field(default=None, description="획득 점수 / 구성요소 만점 × 100")

    model_config = ConfigDict(from_attributes=True)


# ✅ 강의별 구성요소 진행 현황
class ComponentProgress(BaseModel):
    total_components: int                    # 점수가 등록된 구성요소 수
    completed_components: int                # 획득 점수가 0보다 큰 구성요소 수
    total_points_earned: float
    total_possible_points: float
    percentage: float                        # 만점 합이 0이면 0
