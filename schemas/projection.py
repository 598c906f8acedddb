"""
schemas/projection.py

- 예상 성적 계산기(services/grade_projection.py)의 입력/출력 값 타입
- 입력 타입은 모두 frozen(불변)이며, ORM 객체에서 바로 model_validate 할 수 있도록 from_attributes 사용
- None 처리(성적 만점 누락 등)는 호출 측에서 끝낸 뒤 넘겨야 함
"""

from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.enums import AssignmentType, AssignmentStatus, ComponentCategory, PassingStatus


_VALUE_CONFIG = ConfigDict(frozen=True, from_attributes=True)


# =========================================================
# 1) 입력 값 타입
# =========================================================

class GradeBandValue(BaseModel):
    id: Optional[int] = None
    min_score: float                         # 구간 하한 (포함)
    max_score: float                         # 구간 상한 (포함)
    grade_value: float                       # 등급 값
    grade_letter: Optional[str] = None

    model_config = _VALUE_CONFIG


class CourseGrading(BaseModel):
    """계산에 필요한 강의 정보: 통과 기준 + 등급 구간(정렬 순서 유지)"""
    id: int
    passing_grade: Optional[float] = None
    grade_bands: List[GradeBandValue] = Field(default_factory=list)

    model_config = _VALUE_CONFIG


class ComponentValue(BaseModel):
    id: int
    name: str
    category: ComponentCategory
    weight: float                            # 최종 성적 반영 비율 (%)
    minimum_score: float = 0.0
    total_points: float = 100.0
    is_mandatory: bool = False

    model_config = _VALUE_CONFIG


class AssignmentValue(BaseModel):
    id: int
    type: AssignmentType
    max_score: float
    weight: float = 0.0
    due_date: Optional[datetime] = None
    status: AssignmentStatus = AssignmentStatus.DRAFT

    model_config = _VALUE_CONFIG


class GradeValue(BaseModel):
    id: int
    score: float
    max_score: float                         # 호출 측에서 반드시 채워서 전달
    student_id: int
    assignment_id: Optional[int] = None
    grade_component_id: Optional[int] = None

    model_config = _VALUE_CONFIG


# =========================================================
# 2) 출력 타입
# =========================================================

class ComponentStat(BaseModel):
    id: int
    name: str
    category: ComponentCategory
    weight: float
    current_score: float                     # 구성요소 평균 (0~100)
    max_possible_score: float = 100
    completed_assignments: int               # 채점된 과제 수
    total_assignments: int                   # 해당 유형 과제 수


class ProjectedGradeBand(BaseModel):
    grade_value: float


class ProjectedGrade(BaseModel):
    course_id: int
    current_grade: float
    projected_grade: float
    passing_status: PassingStatus
    grade_band: Optional[ProjectedGradeBand] = None
    components: List[ComponentStat] = Field(default_factory=list)


class ProjectedGradeOut(ProjectedGrade):
    """HTTP 응답용: 조회 대상 학생 ID 포함"""
    student_id: int


class GradeSummaryItem(BaseModel):
    """강의 전체 성적 요약의 학생 1명분"""
    student: dict
    course_id: Optional[int] = None
    current_grade: float = 0
    projected_grade: float = 0
    passing_status: Optional[PassingStatus] = None
    grade_band: Optional[ProjectedGradeBand] = None
    components: List[ComponentStat] = Field(default_factory=list)
    is_eligible: Optional[bool] = None
    status: Optional[str] = None
