from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from datetime import datetime

from models.enums import ComponentCategory
from schemas.users import UserBrief


# =========================================================
# 1) 성적 구성요소
# =========================================================

class GradeComponentCreate(BaseModel):
    name: str                                                  # 구성요소명 (예: 중간고사)
    # 프론트엔드는 "type" 으로 보냄
    category: ComponentCategory = Field(validation_alias=AliasChoices("category", "type"))
    weight: float = Field(..., ge=0, le=100)                   # 반영 비율 (%)
    minimum_score: float = Field(0.0, ge=0)                    # 최소 요구 점수
    total_points: float = Field(100.0, gt=0)                   # 만점
    is_mandatory: bool = False                                 # 필수 여부


class GradeComponentUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[ComponentCategory] = Field(
        default=None, validation_alias=AliasChoices("category", "type")
    )
    weight: Optional[float] = Field(default=None, ge=0, le=100)
    minimum_score: Optional[float] = Field(default=None, ge=0)
    total_points: Optional[float] = Field(default=None, gt=0)
    is_mandatory: Optional[bool] = None


class GradeComponentOut(BaseModel):
    id: int
    course_id: int
    name: str
    category: ComponentCategory
    weight: float
    minimum_score: float
    total_points: float
    is_mandatory: bool

    model_config = ConfigDict(from_attributes=True)


# =========================================================
# 2) 등급 구간
# =========================================================

class GradeBandCreate(BaseModel):
    min_score: float = Field(..., ge=0, le=100)                # 구간 하한 (%)
    max_score: float = Field(..., ge=0, le=100)                # 구간 상한 (%)
    # 프론트엔드 호환: "grade" 로 보내도 grade_value 로 처리
    grade_value: float = Field(validation_alias=AliasChoices("grade_value", "grade"))
    grade_letter: Optional[str] = Field(default=None, max_length=5)

    @model_validator(mode="after")
    def _check_range(self):
        if self.min_score > self.max_score:
            raise ValueError("min_score must be less than or equal to max_score")
        return self


class GradeBandUpdate(BaseModel):
    min_score: Optional[float] = Field(default=None, ge=0, le=100)
    max_score: Optional[float] = Field(default=None, ge=0, le=100)
    grade_value: Optional[float] = Field(default=None, validation_alias=AliasChoices("grade_value", "grade"))
    grade_letter: Optional[str] = Field(default=None, max_length=5)


class GradeBandOut(BaseModel):
    id: int
    course_id: int
    min_score: float
    max_score: float
    grade_value: float
    grade_letter: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# =========================================================
# 3) 강의
# =========================================================

class CourseCreate(BaseModel):
    code: str = Field(..., max_length=20)                      # 강의 코드
    name: str                                                  # 강의명
    description: Optional[str] = None
    credits: int = Field(3, ge=1)                              # 학점
    passing_grade: Optional[float] = Field(default=None, ge=0, le=100)  # 미지정 시 기본값
    grade_components: List[GradeComponentCreate] = Field(default_factory=list)
    grade_bands: List[GradeBandCreate] = Field(default_factory=list)


class CourseUpdate(BaseModel):
    code: Optional[str] = Field(default=None, max_length=20)
    name: Optional[str] = None
    description: Optional[str] = None
    credits: Optional[int] = Field(default=None, ge=1)
    passing_grade: Optional[float] = Field(default=None, ge=0, le=100)


class CourseOut(BaseModel):
    id: int
    code: str
    name: str
    description: Optional[str] = None
    credits: int
    passing_grade: Optional[float] = None
    is_active: bool
    created_at: Optional[datetime] = None
    professor: Optional[UserBrief] = None
    grade_components: List[GradeComponentOut] = Field(default_factory=list)
    grade_bands: List[GradeBandOut] = Field(default_factory=list)
    enrollment_count: Optional[int] = None
    assignment_count: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ 성적 구성 점검 결과
class GradingCheck(BaseModel):
    total_weight: float
    weights_valid: bool                     # 가중치 합이 100인지
    bands_overlap: bool                     # 겹치는 등급 구간 존재 여부
    gaps: List[List[float]] = Field(default_factory=list)  # 0~100 중 어떤 구간에도 속하지 않는 범위
