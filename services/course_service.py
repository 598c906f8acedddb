"""
services/course_service.py

- 강의 생성/수정/삭제 및 성적 구성요소·등급 구간 관리
- 성적 구성 검증(가중치 합, 등급 구간 겹침)은 여기서 수행. 계산기는 검증하지 않음
"""

import logging
from typing import List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.orm import Session

from config.settings import settings
from models.assignments import Assignment as AssignmentModel
from models.courses import Course as CourseModel
from models.courses import GradeBand as GradeBandModel
from models.courses import GradeComponent as GradeComponentModel
from models.enrollments import Enrollment as EnrollmentModel
from models.enums import EnrollmentStatus, UserRole
from models.users import User as UserModel
from schemas.courses import (
    CourseCreate,
    CourseUpdate,
    GradeBandCreate,
    GradeBandUpdate,
    GradeComponentCreate,
    GradeComponentUpdate,
    GradingCheck,
)

logger = logging.getLogger(__name__)

# 부동소수 가중치 합 비교 허용 오차
WEIGHT_TOLERANCE = 0.01


# ==========================================================
# [공통] 조회 / 권한
# ==========================================================

def get_course_or_404(db: Session, course_id: int) -> CourseModel:
    course = db.query(CourseModel).filter(CourseModel.id == course_id).first()
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


def ensure_course_owner(course: CourseModel, user: UserModel, action: str = "modify"):
    """담당 교수 본인 또는 관리자만 허용"""
    if user.role == UserRole.ADMIN:
        return
    if course.professor_id != user.id:
        raise HTTPException(status_code=403, detail=f"You can only {action} your own courses")


def course_counts(db: Session, course: CourseModel) -> Tuple[int, int]:
    """(활성 수강생 수, 과제 수)"""
    enrollment_count = (
        db.query(EnrollmentModel)
        .filter(EnrollmentModel.course_id == course.id, EnrollmentModel.status == EnrollmentStatus.ACTIVE)
        .count()
    )
    assignment_count = db.query(AssignmentModel).filter(AssignmentModel.course_id == course.id).count()
    return enrollment_count, assignment_count


# ==========================================================
# [검증] 성적 구성
# ==========================================================

def bands_overlap(a_min: float, a_max: float, b_min: float, b_max: float) -> bool:
    return a_min <= b_max and b_min <= a_max


def validate_band(course: CourseModel, min_score: float, max_score: float, exclude_id: Optional[int] = None):
    if min_score > max_score:
        raise HTTPException(status_code=400, detail="min_score must be less than or equal to max_score")
    for band in course.grade_bands:
        if exclude_id is not None and band.id == exclude_id:
            continue
        if bands_overlap(min_score, max_score, band.min_score, band.max_score):
            raise HTTPException(
                status_code=400,
                detail=f"Grade band {min_score}-{max_score} overlaps existing band {band.min_score}-{band.max_score}",
            )


def validate_total_weight(course: CourseModel, new_weight: float, exclude_id: Optional[int] = None):
    """추가/수정 후 가중치 합이 100을 넘으면 400"""
    total = sum(c.weight for c in course.grade_components if exclude_id is None or c.id != exclude_id)
    if total + new_weight > 100 + WEIGHT_TOLERANCE:
        raise HTTPException(
            status_code=400,
            detail=f"Total component weight would be {total + new_weight:g}%, which exceeds 100%",
        )


def find_band_gaps(bands: List[Tuple[float, float]]) -> List[List[float]]:
    """0~100 중 어떤 구간에도 포함되지 않는 범위 목록 (정수 점수 기준 1점 간격은 연속으로 간주)"""
    gaps = []
    cursor = 0.0
    for low, high in sorted(bands):
        if low > cursor + 1:
            gaps.append([cursor, low])
        cursor = max(cursor, high)
    if cursor < 100:
        gaps.append([cursor, 100.0])
    return gaps


def check_grading(course: CourseModel) -> GradingCheck:
    total_weight = sum(c.weight for c in course.grade_components)
    ranges = [(b.min_score, b.max_score) for b in course.grade_bands]

    overlap = any(
        bands_overlap(*ranges[i], *ranges[j])
        for i in range(len(ranges))
        for j in range(i + 1, len(ranges))
    )

    return GradingCheck(
        total_weight=total_weight,
        weights_valid=abs(total_weight - 100) <= WEIGHT_TOLERANCE,
        bands_overlap=overlap,
        gaps=find_band_gaps(ranges) if ranges else [[0.0, 100.0]],
    )


# ==========================================================
# [강의] CRUD
# ==========================================================

def create_course(db: Session, payload: CourseCreate, user: UserModel) -> CourseModel:
    if user.role not in (UserRole.PROFESSOR, UserRole.ADMIN):
        raise HTTPException(status_code=403, detail="Only professors can create courses")

    if payload.grade_components:
        total = sum(c.weight for c in payload.grade_components)
        if abs(total - 100) > WEIGHT_TOLERANCE:
            raise HTTPException(
                status_code=400,
                detail=f"Grade component weights must total 100% (got {total:g}%)",
            )

    ranges = [(b.min_score, b.max_score) for b in payload.grade_bands]
    for i in range(len(ranges)):
        for j in range(i + 1, len(ranges)):
            if bands_overlap(*ranges[i], *ranges[j]):
                raise HTTPException(status_code=400, detail="Grade bands must not overlap")

    course = CourseModel(
        code=payload.code,
        name=payload.name,
        description=payload.description,
        credits=payload.credits,
        passing_grade=payload.passing_grade if payload.passing_grade is not None else settings.DEFAULT_PASSING_GRADE,
        professor_id=user.id,
    )
    course.grade_components = [GradeComponentModel(**c.model_dump()) for c in payload.grade_components]
    course.grade_bands = [GradeBandModel(**b.model_dump()) for b in payload.grade_bands]

    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info(f"강의 생성: id={course.id} code={course.code} professor={user.id}")
    return course


def update_course(db: Session, course_id: int, payload: CourseUpdate, user: UserModel) -> CourseModel:
    course = get_course_or_404(db, course_id)
    ensure_course_owner(course, user, "update")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(course, key, value)

    db.commit()
    db.refresh(course)
    return course


def deactivate_course(db: Session, course_id: int, user: UserModel):
    """삭제 대신 비활성화 (성적 이력 보존)"""
    course = get_course_or_404(db, course_id)
    ensure_course_owner(course, user, "delete")
    course.is_active = False
    db.commit()
    logger.info(f"강의 비활성화: id={course_id} by user={user.id}")


def get_course_students(db: Session, course_id: int, user: UserModel) -> List[UserModel]:
    course = get_course_or_404(db, course_id)
    ensure_course_owner(course, user, "access")
    enrollments = (
        db.query(EnrollmentModel)
        .filter(EnrollmentModel.course_id == course_id, EnrollmentModel.status == EnrollmentStatus.ACTIVE)
        .all()
    )
    return [e.student for e in enrollments]


# ==========================================================
# [성적 구성요소] CRUD
# ==========================================================

def _get_component_or_404(db: Session, course_id: int, component_id: int) -> GradeComponentModel:
    component = (
        db.query(GradeComponentModel)
        .filter(GradeComponentModel.id == component_id, GradeComponentModel.course_id == course_id)
        .first()
    )
    if component is None:
        raise HTTPException(status_code=404, detail="Grade component not found")
    return component


def add_grade_component(db: Session, course_id: int, payload: GradeComponentCreate, user: UserModel):
    course = get_course_or_404(db, course_id)
    ensure_course_owner(course, user)
    validate_total_weight(course, payload.weight)

    component = GradeComponentModel(course_id=course.id, **payload.model_dump())
    db.add(component)
    db.commit()
    db.refresh(component)
    return component


def update_grade_component(db: Session, course_id: int, component_id: int, payload: GradeComponentUpdate, user: UserModel):
    course = get_course_or_404(db, course_id)
    component = _get_component_or_404(db, course_id, component_id)
    ensure_course_owner(course, user, "update grade components for")

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("weight") is not None:
        validate_total_weight(course, changes["weight"], exclude_id=component.id)

    for key, value in changes.items():
        if value is not None:
            setattr(component, key, value)

    db.commit()
    db.refresh(component)
    return component


def delete_grade_component(db: Session, course_id: int, component_id: int, user: UserModel):
    course = get_course_or_404(db, course_id)
    component = _get_component_or_404(db, course_id, component_id)
    ensure_course_owner(course, user, "delete grade components for")
    db.delete(component)
    db.commit()


# ==========================================================
# [등급 구간] CRUD
# ==========================================================

def _get_band_or_404(db: Session, course_id: int, band_id: int) -> GradeBandModel:
    band = (
        db.query(GradeBandModel)
        .filter(GradeBandModel.id == band_id, GradeBandModel.course_id == course_id)
        .first()
    )
    if band is None:
        raise HTTPException(status_code=404, detail="Grade band not found")
    return band


def add_grade_band(db: Session, course_id: int, payload: GradeBandCreate, user: UserModel):
    course = get_course_or_404(db, course_id)
    ensure_course_owner(course, user)
    validate_band(course, payload.min_score, payload.max_score)

    band = GradeBandModel(course_id=course.id, **payload.model_dump())
    db.add(band)
    db.commit()
    db.refresh(band)
    return band


def update_grade_band(db: Session, course_id: int, band_id: int, payload: GradeBandUpdate, user: UserModel):
    course = get_course_or_404(db, course_id)
    band = _get_band_or_404(db, course_id, band_id)
    ensure_course_owner(course, user, "update grade bands for")

    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    validate_band(
        course,
        changes.get("min_score", band.min_score),
        changes.get("max_score", band.max_score),
        exclude_id=band.id,
    )

    for key, value in changes.items():
        setattr(band, key, value)

    db.commit()
    db.refresh(band)
    return band


def delete_grade_band(db: Session, course_id: int, band_id: int, user: UserModel):
    course = get_course_or_404(db, course_id)
    band = _get_band_or_404(db, course_id, band_id)
    ensure_course_owner(course, user, "delete grade bands for")
    db.delete(band)
    db.commit()
