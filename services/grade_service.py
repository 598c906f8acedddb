"""
services/grade_service.py

- 과제 점수(Grade) 등록/수정/삭제와 권한 검사
- 예상 성적: 강의/학생 존재를 먼저 확인(404)한 뒤 계산기 호출
"""

import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.assignments import Assignment as AssignmentModel
from models.enrollments import Enrollment as EnrollmentModel
from models.enums import EnrollmentStatus, UserRole
from models.grades import Grade as GradeModel
from models.users import User as UserModel
from schemas.grades import GradeCreate, GradeUpdate
from schemas.projection import GradeSummaryItem, ProjectedGrade
from schemas.users import UserBrief
from services.course_service import ensure_course_owner, get_course_or_404
from services.grade_projection import build_projection_input, compute_projection

logger = logging.getLogger(__name__)


# ==========================================================
# [1단계] 점수 CRUD
# ==========================================================

def get_grade_or_404(db: Session, grade_id: int) -> GradeModel:
    grade = db.query(GradeModel).filter(GradeModel.id == grade_id).first()
    if grade is None:
        raise HTTPException(status_code=404, detail="Grade not found")
    return grade


def create_grade(db: Session, payload: GradeCreate, student: UserModel) -> GradeModel:
    assignment = db.query(AssignmentModel).filter(AssignmentModel.id == payload.assignment_id).first()
    if assignment is None:
        raise HTTPException(status_code=404, detail="Assignment not found")

    get_course_or_404(db, payload.course_id)

    if assignment.course_id != payload.course_id:
        raise HTTPException(status_code=403, detail="Assignment does not belong to the specified course")

    existing = (
        db.query(GradeModel)
        .filter(GradeModel.student_id == student.id, GradeModel.assignment_id == assignment.id)
        .first()
    )
    if existing is not None:
        raise HTTPException(status_code=409, detail="Grade already exists for this assignment")

    data = payload.model_dump()
    data["max_score"] = payload.max_score or assignment.max_score
    grade = GradeModel(**data, student_id=student.id)

    db.add(grade)
    db.commit()
    db.refresh(grade)
    return grade


def _ensure_can_change(grade: GradeModel, user: UserModel, action: str):
    """학생: 본인 점수만 / 교수: 본인이 출제한 과제의 점수만 / 관리자: 전체"""
    if user.role == UserRole.STUDENT and grade.student_id != user.id:
        raise HTTPException(status_code=403, detail=f"You can only {action} your own grades")
    if user.role == UserRole.PROFESSOR and grade.assignment.created_by_id != user.id:
        raise HTTPException(status_code=403, detail=f"You can only {action} grades for your own assignments")


def update_grade(db: Session, grade_id: int, payload: GradeUpdate, user: UserModel) -> GradeModel:
    grade = get_grade_or_404(db, grade_id)
    _ensure_can_change(grade, user, "update")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(grade, key, value)

    db.commit()
    db.refresh(grade)
    return grade


def delete_grade(db: Session, grade_id: int, user: UserModel):
    grade = get_grade_or_404(db, grade_id)
    _ensure_can_change(grade, user, "delete")
    db.delete(grade)
    db.commit()


# ==========================================================
# [2단계] 예상 성적
# ==========================================================

def calculate_projected_grade(db: Session, student_id: int, course_id: int) -> ProjectedGrade:
    course = get_course_or_404(db, course_id)

    student = db.query(UserModel).filter(UserModel.id == student_id).first()
    if student is None:
        raise HTTPException(status_code=404, detail="Student not found")

    assignments = db.query(AssignmentModel).filter(AssignmentModel.course_id == course_id).all()
    grades = (
        db.query(GradeModel)
        .filter(GradeModel.student_id == student_id, GradeModel.course_id == course_id)
        .all()
    )

    result = compute_projection(*build_projection_input(course, assignments, grades))
    logger.info(
        f"예상 성적 계산: course={course_id} student={student_id} "
        f"current={result.current_grade:.2f} status={result.passing_status.value}"
    )
    return result


def get_grades_summary(db: Session, course_id: int, user: UserModel) -> List[GradeSummaryItem]:
    """강의 수강생 전체의 예상 성적. 한 학생 계산 실패가 전체를 막지 않음"""
    course = get_course_or_404(db, course_id)
    ensure_course_owner(course, user, "access")

    enrollments = (
        db.query(EnrollmentModel)
        .filter(EnrollmentModel.course_id == course_id, EnrollmentModel.status == EnrollmentStatus.ACTIVE)
        .all()
    )

    summaries = []
    for enrollment in enrollments:
        student = UserBrief.model_validate(enrollment.student).model_dump()
        try:
            projection = calculate_projected_grade(db, enrollment.student_id, course_id)
        except Exception:
            logger.exception(f"예상 성적 계산 실패: course={course_id} student={enrollment.student_id}")
            summaries.append(
                GradeSummaryItem(
                    student=student,
                    current_grade=0,
                    projected_grade=0,
                    is_eligible=False,
                    status="error",
                )
            )
            continue
        summaries.append(GradeSummaryItem(student=student, **projection.model_dump()))

    return summaries
