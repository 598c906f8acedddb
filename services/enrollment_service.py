import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.courses import Course as CourseModel
from models.enrollments import Enrollment as EnrollmentModel
from models.enums import EnrollmentStatus, UserRole
from models.users import User as UserModel

logger = logging.getLogger(__name__)


def enroll_student(db: Session, student_id: int, course_id: int) -> EnrollmentModel:
    """수강 등록 (철회했던 수강은 다시 활성화)"""
    student = db.query(UserModel).filter(UserModel.id == student_id).first()
    if student is None:
        raise HTTPException(status_code=404, detail="Student not found")
    if student.role != UserRole.STUDENT:
        raise HTTPException(status_code=400, detail="Only students can be enrolled in courses")

    course = db.query(CourseModel).filter(CourseModel.id == course_id).first()
    if course is None or not course.is_active:
        raise HTTPException(status_code=404, detail="Course not found")

    enrollment = (
        db.query(EnrollmentModel)
        .filter(EnrollmentModel.student_id == student_id, EnrollmentModel.course_id == course_id)
        .first()
    )
    if enrollment is not None:
        if enrollment.status == EnrollmentStatus.ACTIVE:
            raise HTTPException(status_code=409, detail="Student is already enrolled in this course")
        enrollment.status = EnrollmentStatus.ACTIVE
    else:
        enrollment = EnrollmentModel(student_id=student_id, course_id=course_id)
        db.add(enrollment)

    db.commit()
    db.refresh(enrollment)
    logger.info(f"수강 등록: student={student_id} course={course_id}")
    return enrollment


def is_actively_enrolled(db: Session, student_id: int, course_id: int) -> bool:
    return (
        db.query(EnrollmentModel)
        .filter(
            EnrollmentModel.student_id == student_id,
            EnrollmentModel.course_id == course_id,
            EnrollmentModel.status == EnrollmentStatus.ACTIVE,
        )
        .first()
        is not None
    )


def get_student_enrollments(db: Session, student_id: int) -> List[EnrollmentModel]:
    return (
        db.query(EnrollmentModel)
        .filter(EnrollmentModel.student_id == student_id, EnrollmentModel.status == EnrollmentStatus.ACTIVE)
        .order_by(EnrollmentModel.enrolled_at.desc())
        .all()
    )


def drop_enrollment(db: Session, student_id: int, course_id: int, user: UserModel) -> EnrollmentModel:
    """수강 철회 (학생은 본인 수강만)"""
    if user.role == UserRole.STUDENT and user.id != student_id:
        raise HTTPException(status_code=403, detail="Students can only drop their own enrollments")

    enrollment = (
        db.query(EnrollmentModel)
        .filter(
            EnrollmentModel.student_id == student_id,
            EnrollmentModel.course_id == course_id,
            EnrollmentModel.status == EnrollmentStatus.ACTIVE,
        )
        .first()
    )
    if enrollment is None:
        raise HTTPException(status_code=404, detail="Enrollment not found")

    enrollment.status = EnrollmentStatus.DROPPED
    db.commit()
    db.refresh(enrollment)
    logger.info(f"수강 철회: student={student_id} course={course_id} by user={user.id}")
    return enrollment
