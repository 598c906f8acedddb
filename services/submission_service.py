"""
services/submission_service.py

- 과제 제출(AssignmentSubmission) 등록/수정/완료 처리와 조회
- 최초 제출 시각 기준으로 마감일(due_date) 이후면 지각(is_late) 처리
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.assignments import Assignment as AssignmentModel
from models.enums import SubmissionStatus, UserRole
from models.submissions import AssignmentSubmission as SubmissionModel
from models.users import User as UserModel
from schemas.submissions import SubmissionCreate, SubmissionUpdate
from services.course_service import ensure_course_owner
from services.enrollment_service import is_actively_enrolled

logger = logging.getLogger(__name__)


def _get_assignment_or_404(db: Session, assignment_id: int) -> AssignmentModel:
    assignment = db.query(AssignmentModel).filter(AssignmentModel.id == assignment_id).first()
    if assignment is None:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return assignment


def get_submission_or_404(db: Session, submission_id: int) -> SubmissionModel:
    submission = db.query(SubmissionModel).filter(SubmissionModel.id == submission_id).first()
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission


def _find(db: Session, student_id: int, assignment_id: int) -> Optional[SubmissionModel]:
    return (
        db.query(SubmissionModel)
        .filter(SubmissionModel.student_id == student_id, SubmissionModel.assignment_id == assignment_id)
        .first()
    )


def _stamp_submitted(submission: SubmissionModel, assignment: AssignmentModel, now: datetime):
    """최초 제출 시각 기록 + 지각 여부 (이미 제출된 건은 유지)"""
    if submission.submitted_at is not None:
        return
    submission.submitted_at = now
    submission.is_late = assignment.due_date is not None and now > assignment.due_date


# ==========================================================
# [1단계] 제출 / 완료 / 수정
# ==========================================================

def create_submission(db: Session, payload: SubmissionCreate, student: UserModel) -> SubmissionModel:
    assignment = _get_assignment_or_404(db, payload.assignment_id)

    if not is_actively_enrolled(db, student.id, assignment.course_id):
        raise HTTPException(status_code=403, detail="You are not enrolled in this course")
    if payload.status == SubmissionStatus.GRADED:
        raise HTTPException(status_code=403, detail="Only professors can mark submissions as graded")
    if _find(db, student.id, assignment.id) is not None:
        raise HTTPException(status_code=409, detail="Submission already exists")

    submission = SubmissionModel(
        student_id=student.id,
        assignment_id=assignment.id,
        notes=payload.notes,
        status=payload.status,
        is_late=False,
    )
    if payload.status != SubmissionStatus.NOT_SUBMITTED:
        _stamp_submitted(submission, assignment, datetime.utcnow())

    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission


def mark_completed(db: Session, assignment_id: int, student: UserModel) -> SubmissionModel:
    """제출 기록이 없으면 만들고 완료 처리"""
    assignment = _get_assignment_or_404(db, assignment_id)
    submission = _find(db, student.id, assignment.id)
    if submission is None:
        submission = create_submission(
            db, SubmissionCreate(assignment_id=assignment.id, status=SubmissionStatus.COMPLETED), student
        )

    now = datetime.utcnow()
    submission.status = SubmissionStatus.COMPLETED
    submission.completed_at = now
    _stamp_submitted(submission, assignment, now)

    db.commit()
    db.refresh(submission)
    logger.info(f"과제 완료: student={student.id} assignment={assignment.id} late={submission.is_late}")
    return submission


def update_submission(db: Session, submission_id: int, payload: SubmissionUpdate, user: UserModel) -> SubmissionModel:
    submission = get_submission_or_404(db, submission_id)
    changes = payload.model_dump(exclude_unset=True)

    if user.role == UserRole.STUDENT:
        if submission.student_id != user.id:
            raise HTTPException(status_code=403, detail="You can only update your own submissions")
        if changes.get("status") == SubmissionStatus.GRADED:
            raise HTTPException(status_code=403, detail="Only professors can mark submissions as graded")
    elif user.role == UserRole.PROFESSOR:
        ensure_course_owner(submission.assignment.course, user, "update submissions for")

    for key, value in changes.items():
        if value is not None:
            setattr(submission, key, value)

    if submission.status != SubmissionStatus.NOT_SUBMITTED:
        _stamp_submitted(submission, submission.assignment, datetime.utcnow())

    db.commit()
    db.refresh(submission)
    return submission


# ==========================================================
# [2단계] 조회
# ==========================================================

def get_submissions_by_student(db: Session, student_id: int) -> List[SubmissionModel]:
    return (
        db.query(SubmissionModel)
        .filter(SubmissionModel.student_id == student_id)
        .order_by(SubmissionModel.created_at.desc(), SubmissionModel.id.desc())
        .all()
    )


def get_submissions_by_assignment(db: Session, assignment_id: int, user: UserModel) -> List[SubmissionModel]:
    assignment = _get_assignment_or_404(db, assignment_id)
    ensure_course_owner(assignment.course, user, "view submissions for")
    return (
        db.query(SubmissionModel)
        .filter(SubmissionModel.assignment_id == assignment_id)
        .order_by(SubmissionModel.created_at.desc(), SubmissionModel.id.desc())
        .all()
    )


def get_submission(db: Session, student_id: int, assignment_id: int, user: UserModel) -> Optional[SubmissionModel]:
    if user.role == UserRole.STUDENT and user.id != student_id:
        raise HTTPException(status_code=403, detail="Students can only view their own submissions")
    return _find(db, student_id, assignment_id)
