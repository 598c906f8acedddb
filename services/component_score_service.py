import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models.component_scores import ComponentScore as ComponentScoreModel
from models.courses import Course as CourseModel
from models.courses import GradeComponent as GradeComponentModel
from models.enums import UserRole
from models.users import User as UserModel
from schemas.component_scores import ComponentProgress, ComponentScoreCreate, ComponentScoreUpdate
from services.course_service import ensure_course_owner, get_course_or_404
from services.enrollment_service import is_actively_enrolled

logger = logging.getLogger(__name__)


def _check_points(points: float, component: GradeComponentModel):
    if points < 0 or points > component.total_points:
        raise HTTPException(
            status_code=400,
            detail=f"Points earned must be between 0 and {component.total_points:g}",
        )


def get_component_score_or_404(db: Session, score_id: int) -> ComponentScoreModel:
    score = db.query(ComponentScoreModel).filter(ComponentScoreModel.id == score_id).first()
    if score is None:
        raise HTTPException(status_code=404, detail="Component score not found")
    return score


def create_component_score(db: Session, payload: ComponentScoreCreate, student: UserModel) -> ComponentScoreModel:
    component = (
        db.query(GradeComponentModel).filter(GradeComponentModel.id == payload.grade_component_id).first()
    )
    if component is None:
        raise HTTPException(status_code=404, detail="Grade component not found")

    get_course_or_404(db, payload.course_id)
    if component.course_id != payload.course_id:
        raise HTTPException(status_code=403, detail="Grade component does not belong to the specified course")

    if not is_actively_enrolled(db, student.id, payload.course_id):
        raise HTTPException(status_code=403, detail="You are not enrolled in this course")

    existing = (
        db.query(ComponentScoreModel)
        .filter(
            ComponentScoreModel.student_id == student.id,
            ComponentScoreModel.grade_component_id == component.id,
        )
        .first()
    )
    if existing is not None:
        raise HTTPException(status_code=409, detail="Component score already exists")

    _check_points(payload.points_earned, component)

    score = ComponentScoreModel(student_id=student.id, **payload.model_dump())
    db.add(score)
    db.commit()
    db.refresh(score)
    return score


def list_component_scores(db: Session, user: UserModel) -> List[ComponentScoreModel]:
    """관리자: 전체 / 교수: 담당 강의 / 학생: 본인"""
    query = db.query(ComponentScoreModel)
    if user.role == UserRole.PROFESSOR:
        course_ids = [c.id for c in db.query(CourseModel.id).filter(CourseModel.professor_id == user.id)]
        query = query.filter(ComponentScoreModel.course_id.in_(course_ids))
    elif user.role == UserRole.STUDENT:
        query = query.filter(ComponentScoreModel.student_id == user.id)
    return query.order_by(ComponentScoreModel.created_at.desc()).all()


def list_by_student(db: Session, student_id: int, course_id: Optional[int] = None) -> List[ComponentScoreModel]:
    query = db.query(ComponentScoreModel).filter(ComponentScoreModel.student_id == student_id)
    if course_id is not None:
        query = query.filter(ComponentScoreModel.course_id == course_id)
    return query.order_by(ComponentScoreModel.created_at.desc(), ComponentScoreModel.id.desc()).all()


def list_by_course(db: Session, course_id: int, user: UserModel) -> List[ComponentScoreModel]:
    course = get_course_or_404(db, course_id)
    ensure_course_owner(course, user, "access")
    return (
        db.query(ComponentScoreModel)
        .filter(ComponentScoreModel.course_id == course_id)
        .order_by(ComponentScoreModel.created_at.desc(), ComponentScoreModel.id.desc())
        .all()
    )


def get_component_progress(db: Session, student_id: int, course_id: int) -> ComponentProgress:
    get_course_or_404(db, course_id)
    scores = list_by_student(db, student_id, course_id)

    earned = sum(s.points_earned for s in scores)
    possible = sum(s.grade_component.total_points or 0 for s in scores)
    return ComponentProgress(
        total_components=len(scores),
        completed_components=sum(1 for s in scores if s.points_earned > 0),
        total_points_earned=earned,
        total_possible_points=possible,
        percentage=earned / possible * 100 if possible > 0 else 0.0,
    )


def _ensure_can_change(score: ComponentScoreModel, user: UserModel):
    if user.role == UserRole.ADMIN:
        return
    if user.role == UserRole.STUDENT and score.student_id == user.id:
        return
    if user.role == UserRole.PROFESSOR and score.course.professor_id == user.id:
        return
    raise HTTPException(status_code=403, detail="You cannot modify this component score")


def update_component_score(db: Session, score_id: int, payload: ComponentScoreUpdate, user: UserModel):
    score = get_component_score_or_404(db, score_id)
    _ensure_can_change(score, user)

    changes = payload.model_dump(exclude_unset=True)
    # 채점 완료 처리는 교수/관리자만
    if "is_graded" in changes and user.role == UserRole.STUDENT:
        raise HTTPException(status_code=403, detail="Only professors can mark scores as graded")
    if changes.get("points_earned") is not None:
        _check_points(changes["points_earned"], score.grade_component)

    for key, value in changes.items():
        setattr(score, key, value)

    db.commit()
    db.refresh(score)
    return score


def delete_component_score(db: Session, score_id: int, user: UserModel):
    score = get_component_score_or_404(db, score_id)
    _ensure_can_change(score, user)
    db.delete(score)
    db.commit()
