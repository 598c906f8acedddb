from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser, require_roles
from models.component_scores import ComponentScore as ComponentScoreModel
from models.enums import UserRole
from models.users import User as UserModel
from schemas.common import ok
from schemas.component_scores import ComponentScoreCreate, ComponentScoreOut, ComponentScoreUpdate
from services import component_score_service
from services.course_service import ensure_course_owner, get_course_or_404

router = APIRouter(prefix="/component-scores", tags=["구성요소 점수"])

staff_only = require_roles(UserRole.ADMIN, UserRole.PROFESSOR)


def _score_out(score: ComponentScoreModel) -> ComponentScoreOut:
    out = ComponentScoreOut.model_validate(score)
    total = score.grade_component.total_points
    out.percentage = score.points_earned / total * 100 if total else 0.0
    return out


# ✅ [CREATE] 구성요소 점수 등록 (학생)
@router.post("/", status_code=201)
def create_component_score(payload: ComponentScoreCreate, user: UserModel = Depends(require_roles(UserRole.STUDENT)), db: Session = Depends(get_db)):
    score = component_score_service.create_component_score(db, payload, user)
    return ok(_score_out(score), "구성요소 점수가 등록되었습니다")


# ✅ [READ] 구성요소 점수 목록 (역할별 범위)
@router.get("/")
def read_component_scores(user: CurrentUser, db: Session = Depends(get_db)):
    return ok([_score_out(s) for s in component_score_service.list_component_scores(db, user)])


# ✅ [READ] 내 구성요소 점수
@router.get("/my")
def read_my_component_scores(user: UserModel = Depends(require_roles(UserRole.STUDENT)), db: Session = Depends(get_db)):
    return ok([_score_out(s) for s in component_score_service.list_by_student(db, user.id)])


# ✅ [READ] 강의별 (student_id 지정 시 해당 학생만, 학생은 항상 본인)
@router.get("/course/{course_id}")
def read_course_component_scores(course_id: int, user: CurrentUser, student_id: Optional[int] = None, db: Session = Depends(get_db)):
    if user.role == UserRole.STUDENT:
        if student_id is not None and student_id != user.id:
            raise HTTPException(status_code=403, detail="Students can only view their own scores")
        student_id = user.id
    if student_id is not None:
        if user.role == UserRole.PROFESSOR:
            ensure_course_owner(get_course_or_404(db, course_id), user, "access")
        return ok([_score_out(s) for s in component_score_service.list_by_student(db, student_id, course_id)])
    return ok([_score_out(s) for s in component_score_service.list_by_course(db, course_id, user)])


# ✅ [READ] 학생별
@router.get("/student/{student_id}", dependencies=[Depends(staff_only)])
def read_student_component_scores(student_id: int, db: Session = Depends(get_db)):
    return ok([_score_out(s) for s in component_score_service.list_by_student(db, student_id)])


# ✅ [READ] 강의 진행 현황 (student_id 없으면 본인)
@router.get("/progress/{course_id}")
def read_component_progress(course_id: int, user: CurrentUser, student_id: Optional[int] = None, db: Session = Depends(get_db)):
    target_id = student_id if student_id is not None else user.id
    if user.role == UserRole.STUDENT and target_id != user.id:
        raise HTTPException(status_code=403, detail="Students can only view their own progress")
    return ok(component_score_service.get_component_progress(db, target_id, course_id))


# ✅ [READ] 상세
@router.get("/{score_id}")
def read_component_score(score_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    score = component_score_service.get_component_score_or_404(db, score_id)
    if user.role == UserRole.STUDENT and score.student_id != user.id:
        raise HTTPException(status_code=403, detail="You can only view your own component scores")
    return ok(_score_out(score))


# ✅ [UPDATE] 수정
@router.put("/{score_id}")
def update_component_score(score_id: int, payload: ComponentScoreUpdate, user: CurrentUser, db: Session = Depends(get_db)):
    score = component_score_service.update_component_score(db, score_id, payload, user)
    return ok(_score_out(score), "구성요소 점수가 수정되었습니다")


# ✅ [DELETE] 삭제
@router.delete("/{score_id}")
def delete_component_score(score_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    component_score_service.delete_component_score(db, score_id, user)
    return ok({"score_id": score_id}, "Component score deleted successfully")
