from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser, require_roles
from models.assignments import Assignment as AssignmentModel
from models.enums import AssignmentStatus, UserRole
from models.users import User as UserModel
from schemas.assignments import AssignmentCreate, AssignmentOut, AssignmentUpdate
from schemas.common import ok
from services.course_service import ensure_course_owner, get_course_or_404

router = APIRouter(prefix="/assignments", tags=["과제"])

staff_only = require_roles(UserRole.PROFESSOR, UserRole.ADMIN)


def _get_assignment_or_404(db: Session, assignment_id: int) -> AssignmentModel:
    assignment = db.query(AssignmentModel).filter(AssignmentModel.id == assignment_id).first()
    if assignment is None:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return assignment


def _ensure_assignment_owner(assignment: AssignmentModel, user: UserModel, action: str):
    if user.role != UserRole.ADMIN and assignment.created_by_id != user.id:
        raise HTTPException(status_code=403, detail=f"You can only {action} your own assignments")


def _set_status(db: Session, assignment_id: int, status: AssignmentStatus, user: UserModel) -> AssignmentModel:
    assignment = _get_assignment_or_404(db, assignment_id)
    _ensure_assignment_owner(assignment, user, "update")
    assignment.status = status
    db.commit()
    db.refresh(assignment)
    return assignment


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 과제 출제
@router.post("/", status_code=201)
def create_assignment(payload: AssignmentCreate, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    course = get_course_or_404(db, payload.course_id)
    ensure_course_owner(course, user, "add assignments to")

    assignment = AssignmentModel(**payload.model_dump(), created_by_id=user.id)
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return ok(AssignmentOut.model_validate(assignment), "과제가 성공적으로 등록되었습니다")


# ✅ [READ] 전체 과제
@router.get("/")
def read_assignments(user: CurrentUser, db: Session = Depends(get_db)):
    records = db.query(AssignmentModel).order_by(AssignmentModel.created_at.desc(), AssignmentModel.id.desc()).all()
    return ok([AssignmentOut.model_validate(r) for r in records], "전체 과제 조회 완료")


# ==========================================================
# [2단계] 정적 라우터
# ==========================================================

# ✅ [READ] 내가 출제한 과제
@router.get("/my")
def read_my_assignments(user: UserModel = Depends(require_roles(UserRole.PROFESSOR)), db: Session = Depends(get_db)):
    records = (
        db.query(AssignmentModel)
        .filter(AssignmentModel.created_by_id == user.id)
        .order_by(AssignmentModel.created_at.desc(), AssignmentModel.id.desc())
        .all()
    )
    return ok([AssignmentOut.model_validate(r) for r in records])


# ✅ [READ] 강의별 과제
@router.get("/course/{course_id}")
def read_course_assignments(course_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    get_course_or_404(db, course_id)
    records = (
        db.query(AssignmentModel)
        .filter(AssignmentModel.course_id == course_id)
        .order_by(AssignmentModel.due_date.is_(None), AssignmentModel.due_date, AssignmentModel.id)
        .all()
    )
    return ok([AssignmentOut.model_validate(r) for r in records])


# ==========================================================
# [3단계] 동적 라우터
# ==========================================================

# ✅ [READ] 과제 상세
@router.get("/{assignment_id}")
def read_assignment(assignment_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    return ok(AssignmentOut.model_validate(_get_assignment_or_404(db, assignment_id)))


# ✅ [UPDATE] 과제 수정
@router.put("/{assignment_id}")
def update_assignment(assignment_id: int, payload: AssignmentUpdate, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    assignment = _get_assignment_or_404(db, assignment_id)
    _ensure_assignment_owner(assignment, user, "update")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(assignment, key, value)

    db.commit()
    db.refresh(assignment)
    return ok(AssignmentOut.model_validate(assignment), "과제가 성공적으로 수정되었습니다")


# ✅ [DELETE] 과제 삭제 (등록된 점수도 함께 삭제)
@router.delete("/{assignment_id}")
def delete_assignment(assignment_id: int, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    assignment = _get_assignment_or_404(db, assignment_id)
    _ensure_assignment_owner(assignment, user, "delete")
    db.delete(assignment)
    db.commit()
    return ok({"assignment_id": assignment_id}, "Assignment deleted successfully")


# ✅ [PATCH] 공개
@router.patch("/{assignment_id}/publish")
def publish_assignment(assignment_id: int, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    assignment = _set_status(db, assignment_id, AssignmentStatus.PUBLISHED, user)
    return ok(AssignmentOut.model_validate(assignment), "과제가 공개되었습니다")


# ✅ [PATCH] 마감 처리
@router.patch("/{assignment_id}/complete")
def complete_assignment(assignment_id: int, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    assignment = _set_status(db, assignment_id, AssignmentStatus.COMPLETED, user)
    return ok(AssignmentOut.model_validate(assignment), "과제가 마감되었습니다")
