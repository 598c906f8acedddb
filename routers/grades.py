from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser, require_roles
from models.enums import UserRole
from models.grades import Grade as GradeModel
from models.users import User as UserModel
from schemas.common import ok
from schemas.grades import GradeCreate, GradeOut, GradeUpdate
from schemas.projection import ProjectedGradeOut
from services import grade_service
from services.course_service import ensure_course_owner, get_course_or_404

router = APIRouter(prefix="/grades", tags=["성적"])

staff_only = require_roles(UserRole.ADMIN, UserRole.PROFESSOR)


def _grade_list(query):
    return [GradeOut.model_validate(g) for g in query.order_by(GradeModel.created_at.desc(), GradeModel.id.desc()).all()]


# ==========================================================
# [1단계] 등록 / 목록
# ==========================================================

# ✅ [CREATE] 과제 점수 등록 (학생)
@router.post("/", status_code=201)
def create_grade(payload: GradeCreate, user: UserModel = Depends(require_roles(UserRole.STUDENT)), db: Session = Depends(get_db)):
    grade = grade_service.create_grade(db, payload, user)
    return ok(GradeOut.model_validate(grade), "Grade created successfully")


# ✅ [READ] 전체 성적
@router.get("/", dependencies=[Depends(staff_only)])
def read_grades(db: Session = Depends(get_db)):
    return ok(_grade_list(db.query(GradeModel)))


# ✅ [READ] 내 성적
@router.get("/my")
def read_my_grades(user: UserModel = Depends(require_roles(UserRole.STUDENT)), db: Session = Depends(get_db)):
    return ok(_grade_list(db.query(GradeModel).filter(GradeModel.student_id == user.id)))


# ✅ [READ] 강의별 성적 (student_id 지정 시 해당 학생만)
@router.get("/course/{course_id}")
def read_course_grades(course_id: int, user: CurrentUser, student_id: Optional[int] = None, db: Session = Depends(get_db)):
    if user.role == UserRole.STUDENT:
        student_id = user.id
    else:
        ensure_course_owner(get_course_or_404(db, course_id), user, "access")
    query = db.query(GradeModel).filter(GradeModel.course_id == course_id)
    if student_id is not None:
        query = query.filter(GradeModel.student_id == student_id)
    return ok(_grade_list(query))


# ✅ [READ] 학생별 성적
@router.get("/student/{student_id}", dependencies=[Depends(staff_only)])
def read_student_grades(student_id: int, db: Session = Depends(get_db)):
    return ok(_grade_list(db.query(GradeModel).filter(GradeModel.student_id == student_id)))


# ==========================================================
# [2단계] 예상 성적 / 요약
# ==========================================================

# ✅ [READ] 예상 성적 (student_id 없으면 본인)
@router.get("/projected/{course_id}")
def read_projected_grade(course_id: int, user: CurrentUser, student_id: Optional[int] = None, db: Session = Depends(get_db)):
    target_id = student_id if student_id is not None else user.id
    if user.role == UserRole.STUDENT and target_id != user.id:
        raise HTTPException(status_code=403, detail="Students can only view their own projected grades")

    projection = grade_service.calculate_projected_grade(db, target_id, course_id)
    return ok(ProjectedGradeOut(student_id=target_id, **projection.model_dump()))


# ✅ [SUMMARY] 강의 수강생 전체 예상 성적
@router.get("/summary/{course_id}")
def read_grades_summary(course_id: int, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    get_course_or_404(db, course_id)
    return ok(grade_service.get_grades_summary(db, course_id, user))


# ==========================================================
# [3단계] 완전 동적 라우터
# ==========================================================

# ✅ [READ] 성적 상세
@router.get("/{grade_id}")
def read_grade(grade_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    grade = grade_service.get_grade_or_404(db, grade_id)
    if user.role == UserRole.STUDENT and grade.student_id != user.id:
        raise HTTPException(status_code=403, detail="You can only view your own grades")
    return ok(GradeOut.model_validate(grade))


# ✅ [UPDATE] 성적 수정
@router.put("/{grade_id}")
def update_grade(grade_id: int, payload: GradeUpdate, user: CurrentUser, db: Session = Depends(get_db)):
    grade = grade_service.update_grade(db, grade_id, payload, user)
    return ok(GradeOut.model_validate(grade), "Grade updated successfully")


# ✅ [DELETE] 성적 삭제
@router.delete("/{grade_id}")
def delete_grade(grade_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    grade_service.delete_grade(db, grade_id, user)
    return ok({"grade_id": grade_id}, "Grade deleted successfully")
