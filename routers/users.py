from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser, require_roles
from models.enums import UserRole
from models.users import User as UserModel
from schemas.common import ok
from schemas.enrollments import EnrollmentCreate, EnrollmentOut, SelfEnrollmentCreate
from schemas.users import AdminUserUpdate, UserOut, UserUpdate
from services.enrollment_service import drop_enrollment, enroll_student, get_student_enrollments

router = APIRouter(prefix="/users", tags=["사용자"])

staff_only = require_roles(UserRole.ADMIN, UserRole.PROFESSOR)
admin_only = require_roles(UserRole.ADMIN)


def _apply_user_update(db: Session, user: UserModel, changes: dict) -> UserModel:
    password = changes.pop("password", None)
    if password:
        user.set_password(password)

    if changes.get("email") and changes["email"] != user.email:
        taken = db.query(UserModel).filter(UserModel.email == changes["email"], UserModel.id != user.id).first()
        if taken:
            raise HTTPException(status_code=409, detail="Email already in use")

    for key, value in changes.items():
        if value is not None:
            setattr(user, key, value)

    db.commit()
    db.refresh(user)
    return user


# ==========================================================
# [1단계] 정적 라우터 (목록/프로필)
# ==========================================================

# ✅ [READ] 전체 사용자
@router.get("/", dependencies=[Depends(staff_only)])
def read_users(db: Session = Depends(get_db)):
    records = db.query(UserModel).order_by(UserModel.id).all()
    return ok([UserOut.model_validate(r) for r in records], "전체 사용자 조회 완료")


# ✅ [READ] 내 프로필
@router.get("/profile")
def read_profile(user: CurrentUser):
    return ok(UserOut.model_validate(user))


# ✅ [UPDATE] 내 프로필 수정
@router.put("/profile")
def update_profile(payload: UserUpdate, user: CurrentUser, db: Session = Depends(get_db)):
    updated = _apply_user_update(db, user, payload.model_dump(exclude_unset=True))
    return ok(UserOut.model_validate(updated), "프로필이 수정되었습니다")


# ✅ [READ] 학생 목록
@router.get("/students", dependencies=[Depends(staff_only)])
def read_students(db: Session = Depends(get_db)):
    records = db.query(UserModel).filter(UserModel.role == UserRole.STUDENT).order_by(UserModel.id).all()
    return ok([UserOut.model_validate(r) for r in records])


# ✅ [READ] 교수 목록
@router.get("/professors", dependencies=[Depends(admin_only)])
def read_professors(db: Session = Depends(get_db)):
    records = db.query(UserModel).filter(UserModel.role == UserRole.PROFESSOR).order_by(UserModel.id).all()
    return ok([UserOut.model_validate(r) for r in records])


# ==========================================================
# [2단계] 수강 등록
# ==========================================================

# ✅ [CREATE] 학생 수강 등록 (교수/관리자)
@router.post("/enroll", status_code=201, dependencies=[Depends(staff_only)])
def enroll(payload: EnrollmentCreate, db: Session = Depends(get_db)):
    enrollment = enroll_student(db, payload.student_id, payload.course_id)
    return ok(EnrollmentOut.model_validate(enrollment), "Student enrolled successfully")


# ✅ [CREATE] 본인 수강 신청 (학생)
@router.post("/enroll/self", status_code=201)
def enroll_self(
    payload: SelfEnrollmentCreate,
    user: UserModel = Depends(require_roles(UserRole.STUDENT)),
    db: Session = Depends(get_db),
):
    enrollment = enroll_student(db, user.id, payload.course_id)
    return ok(EnrollmentOut.model_validate(enrollment), "Successfully enrolled in course")


# ✅ [READ] 내 수강 목록
@router.get("/enrollments/my")
def read_my_enrollments(user: CurrentUser, db: Session = Depends(get_db)):
    return ok([EnrollmentOut.model_validate(e) for e in get_student_enrollments(db, user.id)])


# ✅ [DELETE] 수강 철회 (학생: 본인 / 교수·관리자: student_id 지정)
@router.delete("/enrollments/{course_id}")
def drop(course_id: int, user: CurrentUser, student_id: Optional[int] = None, db: Session = Depends(get_db)):
    target_id = student_id if student_id is not None else user.id
    enrollment = drop_enrollment(db, target_id, course_id, user)
    return ok(EnrollmentOut.model_validate(enrollment), "Enrollment dropped successfully")


# ==========================================================
# [3단계] 동적 라우터
# ==========================================================

# ✅ [READ] 특정 학생 수강 목록
@router.get("/{student_id}/enrollments", dependencies=[Depends(staff_only)])
def read_student_enrollments(student_id: int, db: Session = Depends(get_db)):
    return ok([EnrollmentOut.model_validate(e) for e in get_student_enrollments(db, student_id)])


# ✅ [READ] 특정 사용자
@router.get("/{user_id}", dependencies=[Depends(staff_only)])
def read_user(user_id: int, db: Session = Depends(get_db)):
    user = db.query(UserModel).filter(UserModel.id == user_id).first()
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return ok(UserOut.model_validate(user))


# ✅ [UPDATE] 사용자 수정 (관리자)
@router.put("/{user_id}", dependencies=[Depends(admin_only)])
def update_user(user_id: int, payload: AdminUserUpdate, db: Session = Depends(get_db)):
    user = db.query(UserModel).filter(UserModel.id == user_id).first()
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    updated = _apply_user_update(db, user, payload.model_dump(exclude_unset=True))
    return ok(UserOut.model_validate(updated), "사용자 정보가 수정되었습니다")
