from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser, require_roles
from models.courses import Course as CourseModel
from models.enrollments import Enrollment as EnrollmentModel
from models.enums import EnrollmentStatus, UserRole
from models.users import User as UserModel
from schemas.common import ok
from schemas.courses import (
    CourseCreate,
    CourseOut,
    CourseUpdate,
    GradeBandCreate,
    GradeBandOut,
    GradeBandUpdate,
    GradeComponentCreate,
    GradeComponentOut,
    GradeComponentUpdate,
)
from schemas.projection import ProjectedGradeOut
from schemas.users import UserOut
from services import course_service
from services.grade_service import calculate_projected_grade

router = APIRouter(prefix="/courses", tags=["강의"])

staff_only = require_roles(UserRole.PROFESSOR, UserRole.ADMIN)


def _course_out(db: Session, course: CourseModel) -> CourseOut:
    enrollment_count, assignment_count = course_service.course_counts(db, course)
    out = CourseOut.model_validate(course)
    out.enrollment_count = enrollment_count
    out.assignment_count = assignment_count
    return out


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 강의 생성 (구성요소/등급 구간 포함 가능)
@router.post("/", status_code=201)
def create_course(payload: CourseCreate, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    course = course_service.create_course(db, payload, user)
    return ok(_course_out(db, course), "강의가 성공적으로 생성되었습니다")


# ✅ [READ] 전체 활성 강의
@router.get("/")
def read_courses(user: CurrentUser, db: Session = Depends(get_db)):
    courses = (
        db.query(CourseModel)
        .filter(CourseModel.is_active.is_(True))
        .order_by(CourseModel.created_at.desc(), CourseModel.id.desc())
        .all()
    )
    return ok([_course_out(db, c) for c in courses], "전체 강의 조회 완료")


# ✅ [READ] 내 강의 (교수: 담당 강의 / 학생: 수강 중인 강의)
@router.get("/my")
def read_my_courses(user: CurrentUser, db: Session = Depends(get_db)):
    query = db.query(CourseModel).filter(CourseModel.is_active.is_(True))
    if user.role == UserRole.STUDENT:
        query = query.join(EnrollmentModel, EnrollmentModel.course_id == CourseModel.id).filter(
            EnrollmentModel.student_id == user.id,
            EnrollmentModel.status == EnrollmentStatus.ACTIVE,
        )
    else:
        query = query.filter(CourseModel.professor_id == user.id)
    courses = query.order_by(CourseModel.created_at.desc(), CourseModel.id.desc()).all()
    return ok([_course_out(db, c) for c in courses])


# ✅ [READ] 강의 상세
@router.get("/{course_id}")
def read_course(course_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    course = course_service.get_course_or_404(db, course_id)
    return ok(_course_out(db, course), "강의 상세 조회 성공")


# ✅ [UPDATE] 강의 수정
@router.put("/{course_id}")
def update_course(course_id: int, payload: CourseUpdate, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    course = course_service.update_course(db, course_id, payload, user)
    return ok(_course_out(db, course), "강의가 성공적으로 수정되었습니다")


# ✅ [DELETE] 강의 삭제 (비활성화)
@router.delete("/{course_id}")
def delete_course(course_id: int, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    course_service.deactivate_course(db, course_id, user)
    return ok({"course_id": course_id}, "Course deleted successfully")


# ==========================================================
# [2단계] 성적 구성요소 / 등급 구간
# ==========================================================

# ✅ [CREATE] 구성요소 추가
@router.post("/{course_id}/grade-components", status_code=201)
def add_grade_component(course_id: int, payload: GradeComponentCreate, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    component = course_service.add_grade_component(db, course_id, payload, user)
    return ok(GradeComponentOut.model_validate(component), "성적 구성요소가 추가되었습니다")


# ✅ [UPDATE] 구성요소 수정
@router.put("/{course_id}/grade-components/{component_id}")
def update_grade_component(course_id: int, component_id: int, payload: GradeComponentUpdate, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    component = course_service.update_grade_component(db, course_id, component_id, payload, user)
    return ok(GradeComponentOut.model_validate(component), "성적 구성요소가 수정되었습니다")


# ✅ [DELETE] 구성요소 삭제
@router.delete("/{course_id}/grade-components/{component_id}")
def delete_grade_component(course_id: int, component_id: int, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    course_service.delete_grade_component(db, course_id, component_id, user)
    return ok({"component_id": component_id}, "Grade component deleted successfully")


# ✅ [CREATE] 등급 구간 추가
@router.post("/{course_id}/grade-bands", status_code=201)
def add_grade_band(course_id: int, payload: GradeBandCreate, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    band = course_service.add_grade_band(db, course_id, payload, user)
    return ok(GradeBandOut.model_validate(band), "등급 구간이 추가되었습니다")


# ✅ [UPDATE] 등급 구간 수정
@router.put("/{course_id}/grade-bands/{band_id}")
def update_grade_band(course_id: int, band_id: int, payload: GradeBandUpdate, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    band = course_service.update_grade_band(db, course_id, band_id, payload, user)
    return ok(GradeBandOut.model_validate(band), "등급 구간이 수정되었습니다")


# ✅ [DELETE] 등급 구간 삭제
@router.delete("/{course_id}/grade-bands/{band_id}")
def delete_grade_band(course_id: int, band_id: int, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    course_service.delete_grade_band(db, course_id, band_id, user)
    return ok({"band_id": band_id}, "Grade band deleted successfully")


# ✅ [CHECK] 성적 구성 점검 (가중치 합 / 등급 구간 겹침·공백)
@router.get("/{course_id}/grading-check")
def grading_check(course_id: int, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    course = course_service.get_course_or_404(db, course_id)
    return ok(course_service.check_grading(course))


# ==========================================================
# [3단계] 수강생 / 예상 성적
# ==========================================================

# ✅ [READ] 수강생 목록
@router.get("/{course_id}/students")
def read_course_students(course_id: int, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    students = course_service.get_course_students(db, course_id, user)
    return ok([UserOut.model_validate(s) for s in students])


# ✅ [READ] 학생 예상 성적
@router.get("/{course_id}/projected-grade/{student_id}")
def read_projected_grade(course_id: int, student_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    if user.role == UserRole.STUDENT and user.id != student_id:
        raise HTTPException(status_code=403, detail="Students can only view their own projected grades")
    projection = calculate_projected_grade(db, student_id, course_id)
    return ok(ProjectedGradeOut(student_id=student_id, **projection.model_dump()))
