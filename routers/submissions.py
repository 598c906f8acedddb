from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser, require_roles
from models.enums import UserRole
from models.users import User as UserModel
from schemas.common import ok
from schemas.submissions import MarkCompleted, SubmissionCreate, SubmissionOut, SubmissionUpdate
from services import submission_service

router = APIRouter(prefix="/assignment-submissions", tags=["과제 제출"])

student_only = require_roles(UserRole.STUDENT)
staff_only = require_roles(UserRole.PROFESSOR, UserRole.ADMIN)


# ✅ [CREATE] 과제 제출 (학생)
@router.post("/", status_code=201)
def create_submission(payload: SubmissionCreate, user: UserModel = Depends(student_only), db: Session = Depends(get_db)):
    submission = submission_service.create_submission(db, payload, user)
    return ok(SubmissionOut.model_validate(submission), "과제가 제출되었습니다")


# ✅ [COMPLETE] 완료 처리 (제출 기록이 없으면 생성)
@router.post("/complete")
def mark_completed(payload: MarkCompleted, user: UserModel = Depends(student_only), db: Session = Depends(get_db)):
    submission = submission_service.mark_completed(db, payload.assignment_id, user)
    return ok(SubmissionOut.model_validate(submission), "과제가 완료 처리되었습니다")


# ✅ [READ] 학생+과제로 단건 조회 (없으면 data=None)
@router.get("/")
def read_submission(student_id: int, assignment_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    submission = submission_service.get_submission(db, student_id, assignment_id, user)
    return ok(SubmissionOut.model_validate(submission) if submission else None)


# ✅ [READ] 내 제출 목록
@router.get("/my")
def read_my_submissions(user: UserModel = Depends(student_only), db: Session = Depends(get_db)):
    return ok([SubmissionOut.model_validate(s) for s in submission_service.get_submissions_by_student(db, user.id)])


# ✅ [READ] 과제별 제출 목록 (담당 교수/관리자)
@router.get("/assignment/{assignment_id}")
def read_assignment_submissions(assignment_id: int, user: UserModel = Depends(staff_only), db: Session = Depends(get_db)):
    records = submission_service.get_submissions_by_assignment(db, assignment_id, user)
    return ok([SubmissionOut.model_validate(s) for s in records])


# ✅ [READ] 학생별 제출 목록
@router.get("/student/{student_id}", dependencies=[Depends(staff_only)])
def read_student_submissions(student_id: int, db: Session = Depends(get_db)):
    return ok([SubmissionOut.model_validate(s) for s in submission_service.get_submissions_by_student(db, student_id)])


# ✅ [UPDATE] 제출 수정
@router.put("/{submission_id}")
def update_submission(submission_id: int, payload: SubmissionUpdate, user: CurrentUser, db: Session = Depends(get_db)):
    submission = submission_service.update_submission(db, submission_id, payload, user)
    return ok(SubmissionOut.model_validate(submission), "제출 정보가 수정되었습니다")
