from datetime import datetime

from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship

from database.db import Base
from models.enums import SubmissionStatus, enum_column_values


class AssignmentSubmission(Base):
    __tablename__ = "assignment_submissions"  # 과제 제출/완료 기록 (학생 1명당 과제 1건)
    __table_args__ = (
        UniqueConstraint("student_id", "assignment_id", name="uq_submission_student_assignment"),
    )

    id = Column(Integer, primary_key=True, index=True)
    status = Column(
        Enum(SubmissionStatus, values_callable=enum_column_values, native_enum=False, length=20),
        default=SubmissionStatus.NOT_SUBMITTED,
        nullable=False,
    )                                                                   # not_submitted/submitted/completed/graded
    notes = Column(Text)                                                # 학생 메모
    submitted_at = Column(DateTime)                                     # 최초 제출 시각
    completed_at = Column(DateTime)                                     # 완료 처리 시각
    is_late = Column(Boolean, default=False, nullable=False)            # 마감 이후 제출 여부
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), nullable=False)

    student = relationship("User")
    assignment = relationship("Assignment", back_populates="submissions")
