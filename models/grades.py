from datetime import datetime

from sqlalchemy import Column, Integer, Float, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from database.db import Base


class Grade(Base):
    __tablename__ = "grades"  # 과제별 학생 점수 테이블
    __table_args__ = (UniqueConstraint("student_id", "assignment_id", name="uq_grade_student_assignment"),)

    id = Column(Integer, primary_key=True, index=True)                  # 성적 고유 ID (PK)
    score = Column(Float, nullable=False)                               # 획득 점수
    max_score = Column(Float)                                           # 만점 (없으면 과제 만점 사용)
    feedback = Column(Text)                                             # 피드백
    is_submitted = Column(Boolean, default=False, nullable=False)       # 제출 여부
    is_graded = Column(Boolean, default=False, nullable=False)          # 채점 완료 여부
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)

    student = relationship("User")
    assignment = relationship("Assignment", back_populates="grades")
    course = relationship("Course")
