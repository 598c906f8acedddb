from datetime import datetime

from sqlalchemy import Column, Integer, Float, String, Text, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship

from database.db import Base
from models.enums import AssignmentType, AssignmentStatus, enum_column_values


class Assignment(Base):
    __tablename__ = "assignments"  # 과제/시험 테이블

    id = Column(Integer, primary_key=True, index=True)                  # 과제 고유 ID (PK)
    title = Column(String(200), nullable=False)                         # 과제명
    description = Column(Text)                                          # 설명
    type = Column(
        Enum(AssignmentType, values_callable=enum_column_values, native_enum=False, length=20),
        nullable=False,
    )                                                                   # 유형 (lab/assignment/quiz/exam/project)
    max_score = Column(Float, nullable=False)                           # 만점
    weight = Column(Float, default=0.0, nullable=False)                 # 반영 비율
    due_date = Column(DateTime)                                         # 마감일
    status = Column(
        Enum(AssignmentStatus, values_callable=enum_column_values, native_enum=False, length=20),
        default=AssignmentStatus.DRAFT,
        nullable=False,
    )                                                                   # 상태 (draft/published/completed/graded)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # ✅ 소속 강의 / 출제 교수 (N:1)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    course = relationship("Course", back_populates="assignments")
    created_by = relationship("User")
    grades = relationship("Grade", back_populates="assignment", cascade="all, delete-orphan")
    submissions = relationship("AssignmentSubmission", back_populates="assignment", cascade="all, delete-orphan")
