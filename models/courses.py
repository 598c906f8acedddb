from datetime import datetime

from sqlalchemy import Column, Integer, Float, String, Text, Boolean, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship

from database.db import Base
from models.enums import ComponentCategory, enum_column_values


class Course(Base):
    __tablename__ = "courses"  # 강의 테이블

    id = Column(Integer, primary_key=True, index=True)                  # 강의 고유 ID (PK)
    code = Column(String(20), nullable=False)                           # 강의 코드 (예: CS101)
    name = Column(String(200), nullable=False)                          # 강의명
    description = Column(Text)                                          # 강의 설명
    credits = Column(Integer, default=3, nullable=False)                # 학점
    passing_grade = Column(Float, default=50.0)                         # 통과 기준 점수 (%)
    is_active = Column(Boolean, default=True, nullable=False)           # 활성 여부 (삭제 시 False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # ==========================================================
    # [관계 설정]
    # ==========================================================

    # ✅ 담당 교수 (N:1)
    professor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    professor = relationship("User", back_populates="courses")

    # ✅ 성적 구성요소 / 등급 구간 (1:N, 강의 삭제 시 함께 삭제)
    #    - 등록 순서(id)가 곧 계산/조회 순서
    grade_components = relationship(
        "GradeComponent",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="GradeComponent.id",
    )
    grade_bands = relationship(
        "GradeBand",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="GradeBand.id",
    )

    # ✅ 과제 / 수강 신청 (1:N)
    assignments = relationship("Assignment", back_populates="course")
    enrollments = relationship("Enrollment", back_populates="course")


class GradeComponent(Base):
    __tablename__ = "grade_components"  # 성적 구성요소 (예: 중간고사 30%)

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)                          # 구성요소명
    category = Column(
        Enum(ComponentCategory, values_callable=enum_column_values, native_enum=False, length=20),
        nullable=False,
    )                                                                   # 유형 (Lab/Assignment/Midterm/Exam/Project)
    weight = Column(Float, nullable=False)                              # 최종 성적 반영 비율 (%)
    minimum_score = Column(Float, default=0.0, nullable=False)          # 최소 요구 점수
    total_points = Column(Float, default=100.0, nullable=False)         # 만점
    is_mandatory = Column(Boolean, default=False, nullable=False)       # 필수 이수 여부

    course = relationship("Course", back_populates="grade_components")


class GradeBand(Base):
    __tablename__ = "grade_bands"  # 등급 구간 (예: 90~100% → 10)

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    min_score = Column(Float, nullable=False)                           # 구간 하한 (%, 포함)
    max_score = Column(Float, nullable=False)                           # 구간 상한 (%, 포함)
    grade_value = Column(Float, nullable=False)                         # 등급 값 (예: 6.0)
    grade_letter = Column(String(5))                                    # 등급 문자 (예: A, B)

    course = relationship("Course", back_populates="grade_bands")
