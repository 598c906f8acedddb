from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship

from database.db import Base
from models.enums import EnrollmentStatus, enum_column_values


class Enrollment(Base):
    __tablename__ = "enrollments"  # 수강 신청 테이블

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)    # 학생 ID
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)   # 강의 ID
    status = Column(
        Enum(EnrollmentStatus, values_callable=enum_column_values, native_enum=False, length=20),
        default=EnrollmentStatus.ACTIVE,
        nullable=False,
    )                                                                       # 상태 (active/completed/dropped)
    enrolled_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student = relationship("User", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
