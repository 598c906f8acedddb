from datetime import datetime

from sqlalchemy import Column, Integer, Float, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from database.db import Base


class ComponentScore(Base):
    __tablename__ = "component_scores"  # 구성요소 단위 점수 (과제와 무관하게 직접 입력)
    __table_args__ = (
        UniqueConstraint("student_id", "grade_component_id", name="uq_component_score_student_component"),
    )

    id = Column(Integer, primary_key=True, index=True)
    points_earned = Column(Float, nullable=False)                       # 획득 점수
    feedback = Column(Text)
    is_submitted = Column(Boolean, default=False, nullable=False)
    is_graded = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    grade_component_id = Column(Integer, ForeignKey("grade_components.id", ondelete="CASCADE"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)

    student = relationship("User")
    grade_component = relationship("GradeComponent")
    course = relationship("Course")
