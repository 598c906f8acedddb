from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship
from werkzeug.security import generate_password_hash, check_password_hash

from database.db import Base
from models.enums import UserRole, enum_column_values


class User(Base):
    __tablename__ = "users"  # 사용자(학생/교수/관리자) 테이블

    id = Column(Integer, primary_key=True, index=True)                 # 사용자 고유 ID (PK)
    username = Column(String(50), unique=True, nullable=False)         # 로그인 아이디
    email = Column(String(100), unique=True, nullable=False)           # 이메일
    password_hash = Column(String(255), nullable=False)                # 비밀번호 해시
    first_name = Column(String(50), nullable=False)                    # 이름
    last_name = Column(String(50), nullable=False)                     # 성
    role = Column(
        Enum(UserRole, values_callable=enum_column_values, native_enum=False, length=20),
        nullable=False,
        default=UserRole.STUDENT,
    )                                                                  # 역할 (student/professor/admin)
    is_active = Column(Boolean, default=True, nullable=False)          # 활성 여부
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # ==========================================================
    # [관계 설정]
    # ==========================================================

    # ✅ 담당 강의 (교수 1:N)
    courses = relationship("Course", back_populates="professor")

    # ✅ 수강 신청 내역 (학생 1:N)
    enrollments = relationship("Enrollment", back_populates="student")

    def set_password(self, pw):
        self.password_hash = generate_password_hash(pw)

    def check_password(self, pw):
        return check_password_hash(self.password_hash, pw)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
