import enum


class UserRole(str, enum.Enum):
    STUDENT = "student"
    PROFESSOR = "professor"
    ADMIN = "admin"


class ComponentCategory(str, enum.Enum):
    """성적 구성요소 유형 (강의 평가 항목)"""
    LAB = "Lab"
    ASSIGNMENT = "Assignment"
    MIDTERM = "Midterm"
    EXAM = "Exam"
    PROJECT = "Project"


class AssignmentType(str, enum.Enum):
    LAB = "lab"
    ASSIGNMENT = "assignment"
    QUIZ = "quiz"
    EXAM = "exam"
    PROJECT = "project"


class AssignmentStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    COMPLETED = "completed"
    GRADED = "graded"


class SubmissionStatus(str, enum.Enum):
    NOT_SUBMITTED = "not_submitted"
    SUBMITTED = "submitted"
    COMPLETED = "completed"
    GRADED = "graded"


class EnrollmentStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"


class PassingStatus(str, enum.Enum):
    PASSING = "passing"
    AT_RISK = "at-risk"
    FAILING = "failing"
    UNKNOWN = "unknown"


def enum_column_values(enum_cls):
    """SQLAlchemy Enum 컬럼에 멤버 이름 대신 값(value)을 저장하도록 지정"""
    return [member.value for member in enum_cls]
