import logging

from sqlalchemy.orm import Session

from database.db import Base, SessionLocal, engine
from models.assignments import Assignment as AssignmentModel
from models.component_scores import ComponentScore  # noqa: F401  (테이블 생성용)
from models.courses import Course as CourseModel
from models.courses import GradeBand as GradeBandModel
from models.courses import GradeComponent as GradeComponentModel
from models.enrollments import Enrollment as EnrollmentModel
from models.enums import AssignmentStatus, AssignmentType, ComponentCategory, UserRole
from models.grades import Grade as GradeModel
from models.submissions import AssignmentSubmission  # noqa: F401  (테이블 생성용)
from models.users import User as UserModel

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ✅ (username, email, 비밀번호, 이름, 성, 역할)
USERS = [
    ("admin", "admin@university.edu", "admin123", "System", "Administrator", UserRole.ADMIN),
    ("prof.smith", "smith@university.edu", "professor123", "John", "Smith", UserRole.PROFESSOR),
    ("prof.jones", "jones@university.edu", "professor123", "Sarah", "Jones", UserRole.PROFESSOR),
    ("student1", "alice@university.edu", "student123", "Alice", "Johnson", UserRole.STUDENT),
    ("student2", "bob@university.edu", "student123", "Bob", "Wilson", UserRole.STUDENT),
]

# ✅ (이름, 유형, 가중치)
COMPONENTS = [
    ("Labs", ComponentCategory.LAB, 20),
    ("Homework", ComponentCategory.ASSIGNMENT, 20),
    ("Midterm Exam", ComponentCategory.MIDTERM, 25),
    ("Final Exam", ComponentCategory.EXAM, 35),
]

# ✅ (하한, 상한, 등급 값, 등급 문자)
BANDS = [
    (0, 49.99, 5.0, "F"),
    (50, 59.99, 6.0, "D"),
    (60, 69.99, 7.0, "C"),
    (70, 79.99, 8.0, "B"),
    (80, 89.99, 9.0, "A"),
    (90, 100, 10.0, "A+"),
]

# ✅ (과제명, 유형, 만점)
ASSIGNMENTS = [
    ("Hello World Program", AssignmentType.ASSIGNMENT, 100),
    ("Lab 1: Variables", AssignmentType.LAB, 20),
    ("Lab 2: Loops", AssignmentType.LAB, 20),
    ("Midterm Quiz", AssignmentType.QUIZ, 50),
    ("Final Exam", AssignmentType.EXAM, 100),
]

# ✅ student1 점수 (과제명 → 점수)
STUDENT1_SCORES = {
    "Hello World Program": 92,
    "Lab 1: Variables": 18,
    "Lab 2: Loops": 15,
    "Midterm Quiz": 38,
}


def seed():
    Base.metadata.create_all(bind=engine)
    db: Session = SessionLocal()

    try:
        if db.query(UserModel).count() > 0:
            logger.info("이미 데이터가 존재하여 시드를 건너뜁니다")
            return

        users = {}
        for username, email, password, first, last, role in USERS:
            user = UserModel(username=username, email=email, first_name=first, last_name=last, role=role)
            user.set_password(password)
            db.add(user)
            users[username] = user
        db.flush()

        course = CourseModel(
            code="CS101",
            name="Introduction to Computer Science",
            credits=3,
            passing_grade=60,
            professor_id=users["prof.smith"].id,
        )
        course.grade_components = [
            GradeComponentModel(name=name, category=category, weight=weight)
            for name, category, weight in COMPONENTS
        ]
        course.grade_bands = [
            GradeBandModel(min_score=low, max_score=high, grade_value=value, grade_letter=letter)
            for low, high, value, letter in BANDS
        ]
        db.add(course)
        db.add(CourseModel(
            code="CS201",
            name="Data Structures and Algorithms",
            credits=4,
            passing_grade=65,
            professor_id=users["prof.jones"].id,
        ))
        db.flush()

        assignments = {}
        for title, kind, max_score in ASSIGNMENTS:
            assignment = AssignmentModel(
                title=title,
                type=kind,
                max_score=max_score,
                status=AssignmentStatus.PUBLISHED,
                course_id=course.id,
                created_by_id=users["prof.smith"].id,
            )
            db.add(assignment)
            assignments[title] = assignment
        db.flush()

        for username in ("student1", "student2"):
            db.add(EnrollmentModel(student_id=users[username].id, course_id=course.id))

        for title, score in STUDENT1_SCORES.items():
            assignment = assignments[title]
            db.add(GradeModel(
                score=score,
                max_score=assignment.max_score,
                is_submitted=True,
                is_graded=True,
                student_id=users["student1"].id,
                assignment_id=assignment.id,
                course_id=course.id,
            ))

        db.commit()
        logger.info(f"✅ 시드 완료: 사용자 {len(USERS)}명, 강의 2개, 과제 {len(ASSIGNMENTS)}개")
    except Exception:
        db.rollback()
        logger.exception("시드 실패")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
