"""
services/grade_projection.py

- 학생 1명 × 강의 1개에 대한 현재/예상 성적 계산기
- 순수 함수: DB 접근, 로깅, 예외 없음. 잘못된 설정(가중치 합≠100, 겹치는 등급 구간)도
  받은 그대로 계산하고, 결과를 0 또는 None으로 표현함
- 가중치 합으로 다시 나누지 않음 (합이 80이면 만점이어도 80)
- 예상 성적 = 현재 성적 (남은 과제에 대한 추정은 하지 않음)
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models.enums import AssignmentType, ComponentCategory, PassingStatus
from schemas.projection import (
    AssignmentValue,
    ComponentStat,
    ComponentValue,
    CourseGrading,
    GradeBandValue,
    GradeValue,
    ProjectedGrade,
    ProjectedGradeBand,
)

# ✅ 구성요소 유형 → 해당 유형으로 집계할 과제 유형
#    (중간고사는 quiz 유형 과제로 출제됨)
CATEGORY_ASSIGNMENT_TYPES: Dict[ComponentCategory, Tuple[AssignmentType, ...]] = {
    ComponentCategory.LAB: (AssignmentType.LAB,),
    ComponentCategory.ASSIGNMENT: (AssignmentType.ASSIGNMENT,),
    ComponentCategory.MIDTERM: (AssignmentType.QUIZ,),
    ComponentCategory.EXAM: (AssignmentType.EXAM,),
    ComponentCategory.PROJECT: (AssignmentType.PROJECT,),
}

# 통과 기준의 80% 미만이면 failing
AT_RISK_RATIO = 0.8


def normalized_score(grade: GradeValue) -> float:
    """점수를 100점 만점으로 환산 (만점이 0 이하이면 0)"""
    if grade.max_score <= 0:
        return 0.0
    return grade.score / grade.max_score * 100


def component_average(grades: Sequence[GradeValue]) -> float:
    if not grades:
        return 0.0
    return sum(normalized_score(g) for g in grades) / len(grades)


def classify_passing_status(projected_grade: float, passing_grade: Optional[float]) -> PassingStatus:
    if passing_grade is None:
        return PassingStatus.UNKNOWN
    if projected_grade >= passing_grade:
        return PassingStatus.PASSING
    if projected_grade < passing_grade * AT_RISK_RATIO:
        return PassingStatus.FAILING
    return PassingStatus.AT_RISK


def find_grade_band(score: float, bands: Iterable[GradeBandValue]) -> Optional[GradeBandValue]:
    """목록 순서대로 처음 포함되는 구간 (양 끝 포함). 없으면 None"""
    for band in bands:
        if band.min_score <= score <= band.max_score:
            return band
    return None


def compute_projection(
    course: CourseGrading,
    components: Sequence[ComponentValue],
    assignments: Sequence[AssignmentValue],
    grades: Sequence[GradeValue],
) -> ProjectedGrade:
    current_grade = 0.0
    stats: List[ComponentStat] = []

    for component in components:
        matching_types = CATEGORY_ASSIGNMENT_TYPES.get(component.category, ())
        component_assignments = [a for a in assignments if a.type in matching_types]
        assignment_ids = {a.id for a in component_assignments}
        component_grades = [g for g in grades if g.assignment_id in assignment_ids]

        average = component_average(component_grades)
        current_grade += average * (component.weight / 100)

        stats.append(
            ComponentStat(
                id=component.id,
                name=component.name,
                category=component.category,
                weight=component.weight,
                current_score=average,
                max_possible_score=100,
                completed_assignments=len(component_grades),
                total_assignments=len(component_assignments),
            )
        )

    projected_grade = current_grade
    band = find_grade_band(current_grade, course.grade_bands)

    return ProjectedGrade(
        course_id=course.id,
        current_grade=current_grade,
        projected_grade=projected_grade,
        passing_status=classify_passing_status(projected_grade, course.passing_grade),
        grade_band=ProjectedGradeBand(grade_value=band.grade_value) if band else None,
        components=stats,
    )


# ==========================================================
# [ORM → 값 타입 변환]
# ==========================================================

def build_projection_input(course, assignments, grades):
    """
    ORM 객체(Course, Assignment[], Grade[])를 계산기 입력으로 변환.
    - Grade.max_score가 비어 있으면 연결된 과제의 만점을 사용
    - 과제가 없는 성적은 max_score 0으로 두어 계산에서 0점 처리
    """
    assignment_max = {a.id: a.max_score for a in assignments}

    grading = CourseGrading(
        id=course.id,
        passing_grade=course.passing_grade,
        grade_bands=[GradeBandValue.model_validate(b) for b in course.grade_bands],
    )
    component_values = [ComponentValue.model_validate(c) for c in course.grade_components]
    assignment_values = [AssignmentValue.model_validate(a) for a in assignments]

    grade_values = []
    for g in grades:
        max_score = g.max_score
        if max_score is None:
            max_score = assignment_max.get(g.assignment_id, 0.0)
        grade_values.append(
            GradeValue(
                id=g.id,
                score=g.score,
                max_score=max_score,
                student_id=g.student_id,
                assignment_id=g.assignment_id,
            )
        )

    return grading, component_values, assignment_values, grade_values
