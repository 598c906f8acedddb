from types import SimpleNamespace

import pytest

from models.enums import AssignmentType, ComponentCategory, PassingStatus
from schemas.projection import (
    AssignmentValue,
    ComponentValue,
    CourseGrading,
    GradeBandValue,
    GradeValue,
)
from services.grade_projection import (
    build_projection_input,
    classify_passing_status,
    compute_projection,
    find_grade_band,
)

STUDENT_ID = 7


def course(passing_grade=60.0, bands=()):
    return CourseGrading(id=1, passing_grade=passing_grade, grade_bands=list(bands))


def component(cid, category, weight, name=None):
    return ComponentValue(id=cid, name=name or category.value, category=category, weight=weight)


def assignment(aid, kind, max_score=100):
    return AssignmentValue(id=aid, type=kind, max_score=max_score)


def grade(gid, assignment_id, score, max_score=100):
    return GradeValue(id=gid, score=score, max_score=max_score, student_id=STUDENT_ID, assignment_id=assignment_id)


def band(low, high, value):
    return GradeBandValue(min_score=low, max_score=high, grade_value=value)


STANDARD_BANDS = [band(0, 49, 2), band(50, 59, 4), band(60, 100, 6)]


# ==========================================================
# 기본 계산
# ==========================================================

def test_no_grades_yields_zero_everywhere():
    components = [component(1, ComponentCategory.LAB, 30), component(2, ComponentCategory.EXAM, 70)]
    assignments = [assignment(10, AssignmentType.LAB), assignment(11, AssignmentType.EXAM)]

    result = compute_projection(course(), components, assignments, [])

    assert result.current_grade == 0
    assert result.projected_grade == 0
    assert [c.current_score for c in result.components] == [0, 0]
    assert [c.completed_assignments for c in result.components] == [0, 0]
    assert [c.total_assignments for c in result.components] == [1, 1]


def test_single_full_credit_component():
    result = compute_projection(
        course(),
        [component(1, ComponentCategory.PROJECT, 100)],
        [assignment(10, AssignmentType.PROJECT, max_score=40)],
        [grade(100, 10, 40, max_score=40)],
    )

    assert result.current_grade == pytest.approx(100)
    assert result.passing_status == PassingStatus.PASSING


def test_weighted_combination_of_two_components():
    result = compute_projection(
        course(),
        [component(1, ComponentCategory.LAB, 40), component(2, ComponentCategory.EXAM, 60)],
        [assignment(10, AssignmentType.LAB), assignment(11, AssignmentType.EXAM, max_score=50)],
        [grade(100, 10, 80), grade(101, 11, 25, max_score=50)],
    )

    assert result.current_grade == pytest.approx(62)
    assert result.components[0].current_score == pytest.approx(80)
    assert result.components[1].current_score == pytest.approx(50)


def test_component_average_is_mean_of_normalized_scores():
    result = compute_projection(
        course(),
        [component(1, ComponentCategory.LAB, 100)],
        [assignment(10, AssignmentType.LAB, 20), assignment(11, AssignmentType.LAB, 50), assignment(12, AssignmentType.LAB)],
        [grade(100, 10, 10, max_score=20), grade(101, 11, 50, max_score=50)],
    )

    stat = result.components[0]
    assert stat.current_score == pytest.approx(75)
    assert stat.completed_assignments == 2
    assert stat.total_assignments == 3
    assert stat.max_possible_score == 100


def test_weights_are_not_renormalized():
    result = compute_projection(
        course(),
        [component(1, ComponentCategory.LAB, 40), component(2, ComponentCategory.ASSIGNMENT, 40)],
        [assignment(10, AssignmentType.LAB), assignment(11, AssignmentType.ASSIGNMENT)],
        [grade(100, 10, 100), grade(101, 11, 100)],
    )

    assert result.current_grade == pytest.approx(80)


def test_projected_grade_equals_current_grade():
    result = compute_projection(
        course(),
        [component(1, ComponentCategory.LAB, 50), component(2, ComponentCategory.EXAM, 50)],
        [assignment(10, AssignmentType.LAB), assignment(11, AssignmentType.EXAM)],
        [grade(100, 10, 70)],
    )

    assert result.projected_grade == result.current_grade == pytest.approx(35)


def test_midterm_component_collects_quiz_assignments():
    result = compute_projection(
        course(),
        [component(1, ComponentCategory.MIDTERM, 100)],
        [assignment(10, AssignmentType.QUIZ), assignment(11, AssignmentType.EXAM)],
        [grade(100, 10, 90), grade(101, 11, 10)],
    )

    assert result.components[0].total_assignments == 1
    assert result.current_grade == pytest.approx(90)


def test_grades_outside_component_assignment_sets_are_ignored():
    result = compute_projection(
        course(),
        [component(1, ComponentCategory.LAB, 100)],
        [assignment(10, AssignmentType.LAB), assignment(11, AssignmentType.PROJECT)],
        [grade(100, 10, 60), grade(101, 11, 100), grade(102, None, 100)],
    )

    assert result.components[0].completed_assignments == 1
    assert result.current_grade == pytest.approx(60)


def test_non_positive_max_score_counts_as_zero():
    result = compute_projection(
        course(),
        [component(1, ComponentCategory.LAB, 100)],
        [assignment(10, AssignmentType.LAB), assignment(11, AssignmentType.LAB)],
        [grade(100, 10, 5, max_score=0), grade(101, 11, 100)],
    )

    assert result.current_grade == pytest.approx(50)


def test_component_detail_fields():
    result = compute_projection(
        course(),
        [component(5, ComponentCategory.EXAM, 35, name="Final Exam")],
        [],
        [],
    )

    stat = result.components[0]
    assert (stat.id, stat.name, stat.category, stat.weight) == (5, "Final Exam", ComponentCategory.EXAM, 35)
    assert result.course_id == 1


# ==========================================================
# 통과 여부
# ==========================================================

@pytest.mark.parametrize(
    "projected, expected",
    [
        (60, PassingStatus.PASSING),
        (75, PassingStatus.PASSING),
        (47, PassingStatus.FAILING),
        (48, PassingStatus.AT_RISK),
        (50, PassingStatus.AT_RISK),
        (0, PassingStatus.FAILING),
    ],
)
def test_passing_status_thresholds(projected, expected):
    assert classify_passing_status(projected, 60) == expected


def test_passing_status_unknown_without_threshold():
    assert classify_passing_status(90, None) == PassingStatus.UNKNOWN

    result = compute_projection(course(passing_grade=None), [], [], [])
    assert result.passing_status == PassingStatus.UNKNOWN


def test_exact_threshold_score_is_passing():
    result = compute_projection(
        course(passing_grade=60),
        [component(1, ComponentCategory.EXAM, 100)],
        [assignment(10, AssignmentType.EXAM)],
        [grade(100, 10, 60)],
    )

    assert result.passing_status == PassingStatus.PASSING


# ==========================================================
# 등급 구간
# ==========================================================

@pytest.mark.parametrize("score, value", [(55, 4), (100, 6), (0, 2), (49, 2), (60, 6)])
def test_grade_band_lookup(score, value):
    assert find_grade_band(score, STANDARD_BANDS).grade_value == value


def test_score_between_bands_has_no_band():
    # 49~50 사이는 어느 구간에도 속하지 않음 (상한/하한 모두 포함 비교)
    assert find_grade_band(49.999, STANDARD_BANDS) is None
    assert find_grade_band(49.999, [band(0, 49.999, 2), band(50, 100, 6)]).grade_value == 2


def test_overlapping_bands_first_match_wins():
    bands = [band(50, 80, 7), band(60, 100, 9)]
    assert find_grade_band(70, bands).grade_value == 7


def test_projection_band_is_none_when_nothing_matches():
    components = [component(1, ComponentCategory.EXAM, 100)]
    assignments = [assignment(10, AssignmentType.EXAM)]
    grades = [grade(100, 10, 30)]

    assert compute_projection(course(bands=[]), components, assignments, grades).grade_band is None
    assert compute_projection(course(bands=[band(50, 100, 6)]), components, assignments, grades).grade_band is None


def test_projection_band_uses_current_grade():
    result = compute_projection(
        course(bands=STANDARD_BANDS),
        [component(1, ComponentCategory.EXAM, 100)],
        [assignment(10, AssignmentType.EXAM)],
        [grade(100, 10, 55)],
    )

    assert result.grade_band.grade_value == 4


def test_projection_is_idempotent():
    args = (
        course(bands=STANDARD_BANDS),
        [component(1, ComponentCategory.LAB, 30), component(2, ComponentCategory.EXAM, 70)],
        [assignment(10, AssignmentType.LAB, 20), assignment(11, AssignmentType.EXAM, 60)],
        [grade(100, 10, 13, 20), grade(101, 11, 41, 60)],
    )

    assert compute_projection(*args).model_dump() == compute_projection(*args).model_dump()


# ==========================================================
# ORM → 값 타입 변환
# ==========================================================

def test_build_projection_input_fills_missing_max_score_from_assignment():
    orm_course = SimpleNamespace(
        id=3,
        passing_grade=50.0,
        grade_bands=[SimpleNamespace(id=1, min_score=0, max_score=100, grade_value=6, grade_letter="D")],
        grade_components=[
            SimpleNamespace(
                id=1, name="Labs", category=ComponentCategory.LAB, weight=100,
                minimum_score=0, total_points=100, is_mandatory=False,
            )
        ],
    )
    orm_assignments = [
        SimpleNamespace(id=10, type=AssignmentType.LAB, max_score=20, weight=0, due_date=None, status="published")
    ]
    orm_grades = [SimpleNamespace(id=100, score=15, max_score=None, student_id=STUDENT_ID, assignment_id=10)]

    grading, components, assignments, grades = build_projection_input(orm_course, orm_assignments, orm_grades)

    assert grades[0].max_score == 20
    assert grading.grade_bands[0].grade_letter == "D"

    result = compute_projection(grading, components, assignments, grades)
    assert result.current_grade == pytest.approx(75)
    assert result.course_id == 3
