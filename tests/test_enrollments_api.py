import pytest


@pytest.fixture()
def course(client, professor, headers):
    res = client.post("/v1/courses/", json={
        "code": "CS150",
        "name": "Data Structures",
        "grade_components": [
            {"name": "Project", "type": "Project", "weight": 100, "total_points": 40},
        ],
    }, headers=headers(professor))
    return res.json()["data"]


# ==========================================================
# 수강 등록
# ==========================================================

def test_self_enrollment_and_duplicate(client, student, headers, course):
    res = client.post("/v1/users/enroll/self", json={"course_id": course["id"]}, headers=headers(student))
    assert res.status_code == 201
    assert res.json()["data"]["status"] == "active"
    assert res.json()["data"]["course"]["code"] == "CS150"

    res = client.post("/v1/users/enroll/self", json={"course_id": course["id"]}, headers=headers(student))
    assert res.status_code == 409

    mine = client.get("/v1/users/enrollments/my", headers=headers(student)).json()["data"]
    assert [e["course"]["id"] for e in mine] == [course["id"]]


def test_drop_then_re_enroll_reactivates(client, professor, student, headers, course):
    enrollment_id = client.post(
        "/v1/users/enroll", json={"student_id": student.id, "course_id": course["id"]}, headers=headers(professor)
    ).json()["data"]["id"]

    res = client.delete(f"/v1/users/enrollments/{course['id']}", headers=headers(student))
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "dropped"
    assert client.get("/v1/users/enrollments/my", headers=headers(student)).json()["data"] == []
    assert client.get(f"/v1/courses/{course['id']}/students", headers=headers(professor)).json()["data"] == []

    # 이미 철회한 수강은 다시 철회할 수 없음
    assert client.delete(f"/v1/users/enrollments/{course['id']}", headers=headers(student)).status_code == 404

    res = client.post("/v1/users/enroll/self", json={"course_id": course["id"]}, headers=headers(student))
    assert res.status_code == 201
    assert res.json()["data"]["id"] == enrollment_id
    assert res.json()["data"]["status"] == "active"


def test_drop_permissions(client, professor, student, make_user, headers, course):
    classmate = make_user("bob")
    client.post("/v1/users/enroll/self", json={"course_id": course["id"]}, headers=headers(student))

    res = client.delete(
        f"/v1/users/enrollments/{course['id']}", params={"student_id": student.id}, headers=headers(classmate)
    )
    assert res.status_code == 403

    res = client.delete(
        f"/v1/users/enrollments/{course['id']}", params={"student_id": student.id}, headers=headers(professor)
    )
    assert res.status_code == 200
    assert client.get(f"/v1/users/{student.id}/enrollments", headers=headers(professor)).json()["data"] == []


def test_dropped_student_leaves_grade_summary(client, professor, student, headers, course):
    client.post("/v1/users/enroll/self", json={"course_id": course["id"]}, headers=headers(student))
    assert len(client.get(f"/v1/grades/summary/{course['id']}", headers=headers(professor)).json()["data"]) == 1

    client.delete(f"/v1/users/enrollments/{course['id']}", headers=headers(student))
    assert client.get(f"/v1/grades/summary/{course['id']}", headers=headers(professor)).json()["data"] == []


def test_only_students_can_be_enrolled(client, professor, other_professor, headers, course):
    res = client.post(
        "/v1/users/enroll",
        json={"student_id": other_professor.id, "course_id": course["id"]},
        headers=headers(professor),
    )
    assert res.status_code == 400


def test_enroll_into_missing_or_inactive_course(client, professor, student, headers, course):
    res = client.post("/v1/users/enroll", json={"student_id": student.id, "course_id": 999}, headers=headers(professor))
    assert res.status_code == 404

    client.delete(f"/v1/courses/{course['id']}", headers=headers(professor))
    res = client.post("/v1/users/enroll/self", json={"course_id": course["id"]}, headers=headers(student))
    assert res.status_code == 404


def test_students_cannot_enroll_others(client, student, make_user, headers, course):
    classmate = make_user("bob")
    res = client.post("/v1/users/enroll", json={"student_id": classmate.id, "course_id": course["id"]}, headers=headers(student))
    assert res.status_code == 403


# ==========================================================
# 과제
# ==========================================================

def test_assignment_lifecycle(client, professor, other_professor, student, headers, course):
    res = client.post("/v1/assignments/", json={
        "course_id": course["id"], "title": "Project 1", "type": "project", "max_score": 40,
    }, headers=headers(professor))
    assert res.status_code == 201
    assignment = res.json()["data"]
    assert assignment["status"] == "draft"
    assert assignment["created_by"]["username"] == professor.username

    assert client.post("/v1/assignments/", json={
        "course_id": course["id"], "title": "X", "type": "lab", "max_score": 10,
    }, headers=headers(other_professor)).status_code == 403

    res = client.patch(f"/v1/assignments/{assignment['id']}/publish", headers=headers(professor))
    assert res.json()["data"]["status"] == "published"
    res = client.patch(f"/v1/assignments/{assignment['id']}/complete", headers=headers(professor))
    assert res.json()["data"]["status"] == "completed"

    assert client.put(f"/v1/assignments/{assignment['id']}", json={"title": "Y"}, headers=headers(other_professor)).status_code == 403
    res = client.put(f"/v1/assignments/{assignment['id']}", json={"max_score": 50}, headers=headers(professor))
    assert res.json()["data"]["max_score"] == 50

    listed = client.get(f"/v1/assignments/course/{course['id']}", headers=headers(student)).json()["data"]
    assert [a["id"] for a in listed] == [assignment["id"]]
    assert [a["id"] for a in client.get("/v1/assignments/my", headers=headers(professor)).json()["data"]] == [assignment["id"]]

    assert client.delete(f"/v1/assignments/{assignment['id']}", headers=headers(professor)).status_code == 200
    assert client.get(f"/v1/assignments/{assignment['id']}", headers=headers(student)).status_code == 404


def test_invalid_assignment_payload(client, professor, headers, course):
    res = client.post("/v1/assignments/", json={
        "course_id": course["id"], "title": "Bad", "type": "essay", "max_score": 0,
    }, headers=headers(professor))
    assert res.status_code == 422


def test_deleting_assignment_removes_its_grades(client, professor, student, headers, course):
    assignment = client.post("/v1/assignments/", json={
        "course_id": course["id"], "title": "Project 1", "type": "project", "max_score": 40,
    }, headers=headers(professor)).json()["data"]
    client.post("/v1/grades/", json={
        "course_id": course["id"], "assignment_id": assignment["id"], "score": 30,
    }, headers=headers(student))

    client.delete(f"/v1/assignments/{assignment['id']}", headers=headers(professor))
    assert client.get("/v1/grades/my", headers=headers(student)).json()["data"] == []


# ==========================================================
# 구성요소 점수
# ==========================================================

def _component_id(course):
    return course["grade_components"][0]["id"]


def test_component_score_requires_enrollment(client, student, headers, course):
    res = client.post("/v1/component-scores/", json={
        "course_id": course["id"], "grade_component_id": _component_id(course), "points_earned": 30,
    }, headers=headers(student))
    assert res.status_code == 403


def test_component_score_flow(client, professor, student, headers, course):
    client.post("/v1/users/enroll/self", json={"course_id": course["id"]}, headers=headers(student))
    payload = {"course_id": course["id"], "grade_component_id": _component_id(course), "points_earned": 30}

    res = client.post("/v1/component-scores/", json=dict(payload, points_earned=41), headers=headers(student))
    assert res.status_code == 400

    res = client.post("/v1/component-scores/", json=payload, headers=headers(student))
    assert res.status_code == 201
    score = res.json()["data"]
    assert score["percentage"] == pytest.approx(75)

    assert client.post("/v1/component-scores/", json=payload, headers=headers(student)).status_code == 409

    res = client.put(f"/v1/component-scores/{score['id']}", json={"is_graded": True}, headers=headers(student))
    assert res.status_code == 403
    res = client.put(f"/v1/component-scores/{score['id']}", json={"is_graded": True, "points_earned": 40}, headers=headers(professor))
    assert res.status_code == 200
    assert res.json()["data"]["percentage"] == pytest.approx(100)

    assert len(client.get("/v1/component-scores/", headers=headers(professor)).json()["data"]) == 1
    assert len(client.get("/v1/component-scores/", headers=headers(student)).json()["data"]) == 1

    assert client.delete(f"/v1/component-scores/{score['id']}", headers=headers(student)).status_code == 200
    assert client.get(f"/v1/component-scores/{score['id']}", headers=headers(professor)).status_code == 404


def test_component_score_from_another_course(client, professor, student, headers, course):
    other = client.post("/v1/courses/", json={"code": "CS160", "name": "Other"}, headers=headers(professor)).json()["data"]
    client.post("/v1/users/enroll/self", json={"course_id": other["id"]}, headers=headers(student))

    res = client.post("/v1/component-scores/", json={
        "course_id": other["id"], "grade_component_id": _component_id(course), "points_earned": 10,
    }, headers=headers(student))
    assert res.status_code == 403


def test_component_score_listings_and_progress(client, professor, other_professor, student, make_user, headers, course):
    client.post("/v1/users/enroll/self", json={"course_id": course["id"]}, headers=headers(student))

    empty = client.get(f"/v1/component-scores/progress/{course['id']}", headers=headers(student))
    assert empty.status_code == 200
    assert empty.json()["data"] == {
        "total_components": 0,
        "completed_components": 0,
        "total_points_earned": 0,
        "total_possible_points": 0,
        "percentage": 0,
    }

    client.post("/v1/component-scores/", json={
        "course_id": course["id"], "grade_component_id": _component_id(course), "points_earned": 10,
    }, headers=headers(student))

    progress = client.get(f"/v1/component-scores/progress/{course['id']}", headers=headers(student)).json()["data"]
    assert progress["total_components"] == 1
    assert progress["completed_components"] == 1
    assert progress["total_possible_points"] == 40
    assert progress["percentage"] == pytest.approx(25)

    by_professor = client.get(
        f"/v1/component-scores/progress/{course['id']}", params={"student_id": student.id}, headers=headers(professor)
    ).json()["data"]
    assert by_professor == progress

    classmate = make_user("bob")
    res = client.get(
        f"/v1/component-scores/progress/{course['id']}", params={"student_id": student.id}, headers=headers(classmate)
    )
    assert res.status_code == 403
    assert client.get("/v1/component-scores/progress/999", headers=headers(student)).status_code == 404

    assert len(client.get("/v1/component-scores/my", headers=headers(student)).json()["data"]) == 1
    assert client.get("/v1/component-scores/my", headers=headers(classmate)).json()["data"] == []
    assert len(client.get(f"/v1/component-scores/student/{student.id}", headers=headers(professor)).json()["data"]) == 1
    assert client.get(f"/v1/component-scores/student/{student.id}", headers=headers(student)).status_code == 403

    assert len(client.get(f"/v1/component-scores/course/{course['id']}", headers=headers(professor)).json()["data"]) == 1
    assert client.get(f"/v1/component-scores/course/{course['id']}", headers=headers(other_professor)).status_code == 403
    assert client.get(f"/v1/component-scores/course/{course['id']}", headers=headers(classmate)).json()["data"] == []
    res = client.get(
        f"/v1/component-scores/course/{course['id']}", params={"student_id": student.id}, headers=headers(classmate)
    )
    assert res.status_code == 403
