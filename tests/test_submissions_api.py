import pytest


@pytest.fixture()
def course_id(client, professor, student, headers):
    res = client.post("/v1/courses/", json={"code": "CS210", "name": "Algorithms"}, headers=headers(professor))
    course_id = res.json()["data"]["id"]
    client.post("/v1/users/enroll", json={"student_id": student.id, "course_id": course_id}, headers=headers(professor))
    return course_id


def _assignment(client, headers, professor, course_id, due_date=None):
    payload = {"course_id": course_id, "title": "Homework", "type": "assignment", "max_score": 10}
    if due_date:
        payload["due_date"] = due_date
    return client.post("/v1/assignments/", json=payload, headers=headers(professor)).json()["data"]["id"]


# ==========================================================
# 제출 / 완료
# ==========================================================

def test_submit_before_due_date(client, professor, student, headers, course_id):
    assignment_id = _assignment(client, headers, professor, course_id, due_date="2999-01-01T00:00:00")

    res = client.post("/v1/assignment-submissions/", json={"assignment_id": assignment_id, "notes": "done"}, headers=headers(student))
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["status"] == "submitted"
    assert data["is_late"] is False
    assert data["submitted_at"] is not None
    assert data["assignment"]["id"] == assignment_id

    res = client.post("/v1/assignment-submissions/", json={"assignment_id": assignment_id}, headers=headers(student))
    assert res.status_code == 409


def test_mark_completed_creates_late_submission(client, professor, student, headers, course_id):
    assignment_id = _assignment(client, headers, professor, course_id, due_date="2000-01-01T00:00:00")

    res = client.post("/v1/assignment-submissions/complete", json={"assignment_id": assignment_id}, headers=headers(student))
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["status"] == "completed"
    assert data["completed_at"] is not None
    assert data["is_late"] is True


def test_mark_completed_keeps_first_submission_time(client, professor, student, headers, course_id):
    assignment_id = _assignment(client, headers, professor, course_id)
    created = client.post(
        "/v1/assignment-submissions/",
        json={"assignment_id": assignment_id, "status": "not_submitted"},
        headers=headers(student),
    ).json()["data"]
    assert created["submitted_at"] is None

    done = client.post("/v1/assignment-submissions/complete", json={"assignment_id": assignment_id}, headers=headers(student)).json()["data"]
    assert done["id"] == created["id"]
    assert done["submitted_at"] is not None
    assert done["is_late"] is False

    again = client.post("/v1/assignment-submissions/complete", json={"assignment_id": assignment_id}, headers=headers(student)).json()["data"]
    assert again["submitted_at"] == done["submitted_at"]


def test_submission_requires_enrollment(client, professor, make_user, headers, course_id):
    outsider = make_user("carol")
    assignment_id = _assignment(client, headers, professor, course_id)
    res = client.post("/v1/assignment-submissions/", json={"assignment_id": assignment_id}, headers=headers(outsider))
    assert res.status_code == 403
    res = client.post("/v1/assignment-submissions/complete", json={"assignment_id": 999}, headers=headers(outsider))
    assert res.status_code == 404


# ==========================================================
# 수정 / 조회
# ==========================================================

def test_update_permissions(client, professor, other_professor, student, make_user, headers, course_id):
    assignment_id = _assignment(client, headers, professor, course_id)
    submission_id = client.post(
        "/v1/assignment-submissions/", json={"assignment_id": assignment_id}, headers=headers(student)
    ).json()["data"]["id"]
    classmate = make_user("bob")

    assert client.put(f"/v1/assignment-submissions/{submission_id}", json={"notes": "x"}, headers=headers(classmate)).status_code == 403
    assert client.put(f"/v1/assignment-submissions/{submission_id}", json={"status": "graded"}, headers=headers(student)).status_code == 403
    assert client.put(f"/v1/assignment-submissions/{submission_id}", json={"status": "graded"}, headers=headers(other_professor)).status_code == 403

    res = client.put(f"/v1/assignment-submissions/{submission_id}", json={"status": "graded"}, headers=headers(professor))
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "graded"

    assert client.put("/v1/assignment-submissions/999", json={"notes": "x"}, headers=headers(professor)).status_code == 404


def test_submission_listings(client, professor, other_professor, student, headers, course_id):
    assignment_id = _assignment(client, headers, professor, course_id)
    client.post("/v1/assignment-submissions/", json={"assignment_id": assignment_id}, headers=headers(student))

    mine = client.get("/v1/assignment-submissions/my", headers=headers(student))
    assert mine.status_code == 200
    assert [s["assignment"]["id"] for s in mine.json()["data"]] == [assignment_id]

    by_assignment = client.get(f"/v1/assignment-submissions/assignment/{assignment_id}", headers=headers(professor)).json()["data"]
    assert [s["student"]["id"] for s in by_assignment] == [student.id]
    assert client.get(f"/v1/assignment-submissions/assignment/{assignment_id}", headers=headers(other_professor)).status_code == 403

    by_student = client.get(f"/v1/assignment-submissions/student/{student.id}", headers=headers(professor)).json()["data"]
    assert len(by_student) == 1
    assert client.get(f"/v1/assignment-submissions/student/{student.id}", headers=headers(student)).status_code == 403


def test_lookup_by_student_and_assignment(client, professor, student, make_user, headers, course_id):
    assignment_id = _assignment(client, headers, professor, course_id)
    params = {"student_id": student.id, "assignment_id": assignment_id}

    assert client.get("/v1/assignment-submissions/", params=params, headers=headers(student)).json()["data"] is None

    client.post("/v1/assignment-submissions/", json={"assignment_id": assignment_id}, headers=headers(student))
    found = client.get("/v1/assignment-submissions/", params=params, headers=headers(professor)).json()["data"]
    assert found["student"]["id"] == student.id

    classmate = make_user("bob")
    assert client.get("/v1/assignment-submissions/", params=params, headers=headers(classmate)).status_code == 403


def test_deleting_assignment_removes_submissions(client, professor, student, headers, course_id):
    assignment_id = _assignment(client, headers, professor, course_id)
    client.post("/v1/assignment-submissions/", json={"assignment_id": assignment_id}, headers=headers(student))

    client.delete(f"/v1/assignments/{assignment_id}", headers=headers(professor))
    assert client.get("/v1/assignment-submissions/my", headers=headers(student)).json()["data"] == []
