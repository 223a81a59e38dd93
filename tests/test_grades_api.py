import pytest
from fastapi.testclient import TestClient

from lms.models import Course


@pytest.fixture
def course(session, lecturer):
    cs101 = Course(
        name="CS101",
        description="Intro",
        lecturer_id=lecturer.id,
        category="CS",
        duration=10,
        content=[{"title": "L1", "url": "http://x"}],
    )
    session.add(cs101)
    session.commit()
    return cs101


def _assign(client: TestClient, **payload):
    return client.post("/api/grades/assign", json=payload)


def test_assign_grade_defaults_to_pending(client: TestClient, student, course):
    response = _assign(client, student=student.id, course=course.id)
    assert response.status_code == 201, response.text
    grade = response.json()["grade"]
    assert grade["status"] == "Pending"
    assert grade["student"] == {"id": student.id, "name": "Alan Turing", "email": "alan@example.com"}
    assert grade["course"] == {"id": course.id, "name": "CS101", "category": "CS"}
    assert grade["graded_at"]

    user = client.get(f"/api/users/{student.id}").json()
    assert user["grades"] == [grade["id"]]


def test_second_grade_for_same_pair_conflicts(client: TestClient, student, course):
    assert _assign(client, student=student.id, course=course.id, status="A").status_code == 201
    response = _assign(client, student=student.id, course=course.id, status="B", remarks="retake")
    assert response.status_code == 409
    assert response.json()["kind"] == "uniqueness_conflict"


def test_missing_references(client: TestClient, student, course):
    missing_student = _assign(client, student="0" * 24, course=course.id)
    assert missing_student.status_code == 404
    assert missing_student.json()["token"] == "0" * 24

    missing_course = _assign(client, student=student.id, course="1" * 24)
    assert missing_course.status_code == 404
    assert missing_course.json()["detail"] == "Course not found: " + "1" * 24


def test_required_fields(client: TestClient):
    response = _assign(client)
    assert response.status_code == 400
    assert response.json()["reasons"] == ["student is required", "course is required"]


def test_status_set(client: TestClient, student, course):
    rejected = _assign(client, student=student.id, course=course.id, status="Pass")
    assert rejected.status_code == 400

    legacy = _assign(client, student=student.id, course=course.id, status="Fail")
    assert legacy.status_code == 201
    assert legacy.json()["grade"]["status"] == "F"


def test_update_only_status_and_remarks(client: TestClient, student, course):
    grade_id = _assign(client, student=student.id, course=course.id).json()["grade"]["id"]

    response = client.put(f"/api/grades/{grade_id}", json={"status": "Incomplete", "remarks": " missing lab "})
    assert response.status_code == 200
    grade = response.json()["grade"]
    assert grade["status"] == "Incomplete"
    assert grade["remarks"] == "missing lab"

    assert client.put(f"/api/grades/{grade_id}", json={"status": "Z"}).status_code == 400
    assert client.put(f"/api/grades/{grade_id}", json={"student": "x"}).status_code == 400
    assert client.put("/api/grades/" + "0" * 24, json={"status": "A"}).status_code == 404


def test_grade_listings(client: TestClient, student, course):
    grade_id = _assign(client, student=student.id, course=course.id).json()["grade"]["id"]

    assert [g["id"] for g in client.get("/api/grades/").json()] == [grade_id]
    assert [g["id"] for g in client.get(f"/api/grades/student/{student.id}").json()] == [grade_id]
    assert [g["id"] for g in client.get(f"/api/grades/course/{course.id}").json()] == [grade_id]
    assert client.get("/api/grades/course/" + "0" * 24).json() == []
    assert client.get(f"/api/grades/{grade_id}").json()["course"]["name"] == "CS101"


def test_delete_grade_detaches_from_student(client: TestClient, student, course):
    grade_id = _assign(client, student=student.id, course=course.id).json()["grade"]["id"]

    assert client.delete(f"/api/grades/{grade_id}").status_code == 200
    assert client.get(f"/api/grades/{grade_id}").status_code == 404
    assert client.get(f"/api/users/{student.id}").json()["grades"] == []
