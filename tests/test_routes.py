# tests/test_routes.py

from conftest import login
from testdesk.extensions import active_sessions, db
from testdesk.models import Profile, Test, TestAttempt


def question_ids(sample_test):
    return [question.id for question in sample_test.questions]


# ========================================
# AUTH
# ========================================

def test_register_then_login(client, app):
    response = client.post("/register", json={
        "email": "New@Example.com",
        "password": "longenough",
        "full_name": "New Student",
    })
    assert response.status_code == 201
    assert response.get_json()["user"]["role"] == "student"

    response = login(client, "new@example.com", "longenough")
    body = response.get_json()
    assert response.status_code == 200
    assert body["redirect"] == "/student/dashboard"

    assert client.get("/me").get_json()["user"]["email"] == "new@example.com"


def test_register_validation(client, student):
    response = client.post("/register", json={
        "email": "student@example.com", "password": "secret123", "full_name": "Again",
    })
    assert response.status_code == 400
    assert response.get_json()["error"] == "An account with this email already exists"

    response = client.post("/register", json={
        "email": "x@example.com", "password": "123", "full_name": "Short",
    })
    assert response.get_json()["error"] == "Password must be at least 6 characters"


def test_wrong_password(client, student):
    response = login(client, "student@example.com", "nope")
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_role_guards(client, student):
    assert client.get("/teacher/dashboard").status_code == 401

    login(client, "student@example.com")
    assert client.get("/teacher/dashboard").status_code == 403
    assert client.get("/admin/users").status_code == 403
    assert client.get("/student/dashboard").status_code == 200


def test_admin_changes_role(client, admin, student):
    login(client, "admin@example.com")

    users = client.get("/admin/users").get_json()["users"]
    assert {user["email"] for user in users} == {"admin@example.com", "student@example.com"}

    response = client.post(f"/admin/users/{student.id}/role", json={"role": "teacher"})
    assert response.get_json()["user"]["role"] == "teacher"
    assert db.session.get(Profile, student.id).role == "teacher"

    response = client.post(f"/admin/users/{student.id}/role", json={"role": "owner"})
    assert response.status_code == 400


# ========================================
# TEACHER
# ========================================

def test_teacher_creates_course_and_test(client, teacher, student):
    login(client, "teacher@example.com")

    response = client.post("/teacher/courses", json={"title": "Geometry"})
    assert response.status_code == 201
    course = response.get_json()["course"]

    response = client.post(f"/teacher/courses/{course['id']}/students", json={"email": "student@example.com"})
    assert response.status_code == 201

    response = client.post(f"/teacher/courses/{course['id']}/tests", json={
        "title": "Angles",
        "time_limit": 15,
        "questions": [{
            "question_text": "Right angle?",
            "type": "single",
            "options": ["45", "90"],
            "correct_answer": "90",
            "points": 4,
        }],
    })
    body = response.get_json()
    assert response.status_code == 201
    assert body["message"] == 'Test "Angles" created. Total points: 4'

    response = client.get(f"/teacher/tests/{body['test']['id']}")
    assert response.get_json()["questions"][0]["correct_answer"] == "90"

    dashboard = client.get("/teacher/dashboard").get_json()
    assert dashboard["total_students"] == 1
    assert dashboard["tests"][0]["course_title"] == "Geometry"


def test_teacher_test_validation_error(client, course):
    login(client, "teacher@example.com")

    response = client.post(f"/teacher/courses/{course.id}/tests", json={
        "title": "Broken",
        "questions": [{"question_text": "Q", "type": "single", "options": ["A", "B"], "correct_answer": ""}],
    })
    assert response.status_code == 400
    assert response.get_json()["error"] == "Choose the correct answer for question 1"


def test_teacher_test_with_non_text_question(client, course):
    login(client, "teacher@example.com")

    response = client.post(f"/teacher/courses/{course.id}/tests", json={
        "title": "Broken",
        "questions": [{"question_text": 5, "type": "single", "options": ["A", "B"], "correct_answer": "A"}],
    })
    assert response.status_code == 400
    assert response.get_json()["error"] == "Question text must be text"
    assert Test.query.count() == 0


def test_teacher_updates_test(client, sample_test):
    login(client, "teacher@example.com")

    response = client.put(f"/teacher/tests/{sample_test.id}", json={
        "title": "Quiz 1",
        "questions": [{"question_text": "Only", "type": "multiple", "options": ["A", "B"], "correct_answer": ["B"]}],
    })
    assert response.status_code == 200

    questions = client.get(f"/teacher/tests/{sample_test.id}").get_json()["questions"]
    assert [q["question_text"] for q in questions] == ["Only"]


# ========================================
# STUDENT SESSION
# ========================================

def test_student_joins_course_by_code(client, course, student):
    login(client, "student@example.com")

    response = client.post("/student/courses/join", json={"code": "alg123"})
    assert response.status_code == 201

    response = client.post("/student/courses/join", json={"code": "alg123"})
    assert response.status_code == 400


def test_session_requires_enrollment(client, sample_test, student):
    login(client, "student@example.com")

    response = client.post(f"/student/tests/{sample_test.id}/session")
    assert response.status_code == 403


def test_full_test_session(client, sample_test, enrolled):
    first, second = question_ids(sample_test)
    login(client, "student@example.com")
    base = f"/student/sessions/{sample_test.id}"

    response = client.post(f"/student/tests/{sample_test.id}/session")
    state = response.get_json()["session"]
    assert response.status_code == 201
    assert state["question_count"] == 2
    assert state["remaining_seconds"] == 60
    assert "correct_answer" not in state["current_question"]

    response = client.post(f"{base}/next")
    assert response.status_code == 400

    client.post(f"{base}/answer", json={"question_id": first, "option": "4"})
    state = client.post(f"{base}/next").get_json()["session"]
    assert state["current_question"]["id"] == second
    assert state["is_last_question"] is True

    client.post(f"{base}/answer", json={"question_id": second, "option": "2"})
    client.post(f"{base}/answer", json={"question_id": second, "option": "5"})
    client.post(f"{base}/answer", json={"question_id": second, "option": "9"})
    state = client.post(f"{base}/answer", json={
        "question_id": second, "option": "9", "selected": False,
    }).get_json()["session"]
    assert state["response"] == ["2", "5"]

    response = client.post(f"{base}/submit")
    body = response.get_json()
    assert response.status_code == 200
    assert body["message"] == "Your result: 2/2 correct answers, 5/5 points (100%)"
    assert body["attempt"]["earned_points"] == 5

    attempt = TestAttempt.query.one()
    assert attempt.answers == {str(first): "4", str(second): ["2", "5"]}

    assert len(active_sessions) == 0
    response = client.post(f"{base}/submit")
    assert response.status_code == 404

    listing = client.get(f"/student/courses/{sample_test.course_id}/tests").get_json()["tests"]
    assert listing[0]["grade"] == "Excellent"
    assert listing[0]["percentage"] == 100

    response = client.post(f"/student/tests/{sample_test.id}/session")
    assert response.status_code == 400
    assert response.get_json()["error"] == "You have already completed this test"


def test_partial_score_rounding(client, sample_test, enrolled):
    first, second = question_ids(sample_test)
    login(client, "student@example.com")
    base = f"/student/sessions/{sample_test.id}"

    client.post(f"/student/tests/{sample_test.id}/session")
    client.post(f"{base}/answer", json={"question_id": first, "option": "3"})
    client.post(f"{base}/next")
    client.post(f"{base}/answer", json={"question_id": second, "option": "2"})
    client.post(f"{base}/answer", json={"question_id": second, "option": "5"})

    body = client.post(f"{base}/submit").get_json()
    assert body["message"] == "Your result: 1/2 correct answers, 3/5 points (60%)"


def test_submit_away_from_last_question(client, sample_test, enrolled):
    first, _ = question_ids(sample_test)
    login(client, "student@example.com")
    base = f"/student/sessions/{sample_test.id}"

    client.post(f"/student/tests/{sample_test.id}/session")
    client.post(f"{base}/answer", json={"question_id": first, "option": "4"})

    response = client.post(f"{base}/submit")
    assert response.status_code == 400
    assert TestAttempt.query.count() == 0


def test_leaving_drops_the_session(client, sample_test, enrolled):
    login(client, "student@example.com")
    client.post(f"/student/tests/{sample_test.id}/session")
    test_session = active_sessions.get(enrolled.id, sample_test.id)

    response = client.delete(f"/student/sessions/{sample_test.id}")
    assert response.status_code == 200
    assert test_session.is_closed
    assert client.get(f"/student/sessions/{sample_test.id}").status_code == 404


def test_restart_replaces_previous_session(client, sample_test, enrolled):
    login(client, "student@example.com")
    client.post(f"/student/tests/{sample_test.id}/session")
    old = active_sessions.get(enrolled.id, sample_test.id)
    old.tick()

    client.post(f"/student/tests/{sample_test.id}/session")
    new = active_sessions.get(enrolled.id, sample_test.id)

    assert old.is_closed
    assert new is not old
    assert new.remaining_seconds == 60
    assert len(active_sessions) == 1


def test_empty_test_session(client, course, teacher, enrolled):
    test = Test(course_id=course.id, title="Empty", time_limit=5, created_by=teacher.id)
    db.session.add(test)
    db.session.commit()

    login(client, "student@example.com")
    response = client.post(f"/student/tests/{test.id}/session")
    body = response.get_json()

    assert response.status_code == 201
    assert body["session"]["current_question"] is None
    assert body["session"]["message"] == "This test has no questions yet."
    assert client.post(f"/student/sessions/{test.id}/submit").status_code == 400


def test_timed_out_session_is_released(client, sample_test, enrolled):
    first, _ = question_ids(sample_test)
    login(client, "student@example.com")
    client.post(f"/student/tests/{sample_test.id}/session")
    client.post(f"/student/sessions/{sample_test.id}/answer", json={"question_id": first, "option": "4"})
    test_session = active_sessions.get(enrolled.id, sample_test.id)

    for _ in range(60):
        test_session.tick()

    assert test_session.is_submitted
    assert len(active_sessions) == 0
    assert TestAttempt.query.one().earned_points == 2
    assert client.get(f"/student/sessions/{sample_test.id}").status_code == 404
