# tests/conftest.py

import pytest

from testdesk import create_app
from testdesk.engine.answer_key import MultipleKey, SingleKey
from testdesk.engine.loader import LoadedQuestion
from testdesk.extensions import active_sessions, db
from testdesk.models import Course, CourseEnrollment, Profile
from testdesk.services.authoring_service import QuestionDraft, save_test

PASSWORD = "secret123"


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        active_sessions.clear()
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_profile(email, role, full_name=None):
    profile = Profile(email=email, full_name=full_name or email.split("@")[0].title(), role=role)
    profile.set_password(PASSWORD)
    db.session.add(profile)
    db.session.commit()
    return profile


@pytest.fixture
def admin(app):
    return make_profile("admin@example.com", "admin", "Ada Admin")


@pytest.fixture
def teacher(app):
    return make_profile("teacher@example.com", "teacher", "Tom Teacher")


@pytest.fixture
def student(app):
    return make_profile("student@example.com", "student", "Sam Student")


@pytest.fixture
def course(teacher):
    course = Course(title="Algebra", description="Intro", teacher_id=teacher.id, registration_code="ALG123")
    db.session.add(course)
    db.session.commit()
    return course


@pytest.fixture
def enrolled(course, student):
    db.session.add(CourseEnrollment(course_id=course.id, student_id=student.id))
    db.session.commit()
    return student


def sample_drafts():
    return [
        QuestionDraft(
            question_text="2 + 2 = ?",
            kind="single",
            options=["3", "4", "5"],
            correct_answer="4",
            points=2,
        ),
        QuestionDraft(
            question_text="Pick the primes",
            kind="multiple",
            options=["2", "4", "5", "9"],
            correct_answer=["2", "5"],
            points=3,
        ),
    ]


@pytest.fixture
def sample_test(course, teacher):
    return save_test(course, teacher, {"title": "Quiz 1", "time_limit": 1}, sample_drafts())


def login(client, email, password=PASSWORD):
    return client.post("/login", json={"email": email, "password": password})


def single(qid, key, points=1, options=("A", "B", "C")):
    return LoadedQuestion(
        id=qid, test_id=1, order_index=qid, text=f"Q{qid}", kind="single",
        options=tuple(options), answer_key=SingleKey(key), points=points,
    )


def multiple(qid, keys, points=1, options=("A", "B", "C", "D")):
    return LoadedQuestion(
        id=qid, test_id=1, order_index=qid, text=f"Q{qid}", kind="multiple",
        options=tuple(options), answer_key=MultipleKey(frozenset(keys)), points=points,
    )
