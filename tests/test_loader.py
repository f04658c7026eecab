# tests/test_loader.py

import pytest

from testdesk.engine.answer_key import MultipleKey, SingleKey, UndecodableKey
from testdesk.engine.errors import QuestionLoadError
from testdesk.engine.loader import load_questions
from testdesk.extensions import db
from testdesk.models import Question, Test


@pytest.fixture
def bare_test(course, teacher):
    test = Test(course_id=course.id, title="Raw", time_limit=5, created_by=teacher.id)
    db.session.add(test)
    db.session.commit()
    return test


def add_question(test, order_index, kind, correct_answer, points=1, options=("A", "B", "C")):
    question = Question(
        test_id=test.id,
        order_index=order_index,
        question_text=f"Question {order_index}",
        kind=kind,
        options=list(options),
        correct_answer=correct_answer,
        points=points,
    )
    db.session.add(question)
    db.session.commit()
    return question


def test_questions_come_back_in_display_order(bare_test):
    add_question(bare_test, 2, "single", "C")
    add_question(bare_test, 0, "single", "A")
    add_question(bare_test, 1, "single", "B")

    questions = load_questions(bare_test.id)

    assert [q.order_index for q in questions] == [0, 1, 2]
    assert [q.answer_key for q in questions] == [SingleKey("A"), SingleKey("B"), SingleKey("C")]


def test_textual_multiple_key_is_decoded(bare_test):
    add_question(bare_test, 0, "multiple", '["A", "C"]')

    question = load_questions(bare_test.id)[0]

    assert question.answer_key == MultipleKey(frozenset({"A", "C"}))


def test_malformed_key_does_not_break_loading(bare_test):
    add_question(bare_test, 0, "multiple", "A, C")
    add_question(bare_test, 1, "single", "B")

    questions = load_questions(bare_test.id)

    assert len(questions) == 2
    assert isinstance(questions[0].answer_key, UndecodableKey)
    assert questions[1].answer_key == SingleKey("B")


def test_points_default_to_one(bare_test):
    question = add_question(bare_test, 0, "single", "A")
    question.points = 0
    db.session.commit()

    assert load_questions(bare_test.id)[0].points == 1


def test_empty_test_loads_no_questions(bare_test):
    assert load_questions(bare_test.id) == []


def test_public_payload_hides_answer_key(bare_test):
    add_question(bare_test, 0, "single", "A")

    payload = load_questions(bare_test.id)[0].to_public_dict()

    assert "correct_answer" not in payload
    assert "answer_key" not in payload
    assert payload["options"] == ["A", "B", "C"]


def test_storage_failure_raises_load_error(bare_test):
    Question.__table__.drop(db.engine)

    with pytest.raises(QuestionLoadError):
        load_questions(bare_test.id)
