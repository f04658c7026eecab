"""
Attempt Recorder
Persists a finished attempt with a single insert
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from testdesk.engine.errors import AttemptSaveError

logger = logging.getLogger(__name__)


def now_utc():
    return datetime.now(timezone.utc)


def commit_attempt(result, answers, student_id, test_id, started_at=None, completed_at=None):
    """
    Insert one attempt row

    Args:
        result: ScoreResult for the attempt
        answers: raw answer map (question id -> response)
        student_id: id of the student profile
        test_id: id of the test
        started_at: session start time
        completed_at: defaults to the moment of commit

    Returns:
        TestAttempt: the stored row

    Raises:
        AttemptSaveError: the insert failed and was rolled back
    """
    from testdesk.extensions import db
    from testdesk.models import TestAttempt

    attempt = TestAttempt(
        test_id=test_id,
        student_id=student_id,
        score=result.percentage,
        total_questions=result.total_questions,
        correct_answers=result.correct_answers,
        earned_points=result.earned_points,
        total_points=result.total_points,
        answers={str(question_id): value for question_id, value in answers.items()},
        started_at=started_at or now_utc(),
        completed_at=completed_at or now_utc(),
    )

    try:
        db.session.add(attempt)
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Duplicate attempt for test %s by student %s", test_id, student_id)
        raise AttemptSaveError('This test has already been submitted') from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Failed to save attempt for test %s by student %s: %s", test_id, student_id, exc)
        raise AttemptSaveError('Could not save the test results') from exc

    logger.info(
        "Saved attempt %s for test %s by student %s: %s/%s points",
        attempt.id, test_id, student_id, result.earned_points, result.total_points,
    )
    return attempt
