"""
Question Loader
Reads the ordered question set of a test and normalizes answer keys
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from testdesk.engine.answer_key import decode_answer_key
from testdesk.engine.errors import QuestionLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedQuestion:
    """Read-only question as seen by a test session"""

    id: int
    test_id: int
    order_index: int
    text: str
    kind: str
    options: tuple
    answer_key: object
    points: int = 1

    def to_public_dict(self):
        """Question payload for the student; the answer key is never included"""
        return {
            'id': self.id,
            'question_text': self.text,
            'type': self.kind,
            'options': list(self.options),
            'points': self.points,
        }


def to_loaded_question(row) -> LoadedQuestion:
    return LoadedQuestion(
        id=row.id,
        test_id=row.test_id,
        order_index=row.order_index,
        text=row.question_text,
        kind=row.kind,
        options=tuple(row.options or ()),
        answer_key=decode_answer_key(row.kind, row.correct_answer, question_id=row.id),
        points=row.points or 1,
    )


def load_questions(test_id) -> list[LoadedQuestion]:
    """
    Fetch the questions of a test ordered by display order

    An empty list is a valid "no questions" result.

    Raises:
        QuestionLoadError: the storage layer failed
    """
    from testdesk.models import Question

    try:
        rows = (
            Question.query
            .filter_by(test_id=test_id)
            .order_by(Question.order_index.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        logger.error("Failed to load questions for test %s: %s", test_id, exc)
        raise QuestionLoadError('Could not load the test questions') from exc

    questions = [to_loaded_question(row) for row in rows]
    logger.info("Loaded %d questions for test %s", len(questions), test_id)
    return questions
