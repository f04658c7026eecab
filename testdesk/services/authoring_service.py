"""
Test Authoring Service
Validates a teacher's test form and writes the test with its questions.
Answer keys are normalized to their tagged form before they are stored.
"""
import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError

from testdesk.engine.answer_key import (
    MULTIPLE,
    SINGLE,
    AnswerKeyError,
    decode_answer_key,
    encode_answer_key,
)
from testdesk.extensions import db
from testdesk.models import Question, Test
from testdesk.services.errors import AccessDenied, NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

MIN_OPTIONS = 2
DEFAULT_OPTION_COUNT = 4


def text_field(value, message):
    """Form text as a string; missing values become empty"""
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(message)
    return value

# Accept the type names used by older clients
KIND_ALIASES = {
    'single': SINGLE,
    'single_choice': SINGLE,
    'multiple': MULTIPLE,
    'multiple_choice': MULTIPLE,
}


@dataclass
class QuestionDraft:
    """Editable question in the authoring flow"""

    question_text: str = ''
    kind: str = MULTIPLE
    options: list = field(default_factory=lambda: [''] * DEFAULT_OPTION_COUNT)
    correct_answer: object = field(default_factory=list)
    points: int = 1
    id: int = None

    @classmethod
    def from_dict(cls, data):
        kind = KIND_ALIASES.get(str(data.get('type') or data.get('kind') or MULTIPLE))
        if kind is None:
            raise ValidationError(f"Unknown question type: {data.get('type') or data.get('kind')}")

        try:
            points = int(data.get('points', 1))
        except (TypeError, ValueError):
            raise ValidationError('Points must be a whole number')

        options = data.get('options')
        if not isinstance(options, list):
            raise ValidationError('Options must be a list')

        return cls(
            question_text=text_field(data.get('question_text'), 'Question text must be text'),
            kind=kind,
            options=[str(option) if option is not None else '' for option in options],
            correct_answer=data.get('correct_answer'),
            points=points,
            id=data.get('id'),
        )

    @classmethod
    def from_question(cls, question):
        key = decode_answer_key(question.kind, question.correct_answer, question_id=question.id)
        correct = key.to_storage()
        if question.kind == MULTIPLE and not isinstance(correct, list):
            correct = []
        return cls(
            question_text=question.question_text,
            kind=question.kind,
            options=list(question.options or []),
            correct_answer=correct,
            points=question.points or 1,
            id=question.id,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'question_text': self.question_text,
            'type': self.kind,
            'options': list(self.options),
            'correct_answer': self.correct_answer,
            'points': self.points,
        }


def total_points(drafts):
    return sum(draft.points for draft in drafts)


def parse_time_limit(value, default):
    if value in (None, ''):
        return default
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise ValidationError('Time limit must be a whole number of minutes')
    if minutes <= 0:
        raise ValidationError('Time limit must be greater than 0')
    return minutes


def validate_test(title, drafts):
    """
    Validate a test form before any write

    Returns:
        list: (draft, answer key) pairs in display order
    """
    if not (title or '').strip():
        raise ValidationError('Enter the test title')
    if not drafts:
        raise ValidationError('Add at least one question')

    validated = []
    for number, draft in enumerate(drafts, 1):
        if not draft.question_text.strip():
            raise ValidationError(f'Enter the text of question {number}')
        if len(draft.options) < MIN_OPTIONS:
            raise ValidationError(f'Question {number} needs at least {MIN_OPTIONS} options')
        if any(not option.strip() for option in draft.options):
            raise ValidationError(f'Fill in all options of question {number}')
        if draft.points <= 0:
            raise ValidationError(f'Points for question {number} must be greater than 0')
        try:
            key = encode_answer_key(draft.kind, draft.correct_answer, options=draft.options)
        except AnswerKeyError as exc:
            raise ValidationError(f'{exc} for question {number}') from exc
        validated.append((draft, key))
    return validated


def save_test(course, author, form, drafts, test=None, default_time_limit=30):
    """
    Create a test, or update one and replace its questions

    Args:
        course: owning course
        author: teacher profile
        form: dict with title, description, time_limit
        drafts: list of QuestionDraft
        test: existing test to update, or None to create

    Returns:
        Test: the saved test
    """
    title = text_field(form.get('title'), 'Test title must be text').strip()
    validated = validate_test(title, drafts)
    time_limit = parse_time_limit(form.get('time_limit'), default_time_limit)
    description = text_field(form.get('description'), 'Test description must be text').strip() or None

    try:
        if test is None:
            test = Test(
                course_id=course.id,
                title=title,
                description=description,
                time_limit=time_limit,
                created_by=author.id,
            )
            db.session.add(test)
            db.session.flush()
        else:
            test.title = title
            test.description = description
            test.time_limit = time_limit
            # Orphaned questions are deleted before the new set is inserted
            test.questions.clear()
            db.session.flush()

        for index, (draft, key) in enumerate(validated):
            test.questions.append(Question(
                order_index=index,
                question_text=draft.question_text.strip(),
                kind=draft.kind,
                options=list(draft.options),
                correct_answer=key.to_storage(),
                points=draft.points,
            ))
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Failed to save test %r: %s", title, exc)
        raise StorageError('Could not save the test. Try again') from exc

    logger.info(
        "Saved test %s with %d questions (%d points)",
        test.id, len(validated), total_points(drafts),
    )
    return test


def get_owned_test(test_id, teacher):
    test = db.session.get(Test, test_id)
    if not test:
        raise NotFoundError('Test not found')
    if test.course.teacher_id != teacher.id:
        raise AccessDenied('This test belongs to another teacher')
    return test


def load_drafts(test):
    questions = (
        Question.query
        .filter_by(test_id=test.id)
        .order_by(Question.order_index.asc())
        .all()
    )
    return [QuestionDraft.from_question(question) for question in questions]
