"""
Test Session
One student's attempt at one test, from load to scored submission.

The session owns its answer tracker and countdown timer. Manual submit and
the timer's forced submit both go through ``submit()``, which sets an
in-flight flag under a lock so a second concurrent call is rejected and at
most one attempt is recorded.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from testdesk.engine.answer_key import MULTIPLE
from testdesk.engine.errors import (
    AlreadySubmitted,
    AttemptSaveError,
    SessionClosed,
    SubmissionInProgress,
    SubmitNotAllowed,
    UnansweredQuestion,
    UnknownQuestion,
)
from testdesk.engine.recorder import commit_attempt
from testdesk.engine.scorer import score_answers
from testdesk.engine.timer import CountdownTimer
from testdesk.engine.tracker import AnswerTracker
from testdesk.utils.notifier import NullNotifier

logger = logging.getLogger(__name__)


def now_utc():
    return datetime.now(timezone.utc)


class TestSession:
    """Transient state of an active test-taking flow"""

    __test__ = False

    def __init__(self, test_id, student_id, questions, time_limit_minutes,
                 notifier=None, recorder=commit_attempt, on_submitted=None):
        self.test_id = test_id
        self.student_id = student_id
        self.started_at = now_utc()
        self.result = None
        self.attempt = None
        self.attempt_summary = None

        self._questions = list(questions)
        self._by_id = {question.id: question for question in self._questions}
        self._index = 0
        self._tracker = AnswerTracker()
        self._timer = CountdownTimer(time_limit_minutes, on_expire=self._on_timeout)
        self._notifier = notifier or NullNotifier()
        self._recorder = recorder
        self._on_submitted = on_submitted

        self._lock = threading.Lock()
        self._submitting = False
        self._closed = False

    @classmethod
    def start(cls, test, questions, student_id, **kwargs):
        """Open a session for ``test`` with its loaded questions"""
        session = cls(test.id, student_id, questions, test.time_limit, **kwargs)
        logger.info(
            "Started session for test %s by student %s (%d questions, %d seconds)",
            test.id, student_id, len(session._questions), session.remaining_seconds,
        )
        return session

    # --- Accessors ---

    @property
    def questions(self):
        return list(self._questions)

    @property
    def question_count(self):
        return len(self._questions)

    @property
    def is_empty(self):
        return not self._questions

    @property
    def current_index(self):
        return self._index

    @property
    def current_question(self):
        if self.is_empty:
            return None
        return self._questions[self._index]

    @property
    def is_last_question(self):
        return self._index == len(self._questions) - 1

    @property
    def remaining_seconds(self):
        return self._timer.remaining_seconds

    @property
    def timer(self):
        return self._timer

    @property
    def is_submitting(self):
        return self._submitting

    @property
    def is_submitted(self):
        return self.attempt is not None

    @property
    def is_closed(self):
        return self._closed

    @property
    def answers(self):
        return self._tracker.snapshot()

    # --- Answers ---

    def _question(self, question_id):
        question = self._by_id.get(question_id)
        if question is None:
            raise UnknownQuestion(f'Question {question_id} is not part of this test')
        return question

    def _ensure_open(self):
        if self._closed:
            raise SessionClosed('This test session has ended')
        if self.attempt is not None:
            raise AlreadySubmitted('This test has already been submitted')

    def set_single(self, question_id, option):
        self._ensure_open()
        self._check_option(question_id, option)
        self._tracker.set_single(question_id, option)

    def toggle_multiple(self, question_id, option, selected):
        self._ensure_open()
        self._check_option(question_id, option)
        self._tracker.toggle_multiple(question_id, option, selected)

    def answer(self, question_id, option, selected=True):
        """Record a response using the question's own kind"""
        question = self._question(question_id)
        if question.kind == MULTIPLE:
            self.toggle_multiple(question_id, option, selected)
        else:
            self.set_single(question_id, option)

    def _check_option(self, question_id, option):
        question = self._question(question_id)
        if option not in question.options:
            raise UnknownQuestion(f'"{option}" is not an option of question {question_id}')

    def is_selected(self, question_id, option):
        return self._tracker.is_selected(question_id, option)

    def has_answer(self, question_id):
        return self._tracker.has_answer(question_id)

    # --- Navigation ---

    def go_next(self):
        """Advance one question; the current one must be answered"""
        self._ensure_open()
        question = self.current_question
        if question is None or self.is_last_question:
            return question
        if not self._tracker.has_answer(question.id):
            raise UnansweredQuestion('Answer the question before moving on')
        self._index += 1
        return self.current_question

    def go_previous(self):
        self._ensure_open()
        self._index = max(0, self._index - 1)
        return self.current_question

    # --- Submission ---

    def _check_can_submit(self):
        if self.is_empty:
            raise SubmitNotAllowed('This test has no questions')
        if not self.is_last_question:
            raise SubmitNotAllowed('Go to the last question to finish the test')
        if not self._tracker.has_answer(self.current_question.id):
            raise UnansweredQuestion('Answer the question before finishing the test')

    def submit(self, forced=False):
        """
        Score the answers and record the attempt.

        Args:
            forced: skip the answer gate (used by the timer at zero)

        Returns:
            TestAttempt: the stored attempt

        Raises:
            SubmissionInProgress: another submit is running
            AlreadySubmitted: the attempt is already stored
            AttemptSaveError: storage failed; state is kept for a retry
        """
        with self._lock:
            if self._closed:
                raise SessionClosed('This test session has ended')
            if self.attempt is not None:
                raise AlreadySubmitted('This test has already been submitted')
            if self._submitting:
                raise SubmissionInProgress('The test is already being submitted')
            # Once time is up the gates no longer apply
            if not forced and not self._timer.expired:
                self._check_can_submit()
            self._submitting = True

        try:
            answers = self._tracker.snapshot()
            result = score_answers(self._questions, answers)
            attempt = self._recorder(
                result,
                answers,
                student_id=self.student_id,
                test_id=self.test_id,
                started_at=self.started_at,
            )
            self.result = result
            self.attempt = attempt
            self.attempt_summary = attempt.to_dict()
        except AttemptSaveError as exc:
            self._notifier.error('Save failed', str(exc))
            raise
        finally:
            with self._lock:
                self._submitting = False

        self._timer.cancel()
        self._notifier.success(
            'Test finished',
            f'Your result: {result.correct_answers}/{result.total_questions} correct answers, '
            f'{result.earned_points}/{result.total_points} points ({result.rounded_percentage}%)',
        )
        logger.info(
            "Submitted test %s for student %s%s",
            self.test_id, self.student_id, " (time expired)" if forced else "",
        )
        if self._on_submitted is not None:
            self._on_submitted(self)
        return attempt

    def _on_timeout(self):
        logger.info("Time expired for test %s, student %s", self.test_id, self.student_id)
        self._notifier.warning('Time is up', 'Your answers are being submitted')
        try:
            self.submit(forced=True)
        except (SubmissionInProgress, AlreadySubmitted, SessionClosed) as exc:
            logger.info("Auto-submit skipped for test %s: %s", self.test_id, exc)
        except AttemptSaveError:
            logger.warning("Auto-submit failed for test %s, student %s", self.test_id, self.student_id)

    def tick(self):
        """Advance the countdown one second"""
        return self._timer.tick()

    def close(self):
        """End the session without submitting; the timer stops and answers are dropped"""
        self._timer.cancel()
        if not self._closed:
            self._closed = True
            if self.attempt is None:
                self._tracker.clear()
            logger.info("Closed session for test %s, student %s", self.test_id, self.student_id)

    # --- Serialization ---

    def to_dict(self):
        question = self.current_question
        count = self.question_count
        return {
            'test_id': self.test_id,
            'current_index': self._index,
            'question_count': count,
            'progress': round((self._index + 1) / count * 100) if count else 0,
            'current_question': question.to_public_dict() if question else None,
            'response': self._tracker.get(question.id) if question else None,
            'has_answer': self._tracker.has_answer(question.id) if question else False,
            'is_last_question': self.is_last_question if question else False,
            'remaining_seconds': self.remaining_seconds,
            'submitting': self._submitting,
            'submitted': self.is_submitted,
            'attempt': self.attempt_summary,
        }
