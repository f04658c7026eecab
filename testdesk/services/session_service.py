"""
Session Service
Opens, looks up and closes live test sessions for students
"""
import logging

from flask import current_app

from testdesk.engine.loader import load_questions
from testdesk.engine.session import TestSession
from testdesk.extensions import active_sessions, db
from testdesk.models import Test
from testdesk.services.course_service import is_enrolled
from testdesk.services.errors import AccessDenied, NotFoundError, ValidationError
from testdesk.services.progress_service import find_attempt
from testdesk.utils.notifier import SocketNotifier

logger = logging.getLogger(__name__)


def session_room(student_id, test_id):
    return f'session_{student_id}_{test_id}'


def _announce_submission(session):
    """Push the stored attempt to the room and release the finished session"""
    from testdesk.extensions import socketio

    socketio.emit(
        'test_submitted',
        {'test_id': session.test_id, 'attempt': session.attempt_summary},
        to=session_room(session.student_id, session.test_id),
    )
    active_sessions.release(session)


def start_session(test_id, student, start_timer=None):
    """
    Load a test and open a session for ``student``

    Starting again replaces the previous in-memory session, which restarts
    the full time limit.

    Raises:
        NotFoundError, AccessDenied, ValidationError, QuestionLoadError
    """
    test = db.session.get(Test, test_id)
    if not test:
        raise NotFoundError('Test not found')
    if not is_enrolled(test.course_id, student.id):
        raise AccessDenied('Enroll in the course to take this test')
    if find_attempt(test.id, student.id):
        raise ValidationError('You have already completed this test')

    questions = load_questions(test.id)

    session = TestSession.start(
        test,
        questions,
        student.id,
        notifier=SocketNotifier(session_room(student.id, test.id)),
        on_submitted=_announce_submission,
    )
    active_sessions.add(session)

    if start_timer is None:
        start_timer = current_app.config.get('START_SESSION_TIMERS', True)
    if start_timer and not session.is_empty:
        from testdesk.sockets import start_countdown
        start_countdown(session, current_app._get_current_object())

    return session


def get_session(student, test_id):
    session = active_sessions.get(student.id, test_id)
    if session is None or session.is_closed:
        raise NotFoundError('No active session for this test')
    return session


def close_session(student, test_id):
    """Leave a test without submitting"""
    session = active_sessions.discard(student.id, test_id)
    if session is None:
        raise NotFoundError('No active session for this test')
    logger.info("Student %s left test %s", student.id, test_id)
    return session
