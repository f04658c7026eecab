"""
Socket.IO Event Handlers
Live countdown and notifications for test sessions
"""
import logging

from flask import session
from flask_socketio import emit, join_room, leave_room

from testdesk.extensions import socketio, active_sessions
from testdesk.services.session_service import session_room

logger = logging.getLogger(__name__)


def start_countdown(test_session, app):
    """Run the session's countdown on a background task, emitting each tick"""
    room = session_room(test_session.student_id, test_session.test_id)

    def emit_tick(remaining):
        socketio.emit(
            'time_left',
            {'test_id': test_session.test_id, 'remaining_seconds': remaining},
            to=room,
        )

    def run():
        with app.app_context():
            test_session.timer.run(sleep=socketio.sleep, on_tick=emit_tick)

    logger.info("Countdown started for room %s", room)
    return socketio.start_background_task(run)


def register_socket_events():
    """Register all Socket.IO event handlers"""

    @socketio.on('join_session')
    def join_session(data):
        """Student subscribes to the room of their own test session"""
        student_id = session.get('user_id')
        if student_id is None or session.get('role') != 'student':
            emit('toast', {'type': 'error', 'title': 'Login required', 'description': None})
            return

        test_id = int(data['test_id'])
        room = session_room(student_id, test_id)
        join_room(room)
        logger.info("Student %s joined room %s", student_id, room)

        test_session = active_sessions.get(student_id, test_id)
        if test_session is not None:
            emit('time_left', {
                'test_id': test_id,
                'remaining_seconds': test_session.remaining_seconds,
            })

    @socketio.on('leave_session')
    def leave_session(data):
        student_id = session.get('user_id')
        if student_id is None:
            return
        leave_room(session_room(student_id, int(data['test_id'])))
