"""
Student Routes
Dashboard, course enrollment and the test-taking session
"""
from flask import Blueprint, jsonify

from testdesk.routes.auth import request_data
from testdesk.services import ValidationError, course_service, progress_service, session_service
from testdesk.services.errors import AccessDenied
from testdesk.utils import get_current_user, require_student

student_bp = Blueprint('student', __name__)


@student_bp.route('/dashboard')
@require_student
def dashboard():
    """Student dashboard: enrolled courses and test counts"""
    student = get_current_user()
    courses = course_service.list_student_courses(student)
    return jsonify({
        'success': True,
        'courses': [course.to_dict() for course in courses],
        'stats': progress_service.student_test_stats(student),
    })


@student_bp.route('/courses/join', methods=['POST'])
@require_student
def join_course():
    """Join a course by registration code"""
    course = course_service.join_course_by_code(
        get_current_user(), request_data().get('code')
    )
    return jsonify({
        'success': True,
        'message': f'You joined the course "{course.title}"',
        'course': course.to_dict(),
    }), 201


@student_bp.route('/courses/<int:course_id>/tests')
@require_student
def course_tests(course_id):
    """Tests of an enrolled course with the student's results"""
    student = get_current_user()
    course = course_service.get_course(course_id)
    if not course_service.is_enrolled(course.id, student.id):
        raise AccessDenied('You are not enrolled in this course')
    return jsonify({
        'success': True,
        'course': course.to_dict(),
        'tests': progress_service.course_tests_for_student(course, student),
    })


# ========================================
# TEST SESSION
# ========================================

@student_bp.route('/tests/<int:test_id>/session', methods=['POST'])
@require_student
def start_test(test_id):
    """Load the questions and start the countdown"""
    test_session = session_service.start_session(test_id, get_current_user())
    payload = test_session.to_dict()
    if test_session.is_empty:
        payload['message'] = 'This test has no questions yet.'
    return jsonify({'success': True, 'session': payload}), 201


@student_bp.route('/sessions/<int:test_id>')
@require_student
def session_state(test_id):
    test_session = session_service.get_session(get_current_user(), test_id)
    return jsonify({'success': True, 'session': test_session.to_dict()})


@student_bp.route('/sessions/<int:test_id>/answer', methods=['POST'])
@require_student
def answer(test_id):
    """
    Record a response for a question

    Body: question_id, option, selected (multiple-choice only, default true)
    """
    test_session = session_service.get_session(get_current_user(), test_id)
    data = request_data()

    try:
        question_id = int(data.get('question_id'))
    except (TypeError, ValueError):
        raise ValidationError('question_id is required')

    selected = data.get('selected', True)
    if isinstance(selected, str):
        selected = selected.lower() in ('1', 'true', 'on', 'yes')

    test_session.answer(question_id, data.get('option'), bool(selected))
    return jsonify({'success': True, 'session': test_session.to_dict()})


@student_bp.route('/sessions/<int:test_id>/next', methods=['POST'])
@require_student
def next_question(test_id):
    test_session = session_service.get_session(get_current_user(), test_id)
    test_session.go_next()
    return jsonify({'success': True, 'session': test_session.to_dict()})


@student_bp.route('/sessions/<int:test_id>/previous', methods=['POST'])
@require_student
def previous_question(test_id):
    test_session = session_service.get_session(get_current_user(), test_id)
    test_session.go_previous()
    return jsonify({'success': True, 'session': test_session.to_dict()})


@student_bp.route('/sessions/<int:test_id>/submit', methods=['POST'])
@require_student
def submit(test_id):
    """Finish the test; on a storage failure the session is kept so submit can be retried"""
    test_session = session_service.get_session(get_current_user(), test_id)
    attempt = test_session.submit()
    result = test_session.result
    return jsonify({
        'success': True,
        'message': (
            f'Your result: {result.correct_answers}/{result.total_questions} correct answers, '
            f'{result.earned_points}/{result.total_points} points ({result.rounded_percentage}%)'
        ),
        'attempt': test_session.attempt_summary,
        'attempt_id': attempt.id,
    })


@student_bp.route('/sessions/<int:test_id>', methods=['DELETE'])
@require_student
def leave_test(test_id):
    """Navigate away: stop the countdown and drop the answers"""
    session_service.close_session(get_current_user(), test_id)
    return jsonify({'success': True, 'message': 'Test session closed.'})
