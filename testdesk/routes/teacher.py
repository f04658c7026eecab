"""
Teacher Routes
Dashboard, courses, rosters and test authoring
"""
from flask import Blueprint, current_app, jsonify, request

from testdesk.routes.auth import request_data
from testdesk.services import ValidationError, authoring_service, course_service
from testdesk.services.authoring_service import QuestionDraft, total_points
from testdesk.models import Test
from testdesk.utils import get_current_user, require_teacher

teacher_bp = Blueprint('teacher', __name__)


def parse_drafts(data):
    questions = data.get('questions')
    if not isinstance(questions, list):
        raise ValidationError('Add at least one question')
    return [QuestionDraft.from_dict(question or {}) for question in questions]


@teacher_bp.route('/dashboard')
@require_teacher
def dashboard():
    """Teacher dashboard"""
    teacher = get_current_user()
    courses = course_service.list_teacher_courses(teacher)
    tests = (
        Test.query
        .filter_by(created_by=teacher.id)
        .order_by(Test.created_at.desc(), Test.id.desc())
        .all()
    )

    test_rows = []
    for test in tests:
        row = test.to_dict()
        row['course_title'] = test.course.title if test.course else None
        test_rows.append(row)

    return jsonify({
        'success': True,
        'courses': [course.to_dict() for course in courses],
        'tests': test_rows,
        'total_students': course_service.count_teacher_students(teacher),
    })


@teacher_bp.route('/courses', methods=['GET', 'POST'])
@require_teacher
def courses():
    """Course management"""
    teacher = get_current_user()

    if request.method == 'POST':
        data = request_data()
        course = course_service.create_course(
            teacher,
            data.get('title'),
            data.get('description'),
            code_length=current_app.config['REGISTRATION_CODE_LENGTH'],
        )
        return jsonify({
            'success': True,
            'message': f'Course created! Registration code: {course.registration_code}',
            'course': course.to_dict(),
        }), 201

    return jsonify({
        'success': True,
        'courses': [course.to_dict() for course in course_service.list_teacher_courses(teacher)],
    })


@teacher_bp.route('/courses/<int:course_id>')
@require_teacher
def course_detail(course_id):
    """Course tests and enrolled students with their results"""
    course = course_service.get_owned_course(course_id, get_current_user())
    return jsonify({
        'success': True,
        'course': course.to_dict(),
        'tests': [test.to_dict() for test in course_service.list_course_tests(course)],
        'students': course_service.course_roster(course),
    })


@teacher_bp.route('/courses/<int:course_id>/students', methods=['POST'])
@require_teacher
def add_student(course_id):
    """Enroll a student by email"""
    course = course_service.get_owned_course(course_id, get_current_user())
    student = course_service.add_student_by_email(course, request_data().get('email'))
    return jsonify({
        'success': True,
        'message': f'{student.full_name} was enrolled in the course',
        'student': student.to_dict(),
    }), 201


@teacher_bp.route('/courses/<int:course_id>/tests', methods=['POST'])
@require_teacher
def create_test(course_id):
    """Create a test with its questions"""
    teacher = get_current_user()
    course = course_service.get_owned_course(course_id, teacher)
    data = request_data()
    drafts = parse_drafts(data)

    test = authoring_service.save_test(
        course,
        teacher,
        data,
        drafts,
        default_time_limit=current_app.config['DEFAULT_TIME_LIMIT_MINUTES'],
    )
    return jsonify({
        'success': True,
        'message': f'Test "{test.title}" created. Total points: {total_points(drafts)}',
        'test': test.to_dict(),
    }), 201


@teacher_bp.route('/tests/<int:test_id>', methods=['GET', 'PUT'])
@require_teacher
def edit_test(test_id):
    """Read a test for editing, or update it and replace its questions"""
    teacher = get_current_user()
    test = authoring_service.get_owned_test(test_id, teacher)

    if request.method == 'PUT':
        data = request_data()
        drafts = parse_drafts(data)
        test = authoring_service.save_test(
            test.course,
            teacher,
            data,
            drafts,
            test=test,
            default_time_limit=current_app.config['DEFAULT_TIME_LIMIT_MINUTES'],
        )
        return jsonify({
            'success': True,
            'message': f'Test "{test.title}" updated. Total points: {total_points(drafts)}',
            'test': test.to_dict(),
        })

    drafts = authoring_service.load_drafts(test)
    return jsonify({
        'success': True,
        'test': test.to_dict(),
        'questions': [draft.to_dict() for draft in drafts],
        'total_points': total_points(drafts),
    })