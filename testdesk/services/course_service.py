"""
Course Service
Course creation, enrollment by code or email, and roster queries
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from testdesk.extensions import db
from testdesk.models import Course, CourseEnrollment, Profile, Test, TestAttempt
from testdesk.services.progress_service import attempt_summary
from testdesk.services.errors import (
    AccessDenied,
    NotFoundError,
    StorageError,
    ValidationError,
)
from testdesk.utils import generate_registration_code

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 10


def _unique_registration_code(length):
    for _ in range(MAX_CODE_ATTEMPTS):
        code = generate_registration_code(length)
        if not Course.query.filter_by(registration_code=code).first():
            return code
    raise StorageError('Could not generate a registration code')


def create_course(teacher, title, description=None, code_length=6):
    """Create a course owned by ``teacher`` with a fresh registration code"""
    title = (title or '').strip()
    if not title:
        raise ValidationError('Enter the course title')

    course = Course(
        title=title,
        description=(description or '').strip() or None,
        teacher_id=teacher.id,
        registration_code=_unique_registration_code(code_length),
    )

    try:
        db.session.add(course)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Failed to create course %r: %s", title, exc)
        raise StorageError('Could not create the course') from exc

    logger.info("Course %s created with code %s", course.id, course.registration_code)
    return course


def list_teacher_courses(teacher):
    return (
        Course.query
        .filter_by(teacher_id=teacher.id)
        .order_by(Course.created_at.desc(), Course.id.desc())
        .all()
    )


def get_course(course_id):
    course = db.session.get(Course, course_id)
    if not course:
        raise NotFoundError('Course not found')
    return course


def get_owned_course(course_id, teacher):
    course = get_course(course_id)
    if course.teacher_id != teacher.id:
        raise AccessDenied('This course belongs to another teacher')
    return course


def list_course_tests(course):
    return (
        Test.query
        .filter_by(course_id=course.id)
        .order_by(Test.created_at.desc(), Test.id.desc())
        .all()
    )


def is_enrolled(course_id, student_id):
    return CourseEnrollment.query.filter_by(
        course_id=course_id, student_id=student_id
    ).first() is not None


def _enroll(course, student):
    if is_enrolled(course.id, student.id):
        raise ValidationError('Already enrolled in this course')

    try:
        db.session.add(CourseEnrollment(course_id=course.id, student_id=student.id))
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Failed to enroll student %s in course %s: %s", student.id, course.id, exc)
        raise StorageError('Could not enroll in the course') from exc

    logger.info("Student %s enrolled in course %s", student.id, course.id)
    return course


def join_course_by_code(student, code):
    """Enroll ``student`` in the course with this registration code"""
    code = (code or '').strip().upper()
    course = Course.query.filter_by(registration_code=code).first() if code else None
    if not course:
        raise NotFoundError('Course not found. Check the registration code')
    return _enroll(course, student)


def add_student_by_email(course, email):
    """Enroll an existing student account in ``course``"""
    email = (email or '').strip().lower()
    student = Profile.query.filter_by(email=email, role='student').first()
    if not student:
        raise NotFoundError('Student not found or the user is not a student')
    _enroll(course, student)
    return student


def list_student_courses(student):
    return (
        Course.query
        .join(CourseEnrollment, CourseEnrollment.course_id == Course.id)
        .filter(CourseEnrollment.student_id == student.id)
        .order_by(Course.created_at.desc(), Course.id.desc())
        .all()
    )


def count_teacher_students(teacher):
    """Distinct students across all of a teacher's courses"""
    rows = (
        db.session.query(CourseEnrollment.student_id)
        .join(Course, Course.id == CourseEnrollment.course_id)
        .filter(Course.teacher_id == teacher.id)
        .distinct()
        .all()
    )
    return len(rows)


def course_roster(course):
    """
    Enrolled students of a course with their attempts on its tests

    Returns:
        list: dicts with the student profile and an ``attempts`` list
    """
    students = (
        Profile.query
        .join(CourseEnrollment, CourseEnrollment.student_id == Profile.id)
        .filter(CourseEnrollment.course_id == course.id)
        .order_by(Profile.full_name.asc())
        .all()
    )
    test_ids = [test.id for test in course.tests]

    roster = []
    for student in students:
        attempts = []
        if test_ids:
            attempts = TestAttempt.query.filter(
                TestAttempt.student_id == student.id,
                TestAttempt.test_id.in_(test_ids),
            ).all()
        entry = student.to_dict()
        entry['attempts'] = [attempt_summary(attempt) for attempt in attempts]
        roster.append(entry)
    return roster
