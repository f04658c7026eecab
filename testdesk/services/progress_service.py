"""
Progress Service
Student dashboard counts, per-course test listings and grade labels
"""
from testdesk.engine.scorer import round_half_up
from testdesk.extensions import db
from testdesk.models import CourseEnrollment, Test, TestAttempt


GRADE_BANDS = (
    (90, 'Excellent'),
    (75, 'Good'),
    (60, 'Satisfactory'),
)


def grade_label(earned_points, total_points):
    """Grade label for an attempt; ungraded when nothing was earned or nothing to earn"""
    if not earned_points or not total_points:
        return 'Not graded'
    percentage = (earned_points / total_points) * 100
    for threshold, label in GRADE_BANDS:
        if percentage >= threshold:
            return label
    return 'Unsatisfactory'


def student_test_stats(student):
    """
    Completed and pending test counts over the student's courses

    Returns:
        dict: completed, pending, total
    """
    course_ids = [
        row.course_id
        for row in CourseEnrollment.query.filter_by(student_id=student.id).all()
    ]
    if not course_ids:
        return {'completed': 0, 'pending': 0, 'total': 0}

    total = Test.query.filter(Test.course_id.in_(course_ids)).count()
    completed = (
        db.session.query(TestAttempt.id)
        .join(Test, Test.id == TestAttempt.test_id)
        .filter(
            TestAttempt.student_id == student.id,
            TestAttempt.completed_at.isnot(None),
            Test.course_id.in_(course_ids),
        )
        .count()
    )
    return {'completed': completed, 'pending': max(0, total - completed), 'total': total}


def attempt_percentage(attempt):
    """Earned share of the total, rounded half up as shown to students"""
    if not attempt.total_points:
        return 0
    return round_half_up((attempt.earned_points or 0) / attempt.total_points * 100)


def attempt_summary(attempt):
    """Attempt dict with its grade label and rounded percentage"""
    summary = attempt.to_dict()
    summary['grade'] = grade_label(attempt.earned_points, attempt.total_points)
    summary['percentage'] = attempt_percentage(attempt)
    return summary


def find_attempt(test_id, student_id):
    return TestAttempt.query.filter_by(test_id=test_id, student_id=student_id).first()


def course_tests_for_student(course, student):
    """Tests of a course with the student's attempt and grade, oldest first"""
    tests = (
        Test.query
        .filter_by(course_id=course.id)
        .order_by(Test.created_at.asc(), Test.id.asc())
        .all()
    )
    attempts = {
        attempt.test_id: attempt
        for attempt in TestAttempt.query.filter(
            TestAttempt.student_id == student.id,
            TestAttempt.test_id.in_([test.id for test in tests]),
        ).all()
    } if tests else {}

    listing = []
    for test in tests:
        entry = test.to_dict()
        attempt = attempts.get(test.id)
        entry['attempt'] = attempt.to_dict() if attempt else None
        if attempt:
            entry['grade'] = grade_label(attempt.earned_points, attempt.total_points)
            entry['percentage'] = attempt_percentage(attempt)
        else:
            entry['grade'] = None
            entry['percentage'] = None
        listing.append(entry)
    return listing
