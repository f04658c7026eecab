"""
Course Models
Courses owned by teachers and the enrollments of students in them
"""
from datetime import datetime, timezone

from testdesk.extensions import db


def now_utc():
    return datetime.now(timezone.utc)


class Course(db.Model):
    """Course model"""
    __tablename__ = 'courses'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    teacher_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False, index=True)
    registration_code = db.Column(db.String(10), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=now_utc)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    # Relationships
    teacher = db.relationship('Profile', lazy=True)
    tests = db.relationship('Test', backref='course', lazy=True, order_by='Test.created_at')

    def __repr__(self):
        return f'<Course {self.title}>'

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'teacher_id': self.teacher_id,
            'teacher_name': self.teacher.full_name if self.teacher else None,
            'registration_code': self.registration_code,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class CourseEnrollment(db.Model):
    """Student enrollment in a course"""
    __tablename__ = 'course_enrollments'

    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey('courses.id'), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False, index=True)
    enrolled_at = db.Column(db.DateTime, default=now_utc)

    course = db.relationship('Course', lazy=True)
    student = db.relationship('Profile', lazy=True)

    __table_args__ = (
        db.UniqueConstraint(
            'course_id', 'student_id',
            name='unique_enrollment_per_student'
        ),
    )

    def __repr__(self):
        return f'<CourseEnrollment course={self.course_id} student={self.student_id}>'
