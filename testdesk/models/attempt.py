"""
TestAttempt Model
A student's finished, scored run through a test
"""
from datetime import datetime, timezone

from testdesk.extensions import db


def now_utc():
    return datetime.now(timezone.utc)


class TestAttempt(db.Model):
    """Attempt model"""
    __tablename__ = 'test_attempts'
    __test__ = False

    id = db.Column(db.Integer, primary_key=True)
    test_id = db.Column(db.Integer, db.ForeignKey('tests.id'), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False, index=True)

    score = db.Column(db.Float)  # percentage
    total_questions = db.Column(db.Integer)
    correct_answers = db.Column(db.Integer)
    total_points = db.Column(db.Integer)
    earned_points = db.Column(db.Integer)

    # question id (as string) -> response
    answers = db.Column(db.JSON)

    started_at = db.Column(db.DateTime, default=now_utc)
    completed_at = db.Column(db.DateTime)

    test = db.relationship('Test', lazy=True)

    __table_args__ = (
        db.UniqueConstraint(
            'test_id', 'student_id',
            name='unique_attempt_per_student'
        ),
    )

    def __repr__(self):
        return f'<TestAttempt test={self.test_id} student={self.student_id}: {self.earned_points}/{self.total_points}>'

    def to_dict(self):
        return {
            'id': self.id,
            'test_id': self.test_id,
            'student_id': self.student_id,
            'score': self.score,
            'total_questions': self.total_questions,
            'correct_answers': self.correct_answers,
            'total_points': self.total_points,
            'earned_points': self.earned_points,
            'answers': self.answers,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }
