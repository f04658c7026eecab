"""
Test Model
A timed test inside a course
"""
from datetime import datetime, timezone

from testdesk.extensions import db


def now_utc():
    return datetime.now(timezone.utc)


class Test(db.Model):
    """Test model"""
    __tablename__ = 'tests'
    # Keep pytest from collecting this model when imported in test modules
    __test__ = False

    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey('courses.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    time_limit = db.Column(db.Integer, nullable=False, default=30)  # minutes
    created_by = db.Column(db.Integer, db.ForeignKey('profiles.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=now_utc)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    questions = db.relationship(
        'Question',
        backref='test',
        lazy=True,
        order_by='Question.order_index',
        cascade='all, delete-orphan',
    )

    def __repr__(self):
        return f'<Test {self.title}>'

    def get_total_time_seconds(self):
        """Time limit converted to whole seconds"""
        return int(self.time_limit or 0) * 60

    def to_dict(self):
        return {
            'id': self.id,
            'course_id': self.course_id,
            'title': self.title,
            'description': self.description,
            'time_limit': self.time_limit,
            'created_by': self.created_by,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
