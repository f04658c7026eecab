"""
Question Model
Single- and multiple-choice questions with their stored answer key
"""
from testdesk.extensions import db


QUESTION_KINDS = ('single', 'multiple')


class Question(db.Model):
    """Question model"""
    __tablename__ = 'questions'

    id = db.Column(db.Integer, primary_key=True)
    test_id = db.Column(db.Integer, db.ForeignKey('tests.id'), nullable=False, index=True)
    order_index = db.Column(db.Integer, nullable=False, default=0)

    question_text = db.Column(db.Text, nullable=False)

    # Question kind: single, multiple
    kind = db.Column(db.String(20), nullable=False, default='single')

    # Ordered option strings
    options = db.Column(db.JSON, nullable=False, default=list)

    # Option string for single; list of option strings (or its JSON text) for multiple
    correct_answer = db.Column(db.JSON)

    points = db.Column(db.Integer, nullable=False, default=1)

    __table_args__ = (
        db.UniqueConstraint(
            'test_id', 'order_index',
            name='unique_order_per_test'
        ),
    )

    def __repr__(self):
        return f'<Question {self.id}: {(self.question_text or "")[:50]}...>'
