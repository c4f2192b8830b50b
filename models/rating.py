# models/rating.py

from extensions import db
from sqlalchemy import CheckConstraint
from utils import isoformat, utcnow


class Rating(db.Model):
    __tablename__ = 'ratings'
    id = db.Column(db.Integer, primary_key=True)
    submission_id = db.Column(db.Integer, db.ForeignKey('submissions.id', ondelete='CASCADE'), nullable=False)
    judge_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    criterion_id = db.Column(db.Integer, db.ForeignKey('criteria.id', ondelete='CASCADE'), nullable=False)
    score = db.Column(db.Float, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow)

    judge = db.relationship('User')
    criterion = db.relationship('Criterion')

    __table_args__ = (
        db.UniqueConstraint('submission_id', 'judge_id', 'criterion_id', name='unique_rating'),
        CheckConstraint("score >= 0", name="check_rating_score"),
    )

    def to_dict(self):
        return {
            'submission_id': self.submission_id,
            'judge_id': self.judge_id,
            'judge_name': self.judge.name if self.judge else None,
            'criterion_id': self.criterion_id,
            'criterion_name': self.criterion.name if self.criterion else None,
            'score': self.score,
            'notes': self.notes,
            'updated_at': isoformat(self.updated_at),
        }
