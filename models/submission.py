# models/submission.py

from extensions import db
from sqlalchemy import CheckConstraint
from utils import isoformat


class Submission(db.Model):
    __tablename__ = 'submissions'

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    team_name = db.Column(db.String(100), nullable=True)
    project_name = db.Column(db.String(200), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='draft')
    submitted_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship('User')
    ratings = db.relationship('Rating', backref='submission', lazy=True, cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("status IN ('draft', 'submitted')", name="check_submission_status"),
    )

    @property
    def is_submitted(self):
        return self.status == 'submitted'

    def to_dict(self):
        return {
            'id': self.id,
            'event_id': self.event_id,
            'user_id': self.user_id,
            'team_name': self.team_name,
            'project_name': self.project_name,
            'status': self.status,
            'submitted_at': isoformat(self.submitted_at),
        }
