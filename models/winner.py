# models/winner.py

from extensions import db
from sqlalchemy import CheckConstraint
from utils import isoformat, utcnow

WINNER_STATUSES = ('pending', 'approved', 'announced')


class WinnerProposal(db.Model):
    __tablename__ = 'winner_proposals'
    id = db.Column(db.Integer, primary_key=True)

    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    submission_id = db.Column(db.Integer, db.ForeignKey('submissions.id', ondelete='CASCADE'), nullable=False)

    prize_position = db.Column(db.Integer, nullable=False)
    prize_name = db.Column(db.String(100), nullable=True)
    prize_amount = db.Column(db.String(50), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='pending')

    proposed_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    approved_at = db.Column(db.DateTime, nullable=True)
    announced_at = db.Column(db.DateTime, nullable=True)

    submission = db.relationship('Submission')
    event = db.relationship('Event')

    __table_args__ = (
        db.UniqueConstraint('event_id', 'prize_position', name='unique_winner_position'),
        CheckConstraint("status IN ('pending', 'approved', 'announced')", name="check_winner_status"),
        CheckConstraint("prize_position >= 1", name="check_winner_position"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'event_id': self.event_id,
            'submission_id': self.submission_id,
            'prize_position': self.prize_position,
            'prize_name': self.prize_name,
            'prize_amount': self.prize_amount,
            'status': self.status,
            'created_at': isoformat(self.created_at),
            'approved_at': isoformat(self.approved_at),
            'announced_at': isoformat(self.announced_at),
        }
