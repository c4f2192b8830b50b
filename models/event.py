# models/event.py
# Event settings are owned by the event-management service; this service
# writes only the judging window and the announcement stamp.

from extensions import db
from sqlalchemy import CheckConstraint
from utils import isoformat

JUDGING_CONTROLS = ('auto', 'open', 'closed')


class Event(db.Model):
    __tablename__ = 'events'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, nullable=False)
    organizer_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    # 'auto' closes at judging_ends_at, 'open'/'closed' are manual overrides
    judging_control = db.Column(db.String(10), nullable=False, default='auto')
    judging_ends_at = db.Column(db.DateTime, nullable=True)
    winners_announced_at = db.Column(db.DateTime, nullable=True)

    organizer = db.relationship('User')
    criteria = db.relationship('Criterion', backref='event', lazy=True, cascade="all, delete-orphan")
    prizes = db.relationship('Prize', backref='event', lazy=True, cascade="all, delete-orphan")
    submissions = db.relationship('Submission', backref='event', lazy=True, cascade="all, delete-orphan")
    judge_assignments = db.relationship('JudgeAssignment', backref='event', lazy=True, cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("judging_control IN ('auto', 'open', 'closed')", name="check_judging_control"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'organizer_id': self.organizer_id,
            'judging_control': self.judging_control,
            'judging_ends_at': isoformat(self.judging_ends_at),
            'winners_announced_at': isoformat(self.winners_announced_at),
        }
