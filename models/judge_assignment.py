# models/judge_assignment.py
# Maintained by the external assignment workflow; read-only here.

from extensions import db
from sqlalchemy import CheckConstraint


class JudgeAssignment(db.Model):
    __tablename__ = 'judge_assignments'
    id = db.Column(db.Integer, primary_key=True)
    judge_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='active')

    __table_args__ = (
        db.UniqueConstraint('judge_id', 'event_id', name='unique_judge_event'),
        CheckConstraint("status IN ('active', 'revoked')", name="check_assignment_status"),
    )

    @property
    def is_active(self):
        return self.status == 'active'
