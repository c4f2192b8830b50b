# models/prize.py

from extensions import db
from sqlalchemy import CheckConstraint


class Prize(db.Model):
    __tablename__ = 'prizes'
    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    position = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    amount = db.Column(db.String(50), nullable=True)

    __table_args__ = (
        db.UniqueConstraint('event_id', 'position', name='unique_event_prize_position'),
        CheckConstraint("position >= 1", name="check_prize_position"),
    )

    def to_dict(self):
        return {'position': self.position, 'name': self.name, 'amount': self.amount}
