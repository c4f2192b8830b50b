# models/criterion.py

from extensions import db
from sqlalchemy import CheckConstraint


class Criterion(db.Model):
    __tablename__ = 'criteria'
    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=False)
    description = db.Column(db.Text, nullable=True)
    # Tie-break priority only, higher is compared first
    weight = db.Column(db.Integer, nullable=False, default=1)
    display_order = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        # Also what keeps two concurrent default seedings from both landing
        db.UniqueConstraint('event_id', 'name', name='unique_event_criterion_name'),
        CheckConstraint("weight > 0", name="check_criterion_weight"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'event_id': self.event_id,
            'name': self.name,
            'description': self.description,
            'weight': self.weight,
            'display_order': self.display_order,
        }
