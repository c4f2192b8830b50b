# models/user.py

from extensions import db
from utils import utcnow


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    # Judges and organizers are ordinary users; what they may do is decided by
    # assignments and event ownership (logic/permissions.py), not by a role column.
    assignments = db.relationship('JudgeAssignment', backref='judge', cascade="all, delete-orphan")

    def to_dict(self):
        return {'id': self.id, 'name': self.name}
