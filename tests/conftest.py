"""Shared fixtures: an app on in-memory SQLite and a small data factory."""

from datetime import timedelta

import pytest

from app import create_app
from config import TestConfig
from extensions import db
from logic import get_criteria
from models import Event, JudgeAssignment, Prize, Submission, User
from utils import utcnow


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(user):
        with client.session_transaction() as sess:
            sess['user_id'] = user.id
        return client
    return _login


class Factory:
    """Builds users, events, assignments and submissions with sensible defaults."""

    def __init__(self):
        self.base_time = utcnow() - timedelta(days=1)
        self._count = 0

    def _next(self):
        self._count += 1
        return self._count

    def user(self, name=None):
        user = User(name=name or f'User {self._next()}')
        db.session.add(user)
        db.session.commit()
        return user

    def event(self, organizer=None, judging_control='open', judging_ends_at=None):
        organizer = organizer or self.user('Organizer')
        event = Event(
            name=f'Event {self._next()}',
            organizer_id=organizer.id,
            judging_control=judging_control,
            judging_ends_at=judging_ends_at,
        )
        db.session.add(event)
        db.session.commit()
        return event

    def judge(self, event, status='active', name=None):
        judge = self.user(name or 'Judge')
        db.session.add(JudgeAssignment(judge_id=judge.id, event_id=event.id, status=status))
        db.session.commit()
        return judge

    def submission(self, event, status='submitted', minutes=0):
        owner = self.user('Hacker')
        submission = Submission(
            event_id=event.id,
            user_id=owner.id,
            project_name=f'Project {self._next()}',
            status=status,
            submitted_at=self.base_time + timedelta(minutes=minutes) if status == 'submitted' else None,
        )
        db.session.add(submission)
        db.session.commit()
        return submission

    def prize(self, event, position, name, amount=None):
        prize = Prize(event_id=event.id, position=position, name=name, amount=amount)
        db.session.add(prize)
        db.session.commit()
        return prize

    def criteria(self, event):
        """Default criteria keyed by lower-case name."""
        return {c.name.lower(): c for c in get_criteria(event.id)}

    def close_judging(self, event):
        event.judging_control = 'closed'
        db.session.commit()


@pytest.fixture
def factory(app):
    return Factory()


@pytest.fixture
def rate(app):
    """rate(judge, submission, {criterion: score, ...}) through the real rating store."""
    from logic import submit_rating

    def _rate(judge, submission, scores):
        return submit_rating(judge.id, submission.id, [
            {'criterion_id': criterion.id, 'score': score} for criterion, score in scores.items()
        ])
    return _rate
