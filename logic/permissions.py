# logic/permissions.py
# Every capability check used by the routes and the logic layer lives here.

from errors import Unauthorized
from models import JudgeAssignment


def is_active_assignment(judge_id, event_id):
    assignment = JudgeAssignment.query.filter_by(judge_id=judge_id, event_id=event_id).first()
    return assignment is not None and assignment.is_active


def can_rate_submission(judge_id, submission):
    return judge_id is not None and is_active_assignment(judge_id, submission.event_id)


def can_view_judging(judge_id, event):
    return judge_id is not None and is_active_assignment(judge_id, event.id)


def can_manage_event(user_id, event):
    return user_id is not None and event.organizer_id == user_id


def can_propose_winners(user_id, event):
    return can_manage_event(user_id, event)


def require(allowed, message='Not authorized'):
    if not allowed:
        raise Unauthorized(message)
