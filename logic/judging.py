# logic/judging.py
# Judging window state and organizer-facing progress

import logging

from errors import NotFound, ValidationError
from extensions import db
from logic.permissions import can_manage_event, require
from models import Event, JudgeAssignment, JUDGING_CONTROLS, Rating, Submission
from utils import parse_datetime, utcnow

logger = logging.getLogger(__name__)


def get_event(event_id):
    event = db.session.get(Event, event_id)
    if event is None:
        raise NotFound(f'Event {event_id} not found')
    return event


def is_judging_closed(event, now=None):
    if event.judging_control == 'closed':
        return True
    if event.judging_control == 'open':
        return False
    now = now or utcnow()
    return event.judging_ends_at is not None and event.judging_ends_at <= now


def set_judging_control(user_id, event_id, control, ends_at=None):
    event = get_event(event_id)
    require(can_manage_event(user_id, event), 'Only the event organizer can change judging')

    if control not in JUDGING_CONTROLS:
        raise ValidationError(f'judging_control must be one of {", ".join(JUDGING_CONTROLS)}')
    if ends_at is not None:
        try:
            event.judging_ends_at = parse_datetime(ends_at)
        except (TypeError, ValueError):
            raise ValidationError('judging_ends_at must be an ISO-8601 timestamp')

    event.judging_control = control
    db.session.commit()
    logger.info("Event %s judging control set to %s", event.id, control)
    return event


def judging_progress(user_id, event_id):
    event = get_event(event_id)
    require(can_manage_event(user_id, event))

    total_submissions = Submission.query.filter_by(event_id=event.id, status='submitted').count()
    total_judges = JudgeAssignment.query.filter_by(event_id=event.id, status='active').count()

    pairs = db.session.query(Rating.submission_id, Rating.judge_id).join(
        Submission, Submission.id == Rating.submission_id
    ).filter(
        Submission.event_id == event.id,
        Submission.status == 'submitted',
    ).distinct().all()

    rated_submissions = len({submission_id for submission_id, _ in pairs})
    completion = 0
    if total_submissions and total_judges:
        # Revoked judges keep their ratings, so this can overshoot
        completion = min(100, round(len(pairs) / (total_submissions * total_judges) * 100))

    return {
        'total_submissions': total_submissions,
        'total_judges': total_judges,
        'rated_submissions': rated_submissions,
        'total_ratings': len(pairs),
        'completion_percentage': completion,
        'judging_closed': is_judging_closed(event),
    }
