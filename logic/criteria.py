# logic/criteria.py
# Criteria registry: ordered, weighted scoring dimensions per event

import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError

from errors import NotFound
from extensions import db
from models import Criterion, Event

logger = logging.getLogger(__name__)


def _ordered_criteria(event_id):
    return Criterion.query.filter_by(event_id=event_id).order_by(
        Criterion.display_order, Criterion.id
    ).all()


def get_criteria(event_id):
    """
    Returns the event's criteria by display order, creating the default set
    on first use. Safe under concurrent first calls: the (event_id, name)
    unique constraint rejects the second seeding and the loser re-reads.
    """
    if db.session.get(Event, event_id) is None:
        raise NotFound(f'Event {event_id} not found')

    criteria = _ordered_criteria(event_id)
    if criteria:
        return criteria

    defaults = current_app.config['DEFAULT_CRITERIA']
    try:
        with db.session.begin_nested():
            for order, (name, weight) in enumerate(defaults, start=1):
                db.session.add(Criterion(event_id=event_id, name=name, weight=weight, display_order=order))
        db.session.commit()
        logger.info("Seeded %d default criteria for event %s", len(defaults), event_id)
    except IntegrityError:
        db.session.rollback()
        logger.info("Default criteria for event %s were seeded concurrently", event_id)

    return _ordered_criteria(event_id)


def criteria_by_priority(criteria):
    """Tie-break order: weight descending, then display order, then id."""
    return sorted(criteria, key=lambda c: (-c.weight, c.display_order, c.id))
