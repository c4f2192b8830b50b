# routes/public.py
# Endpoints that need no login

from flask import Blueprint

from logic import get_criteria, get_event, list_winners
from routes import ok

public_bp = Blueprint('public', __name__, url_prefix='/api')


@public_bp.route('/events/<int:event_id>/criteria')
def event_criteria(event_id):
    # First read seeds the default criteria
    criteria = get_criteria(event_id)
    return ok([c.to_dict() for c in criteria])


@public_bp.route('/events/<int:event_id>/winners')
def announced_winners(event_id):
    event = get_event(event_id)
    winners = list_winners(event.id)
    return ok([_public_winner(w) for w in winners])


def _public_winner(winner):
    data = winner.to_dict()
    data['submission'] = winner.submission.to_dict()
    return data
