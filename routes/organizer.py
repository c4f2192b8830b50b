# routes/organizer.py
# Organizer-facing endpoints: audit, ranking and the winner workflow

from flask import Blueprint, request

from errors import NotFound, ValidationError
from extensions import db
from logic import (
    announce_winners, approve_winner, can_manage_event, compute_score, detect_ties,
    get_event, get_ratings, judging_progress, list_winners, propose_winners, rank_submissions,
    require, set_judging_control, withdraw_winner,
)
from models import Submission
from routes import current_user_id, login_required, ok

organizer_bp = Blueprint('organizer', __name__, url_prefix='/api/organizer')


def _json_body():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body


def _owned_event(event_id):
    event = get_event(event_id)
    require(can_manage_event(current_user_id(), event))
    return event


@organizer_bp.route('/submissions/<int:submission_id>/ratings')
@login_required
def submission_ratings(submission_id):
    submission = db.session.get(Submission, submission_id)
    if submission is None:
        raise NotFound(f'Submission {submission_id} not found')
    require(can_manage_event(current_user_id(), submission.event))

    ratings = get_ratings(submission.id)
    return ok({
        'submission': submission.to_dict(),
        'score': compute_score(submission.id).to_dict(),
        'ratings': [r.to_dict() for r in ratings],
    })


@organizer_bp.route('/events/<int:event_id>/ranking')
@login_required
def event_ranking(event_id):
    event = _owned_event(event_id)
    ranked = rank_submissions(event.id)
    return ok([entry.to_dict() for entry in ranked])


@organizer_bp.route('/events/<int:event_id>/ties')
@login_required
def event_ties(event_id):
    event = _owned_event(event_id)
    return ok([group.to_dict() for group in detect_ties(event.id)])


@organizer_bp.route('/events/<int:event_id>/judging-progress')
@login_required
def event_judging_progress(event_id):
    return ok(judging_progress(current_user_id(), event_id))


@organizer_bp.route('/events/<int:event_id>/judging-control', methods=['POST'])
@login_required
def event_judging_control(event_id):
    body = _json_body()
    event = set_judging_control(
        current_user_id(), event_id, body.get('judging_control'), body.get('judging_ends_at')
    )
    return ok(event.to_dict())


@organizer_bp.route('/events/<int:event_id>/propose-winners', methods=['POST'])
@login_required
def event_propose_winners(event_id):
    body = _json_body()
    winners = propose_winners(current_user_id(), event_id, body.get('winners'))
    return ok([w.to_dict() for w in winners])


@organizer_bp.route('/events/<int:event_id>/winners')
@login_required
def event_winners(event_id):
    event = _owned_event(event_id)
    winners = list_winners(event.id, include_unannounced=True)
    return ok([w.to_dict() for w in winners])


@organizer_bp.route('/winners/<int:winner_id>/approve', methods=['POST'])
@login_required
def winner_approve(winner_id):
    winner = approve_winner(current_user_id(), winner_id)
    return ok(winner.to_dict())


@organizer_bp.route('/winners/<int:winner_id>', methods=['DELETE'])
@login_required
def winner_withdraw(winner_id):
    withdraw_winner(current_user_id(), winner_id)
    return ok(None, message='Winner withdrawn')


@organizer_bp.route('/events/<int:event_id>/announce-winners', methods=['POST'])
@login_required
def event_announce_winners(event_id):
    winners = announce_winners(current_user_id(), event_id)
    return ok([w.to_dict() for w in winners])
