# logic/winners.py
# Winner proposal / approval workflow: pending -> approved -> announced

import logging
import numbers
from collections import Counter

from flask import current_app
from sqlalchemy.exc import IntegrityError

from errors import BatchValidationError, Conflict, InvalidState, NotFound, ValidationError
from extensions import db
from logic.judging import get_event, is_judging_closed
from logic.permissions import can_manage_event, can_propose_winners, require
from models import Prize, Submission, WinnerProposal
from signals import winner_approved
from utils import utcnow

logger = logging.getLogger(__name__)


def _get_winner(winner_id):
    winner = db.session.get(WinnerProposal, winner_id)
    if winner is None:
        raise NotFound(f'Winner {winner_id} not found')
    return winner


def _require_judging_closed(event):
    if not is_judging_closed(event):
        raise InvalidState('Close judging before picking winners')


def _is_position(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 1


def _is_id(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


# Column widths on WinnerProposal
PRIZE_TEXT_LIMITS = (('prize_name', 100), ('prize_amount', 50))


def _check_prize_text(item):
    for field, limit in PRIZE_TEXT_LIMITS:
        value = item.get(field)
        if value is not None and (not isinstance(value, str) or len(value) > limit):
            return f'{field} must be text of at most {limit} characters'
    return None


def _check_proposals(event, proposals):
    """
    Validates the whole batch and returns one outcome per item. Problems are
    collected rather than raised so the organizer sees every failing slot.
    """
    items = [item for item in proposals if isinstance(item, dict)]
    position_count = Counter(i.get('prize_position') for i in items if _is_position(i.get('prize_position')))
    submission_count = Counter(i.get('submission_id') for i in items if _is_id(i.get('submission_id')))

    prizes = {p.position: p for p in Prize.query.filter_by(event_id=event.id).all()}
    existing = WinnerProposal.query.filter_by(event_id=event.id).all()
    locked = {w.prize_position: w for w in existing if w.status != 'pending'}
    # Pending rows at positions in this batch get replaced, everything else stays
    held = {w.submission_id: w for w in existing if w.prize_position not in position_count or w.status != 'pending'}

    outcomes = []
    for index, item in enumerate(proposals):
        outcome = {'index': index, 'status': 'ok'}
        outcomes.append(outcome)

        if not isinstance(item, dict):
            outcome.update(status='error', error=ValidationError.kind, message='Winner must be an object')
            continue

        position = item.get('prize_position')
        submission_id = item.get('submission_id')
        outcome.update(submission_id=submission_id, prize_position=position)
        text_error = _check_prize_text(item)

        if not _is_position(position):
            error, message = ValidationError, 'prize_position must be a positive integer'
        elif position_count[position] > 1:
            error, message = ValidationError, f'Prize position {position} is used more than once'
        elif prizes and position not in prizes:
            error, message = ValidationError, f'Event has no prize at position {position}'
        elif text_error:
            error, message = ValidationError, text_error
        elif _is_id(submission_id) and submission_count[submission_id] > 1:
            error, message = ValidationError, f'Submission {submission_id} is proposed more than once'
        else:
            error, message = _check_submission(event, submission_id)
            if error is None and position in locked:
                error = Conflict
                message = f'Prize position {position} is already {locked[position].status}'
            elif error is None and submission_id in held and held[submission_id].prize_position != position:
                other = held[submission_id]
                error = ValidationError if other.status == 'pending' else Conflict
                message = f'Submission {submission_id} already holds prize position {other.prize_position} ({other.status})'

        if error is not None:
            outcome.update(status='error', error=error.kind, message=message)

    return outcomes, prizes


def _check_submission(event, submission_id):
    submission = db.session.get(Submission, submission_id) if _is_id(submission_id) else None
    if submission is None:
        return NotFound, f'Submission {submission_id} not found'
    if submission.event_id != event.id:
        return ValidationError, f'Submission {submission_id} belongs to another event'
    if not submission.is_submitted:
        return InvalidState, f'Submission {submission_id} was never submitted'
    return None, None


def propose_winners(user_id, event_id, proposals):
    """
    Creates or replaces pending winners for the given prize positions.

    The batch is all-or-nothing. If any item is rejected nothing is written
    and BatchValidationError carries the outcome of every item. Positions
    that are already approved or announced are never touched.
    """
    event = get_event(event_id)
    require(can_propose_winners(user_id, event), 'Only the event organizer can propose winners')
    _require_judging_closed(event)

    if not isinstance(proposals, (list, tuple)) or not proposals:
        raise ValidationError('Winners array is required')

    outcomes, prizes = _check_proposals(event, proposals)
    failed = [o for o in outcomes if o['status'] != 'ok']
    if failed:
        logger.warning(
            "Rejected winner proposal for event %s: %d of %d item(s) failed",
            event.id, len(failed), len(outcomes)
        )
        raise BatchValidationError(f'{len(failed)} of {len(outcomes)} winner(s) rejected', outcomes)

    positions = [item['prize_position'] for item in proposals]
    try:
        WinnerProposal.query.filter(
            WinnerProposal.event_id == event.id,
            WinnerProposal.status == 'pending',
            WinnerProposal.prize_position.in_(positions),
        ).delete(synchronize_session=False)

        created = []
        for item in proposals:
            prize = prizes.get(item['prize_position'])
            prize_name = item.get('prize_name')
            prize_amount = item.get('prize_amount')
            # Slot defaults only fill fields the organizer left out
            if prize is not None:
                prize_name = prize.name if prize_name is None else prize_name
                prize_amount = prize.amount if prize_amount is None else prize_amount
            winner = WinnerProposal(
                event_id=event.id,
                submission_id=item['submission_id'],
                prize_position=item['prize_position'],
                prize_name=prize_name,
                prize_amount=prize_amount,
                status='pending',
                proposed_by=user_id,
            )
            db.session.add(winner)
            created.append(winner)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict('Another proposal for these prize positions was saved at the same time')

    logger.info("Proposed %d winner(s) for event %s", len(created), event.id)
    return sorted(created, key=lambda w: w.prize_position)


def approve_winner(user_id, winner_id):
    """
    pending -> approved. This is the only transition with effects outside
    this service: once committed, winner_approved is sent so the achievement
    service can record the prize.
    """
    winner = _get_winner(winner_id)
    require(can_manage_event(user_id, winner.event), 'Only the event organizer can approve winners')
    if winner.status != 'pending':
        raise InvalidState(f'Winner is already {winner.status}')

    winner.status = 'approved'
    winner.approved_at = utcnow()
    db.session.commit()
    logger.info("Approved winner %s (event %s, position %s)", winner.id, winner.event_id, winner.prize_position)

    try:
        winner_approved.send(current_app._get_current_object(), winner=winner)
    except Exception:
        # The approval stands; the receiver owns its own retries
        logger.exception("winner_approved receiver failed for winner %s", winner.id)
    return winner


def withdraw_winner(user_id, winner_id):
    winner = _get_winner(winner_id)
    require(can_manage_event(user_id, winner.event), 'Only the event organizer can withdraw winners')
    if winner.status != 'pending':
        raise InvalidState(f'Cannot withdraw a winner that is already {winner.status}')

    event_id = winner.event_id
    db.session.delete(winner)
    db.session.commit()
    logger.info("Withdrew pending winner %s from event %s", winner_id, event_id)


def announce_winners(user_id, event_id):
    """approved -> announced for the whole event. Running it again is a no-op."""
    event = get_event(event_id)
    require(can_manage_event(user_id, event), 'Only the event organizer can announce winners')
    _require_judging_closed(event)

    approved = WinnerProposal.query.filter_by(event_id=event.id, status='approved').all()
    if approved:
        now = utcnow()
        for winner in approved:
            winner.status = 'announced'
            winner.announced_at = now
        event.winners_announced_at = now
        db.session.commit()
        logger.info("Announced %d winner(s) for event %s", len(approved), event.id)

    return list_winners(event.id)


def list_winners(event_id, include_unannounced=False):
    query = WinnerProposal.query.filter_by(event_id=event_id)
    if not include_unannounced:
        query = query.filter_by(status='announced')
    return query.order_by(WinnerProposal.prize_position).all()
