# logic/ratings.py
# Rating store: one score + notes per (submission, judge, criterion)

import logging
import numbers

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from errors import InvalidState, NotFound, ValidationError
from extensions import db
from logic.judging import is_judging_closed
from logic.permissions import can_rate_submission, require
from models import Criterion, Rating, Submission
from utils import quantize, utcnow

logger = logging.getLogger(__name__)


def _get_submission(submission_id):
    submission = db.session.get(Submission, submission_id)
    if submission is None:
        raise NotFound(f'Submission {submission_id} not found')
    return submission


def _validate_entries(submission, entries):
    """Returns [(criterion_id, score, notes)] or raises ValidationError listing every problem."""
    config = current_app.config
    low, high = config['SCORE_MIN'], config['SCORE_MAX']
    precision = config['SCORE_PRECISION']
    max_notes = config['MAX_NOTES_LENGTH']

    if not isinstance(entries, (list, tuple)) or not entries:
        raise ValidationError('Ratings array is required')

    event_criteria = {
        c.id: c for c in Criterion.query.filter_by(event_id=submission.event_id).all()
    }

    errors = []
    cleaned = []
    seen = set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            errors.append(f'Rating {index + 1}: must be an object')
            continue

        criterion_id = entry.get('criterion_id')
        criterion = event_criteria.get(criterion_id) if isinstance(criterion_id, int) else None
        if criterion is None:
            errors.append(f'Rating {index + 1}: criterion {criterion_id} does not belong to this event')
            continue
        if criterion_id in seen:
            errors.append(f'Rating {index + 1}: criterion "{criterion.name}" rated twice')
            continue
        seen.add(criterion_id)

        score = entry.get('score')
        # bool is an int subclass, "true" is not a score
        if isinstance(score, bool) or not isinstance(score, numbers.Real) or score != score:
            errors.append(f'{criterion.name}: Score must be a valid number')
            continue
        if score < low or score > high:
            errors.append(f'{criterion.name}: Score must be between {low:g} and {high:g}')
            continue

        notes = entry.get('notes') or None
        if notes is not None and (not isinstance(notes, str) or len(notes) > max_notes):
            errors.append(f'{criterion.name}: Notes must be text of at most {max_notes} characters')
            continue

        cleaned.append((criterion_id, quantize(float(score), precision), notes))

    if errors:
        raise ValidationError('; '.join(errors), errors=errors)
    return cleaned


def _write_ratings(judge_id, submission_id, cleaned):
    now = utcnow()
    existing = {
        r.criterion_id: r
        for r in Rating.query.filter_by(judge_id=judge_id, submission_id=submission_id).all()
    }
    saved = []
    for criterion_id, score, notes in cleaned:
        rating = existing.get(criterion_id)
        if rating:
            rating.score = score
            rating.notes = notes
            rating.updated_at = now
        else:
            rating = Rating(
                submission_id=submission_id, judge_id=judge_id, criterion_id=criterion_id,
                score=score, notes=notes, created_at=now, updated_at=now,
            )
            db.session.add(rating)
        saved.append(rating)
    db.session.commit()
    return saved


def submit_rating(judge_id, submission_id, entries):
    """
    Upserts a judge's ratings for one submission. Re-submitting overwrites
    score, notes and updated_at for the same (submission, judge, criterion);
    it never adds rows. Nothing is written unless every entry is valid.
    """
    submission = _get_submission(submission_id)
    require(can_rate_submission(judge_id, submission), 'Not authorized to judge this submission')
    if not submission.is_submitted:
        raise InvalidState('Only submitted projects can be rated')
    if is_judging_closed(submission.event):
        raise InvalidState('Judging is closed for this event')

    cleaned = _validate_entries(submission, entries)

    try:
        saved = _write_ratings(judge_id, submission.id, cleaned)
    except IntegrityError:
        # The same judge raced us on a first insert; their row exists now, so update it.
        db.session.rollback()
        logger.info("Retrying rating upsert for judge %s on submission %s", judge_id, submission.id)
        saved = _write_ratings(judge_id, submission.id, cleaned)

    logger.info(
        "Judge %s saved %d rating(s) for submission %s", judge_id, len(saved), submission.id
    )
    return saved


def get_ratings(submission_id):
    submission = _get_submission(submission_id)
    return Rating.query.filter_by(submission_id=submission.id).order_by(
        Rating.judge_id, Rating.criterion_id
    ).all()


def judge_evaluated_count(judge_id, event_id=None):
    """Distinct submissions the judge has rated; derived from ratings, never stored."""
    query = db.session.query(func.count(func.distinct(Rating.submission_id))).filter(
        Rating.judge_id == judge_id
    )
    if event_id is not None:
        query = query.join(Submission, Submission.id == Rating.submission_id).filter(
            Submission.event_id == event_id
        )
    return query.scalar() or 0


def judge_ratings_for_event(judge_id, event_id):
    """The judge's own ratings in an event as {(submission_id, criterion_id): Rating}."""
    ratings = Rating.query.join(Submission, Submission.id == Rating.submission_id).filter(
        Rating.judge_id == judge_id,
        Submission.event_id == event_id,
    ).all()
    return {(r.submission_id, r.criterion_id): r for r in ratings}
