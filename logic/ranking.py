# logic/ranking.py
# Aggregation and ranking. Everything here is recomputed from the live
# ratings on each call; nothing is cached or stored.

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from flask import current_app

from errors import NotFound
from extensions import db
from logic.criteria import criteria_by_priority
from logic.judging import get_event
from models import Criterion, Rating, Submission
from utils import quantize


@dataclass
class ScoreCard:
    submission_id: int
    # None until at least one rating exists
    overall: Optional[float]
    per_criterion: Dict[int, float] = field(default_factory=dict)
    judge_count: int = 0

    def to_dict(self):
        return {
            'submission_id': self.submission_id,
            'overall': self.overall,
            # JSON object keys are strings
            'per_criterion': {str(k): v for k, v in sorted(self.per_criterion.items())},
            'judge_count': self.judge_count,
        }


@dataclass
class RankedSubmission:
    position: int
    submission: Submission
    score: ScoreCard
    # Rounded overall score shared with at least one other submission
    tie_group: Optional[float] = None
    # What put this submission ahead of the next one in its tie group
    tie_resolved_by: Optional[str] = None

    def to_dict(self):
        data = self.submission.to_dict()
        data.update(
            position=self.position,
            overall=self.score.overall,
            per_criterion=self.score.to_dict()['per_criterion'],
            judge_count=self.score.judge_count,
            tie_group=self.tie_group,
            tie_resolved_by=self.tie_resolved_by,
        )
        return data


@dataclass
class TieGroup:
    score: float
    submissions: List[Submission]

    def to_dict(self):
        return {'score': self.score, 'submission_ids': [s.id for s in self.submissions]}


def _score_cards(submission_ids):
    precision = current_app.config['SCORE_PRECISION']
    cards = {sid: ScoreCard(submission_id=sid, overall=None) for sid in submission_ids}
    if not cards:
        return cards

    # Fixed row order so float sums come out identical on every call
    rows = db.session.query(
        Rating.submission_id, Rating.criterion_id, Rating.judge_id, Rating.score
    ).filter(
        Rating.submission_id.in_(list(cards))
    ).order_by(
        Rating.submission_id, Rating.criterion_id, Rating.judge_id
    ).all()

    scores = defaultdict(lambda: defaultdict(list))
    judges = defaultdict(set)
    for submission_id, criterion_id, judge_id, score in rows:
        scores[submission_id][criterion_id].append(score)
        judges[submission_id].add(judge_id)

    for submission_id, by_criterion in scores.items():
        means = {cid: sum(values) / len(values) for cid, values in by_criterion.items()}
        card = cards[submission_id]
        card.per_criterion = {cid: quantize(mean, precision) for cid, mean in means.items()}
        # Criteria count equally here; weight only matters for tie-breaks
        card.overall = quantize(sum(means[cid] for cid in sorted(means)) / len(means), precision)
        card.judge_count = len(judges[submission_id])
    return cards


def compute_score(submission_id):
    if db.session.get(Submission, submission_id) is None:
        raise NotFound(f'Submission {submission_id} not found')
    return _score_cards([submission_id])[submission_id]


def _sort_key(submission, card, priority):
    rated = card.overall is not None
    criterion_key = tuple(
        (0, -card.per_criterion[c.id]) if c.id in card.per_criterion else (1, 0.0)
        for c in priority
    )
    submitted_key = (submission.submitted_at is None, submission.submitted_at or datetime.min)
    return (
        0 if rated else 1,
        -(card.overall or 0.0),
        criterion_key,
        submitted_key,
        submission.id,
    )


def _tie_reason(first, second, cards, priority):
    a, b = cards[first.id], cards[second.id]
    for criterion in priority:
        if a.per_criterion.get(criterion.id) != b.per_criterion.get(criterion.id):
            return f'criterion:{criterion.name}'
    if first.submitted_at != second.submitted_at:
        return 'submitted_at'
    return 'submission_id'


def rank_submissions(event_id):
    """
    Orders the event's submitted submissions best first.

    Overall scores are compared after rounding to SCORE_PRECISION places.
    Equal scores fall back to per-criterion means in descending criterion
    weight, then earlier submitted_at, then lower id, so the result depends
    only on the ratings, the criteria weights and the submissions.
    """
    event = get_event(event_id)
    priority = criteria_by_priority(Criterion.query.filter_by(event_id=event.id).all())
    submissions = Submission.query.filter_by(event_id=event.id, status='submitted').all()
    cards = _score_cards([s.id for s in submissions])

    ordered = sorted(submissions, key=lambda s: _sort_key(s, cards[s.id], priority))
    ranked = [
        RankedSubmission(position=i, submission=s, score=cards[s.id])
        for i, s in enumerate(ordered, start=1)
    ]

    for group in _tie_groups(ranked):
        for entry in group:
            entry.tie_group = entry.score.overall
        for current, following in zip(group, group[1:]):
            current.tie_resolved_by = _tie_reason(current.submission, following.submission, cards, priority)
    return ranked


def _tie_groups(ranked):
    groups = defaultdict(list)
    for entry in ranked:
        if entry.score.overall is not None:
            groups[entry.score.overall].append(entry)
    # ranked is already score-descending, and dicts keep insertion order
    return [group for group in groups.values() if len(group) > 1]


def detect_ties(event_id):
    return [
        TieGroup(score=group[0].score.overall, submissions=[entry.submission for entry in group])
        for group in _tie_groups(rank_submissions(event_id))
    ]
