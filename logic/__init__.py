# logic/__init__.py
# Judging domain logic. Routes call these; they raise errors.JudgingError subclasses.

from .criteria import get_criteria, criteria_by_priority
from .permissions import (
    is_active_assignment, can_rate_submission, can_view_judging,
    can_manage_event, can_propose_winners, require,
)
from .judging import get_event, is_judging_closed, set_judging_control, judging_progress
from .ratings import (
    submit_rating, get_ratings, judge_evaluated_count, judge_ratings_for_event,
)
from .ranking import ScoreCard, RankedSubmission, TieGroup, compute_score, rank_submissions, detect_ties
from .winners import propose_winners, approve_winner, withdraw_winner, announce_winners, list_winners
