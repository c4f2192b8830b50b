# models/__init__.py

from .user import User
from .event import Event, JUDGING_CONTROLS
from .prize import Prize
from .criterion import Criterion
from .judge_assignment import JudgeAssignment
from .submission import Submission
from .rating import Rating
from .winner import WinnerProposal, WINNER_STATUSES
