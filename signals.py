# signals.py
# Hooks for external collaborators. The achievement service connects to
# winner_approved; nothing in this repo delivers achievements itself.

from blinker import Namespace

judging_signals = Namespace()

# sender: the Flask app; kwargs: winner (WinnerProposal)
winner_approved = judging_signals.signal('winner-approved')
