import logging
from datetime import timedelta

from app import create_app
from extensions import db
from logic import get_criteria, submit_rating
from models import User, Event, Prize, Criterion, JudgeAssignment, Submission, Rating, WinnerProposal
from utils import utcnow

logger = logging.getLogger('seed_data')

app = create_app()

with app.app_context():
    db.create_all()

    # --- 1. Clear old data ---
    logger.info("Clearing old data...")
    # Reverse dependency order
    db.session.query(WinnerProposal).delete()
    db.session.query(Rating).delete()
    db.session.query(Submission).delete()
    db.session.query(JudgeAssignment).delete()
    db.session.query(Criterion).delete()
    db.session.query(Prize).delete()
    db.session.query(Event).delete()
    db.session.query(User).delete()
    db.session.commit()

    # --- 2. Demo data ---
    logger.info("Adding demo data...")
    try:
        organizer = User(name='Olivia Organizer')
        judge1 = User(name='Jamie Judge')
        judge2 = User(name='Riley Reviewer')
        judge3 = User(name='Sam Revoked')
        hackers = [User(name=f'Hacker {n}') for n in range(1, 5)]
        db.session.add_all([organizer, judge1, judge2, judge3, *hackers])
        db.session.commit()

        event = Event(
            name='Spring Hack 2026',
            organizer_id=organizer.id,
            judging_control='auto',
            judging_ends_at=utcnow() + timedelta(days=2),
        )
        db.session.add(event)
        db.session.commit()

        db.session.add_all([
            Prize(event_id=event.id, position=1, name='Grand Prize', amount='$1000'),
            Prize(event_id=event.id, position=2, name='Runner Up', amount='$500'),
            Prize(event_id=event.id, position=3, name='Third Place', amount='$250'),
            JudgeAssignment(judge_id=judge1.id, event_id=event.id, status='active'),
            JudgeAssignment(judge_id=judge2.id, event_id=event.id, status='active'),
            JudgeAssignment(judge_id=judge3.id, event_id=event.id, status='revoked'),
        ])

        start = utcnow() - timedelta(hours=6)
        submissions = []
        for n, hacker in enumerate(hackers):
            submissions.append(Submission(
                event_id=event.id,
                user_id=hacker.id,
                team_name=f'Team {n + 1}',
                project_name=f'Project {n + 1}',
                status='submitted' if n < 3 else 'draft',
                submitted_at=start + timedelta(minutes=15 * n) if n < 3 else None,
            ))
        db.session.add_all(submissions)
        db.session.commit()

        criteria = get_criteria(event.id)

        # Two projects tie on the overall score; Innovation decides between them
        plan = {
            judge1.id: [(8, 7, 6, 5, 4), (6, 8, 6, 6, 5), (9, 9, 8, 8, 7)],
            judge2.id: [(6, 9, 6, 5, 6), (6, 8, 6, 6, 5), (8, 8, 9, 9, 8)],
        }
        for judge_id, rows in plan.items():
            for submission, scores in zip(submissions, rows):
                submit_rating(judge_id, submission.id, [
                    {'criterion_id': c.id, 'score': s} for c, s in zip(criteria, scores)
                ])

        logger.info("Demo data added. Event id: %s", event.id)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to add demo data")
