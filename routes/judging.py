# routes/judging.py
# Judge-facing endpoints

from flask import Blueprint, request

from errors import ValidationError
from extensions import db
from logic import (
    can_view_judging, get_criteria, get_event, is_judging_closed, judge_evaluated_count,
    judge_ratings_for_event, require, submit_rating,
)
from models import Event, JudgeAssignment, Submission
from routes import current_user_id, login_required, ok

judging_bp = Blueprint('judging', __name__, url_prefix='/api/judge')


@judging_bp.route('/submissions/<int:submission_id>/rate', methods=['POST'])
@login_required
def rate_submission(submission_id):
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')

    ratings = submit_rating(current_user_id(), submission_id, body.get('ratings'))
    return ok([r.to_dict() for r in ratings], message='Rating submitted successfully')


@judging_bp.route('/events/<int:event_id>/submissions')
@login_required
def event_submissions(event_id):
    judge_id = current_user_id()
    event = get_event(event_id)
    require(can_view_judging(judge_id, event), 'Not authorized to judge this event')

    criteria = get_criteria(event.id)
    submissions = Submission.query.filter_by(event_id=event.id, status='submitted').order_by(
        Submission.submitted_at, Submission.id
    ).all()
    my_ratings = judge_ratings_for_event(judge_id, event.id)

    items = []
    for submission in submissions:
        scores = {
            str(c.id): my_ratings[(submission.id, c.id)].score
            for c in criteria
            if (submission.id, c.id) in my_ratings
        }
        data = submission.to_dict()
        data['my_scores'] = scores
        data['fully_rated'] = len(scores) == len(criteria)
        items.append(data)

    return ok({
        'event': event.to_dict(),
        'judging_closed': is_judging_closed(event),
        'criteria': [c.to_dict() for c in criteria],
        'submissions': items,
        'stats': {
            'total': len(items),
            'rated': sum(1 for item in items if item['my_scores']),
        },
    })


@judging_bp.route('/stats')
@login_required
def judge_stats():
    judge_id = current_user_id()
    assignments = JudgeAssignment.query.filter_by(judge_id=judge_id).order_by(JudgeAssignment.event_id).all()

    events = []
    for assignment in assignments:
        event = db.session.get(Event, assignment.event_id)
        events.append({
            'event_id': event.id,
            'event_name': event.name,
            'assignment_status': assignment.status,
            'submissions_evaluated': judge_evaluated_count(judge_id, event.id),
        })

    return ok({
        'submissions_evaluated': judge_evaluated_count(judge_id),
        'events': events,
    })
