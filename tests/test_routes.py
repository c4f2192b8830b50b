"""Tests for the JSON endpoints."""

import pytest

from extensions import db
from models import Rating, WinnerProposal


@pytest.fixture
def world(factory):
    organizer = factory.user('Olivia')
    event = factory.event(organizer=organizer)
    judge = factory.judge(event, name='Jamie')
    submissions = [factory.submission(event, minutes=m) for m in range(2)]
    criteria = factory.criteria(event)
    return organizer, event, judge, submissions, criteria


class TestCriteriaEndpoint:
    def test_seeds_on_first_read(self, client, factory):
        event = factory.event()
        response = client.get(f'/api/events/{event.id}/criteria')
        assert response.status_code == 200
        body = response.get_json()
        assert body['success'] is True
        assert [(c['name'], c['weight']) for c in body['data']] == [
            ('Innovation', 5), ('Technical', 4), ('Impact', 3), ('Design', 2), ('Presentation', 1),
        ]

    def test_unknown_event(self, client, app):
        response = client.get('/api/events/99/criteria')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'not_found'


class TestRateEndpoint:
    def test_requires_login(self, client, world):
        organizer, event, judge, (s1, s2), c = world
        response = client.post(f'/api/judge/submissions/{s1.id}/rate', json={'ratings': []})
        assert response.status_code == 401
        assert response.get_json()['error'] == 'unauthenticated'

    def test_saves_ratings(self, login, world):
        organizer, event, judge, (s1, s2), c = world
        response = login(judge).post(f'/api/judge/submissions/{s1.id}/rate', json={'ratings': [
            {'criterion_id': c['innovation'].id, 'score': 8, 'notes': 'Nice'},
        ]})
        assert response.status_code == 200
        body = response.get_json()
        assert body['message'] == 'Rating submitted successfully'
        assert body['data'][0]['score'] == 8.0
        assert Rating.query.count() == 1

    def test_unassigned_judge(self, login, factory, world):
        organizer, event, judge, (s1, s2), c = world
        response = login(factory.user('Nobody')).post(
            f'/api/judge/submissions/{s1.id}/rate',
            json={'ratings': [{'criterion_id': c['innovation'].id, 'score': 8}]},
        )
        assert response.status_code == 403
        assert response.get_json()['error'] == 'unauthorized'
        assert Rating.query.count() == 0

    def test_out_of_bounds(self, login, world):
        organizer, event, judge, (s1, s2), c = world
        response = login(judge).post(f'/api/judge/submissions/{s1.id}/rate', json={'ratings': [
            {'criterion_id': c['innovation'].id, 'score': 12},
        ]})
        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == 'validation_error'
        assert 'between 0 and 10' in body['message']

    def test_non_json_body(self, login, world):
        organizer, event, judge, (s1, s2), c = world
        response = login(judge).post(f'/api/judge/submissions/{s1.id}/rate', data='nope')
        assert response.status_code == 400


class TestJudgeViews:
    def test_work_list(self, login, rate, world):
        organizer, event, judge, (s1, s2), c = world
        rate(judge, s1, {c['innovation']: 7})

        response = login(judge).get(f'/api/judge/events/{event.id}/submissions')
        assert response.status_code == 200
        data = response.get_json()['data']
        assert [s['id'] for s in data['submissions']] == [s1.id, s2.id]
        assert data['submissions'][0]['my_scores'] == {str(c['innovation'].id): 7.0}
        assert data['submissions'][0]['fully_rated'] is False
        assert data['stats'] == {'total': 2, 'rated': 1}

    def test_work_list_forbidden_for_outsiders(self, login, factory, world):
        organizer, event, judge, submissions, c = world
        response = login(factory.user()).get(f'/api/judge/events/{event.id}/submissions')
        assert response.status_code == 403

    def test_stats_count_distinct_submissions(self, login, rate, world):
        organizer, event, judge, (s1, s2), c = world
        rate(judge, s1, {c['innovation']: 7})
        rate(judge, s1, {c['innovation']: 8})
        rate(judge, s1, {c['design']: 8})

        data = login(judge).get('/api/judge/stats').get_json()['data']
        assert data['submissions_evaluated'] == 1
        assert data['events'] == [{
            'event_id': event.id,
            'event_name': event.name,
            'assignment_status': 'active',
            'submissions_evaluated': 1,
        }]


class TestOrganizerEndpoints:
    def test_ranking(self, login, rate, world):
        organizer, event, judge, (s1, s2), c = world
        rate(judge, s1, {c['innovation']: 6, c['technical']: 8})
        rate(judge, s2, {c['innovation']: 8, c['technical']: 6})

        response = login(organizer).get(f'/api/organizer/events/{event.id}/ranking')
        assert response.status_code == 200
        data = response.get_json()['data']
        assert [(e['id'], e['position'], e['overall'], e['tie_group']) for e in data] == [
            (s2.id, 1, 7.0, 7.0),
            (s1.id, 2, 7.0, 7.0),
        ]
        assert data[0]['per_criterion'] == {str(c['innovation'].id): 8.0, str(c['technical'].id): 6.0}
        assert data[0]['tie_resolved_by'] == 'criterion:Innovation'

    def test_ranking_is_organizer_only(self, login, world):
        organizer, event, judge, submissions, c = world
        response = login(judge).get(f'/api/organizer/events/{event.id}/ranking')
        assert response.status_code == 403

    def test_ties(self, login, rate, world):
        organizer, event, judge, (s1, s2), c = world
        rate(judge, s1, {c['impact']: 5})
        rate(judge, s2, {c['impact']: 5})
        data = login(organizer).get(f'/api/organizer/events/{event.id}/ties').get_json()['data']
        assert data == [{'score': 5.0, 'submission_ids': [s1.id, s2.id]}]

    def test_submission_ratings_audit(self, login, rate, world):
        organizer, event, judge, (s1, s2), c = world
        rate(judge, s1, {c['impact']: 5})
        data = login(organizer).get(f'/api/organizer/submissions/{s1.id}/ratings').get_json()['data']
        assert data['score']['overall'] == 5.0
        assert [(r['judge_name'], r['criterion_name'], r['score']) for r in data['ratings']] == [
            ('Jamie', 'Impact', 5.0),
        ]

    def test_judging_progress(self, login, rate, world):
        organizer, event, judge, (s1, s2), c = world
        rate(judge, s1, {c['impact']: 5, c['design']: 4})
        data = login(organizer).get(f'/api/organizer/events/{event.id}/judging-progress').get_json()['data']
        assert data == {
            'total_submissions': 2,
            'total_judges': 1,
            'rated_submissions': 1,
            'total_ratings': 1,
            'completion_percentage': 50,
            'judging_closed': False,
        }

    def test_judging_control(self, login, world):
        organizer, event, judge, submissions, c = world
        client = login(organizer)
        response = client.post(f'/api/organizer/events/{event.id}/judging-control', json={
            'judging_control': 'auto', 'judging_ends_at': '2020-01-01T00:00:00Z',
        })
        assert response.status_code == 200
        assert response.get_json()['data']['judging_ends_at'] == '2020-01-01T00:00:00+00:00'

        response = client.post(f'/api/organizer/events/{event.id}/judging-control', json={
            'judging_control': 'paused',
        })
        assert response.status_code == 400


class TestWinnerEndpoints:
    def test_full_workflow(self, client, login, world):
        organizer, event, judge, (s1, s2), c = world
        login(organizer)

        response = client.post(f'/api/organizer/events/{event.id}/propose-winners', json={'winners': [
            {'submission_id': s1.id, 'prize_position': 1},
        ]})
        assert response.status_code == 409
        assert response.get_json()['error'] == 'invalid_state'

        client.post(f'/api/organizer/events/{event.id}/judging-control', json={'judging_control': 'closed'})
        response = client.post(f'/api/organizer/events/{event.id}/propose-winners', json={'winners': [
            {'submission_id': s1.id, 'prize_position': 1},
            {'submission_id': s2.id, 'prize_position': 2},
        ]})
        assert response.status_code == 200
        first, second = response.get_json()['data']

        response = client.post(f'/api/organizer/winners/{first["id"]}/approve')
        assert response.get_json()['data']['status'] == 'approved'

        response = client.post(f'/api/organizer/winners/{first["id"]}/approve')
        assert response.status_code == 409

        response = client.delete(f'/api/organizer/winners/{second["id"]}')
        assert response.status_code == 200

        response = client.post(f'/api/organizer/events/{event.id}/announce-winners')
        assert [w['status'] for w in response.get_json()['data']] == ['announced']

        public = client.get(f'/api/events/{event.id}/winners').get_json()['data']
        assert [(w['prize_position'], w['submission']['id']) for w in public] == [(1, s1.id)]

        everything = client.get(f'/api/organizer/events/{event.id}/winners').get_json()['data']
        assert [w['id'] for w in everything] == [first['id']]

    def test_batch_failure_lists_items(self, login, factory, world):
        organizer, event, judge, (s1, s2), c = world
        factory.close_judging(event)
        response = login(organizer).post(f'/api/organizer/events/{event.id}/propose-winners', json={'winners': [
            {'submission_id': s1.id, 'prize_position': 1},
            {'submission_id': s2.id, 'prize_position': 1},
        ]})
        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == 'validation_error'
        assert [i['index'] for i in body['items']] == [0, 1]
        assert WinnerProposal.query.count() == 0

    def test_unknown_route_is_json(self, client, app):
        response = client.get('/api/nowhere')
        assert response.status_code == 404
        assert response.get_json()['success'] is False

    def test_approve_requires_ownership(self, login, factory, world):
        organizer, event, judge, (s1, s2), c = world
        factory.close_judging(event)
        winner = WinnerProposal(event_id=event.id, submission_id=s1.id, prize_position=1, proposed_by=organizer.id)
        db.session.add(winner)
        db.session.commit()

        response = login(judge).post(f'/api/organizer/winners/{winner.id}/approve')
        assert response.status_code == 403
        assert db.session.get(WinnerProposal, winner.id).status == 'pending'
