"""
Test API Routes

Exercises the JSON endpoints end to end with an authenticated test client:
- Problems and learning items CRUD
- Revision listing and completion
- Roadmap/topic/subtopic progress
- Analytics report
- Ownership (403), authentication (401) and validation (400) errors
"""

import pytest
from datetime import date, timedelta
from app import create_app
from models import db, utc_today
from models.user import User
from models.revision_item import RevisionItem


@pytest.fixture
def app():
    """Create application for testing"""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def test_user(app):
    user = User(name='Margaret', email='margaret@example.com')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def other_user(app):
    user = User(name='Someone Else', email='else@example.com')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def authenticated_client(client, test_user):
    """Create an authenticated test client"""
    with client.session_transaction() as sess:
        sess['_user_id'] = str(test_user.id)
        sess['_fresh'] = True
    return client


PROBLEM = {
    'title': 'Two Sum',
    'platform': 'LeetCode',
    'difficulty': 'easy',
    'topic': 'Arrays',
    'time_spent': 15,
    'outcome': 'solved',
}


class TestBasics:
    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'

    def test_requires_login(self, client, test_user):
        response = client.get(f'/api/users/{test_user.id}/problems')

        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_blueprint_test_endpoint(self, client):
        assert client.get('/api/analytics/test').status_code == 200

    def test_cors_allows_configured_origin(self, app, client):
        origin = app.config['CORS_ORIGINS'][0]

        response = client.get('/api/analytics/test', headers={'Origin': origin})

        assert response.headers['Access-Control-Allow-Origin'] == origin


class TestProblemRoutes:
    def test_create_and_list(self, authenticated_client, test_user):
        response = authenticated_client.post(f'/api/users/{test_user.id}/problems', json=PROBLEM)

        assert response.status_code == 201
        body = response.get_json()
        assert body['success'] is True
        assert body['data']['title'] == 'Two Sum'

        response = authenticated_client.get(f'/api/users/{test_user.id}/problems?difficulty=easy')
        assert [p['title'] for p in response.get_json()['data']] == ['Two Sum']

    def test_validation_error(self, authenticated_client, test_user):
        response = authenticated_client.post(
            f'/api/users/{test_user.id}/problems',
            json={**PROBLEM, 'platform': 'Kaggle', 'time_spent': -1}
        )

        assert response.status_code == 400
        fields = {detail['field'] for detail in response.get_json()['details']}
        assert {'platform', 'time_spent'} <= fields

    def test_update_get_delete(self, authenticated_client, test_user):
        created = authenticated_client.post(f'/api/users/{test_user.id}/problems', json=PROBLEM)
        problem_id = created.get_json()['data']['id']

        response = authenticated_client.put(f'/api/problems/{problem_id}', json={'outcome': 'hints'})
        assert response.status_code == 200
        assert response.get_json()['data']['outcome'] == 'hints'

        assert authenticated_client.get(f'/api/problems/{problem_id}').status_code == 200
        assert authenticated_client.delete(f'/api/problems/{problem_id}').status_code == 200
        assert authenticated_client.get(f'/api/problems/{problem_id}').status_code == 404

    def test_null_for_required_field_is_rejected(self, authenticated_client, test_user):
        created = authenticated_client.post(f'/api/users/{test_user.id}/problems', json=PROBLEM)
        problem_id = created.get_json()['data']['id']

        response = authenticated_client.put(f'/api/problems/{problem_id}', json={'title': None})

        assert response.status_code == 400
        assert response.get_json()['details'][0]['field'] == 'title'
        assert authenticated_client.get(f'/api/problems/{problem_id}').get_json()['data']['title'] == 'Two Sum'

    def test_null_for_optional_field_clears_it(self, authenticated_client, test_user):
        created = authenticated_client.post(
            f'/api/users/{test_user.id}/problems', json={**PROBLEM, 'link': 'https://leetcode.com/problems/two-sum'}
        )
        problem_id = created.get_json()['data']['id']

        response = authenticated_client.put(f'/api/problems/{problem_id}', json={'link': None})

        assert response.status_code == 200
        assert response.get_json()['data']['link'] is None

    def test_other_users_problems_are_forbidden(self, authenticated_client, other_user):
        response = authenticated_client.get(f'/api/users/{other_user.id}/problems')
        assert response.status_code == 403

        response = authenticated_client.post(f'/api/users/{other_user.id}/problems', json=PROBLEM)
        assert response.status_code == 403

    def test_stats(self, authenticated_client, test_user):
        authenticated_client.post(f'/api/users/{test_user.id}/problems', json=PROBLEM)

        response = authenticated_client.get(f'/api/users/{test_user.id}/stats')

        assert response.status_code == 200
        assert response.get_json()['data']['solve_rate'] == 100.0


class TestLearningRoutes:
    def test_create_update(self, authenticated_client, test_user):
        response = authenticated_client.post(f'/api/users/{test_user.id}/learning-items', json={
            'title': 'Designing Data-Intensive Applications',
            'type': 'book',
            'category': 'Databases',
        })
        assert response.status_code == 201
        item_id = response.get_json()['data']['id']

        response = authenticated_client.put(f'/api/learning-items/{item_id}', json={'progress': 150})
        assert response.status_code == 400

        response = authenticated_client.put(f'/api/learning-items/{item_id}', json={'progress': 40})
        assert response.get_json()['data']['progress'] == 40

        listed = authenticated_client.get(f'/api/users/{test_user.id}/learning-items?category=data')
        assert len(listed.get_json()['data']) == 1

        response = authenticated_client.put(f'/api/learning-items/{item_id}', json={'status': None})
        assert response.status_code == 400


class TestRevisionRoutes:
    def test_marked_problem_can_be_revised(self, authenticated_client, test_user):
        authenticated_client.post(
            f'/api/users/{test_user.id}/problems', json={**PROBLEM, 'is_revision': True}
        )

        listed = authenticated_client.get(f'/api/users/{test_user.id}/revision-items?is_completed=false')
        items = listed.get_json()['data']
        assert len(items) == 1
        assert items[0]['problem']['title'] == 'Two Sum'

        response = authenticated_client.put(f'/api/revision-items/{items[0]["id"]}/complete')
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['completed']['is_completed'] is True
        assert data['next']['revision_cycle'] == 2
        assert data['next']['next_revision_date'] == (utc_today() + timedelta(days=3)).isoformat()

        again = authenticated_client.put(f'/api/revision-items/{items[0]["id"]}/complete')
        assert again.status_code == 400

    def test_manual_creation(self, authenticated_client, test_user):
        response = authenticated_client.post(f'/api/users/{test_user.id}/revision-items', json={
            'item_id': 5,
            'item_type': 'learning',
            'original_date': '2024-01-01',
            'next_revision_date': '2024-01-02',
        })

        assert response.status_code == 201
        assert response.get_json()['data']['item_type'] == 'learning'

    def test_bad_due_date(self, authenticated_client, test_user):
        response = authenticated_client.get(f'/api/users/{test_user.id}/revision-items?due_date=soon')
        assert response.status_code == 400

    def test_unknown_revision(self, authenticated_client):
        assert authenticated_client.put('/api/revision-items/999/complete').status_code == 404

    def test_other_users_revision_is_forbidden(self, authenticated_client, other_user):
        revision = RevisionItem(
            user_id=other_user.id, item_id=1, item_type='problem',
            original_date=date(2024, 1, 1), next_revision_date=date(2024, 1, 2)
        )
        db.session.add(revision)
        db.session.commit()

        response = authenticated_client.put(f'/api/revision-items/{revision.id}/complete')
        assert response.status_code == 403


class TestRoadmapRoutes:
    def test_subtopic_progress(self, authenticated_client, test_user):
        roadmap = authenticated_client.post(
            f'/api/users/{test_user.id}/roadmaps', json={'title': 'Algorithms'}
        ).get_json()['data']
        topic = authenticated_client.post(
            f'/api/roadmaps/{roadmap["id"]}/topics', json={'title': 'Graphs'}
        ).get_json()['data']

        subtopic_ids = []
        for index, title in enumerate(['BFS', 'DFS', 'Dijkstra']):
            response = authenticated_client.post(
                f'/api/topics/{topic["id"]}/subtopics', json={'title': title, 'order': index}
            )
            assert response.status_code == 201
            subtopic_ids.append(response.get_json()['data']['subtopic']['id'])

        response = authenticated_client.put(f'/api/subtopics/{subtopic_ids[0]}/complete')
        counters = response.get_json()['data']['topic']
        assert (counters['completed_subtopics'], counters['total_subtopics']) == (1, 3)

        response = authenticated_client.put(f'/api/subtopics/{subtopic_ids[0]}/uncomplete')
        assert response.get_json()['data']['topic']['completed_subtopics'] == 0

        response = authenticated_client.delete(f'/api/subtopics/{subtopic_ids[2]}')
        assert response.get_json()['data']['topic']['total_subtopics'] == 2

        fetched = authenticated_client.get(f'/api/roadmaps/{roadmap["id"]}').get_json()['data']
        assert [s['title'] for s in fetched['topics'][0]['subtopics']] == ['BFS', 'DFS']
        assert fetched['last_visited'] is not None

    def test_invalid_color(self, authenticated_client, test_user):
        response = authenticated_client.post(
            f'/api/users/{test_user.id}/roadmaps', json={'title': 'Algorithms', 'color': 'red'}
        )
        assert response.status_code == 400

    def test_unknown_topic(self, authenticated_client):
        assert authenticated_client.put('/api/topics/999/complete').status_code == 404


class TestAnalyticsRoute:
    def test_report(self, authenticated_client, test_user):
        authenticated_client.post(f'/api/users/{test_user.id}/problems', json=PROBLEM)

        response = authenticated_client.get('/api/analytics?timeframe=week')

        assert response.status_code == 200
        report = response.get_json()['data']
        assert report['overview']['total_problems'] == 1
        assert report['overview']['current_streak'] == 1
        assert 'ai_insights' in report

    def test_invalid_range(self, authenticated_client):
        response = authenticated_client.get('/api/analytics?start_date=2024-02-01&end_date=2024-01-01')
        assert response.status_code == 400

    def test_placeholders_disabled(self, app, authenticated_client):
        app.config['ANALYTICS_INCLUDE_PLACEHOLDERS'] = False

        report = authenticated_client.get('/api/analytics').get_json()['data']

        assert 'ai_insights' not in report


class TestUserRoutes:
    def test_get_and_list(self, authenticated_client, test_user, other_user):
        assert authenticated_client.get(f'/api/users/{test_user.id}').get_json()['data']['name'] == 'Margaret'
        assert len(authenticated_client.get('/api/users').get_json()['data']) == 2
        assert authenticated_client.get('/api/users/999').status_code == 404

    def test_delete_account(self, authenticated_client, test_user):
        user_id = test_user.id

        response = authenticated_client.delete('/api/users/me')

        assert response.status_code == 200
        assert db.session.get(User, user_id) is None
        assert authenticated_client.get('/auth/me').get_json()['authenticated'] is False
