"""
Integration tests for authentication.

Tests the authentication flows including:
- Local registration and login
- Google Identity Services sign-in (token verification mocked)
- Google and GitHub redirect callbacks (provider sessions mocked)
- Linking a social login to an existing account
- Logout and /auth/me
"""

import pytest
from unittest.mock import Mock, MagicMock, patch
from app import create_app
from models import db
from models.user import User


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


def register(client, email='alan@example.com', password='enigma42'):
    return client.post('/auth/register', json={
        'name': 'Alan',
        'email': email,
        'password': password,
    })


def provider_session(payload, authorized=True, extra_responses=None):
    """Stand-in for the flask-dance google/github session proxies"""
    responses = {'default': payload}
    responses.update(extra_responses or {})

    def get(path):
        body = responses.get(path, responses['default'])
        return Mock(ok=True, status_code=200, text='', json=Mock(return_value=body))

    session = MagicMock()
    session.authorized = authorized
    session.get.side_effect = get
    return session


class TestLocalAuth:
    def test_register_logs_in(self, client):
        response = register(client)

        assert response.status_code == 201
        body = response.get_json()
        assert body['user']['email'] == 'alan@example.com'
        assert body['user']['auth_provider'] == 'local'

        me = client.get('/auth/me').get_json()
        assert me['authenticated'] is True
        assert me['user']['email'] == 'alan@example.com'

    def test_password_is_hashed(self, client):
        register(client)

        user = User.query.filter_by(email='alan@example.com').one()
        assert user.password_hash != 'enigma42'
        assert user.check_password('enigma42')

    def test_duplicate_email(self, client):
        register(client)

        response = register(client, email='ALAN@example.com')

        assert response.status_code == 409

    def test_short_password(self, client):
        response = register(client, password='123')

        assert response.status_code == 400
        assert response.get_json()['details'][0]['field'] == 'password'

    def test_invalid_email(self, client):
        response = register(client, email='alan-at-example')
        assert response.status_code == 400

    def test_login(self, client):
        register(client)
        client.post('/auth/logout')

        response = client.post('/auth/login', json={'email': 'Alan@Example.com', 'password': 'enigma42'})

        assert response.status_code == 200
        assert response.get_json()['user']['last_login_at'] is not None

    def test_wrong_password(self, client):
        register(client)
        client.post('/auth/logout')

        response = client.post('/auth/login', json={'email': 'alan@example.com', 'password': 'wrong-one'})

        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_unknown_email(self, client):
        response = client.post('/auth/login', json={'email': 'nobody@example.com', 'password': 'whatever'})
        assert response.status_code == 401

    def test_social_account_cannot_use_password(self, app, client):
        db.session.add(User(name='Social', email='social@example.com',
                            auth_provider='github', provider_id='77'))
        db.session.commit()

        response = client.post('/auth/login', json={'email': 'social@example.com', 'password': 'whatever'})

        assert response.status_code == 401
        assert 'github' in response.get_json()['error']

    def test_logout(self, client):
        register(client)

        response = client.post('/auth/logout')

        assert response.status_code == 200
        assert client.get('/auth/me').get_json()['authenticated'] is False


class TestGoogleSignIn:
    ID_INFO = {
        'sub': 'google-123',
        'email': 'grace@example.com',
        'name': 'Grace Hopper',
        'picture': 'https://example.com/grace.png',
    }

    def test_missing_credential(self, client):
        response = client.post('/auth/google', json={})
        assert response.status_code == 400

    def test_invalid_token(self, client):
        with patch('auth.oauth.id_token.verify_oauth2_token', side_effect=ValueError('bad token')):
            response = client.post('/auth/google', json={'credential': 'garbage'})

        assert response.status_code == 401

    def test_creates_user(self, client):
        with patch('auth.oauth.id_token.verify_oauth2_token', return_value=self.ID_INFO):
            response = client.post('/auth/google', json={'credential': 'token'})

        assert response.status_code == 200
        user = User.query.filter_by(email='grace@example.com').one()
        assert user.auth_provider == 'google'
        assert user.provider_id == 'google-123'
        assert user.is_email_verified is True
        assert user.password_hash is None

    def test_second_sign_in_reuses_user(self, client):
        with patch('auth.oauth.id_token.verify_oauth2_token', return_value=self.ID_INFO):
            client.post('/auth/google', json={'credential': 'token'})
            client.post('/auth/google', json={'credential': 'token'})

        assert User.query.count() == 1

    def test_links_existing_local_account(self, client):
        register(client, email='grace@example.com')
        client.post('/auth/logout')

        with patch('auth.oauth.id_token.verify_oauth2_token', return_value=self.ID_INFO):
            response = client.post('/auth/google', json={'credential': 'token'})

        assert response.status_code == 200
        assert User.query.count() == 1
        user = User.query.one()
        assert user.auth_provider == 'google'
        assert user.check_password('enigma42')


class TestRedirectCallbacks:
    def test_google_redirect_starts_flow(self, client):
        with patch('auth.oauth.google', new=provider_session({}, authorized=False)):
            response = client.get('/auth/google/redirect')

        assert response.status_code == 307

    def test_google_callback_logs_in(self, app, client):
        google = provider_session({'id': 'g-9', 'email': 'kat@example.com', 'name': 'Katherine'})

        with patch('auth.oauth.google', new=google):
            response = client.get('/auth/google/callback')

        assert response.status_code == 302
        assert response.headers['Location'].startswith(app.config['FRONTEND_URL'])
        assert 'status=success' in response.headers['Location']
        assert User.query.filter_by(provider_id='g-9').one().name == 'Katherine'

    def test_google_callback_not_authorized(self, client):
        with patch('auth.oauth.google', new=provider_session({}, authorized=False)):
            response = client.get('/auth/google/callback')

        assert 'status=error' in response.headers['Location']
        assert User.query.count() == 0

    def test_github_callback_uses_primary_email(self, client):
        github = provider_session(
            {'id': 4242, 'login': 'octocat', 'email': None, 'avatar_url': 'https://example.com/o.png'},
            extra_responses={
                '/user/emails': [
                    {'email': 'old@example.com', 'primary': False, 'verified': True},
                    {'email': 'octo@example.com', 'primary': True, 'verified': True},
                ]
            }
        )

        with patch('auth.oauth.github', new=github):
            response = client.get('/auth/github/callback')

        assert 'status=success' in response.headers['Location']
        user = User.query.filter_by(auth_provider='github').one()
        assert user.email == 'octo@example.com'
        assert user.provider_id == '4242'
        assert user.name == 'octocat'

    def test_callback_email_with_whitespace_links_existing_account(self, client):
        register(client, email='kat@example.com')
        client.post('/auth/logout')
        google = provider_session({'id': 'g-9', 'email': '  Kat@Example.com \n', 'name': 'Katherine'})

        with patch('auth.oauth.google', new=google):
            response = client.get('/auth/google/callback')

        assert 'status=success' in response.headers['Location']
        user = User.query.one()
        assert user.email == 'kat@example.com'
        assert user.provider_id == 'g-9'

    def test_callback_email_with_whitespace_creates_user(self, client):
        google = provider_session({'id': 'g-10', 'email': ' dorothy@example.com ', 'name': 'Dorothy'})

        with patch('auth.oauth.google', new=google):
            response = client.get('/auth/google/callback')

        assert 'status=success' in response.headers['Location']
        assert User.query.filter_by(provider_id='g-10').one().email == 'dorothy@example.com'

    def test_github_callback_without_email(self, client):
        github = provider_session(
            {'id': 4242, 'login': 'octocat', 'email': None},
            extra_responses={'/user/emails': []}
        )

        with patch('auth.oauth.github', new=github):
            response = client.get('/auth/github/callback')

        assert 'status=error' in response.headers['Location']
