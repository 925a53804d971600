from flask import Blueprint, redirect, url_for, session, jsonify, current_app
from flask_dance.contrib.google import make_google_blueprint, google
from flask_dance.contrib.github import make_github_blueprint, github
from flask_login import login_user, logout_user, current_user
from google.oauth2 import id_token
from google.auth.transport import requests
from pydantic import ValidationError
from routes.responses import validation_error_response, get_json_body
from schemas import RegisterRequest, LoginRequest, GoogleCredentialRequest
from services.exceptions import ConflictError
import os
import logging

# Set up logging
logger = logging.getLogger(__name__)

# Create auth blueprint
bp = Blueprint('auth', __name__, url_prefix='/auth')

# Validate OAuth credentials exist
_google_client_id = os.getenv('GOOGLE_CLIENT_ID')
_google_client_secret = os.getenv('GOOGLE_CLIENT_SECRET')
_github_client_id = os.getenv('GITHUB_CLIENT_ID')
_github_client_secret = os.getenv('GITHUB_CLIENT_SECRET')

if not _google_client_id or not _google_client_secret:
    logger.warning(
        'Google OAuth credentials not configured. '
        'Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET environment variables.'
    )

if not _github_client_id or not _github_client_secret:
    logger.warning(
        'GitHub OAuth credentials not configured. '
        'Set GITHUB_CLIENT_ID and GITHUB_CLIENT_SECRET environment variables.'
    )

# Create Google OAuth blueprint
google_bp = make_google_blueprint(
    client_id=_google_client_id,
    client_secret=_google_client_secret,
    scope=['openid', 'https://www.googleapis.com/auth/userinfo.email', 'https://www.googleapis.com/auth/userinfo.profile'],
    redirect_url='/auth/google/callback'
)

# Create GitHub OAuth blueprint
github_bp = make_github_blueprint(
    client_id=_github_client_id,
    client_secret=_github_client_secret,
    scope='user:email',
    redirect_url='/auth/github/callback'
)


def _frontend_redirect(status, message=None):
    """Send the browser back to the frontend with the login outcome in the query string"""
    frontend_url = current_app.config.get('FRONTEND_URL', 'http://localhost:5173')
    target = f'{frontend_url}/auth/callback?status={status}'
    if message:
        target += f'&message={message}'
    return redirect(target)


# Local accounts

@bp.route('/register', methods=['POST'])
def register():
    """
    Create a local account and log it in.

    Request Body:
        {
            "name": str,
            "email": str,
            "password": str (6-100 characters)
        }
    """
    from auth.utils import register_user

    try:
        body = RegisterRequest.model_validate(get_json_body())
        user = register_user(body.name, body.email, body.password)

        login_user(user, remember=True)
        logger.info(f'User {user.email} registered and logged in')

        return jsonify({
            'success': True,
            'message': 'User registered successfully',
            'user': user.to_dict()
        }), 201

    except ValidationError as e:
        return validation_error_response(e)
    except ConflictError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 409
    except ValueError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400
    except Exception as e:
        logger.exception(f'Exception during registration: {str(e)}')
        return jsonify({
            'success': False,
            'error': 'An unexpected error occurred'
        }), 500


@bp.route('/login', methods=['POST'])
def login():
    """
    Log in with email and password.

    Request Body:
        {
            "email": str,
            "password": str
        }
    """
    from auth.utils import authenticate_user, AuthenticationError

    try:
        body = LoginRequest.model_validate(get_json_body())
        user = authenticate_user(body.email, body.password)

        login_user(user, remember=True)
        logger.info(f'User {user.email} logged in successfully')

        return jsonify({
            'success': True,
            'message': 'Login successful',
            'user': user.to_dict()
        }), 200

    except ValidationError as e:
        return validation_error_response(e)
    except AuthenticationError as e:
        logger.warning(f'Failed login attempt: {str(e)}')
        return jsonify({
            'success': False,
            'error': str(e)
        }), 401
    except Exception as e:
        logger.exception(f'Exception during login: {str(e)}')
        return jsonify({
            'success': False,
            'error': 'An unexpected error occurred'
        }), 500


# Google

@bp.route('/google', methods=['POST'])
def google_signin():
    """
    Handle Google Identity Services (GIS) sign-in.
    Receives a credential token from the frontend and verifies it.
    """
    try:
        body = GoogleCredentialRequest.model_validate(get_json_body())

        # Verify the credential token with Google
        try:
            idinfo = id_token.verify_oauth2_token(
                body.credential,
                requests.Request(),
                _google_client_id
            )
        except ValueError as e:
            # Invalid token
            logger.error(f'Invalid Google token: {str(e)}')
            return jsonify({
                'success': False,
                'error': 'Invalid credential token'
            }), 401

        # Extract user information
        google_id = idinfo.get('sub')
        email = idinfo.get('email')
        name = idinfo.get('name', '')
        picture = idinfo.get('picture')

        if not google_id or not email:
            logger.error('Incomplete user info from Google token')
            return jsonify({
                'success': False,
                'error': 'Incomplete user information'
            }), 400

        # Import here to avoid circular imports
        from auth.utils import get_or_create_oauth_user

        user = get_or_create_oauth_user('google', google_id, email, name, picture)

        if not user:
            logger.error(f'Failed to create/retrieve user for google_id: {google_id}')
            return jsonify({
                'success': False,
                'error': 'Failed to create user account'
            }), 500

        # Log in the user with Flask-Login
        login_user(user, remember=True)
        logger.info(f'User {email} logged in successfully via GIS')

        return jsonify({
            'success': True,
            'user': user.to_dict()
        }), 200

    except ValidationError:
        return jsonify({
            'success': False,
            'error': 'No credential provided'
        }), 400
    except Exception as e:
        logger.exception(f'Exception during Google sign-in: {str(e)}')
        return jsonify({
            'success': False,
            'error': 'An unexpected error occurred'
        }), 500


@bp.route('/google/redirect')
def google_login():
    """Redirect to Google OAuth login (redirect-based flow)"""
    if not google.authorized:
        # 307 Temporary Redirect - maintains POST method if used
        return redirect(url_for('google.login'), code=307)
    # Already authorized, go to callback
    return redirect(url_for('auth.google_callback'), code=302)


@bp.route('/google/callback')
def google_callback():
    """Handle Google OAuth callback"""
    if not google.authorized:
        logger.warning(
            'OAuth callback received but user not authorized. '
            'Possible causes: user denied access, session expired, or state mismatch.'
        )
        return _frontend_redirect('error', 'google_denied')

    try:
        resp = google.get('/oauth2/v2/userinfo')

        if not resp.ok:
            logger.error(
                f'Failed to fetch user info from Google. '
                f'Status: {resp.status_code}, Response: {resp.text[:200] if resp.text else "empty"}'
            )
            return _frontend_redirect('error', 'google_userinfo')

        google_info = resp.json()
        google_id = google_info.get('id')
        email = google_info.get('email')

        if not google_id or not email:
            logger.error(
                f'Incomplete user info received from Google. '
                f'google_id: {google_id is not None}, email: {email is not None}'
            )
            return _frontend_redirect('error', 'google_incomplete')

        from auth.utils import get_or_create_oauth_user

        user = get_or_create_oauth_user(
            'google', google_id, email, google_info.get('name', ''), google_info.get('picture')
        )

        if not user:
            logger.error(f'Failed to create/retrieve user for google_id: {google_id}, email: {email}')
            return _frontend_redirect('error', 'account')

        login_user(user, remember=True)
        logger.info(f'User {email} logged in successfully via Google redirect')

        return _frontend_redirect('success')

    except Exception as e:
        logger.exception(f'Exception during Google OAuth callback: {str(e)}')
        return _frontend_redirect('error', 'unexpected')


# GitHub

@bp.route('/github/redirect')
def github_login():
    """Redirect to GitHub OAuth login"""
    if not github.authorized:
        return redirect(url_for('github.login'), code=307)
    return redirect(url_for('auth.github_callback'), code=302)


@bp.route('/github/callback')
def github_callback():
    """
    Handle GitHub OAuth callback.

    GitHub only returns a public email on /user; when it is hidden the primary
    verified address comes from /user/emails.
    """
    if not github.authorized:
        logger.warning('GitHub OAuth callback received but user not authorized.')
        return _frontend_redirect('error', 'github_denied')

    try:
        resp = github.get('/user')

        if not resp.ok:
            logger.error(
                f'Failed to fetch user info from GitHub. '
                f'Status: {resp.status_code}, Response: {resp.text[:200] if resp.text else "empty"}'
            )
            return _frontend_redirect('error', 'github_userinfo')

        github_info = resp.json()
        github_id = github_info.get('id')
        email = github_info.get('email')

        if not email:
            emails_resp = github.get('/user/emails')
            if emails_resp.ok:
                primary = next(
                    (entry for entry in emails_resp.json() if entry.get('primary') and entry.get('verified')),
                    None
                )
                email = primary.get('email') if primary else None

        if not github_id or not email:
            logger.error(
                f'Incomplete user info received from GitHub. '
                f'github_id: {github_id is not None}, email: {email is not None}'
            )
            return _frontend_redirect('error', 'github_incomplete')

        from auth.utils import get_or_create_oauth_user

        user = get_or_create_oauth_user(
            'github',
            github_id,
            email,
            github_info.get('name') or github_info.get('login', ''),
            github_info.get('avatar_url')
        )

        if not user:
            logger.error(f'Failed to create/retrieve user for github_id: {github_id}, email: {email}')
            return _frontend_redirect('error', 'account')

        login_user(user, remember=True)
        logger.info(f'User {email} logged in successfully via GitHub')

        return _frontend_redirect('success')

    except Exception as e:
        logger.exception(f'Exception during GitHub OAuth callback: {str(e)}')
        return _frontend_redirect('error', 'unexpected')


# Session

@bp.route('/me', methods=['GET'])
def get_current_user():
    """
    Get current authenticated user information.
    Used by frontend to check auth status and get user data.
    """
    if current_user.is_authenticated:
        return jsonify({
            'success': True,
            'authenticated': True,
            'user': current_user.to_dict()
        }), 200
    else:
        return jsonify({
            'success': True,
            'authenticated': False,
            'user': None
        }), 200


@bp.route('/logout', methods=['POST'])
def logout():
    """Log out the current user (API endpoint for frontend)"""
    user_email = current_user.email if current_user.is_authenticated else 'anonymous'

    logout_user()

    # Clear OAuth tokens
    for token_key in ('google_oauth_token', 'github_oauth_token'):
        if token_key in session:
            del session[token_key]

    logger.info(f'User {user_email} logged out successfully')

    return jsonify({
        'success': True,
        'message': 'Successfully logged out'
    }), 200
