from models import db
from models.user import User
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from services.exceptions import ConflictError, InvalidInputError
import logging

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when login credentials are rejected"""
    pass


def register_user(name, email, password):
    """
    Create a local account with a hashed password.

    Args:
        name: Display name
        email: Login email (stored lowercased)
        password: Plain-text password

    Returns:
        The new User

    Raises:
        ConflictError: If the email is already registered
        ValueError: If the email fails validation
        RuntimeError: If the database write fails
    """
    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        logger.warning(f'Registration rejected, email already in use: {email}')
        raise ConflictError(f'User with email {email} already exists')

    try:
        user = User(
            name=name.strip(),
            email=email,
            auth_provider='local',
            last_login_at=datetime.utcnow()
        )
        user.set_password(password)

        db.session.add(user)
        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f'Failed to register user {email}: {str(e)}')
        raise RuntimeError(f'Failed to register user: {e}')

    logger.info(f'Registered new local user: {email}')
    return user


def authenticate_user(email, password):
    """
    Check local credentials and stamp the login time.

    Raises:
        AuthenticationError: If the email is unknown, the password is wrong,
            or the account only has a social login
    """
    user = User.query.filter_by(email=email.strip().lower()).first()

    if not user:
        raise AuthenticationError('Invalid email or password')

    if not user.password_hash:
        raise AuthenticationError(
            f'This account uses {user.auth_provider} sign-in. Please log in with {user.auth_provider}.'
        )

    if not user.check_password(password):
        raise AuthenticationError('Invalid email or password')

    user.last_login_at = datetime.utcnow()
    db.session.commit()
    return user


def get_or_create_oauth_user(provider, provider_id, email, name, picture=None):
    """
    Get or create a user from an OAuth provider response.

    An existing account with the same email is linked to the provider
    instead of creating a duplicate.

    Args:
        provider: 'google' or 'github'
        provider_id: The provider's stable user identifier
        email: User's email from the provider
        name: User's name from the provider
        picture: Avatar URL

    Returns:
        User object or None if database operation fails
    """
    email = (email or '').strip().lower()
    if not provider_id or not email:
        raise InvalidInputError('Incomplete user information from provider')

    provider_id = str(provider_id)

    try:
        user = User.query.filter_by(auth_provider=provider, provider_id=provider_id).first()

        if not user:
            user = User.query.filter_by(email=email).first()
            if user:
                # Link provider to the existing account
                logger.info(f'Linking {provider} account to existing user {email}')
                user.auth_provider = provider
                user.provider_id = provider_id

        if user:
            user.last_login_at = datetime.utcnow()
            if picture and not user.profile_picture:
                user.profile_picture = picture
            user.is_email_verified = True
            db.session.commit()
            return user

        user = User(
            name=name or email.split('@')[0],
            email=email,
            auth_provider=provider,
            provider_id=provider_id,
            profile_picture=picture,
            is_email_verified=True,
            last_login_at=datetime.utcnow()
        )

        db.session.add(user)
        db.session.commit()

        logger.info(f'Created new {provider} user: {email}')
        return user

    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f'Failed to create/update {provider} user {email}: {str(e)}')
        return None
