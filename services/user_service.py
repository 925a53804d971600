"""User Service - Account lookup and deletion"""
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.user import User
from services.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def list_users() -> List[User]:
    return User.query.order_by(User.created_at.desc(), User.id.desc()).all()


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


def delete_user(user_id: int) -> None:
    """
    Delete a user together with all owned data.

    Problems, learning items, revision items and roadmaps (with their topics
    and subtopics) go through the relationship cascades.

    Raises:
        NotFoundError: If the user does not exist
        RuntimeError: If the delete fails
    """
    user = get_user(user_id)
    email = user.email

    try:
        db.session.delete(user)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to delete user_id={user_id}: {e}", exc_info=True)
        raise RuntimeError(f"Failed to delete account: {e}")

    logger.info(f"Deleted account {email} (user_id={user_id})")

