"""Learning Service - CRUD and filtering for learning items"""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from models import db, utc_today
from models.learning_item import LearningItem
from models.user import User
from services.exceptions import NotFoundError
from services.revision_service import (
    RevisionItemType,
    RevisionTarget,
    schedule_initial_revision,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    'title', 'type', 'category', 'subtopic', 'time_spent', 'progress', 'status',
    'date', 'link', 'resource_link', 'tags', 'notes', 'platform', 'difficulty',
    'is_revision'
}


def create_learning_item(user_id: int, item_data: dict) -> LearningItem:
    """
    Create a learning item for a user.

    Schedules the first revision in the same transaction when
    item_data['is_revision'] is set.

    Raises:
        NotFoundError: If the user does not exist
        ValueError: If a field fails model validation
        RuntimeError: If the database write fails
    """
    if not db.session.get(User, user_id):
        raise NotFoundError(f"User {user_id} not found")

    try:
        learning_item = LearningItem(
            user_id=user_id,
            title=item_data['title'],
            type=item_data['type'],
            category=item_data['category'],
            subtopic=item_data.get('subtopic'),
            time_spent=item_data.get('time_spent') or 0,
            progress=item_data.get('progress') or 0,
            status=item_data.get('status') or 'not-started',
            date=item_data.get('date') or utc_today(),
            link=item_data.get('link'),
            resource_link=item_data.get('resource_link'),
            tags=item_data.get('tags') or '',
            notes=item_data.get('notes'),
            platform=item_data.get('platform'),
            difficulty=item_data.get('difficulty'),
            is_revision=bool(item_data.get('is_revision'))
        )
        db.session.add(learning_item)
        db.session.flush()

        if learning_item.is_revision:
            schedule_initial_revision(
                user_id,
                RevisionTarget(RevisionItemType.LEARNING, learning_item.id),
                original_date=learning_item.date
            )

        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to create learning item for user_id={user_id}: {e}", exc_info=True)
        raise RuntimeError(f"Failed to create learning item: {e}")

    logger.info(f"Created learning item {learning_item.id} '{learning_item.title}' for user_id={user_id}")
    return learning_item


def get_user_learning_items(
    user_id: int,
    type: Optional[str] = None,
    category: Optional[str] = None,
    status: Optional[str] = None,
    difficulty: Optional[str] = None
) -> List[LearningItem]:
    """Get a user's learning items, newest first. category is a substring match."""
    query = LearningItem.query.filter_by(user_id=user_id)

    if type:
        query = query.filter(LearningItem.type == type)
    if category:
        query = query.filter(LearningItem.category.ilike(f'%{category}%'))
    if status:
        query = query.filter(LearningItem.status == status)
    if difficulty:
        query = query.filter(LearningItem.difficulty == difficulty)

    return query.order_by(LearningItem.date.desc(), LearningItem.id.desc()).all()


def get_learning_item(item_id: int) -> LearningItem:
    learning_item = db.session.get(LearningItem, item_id)
    if not learning_item:
        raise NotFoundError(f"Learning item {item_id} not found")
    return learning_item


def update_learning_item(item_id: int, update_data: dict) -> LearningItem:
    learning_item = get_learning_item(item_id)

    try:
        for field, value in update_data.items():
            if field in UPDATABLE_FIELDS:
                setattr(learning_item, field, value)
        db.session.commit()
    except ValueError:
        # Model validators reject the value before anything is flushed
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to update learning item {item_id}: {e}", exc_info=True)
        raise RuntimeError(f"Failed to update learning item: {e}")

    logger.info(f"Updated learning item {item_id}: {sorted(update_data.keys())}")
    return learning_item


def delete_learning_item(item_id: int) -> None:
    learning_item = get_learning_item(item_id)

    try:
        db.session.delete(learning_item)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to delete learning item {item_id}: {e}", exc_info=True)
        raise RuntimeError(f"Failed to delete learning item: {e}")

    logger.info(f"Deleted learning item {item_id}")
