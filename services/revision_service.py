"""Revision Service - Spaced repetition scheduling for problems and learning items.

Every tracked item moves through a fixed interval table. A RevisionItem row
represents a single review; completing it marks the row done and chains a new
row for the next cycle, so history is never rewritten.
"""
import logging
from datetime import date, timedelta
from enum import Enum
from typing import List, NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError

from models import db, utc_today
from models.learning_item import LearningItem
from models.problem import Problem
from models.revision_item import RevisionItem
from models.user import User
from services.exceptions import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

# Days until the next review, indexed by revision cycle (1-based)
REVISION_INTERVALS = [1, 3, 7, 15, 30]


class RevisionItemType(Enum):
    """Kinds of items a revision can point at"""
    PROBLEM = "problem"
    LEARNING = "learning"


class RevisionTarget(NamedTuple):
    """Typed reference to the Problem or LearningItem behind a revision"""
    item_type: RevisionItemType
    item_id: int

    @classmethod
    def of(cls, item_type, item_id: int) -> 'RevisionTarget':
        try:
            return cls(RevisionItemType(item_type), item_id)
        except ValueError:
            raise InvalidInputError(f"Invalid item_type: {item_type}")

    @classmethod
    def for_revision(cls, revision_item: RevisionItem) -> 'RevisionTarget':
        return cls.of(revision_item.item_type, revision_item.item_id)


TARGET_MODELS = {
    RevisionItemType.PROBLEM: Problem,
    RevisionItemType.LEARNING: LearningItem,
}

# Key under which the resolved target is attached in API responses
TARGET_RESPONSE_KEYS = {
    RevisionItemType.PROBLEM: 'problem',
    RevisionItemType.LEARNING: 'learning_item',
}


def get_interval(cycle: int) -> int:
    """
    Get the number of days until the next review for a revision cycle.

    Cycles past the end of the table stay at the last interval.

    Args:
        cycle: 1-based revision cycle

    Returns:
        Interval in days

    Raises:
        InvalidInputError: If cycle is lower than 1

    Example:
        >>> get_interval(2)
        3
        >>> get_interval(9)
        30
    """
    if cycle < 1:
        raise InvalidInputError(f"revision cycle must be >= 1, got: {cycle}")
    return REVISION_INTERVALS[min(cycle, len(REVISION_INTERVALS)) - 1]


def resolve_target(target: RevisionTarget):
    """Look up the Problem or LearningItem a revision points at (None if deleted)"""
    model = TARGET_MODELS[target.item_type]
    return db.session.get(model, target.item_id)


def schedule_initial_revision(
    user_id: int,
    target: RevisionTarget,
    original_date: date,
    today: Optional[date] = None
) -> RevisionItem:
    """
    Add the first-cycle revision for an item that was just marked for revision.

    The row is added to the current session but not committed, so it is
    persisted in the same transaction as the item itself.

    Args:
        user_id: Owner of the item
        target: The item to revise
        original_date: Date the item was logged
        today: Scheduling date (defaults to today)

    Returns:
        The pending RevisionItem
    """
    today = today or utc_today()

    revision_item = RevisionItem(
        user_id=user_id,
        item_id=target.item_id,
        item_type=target.item_type.value,
        original_date=original_date,
        next_revision_date=today + timedelta(days=get_interval(1)),
        revision_cycle=1,
        is_completed=False
    )
    db.session.add(revision_item)

    logger.debug(
        f"Scheduled first revision for {target.item_type.value}:{target.item_id} "
        f"on {revision_item.next_revision_date}"
    )
    return revision_item


def create_revision_item(
    user_id: int,
    item_id: int,
    item_type: str,
    original_date: date,
    next_revision_date: date,
    revision_cycle: int = 1
) -> RevisionItem:
    """
    Create a revision item directly.

    Raises:
        NotFoundError: If the user does not exist
        InvalidInputError: If item_type or revision_cycle is invalid
        RuntimeError: If the database write fails
    """
    if not db.session.get(User, user_id):
        raise NotFoundError(f"User {user_id} not found")

    target = RevisionTarget.of(item_type, item_id)
    if revision_cycle < 1:
        raise InvalidInputError(f"revision_cycle must be >= 1, got: {revision_cycle}")

    try:
        revision_item = RevisionItem(
            user_id=user_id,
            item_id=target.item_id,
            item_type=target.item_type.value,
            original_date=original_date,
            next_revision_date=next_revision_date,
            revision_cycle=revision_cycle,
            is_completed=False
        )
        db.session.add(revision_item)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to create revision item for user_id={user_id}: {e}", exc_info=True)
        raise RuntimeError(f"Failed to create revision item: {e}")

    logger.info(
        f"Created revision item {revision_item.id} for user_id={user_id}, "
        f"{item_type}:{item_id}, cycle={revision_cycle}"
    )
    return revision_item


def get_revision_item(revision_item_id: int) -> RevisionItem:
    revision_item = db.session.get(RevisionItem, revision_item_id)
    if not revision_item:
        raise NotFoundError(f"Revision item {revision_item_id} not found")
    return revision_item


def complete_revision_item(revision_item_id: int, today: Optional[date] = None) -> dict:
    """
    Complete a revision and schedule the next one.

    Marks the item completed and creates its successor at cycle + 1 in a
    single transaction. If any write fails, both are rolled back.

    Args:
        revision_item_id: The revision to complete
        today: Completion date (defaults to today)

    Returns:
        dict: {
            'completed': RevisionItem,
            'next': RevisionItem
        }

    Raises:
        NotFoundError: If the revision item does not exist
        InvalidInputError: If the revision item was already completed
        RuntimeError: If the database transaction fails

    Example:
        >>> result = complete_revision_item(12, today=date(2024, 1, 2))
        >>> result['next'].revision_cycle, result['next'].next_revision_date
        (2, datetime.date(2024, 1, 5))
    """
    today = today or utc_today()

    revision_item = RevisionItem.query.filter_by(id=revision_item_id).with_for_update().first()
    if not revision_item:
        logger.warning(f"Revision item not found: {revision_item_id}")
        raise NotFoundError(f"Revision item {revision_item_id} not found")

    if revision_item.is_completed:
        logger.warning(f"Revision item {revision_item_id} is already completed")
        raise InvalidInputError(f"Revision item {revision_item_id} is already completed")

    next_cycle = revision_item.revision_cycle + 1

    try:
        revision_item.is_completed = True
        revision_item.completed_date = today

        next_item = RevisionItem(
            user_id=revision_item.user_id,
            item_id=revision_item.item_id,
            item_type=revision_item.item_type,
            original_date=revision_item.original_date,
            next_revision_date=today + timedelta(days=get_interval(next_cycle)),
            revision_cycle=next_cycle,
            is_completed=False
        )
        db.session.add(next_item)
        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(
            f"Failed to complete revision item {revision_item_id}: {e}",
            exc_info=True
        )
        raise RuntimeError(f"Failed to complete revision item: {e}")

    logger.info(
        f"Completed revision item {revision_item_id} (cycle {next_cycle - 1}), "
        f"next review {next_item.next_revision_date} (cycle {next_cycle})"
    )

    return {
        'completed': revision_item,
        'next': next_item
    }


def get_user_revision_items(
    user_id: int,
    due_date: Optional[date] = None,
    is_completed: Optional[bool] = None
) -> List[dict]:
    """
    List a user's revision items with their targets attached.

    Args:
        user_id: The ID of the user
        due_date: Only items due on exactly this date
        is_completed: Only items with this completion flag

    Returns:
        List of revision dicts ordered by next_revision_date ascending, each
        carrying a 'problem' or 'learning_item' key with the resolved target
        (None if the target was deleted)

    Raises:
        NotFoundError: If the user does not exist
    """
    if not db.session.get(User, user_id):
        raise NotFoundError(f"User {user_id} not found")

    query = RevisionItem.query.filter_by(user_id=user_id)
    if due_date is not None:
        query = query.filter(RevisionItem.next_revision_date == due_date)
    if is_completed is not None:
        query = query.filter(RevisionItem.is_completed == is_completed)

    revision_items = query.order_by(
        RevisionItem.next_revision_date.asc(),
        RevisionItem.id.asc()
    ).all()

    results = []
    for revision_item in revision_items:
        target = RevisionTarget.for_revision(revision_item)
        resolved = resolve_target(target)

        data = revision_item.to_dict()
        data[TARGET_RESPONSE_KEYS[target.item_type]] = resolved.to_dict() if resolved else None
        results.append(data)

    return results
