"""Roadmap Service - Roadmaps, topics and subtopics with progress tracking.

Topic.total_subtopics and Topic.completed_subtopics are never adjusted by
+1/-1. After every subtopic mutation they are recounted from the subtopic
rows before the transaction commits.
"""
import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from models import db, utc_today
from models.roadmap import DEFAULT_ROADMAP_COLOR, Roadmap
from models.subtopic import Subtopic
from models.topic import Topic
from models.user import User
from services.exceptions import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def recompute_topic_progress(topic: Topic) -> dict:
    """
    Recount a topic's subtopic counters from the subtopic rows.

    Flushes pending changes first so the counts include them. Does not commit.

    Returns:
        dict: {'total_subtopics': int, 'completed_subtopics': int}
    """
    db.session.flush()

    total = Subtopic.query.filter_by(topic_id=topic.id).count()
    completed = Subtopic.query.filter_by(topic_id=topic.id, is_completed=True).count()

    topic.total_subtopics = total
    topic.completed_subtopics = completed

    return {'total_subtopics': total, 'completed_subtopics': completed}


def _commit(action: str):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to {action}: {e}", exc_info=True)
        raise RuntimeError(f"Failed to {action}: {e}")


def _require_title(title: Optional[str], what: str) -> str:
    if not title or not title.strip():
        raise InvalidInputError(f"{what} title is required")
    return title.strip()


# Roadmaps

def create_roadmap(
    user_id: int,
    title: str,
    description: Optional[str] = None,
    color: Optional[str] = None,
    is_public: bool = False
) -> Roadmap:
    if not db.session.get(User, user_id):
        raise NotFoundError(f"User {user_id} not found")

    roadmap = Roadmap(
        user_id=user_id,
        title=_require_title(title, 'Roadmap'),
        description=description,
        color=color or DEFAULT_ROADMAP_COLOR,
        is_public=bool(is_public)
    )
    db.session.add(roadmap)
    _commit('create roadmap')

    logger.info(f"Created roadmap {roadmap.id} '{roadmap.title}' for user_id={user_id}")
    return roadmap


def get_user_roadmaps(user_id: int) -> List[Roadmap]:
    """Get a user's roadmaps newest first; topics and subtopics load in order"""
    return Roadmap.query.filter_by(user_id=user_id).order_by(
        Roadmap.created_at.desc(), Roadmap.id.desc()
    ).all()


def get_roadmap(roadmap_id: int, touch: bool = False) -> Roadmap:
    """
    Get a roadmap by id.

    Args:
        roadmap_id: The roadmap to fetch
        touch: Record the visit in last_visited

    Raises:
        NotFoundError: If the roadmap does not exist
    """
    roadmap = db.session.get(Roadmap, roadmap_id)
    if not roadmap:
        raise NotFoundError(f"Roadmap {roadmap_id} not found")

    if touch:
        roadmap.last_visited = datetime.utcnow()
        _commit('update roadmap last_visited')

    return roadmap


def delete_roadmap(roadmap_id: int) -> None:
    roadmap = get_roadmap(roadmap_id)
    db.session.delete(roadmap)
    _commit('delete roadmap')
    logger.info(f"Deleted roadmap {roadmap_id}")


# Topics

def create_topic(
    roadmap_id: int,
    title: str,
    description: Optional[str] = None,
    order: int = 0
) -> Topic:
    roadmap = get_roadmap(roadmap_id)

    topic = Topic(
        roadmap_id=roadmap.id,
        title=_require_title(title, 'Topic'),
        description=description.strip() if description and description.strip() else None,
        order=order or 0,
        total_subtopics=0,
        completed_subtopics=0
    )
    db.session.add(topic)
    _commit('create topic')

    logger.info(f"Created topic {topic.id} in roadmap {roadmap_id}")
    return topic


def get_topic(topic_id: int) -> Topic:
    topic = db.session.get(Topic, topic_id)
    if not topic:
        raise NotFoundError(f"Topic {topic_id} not found")
    return topic


def set_topic_completed(topic_id: int, completed: bool, today: Optional[date] = None) -> Topic:
    topic = get_topic(topic_id)
    topic.is_completed = completed
    topic.completed_date = (today or utc_today()) if completed else None
    _commit('update topic completion')

    logger.info(f"Topic {topic_id} marked {'completed' if completed else 'uncompleted'}")
    return topic


# Subtopics

def create_subtopic(
    topic_id: int,
    title: str,
    description: Optional[str] = None,
    order: int = 0,
    difficulty: Optional[str] = None,
    estimated_time: Optional[int] = None
) -> Subtopic:
    """
    Add a subtopic to a topic and refresh the topic's counters.

    Raises:
        NotFoundError: If the topic does not exist
        InvalidInputError: If the title is blank
        RuntimeError: If the database write fails
    """
    topic = get_topic(topic_id)

    subtopic = Subtopic(
        topic_id=topic.id,
        title=_require_title(title, 'Subtopic'),
        description=description.strip() if description and description.strip() else None,
        order=order or 0,
        difficulty=difficulty or 'beginner',
        estimated_time=estimated_time
    )
    db.session.add(subtopic)
    recompute_topic_progress(topic)
    _commit('create subtopic')

    logger.info(
        f"Created subtopic {subtopic.id} in topic {topic_id} "
        f"({topic.completed_subtopics}/{topic.total_subtopics})"
    )
    return subtopic


def get_subtopic(subtopic_id: int) -> Subtopic:
    subtopic = db.session.get(Subtopic, subtopic_id)
    if not subtopic:
        raise NotFoundError(f"Subtopic {subtopic_id} not found")
    return subtopic


def set_subtopic_completed(subtopic_id: int, completed: bool, today: Optional[date] = None) -> Subtopic:
    """
    Complete or uncomplete a subtopic and refresh the parent topic's counters
    in the same transaction.
    """
    subtopic = get_subtopic(subtopic_id)
    subtopic.is_completed = completed
    subtopic.completed_date = (today or utc_today()) if completed else None

    progress = recompute_topic_progress(subtopic.topic)
    _commit('update subtopic completion')

    logger.info(
        f"Subtopic {subtopic_id} marked {'completed' if completed else 'uncompleted'}, "
        f"topic {subtopic.topic_id} at {progress['completed_subtopics']}/{progress['total_subtopics']}"
    )
    return subtopic


def delete_subtopic(subtopic_id: int) -> Topic:
    """Delete a subtopic and return its topic with refreshed counters"""
    subtopic = get_subtopic(subtopic_id)
    topic = subtopic.topic

    topic.subtopics.remove(subtopic)
    recompute_topic_progress(topic)
    _commit('delete subtopic')

    logger.info(f"Deleted subtopic {subtopic_id} from topic {topic.id}")
    return topic
