"""Problem Service - CRUD, filtering and statistics for coding problems"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.problem import Problem
from models.user import User
from services.exceptions import NotFoundError
from services.revision_service import (
    RevisionItemType,
    RevisionTarget,
    schedule_initial_revision,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    'title', 'platform', 'difficulty', 'topic', 'time_spent', 'outcome',
    'date', 'link', 'code_link', 'tags', 'is_revision'
}


def create_problem(user_id: int, problem_data: dict) -> Problem:
    """
    Create a new problem for a user.

    If problem_data['is_revision'] is set, the first revision is scheduled in
    the same transaction.

    Args:
        user_id: The ID of the owning user
        problem_data: Validated problem fields

    Returns:
        The created Problem

    Raises:
        NotFoundError: If the user does not exist
        ValueError: If a field fails model validation
        RuntimeError: If the database write fails
    """
    if not db.session.get(User, user_id):
        raise NotFoundError(f"User {user_id} not found")

    try:
        problem = Problem(
            user_id=user_id,
            title=problem_data['title'],
            platform=problem_data['platform'],
            difficulty=problem_data['difficulty'],
            topic=problem_data['topic'],
            time_spent=problem_data.get('time_spent', 0),
            outcome=problem_data['outcome'],
            date=problem_data.get('date') or datetime.utcnow(),
            link=problem_data.get('link'),
            code_link=problem_data.get('code_link'),
            tags=problem_data.get('tags') or [],
            is_revision=bool(problem_data.get('is_revision'))
        )
        db.session.add(problem)
        # Flush to get problem.id for the revision reference
        db.session.flush()

        if problem.is_revision:
            schedule_initial_revision(
                user_id,
                RevisionTarget(RevisionItemType.PROBLEM, problem.id),
                original_date=problem.date.date()
            )

        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to create problem for user_id={user_id}: {e}", exc_info=True)
        raise RuntimeError(f"Failed to create problem: {e}")

    logger.info(f"Created problem {problem.id} '{problem.title}' for user_id={user_id}")
    return problem


def get_user_problems(
    user_id: int,
    difficulty: Optional[str] = None,
    platform: Optional[str] = None,
    outcome: Optional[str] = None,
    topic: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0
) -> List[Problem]:
    """
    Get a user's problems, newest first.

    Args:
        user_id: The ID of the user
        difficulty: Exact difficulty filter
        platform: Exact platform filter
        outcome: Exact outcome filter
        topic: Case-insensitive substring match on topic
        limit: Maximum number of rows
        offset: Number of rows to skip

    Returns:
        List of Problem objects ordered by date descending
    """
    query = Problem.query.filter_by(user_id=user_id)

    if difficulty:
        query = query.filter(Problem.difficulty == difficulty)
    if platform:
        query = query.filter(Problem.platform == platform)
    if outcome:
        query = query.filter(Problem.outcome == outcome)
    if topic:
        query = query.filter(Problem.topic.ilike(f'%{topic}%'))

    query = query.order_by(Problem.date.desc(), Problem.id.desc()).offset(offset)
    if limit:
        query = query.limit(limit)

    return query.all()


def get_problem(problem_id: int) -> Problem:
    problem = db.session.get(Problem, problem_id)
    if not problem:
        raise NotFoundError(f"Problem {problem_id} not found")
    return problem


def update_problem(problem_id: int, update_data: dict) -> Problem:
    """
    Apply a partial update to a problem.

    Unknown keys are ignored. Toggling is_revision does not schedule a
    revision; revisions are only scheduled when a problem is created.

    Raises:
        NotFoundError: If the problem does not exist
        ValueError: If a field fails model validation
        RuntimeError: If the database write fails
    """
    problem = get_problem(problem_id)

    try:
        for field, value in update_data.items():
            if field in UPDATABLE_FIELDS:
                setattr(problem, field, value)
        db.session.commit()
    except ValueError:
        # Model validators reject the value before anything is flushed
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to update problem {problem_id}: {e}", exc_info=True)
        raise RuntimeError(f"Failed to update problem: {e}")

    logger.info(f"Updated problem {problem_id}: {sorted(update_data.keys())}")
    return problem


def delete_problem(problem_id: int) -> None:
    problem = get_problem(problem_id)

    try:
        db.session.delete(problem)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to delete problem {problem_id}: {e}", exc_info=True)
        raise RuntimeError(f"Failed to delete problem: {e}")

    logger.info(f"Deleted problem {problem_id}")


def get_user_problem_stats(user_id: int) -> dict:
    """
    Get aggregate problem statistics for a user.

    Returns:
        dict: {
            'total_problems': int,
            'solved_problems': int,
            'total_time_spent': int,
            'solve_rate': float (percentage, 2 decimals),
            'difficulty_breakdown': [{'difficulty': str, 'count': int}],
            'platform_breakdown': [{'platform': str, 'count': int}]
        }

    Raises:
        NotFoundError: If the user does not exist
    """
    if not db.session.get(User, user_id):
        raise NotFoundError(f"User {user_id} not found")

    total_problems = Problem.query.filter_by(user_id=user_id).count()
    solved_problems = Problem.query.filter_by(user_id=user_id, outcome='solved').count()
    total_time_spent = db.session.query(
        db.func.coalesce(db.func.sum(Problem.time_spent), 0)
    ).filter(Problem.user_id == user_id).scalar()

    difficulty_rows = db.session.query(
        Problem.difficulty, db.func.count(Problem.id)
    ).filter(Problem.user_id == user_id).group_by(Problem.difficulty).all()

    platform_rows = db.session.query(
        Problem.platform, db.func.count(Problem.id)
    ).filter(Problem.user_id == user_id).group_by(Problem.platform).all()

    solve_rate = round(solved_problems / total_problems * 100, 2) if total_problems > 0 else 0

    return {
        'total_problems': total_problems,
        'solved_problems': solved_problems,
        'total_time_spent': int(total_time_spent or 0),
        'solve_rate': solve_rate,
        'difficulty_breakdown': [
            {'difficulty': difficulty, 'count': count} for difficulty, count in difficulty_rows
        ],
        'platform_breakdown': [
            {'platform': platform, 'count': count} for platform, count in platform_rows
        ]
    }
