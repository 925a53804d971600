"""Analytics Service - Summary statistics over a user's problems, learning items and roadmaps.

The calculate_* functions are pure: they take sequences of objects exposing
the model attributes (ORM rows or any stand-in) and never touch the database.
get_analytics() fetches a user's rows, applies the time window and assembles
the full report.

Usage:
    from services.analytics_service import get_analytics

    report = get_analytics(user_id, timeframe='week')
    report['overview']['success_rate']
"""
import logging
import math
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from models import db, utc_today
from models.learning_item import LearningItem
from models.problem import Problem
from models.revision_item import RevisionItem
from models.roadmap import Roadmap
from models.user import User
from services import analytics_placeholders
from services.exceptions import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

# Named timeframes and their length in days
TIMEFRAMES = {
    'week': 7,
    'month': 30,
    'quarter': 90,
}
DEFAULT_TIMEFRAME = 'month'

# Number of topics in the strongest/weakest lists
MAX_TOPICS_ANALYSIS = 5

DIFFICULTY_BUCKETS = ['easy', 'medium', 'hard']

SOLVED = 'solved'


# Helpers

def round_half_up(value: float, digits: int = 0):
    """Round with .5 going up, e.g. round_half_up(12.5) == 13 (built-in round gives 12)"""
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded


def calculate_success_rate(solved: int, total: int) -> int:
    """
    Percentage of solved items, 0 when there is nothing to divide by.

    Example:
        >>> calculate_success_rate(1, 3)
        33
        >>> calculate_success_rate(0, 0)
        0
    """
    if total == 0:
        return 0
    return round_half_up(solved / total * 100)


def minutes_to_hours(minutes: float) -> float:
    return round_half_up(minutes / 60, 1)


def to_date(value) -> Optional[date]:
    """Date component of a date, datetime or ISO string (time of day is dropped)"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value)).date()


def _time_spent(item) -> int:
    return getattr(item, 'time_spent', 0) or 0


def _is_solved(problem) -> bool:
    return getattr(problem, 'outcome', None) == SOLVED


def _week_start(day: date) -> date:
    """Sunday on or before the given day"""
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


# Time window

def resolve_date_window(
    timeframe: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    now: Optional[datetime] = None
) -> Tuple[datetime, Optional[datetime]]:
    """
    Turn the analytics window parameters into a datetime range.

    An explicit start_date/end_date pair wins over timeframe and covers both
    days in full. Otherwise the window is the last N days for the named
    timeframe; unknown or missing names fall back to 'month'.

    Args:
        timeframe: 'week', 'month' or 'quarter'
        start_date: ISO date (YYYY-MM-DD)
        end_date: ISO date (YYYY-MM-DD)
        now: Reference time (defaults to now)

    Returns:
        (start, end) where end is exclusive, or None for an open-ended window

    Raises:
        InvalidInputError: If the explicit dates are malformed or reversed
    """
    if start_date and end_date:
        try:
            start = date.fromisoformat(str(start_date))
            end = date.fromisoformat(str(end_date))
        except ValueError:
            raise InvalidInputError(
                f"Invalid date range: start_date={start_date}, end_date={end_date}. Use YYYY-MM-DD."
            )
        if start > end:
            raise InvalidInputError(f"start_date {start} is after end_date {end}")

        return (
            datetime.combine(start, datetime.min.time()),
            datetime.combine(end + timedelta(days=1), datetime.min.time())
        )

    if timeframe not in TIMEFRAMES:
        if timeframe:
            logger.debug(f"Unknown timeframe '{timeframe}', using '{DEFAULT_TIMEFRAME}'")
        timeframe = DEFAULT_TIMEFRAME

    now = now or datetime.utcnow()
    return now - timedelta(days=TIMEFRAMES[timeframe]), None


# Aggregations

def calculate_current_streak(problems: Iterable, today: Optional[date] = None) -> int:
    """
    Count consecutive days with a solved problem, walking back from today.

    The streak is 0 unless something was solved today. The walk then goes
    through solved problems newest first: a problem on the pointer day counts
    it and moves the pointer back one day, a problem older than the pointer
    only moves the pointer back one day. Days without problems therefore do
    not end the walk.

    Example:
        >>> # solved today, yesterday and the day before
        >>> calculate_current_streak(problems)
        3
    """
    today = today or utc_today()

    solved_days = sorted(
        (to_date(p.date) for p in problems if _is_solved(p)),
        reverse=True
    )
    if today not in solved_days:
        return 0

    streak = 1
    check_date = today - timedelta(days=1)

    for problem_day in solved_days:
        if problem_day == check_date:
            streak += 1
            check_date -= timedelta(days=1)
        elif problem_day < check_date:
            check_date -= timedelta(days=1)

    return streak


def calculate_overview(
    problems: Sequence,
    learning_items: Sequence,
    roadmaps: Sequence,
    today: Optional[date] = None
) -> dict:
    total_problems = len(problems)
    solved_problems = sum(1 for p in problems if _is_solved(p))
    total_time = sum(_time_spent(p) for p in problems)

    return {
        'total_problems': total_problems,
        'solved_problems': solved_problems,
        'success_rate': calculate_success_rate(solved_problems, total_problems),
        'total_learning_hours': minutes_to_hours(sum(_time_spent(item) for item in learning_items)),
        'average_time_per_problem': round_half_up(total_time / total_problems) if total_problems else 0,
        'total_topics': len({p.topic for p in problems}),
        'current_streak': calculate_current_streak(problems, today),
        'completed_roadmaps': sum(1 for r in roadmaps if r.is_completed),
    }


def calculate_problem_stats(problems: Sequence, today: Optional[date] = None) -> dict:
    """Compact stats with week-over-week and month-over-month changes"""
    today = today or utc_today()
    dated = [(to_date(p.date), p) for p in problems]

    def solved_between(start: date, end: Optional[date] = None) -> int:
        return sum(
            1 for day, p in dated
            if _is_solved(p) and day >= start and (end is None or day <= end)
        )

    def total_between(start: date, end: Optional[date] = None) -> int:
        return sum(1 for day, _ in dated if day >= start and (end is None or day <= end))

    current_week_start = _week_start(today)
    last_week_start = current_week_start - timedelta(days=7)
    last_week_end = current_week_start - timedelta(days=1)

    current_month_start = today.replace(day=1)
    last_month_end = current_month_start - timedelta(days=1)
    last_month_start = last_month_end.replace(day=1)

    current_month_rate = calculate_success_rate(
        solved_between(current_month_start), total_between(current_month_start)
    )
    last_month_rate = calculate_success_rate(
        solved_between(last_month_start, last_month_end),
        total_between(last_month_start, last_month_end)
    )

    total_problems = len(problems)
    current_streak = calculate_current_streak(problems, today)

    return {
        'total_problems': total_problems,
        'weekly_solved': solved_between(today - timedelta(days=7)),
        'current_streak': current_streak,
        'success_rate': calculate_success_rate(
            sum(1 for p in problems if _is_solved(p)), total_problems
        ),
        'weekly_change': solved_between(current_week_start) - solved_between(last_week_start, last_week_end),
        'streak_change': 1 if current_streak > 0 else 0,
        'rate_change': current_month_rate - last_month_rate,
    }


def calculate_performance_metrics(
    problems: Sequence,
    learning_items: Sequence,
    today: Optional[date] = None
) -> dict:
    """
    Daily activity for the last 7 days and weekly progress for the last 4 weeks.

    Weekly success rates are computed over solved problems only, so they are
    100 for any week with activity and 0 otherwise.
    """
    today = today or utc_today()

    daily_activity = []
    for days_ago in range(6, -1, -1):
        day = today - timedelta(days=days_ago)
        solved = sum(1 for p in problems if _is_solved(p) and to_date(p.date) == day)
        minutes = sum(
            _time_spent(item) for item in learning_items
            if to_date(getattr(item, 'created_at', None)) == day
        )
        daily_activity.append({
            'date': day.isoformat(),
            'problems_solved': solved,
            'learning_hours': minutes_to_hours(minutes),
        })

    weekly_progress = []
    for weeks_ago in range(3, -1, -1):
        week_start = _week_start(today) - timedelta(days=weeks_ago * 7)
        week_end = week_start + timedelta(days=6)

        week_problems = [
            p for p in problems
            if _is_solved(p) and week_start <= to_date(p.date) <= week_end
        ]
        week_solved = sum(1 for p in week_problems if _is_solved(p))

        weekly_progress.append({
            'week': f'Week {4 - weeks_ago}',
            'start_date': week_start.isoformat(),
            'end_date': week_end.isoformat(),
            'problems_solved': len(week_problems),
            'success_rate': calculate_success_rate(week_solved, len(week_problems)),
        })

    return {
        'daily_activity': daily_activity,
        'weekly_progress': weekly_progress,
        'monthly_trends': [],
    }


def _group_counts(problems: Sequence, attribute: str) -> 'OrderedDict[str, dict]':
    """Per-key totals in order of first appearance"""
    stats = OrderedDict()
    for problem in problems:
        key = getattr(problem, attribute, None)
        entry = stats.setdefault(key, {'total': 0, 'solved': 0, 'time_spent': 0})
        entry['total'] += 1
        entry['time_spent'] += _time_spent(problem)
        if _is_solved(problem):
            entry['solved'] += 1
    return stats


def calculate_topic_analysis(problems: Sequence) -> dict:
    """
    Per-topic success rates with the strongest and weakest topics.

    Topics are sorted by success rate descending (ties keep first-seen order).
    strongest_topics is the head of that list, weakest_topics the tail in
    worst-first order.
    """
    topic_stats = _group_counts(problems, 'topic')

    analysis = sorted(
        (
            {
                'topic': topic,
                'total_problems': stats['total'],
                'solved_problems': stats['solved'],
                'success_rate': calculate_success_rate(stats['solved'], stats['total']),
                'average_time': round_half_up(stats['time_spent'] / stats['total']) if stats['total'] else 0,
            }
            for topic, stats in topic_stats.items()
        ),
        key=lambda entry: entry['success_rate'],
        reverse=True
    )

    total_problems = len(problems)
    distribution = sorted(
        (
            {
                'topic': topic,
                'count': stats['total'],
                'percentage': calculate_success_rate(stats['total'], total_problems),
            }
            for topic, stats in topic_stats.items()
        ),
        key=lambda entry: entry['count'],
        reverse=True
    )

    return {
        'strongest_topics': analysis[:MAX_TOPICS_ANALYSIS],
        'weakest_topics': list(reversed(analysis[-MAX_TOPICS_ANALYSIS:])),
        'topic_distribution': distribution,
    }


def calculate_platform_analysis(problems: Sequence) -> List[dict]:
    platform_stats = _group_counts(problems, 'platform')
    return sorted(
        (
            {
                'platform': platform,
                'total_problems': stats['total'],
                'solved_problems': stats['solved'],
                'success_rate': calculate_success_rate(stats['solved'], stats['total']),
            }
            for platform, stats in platform_stats.items()
        ),
        key=lambda entry: entry['total_problems'],
        reverse=True
    )


def calculate_difficulty_analysis(problems: Sequence) -> dict:
    """Solved/total/success rate for easy, medium and hard. Other values are ignored."""
    buckets = {difficulty: {'solved': 0, 'total': 0} for difficulty in DIFFICULTY_BUCKETS}

    for problem in problems:
        bucket = buckets.get(getattr(problem, 'difficulty', None))
        if bucket is None:
            continue
        bucket['total'] += 1
        if _is_solved(problem):
            bucket['solved'] += 1

    return {
        f'{difficulty}_problems': {
            'solved': stats['solved'],
            'total': stats['total'],
            'success_rate': calculate_success_rate(stats['solved'], stats['total']),
        }
        for difficulty, stats in buckets.items()
    }


def calculate_average_time_by_difficulty(problems: Sequence) -> dict:
    averages = {}
    for difficulty in DIFFICULTY_BUCKETS:
        matching = [p for p in problems if getattr(p, 'difficulty', None) == difficulty]
        averages[difficulty] = (
            round_half_up(sum(_time_spent(p) for p in matching) / len(matching)) if matching else 0
        )
    return averages


def calculate_learning_progress(learning_items: Sequence, current_streak: int = 0) -> dict:
    return {
        'courses_completed': sum(1 for item in learning_items if item.status == 'completed'),
        'courses_in_progress': sum(1 for item in learning_items if item.status == 'in-progress'),
        'total_learning_hours': minutes_to_hours(sum(_time_spent(item) for item in learning_items)),
        'learning_streak': current_streak,
    }


def calculate_roadmap_progress(roadmaps: Sequence) -> dict:
    completed = sum(1 for r in roadmaps if r.is_completed)
    return {
        'total_roadmaps': len(roadmaps),
        'completed_roadmaps': completed,
        'in_progress_roadmaps': len(roadmaps) - completed,
    }


def calculate_revision_progress(revision_items: Sequence, today: Optional[date] = None) -> dict:
    today = today or utc_today()
    pending = [r for r in revision_items if not r.is_completed]

    return {
        'total': len(revision_items),
        'completed': len(revision_items) - len(pending),
        'pending': len(pending),
        'due_today': sum(1 for r in pending if to_date(r.next_revision_date) == today),
        'overdue': sum(1 for r in pending if to_date(r.next_revision_date) < today),
    }


def build_report(
    problems: Sequence,
    learning_items: Sequence,
    roadmaps: Sequence,
    revision_items: Sequence = (),
    today: Optional[date] = None
) -> dict:
    """
    Assemble every computed report section. Contains no placeholder content.

    Empty inputs produce a report of zeros and empty lists.
    """
    today = today or utc_today()
    overview = calculate_overview(problems, learning_items, roadmaps, today)

    return {
        'overview': overview,
        'problem_stats': calculate_problem_stats(problems, today),
        'performance_metrics': calculate_performance_metrics(problems, learning_items, today),
        'topic_analysis': calculate_topic_analysis(problems),
        'platform_analysis': calculate_platform_analysis(problems),
        'difficulty_analysis': calculate_difficulty_analysis(problems),
        'time_analysis': {
            'average_time_by_difficulty': calculate_average_time_by_difficulty(problems),
        },
        'learning_progress': calculate_learning_progress(learning_items, overview['current_streak']),
        'roadmap_progress': calculate_roadmap_progress(roadmaps),
        'revision_progress': calculate_revision_progress(revision_items, today),
    }


def add_placeholder_sections(report: dict, roadmaps: Sequence) -> dict:
    """Merge the static placeholder sections into a built report (in place)"""
    overview = report['overview']

    report['time_analysis'].update(analytics_placeholders.time_analysis_placeholders())
    report['ai_insights'] = analytics_placeholders.ai_insights(
        overview['total_problems'], overview['success_rate']
    )
    report['learning_progress']['favorite_topics'] = analytics_placeholders.favorite_topics(
        report['topic_analysis']['topic_distribution']
    )
    report['roadmap_progress']['next_milestones'] = analytics_placeholders.next_milestones(roadmaps)
    return report


def get_analytics(
    user_id: int,
    timeframe: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    include_placeholders: bool = True,
    now: Optional[datetime] = None
) -> dict:
    """
    Build the analytics report for a user.

    Args:
        user_id: The ID of the user
        timeframe: 'week', 'month' (default) or 'quarter'
        start_date: ISO start date; with end_date overrides timeframe
        end_date: ISO end date (inclusive)
        include_placeholders: Merge the static placeholder sections
        now: Reference time (defaults to now)

    Returns:
        The report dict (see build_report)

    Raises:
        NotFoundError: If the user does not exist
        InvalidInputError: If the date range is invalid
        RuntimeError: If loading the user's data fails
    """
    if not db.session.get(User, user_id):
        raise NotFoundError(f"User {user_id} not found")

    now = now or datetime.utcnow()
    window_start, window_end = resolve_date_window(timeframe, start_date, end_date, now)

    problem_query = Problem.query.filter(
        Problem.user_id == user_id, Problem.date >= window_start
    )
    learning_query = LearningItem.query.filter(
        LearningItem.user_id == user_id, LearningItem.date >= window_start.date()
    )
    revision_query = RevisionItem.query.filter(
        RevisionItem.user_id == user_id,
        RevisionItem.next_revision_date >= window_start.date()
    )
    if window_end is not None:
        problem_query = problem_query.filter(Problem.date < window_end)
        learning_query = learning_query.filter(LearningItem.date < window_end.date())
        revision_query = revision_query.filter(RevisionItem.next_revision_date < window_end.date())

    try:
        problems = problem_query.all()
        learning_items = learning_query.all()
        revision_items = revision_query.all()
        roadmaps = Roadmap.query.filter_by(user_id=user_id).all()
    except Exception as e:
        logger.error(f"Failed to load analytics data for user_id={user_id}: {e}", exc_info=True)
        raise RuntimeError(f"Failed to calculate analytics: {e}")

    report = build_report(problems, learning_items, roadmaps, revision_items, today=now.date())
    if include_placeholders:
        add_placeholder_sections(report, roadmaps)

    logger.info(
        f"Analytics for user_id={user_id}: {len(problems)} problems, "
        f"{len(learning_items)} learning items, {len(roadmaps)} roadmaps"
    )
    return report
