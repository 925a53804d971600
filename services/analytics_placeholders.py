"""Analytics Placeholders - Static content for report sections with no real data source yet.

Nothing here is computed from a user's activity beyond trivial echoes of
already-aggregated numbers. Kept apart from analytics_service so the real
aggregations stay testable on their own. Disable with the
ANALYTICS_INCLUDE_PLACEHOLDERS config flag.
"""
from typing import List, Sequence

BEST_PERFORMING_HOURS = [
    {'hour': 9, 'success_rate': 85, 'problems_solved': 3},
    {'hour': 14, 'success_rate': 90, 'problems_solved': 4},
    {'hour': 20, 'success_rate': 75, 'problems_solved': 2},
]

PRODUCTIVITY_PATTERNS = [
    {'day': 'Monday', 'productivity': 85},
    {'day': 'Tuesday', 'productivity': 90},
    {'day': 'Wednesday', 'productivity': 80},
    {'day': 'Thursday', 'productivity': 75},
    {'day': 'Friday', 'productivity': 70},
    {'day': 'Saturday', 'productivity': 60},
    {'day': 'Sunday', 'productivity': 50},
]

RECOMMENDATIONS = [
    {
        'type': 'topic',
        'title': 'Focus on Dynamic Programming',
        'description': 'Your DP problems have a 60% success rate. Consider practicing more DP problems to improve.',
        'priority': 'medium'
    },
    {
        'type': 'difficulty',
        'title': 'Try More Medium Problems',
        'description': 'You have a high success rate with easy problems. Challenge yourself with more medium difficulty problems.',
        'priority': 'high'
    },
]

STRENGTHS = [
    {
        'area': 'Problem Solving',
        'description': 'You show consistent improvement in problem-solving skills.',
        'confidence': 85
    },
]

IMPROVEMENTS = [
    {
        'area': 'Time Management',
        'description': 'Consider setting time limits for practice problems.',
        'action': 'Set 30-minute timers for medium problems'
    },
]


def time_analysis_placeholders() -> dict:
    return {
        'best_performing_hours': [dict(entry) for entry in BEST_PERFORMING_HOURS],
        'productivity_patterns': [dict(entry) for entry in PRODUCTIVITY_PATTERNS],
    }


def ai_insights(total_problems: int, success_rate: int) -> dict:
    """Canned insights; predictions just project the current numbers forward"""
    return {
        'recommendations': [dict(entry) for entry in RECOMMENDATIONS],
        'predictions': [
            {
                'metric': 'Problems Solved',
                'current': total_problems,
                'predicted': total_problems + 10,
                'timeframe': 'Next Month'
            },
            {
                'metric': 'Success Rate',
                'current': success_rate,
                'predicted': min(success_rate + 5, 100),
                'timeframe': 'Next Month'
            },
        ],
        'strengths': [dict(entry) for entry in STRENGTHS],
        'improvements': [dict(entry) for entry in IMPROVEMENTS],
    }


def favorite_topics(topic_distribution: Sequence[dict]) -> List[dict]:
    # Half an hour per problem is a stand-in until learning time is tagged by topic
    return [
        {'topic': entry['topic'], 'hours': int(entry['count'] * 0.5 + 0.5)}
        for entry in topic_distribution[:3]
    ]


def next_milestones(roadmaps: Sequence) -> List[dict]:
    return [
        {'roadmap': roadmap.title, 'milestone': 'Complete first topic', 'progress': 25}
        for roadmap in roadmaps[:3]
    ]
