"""
Analytics Blueprint

Provides the practice analytics report for the logged-in user: overview
numbers, streaks, topic/platform/difficulty breakdowns, daily and weekly
activity, learning, roadmap and revision progress.
"""

from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from routes.responses import success_response, service_error_response
from schemas import AnalyticsQuery
from services.analytics_service import get_analytics
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('analytics', __name__, url_prefix='/api/analytics')


@bp.route('/test')
def test():
    """Test endpoint to verify analytics blueprint is working"""
    return jsonify({'message': 'Analytics blueprint working'})


@bp.route('', methods=['GET'])
@login_required
def get_report():
    """
    Get the analytics report for the current user.

    Query Parameters:
        timeframe (str, optional): 'week', 'month' (default) or 'quarter'
        start_date (str, optional): YYYY-MM-DD, used together with end_date
        end_date (str, optional): YYYY-MM-DD, inclusive

    Example:
        GET /api/analytics?timeframe=week
        GET /api/analytics?start_date=2024-01-01&end_date=2024-01-31

    Response:
        {
            "success": true,
            "data": {
                "overview": {"total_problems": 12, "success_rate": 67, ...},
                "problem_stats": {...},
                "performance_metrics": {...},
                "topic_analysis": {...},
                ...
            }
        }
    """
    try:
        query = AnalyticsQuery.model_validate(request.args.to_dict())

        report = get_analytics(
            current_user.id,
            timeframe=query.timeframe,
            start_date=query.start_date,
            end_date=query.end_date,
            include_placeholders=current_app.config.get('ANALYTICS_INCLUDE_PLACEHOLDERS', True)
        )

        logger.info(f'Served analytics for user {current_user.id} (timeframe={query.timeframe})')
        return success_response(report)

    except Exception as e:
        return service_error_response(e, 'calculate analytics')
