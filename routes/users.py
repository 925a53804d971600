from flask import Blueprint, jsonify
from flask_login import login_required, current_user, logout_user
from routes.responses import (
    success_response,
    service_error_response,
    forbidden_unless_owner,
)
from services import user_service
from services.problem_service import get_user_problem_stats
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('users', __name__, url_prefix='/api/users')


@bp.route('/test')
def test():
    return jsonify({'message': 'Users blueprint working'})


@bp.route('', methods=['GET'])
@login_required
def list_users():
    try:
        users = user_service.list_users()
        return success_response([user.to_dict() for user in users])
    except Exception as e:
        return service_error_response(e, 'list users')


@bp.route('/<int:user_id>', methods=['GET'])
@login_required
def get_user(user_id):
    try:
        user = user_service.get_user(user_id)
        return success_response(user.to_dict())
    except Exception as e:
        return service_error_response(e, 'fetch user')


@bp.route('/<int:user_id>/stats', methods=['GET'])
@login_required
def get_user_stats(user_id):
    """
    Problem statistics for a user.

    Returns:
        {
            "success": true,
            "data": {
                "total_problems": int,
                "solved_problems": int,
                "total_time_spent": int,
                "solve_rate": float,
                "difficulty_breakdown": [{"difficulty": str, "count": int}],
                "platform_breakdown": [{"platform": str, "count": int}]
            }
        }
    """
    denied = forbidden_unless_owner(user_id)
    if denied:
        return denied

    try:
        user_service.get_user(user_id)
        return success_response(get_user_problem_stats(user_id))
    except Exception as e:
        return service_error_response(e, 'fetch user stats')


@bp.route('/me', methods=['DELETE'])
@login_required
def delete_account():
    """
    Delete the current user's account and all associated data.

    Problems, learning items, revisions and roadmaps are removed with the
    account, then the user is logged out.
    """
    try:
        user_id = current_user.id
        user_email = current_user.email

        logger.info(f'Starting account deletion for user {user_email} (ID: {user_id})')
        user_service.delete_user(user_id)

        logout_user()
        logger.info(f'User {user_email} logged out after account deletion')

        return success_response(message='Account deleted successfully')

    except Exception as e:
        return service_error_response(e, 'delete account')
