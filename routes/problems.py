from flask import Blueprint, jsonify, request
from flask_login import login_required
from routes.responses import (
    success_response,
    service_error_response,
    forbidden_unless_owner,
    get_json_body,
)
from schemas import ProblemCreate, ProblemUpdate
from services import problem_service
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('problems', __name__, url_prefix='/api')


@bp.route('/problems/test')
def test():
    return jsonify({'message': 'Problems blueprint working'})


@bp.route('/users/<int:user_id>/problems', methods=['POST'])
@login_required
def create_problem(user_id):
    """
    Log a solved or attempted problem.

    Request Body:
        ProblemCreate fields; set "is_revision": true to schedule revisions

    Returns:
        201 with the created problem
    """
    denied = forbidden_unless_owner(user_id)
    if denied:
        return denied

    try:
        problem_data = ProblemCreate.model_validate(get_json_body())
        problem = problem_service.create_problem(user_id, problem_data.model_dump())
        return success_response(problem.to_dict(), 201, 'Problem created successfully')
    except Exception as e:
        return service_error_response(e, 'create problem')


@bp.route('/users/<int:user_id>/problems', methods=['GET'])
@login_required
def list_problems(user_id):
    """
    List a user's problems, newest first.

    Query Parameters:
        difficulty, platform, outcome (exact match)
        topic (substring, case-insensitive)
        limit, offset (int)
    """
    denied = forbidden_unless_owner(user_id)
    if denied:
        return denied

    try:
        problems = problem_service.get_user_problems(
            user_id,
            difficulty=request.args.get('difficulty'),
            platform=request.args.get('platform'),
            outcome=request.args.get('outcome'),
            topic=request.args.get('topic'),
            limit=request.args.get('limit', type=int),
            offset=request.args.get('offset', 0, type=int)
        )
        return success_response([problem.to_dict() for problem in problems])
    except Exception as e:
        return service_error_response(e, 'list problems')


@bp.route('/problems/<int:problem_id>', methods=['GET'])
@login_required
def get_problem(problem_id):
    try:
        problem = problem_service.get_problem(problem_id)
        denied = forbidden_unless_owner(problem.user_id)
        if denied:
            return denied
        return success_response(problem.to_dict())
    except Exception as e:
        return service_error_response(e, 'fetch problem')


@bp.route('/problems/<int:problem_id>', methods=['PUT'])
@login_required
def update_problem(problem_id):
    try:
        problem = problem_service.get_problem(problem_id)
        denied = forbidden_unless_owner(problem.user_id)
        if denied:
            return denied

        update_data = ProblemUpdate.model_validate(get_json_body())
        problem = problem_service.update_problem(
            problem_id, update_data.model_dump(exclude_unset=True)
        )
        return success_response(problem.to_dict(), message='Problem updated successfully')
    except Exception as e:
        return service_error_response(e, 'update problem')


@bp.route('/problems/<int:problem_id>', methods=['DELETE'])
@login_required
def delete_problem(problem_id):
    try:
        problem = problem_service.get_problem(problem_id)
        denied = forbidden_unless_owner(problem.user_id)
        if denied:
            return denied

        problem_service.delete_problem(problem_id)
        return success_response(message='Problem deleted successfully')
    except Exception as e:
        return service_error_response(e, 'delete problem')
