from flask import Blueprint, jsonify, request
from flask_login import login_required
from routes.responses import (
    success_response,
    service_error_response,
    forbidden_unless_owner,
    get_json_body,
)
from schemas import LearningItemCreate, LearningItemUpdate
from services import learning_service
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('learning', __name__, url_prefix='/api')


@bp.route('/learning-items/test')
def test():
    return jsonify({'message': 'Learning blueprint working'})


@bp.route('/users/<int:user_id>/learning-items', methods=['POST'])
@login_required
def create_learning_item(user_id):
    denied = forbidden_unless_owner(user_id)
    if denied:
        return denied

    try:
        item_data = LearningItemCreate.model_validate(get_json_body())
        item = learning_service.create_learning_item(user_id, item_data.model_dump())
        return success_response(item.to_dict(), 201, 'Learning item created successfully')
    except Exception as e:
        return service_error_response(e, 'create learning item')


@bp.route('/users/<int:user_id>/learning-items', methods=['GET'])
@login_required
def list_learning_items(user_id):
    """
    List a user's learning items, newest first.

    Query Parameters:
        type, status, difficulty (exact match)
        category (substring, case-insensitive)
    """
    denied = forbidden_unless_owner(user_id)
    if denied:
        return denied

    try:
        items = learning_service.get_user_learning_items(
            user_id,
            type=request.args.get('type'),
            category=request.args.get('category'),
            status=request.args.get('status'),
            difficulty=request.args.get('difficulty')
        )
        return success_response([item.to_dict() for item in items])
    except Exception as e:
        return service_error_response(e, 'list learning items')


@bp.route('/learning-items/<int:item_id>', methods=['GET'])
@login_required
def get_learning_item(item_id):
    try:
        item = learning_service.get_learning_item(item_id)
        denied = forbidden_unless_owner(item.user_id)
        if denied:
            return denied
        return success_response(item.to_dict())
    except Exception as e:
        return service_error_response(e, 'fetch learning item')


@bp.route('/learning-items/<int:item_id>', methods=['PUT'])
@login_required
def update_learning_item(item_id):
    try:
        item = learning_service.get_learning_item(item_id)
        denied = forbidden_unless_owner(item.user_id)
        if denied:
            return denied

        update_data = LearningItemUpdate.model_validate(get_json_body())
        item = learning_service.update_learning_item(
            item_id, update_data.model_dump(exclude_unset=True)
        )
        return success_response(item.to_dict(), message='Learning item updated successfully')
    except Exception as e:
        return service_error_response(e, 'update learning item')


@bp.route('/learning-items/<int:item_id>', methods=['DELETE'])
@login_required
def delete_learning_item(item_id):
    try:
        item = learning_service.get_learning_item(item_id)
        denied = forbidden_unless_owner(item.user_id)
        if denied:
            return denied

        learning_service.delete_learning_item(item_id)
        return success_response(message='Learning item deleted successfully')
    except Exception as e:
        return service_error_response(e, 'delete learning item')
