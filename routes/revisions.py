from datetime import date
from flask import Blueprint, jsonify, request
from flask_login import login_required
from routes.responses import (
    success_response,
    service_error_response,
    forbidden_unless_owner,
    get_json_body,
)
from schemas import RevisionItemCreate
from services import revision_service
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('revisions', __name__, url_prefix='/api')


@bp.route('/revision-items/test')
def test():
    return jsonify({'message': 'Revisions blueprint working'})


def _parse_bool(value):
    if value is None:
        return None
    return value.lower() in ('true', '1', 'yes')


@bp.route('/users/<int:user_id>/revision-items', methods=['POST'])
@login_required
def create_revision_item(user_id):
    """
    Schedule a revision by hand.

    Request Body:
        {
            "item_id": int,
            "item_type": "problem" | "learning",
            "original_date": "YYYY-MM-DD",
            "next_revision_date": "YYYY-MM-DD",
            "revision_cycle": int (optional, default 1)
        }
    """
    denied = forbidden_unless_owner(user_id)
    if denied:
        return denied

    try:
        body = RevisionItemCreate.model_validate(get_json_body())
        revision_item = revision_service.create_revision_item(
            user_id,
            item_id=body.item_id,
            item_type=body.item_type,
            original_date=body.original_date,
            next_revision_date=body.next_revision_date,
            revision_cycle=body.revision_cycle
        )
        return success_response(revision_item.to_dict(), 201, 'Revision item created successfully')
    except Exception as e:
        return service_error_response(e, 'create revision item')


@bp.route('/users/<int:user_id>/revision-items', methods=['GET'])
@login_required
def list_revision_items(user_id):
    """
    List a user's revisions, soonest first, each with its problem or learning item.

    Query Parameters:
        due_date (YYYY-MM-DD, optional): Only revisions due on this day
        is_completed (true/false, optional)
    """
    denied = forbidden_unless_owner(user_id)
    if denied:
        return denied

    try:
        due_date = request.args.get('due_date')
        revision_items = revision_service.get_user_revision_items(
            user_id,
            due_date=date.fromisoformat(due_date) if due_date else None,
            is_completed=_parse_bool(request.args.get('is_completed'))
        )
        return success_response(revision_items)
    except Exception as e:
        return service_error_response(e, 'list revision items')


@bp.route('/revision-items/<int:revision_item_id>/complete', methods=['PUT'])
@login_required
def complete_revision_item(revision_item_id):
    """
    Mark a revision done and schedule the next cycle.

    Returns:
        {
            "success": true,
            "data": {
                "completed": {...},
                "next": {...}
            }
        }
    """
    try:
        revision_item = revision_service.get_revision_item(revision_item_id)
        denied = forbidden_unless_owner(revision_item.user_id)
        if denied:
            return denied

        result = revision_service.complete_revision_item(revision_item_id)
        return success_response(
            {
                'completed': result['completed'].to_dict(),
                'next': result['next'].to_dict()
            },
            message='Revision completed successfully'
        )
    except Exception as e:
        return service_error_response(e, 'complete revision item')
