"""
Shared JSON response helpers for the API blueprints.

Service exceptions map to status codes:
    NotFoundError -> 404, ConflictError -> 409,
    InvalidInputError / ValueError / ValidationError -> 400,
    anything else -> 500 (rolled back and logged).
"""

from flask import jsonify, request
from flask_login import current_user
from pydantic import ValidationError
from models import db
from services.exceptions import ConflictError, NotFoundError
import logging

logger = logging.getLogger(__name__)


def success_response(data=None, status_code=200, message=None):
    body = {'success': True, 'data': data}
    if message:
        body['message'] = message
    return jsonify(body), status_code


def error_response(message, status_code, details=None):
    body = {'success': False, 'error': message}
    if details is not None:
        body['details'] = details
    return jsonify(body), status_code


def validation_error_response(e: ValidationError):
    details = [
        {'field': '.'.join(str(part) for part in err['loc']), 'message': err['msg']}
        for err in e.errors()
    ]
    logger.warning(f'Request validation failed: {details}')
    return error_response('Validation failed', 400, details)


def service_error_response(e: Exception, action: str):
    """Translate an exception raised while handling a request into a JSON error"""
    if isinstance(e, ValidationError):
        return validation_error_response(e)
    if isinstance(e, NotFoundError):
        return error_response(str(e), 404)
    if isinstance(e, ConflictError):
        return error_response(str(e), 409)
    if isinstance(e, ValueError):
        logger.warning(f'Invalid input while trying to {action}: {str(e)}')
        return error_response(str(e), 400)

    db.session.rollback()
    logger.exception(f'Error while trying to {action}: {str(e)}')
    return error_response(f'Failed to {action}. Please try again.', 500)


def forbidden_unless_owner(user_id):
    """Return a 403 response if user_id is not the logged-in user, else None"""
    if current_user.id != user_id:
        logger.warning(f'User {current_user.id} denied access to resources of user {user_id}')
        return error_response('Access denied', 403)
    return None


def get_json_body():
    """Request JSON as a dict; a missing or non-object body becomes {} and fails model validation"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
