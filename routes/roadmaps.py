from flask import Blueprint, jsonify
from flask_login import login_required
from routes.responses import (
    success_response,
    service_error_response,
    forbidden_unless_owner,
    get_json_body,
)
from schemas import RoadmapCreate, TopicCreate, SubtopicCreate
from services import roadmap_service
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('roadmaps', __name__, url_prefix='/api')


@bp.route('/roadmaps/test')
def test():
    return jsonify({'message': 'Roadmaps blueprint working'})


# Roadmaps

@bp.route('/users/<int:user_id>/roadmaps', methods=['POST'])
@login_required
def create_roadmap(user_id):
    denied = forbidden_unless_owner(user_id)
    if denied:
        return denied

    try:
        body = RoadmapCreate.model_validate(get_json_body())
        roadmap = roadmap_service.create_roadmap(
            user_id,
            title=body.title,
            description=body.description,
            color=body.color,
            is_public=body.is_public
        )
        return success_response(roadmap.to_dict(), 201, 'Roadmap created successfully')
    except Exception as e:
        return service_error_response(e, 'create roadmap')


@bp.route('/users/<int:user_id>/roadmaps', methods=['GET'])
@login_required
def list_roadmaps(user_id):
    denied = forbidden_unless_owner(user_id)
    if denied:
        return denied

    try:
        roadmaps = roadmap_service.get_user_roadmaps(user_id)
        return success_response([roadmap.to_dict() for roadmap in roadmaps])
    except Exception as e:
        return service_error_response(e, 'list roadmaps')


@bp.route('/roadmaps/<int:roadmap_id>', methods=['GET'])
@login_required
def get_roadmap(roadmap_id):
    """Get a roadmap with its topics and subtopics, recording the visit"""
    try:
        roadmap = roadmap_service.get_roadmap(roadmap_id)
        denied = forbidden_unless_owner(roadmap.user_id)
        if denied:
            return denied

        roadmap = roadmap_service.get_roadmap(roadmap_id, touch=True)
        return success_response(roadmap.to_dict())
    except Exception as e:
        return service_error_response(e, 'fetch roadmap')


@bp.route('/roadmaps/<int:roadmap_id>', methods=['DELETE'])
@login_required
def delete_roadmap(roadmap_id):
    try:
        roadmap = roadmap_service.get_roadmap(roadmap_id)
        denied = forbidden_unless_owner(roadmap.user_id)
        if denied:
            return denied

        roadmap_service.delete_roadmap(roadmap_id)
        return success_response(message='Roadmap deleted successfully')
    except Exception as e:
        return service_error_response(e, 'delete roadmap')


# Topics

@bp.route('/roadmaps/<int:roadmap_id>/topics', methods=['POST'])
@login_required
def create_topic(roadmap_id):
    try:
        roadmap = roadmap_service.get_roadmap(roadmap_id)
        denied = forbidden_unless_owner(roadmap.user_id)
        if denied:
            return denied

        body = TopicCreate.model_validate(get_json_body())
        topic = roadmap_service.create_topic(
            roadmap_id,
            title=body.title,
            description=body.description,
            order=body.order
        )
        return success_response(topic.to_dict(), 201, 'Topic created successfully')
    except Exception as e:
        return service_error_response(e, 'create topic')


def _set_topic_completed(topic_id, completed):
    topic = roadmap_service.get_topic(topic_id)
    denied = forbidden_unless_owner(topic.roadmap.user_id)
    if denied:
        return denied

    topic = roadmap_service.set_topic_completed(topic_id, completed)
    return success_response(topic.to_dict())


@bp.route('/topics/<int:topic_id>/complete', methods=['PUT'])
@login_required
def complete_topic(topic_id):
    try:
        return _set_topic_completed(topic_id, True)
    except Exception as e:
        return service_error_response(e, 'complete topic')


@bp.route('/topics/<int:topic_id>/uncomplete', methods=['PUT'])
@login_required
def uncomplete_topic(topic_id):
    try:
        return _set_topic_completed(topic_id, False)
    except Exception as e:
        return service_error_response(e, 'uncomplete topic')


# Subtopics

@bp.route('/topics/<int:topic_id>/subtopics', methods=['POST'])
@login_required
def create_subtopic(topic_id):
    """
    Add a subtopic. The response carries the parent topic's refreshed counters.

    Returns:
        {
            "success": true,
            "data": {
                "subtopic": {...},
                "topic": {"total_subtopics": int, "completed_subtopics": int, ...}
            }
        }
    """
    try:
        topic = roadmap_service.get_topic(topic_id)
        denied = forbidden_unless_owner(topic.roadmap.user_id)
        if denied:
            return denied

        body = SubtopicCreate.model_validate(get_json_body())
        subtopic = roadmap_service.create_subtopic(
            topic_id,
            title=body.title,
            description=body.description,
            order=body.order,
            difficulty=body.difficulty,
            estimated_time=body.estimated_time
        )
        return success_response(
            {
                'subtopic': subtopic.to_dict(),
                'topic': subtopic.topic.to_dict(include_subtopics=False)
            },
            201,
            'Subtopic created successfully'
        )
    except Exception as e:
        return service_error_response(e, 'create subtopic')


def _set_subtopic_completed(subtopic_id, completed):
    subtopic = roadmap_service.get_subtopic(subtopic_id)
    denied = forbidden_unless_owner(subtopic.topic.roadmap.user_id)
    if denied:
        return denied

    subtopic = roadmap_service.set_subtopic_completed(subtopic_id, completed)
    return success_response({
        'subtopic': subtopic.to_dict(),
        'topic': subtopic.topic.to_dict(include_subtopics=False)
    })


@bp.route('/subtopics/<int:subtopic_id>/complete', methods=['PUT'])
@login_required
def complete_subtopic(subtopic_id):
    try:
        return _set_subtopic_completed(subtopic_id, True)
    except Exception as e:
        return service_error_response(e, 'complete subtopic')


@bp.route('/subtopics/<int:subtopic_id>/uncomplete', methods=['PUT'])
@login_required
def uncomplete_subtopic(subtopic_id):
    try:
        return _set_subtopic_completed(subtopic_id, False)
    except Exception as e:
        return service_error_response(e, 'uncomplete subtopic')


@bp.route('/subtopics/<int:subtopic_id>', methods=['DELETE'])
@login_required
def delete_subtopic(subtopic_id):
    try:
        subtopic = roadmap_service.get_subtopic(subtopic_id)
        denied = forbidden_unless_owner(subtopic.topic.roadmap.user_id)
        if denied:
            return denied

        topic = roadmap_service.delete_subtopic(subtopic_id)
        return success_response(
            {'topic': topic.to_dict(include_subtopics=False)},
            message='Subtopic deleted successfully'
        )
    except Exception as e:
        return service_error_response(e, 'delete subtopic')
