from __future__ import annotations

from flask import Blueprint, request, jsonify, abort
from sqlalchemy import or_

from models import storage
from models.topic import Topic, TopicFollow
from models.schemas.topic import TopicCreateSchema, TopicOutSchema
from utils.decorators import jwt_required
from utils.text import slugify

from .utils.relations import add_relation, remove_relation, is_related

bp = Blueprint("topics", __name__)

topic_create_schema = TopicCreateSchema()
topic_out_schema = TopicOutSchema()
topics_out_schema = TopicOutSchema(many=True)


def get_topic(slug: str) -> Topic:
    topic = Topic.active().filter(Topic.slug == slug).first()
    if not topic:
        abort(404, description="Topic not found")
    return topic


def topic_follower_count(topic_id: int) -> int:
    return TopicFollow.active().filter(TopicFollow.topic_id == topic_id).count()


@bp.get("/topics")
def list_topics():
    """
    All topics, by name
    ---
    tags:
      - Topics
    responses:
      200: { description: OK }
    """
    rows = Topic.active().order_by(Topic.name.asc()).all()
    return jsonify({"data": topics_out_schema.dump(rows)})


@bp.get("/topics/<slug>")
def get_topic_detail(slug: str):
    """
    A topic with its follower count
    ---
    tags:
      - Topics
    parameters:
      - { in: path, name: slug, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Topic not found }
    """
    topic = get_topic(slug)
    data = topic_out_schema.dump(topic)
    data["followers_count"] = topic_follower_count(topic.id)
    return jsonify({"data": data})


@bp.post("/topics")
@jwt_required()
def create_topic(identity):
    """
    Create a topic
    ---
    tags:
      - Topics
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name]
          properties:
            name: { type: string, maxLength: 100 }
            description: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error }
      409: { description: Topic already exists }
    """
    payload = request.get_json(silent=True) or {}
    data = topic_create_schema.load(payload)

    name = data["name"].strip()
    slug = slugify(name, fallback="topic")
    session = storage.get_session()
    if session.query(Topic.id).filter(or_(Topic.name == name, Topic.slug == slug)).first():
        abort(409, description="Topic already exists")

    topic = Topic(name=name, slug=slug, description=data.get("description"))
    storage.new(topic)
    storage.save()

    return jsonify({"data": topic_out_schema.dump(topic)}), 201


@bp.post("/topics/<slug>/follow")
@jwt_required()
def follow_topic(slug: str, identity):
    """
    Follow a topic
    ---
    tags:
      - Topics
    security:
      - Bearer: []
    parameters:
      - { in: path, name: slug, type: string, required: true }
    responses:
      201: { description: Following }
      404: { description: Topic not found }
      409: { description: Already following }
    """
    topic = get_topic(slug)
    add_relation(TopicFollow, "Already following this topic", user_id=identity.user_id, topic_id=topic.id)
    return jsonify({"message": f"Now following {topic.name}"}), 201


@bp.delete("/topics/<slug>/follow")
@jwt_required()
def unfollow_topic(slug: str, identity):
    """
    Unfollow a topic
    ---
    tags:
      - Topics
    security:
      - Bearer: []
    parameters:
      - { in: path, name: slug, type: string, required: true }
    responses:
      200: { description: Unfollowed }
      404: { description: Topic not found or not followed }
    """
    topic = get_topic(slug)
    remove_relation(TopicFollow, "Not following this topic", user_id=identity.user_id, topic_id=topic.id)
    return jsonify({"message": f"Unfollowed {topic.name}"}), 200


@bp.get("/topics/<slug>/follow")
@jwt_required()
def topic_follow_status(slug: str, identity):
    """
    Whether the caller follows a topic
    ---
    tags:
      - Topics
    security:
      - Bearer: []
    parameters:
      - { in: path, name: slug, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Topic not found }
    """
    topic = get_topic(slug)
    return jsonify({"following": is_related(TopicFollow, user_id=identity.user_id, topic_id=topic.id)})


@bp.get("/user/topics")
@jwt_required()
def followed_topics(identity):
    """
    Topics the caller follows
    ---
    tags:
      - Topics
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    rows = (
        Topic.active()
        .join(TopicFollow, TopicFollow.topic_id == Topic.id)
        .filter(TopicFollow.user_id == identity.user_id, TopicFollow.deleted_at.is_(None))
        .order_by(Topic.name.asc())
        .all()
    )
    return jsonify({"data": topics_out_schema.dump(rows)})
