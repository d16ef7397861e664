from flask import Blueprint, jsonify

from models.like import Like
from utils.decorators import jwt_required

from .posts import get_visible_post
from .utils.relations import add_relation, remove_relation, is_related

bp = Blueprint("likes", __name__)


def like_count(post_id: int) -> int:
    return Like.active().filter(Like.post_id == post_id).count()


@bp.post("/posts/<int:post_id>/like")
@jwt_required()
def like_post(post_id: int, identity):
    """
    Like a post
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: integer, required: true }
    responses:
      201: { description: Liked }
      404: { description: Post not found }
      409: { description: Already liked }
    """
    get_visible_post(post_id, identity.user_id)
    add_relation(Like, "Post already liked", user_id=identity.user_id, post_id=post_id)
    return jsonify({"message": "Post liked successfully", "like_count": like_count(post_id)}), 201


@bp.delete("/posts/<int:post_id>/like")
@jwt_required()
def unlike_post(post_id: int, identity):
    """
    Remove a like
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: integer, required: true }
    responses:
      200: { description: Unliked }
      404: { description: Post not found or not liked }
    """
    get_visible_post(post_id, identity.user_id)
    remove_relation(Like, "Like not found", user_id=identity.user_id, post_id=post_id)
    return jsonify({"message": "Post unliked successfully", "like_count": like_count(post_id)}), 200


@bp.get("/posts/<int:post_id>/like")
@jwt_required()
def like_status(post_id: int, identity):
    """
    Whether the caller likes a post
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Post not found }
    """
    get_visible_post(post_id, identity.user_id)
    return jsonify(
        {
            "liked": is_related(Like, user_id=identity.user_id, post_id=post_id),
            "like_count": like_count(post_id),
        }
    )


@bp.get("/posts/<int:post_id>/likes")
def post_likes(post_id: int):
    """
    Like count of a post
    ---
    tags:
      - Likes
    parameters:
      - { in: path, name: post_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Post not found }
    """
    get_visible_post(post_id)
    return jsonify({"post_id": post_id, "like_count": like_count(post_id)})
