from __future__ import annotations

from flask import Blueprint, jsonify, abort
from sqlalchemy import select

from models.follow import Follow
from models.post import Post
from models.user import User
from models.schemas.user import AuthorOutSchema
from models.schemas.post import PostOutSchema
from utils.decorators import jwt_required

from .users import get_user_by_username, follower_count
from .utils.pagination import parse_pagination, paginate, page_meta
from .utils.relations import add_relation, remove_relation, is_related

bp = Blueprint("follows", __name__)

author_out_schema = AuthorOutSchema()
posts_out_schema = PostOutSchema(many=True)

MAX_SUGGESTIONS = 10


def _followed_ids(user_id: int):
    return select(Follow.following_id).where(Follow.follower_id == user_id, Follow.deleted_at.is_(None))


def _with_follower_counts(users) -> list:
    out = []
    for user in users:
        data = author_out_schema.dump(user)
        data["bio"] = user.bio
        data["followers_count"] = follower_count(user.id)
        out.append(data)
    return out


@bp.post("/users/<username>/follow")
@jwt_required()
def follow_user(username: str, identity):
    """
    Follow a writer
    ---
    tags:
      - Follows
    security:
      - Bearer: []
    parameters:
      - { in: path, name: username, type: string, required: true }
    responses:
      201: { description: Following }
      400: { description: Cannot follow yourself }
      404: { description: User not found }
      409: { description: Already following }
    """
    target = get_user_by_username(username)
    if target.id == identity.user_id:
        abort(400, description="Cannot follow yourself")
    add_relation(Follow, "Already following this user", follower_id=identity.user_id, following_id=target.id)
    return jsonify({"message": f"Now following {target.username}"}), 201


@bp.delete("/users/<username>/follow")
@jwt_required()
def unfollow_user(username: str, identity):
    """
    Unfollow a writer
    ---
    tags:
      - Follows
    security:
      - Bearer: []
    parameters:
      - { in: path, name: username, type: string, required: true }
    responses:
      200: { description: Unfollowed }
      404: { description: User not found or not followed }
    """
    target = get_user_by_username(username)
    remove_relation(Follow, "Not following this user", follower_id=identity.user_id, following_id=target.id)
    return jsonify({"message": f"Unfollowed {target.username}"}), 200


@bp.get("/users/<username>/follow")
@jwt_required()
def follow_status(username: str, identity):
    """
    Whether the caller follows a writer
    ---
    tags:
      - Follows
    security:
      - Bearer: []
    parameters:
      - { in: path, name: username, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    target = get_user_by_username(username)
    return jsonify(
        {"following": is_related(Follow, follower_id=identity.user_id, following_id=target.id)}
    )


@bp.get("/feed/following")
@jwt_required()
def following_feed(identity):
    """
    Published posts from followed writers, newest first
    ---
    tags:
      - Follows
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    query = (
        Post.published_query()
        .filter(Post.author_id.in_(_followed_ids(identity.user_id)))
        .order_by(Post.published_at.desc(), Post.id.desc())
    )
    rows, total = paginate(query, page, limit)
    return jsonify({"data": posts_out_schema.dump(rows), "meta": page_meta(page, limit, total)})


@bp.get("/users/suggested")
@jwt_required()
def suggested_users(identity):
    """
    Writers the caller does not follow yet
    ---
    tags:
      - Follows
    security:
      - Bearer: []
    parameters:
      - { in: query, name: limit, type: integer, default: 3, maximum: 10 }
    responses:
      200: { description: OK }
    """
    _, limit = parse_pagination(default_limit=3, max_limit=MAX_SUGGESTIONS)
    users = (
        User.active()
        .filter(User.id != identity.user_id)
        .filter(User.id.notin_(_followed_ids(identity.user_id)))
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify({"data": _with_follower_counts(users)})


@bp.get("/user/following")
@jwt_required()
def following_list(identity):
    """
    Writers the caller follows
    ---
    tags:
      - Follows
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    users = (
        User.active()
        .filter(User.id.in_(_followed_ids(identity.user_id)))
        .order_by(User.username.asc())
        .all()
    )
    return jsonify({"data": _with_follower_counts(users)})
