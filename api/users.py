from __future__ import annotations

from flask import Blueprint, jsonify, abort

from models import storage
from models.follow import Follow
from models.post import Post
from models.user import User
from models.schemas.user import UserOutSchema, ProfileOutSchema
from models.schemas.post import PostOutSchema
from utils.decorators import jwt_required

from .utils.pagination import parse_pagination, paginate, page_meta

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()
profile_out_schema = ProfileOutSchema()
posts_out_schema = PostOutSchema(many=True)


def get_user_by_username(username: str) -> User:
    user = User.active().filter(User.username == username).first()
    if not user:
        abort(404, description="User not found")
    return user


def follower_count(user_id: int) -> int:
    return Follow.active().filter(Follow.following_id == user_id).count()


def following_count(user_id: int) -> int:
    return Follow.active().filter(Follow.follower_id == user_id).count()


@bp.get("/user/me")
@jwt_required()
def me(identity):
    """
    Get the authenticated user
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      404:
        description: User no longer exists
    """
    user = storage.get(User, identity.user_id)
    if not user or not user.is_active:
        abort(404, description="User not found")
    return jsonify({"user": user_out_schema.dump(user)}), 200


@bp.get("/users/<username>")
def profile(username: str):
    """
    Public profile with follower and following counts
    ---
    tags:
      - Users
    parameters:
      - { in: path, name: username, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    user = get_user_by_username(username)
    data = profile_out_schema.dump(user)
    data.update(
        followers_count=follower_count(user.id),
        following_count=following_count(user.id),
        posts_count=Post.published_query().filter(Post.author_id == user.id).count(),
    )
    return jsonify({"user": data})


@bp.get("/users/<username>/posts")
def user_posts(username: str):
    """
    A user's published posts, newest first
    ---
    tags:
      - Users
    parameters:
      - { in: path, name: username, type: string, required: true }
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    user = get_user_by_username(username)
    page, limit = parse_pagination()
    query = (
        Post.published_query()
        .filter(Post.author_id == user.id)
        .order_by(Post.published_at.desc(), Post.id.desc())
    )
    rows, total = paginate(query, page, limit)
    return jsonify({"data": posts_out_schema.dump(rows), "meta": page_meta(page, limit, total)})
