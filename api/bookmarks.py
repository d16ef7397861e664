from flask import Blueprint, jsonify

from models.bookmark import Bookmark
from models.post import Post
from models.schemas.post import PostOutSchema
from utils.decorators import jwt_required

from .posts import get_visible_post
from .utils.pagination import parse_pagination, paginate, page_meta
from .utils.relations import add_relation, remove_relation, is_related

bp = Blueprint("bookmarks", __name__)

posts_out_schema = PostOutSchema(many=True)


@bp.post("/posts/<int:post_id>/bookmark")
@jwt_required()
def bookmark_post(post_id: int, identity):
    """
    Bookmark a post
    ---
    tags:
      - Bookmarks
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: integer, required: true }
    responses:
      201: { description: Bookmarked }
      404: { description: Post not found }
      409: { description: Already bookmarked }
    """
    get_visible_post(post_id, identity.user_id)
    add_relation(Bookmark, "Post already bookmarked", user_id=identity.user_id, post_id=post_id)
    return jsonify({"message": "Post bookmarked successfully"}), 201


@bp.delete("/posts/<int:post_id>/bookmark")
@jwt_required()
def remove_bookmark(post_id: int, identity):
    """
    Remove a bookmark
    ---
    tags:
      - Bookmarks
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: integer, required: true }
    responses:
      200: { description: Removed }
      404: { description: Post not found or not bookmarked }
    """
    get_visible_post(post_id, identity.user_id)
    remove_relation(Bookmark, "Bookmark not found", user_id=identity.user_id, post_id=post_id)
    return jsonify({"message": "Bookmark removed successfully"}), 200


@bp.get("/posts/<int:post_id>/bookmark")
@jwt_required()
def bookmark_status(post_id: int, identity):
    """
    Whether the caller bookmarked a post
    ---
    tags:
      - Bookmarks
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: integer, required: true }
    responses:
      200: { description: OK }
    """
    get_visible_post(post_id, identity.user_id)
    return jsonify({"bookmarked": is_related(Bookmark, user_id=identity.user_id, post_id=post_id)})


@bp.get("/user/bookmarks")
@jwt_required()
def list_bookmarks(identity):
    """
    The caller's bookmarked posts, newest bookmark first
    ---
    tags:
      - Bookmarks
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
        Post.visible_query(identity.user_id)
        .join(Bookmark, Bookmark.post_id == Post.id)
        .filter(Bookmark.user_id == identity.user_id, Bookmark.deleted_at.is_(None))
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
    )
    rows, total = paginate(query, page, limit)
    return jsonify({"data": posts_out_schema.dump(rows), "meta": page_meta(page, limit, total)})
