from __future__ import annotations

from flask import Blueprint, request, jsonify, abort
from sqlalchemy import select

from models import storage
from models.comment import Comment
from models.post import Post
from models.schemas.comment import CommentCreateSchema, CommentUpdateSchema, CommentOutSchema, ReplyOutSchema
from models.schemas.post import PostOutSchema
from utils.decorators import jwt_required

from .posts import get_visible_post
from .utils.pagination import parse_pagination, paginate, page_meta

bp = Blueprint("comments", __name__)

comment_create_schema = CommentCreateSchema()
comment_update_schema = CommentUpdateSchema()
comment_out_schema = CommentOutSchema()
comments_out_schema = CommentOutSchema(many=True)
replies_out_schema = ReplyOutSchema(many=True)
posts_out_schema = PostOutSchema(many=True)


def get_owned_comment(comment_id: int, user_id: int, action: str) -> Comment:
    comment = Comment.active().filter(Comment.id == comment_id).first()
    if not comment:
        abort(404, description="Comment not found")
    if comment.user_id != user_id:
        abort(403, description=f"You can only {action} your own comments")
    return comment


@bp.get("/posts/<int:post_id>/comments")
def list_comments(post_id: int):
    """
    Top-level comments of a post with their replies
    ---
    tags:
      - Comments
    parameters:
      - { in: path, name: post_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Post not found }
    """
    get_visible_post(post_id)
    rows = (
        Comment.active()
        .filter(Comment.post_id == post_id, Comment.parent_id.is_(None))
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )
    total = Comment.active().filter(Comment.post_id == post_id).count()
    return jsonify({"data": comments_out_schema.dump(rows), "meta": {"total": total}})


@bp.post("/posts/<int:post_id>/comments")
@jwt_required()
def create_comment(post_id: int, identity):
    """
    Comment on a post, or reply to a comment with parent_id
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: post_id, type: integer, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [content]
          properties:
            content: { type: string }
            parent_id: { type: integer }
    responses:
      201: { description: Created }
      400: { description: Validation error or parent not on this post }
      404: { description: Post not found }
    """
    get_visible_post(post_id, identity.user_id)
    payload = request.get_json(silent=True) or {}
    data = comment_create_schema.load(payload)

    parent_id = data.get("parent_id")
    if parent_id is not None:
        parent = Comment.active().filter(Comment.id == parent_id, Comment.post_id == post_id).first()
        if not parent:
            abort(400, description="Parent comment not found on this post")
        # replies to replies join the top-level thread
        parent_id = parent.parent_id or parent.id

    comment = Comment(
        post_id=post_id,
        user_id=identity.user_id,
        parent_id=parent_id,
        content=data["content"],
    )
    storage.new(comment)
    storage.save()

    return jsonify({"data": comment_out_schema.dump(comment)}), 201


@bp.put("/comments/<int:comment_id>")
@jwt_required()
def update_comment(comment_id: int, identity):
    """
    Edit a comment (owner only)
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: comment_id, type: integer, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [content]
          properties:
            content: { type: string }
    responses:
      200: { description: OK }
      403: { description: Not the owner }
      404: { description: Comment not found }
    """
    comment = get_owned_comment(comment_id, identity.user_id, "update")
    payload = request.get_json(silent=True) or {}
    data = comment_update_schema.load(payload)

    comment.content = data["content"]
    comment.save()
    return jsonify({"data": comment_out_schema.dump(comment)}), 200


@bp.delete("/comments/<int:comment_id>")
@jwt_required()
def delete_comment(comment_id: int, identity):
    """
    Delete a comment and its replies (owner only)
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: comment_id, type: integer, required: true }
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
      404: { description: Comment not found }
    """
    comment = get_owned_comment(comment_id, identity.user_id, "delete")
    for reply in comment.active_replies:
        reply.soft_delete(commit=False)
    comment.soft_delete(commit=False)
    storage.save()
    return jsonify({"message": "Comment deleted successfully"}), 200


@bp.get("/user/comments")
@jwt_required()
def commented_posts(identity):
    """
    Posts the caller has commented on
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    commented = select(Comment.post_id).where(
        Comment.user_id == identity.user_id, Comment.deleted_at.is_(None)
    )
    query = (
        Post.visible_query(identity.user_id)
        .filter(Post.id.in_(commented))
        .order_by(Post.created_at.desc())
    )
    rows, total = paginate(query, page, limit)
    return jsonify({"data": posts_out_schema.dump(rows), "meta": page_meta(page, limit, total)})


@bp.get("/user/responses")
@jwt_required()
def responses(identity):
    """
    Comments left by others on the caller's posts
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    query = (
        Comment.active()
        .join(Post, Post.id == Comment.post_id)
        .filter(Post.author_id == identity.user_id, Post.deleted_at.is_(None))
        .filter(Comment.user_id != identity.user_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    rows, total = paginate(query, page, limit)
    return jsonify({"data": replies_out_schema.dump(rows), "meta": page_meta(page, limit, total)})
