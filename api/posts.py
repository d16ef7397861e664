from __future__ import annotations

import secrets
import time
from datetime import datetime, timezone

from flask import Blueprint, request, jsonify, abort

from models import storage
from models.post import Post
from models.schemas.post import PostCreateSchema, PostUpdateSchema, PostOutSchema
from utils.decorators import jwt_required, jwt_optional
from utils.text import read_time, slugify

from .utils.pagination import parse_pagination, paginate, page_meta

bp = Blueprint("posts", __name__)

post_create_schema = PostCreateSchema()
post_update_schema = PostUpdateSchema()
post_out_schema = PostOutSchema()
posts_out_schema = PostOutSchema(many=True)

# Sorting allowlist: API value -> ORDER BY
SORTS = {
    "latest": (Post.created_at.desc(), Post.id.desc()),
    "views": (Post.view_count.desc(), Post.created_at.desc()),
}

# static routes under /posts/ that a slug must not shadow
RESERVED_SLUGS = {"my", "staff-picks"}


def unique_slug(title: str, exclude_id: int | None = None) -> str:
    """Slug for title, suffixed with a timestamp (then random hex) on collision."""
    session = storage.get_session()

    def taken(slug: str) -> bool:
        if slug in RESERVED_SLUGS:
            return True
        query = session.query(Post.id).filter(Post.slug == slug)
        if exclude_id is not None:
            query = query.filter(Post.id != exclude_id)
        return query.first() is not None

    base = slugify(title)
    if not taken(base):
        return base
    candidate = f"{base}-{int(time.time())}"
    while taken(candidate):
        candidate = f"{base}-{int(time.time())}-{secrets.token_hex(3)}"
    return candidate


def get_visible_post(post_id: int, viewer_id: int | None = None) -> Post:
    """Active post the viewer may see; drafts only for their author, else 404."""
    post = Post.active().filter(Post.id == post_id).first()
    if not post or not post.visible_to(viewer_id):
        abort(404, description="Post not found")
    return post


def get_owned_post(post_id: int, user_id: int, action: str) -> Post:
    post = Post.active().filter(Post.id == post_id).first()
    if not post:
        abort(404, description="Post not found")
    if post.author_id != user_id:
        abort(403, description=f"You can only {action} your own posts")
    return post


@bp.get("/posts")
def list_posts():
    """
    List published posts
    ---
    tags:
      - Posts
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10, maximum: 100 }
      - { in: query, name: sort, type: string, enum: [latest, views], default: latest }
    responses:
      200: { description: OK }
      400: { description: Bad query parameters }
    """
    page, limit = parse_pagination()
    sort = request.args.get("sort", "latest")
    if sort not in SORTS:
        abort(400, description="Unsupported sort. Allowed: latest, views")

    query = Post.published_query().order_by(*SORTS[sort])
    rows, total = paginate(query, page, limit)
    return jsonify(
        {
            "data": posts_out_schema.dump(rows),
            "meta": page_meta(page, limit, total),
        }
    )


@bp.get("/posts/staff-picks")
def staff_picks():
    """
    Top three published posts by views
    ---
    tags:
      - Posts
    responses:
      200: { description: OK }
    """
    rows = Post.published_query().order_by(*SORTS["views"]).limit(3).all()
    return jsonify({"data": posts_out_schema.dump(rows)})


@bp.get("/posts/my")
@jwt_required()
def my_posts(identity):
    """
    All of the caller's posts, drafts included
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    rows = (
        Post.active()
        .filter(Post.author_id == identity.user_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )
    return jsonify({"data": posts_out_schema.dump(rows), "meta": {"total": len(rows)}})


@bp.get("/posts/<slug>")
@jwt_optional()
def get_post(slug: str, identity):
    """
    Fetch a post by slug and count the view. Drafts are visible only to their author.
    ---
    tags:
      - Posts
    parameters:
      - { in: path, name: slug, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Post not found }
    """
    post = Post.active().filter(Post.slug == slug).first()
    viewer_id = identity.user_id if identity else None
    if not post or not post.visible_to(viewer_id):
        abort(404, description="Post not found")

    session = storage.get_session()
    # increment in SQL so concurrent readers don't lose counts
    session.query(Post).filter(Post.id == post.id).update(
        {Post.view_count: Post.view_count + 1}, synchronize_session=False
    )
    storage.save()
    session.refresh(post)

    return jsonify({"data": post_out_schema.dump(post)})


@bp.post("/posts")
@jwt_required()
def create_post(identity):
    """
    Create a post
    ---
    tags:
      - Posts
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
          required: [title, content]
          properties:
            title: { type: string, maxLength: 255 }
            content: { type: string }
            excerpt: { type: string }
            cover_image: { type: string }
            tags: { type: string, description: "comma-separated" }
            published: { type: boolean, default: false }
            unlisted: { type: boolean, default: false }
            scheduled_at: { type: string, format: date-time }
    responses:
      201: { description: Created }
      400: { description: Validation error }
      401: { description: Unauthorized }
    """
    payload = request.get_json(silent=True) or {}
    data = post_create_schema.load(payload)

    post = Post(
        title=data["title"].strip(),
        slug=unique_slug(data["title"]),
        content=data["content"],
        excerpt=data.get("excerpt"),
        cover_image=data.get("cover_image"),
        tags=data.get("tags"),
        published=data["published"],
        unlisted=data["unlisted"],
        scheduled_at=data.get("scheduled_at"),
        read_time=read_time(data["content"]),
        view_count=0,
        author_id=identity.user_id,
    )
    if post.published:
        post.published_at = datetime.now(timezone.utc)

    storage.new(post)
    storage.save()

    return jsonify({"data": post_out_schema.dump(post)}), 201


@bp.put("/posts/<int:post_id>")
@jwt_required()
def update_post(post_id: int, identity):
    """
    Update a post (author only)
    ---
    tags:
      - Posts
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
          properties:
            title: { type: string }
            content: { type: string }
            excerpt: { type: string }
            cover_image: { type: string }
            tags: { type: string }
            published: { type: boolean }
            unlisted: { type: boolean }
            scheduled_at: { type: string, format: date-time }
    responses:
      200: { description: OK }
      400: { description: Validation error }
      403: { description: Not the author }
      404: { description: Post not found }
    """
    post = get_owned_post(post_id, identity.user_id, "update")
    payload = request.get_json(silent=True) or {}
    data = post_update_schema.load(payload)

    if "title" in data and data["title"].strip() != post.title:
        post.title = data["title"].strip()
        post.slug = unique_slug(post.title, exclude_id=post.id)
    if "content" in data:
        post.content = data["content"]
        post.read_time = read_time(post.content)
    for field in ("excerpt", "cover_image", "tags", "unlisted", "scheduled_at"):
        if field in data:
            setattr(post, field, data[field])
    if "published" in data:
        if data["published"] and post.published_at is None:
            post.published_at = datetime.now(timezone.utc)
        post.published = data["published"]

    post.save()
    return jsonify({"data": post_out_schema.dump(post)}), 200


@bp.delete("/posts/<int:post_id>")
@jwt_required()
def delete_post(post_id: int, identity):
    """
    Delete a post (author only, soft delete)
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: integer, required: true }
    responses:
      200: { description: Deleted }
      403: { description: Not the author }
      404: { description: Post not found }
    """
    post = get_owned_post(post_id, identity.user_id, "delete")
    post.delete()
    return jsonify({"message": "Post deleted successfully"}), 200
