from datetime import timezone

from marshmallow import Schema, fields, validates, ValidationError

from models.schemas.user import AuthorOutSchema


def _title_length(s):
    if not 1 <= len(s.strip()) <= 255:
        raise ValidationError("title must be 1-255 characters.")


class PostCreateSchema(Schema):
    title = fields.String(required=True, validate=_title_length)
    content = fields.String(required=True)
    excerpt = fields.String(allow_none=True)
    cover_image = fields.String(allow_none=True)
    tags = fields.String(allow_none=True)
    published = fields.Boolean(load_default=False)
    unlisted = fields.Boolean(load_default=False)
    scheduled_at = fields.AwareDateTime(allow_none=True, default_timezone=timezone.utc)

    @validates("content")
    def _validate_content(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("content must not be empty.")


class PostUpdateSchema(Schema):
    # All optional, but validate if present
    title = fields.String(validate=_title_length)
    content = fields.String()
    excerpt = fields.String(allow_none=True)
    cover_image = fields.String(allow_none=True)
    tags = fields.String(allow_none=True)
    published = fields.Boolean()
    unlisted = fields.Boolean()
    scheduled_at = fields.AwareDateTime(allow_none=True, default_timezone=timezone.utc)

    @validates("content")
    def _validate_content(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("content must not be empty.")


class PostOutSchema(Schema):
    id = fields.Integer()
    title = fields.String()
    slug = fields.String()
    content = fields.String()
    excerpt = fields.String(allow_none=True)
    cover_image = fields.String(allow_none=True)
    tags = fields.String(allow_none=True)
    published = fields.Boolean()
    published_at = fields.DateTime(allow_none=True)
    scheduled_at = fields.DateTime(allow_none=True)
    unlisted = fields.Boolean()
    view_count = fields.Integer()
    read_time = fields.Integer()
    author_id = fields.Integer()
    author = fields.Nested(AuthorOutSchema)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
