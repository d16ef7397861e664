from marshmallow import Schema, fields, validate

from models.schemas.user import AuthorOutSchema


class CommentCreateSchema(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1, max=5000))
    parent_id = fields.Integer(allow_none=True)


class CommentUpdateSchema(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1, max=5000))


class ReplyOutSchema(Schema):
    id = fields.Integer()
    post_id = fields.Integer()
    user_id = fields.Integer()
    parent_id = fields.Integer(allow_none=True)
    content = fields.String()
    author = fields.Nested(AuthorOutSchema)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class CommentOutSchema(ReplyOutSchema):
    # one level of replies; deeper nesting is flattened onto the parent thread
    replies = fields.Method("get_replies")

    def get_replies(self, obj):
        return ReplyOutSchema(many=True).dump(obj.active_replies)
