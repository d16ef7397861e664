from marshmallow import Schema, fields, pre_load, validate

from models.schemas.common import normalize_email


class UserRegisterSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    username = fields.String(required=True)
    full_name = fields.String(allow_none=True, validate=validate.Length(max=255))
    bio = fields.String(allow_none=True)
    avatar = fields.String(allow_none=True, validate=validate.Length(max=500))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = normalize_email(data["email"])
        return data


class UserLoginSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = normalize_email(data["email"])
        return data


class RefreshRequestSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class LogoutRequestSchema(Schema):
    access_token = fields.String(required=True, validate=validate.Length(min=1))
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.Integer()
    email = fields.String()
    username = fields.String()
    full_name = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)
    avatar = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class AuthorOutSchema(Schema):
    """Public view of a user embedded in posts and comments (no email)."""
    id = fields.Integer()
    username = fields.String()
    full_name = fields.String(allow_none=True)
    avatar = fields.String(allow_none=True)


class ProfileOutSchema(AuthorOutSchema):
    bio = fields.String(allow_none=True)
    created_at = fields.DateTime()
