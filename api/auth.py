"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout

Access tokens are short-lived JWTs carrying the user's identity; refresh
tokens are long-lived JWTs that are also persisted and only mint new access
tokens. Logout revokes the access token and deletes the refresh token.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.user import (
    LogoutRequestSchema,
    RefreshRequestSchema,
    UserLoginSchema,
    UserOutSchema,
    UserRegisterSchema,
)
from services.auth_service import AuthService
from utils.settings import get_auth_settings

bp = Blueprint("auth", __name__)

register_schema = UserRegisterSchema()
login_schema = UserLoginSchema()
refresh_schema = RefreshRequestSchema()
logout_schema = LogoutRequestSchema()
user_out_schema = UserOutSchema()


def _service() -> AuthService:
    return AuthService(get_auth_settings())


@bp.post("/register")
def register():
    """
    Register a new user. No tokens are issued; log in afterwards.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [email, password, username]
          properties:
            email: { type: string, format: email }
            password: { type: string, description: "8+ chars with upper, lower and digit" }
            username: { type: string, description: "3-30 chars of letters, digits, underscore" }
            full_name: { type: string }
            bio: { type: string }
            avatar: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Email or username already exists
    """
    payload = request.get_json(silent=True) or {}
    data = register_schema.load(payload)

    user = _service().register(**data)

    return jsonify(
        {
            "message": "Registration successful. Please login to continue.",
            "user": user_out_schema.dump(user),
        }
    ), 201


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK (returns tokens and the user profile)
      400:
        description: Validation error
      401:
        description: Invalid email or password
    """
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)

    result = _service().login(data["email"], data["password"])

    return jsonify(
        {
            "access_token": result.access_token,
            "refresh_token": result.refresh_token,
            "user": user_out_schema.dump(result.user),
        }
    ), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access token (the refresh token is kept)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [refresh_token]
          properties:
            refresh_token: { type: string }
    responses:
      200:
        description: OK (returns access_token)
      401:
        description: Invalid, expired or unknown refresh token
      404:
        description: User no longer exists
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_schema.load(payload)

    access_token = _service().refresh_access_token(data["refresh_token"])

    return jsonify({"access_token": access_token}), 200


@bp.post("/logout")
def logout():
    """
    Logout: revoke the access token and delete the refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [access_token, refresh_token]
          properties:
            access_token: { type: string }
            refresh_token: { type: string }
    responses:
      200:
        description: Logged out (repeating the call also succeeds)
      401:
        description: Invalid access token
    """
    payload = request.get_json(silent=True) or {}
    data = logout_schema.load(payload)

    _service().logout(data["access_token"], data["refresh_token"])

    return jsonify({"message": "Logged out successfully"}), 200
