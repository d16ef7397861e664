"""
Application exception taxonomy.

Every error that can cross the HTTP boundary carries its status code and a
stable machine code; api.errors turns them into the uniform error envelope.
"""
from __future__ import annotations


class AppError(Exception):
    status_code = 400
    code = "BAD_REQUEST"
    default_message = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Authentication required"


class TokenError(Unauthenticated):
    default_message = "Invalid token"


class InvalidSignatureError(TokenError):
    default_message = "Token signature is invalid"


class ExpiredTokenError(TokenError):
    default_message = "Token has expired"


class MalformedTokenError(TokenError):
    default_message = "Token is malformed"


class Forbidden(AppError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class Conflict(AppError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Conflict"


class ConfigurationError(AppError):
    """Server-side misconfiguration; the message is never shown to clients."""
    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Server misconfiguration"


class HashingError(AppError):
    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Failed to process password"


class PasswordMismatchError(Exception):
    """Plaintext does not match the stored digest."""
