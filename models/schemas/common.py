import re

from marshmallow import ValidationError

USERNAME_RE = re.compile(r"[A-Za-z0-9_]+")


def normalize_email(raw):
    return raw.strip().lower() if isinstance(raw, str) else raw


def validate_password_strength(password: str, min_length: int = 8) -> None:
    """At least min_length chars with an uppercase letter, a lowercase letter and a digit."""
    if not isinstance(password, str) or len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters long.")
    problems = []
    if not any(ch.isupper() for ch in password):
        problems.append("an uppercase letter")
    if not any(ch.islower() for ch in password):
        problems.append("a lowercase letter")
    if not any(ch.isdigit() for ch in password):
        problems.append("a digit")
    if problems:
        raise ValidationError("Password must contain " + ", ".join(problems) + ".")


def validate_username(username: str, min_length: int = 3, max_length: int = 30) -> None:
    if not isinstance(username, str) or not (min_length <= len(username) <= max_length):
        raise ValidationError(f"Username must be between {min_length} and {max_length} characters.")
    if not USERNAME_RE.fullmatch(username):
        raise ValidationError("Username may only contain letters, digits and underscores.")
