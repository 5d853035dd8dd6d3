import re

from werkzeug.security import generate_password_hash, check_password_hash

# Compile once at module import
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d).{6,}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def generate_hash(password: str) -> str:
    return generate_password_hash(password)


def check_hash(password: str, hashed: str) -> bool:
    try:
        return check_password_hash(hashed, password)
    except (TypeError, ValueError):
        return False


def valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def valid_password(password: str) -> bool:
    """At least 6 characters with at least one letter and one digit."""
    return bool(PASSWORD_PATTERN.match(password or ""))
