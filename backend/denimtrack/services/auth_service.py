# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Registration and credential checks.

Passwords are hashed with bcrypt (cost from BCRYPT_ROUNDS, 12 by default).
Login failures always produce the same message whether the username is
unknown or the password is wrong.
"""

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import ConflictError, UnauthorizedError, ValidationError
from ..extensions import db
from ..models import User
from ..permissions import is_valid_role
from . import token_service


INVALID_CREDENTIALS = "Invalid credentials."

# bcrypt only looks at the first 72 bytes and bcrypt>=5 refuses longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash password using bcrypt; the salt is embedded in the result."""
    if rounds is None:
        rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() compares in constant time. A malformed stored hash
    verifies as False rather than raising.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def register_user(username, password, role) -> User:
    """
    Create a user with a bcrypt password hash.

    Raises:
        ValidationError: missing fields, role not ADMIN/DATA_ENTRY or password over 72 bytes
        ConflictError: username already taken
    """
    if not username or not password or not role:
        raise ValidationError("Username, password, and role are required.")
    if not isinstance(username, str) or not isinstance(password, str):
        raise ValidationError("Username and password must be strings.")
    if not is_valid_role(role):
        raise ValidationError("Invalid role. Role must be ADMIN or DATA_ENTRY.")
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes.")

    username = username.strip()
    if not username:
        raise ValidationError("Username, password, and role are required.")

    existing = db.session.query(User).filter_by(username=username).first()
    if existing:
        raise ConflictError("Username already exists.")

    user = User(username=username, password_hash=hash_password(password), role=role)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration of the same name
        db.session.rollback()
        raise ConflictError("Username already exists.") from exc
    return user


def authenticate(username: str, password: str) -> User | None:
    """
    Return the User if credentials are valid, None otherwise.

    Central authentication function. All login flows go through here.
    """
    user = db.session.query(User).filter_by(username=username).first()
    if not user:
        return None

    if verify_password(password, user.password_hash):
        return user

    return None


def login(username, password) -> tuple[str, User]:
    """
    Check credentials and issue a signed token.

    Returns (token, user). Raises UnauthorizedError with the generic
    INVALID_CREDENTIALS message on any mismatch.
    """
    if not username or not password:
        raise ValidationError("Username and password are required.")
    if not isinstance(username, str) or not isinstance(password, str):
        raise UnauthorizedError(INVALID_CREDENTIALS)

    user = authenticate(username.strip(), password)
    if not user:
        raise UnauthorizedError(INVALID_CREDENTIALS)

    return token_service.issue_token(user), user
