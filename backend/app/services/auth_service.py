"""
Auth business logic: registration, login, profile and password changes.

All user reads and writes go through UserRepository.
"""
from sqlalchemy.exc import IntegrityError

from app.core.logging import get_logger
from app.core.security import create_access_token, hash_password, verify_password
from app.db.models import User
from app.repositories.users import UserRepository

logger = get_logger(__name__)


# ── Custom exceptions ────────────────────────────────────────────────────────


class DuplicateEmailError(Exception):
    """Raised when an email is already registered."""

    def __init__(self) -> None:
        super().__init__("A user with that email already exists")


class InvalidCredentialsError(Exception):
    """Raised when email/password do not match an active user."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class IncorrectPasswordError(Exception):
    """Raised when the current password given for a change is wrong."""

    def __init__(self) -> None:
        super().__init__("Current password is incorrect")


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ── Service functions ────────────────────────────────────────────────────────


def register_user(users: UserRepository, name: str, email: str, password: str) -> User:
    """
    Create a user with a bcrypt-hashed password.

    The unique index on email backs up the pre-check when two signups race.
    """
    normalized_email = normalize_email(email)
    if users.find_by_email(normalized_email) is not None:
        raise DuplicateEmailError()

    user = User(
        name=name,
        email=normalized_email,
        password_hash=hash_password(password),
    )
    try:
        users.add(user)
    except IntegrityError as exc:
        users.rollback()
        raise DuplicateEmailError() from exc

    users.commit(user)
    logger.info("user_registered", user_id=str(user.id))
    return user


def authenticate_user(users: UserRepository, email: str, password: str) -> User:
    """Return the active user for these credentials or raise InvalidCredentialsError."""
    user = users.find_by_email(normalize_email(email))
    if user is None or not user.is_active:
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        logger.info("login_failed", user_id=str(user.id))
        raise InvalidCredentialsError()
    return user


def issue_access_token(user: User) -> str:
    return create_access_token(user.id)


def update_profile(
    users: UserRepository,
    user: User,
    *,
    name: str | None = None,
    email: str | None = None,
) -> User:
    if email is not None:
        normalized_email = normalize_email(email)
        holder = users.find_by_email(normalized_email)
        if holder is not None and holder.id != user.id:
            raise DuplicateEmailError()
        user.email = normalized_email
    if name is not None:
        user.name = name

    try:
        users.flush()
    except IntegrityError as exc:
        users.rollback()
        raise DuplicateEmailError() from exc

    users.commit(user)
    logger.info("user_profile_updated", user_id=str(user.id))
    return user


def change_password(
    users: UserRepository,
    user: User,
    current_password: str,
    new_password: str,
) -> None:
    if not verify_password(current_password, user.password_hash):
        raise IncorrectPasswordError()
    user.password_hash = hash_password(new_password)
    users.commit()
    logger.info("user_password_changed", user_id=str(user.id))
