"""
Request dependencies shared across protected endpoints.

Usage in any route:
    from app.deps.auth import get_current_user, get_media_repository

    @router.get("/protected")
    def protected(repo: OwnedMediaRepository = Depends(get_media_repository)):
        ...
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.security import resolve_token_subject
from app.db.models import User
from app.db.session import get_db
from app.repositories.media import OwnedMediaRepository
from app.repositories.users import UserRepository
from app.schemas.common import error_body

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error_body(message),
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Resolve the bearer token to an active User.

    Raises 401 on any failure (missing/invalid token, unknown user, inactive).
    """
    if not token:
        raise _unauthorized("No token, authorization denied")

    user_id = resolve_token_subject(token)
    if user_id is None:
        raise _unauthorized("Token is not valid")

    user = users.get(user_id)
    if user is None:
        raise _unauthorized("Token is not valid")

    if not user.is_active:
        raise _unauthorized("Account is deactivated")

    return user


def get_media_repository(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> OwnedMediaRepository:
    """Media access bound to the caller; the only way routes reach media_items."""
    return OwnedMediaRepository(db, current_user.id)
