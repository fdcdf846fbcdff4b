"""
Auth API: /auth
─────────────────
Endpoints:
  POST /auth/register         Create account, return user + token (201)
  POST /auth/login            Authenticate, return user + token
  GET  /auth/me               Current user profile
  PUT  /auth/profile          Change name and/or email
  POST /auth/change-password  Change password (requires current one)
"""
from fastapi import APIRouter, Depends, HTTPException, status

from app.db.models import User
from app.deps.auth import get_current_user, get_user_repository
from app.repositories.users import UserRepository
from app.schemas.auth import (
    AuthEnvelope,
    AuthSession,
    ChangePasswordRequest,
    LoginRequest,
    MessageEnvelope,
    RegisterRequest,
    UpdateProfileRequest,
    UserEnvelope,
    UserResponse,
)
from app.schemas.common import error_body
from app.services.auth_service import (
    DuplicateEmailError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    authenticate_user,
    change_password,
    issue_access_token,
    register_user,
    update_profile,
)

router = APIRouter()


def _session_for(user: User) -> AuthSession:
    return AuthSession(
        user=UserResponse.model_validate(user),
        token=issue_access_token(user),
    )


# ── Routes ────────────────────────────────────────────────────────────────────


@router.post(
    "/register",
    response_model=AuthEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    users: UserRepository = Depends(get_user_repository),
) -> AuthEnvelope:
    """
    Create a new account and sign it in.

    Returns 400 if the email is already registered.
    """
    try:
        user = register_user(
            users,
            name=payload.name,
            email=payload.email,
            password=payload.password,
        )
    except DuplicateEmailError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_body(str(exc)),
        ) from exc

    return AuthEnvelope(message="User registered successfully", data=_session_for(user))


@router.post("/login", response_model=AuthEnvelope)
def login(
    payload: LoginRequest,
    users: UserRepository = Depends(get_user_repository),
) -> AuthEnvelope:
    try:
        user = authenticate_user(users, email=payload.email, password=payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_body(str(exc)),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    return AuthEnvelope(message="Login successful", data=_session_for(user))


@router.get("/me", response_model=UserEnvelope)
def me(current_user: User = Depends(get_current_user)) -> UserEnvelope:
    return UserEnvelope(data=UserResponse.model_validate(current_user))


@router.put("/profile", response_model=UserEnvelope)
def edit_profile(
    payload: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> UserEnvelope:
    try:
        user = update_profile(users, current_user, name=payload.name, email=payload.email)
    except DuplicateEmailError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_body(str(exc)),
        ) from exc

    return UserEnvelope(
        message="Profile updated successfully",
        data=UserResponse.model_validate(user),
    )


@router.post("/change-password", response_model=MessageEnvelope)
def change_user_password(
    payload: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> MessageEnvelope:
    try:
        change_password(
            users,
            current_user,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    except IncorrectPasswordError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_body(str(exc)),
        ) from exc

    return MessageEnvelope(message="Password changed successfully")
