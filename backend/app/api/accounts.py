"""
Demo Account Service: /api
────────────────────────────
Endpoints:
  POST /api/register     Register (201)
  POST /api/login        Check credentials
  GET  /api/user/{id}    Look up one account

Kept separate from /auth: no tokens, its own table, and its own
{message, user} / {error} response shape.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.repositories.users import AccountRepository
from app.schemas.accounts import (
    AccountLoginRequest,
    AccountMessage,
    AccountRegisterRequest,
    AccountResponse,
)
from app.services.account_service import (
    AccountCredentialsError,
    AccountNotFoundError,
    EmailTakenError,
    MissingFieldsError,
    get_account,
    login_account,
    register_account,
)

router = APIRouter()


def get_account_repository(db: Session = Depends(get_db)) -> AccountRepository:
    return AccountRepository(db)


def _error(status_code: int, exc: Exception) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error": str(exc)})


@router.post("/register", response_model=AccountMessage, status_code=status.HTTP_201_CREATED)
def register(
    payload: AccountRegisterRequest,
    accounts: AccountRepository = Depends(get_account_repository),
) -> AccountMessage:
    try:
        account = register_account(accounts, payload.name, payload.email, payload.password)
    except (MissingFieldsError, EmailTakenError) as exc:
        raise _error(status.HTTP_400_BAD_REQUEST, exc) from exc

    return AccountMessage(
        message="User registered successfully.",
        user=AccountResponse.model_validate(account),
    )


@router.post("/login", response_model=AccountMessage)
def login(
    payload: AccountLoginRequest,
    accounts: AccountRepository = Depends(get_account_repository),
) -> AccountMessage:
    try:
        account = login_account(accounts, payload.email, payload.password)
    except AccountCredentialsError as exc:
        raise _error(status.HTTP_401_UNAUTHORIZED, exc) from exc

    return AccountMessage(
        message="Login successful.",
        user=AccountResponse.model_validate(account),
    )


@router.get("/user/{account_id}", response_model=AccountResponse)
def get_user(
    account_id: str,
    accounts: AccountRepository = Depends(get_account_repository),
) -> AccountResponse:
    try:
        account = get_account(accounts, account_id)
    except AccountNotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, exc) from exc

    return AccountResponse.model_validate(account)
