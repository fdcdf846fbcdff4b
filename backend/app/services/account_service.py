"""
Demo account registration: register, log in, look up by id.

State lives behind AccountRepository, so restarts and additional
instances all see the same accounts.
"""
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from app.core.logging import get_logger
from app.core.security import hash_password, verify_password
from app.db.models import Account
from app.repositories.users import AccountRepository

logger = get_logger(__name__)


class MissingFieldsError(Exception):
    def __init__(self) -> None:
        super().__init__("All fields are required.")


class EmailTakenError(Exception):
    def __init__(self) -> None:
        super().__init__("Email is already registered.")


class AccountCredentialsError(Exception):
    def __init__(self) -> None:
        super().__init__("Invalid credentials.")


class AccountNotFoundError(Exception):
    def __init__(self) -> None:
        super().__init__("User not found.")


def _clean(value: str | None) -> str:
    return (value or "").strip()


def register_account(
    accounts: AccountRepository,
    name: str | None,
    email: str | None,
    password: str | None,
) -> Account:
    name, email = _clean(name), _clean(email).lower()
    if not name or not email or not password:
        raise MissingFieldsError()
    if accounts.find_by_email(email) is not None:
        raise EmailTakenError()

    account = Account(name=name, email=email, password_hash=hash_password(password))
    try:
        accounts.add(account)
    except IntegrityError as exc:
        accounts.rollback()
        raise EmailTakenError() from exc

    accounts.commit(account)
    logger.info("demo_account_registered", account_id=str(account.id))
    return account


def login_account(accounts: AccountRepository, email: str | None, password: str | None) -> Account:
    account = accounts.find_by_email(_clean(email).lower())
    if account is None or not password or not verify_password(password, account.password_hash):
        raise AccountCredentialsError()
    return account


def get_account(accounts: AccountRepository, account_id: str) -> Account:
    try:
        parsed = UUID(account_id)
    except ValueError as exc:
        raise AccountNotFoundError() from exc

    account = accounts.get(parsed)
    if account is None:
        raise AccountNotFoundError()
    return account
