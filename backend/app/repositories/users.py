"""
User and demo-account repositories.

Both expose the same two capabilities the registration flows need:
add a record, and find one by predicate. Callers get a repository
object, never the table.
"""
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy.orm import Session

from app.db.models import Account, Base, User

ModelT = TypeVar("ModelT", bound=Base)


class _Repository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, db: Session) -> None:
        self.db = db

    def add(self, row: ModelT) -> ModelT:
        """Stage and flush *row*; IntegrityError propagates to the caller."""
        self.db.add(row)
        self.db.flush()
        return row

    def flush(self) -> None:
        self.db.flush()

    def find_one(self, *predicates) -> ModelT | None:
        return self.db.query(self.model).filter(*predicates).first()

    def get(self, row_id: UUID) -> ModelT | None:
        return self.find_one(self.model.id == row_id)

    def commit(self, row: ModelT | None = None) -> None:
        self.db.commit()
        if row is not None:
            self.db.refresh(row)

    def rollback(self) -> None:
        self.db.rollback()


class UserRepository(_Repository[User]):
    model = User

    def find_by_email(self, email: str) -> User | None:
        return self.find_one(User.email == email)


class AccountRepository(_Repository[Account]):
    model = Account

    def find_by_email(self, email: str) -> Account | None:
        return self.find_one(Account.email == email)
