"""
Shared test scaffolding: an in-memory SQLite database per test case and
helpers to seed it.
"""
from collections.abc import Generator
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.models import Base, User
from app.db.session import get_db
from app.repositories.media import OwnedMediaRepository
from app.schemas.media import CreateMediaRequest
from app.services.media_service import create_media_item


def make_session_factory() -> sessionmaker:
    """Fresh schema in a private in-memory database shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def db_override(factory: sessionmaker):
    """Replacement for get_db that hands out sessions from *factory*."""

    def _get_db() -> Generator[Session, None, None]:
        db = factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db


def install_db(app, factory: sessionmaker) -> None:
    app.dependency_overrides[get_db] = db_override(factory)


def make_user(db: Session, email: str | None = None, name: str = "Test User") -> User:
    user = User(
        name=name,
        email=email or f"{uuid4().hex[:10]}@example.com",
        password_hash="not-a-real-hash",
    )
    db.add(user)
    db.commit()
    return user


def media_payload(**overrides: Any) -> CreateMediaRequest:
    data: dict[str, Any] = {"title": "Dune", "type": "movie", "genre": "Sci-Fi"}
    data.update(overrides)
    return CreateMediaRequest.model_validate(data)


def seed_media(db: Session, owner_id: UUID, **overrides: Any):
    return create_media_item(OwnedMediaRepository(db, owner_id), media_payload(**overrides))
