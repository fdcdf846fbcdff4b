"""
SQLAlchemy ORM models.

Column names, constraints and indexes mirror the Alembic migrations in
alembic/versions. Types are kept portable (Uuid, String, Float) so the
same models run against Postgres in deployment and SQLite in tests.
"""
import uuid
from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, relationship


# ── Base ──────────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


# ── Enums ─────────────────────────────────────────────────────────────────────

class MediaType(str, PyEnum):
    MOVIE = "movie"
    SHOW = "show"


class WatchStatus(str, PyEnum):
    WATCHED = "watched"
    UNWATCHED = "unwatched"
    WATCHING = "watching"


class Genre(str, PyEnum):
    ACTION = "Action"
    ADVENTURE = "Adventure"
    ANIMATION = "Animation"
    COMEDY = "Comedy"
    CRIME = "Crime"
    DOCUMENTARY = "Documentary"
    DRAMA = "Drama"
    FAMILY = "Family"
    FANTASY = "Fantasy"
    HORROR = "Horror"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    SCI_FI = "Sci-Fi"
    THRILLER = "Thriller"
    WAR = "War"
    WESTERN = "Western"
    OTHER = "Other"


def _enum_values(enum_cls: type[PyEnum]) -> list[str]:
    """Persist enum *values* ("Sci-Fi"), not member names ("SCI_FI")."""
    return [member.value for member in enum_cls]


def _enum_column(enum_cls: type[PyEnum], name: str) -> SAEnum:
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=_enum_values,
        validate_strings=True,
    )


# ── Timestamp helper ──────────────────────────────────────────────────────────

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Models ────────────────────────────────────────────────────────────────────

class User(Base):
    """
    Watchlist owner. Email is stored lower-cased and is the login key.
    """
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    media_items = relationship(
        "MediaItem",
        back_populates="owner",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"


class MediaItem(Base):
    """
    One tracked movie or show on one user's watchlist.

    (owner_id, title, media_type) is unique: a user cannot list the same
    title twice as the same kind of media. The constraint is the
    authoritative duplicate check; services also pre-check so the common
    case never reaches the INSERT.
    """
    __tablename__ = "media_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title = Column(String(200), nullable=False)
    media_type = Column(_enum_column(MediaType, "media_type"), nullable=False)
    genre = Column(_enum_column(Genre, "media_genre"), nullable=False)
    status = Column(
        _enum_column(WatchStatus, "watch_status"),
        nullable=False,
        default=WatchStatus.UNWATCHED,
    )
    rating = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    release_year = Column(Integer, nullable=True)
    poster = Column(String(2048), nullable=True)
    imdb_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "owner_id", "title", "media_type",
            name="uq_media_items_owner_title_type",
        ),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 10)",
            name="chk_media_items_rating",
        ),
        # Upper bound (current year + 5) moves with the calendar; enforced in schemas
        CheckConstraint(
            "release_year IS NULL OR release_year >= 1900",
            name="chk_media_items_release_year",
        ),
        Index("idx_media_items_owner_type", "owner_id", "media_type"),
        Index("idx_media_items_owner_genre", "owner_id", "genre"),
        Index("idx_media_items_owner_status", "owner_id", "status"),
        Index("idx_media_items_owner_created", "owner_id", "created_at"),
    )

    owner = relationship("User", back_populates="media_items")

    def __repr__(self) -> str:
        return f"<MediaItem id={self.id} title={self.title!r} type={self.media_type}>"


class Account(Base):
    """
    Demo registration service account.

    Unrelated to watchlist users; lives in its own table so the demo can
    be dropped without touching authentication.
    """
    __tablename__ = "demo_accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Account id={self.id} email={self.email!r}>"
