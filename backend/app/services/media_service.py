"""
Media lifecycle: create, read, update, toggle status, delete.

Every function takes an OwnedMediaRepository, so ownership is fixed
before any of this runs. "Not yours" and "does not exist" both surface
as MediaNotFoundError.
"""
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from app.core.logging import get_logger
from app.db.models import MediaItem, MediaType, WatchStatus
from app.repositories.media import OwnedMediaRepository
from app.schemas.media import CreateMediaRequest, MediaItemResponse, UpdateMediaRequest

logger = get_logger(__name__)

UNIQUE_CONSTRAINT_NAME = "uq_media_items_owner_title_type"

# "watching" has no opposite; toggling it lands on watched
NEXT_STATUS = {
    WatchStatus.WATCHED: WatchStatus.UNWATCHED,
    WatchStatus.UNWATCHED: WatchStatus.WATCHED,
    WatchStatus.WATCHING: WatchStatus.WATCHED,
}


class MediaNotFoundError(Exception):
    """Raised when an id is absent or owned by someone else."""


class DuplicateMediaError(Exception):
    """Raised when the owner already tracks the same title as the same type."""

    def __init__(self, title: str, media_type: MediaType) -> None:
        self.title = title
        self.media_type = media_type
        super().__init__("You already have this item in your watchlist")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _owner_log(repo: OwnedMediaRepository):
    return logger.bind(owner_id=str(repo.owner_id))


def _is_unique_violation(exc: IntegrityError) -> bool:
    error_text = str(exc.orig).lower()
    return (
        UNIQUE_CONSTRAINT_NAME in error_text
        or "duplicate key" in error_text
        or "unique constraint failed" in error_text
    )


def _flush_or_duplicate(
    repo: OwnedMediaRepository,
    title: str,
    media_type: MediaType,
    write,
) -> None:
    """
    Run *write* and translate a storage-level uniqueness conflict into
    DuplicateMediaError. This is the authoritative check: the pre-check
    can pass for two concurrent writers, the constraint cannot.
    """
    try:
        write()
    except IntegrityError as exc:
        repo.rollback()
        if _is_unique_violation(exc):
            _owner_log(repo).info("media_item_duplicate_rejected", title=title, source="constraint")
            raise DuplicateMediaError(title, media_type) from exc
        raise


# ── Read ──────────────────────────────────────────────────────────────────────

def get_media_item(repo: OwnedMediaRepository, media_id: UUID) -> MediaItem:
    row = repo.get(media_id)
    if row is None:
        raise MediaNotFoundError(f"Media item {media_id} not found")
    return row


# ── Write ─────────────────────────────────────────────────────────────────────

def create_media_item(repo: OwnedMediaRepository, payload: CreateMediaRequest) -> MediaItem:
    """Insert a new watchlist entry; duplicates of (title, type) are refused."""
    if repo.find_duplicate(payload.title, payload.media_type) is not None:
        _owner_log(repo).info("media_item_duplicate_rejected", title=payload.title, source="precheck")
        raise DuplicateMediaError(payload.title, payload.media_type)

    row = MediaItem(
        title=payload.title,
        media_type=payload.media_type,
        genre=payload.genre,
        status=payload.status,
        rating=payload.rating,
        notes=payload.notes,
        release_year=payload.release_year,
        poster=payload.poster,
        imdb_id=payload.imdb_id,
    )
    _flush_or_duplicate(repo, payload.title, payload.media_type, lambda: repo.add(row))

    repo.commit()
    repo.refresh(row)
    _owner_log(repo).info("media_item_created", media_id=str(row.id), media_type=row.media_type.value)
    return row


def update_media_item(
    repo: OwnedMediaRepository,
    media_id: UUID,
    payload: UpdateMediaRequest,
) -> MediaItem:
    """
    Apply a partial patch.

    When title or type is supplied, the resulting (title, type) pair is
    checked against the owner's other rows.
    """
    row = get_media_item(repo, media_id)
    changes = payload.changes()

    title = changes.get("title", row.title)
    media_type = changes.get("media_type", row.media_type)
    if "title" in changes or "media_type" in changes:
        if repo.find_duplicate(title, media_type, exclude_id=row.id) is not None:
            _owner_log(repo).info("media_item_duplicate_rejected", title=title, source="precheck")
            raise DuplicateMediaError(title, media_type)

    for field_name, value in changes.items():
        setattr(row, field_name, value)
    row.updated_at = _utcnow()

    _flush_or_duplicate(repo, title, media_type, repo.flush)

    repo.commit()
    repo.refresh(row)
    _owner_log(repo).info("media_item_updated", media_id=str(row.id), fields=sorted(changes))
    return row


def toggle_media_status(repo: OwnedMediaRepository, media_id: UUID) -> MediaItem:
    """Flip watched ↔ unwatched; a "watching" item becomes watched."""
    row = get_media_item(repo, media_id)
    previous = row.status
    row.status = NEXT_STATUS[WatchStatus(previous)]
    row.updated_at = _utcnow()

    repo.commit()
    repo.refresh(row)
    _owner_log(repo).info(
        "media_item_status_toggled",
        media_id=str(row.id),
        previous=WatchStatus(previous).value,
        current=row.status.value,
    )
    return row


def delete_media_item(repo: OwnedMediaRepository, media_id: UUID) -> None:
    row = get_media_item(repo, media_id)
    repo.remove(row)
    repo.commit()
    _owner_log(repo).info("media_item_deleted", media_id=str(media_id))


def delete_all_media_items(repo: OwnedMediaRepository) -> int:
    """Remove every row the owner has. Returns how many went; 0 when already empty."""
    deleted = repo.remove_all()
    repo.commit()
    _owner_log(repo).info("media_items_cleared", deleted=deleted)
    return deleted


# ── Serialization ─────────────────────────────────────────────────────────────

def map_media_response(row: MediaItem) -> MediaItemResponse:
    """Serialize an ORM row to the wire model."""
    return MediaItemResponse(
        id=row.id,
        owner_id=row.owner_id,
        title=row.title,
        media_type=row.media_type,
        genre=row.genre,
        status=row.status,
        rating=row.rating,
        notes=row.notes,
        release_year=row.release_year,
        poster=row.poster,
        imdb_id=row.imdb_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
