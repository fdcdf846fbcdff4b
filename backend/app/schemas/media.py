"""
Media request/response schemas.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import Field, HttpUrl, TypeAdapter, ValidationError, field_validator, model_validator

from app.db.models import Genre, MediaType, WatchStatus
from app.schemas.common import ApiModel, Envelope, Pagination

TITLE_MAX_LENGTH = 200
NOTES_MAX_LENGTH = 1000
POSTER_MAX_LENGTH = 2048
IMDB_ID_MAX_LENGTH = 64
MIN_RELEASE_YEAR = 1900
RELEASE_YEAR_LOOKAHEAD = 5
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

_http_url = TypeAdapter(HttpUrl)


class SortField(str, Enum):
    """Sortable columns, by their wire names."""

    TITLE = "title"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    RATING = "rating"
    RELEASE_YEAR = "releaseYear"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ── Field rules shared by create and update ───────────────────────────────────

def normalize_title(title: str) -> str:
    """Strip surrounding whitespace; inner spacing is kept as entered."""
    return title.strip()


def _check_title(value: str | None) -> str | None:
    if value is None:
        return None
    title = normalize_title(value)
    if not title:
        raise ValueError("Title cannot be empty")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
    return title


def max_release_year() -> int:
    return datetime.now(timezone.utc).year + RELEASE_YEAR_LOOKAHEAD


def _check_release_year(value: int | None) -> int | None:
    if value is None:
        return None
    if value < MIN_RELEASE_YEAR or value > max_release_year():
        raise ValueError(
            f"Release year must be between {MIN_RELEASE_YEAR} and "
            f"{RELEASE_YEAR_LOOKAHEAD} years in the future"
        )
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_poster(value: str | None) -> str | None:
    if value is None:
        return None
    poster = value.strip()
    try:
        _http_url.validate_python(poster)
    except ValidationError as exc:
        raise ValueError("Poster must be a valid URL") from exc
    return poster


class _MediaFields(ApiModel):
    """Validators common to create and update payloads."""

    @field_validator("title", check_fields=False)
    @classmethod
    def validate_title(cls, value: str | None) -> str | None:
        return _check_title(value)

    @field_validator("release_year", check_fields=False)
    @classmethod
    def validate_release_year(cls, value: int | None) -> int | None:
        return _check_release_year(value)

    @field_validator("notes", "poster", "imdb_id", mode="before", check_fields=False)
    @classmethod
    def blank_optional_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("poster", check_fields=False)
    @classmethod
    def validate_poster(cls, value: str | None) -> str | None:
        return _check_poster(value)

    @field_validator("imdb_id", check_fields=False)
    @classmethod
    def strip_imdb_id(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None


# ── Requests ──────────────────────────────────────────────────────────────────

class CreateMediaRequest(_MediaFields):
    """Payload for POST /media."""

    title: str
    media_type: MediaType = Field(alias="type")
    genre: Genre
    status: WatchStatus = WatchStatus.UNWATCHED
    rating: float | None = Field(default=None, ge=1, le=10)
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)
    release_year: int | None = None
    poster: str | None = Field(default=None, max_length=POSTER_MAX_LENGTH)
    imdb_id: str | None = Field(default=None, max_length=IMDB_ID_MAX_LENGTH)


class UpdateMediaRequest(_MediaFields):
    """
    Payload for PUT /media/{id}.

    Partial: only keys present in the body are applied. Optional fields
    may be cleared with null; required ones may not.
    """

    title: str | None = None
    media_type: MediaType | None = Field(default=None, alias="type")
    genre: Genre | None = None
    status: WatchStatus | None = None
    rating: float | None = Field(default=None, ge=1, le=10)
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)
    release_year: int | None = None
    poster: str | None = Field(default=None, max_length=POSTER_MAX_LENGTH)
    imdb_id: str | None = Field(default=None, max_length=IMDB_ID_MAX_LENGTH)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "UpdateMediaRequest":
        for name in ("title", "media_type", "genre", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                alias = "type" if name == "media_type" else name
                raise ValueError(f"{alias} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Attribute-name → value for every field the client actually sent."""
        return self.model_dump(exclude_unset=True, by_alias=False)


class MediaQueryParams(ApiModel):
    """Validated list/filter/sort/page controls for GET /media."""

    search: str | None = None
    media_type: MediaType | None = None
    genre: Genre | None = None
    status: WatchStatus | None = None
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


# ── Responses ─────────────────────────────────────────────────────────────────

class MediaItemResponse(ApiModel):
    id: UUID
    owner_id: UUID
    title: str
    media_type: MediaType = Field(alias="type")
    genre: Genre
    status: WatchStatus
    rating: float | None
    notes: str | None
    release_year: int | None
    poster: str | None
    imdb_id: str | None
    created_at: datetime
    updated_at: datetime


class MediaStats(ApiModel):
    total_items: int = 0
    watched_items: int = 0
    unwatched_items: int = 0
    watching_items: int = 0
    movies: int = 0
    shows: int = 0
    average_rating: float = 0.0


class MediaListResponse(ApiModel):
    """Response envelope for GET /media."""

    success: bool = True
    data: list[MediaItemResponse]
    pagination: Pagination


class DeleteAllResult(ApiModel):
    deleted_count: int


MediaItemEnvelope = Envelope[MediaItemResponse]
MediaStatsEnvelope = Envelope[MediaStats]
DeleteAllEnvelope = Envelope[DeleteAllResult]
