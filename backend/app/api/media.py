"""
Media Service: /media
───────────────────────
Endpoints (all require a bearer token):
  GET    /media                List, filter, sort, paginate
  GET    /media/stats          Per-user summary counts
  GET    /media/{media_id}     Single item
  POST   /media                Add to watchlist
  PUT    /media/{media_id}     Partial update
  PATCH  /media/{media_id}/status Toggle watched/unwatched
  DELETE /media/{media_id}     Remove one
  DELETE /media                Remove all of the caller's items
"""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.db.models import Genre, MediaType, WatchStatus
from app.deps.auth import get_media_repository
from app.repositories.media import OwnedMediaRepository
from app.schemas.common import ErrorEnvelope, error_body
from app.schemas.media import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    CreateMediaRequest,
    DeleteAllEnvelope,
    DeleteAllResult,
    MediaItemEnvelope,
    MediaListResponse,
    MediaQueryParams,
    MediaStatsEnvelope,
    SortField,
    SortOrder,
    UpdateMediaRequest,
)
from app.services.media_query import list_media
from app.services.media_service import (
    DuplicateMediaError,
    MediaNotFoundError,
    create_media_item,
    delete_all_media_items,
    delete_media_item,
    get_media_item,
    map_media_response,
    toggle_media_status,
    update_media_item,
)
from app.services.media_stats import get_media_stats

router = APIRouter()

NOT_FOUND_MESSAGE = "Media item not found"

_errors = {
    400: {"model": ErrorEnvelope},
    401: {"model": ErrorEnvelope},
    404: {"model": ErrorEnvelope},
}


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error_body(NOT_FOUND_MESSAGE),
    )


def _duplicate(exc: DuplicateMediaError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error_body(str(exc)),
    )


def _parse_media_id(media_id: str) -> UUID:
    """Malformed ids are reported exactly like unknown ones."""
    try:
        return UUID(media_id)
    except ValueError as exc:
        raise _not_found() from exc


# ── Collection routes ─────────────────────────────────────────────────────────

@router.get("", response_model=MediaListResponse, responses=_errors)
def list_media_items(
    search: str | None = Query(None, max_length=200, description="Case-insensitive title substring"),
    media_type: MediaType | None = Query(None, alias="type"),
    genre: Genre | None = Query(None),
    watch_status: WatchStatus | None = Query(None, alias="status"),
    sort_by: SortField = Query(SortField.CREATED_AT, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    repo: OwnedMediaRepository = Depends(get_media_repository),
) -> MediaListResponse:
    """
    One page of the caller's watchlist.

    Invalid enum values or out-of-range page/limit are rejected with 400
    before any query runs.
    """
    params = MediaQueryParams(
        search=search,
        media_type=media_type,
        genre=genre,
        status=watch_status,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    rows, pagination = list_media(repo, params)
    return MediaListResponse(
        data=[map_media_response(row) for row in rows],
        pagination=pagination,
    )


@router.get("/stats", response_model=MediaStatsEnvelope, responses=_errors)
def media_stats(
    repo: OwnedMediaRepository = Depends(get_media_repository),
) -> MediaStatsEnvelope:
    return MediaStatsEnvelope(data=get_media_stats(repo))


@router.post(
    "",
    response_model=MediaItemEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=_errors,
)
def create_media(
    payload: CreateMediaRequest,
    repo: OwnedMediaRepository = Depends(get_media_repository),
) -> MediaItemEnvelope:
    """Add a title to the caller's watchlist; (title, type) must be new for them."""
    try:
        row = create_media_item(repo, payload)
    except DuplicateMediaError as exc:
        raise _duplicate(exc) from exc

    return MediaItemEnvelope(
        message="Media item created successfully",
        data=map_media_response(row),
    )


@router.delete("", response_model=DeleteAllEnvelope, responses=_errors)
def delete_all_media(
    repo: OwnedMediaRepository = Depends(get_media_repository),
) -> DeleteAllEnvelope:
    deleted = delete_all_media_items(repo)
    return DeleteAllEnvelope(
        message=f"{deleted} media items deleted successfully",
        data=DeleteAllResult(deleted_count=deleted),
    )


# ── Item routes ───────────────────────────────────────────────────────────────

@router.get("/{media_id}", response_model=MediaItemEnvelope, responses=_errors)
def get_media(
    media_id: str,
    repo: OwnedMediaRepository = Depends(get_media_repository),
) -> MediaItemEnvelope:
    try:
        row = get_media_item(repo, _parse_media_id(media_id))
    except MediaNotFoundError as exc:
        raise _not_found() from exc
    return MediaItemEnvelope(data=map_media_response(row))


@router.put("/{media_id}", response_model=MediaItemEnvelope, responses=_errors)
def update_media(
    media_id: str,
    payload: UpdateMediaRequest,
    repo: OwnedMediaRepository = Depends(get_media_repository),
) -> MediaItemEnvelope:
    try:
        row = update_media_item(repo, _parse_media_id(media_id), payload)
    except MediaNotFoundError as exc:
        raise _not_found() from exc
    except DuplicateMediaError as exc:
        raise _duplicate(exc) from exc

    return MediaItemEnvelope(
        message="Media item updated successfully",
        data=map_media_response(row),
    )


@router.patch("/{media_id}/status", response_model=MediaItemEnvelope, responses=_errors)
def toggle_status(
    media_id: str,
    repo: OwnedMediaRepository = Depends(get_media_repository),
) -> MediaItemEnvelope:
    try:
        row = toggle_media_status(repo, _parse_media_id(media_id))
    except MediaNotFoundError as exc:
        raise _not_found() from exc

    return MediaItemEnvelope(
        message="Watch status updated successfully",
        data=map_media_response(row),
    )


@router.delete("/{media_id}", response_model=MediaItemEnvelope, responses=_errors)
def delete_media(
    media_id: str,
    repo: OwnedMediaRepository = Depends(get_media_repository),
) -> MediaItemEnvelope:
    try:
        delete_media_item(repo, _parse_media_id(media_id))
    except MediaNotFoundError as exc:
        raise _not_found() from exc

    return MediaItemEnvelope(message="Media item deleted successfully")
