"""
List/filter/sort/paginate for a user's watchlist.

One owner-scoped predicate is built from the query params, then used for
a COUNT and a bounded OFFSET/LIMIT fetch. Params arrive already
validated (MediaQueryParams), so nothing here can issue an unbounded or
partially-filtered query.
"""
import math

from sqlalchemy import func
from sqlalchemy.orm import Query

from app.core.logging import get_logger
from app.db.models import MediaItem
from app.repositories.media import OwnedMediaRepository
from app.schemas.common import Pagination
from app.schemas.media import MediaQueryParams, SortField, SortOrder

logger = get_logger(__name__)

SORT_COLUMNS = {
    SortField.TITLE: MediaItem.title,
    SortField.CREATED_AT: MediaItem.created_at,
    SortField.UPDATED_AT: MediaItem.updated_at,
    SortField.RATING: MediaItem.rating,
    SortField.RELEASE_YEAR: MediaItem.release_year,
}

# Nullable sort keys: missing values rank lowest in either direction.
NULLABLE_SORT_FIELDS = {SortField.RATING, SortField.RELEASE_YEAR}

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user search text only ever matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def apply_filters(query: Query, params: MediaQueryParams) -> Query:
    search = (params.search or "").strip()
    if search:
        query = query.filter(
            MediaItem.title.ilike(f"%{escape_like(search)}%", escape=LIKE_ESCAPE)
        )
    if params.media_type is not None:
        query = query.filter(MediaItem.media_type == params.media_type)
    if params.genre is not None:
        query = query.filter(MediaItem.genre == params.genre)
    if params.status is not None:
        query = query.filter(MediaItem.status == params.status)
    return query


def apply_sort(query: Query, sort_by: SortField, sort_order: SortOrder) -> Query:
    column = SORT_COLUMNS[sort_by]
    if sort_order == SortOrder.ASC:
        ordering = column.asc()
        if sort_by in NULLABLE_SORT_FIELDS:
            ordering = ordering.nulls_first()
    else:
        ordering = column.desc()
        if sort_by in NULLABLE_SORT_FIELDS:
            ordering = ordering.nulls_last()
    # id tie-breaker keeps page boundaries stable across requests
    return query.order_by(ordering, MediaItem.id.asc())


def build_pagination(total_items: int, page: int, limit: int) -> Pagination:
    """Pagination block for *total_items* split into pages of *limit*."""
    total_pages = math.ceil(total_items / limit) if total_items else 0
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_items=total_items,
        items_per_page=limit,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def list_media(
    repo: OwnedMediaRepository,
    params: MediaQueryParams,
) -> tuple[list[MediaItem], Pagination]:
    """
    Return one page of the owner's items and its pagination block.

    A page past the end yields an empty list with a correct envelope.
    """
    filtered = apply_filters(repo.query(), params)

    total_items = filtered.with_entities(func.count(MediaItem.id)).scalar() or 0

    offset = (params.page - 1) * params.limit
    # Past the last row: nothing to fetch, and huge offsets overflow the driver
    if offset >= total_items:
        rows = []
    else:
        rows = (
            apply_sort(filtered, params.sort_by, params.sort_order)
            .offset(offset)
            .limit(params.limit)
            .all()
        )

    logger.debug(
        "media_listed",
        total_items=total_items,
        returned=len(rows),
        page=params.page,
        limit=params.limit,
    )
    return rows, build_pagination(total_items, params.page, params.limit)
