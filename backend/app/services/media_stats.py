"""
Per-owner watchlist summary, computed by the database in one reduction.
"""
from sqlalchemy import case, func

from app.db.models import MediaItem, MediaType, WatchStatus
from app.repositories.media import OwnedMediaRepository
from app.schemas.media import MediaStats


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def get_media_stats(repo: OwnedMediaRepository) -> MediaStats:
    """
    Counts per status and type plus the mean of non-null ratings.

    SUM over zero rows and AVG over zero rated rows are NULL in SQL; both
    come back as 0 here.
    """
    row = repo.aggregate(
        func.count(MediaItem.id).label("total_items"),
        _count_where(MediaItem.status == WatchStatus.WATCHED).label("watched_items"),
        _count_where(MediaItem.status == WatchStatus.UNWATCHED).label("unwatched_items"),
        _count_where(MediaItem.status == WatchStatus.WATCHING).label("watching_items"),
        _count_where(MediaItem.media_type == MediaType.MOVIE).label("movies"),
        _count_where(MediaItem.media_type == MediaType.SHOW).label("shows"),
        func.avg(MediaItem.rating).label("average_rating"),
    ).one()

    return MediaStats(
        total_items=int(row.total_items or 0),
        watched_items=int(row.watched_items),
        unwatched_items=int(row.unwatched_items),
        watching_items=int(row.watching_items),
        movies=int(row.movies),
        shows=int(row.shows),
        average_rating=float(row.average_rating) if row.average_rating is not None else 0.0,
    )
