"""
Owner-scoped access to media_items.

Services never query MediaItem directly: they receive an
OwnedMediaRepository bound to the caller, and every statement it builds
starts from the owner predicate. There is no method that can reach
another user's rows.
"""
from uuid import UUID

from sqlalchemy import and_, delete
from sqlalchemy.orm import Query, Session
from sqlalchemy.sql.elements import ColumnElement

from app.db.models import MediaItem, MediaType


class OwnedMediaRepository:
    """Media rows visible to exactly one owner."""

    def __init__(self, db: Session, owner_id: UUID) -> None:
        self.db = db
        self.owner_id = owner_id

    # ── Read ──────────────────────────────────────────────────────────────────

    def scope(self) -> ColumnElement[bool]:
        """The owner predicate every statement is built on."""
        return MediaItem.owner_id == self.owner_id

    def query(self) -> Query:
        return self.db.query(MediaItem).filter(self.scope())

    def aggregate(self, *columns) -> Query:
        """Owner-scoped SELECT of arbitrary column expressions (no GROUP BY rows)."""
        return self.db.query(*columns).filter(self.scope())

    def get(self, media_id: UUID) -> MediaItem | None:
        return self.query().filter(MediaItem.id == media_id).first()

    def find_duplicate(
        self,
        title: str,
        media_type: MediaType,
        *,
        exclude_id: UUID | None = None,
    ) -> MediaItem | None:
        """Return a row holding (title, media_type) for this owner, if any."""
        predicate = and_(MediaItem.title == title, MediaItem.media_type == media_type)
        query = self.query().filter(predicate)
        if exclude_id is not None:
            query = query.filter(MediaItem.id != exclude_id)
        return query.first()

    # ── Write ─────────────────────────────────────────────────────────────────

    def add(self, row: MediaItem) -> MediaItem:
        """Stage *row* as owned by this repository's owner and flush it."""
        row.owner_id = self.owner_id
        self.db.add(row)
        self.db.flush()
        return row

    def remove(self, row: MediaItem) -> None:
        if row.owner_id != self.owner_id:
            raise ValueError("row does not belong to this owner")
        self.db.delete(row)
        self.db.flush()

    def remove_all(self) -> int:
        result = self.db.execute(
            delete(MediaItem)
            .where(self.scope())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    def flush(self) -> None:
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, row: MediaItem) -> None:
        self.db.refresh(row)
