"""
Client-side watchlist state: the signed-in user's items and stats.

Local state only changes after the server has confirmed a mutation. A
failed call leaves `items` exactly as it was, records `error`, emits an
error notification and re-raises.

Reads of the same resource are serialized (one lock for items, one for
stats) while items and stats load concurrently with each other.
Mutations reconcile under the items lock, so an in-flight list fetch
cannot land on top of a newer local change.
"""
import asyncio
from collections.abc import Awaitable, Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Protocol

from app.client.api import ApiRequestError, MediaApiClient
from app.core.logging import get_logger

logger = get_logger(__name__)

MediaRecord = dict[str, Any]


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LogNotifier:
    """Default notifier: user-facing messages go to the log."""

    def success(self, message: str) -> None:
        logger.info("notify_success", message=message)

    def error(self, message: str) -> None:
        logger.warning("notify_error", message=message)


class MediaStore:
    def __init__(self, api: MediaApiClient, notifier: Notifier | None = None) -> None:
        self.api = api
        self.notifier = notifier or LogNotifier()
        self.items: list[MediaRecord] = []
        self.pagination: dict[str, Any] | None = None
        self.stats: dict[str, Any] | None = None
        self.error: str | None = None
        self.is_authenticated = False
        self._pending = 0
        self._items_lock = asyncio.Lock()
        self._stats_lock = asyncio.Lock()

    @property
    def loading(self) -> bool:
        return self._pending > 0

    @contextmanager
    def _busy(self, enabled: bool = True) -> Iterator[None]:
        if not enabled:
            yield
            return
        self._pending += 1
        try:
            yield
        finally:
            self._pending -= 1

    # ── Session ───────────────────────────────────────────────────────────────

    async def set_authenticated(self, authenticated: bool) -> None:
        """Load everything on sign-in; forget everything on sign-out."""
        self.is_authenticated = authenticated
        if authenticated:
            await self.refresh()
            return
        async with self._items_lock:
            self.items = []
            self.pagination = None
        async with self._stats_lock:
            self.stats = None

    async def refresh(self, filters: Mapping[str, Any] | None = None) -> None:
        await asyncio.gather(self.fetch_items(filters), self.fetch_stats())

    # ── Reads ─────────────────────────────────────────────────────────────────

    async def fetch_items(self, filters: Mapping[str, Any] | None = None) -> None:
        """Replace the local list with one page from the server; failures are reported, not raised."""
        if not self.is_authenticated:
            return
        self.error = None
        with self._busy():
            async with self._items_lock:
                try:
                    payload = await self.api.list_media(filters)
                except ApiRequestError as exc:
                    self._report_failure(exc.message or "Failed to fetch media items")
                    return
                if not payload.get("success"):
                    self.error = "Failed to fetch media items"
                    return
                self.items = list(payload.get("data") or [])
                self.pagination = payload.get("pagination")

    async def fetch_stats(self) -> None:
        if not self.is_authenticated:
            return
        async with self._stats_lock:
            try:
                payload = await self.api.get_stats()
            except ApiRequestError as exc:
                logger.warning("stats_fetch_failed", error=exc.message, status_code=exc.status_code)
                return
            if payload.get("success") and payload.get("data") is not None:
                self.stats = payload["data"]

    # ── Mutations ─────────────────────────────────────────────────────────────

    async def create_item(self, data: Mapping[str, Any]) -> MediaRecord:
        """Add on the server, then put the stored record at the top of the list."""
        payload = await self._mutate(
            lambda: self.api.create_media(data),
            lambda item: self._prepend(item),
            success="Media item added successfully!",
            failure="Failed to create media item",
        )
        return payload["data"]

    async def update_item(self, media_id: str, data: Mapping[str, Any]) -> MediaRecord:
        payload = await self._mutate(
            lambda: self.api.update_media(media_id, data),
            lambda item: self._replace(media_id, item),
            success="Media item updated successfully!",
            failure="Failed to update media item",
        )
        return payload["data"]

    async def toggle_status(self, media_id: str) -> MediaRecord:
        payload = await self._mutate(
            lambda: self.api.toggle_status(media_id),
            lambda item: self._replace(media_id, item),
            success="Watch status updated!",
            failure="Failed to update watch status",
            track_loading=False,
        )
        return payload["data"]

    async def delete_item(self, media_id: str) -> None:
        await self._mutate(
            lambda: self.api.delete_media(media_id),
            lambda _: self._remove(media_id),
            success="Media item deleted successfully!",
            failure="Failed to delete media item",
            requires_data=False,
        )

    async def delete_all(self) -> int:
        payload = await self._mutate(
            self.api.delete_all_media,
            lambda _: self._clear(),
            success="All media items deleted",
            failure="Failed to delete media items",
        )
        return int(payload["data"]["deletedCount"])

    async def _mutate(
        self,
        request: Callable[[], Awaitable[dict[str, Any]]],
        apply: Callable[[Any], None],
        *,
        success: str,
        failure: str,
        track_loading: bool = True,
        requires_data: bool = True,
    ) -> dict[str, Any]:
        self.error = None
        with self._busy(track_loading):
            try:
                payload = await request()
                if not payload.get("success") or (requires_data and payload.get("data") is None):
                    raise ApiRequestError(payload.get("message") or failure)
            except ApiRequestError as exc:
                self._report_failure(exc.message or failure)
                raise

            async with self._items_lock:
                apply(payload.get("data"))
            self.notifier.success(success)
            await self.fetch_stats()
        return payload

    # ── Local reconciliation (call with _items_lock held) ────────────────────

    def _prepend(self, item: MediaRecord) -> None:
        self.items = [item] + [row for row in self.items if row.get("id") != item.get("id")]

    def _replace(self, media_id: str, item: MediaRecord) -> None:
        self.items = [item if row.get("id") == media_id else row for row in self.items]

    def _remove(self, media_id: str) -> None:
        self.items = [row for row in self.items if row.get("id") != media_id]

    def _clear(self) -> None:
        self.items = []

    def _report_failure(self, message: str) -> None:
        self.error = message
        self.notifier.error(message)
