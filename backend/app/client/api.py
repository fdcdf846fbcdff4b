"""
Async HTTP client for the Watchlist API.

Thin wrapper over httpx.AsyncClient: attaches the bearer token, unwraps
JSON, and turns every non-2xx response or transport failure into
ApiRequestError so callers handle one exception type.
"""
from collections.abc import Callable, Mapping
from typing import Any

import httpx

DEFAULT_TIMEOUT_SECONDS = 10.0


class ApiRequestError(Exception):
    """A request that did not come back 2xx (or never came back at all)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(message)


def _clean_params(filters: Mapping[str, Any] | None) -> dict[str, str]:
    """Drop unset filters; the API treats absent and empty the same way."""
    if not filters:
        return {}
    params = {}
    for key, value in filters.items():
        if value is None or value == "":
            continue
        params[key] = value.value if hasattr(value, "value") else str(value)
    return params


class MediaApiClient:
    """
    Usage:
        async with MediaApiClient("http://localhost:5000") as api:
            await api.login("me@example.com", "secret123")
            page = await api.list_media({"status": "watched", "limit": 20})
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> None:
        self.token = token
        self.on_unauthorized = on_unauthorized
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "MediaApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Transport ─────────────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.RequestError as exc:
            raise ApiRequestError(f"Request to {path} failed: {exc}") from exc

        if response.status_code == httpx.codes.UNAUTHORIZED:
            self.token = None
            if self.on_unauthorized is not None:
                self.on_unauthorized()

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {"data": payload}

        if response.is_error:
            message = (
                payload.get("message")
                or payload.get("error")
                or response.reason_phrase
                or "Request failed"
            )
            raise ApiRequestError(message, response.status_code, payload.get("errors"))
        return payload

    # ── Auth ──────────────────────────────────────────────────────────────────

    async def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        payload = await self._request(
            "POST", "/auth/register", json={"name": name, "email": email, "password": password}
        )
        self.token = payload["data"]["token"]
        return payload["data"]

    async def login(self, email: str, password: str) -> dict[str, Any]:
        payload = await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        self.token = payload["data"]["token"]
        return payload["data"]

    async def get_profile(self) -> dict[str, Any]:
        return await self._request("GET", "/auth/me")

    async def update_profile(self, **fields: str) -> dict[str, Any]:
        return await self._request("PUT", "/auth/profile", json=fields)

    async def change_password(self, current_password: str, new_password: str) -> dict[str, Any]:
        return await self._request(
            "POST",
            "/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    # ── Media ─────────────────────────────────────────────────────────────────

    async def list_media(self, filters: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return await self._request("GET", "/media", params=_clean_params(filters))

    async def get_media(self, media_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/media/{media_id}")

    async def create_media(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/media", json=dict(data))

    async def update_media(self, media_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", f"/media/{media_id}", json=dict(data))

    async def toggle_status(self, media_id: str) -> dict[str, Any]:
        return await self._request("PATCH", f"/media/{media_id}/status")

    async def delete_media(self, media_id: str) -> dict[str, Any]:
        return await self._request("DELETE", f"/media/{media_id}")

    async def delete_all_media(self) -> dict[str, Any]:
        return await self._request("DELETE", "/media")

    async def get_stats(self) -> dict[str, Any]:
        return await self._request("GET", "/media/stats")

    async def health(self) -> dict[str, Any]:
        return await self._request("GET", "/health")
