"""
Shared response envelope.

Every JSON response is {success, data?, message?, errors?}; list
endpoints add a pagination block. Field names go over the wire in
camelCase.
"""
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class ApiModel(BaseModel):
    """Base for wire models: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Envelope(ApiModel, Generic[DataT]):
    success: bool = True
    message: str | None = None
    data: DataT | None = None


class ErrorEntry(ApiModel):
    """One field-level validation failure."""

    field: str
    message: str
    location: str


class ErrorEnvelope(ApiModel):
    success: bool = False
    message: str
    errors: list[ErrorEntry] | None = None


class Pagination(ApiModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


def error_body(message: str, errors: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Failure envelope as a plain dict, ready for HTTPException(detail=…)."""
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body
