"""
Pydantic schemas for tags.

A tag is a named, coloured label that references zero or more archived
pages by id.  Pages belong to another part of the archive; here they
are only integers in ``page_ids``.

Request bodies arrive as untyped JSON.  The ``validate_*`` functions
below turn a raw mapping into one of the request models or raise
``TagRequestError`` with the message the client should see.  They do
not touch the database.
"""

import re
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from web_archive_api.app.core.result import ResultError


DEFAULT_COLOR = "#ffffff"

_NUMERIC_ID = re.compile(r"[0-9]+")


class TagRequestError(ResultError):
    """Raised when a request body or query fails validation."""

    def __init__(self, message: str) -> None:
        super().__init__(400, message)


class TagRead(BaseModel):
    """Schema for reading a tag."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    color: str
    # Element types are not validated on the way in, so they are not
    # enforced on the way out either.
    page_ids: List[Any] = Field(default_factory=list, alias="pageIds")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class TagCreate(BaseModel):
    """Validated body of ``POST /create``.

    ``color`` is stored as given; only ``name`` is type checked.
    """

    name: str
    color: Any = DEFAULT_COLOR


class TagUpdate(BaseModel):
    """Validated body of ``POST /update``.  ``None`` means unchanged."""

    id: int
    name: Any = None
    color: Any = None


class TagDelete(BaseModel):
    id: int


class TagPageBinding(BaseModel):
    """Validated body of ``POST /bind_page`` and ``POST /unbind_page``."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    page_ids: List[Any] = Field(alias="pageIds")


def is_numeric_id(value: Any) -> bool:
    """Return True for a non-negative int or a string of ASCII digits."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and _NUMERIC_ID.fullmatch(value) is not None


def _require_id(raw: Mapping[str, Any]) -> int:
    value = raw.get("id")
    if value is None or not is_numeric_id(value):
        raise TagRequestError("ID is required")
    return int(value)


def validate_create(raw: Mapping[str, Any]) -> TagCreate:
    name = raw.get("name")
    if name is None or not isinstance(name, str):
        raise TagRequestError("Name is required")
    color = raw.get("color")
    return TagCreate(name=name, color=DEFAULT_COLOR if color is None else color)


def validate_update(raw: Mapping[str, Any]) -> TagUpdate:
    tag_id = _require_id(raw)
    name = raw.get("name")
    color = raw.get("color")
    if name is None and color is None:
        raise TagRequestError("At least one field is required")
    return TagUpdate(id=tag_id, name=name, color=color)


def validate_delete(raw: Mapping[str, Any]) -> TagDelete:
    return TagDelete(id=_require_id(raw))


def validate_page_binding(raw: Mapping[str, Any]) -> TagPageBinding:
    tag_id = _require_id(raw)
    page_ids = raw.get("pageIds")
    if page_ids is None or not isinstance(page_ids, list):
        raise TagRequestError("Page ID is required")
    return TagPageBinding(id=tag_id, page_ids=page_ids)
