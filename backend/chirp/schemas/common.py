"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from chirp.services._shared.dto import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT


class SortQuerySchema(Schema):
    """Parse comma-separated ``sort`` query parameters into a list."""

    class Meta:
        unknown = EXCLUDE

    sort = fields.String(load_default="")

    @post_load
    def split_sort(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        raw = data.get("sort") or ""
        if isinstance(raw, str):
            data["sort"] = [segment.strip() for segment in raw.split(",") if segment.strip()]
        return data


class PaginationQuerySchema(SortQuerySchema):
    """Validate offset pagination parameters with configurable defaults."""

    def __init__(
        self,
        *,
        default_limit: int = DEFAULT_PAGE_LIMIT,
        max_limit: int = MAX_PAGE_LIMIT,
        **kwargs: Any,
    ) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        data.setdefault("page", 1)
        return data


class CursorQuerySchema(Schema):
    """Keyset pagination parameters: ``limit`` (1-100) and an id ``cursor``."""

    class Meta:
        unknown = EXCLUDE

    limit = fields.Integer(
        load_default=DEFAULT_PAGE_LIMIT, validate=validate.Range(min=1, max=MAX_PAGE_LIMIT)
    )
    cursor = fields.Integer(load_default=None, validate=validate.Range(min=1))


class MetaSchema(Schema):
    """Metadata block for offset-paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    has_prev = fields.Boolean(required=True)
    has_next = fields.Boolean(required=True)


class CursorMetaSchema(Schema):
    """Metadata block for keyset-paginated responses."""

    has_more = fields.Boolean(required=True)
    next_cursor = fields.Integer(allow_none=True)


def build_meta(*, total: int, page: int, limit: int) -> dict[str, Any]:
    """Return a ``meta`` mapping for offset-paginated responses."""

    return {
        "total": int(total),
        "page": int(page),
        "limit": int(limit),
        "has_prev": page > 1,
        "has_next": page * limit < total,
    }


def build_cursor_meta(*, has_more: bool, next_cursor: int | None) -> dict[str, Any]:
    """Return a ``meta`` mapping for keyset-paginated responses."""

    return {"has_more": bool(has_more), "next_cursor": next_cursor}
