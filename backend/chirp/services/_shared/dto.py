# comments in English; reST docstrings strict
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


@dataclass(frozen=True, slots=True)
class CursorPageIn:
    """
    Keyset pagination input.

    :param limit: Page size, clamped to ``1..MAX_PAGE_LIMIT``.
    :type limit: int
    :param cursor: Exclusive id bound from a previous page's ``next_cursor``.
    :type cursor: int | None
    """

    limit: int = DEFAULT_PAGE_LIMIT
    cursor: int | None = None

    def clamped_limit(self) -> int:
        return min(max(int(self.limit), 1), MAX_PAGE_LIMIT)


@dataclass(frozen=True, slots=True)
class CursorPageOut(Generic[T]):
    """
    Keyset pagination output.

    :param items: Page items, newest first.
    :type items: Sequence[T]
    :param has_more: Whether a following page exists.
    :type has_more: bool
    :param next_cursor: Cursor for the following page, ``None`` on the last.
    :type next_cursor: int | None
    """

    items: Sequence[T]
    has_more: bool
    next_cursor: int | None


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Offset pagination metadata.

    :param page: Current page (1-based).
    :param limit: Page size.
    :param total: Total rows available.
    """

    page: int
    limit: int
    total: int

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total
