from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, Field

from .config import Settings, get_settings
from .exceptions import InvalidConfiguration

# Limit/offset value meaning "no bound"; only used for count probes on a cloned query.
UNBOUNDED = -1


class PaginationState(BaseModel):
    """Read-only snapshot a widget uses to render page links."""

    page_size_default: int = Field(ge=0)
    page_size_limit: int = Field(ge=1)
    page_size: int = Field(ge=0)
    current_page: int = Field(ge=1)
    total_count: int = Field(ge=0)
    offset: int = Field(ge=0)
    limit: int = Field(ge=0)
    page_count: int = Field(ge=0)

    @property
    def enabled(self) -> bool:
        return self.page_size > 0


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}") from exc


class Pagination:
    """Offset/limit windowing of an ordered result set.

    A page size of 0 disables pagination: `limit()` and `offset()` then cover
    the whole result set and `page_count()` is 0.
    """

    def __init__(
        self,
        page_size: Optional[int] = None,
        current_page: int = 1,
        *,
        page_size_limit: Optional[int] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.page_size_default = self.settings.page_size_default
        self.page_size_limit = page_size_limit if page_size_limit is not None else self.settings.page_size_limit
        if self.page_size_limit < 1:
            raise InvalidConfiguration("Page size limit should be at least 1")
        self._page_size = self.page_size_default
        self._current_page = 1
        self._total_count = 0
        self.set_page_size(page_size)
        self.set_current_page(current_page)

    @classmethod
    def disabled(cls, settings: Optional[Settings] = None) -> "Pagination":
        return cls(page_size=0, settings=settings)

    # ---- Configuration ----
    def set_page_size(self, page_size: Optional[int]) -> "Pagination":
        if page_size is None:
            size = self.page_size_default
        else:
            size = _to_int(page_size, "Page size")
        if size < 0:
            raise InvalidConfiguration("Page size should not be negative")
        self._page_size = min(size, self.page_size_limit)
        return self

    def set_current_page(self, current_page: int) -> "Pagination":
        page = _to_int(current_page, "Current page")
        if page < 1:
            raise InvalidConfiguration("Current page should be at least 1")
        self._current_page = page
        return self

    def params(self, params: Mapping[str, Any]) -> "Pagination":
        """Read page and page size from request parameters."""
        if self.settings.page_size_param in params:
            self.set_page_size(params[self.settings.page_size_param])
        if self.settings.page_param in params:
            self.set_current_page(params[self.settings.page_param])
        return self

    def total_count(self, value: int) -> "Pagination":
        value = _to_int(value, "Total count")
        if value < 0:
            raise InvalidConfiguration("Total count should not be negative")
        self._total_count = value
        return self

    # ---- Accessors ----
    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def enabled(self) -> bool:
        return self._page_size > 0

    def get_total_count(self) -> int:
        return self._total_count

    def offset(self) -> int:
        if not self.enabled:
            return 0
        return min((self._current_page - 1) * self._page_size, self._total_count)

    def limit(self) -> int:
        if not self.enabled:
            return self._total_count
        return min(self._page_size, self._total_count - self.offset())

    def page_count(self) -> int:
        if not self.enabled:
            return 0
        return math.ceil(self._total_count / self._page_size)

    def state(self) -> PaginationState:
        return PaginationState(
            page_size_default=self.page_size_default,
            page_size_limit=self.page_size_limit,
            page_size=self._page_size,
            current_page=self._current_page,
            total_count=self._total_count,
            offset=self.offset(),
            limit=self.limit(),
            page_count=self.page_count(),
        )

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return (
            f"Pagination(page_size={self._page_size}, current_page={self._current_page}, "
            f"total_count={self._total_count})"
        )
