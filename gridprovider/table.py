"""Glue between a Dash DataTable in custom paging/sorting mode and a provider.

A table configured with ``page_action="custom"`` and ``sort_action="custom"``
hands its ``page_current``, ``page_size`` and ``sort_by`` props to a callback;
`apply_table_state` pushes them into the provider and `table_payload` returns
the props the callback should send back.
"""
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .datasources.base import BaseDataProvider
from .exceptions import InvalidConfiguration
from .sort import Sort, SortDirection


class SortBy(BaseModel):
    column_id: str
    direction: SortDirection = SortDirection.ASC

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, v):
        if v is None:
            return SortDirection.ASC
        return SortDirection.parse(v)


class TableState(BaseModel):
    page_current: int = Field(default=0, ge=0)
    page_size: Optional[int] = Field(default=None, ge=0)
    sort_by: List[SortBy] = Field(default_factory=list)

    @field_validator("page_current", mode="before")
    @classmethod
    def default_page(cls, v):
        return 0 if v is None else v

    @field_validator("sort_by", mode="before")
    @classmethod
    def ensure_list(cls, v):
        if v is None or v == "":
            return []
        if isinstance(v, list):
            return v
        return [v]


def apply_table_state(
    provider: BaseDataProvider,
    page_current: Optional[int] = None,
    page_size: Optional[int] = None,
    sort_by: Optional[List[Dict[str, Any]]] = None,
) -> BaseDataProvider:
    try:
        state = TableState(page_current=page_current, page_size=page_size, sort_by=sort_by)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid table state: {e}") from e

    pagination = provider.pagination
    if state.page_size is not None:
        pagination.set_page_size(state.page_size)
    pagination.set_current_page(state.page_current + 1)

    if state.sort_by:
        sort = provider.sort
        if sort is None:
            sort = Sort([s.column_id for s in state.sort_by], multi_sort=True, settings=provider.settings)
            provider.set_sort(sort)
        sort.set_attribute_orders({s.column_id: s.direction for s in state.sort_by})
    elif provider.sort is not None:
        provider.sort.set_attribute_orders(None)

    provider.refresh()
    return provider


def _as_row(record: Any) -> Dict[str, Any]:
    if isinstance(record, Mapping):
        return dict(record)
    return {k: v for k, v in vars(record).items() if not k.startswith("_")}


def table_payload(provider: BaseDataProvider) -> Dict[str, Any]:
    records = provider.get_records()
    keys = provider.get_keys()
    pagination = provider.pagination
    return {
        "data": [_as_row(r) for r in records],
        "keys": keys,
        "page_current": pagination.current_page - 1,
        "page_count": pagination.page_count(),
        "total_count": provider.get_total_count(),
    }
