from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Sequence, Union

from ..config import Settings
from ..exceptions import InvalidConfiguration
from ..keys import extract_keys
from ..pagination import Pagination
from ..sort import Sort, sort_records, sort_value
from .base import BaseDataProvider


class CollectionDataProvider(BaseDataProvider):
    """Provider over records that are already in memory.

    `all_records` may be a sequence or a mapping of key -> record. Sorting and
    slicing happen on a copy; the original collection is never mutated. Without
    a key policy, each record's key is its position in `all_records` (or its
    mapping key), regardless of how the page was sorted.
    """

    def __init__(
        self,
        all_records: Union[Sequence[Any], Mapping[Any, Any], None] = None,
        *,
        sort: Optional[Sort] = None,
        pagination: Optional[Pagination] = None,
        key: Any = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._all: list[tuple[Any, Any]] = []
        # original key of each record on the current page
        self._page_keys: list = []
        super().__init__(sort=sort, pagination=pagination, key=key, settings=settings)
        self.set_all_records(all_records if all_records is not None else [])

    def set_all_records(self, all_records: Union[Sequence[Any], Mapping[Any, Any]]) -> "CollectionDataProvider":
        if isinstance(all_records, Mapping):
            self._all = list(all_records.items())
        elif isinstance(all_records, (str, bytes)) or not isinstance(all_records, Sequence):
            raise InvalidConfiguration(
                f"all_records must be a sequence or a mapping of records, got {type(all_records).__name__}"
            )
        else:
            self._all = list(enumerate(all_records))
        self.refresh()
        return self

    @property
    def all_records(self) -> list:
        return [record for _, record in self._all]

    # ---- Hooks ----
    def fetch_total_count(self) -> int:
        return len(self._all)

    def fetch_page(self) -> list:
        entries = self._all
        if self.sort is not None:
            orders = self.sort.get_orders()
            if orders:
                entries = sort_records(entries, orders, accessor=lambda entry, name: sort_value(entry[1], name))
        pagination = self.pagination
        if pagination.enabled:
            start = pagination.offset()
            entries = entries[start:start + pagination.limit()]
        self._page_keys = [k for k, _ in entries]
        return [record for _, record in entries]

    def fetch_keys(self, records: Sequence[Any]) -> list:
        if self.key is not None:
            return extract_keys(records, self.key)
        return list(self._page_keys)

    def refresh(self) -> None:
        super().refresh()
        self._page_keys = []
