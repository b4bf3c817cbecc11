from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional, Protocol, Sequence

from ..config import Settings, get_settings
from ..exceptions import InvalidConfiguration
from ..keys import KeyPolicy, key_policy
from ..pagination import Pagination
from ..sort import Sort

logger = logging.getLogger(__name__)


class DataProvider(Protocol):
    """Protocol for what a grid widget reads from a data provider."""

    @property
    def sort(self) -> Optional[Sort]: ...

    @property
    def pagination(self) -> Pagination: ...

    def get_records(self) -> list: ...

    def get_keys(self) -> list: ...

    def get_count(self) -> int: ...

    def get_total_count(self) -> int: ...

    def refresh(self) -> None: ...


class LoadState(Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


class BaseDataProvider(ABC):
    """Lazy, cached page of records plus keys, built from three adapter hooks.

    Nothing is fetched until `get_records()`, `get_keys()`, `get_count()` or
    `get_total_count()` is called. Page preparation runs `fetch_total_count`
    (unless the total is already cached), then `fetch_page`, then `fetch_keys`;
    results become visible only once all of them succeed. `refresh()` drops
    everything so the next access re-runs the hooks.

    An instance is not thread-safe; use one provider per request.
    """

    def __init__(
        self,
        *,
        sort: Optional[Sort] = None,
        pagination: Optional[Pagination] = None,
        key: Any = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._sort: Optional[Sort] = None
        self._pagination = pagination or Pagination(settings=self.settings)
        self._key: Optional[KeyPolicy] = key_policy(key) if key is not None else None
        self._state = LoadState.UNLOADED
        self._records: list = []
        self._keys: list = []
        self._total_state = LoadState.UNLOADED
        self._total_count = 0
        if sort is not None:
            self.set_sort(sort)

    # ---- Adapter hooks ----
    @abstractmethod
    def fetch_page(self) -> list:
        """Records of the current page, already sorted and sliced."""

    @abstractmethod
    def fetch_keys(self, records: Sequence[Any]) -> list:
        """One key per record, in the same order."""

    @abstractmethod
    def fetch_total_count(self) -> int:
        """Number of records across all pages."""

    # ---- Configuration ----
    @property
    def sort(self) -> Optional[Sort]:
        return self._sort

    def set_sort(self, sort: Optional[Sort]) -> "BaseDataProvider":
        self._sort = sort
        self.refresh()
        return self

    @property
    def pagination(self) -> Pagination:
        return self._pagination

    def set_pagination(self, pagination: Optional[Pagination]) -> "BaseDataProvider":
        self._pagination = pagination or Pagination.disabled(settings=self.settings)
        self.refresh()
        return self

    @property
    def key(self) -> Optional[KeyPolicy]:
        return self._key

    def set_key(self, key: Any) -> "BaseDataProvider":
        self._key = key_policy(key) if key is not None else None
        self.refresh()
        return self

    # ---- State ----
    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def is_prepared(self) -> bool:
        return self._state is LoadState.LOADED

    def refresh(self) -> None:
        """Forget cached records, keys and total count."""
        if self._state is not LoadState.UNLOADED or self._total_state is not LoadState.UNLOADED:
            logger.debug("Refreshing %s", type(self).__name__)
        self._state = LoadState.UNLOADED
        self._records = []
        self._keys = []
        self._total_state = LoadState.UNLOADED
        self._total_count = 0

    def _run_hook(self, name: str, *args: Any) -> Any:
        logger.debug("%s: running %s", type(self).__name__, name)
        try:
            return getattr(self, name)(*args)
        except Exception as exc:
            exc.add_note(f"raised while running {type(self).__name__}.{name}")
            logger.warning("%s.%s failed: %s", type(self).__name__, name, exc)
            raise

    def prepare(self, force: bool = False) -> None:
        """Load the current page and its keys unless already loaded."""
        if self._state is LoadState.LOADED and not force:
            return
        if force:
            self.refresh()

        had_total = self._total_state is LoadState.LOADED
        self._state = LoadState.LOADING
        try:
            if self._sort is not None:
                # unknown columns under strict sorting fail before the data source is touched
                self._sort.get_attribute_orders()
            total = self.get_total_count()
            self._pagination.total_count(total)
            if total == 0:
                records: list = []
            else:
                records = list(self._run_hook("fetch_page"))
            keys = list(self._run_hook("fetch_keys", records))
            if len(keys) != len(records):
                raise InvalidConfiguration(
                    f"{type(self).__name__}.fetch_keys returned {len(keys)} keys for {len(records)} records"
                )
        except BaseException:
            self._state = LoadState.UNLOADED
            if not had_total:
                self._total_state = LoadState.UNLOADED
                self._total_count = 0
            raise

        self._records = records
        self._keys = keys
        self._state = LoadState.LOADED

    # ---- Public accessors ----
    def get_records(self) -> list:
        self.prepare()
        return self._records

    def get_keys(self) -> list:
        self.prepare()
        return self._keys

    def get_count(self) -> int:
        return len(self.get_records())

    def get_total_count(self) -> int:
        """Total number of records; computed once and independently of the page."""
        if self._total_state is not LoadState.LOADED:
            self._total_state = LoadState.LOADING
            try:
                total = int(self._run_hook("fetch_total_count"))
            except BaseException:
                self._total_state = LoadState.UNLOADED
                raise
            self._total_count = total
            self._total_state = LoadState.LOADED
        return self._total_count
