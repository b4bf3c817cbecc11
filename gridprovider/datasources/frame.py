from __future__ import annotations

from typing import Any, Optional, Sequence

import pandas as pd

from ..config import Settings
from ..exceptions import InvalidConfiguration, MissingField
from ..keys import extract_keys
from ..pagination import Pagination
from ..sort import Sort, SortDirection
from .base import BaseDataProvider


class FrameDataProvider(BaseDataProvider):
    """Provider over a pandas DataFrame; records come back as plain dicts.

    Default keys are the frame's index labels for the rows on the page. Missing
    values sort first in either direction.
    """

    def __init__(
        self,
        frame: Optional[pd.DataFrame] = None,
        *,
        sort: Optional[Sort] = None,
        pagination: Optional[Pagination] = None,
        key: Any = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._frame = pd.DataFrame()
        self._page_index: list = []
        super().__init__(sort=sort, pagination=pagination, key=key, settings=settings)
        self.set_frame(frame if frame is not None else pd.DataFrame())

    def set_frame(self, frame: pd.DataFrame) -> "FrameDataProvider":
        if not isinstance(frame, pd.DataFrame):
            raise InvalidConfiguration(f"frame must be a pandas DataFrame, got {type(frame).__name__}")
        self._frame = frame
        self.refresh()
        return self

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    # ---- Hooks ----
    def fetch_total_count(self) -> int:
        return len(self._frame)

    def _sorted(self) -> pd.DataFrame:
        df = self._frame
        if self.sort is None:
            return df
        orders = self.sort.get_orders()
        if not orders:
            return df
        for column in orders:
            if column not in df.columns:
                raise MissingField(column)
        return df.sort_values(
            by=list(orders),
            ascending=[d is SortDirection.ASC for d in orders.values()],
            kind="stable",
            na_position="first",
        )

    def fetch_page(self) -> list:
        df = self._sorted()
        pagination = self.pagination
        if pagination.enabled:
            start = pagination.offset()
            df = df.iloc[start:start + pagination.limit()]
        self._page_index = df.index.tolist()
        return df.to_dict(orient="records")

    def fetch_keys(self, records: Sequence[Any]) -> list:
        if self.key is not None:
            return extract_keys(records, self.key)
        return list(self._page_index)

    def refresh(self) -> None:
        super().refresh()
        self._page_index = []
