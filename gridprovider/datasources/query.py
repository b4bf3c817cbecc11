from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from ..config import Settings
from ..exceptions import InvalidConfiguration
from ..keys import extract_keys, primary_key_policy
from ..pagination import UNBOUNDED, Pagination
from ..sort import Sort, SortSpec
from .base import BaseDataProvider

logger = logging.getLogger(__name__)


@runtime_checkable
class Query(Protocol):
    """Lazy, cloneable query the provider pages through.

    `clone()` must return an independent copy: limits, offsets and orders set on
    the clone never leak back into the original. A limit or offset of -1 removes
    the bound; an empty order spec removes the ordering.
    """

    def clone(self) -> "Query": ...

    def limit(self, n: int) -> "Query": ...

    def offset(self, n: int) -> "Query": ...

    def order_by(self, orders: SortSpec) -> "Query": ...

    def count(self) -> int: ...

    def all(self) -> Sequence[Any]: ...


class QueryDataProvider(BaseDataProvider):
    """Provider backed by a query collaborator (e.g. :class:`SqlQuery`).

    Keys come from the configured key policy; without one, the query's
    primary-key fields are used when it exposes them (scalar keys for a single
    field, ``{field: value}`` mappings for a compound key), and the record's
    position within the page otherwise.
    """

    def __init__(
        self,
        query: Optional[Query],
        *,
        sort: Optional[Sort] = None,
        pagination: Optional[Pagination] = None,
        key: Any = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.query = query
        super().__init__(sort=sort, pagination=pagination, key=key, settings=settings)

    def _require_query(self) -> Query:
        if self.query is None or not isinstance(self.query, Query):
            raise InvalidConfiguration(
                'The "query" collaborator must implement clone, limit, offset, order_by, count and all.'
            )
        return self.query

    def set_sort(self, sort: Optional[Sort]) -> "QueryDataProvider":
        if sort is not None and not sort.attribute_names():
            names = self._attribute_names()
            if names:
                sort.set_attributes(names)
        super().set_sort(sort)
        return self

    def _attribute_names(self) -> list[str]:
        fn = getattr(self.query, "new_instance_attribute_names", None)
        return list(fn()) if callable(fn) else []

    def _primary_key_fields(self) -> list[str]:
        fn = getattr(self.query, "primary_key_fields", None)
        return list(fn()) if callable(fn) else []

    # ---- Hooks ----
    def fetch_total_count(self) -> int:
        query = self._require_query().clone()
        total = int(query.limit(UNBOUNDED).offset(UNBOUNDED).order_by({}).count())
        logger.debug("Total count probe returned %d", total)
        return total

    def fetch_page(self) -> list:
        query = self._require_query().clone()
        pagination = self.pagination
        if pagination.enabled:
            if pagination.limit() == 0:
                # past the last page; some engines read limit 0 as unbounded
                return []
            query = query.limit(pagination.limit()).offset(pagination.offset())
        if self.sort is not None:
            orders = self.sort.get_orders()
            if orders:
                query = query.order_by(orders)
        return list(query.all())

    def fetch_keys(self, records: Sequence[Any]) -> list:
        if self.key is not None:
            return extract_keys(records, self.key)
        pks = self._primary_key_fields()
        if pks:
            return extract_keys(records, primary_key_policy(pks))
        return list(range(len(records)))
