from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import Select, column, func, inspect, select
from sqlalchemy.orm import Session

from ..exceptions import InvalidConfiguration
from ..sort import SortDirection, SortSpec

logger = logging.getLogger(__name__)


class SqlQuery:
    """Query collaborator over a SQLAlchemy `Select` executed in a `Session`.

    `Select` objects are immutable, so every modifier returns a new SqlQuery
    and `clone()` only needs to copy the wrapper.
    """

    def __init__(self, session: Session, statement: Select) -> None:
        if session is None:
            raise InvalidConfiguration("SqlQuery requires a SQLAlchemy Session")
        if not isinstance(statement, Select):
            raise InvalidConfiguration("SqlQuery requires a SQLAlchemy Select statement")
        self.session = session
        self.statement = statement

    def _with(self, statement: Select) -> "SqlQuery":
        return SqlQuery(self.session, statement)

    def clone(self) -> "SqlQuery":
        return self._with(self.statement)

    def limit(self, n: int) -> "SqlQuery":
        return self._with(self.statement.limit(None if n is None or n < 0 else n))

    def offset(self, n: int) -> "SqlQuery":
        return self._with(self.statement.offset(None if n is None or n < 0 else n))

    def _column(self, name: str):
        entity = self._entity()
        if entity is not None and name in inspect(entity).column_attrs:
            return getattr(entity, name)
        selected = self.statement.selected_columns
        if name in selected:
            return selected[name]
        return column(name)

    def order_by(self, orders: SortSpec) -> "SqlQuery":
        stmt = self.statement.order_by(None)
        clauses = []
        for name, direction in orders.items():
            col = self._column(name)
            desc = SortDirection.parse(direction) is SortDirection.DESC
            clauses.append(col.desc() if desc else col.asc())
        if clauses:
            stmt = stmt.order_by(*clauses)
        return self._with(stmt)

    def count(self) -> int:
        inner = self.statement.order_by(None).limit(None).offset(None).subquery()
        stmt = select(func.count()).select_from(inner)
        logger.debug("Counting rows: %s", stmt)
        return int(self.session.execute(stmt).scalar_one())

    # ---- Entity metadata ----
    def _entity(self) -> Optional[Any]:
        descriptions = self.statement.column_descriptions
        if len(descriptions) != 1:
            return None
        desc = descriptions[0]
        entity = desc.get("entity")
        if entity is not None and desc.get("expr") is entity:
            return entity
        return None

    def _single_table(self):
        froms = self.statement.get_final_froms()
        if len(froms) == 1 and hasattr(froms[0], "primary_key"):
            return froms[0]
        return None

    def all(self) -> list:
        logger.debug("Fetching rows: %s", self.statement)
        if self._entity() is not None:
            return list(self.session.scalars(self.statement).all())
        return list(self.session.execute(self.statement).mappings().all())

    def primary_key_fields(self) -> list[str]:
        entity = self._entity()
        if entity is not None:
            mapper = inspect(entity)
            return [mapper.get_property_by_column(col).key for col in mapper.primary_key]
        table = self._single_table()
        if table is None:
            return []
        selected = set(self.statement.selected_columns.keys())
        names = [col.key for col in table.primary_key.columns]
        return names if all(n in selected for n in names) else []

    def new_instance_attribute_names(self) -> list[str]:
        entity = self._entity()
        if entity is not None:
            return [attr.key for attr in inspect(entity).column_attrs]
        return list(self.statement.selected_columns.keys())

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"SqlQuery({self.statement})"
