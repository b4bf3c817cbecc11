"""Sort definition shared by every data provider.

A :class:`Sort` knows which attributes a grid may be sorted by, how each
attribute maps onto one or more underlying columns, and which attributes the
current request asked for. Downstream consumers read the normalized result
through :meth:`Sort.get_orders`, either to build an ORDER BY on a query or to
drive :func:`sort_records` over an in-memory sequence.
"""
from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Mapping
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from .config import Settings, get_settings
from .exceptions import InvalidConfiguration, InvalidSortColumn, MissingField
from .utils import get_value


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> "SortDirection":
        if isinstance(value, SortDirection):
            return value
        if isinstance(value, str):
            v = value.strip().lower()
            if v in ("asc", "ascending"):
                return cls.ASC
            if v in ("desc", "descending"):
                return cls.DESC
        raise InvalidConfiguration(f"Unsupported sort direction: {value!r}")

    def reversed(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


SortSpec = dict[str, SortDirection]


def _parse_spec(value: Any) -> SortSpec:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidConfiguration(f"Column orders must be a mapping, got {type(value).__name__}")
    return {str(col): SortDirection.parse(d) for col, d in value.items()}


class SortAttribute(BaseModel):
    """One sortable attribute and the column orders it expands to."""

    name: str
    asc: SortSpec = Field(default_factory=dict)
    desc: SortSpec = Field(default_factory=dict)
    label: Optional[str] = None
    default: SortDirection = SortDirection.ASC

    @field_validator("asc", "desc", mode="before")
    @classmethod
    def _coerce_orders(cls, v):
        return _parse_spec(v)

    @field_validator("default", mode="before")
    @classmethod
    def _coerce_default(cls, v):
        return SortDirection.parse(v)

    def model_post_init(self, __context: Any) -> None:
        if not self.asc:
            self.asc = {self.name: SortDirection.ASC}
        if not self.desc:
            self.desc = {self.name: SortDirection.DESC}
        if self.label is None:
            self.label = self.name

    def orders(self, direction: SortDirection) -> SortSpec:
        return dict(self.asc if direction is SortDirection.ASC else self.desc)


AttributesInput = Union[Iterable[str], Mapping[str, Any]]


def normalize(
    requested: Optional[Mapping[str, Any]],
    allowed_columns: Collection[str],
    strict: bool = False,
) -> SortSpec:
    """Turn a requested column -> direction mapping into a SortSpec.

    Unknown columns are dropped, or rejected with InvalidSortColumn when
    ``strict`` is set. Request order is kept: the first entry is the primary key.
    """
    spec: SortSpec = {}
    for column, direction in (requested or {}).items():
        if column not in allowed_columns:
            if strict:
                raise InvalidSortColumn(column, sorted(allowed_columns))
            continue
        if column not in spec:
            spec[column] = SortDirection.parse(direction)
    return spec


def _sort_key(value: Any) -> tuple:
    # None sorts before any value ascending
    return (value is not None, value)


def sort_value(record: Any, name: str) -> Any:
    """Field value to sort on; a record without the field sorts as None."""
    try:
        return get_value(record, name)
    except MissingField:
        return None


def sort_records(
    records: Iterable[Any],
    orders: Mapping[str, SortDirection],
    accessor: Callable[[Any, str], Any] = sort_value,
) -> list:
    """Stable multi-column sort; returns a new list and never touches the input.

    Column 1 decides first, ties fall through to column 2 and so on; records
    that tie on every column keep their input order.
    """
    result = list(records)
    for name, direction in reversed(list(orders.items())):
        result.sort(
            key=lambda record: _sort_key(accessor(record, name)),
            reverse=SortDirection.parse(direction) is SortDirection.DESC,
        )
    return result


class Sort:
    """Sortable attributes plus the orders requested for the current page."""

    def __init__(
        self,
        attributes: Optional[AttributesInput] = None,
        *,
        default_order: Optional[Mapping[str, Any]] = None,
        multi_sort: Optional[bool] = None,
        strict: Optional[bool] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.multi_sort = self.settings.multi_sort if multi_sort is None else multi_sort
        self.strict = self.settings.strict_sort if strict is None else strict
        self._attributes: dict[str, SortAttribute] = {}
        self._requested: Optional[SortSpec] = None
        self._validate_requested = True
        self._default_order: SortSpec = {}
        if attributes:
            self.set_attributes(attributes)
        if default_order:
            self.set_default_order(default_order)

    # ---- Attribute definitions ----
    def set_attributes(self, attributes: AttributesInput) -> "Sort":
        defs: dict[str, SortAttribute] = {}
        if isinstance(attributes, Mapping):
            for name, definition in attributes.items():
                if definition is None:
                    defs[name] = SortAttribute(name=name)
                elif isinstance(definition, SortAttribute):
                    defs[name] = definition
                elif isinstance(definition, Mapping):
                    try:
                        defs[name] = SortAttribute(name=name, **definition)
                    except ValidationError as exc:
                        raise InvalidConfiguration(f"Invalid definition for sort attribute {name!r}: {exc}") from exc
                else:
                    raise InvalidConfiguration(f"Invalid definition for sort attribute {name!r}")
        else:
            for name in attributes:
                if not isinstance(name, str):
                    raise InvalidConfiguration(f"Sort attribute names must be strings, got {name!r}")
                defs[name] = SortAttribute(name=name)
        self._attributes = defs
        return self

    def attribute_names(self) -> list[str]:
        return list(self._attributes)

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes

    def attribute(self, name: str) -> SortAttribute:
        try:
            return self._attributes[name]
        except KeyError:
            raise InvalidSortColumn(name, self.attribute_names()) from None

    def label(self, name: str) -> str:
        return self.attribute(name).label or name

    def set_default_order(self, orders: Mapping[str, Any]) -> "Sort":
        self._default_order = _parse_spec(orders)
        return self

    # ---- Requested orders ----
    def parse_sort_param(self, value: str) -> SortSpec:
        """Parse ``"age,-name"`` into ``{"age": ASC, "name": DESC}``."""
        requested: SortSpec = {}
        for part in value.split(self.settings.sort_separator):
            part = part.strip()
            direction = SortDirection.ASC
            if part.startswith("-"):
                direction = SortDirection.DESC
                part = part[1:].strip()
            if part and part not in requested:
                requested[part] = direction
        return requested

    def params(self, params: Mapping[str, Any]) -> "Sort":
        """Read the requested orders from request parameters.

        The request is kept as parsed; it is checked against the attributes
        when the orders are read, so attributes and ``multi_sort`` may still
        change afterwards.
        """
        raw = params.get(self.settings.sort_param)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            self._requested = None
            return self
        if not isinstance(raw, str):
            raise InvalidConfiguration(f"Sort parameter must be a string, got {type(raw).__name__}")
        return self.set_attribute_orders(self.parse_sort_param(raw))

    def set_attribute_orders(self, orders: Optional[Mapping[str, Any]], validate: bool = True) -> "Sort":
        if orders is None:
            self._requested = None
            return self
        self._requested = _parse_spec(orders)
        self._validate_requested = validate
        return self

    def get_attribute_orders(self) -> SortSpec:
        if self._requested is None:
            return dict(self._default_order)
        if not self._validate_requested:
            return dict(self._requested)
        spec = normalize(self._requested, self._attributes, strict=self.strict)
        if not self.multi_sort and spec:
            first = next(iter(spec))
            spec = {first: spec[first]}
        return spec

    def get_attribute_order(self, name: str) -> Optional[SortDirection]:
        return self.get_attribute_orders().get(name)

    def get_orders(self) -> SortSpec:
        """Column-level orders, expanded through the attribute definitions."""
        orders: SortSpec = {}
        for name, direction in self.get_attribute_orders().items():
            definition = self._attributes.get(name)
            if definition is None:
                orders.setdefault(name, direction)
                continue
            for column, col_direction in definition.orders(direction).items():
                orders.setdefault(column, col_direction)
        return orders

    # ---- Links ----
    def create_sort_param(self, name: str) -> str:
        """Sort parameter value for a header link that toggles ``name``."""
        definition = self.attribute(name)
        directions = self.get_attribute_orders()
        current = directions.pop(name, None)
        direction = current.reversed() if current is not None else definition.default
        if self.multi_sort:
            directions = {name: direction, **directions}
        else:
            directions = {name: direction}
        return self.settings.sort_separator.join(
            f"-{attr}" if d is SortDirection.DESC else attr for attr, d in directions.items()
        )

    # ---- In-memory ----
    def sort(self, records: Iterable[Any]) -> list:
        return sort_records(records, self.get_orders())

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"Sort(attributes={self.attribute_names()!r}, requested={self._requested!r})"
