"""Key policies: how a provider derives a stable identity for each record."""
from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Union

from .exceptions import InvalidConfiguration
from .utils import get_value


@dataclass(frozen=True)
class SingleField:
    name: str


@dataclass(frozen=True)
class CompositeFields:
    names: tuple[str, ...]

    def __init__(self, names: Iterable[str]) -> None:
        object.__setattr__(self, "names", tuple(names))


@dataclass(frozen=True)
class CustomExtractor:
    fn: Callable[[Any], Any]


KeyPolicy = Union[SingleField, CompositeFields, CustomExtractor]


def key_policy(value: Any) -> KeyPolicy:
    """Coerce a configuration value (name, list of names or callable) into a KeyPolicy."""
    if isinstance(value, (SingleField, CompositeFields, CustomExtractor)):
        return value
    if isinstance(value, str):
        if not value:
            raise InvalidConfiguration("Key field name must not be empty")
        return SingleField(value)
    if callable(value):
        return CustomExtractor(value)
    if isinstance(value, Sequence) and value and all(isinstance(v, str) and v for v in value):
        return CompositeFields(value)
    raise InvalidConfiguration(
        f"Key must be a field name, a list of field names or a callable, got {value!r}"
    )


def extract_key(record: Any, policy: KeyPolicy) -> Any:
    match policy:
        case SingleField(name=name):
            return get_value(record, name)
        case CompositeFields(names=names):
            return {name: get_value(record, name) for name in names}
        case CustomExtractor(fn=fn):
            return fn(record)
    raise InvalidConfiguration(f"Unsupported key policy: {policy!r}")


def extract_keys(records: Iterable[Any], policy: KeyPolicy) -> list:
    """One key per record, in record order."""
    return [extract_key(record, policy) for record in records]


def primary_key_policy(fields: Sequence[str]) -> KeyPolicy:
    """Scalar keys for a single primary-key field, composite keys otherwise."""
    if not fields:
        raise InvalidConfiguration("At least one primary key field is required")
    if len(fields) == 1:
        return SingleField(fields[0])
    return CompositeFields(fields)
