from collections.abc import Mapping
from typing import Any

from .exceptions import MissingField

_MISSING = object()


def _lookup(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, _MISSING)
    return getattr(record, name, _MISSING)


def get_value(record: Any, path: str) -> Any:
    """Look up a field on a mapping or an object.

    The exact name is tried first; if it is absent and contains dots, the path
    is walked one segment at a time (``"name.first"``).
    """
    value = _lookup(record, path)
    if value is not _MISSING:
        return value
    if "." in path:
        value = record
        for part in path.split("."):
            value = _lookup(value, part)
            if value is _MISSING:
                break
        else:
            return value
    raise MissingField(path, record)

