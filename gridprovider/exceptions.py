from typing import Optional


class DataProviderError(Exception):
    """Base class for errors raised by the provider layer."""


class InvalidConfiguration(DataProviderError, ValueError):
    """A required collaborator or setting is missing or malformed."""


class InvalidSortColumn(DataProviderError, ValueError):
    def __init__(self, column: str, allowed: Optional[list[str]] = None) -> None:
        self.column = column
        self.allowed = allowed or []
        msg = f"Unsupported sort column: {column}"
        if self.allowed:
            msg += f" (allowed: {', '.join(self.allowed)})"
        super().__init__(msg)


class MissingField(DataProviderError, LookupError):
    def __init__(self, field: str, record=None) -> None:
        self.field = field
        self.record = record
        super().__init__(f"Record has no field {field!r}")

