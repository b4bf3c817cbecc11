from .config import Settings, get_settings
from .exceptions import DataProviderError, InvalidConfiguration, InvalidSortColumn, MissingField
from .keys import CompositeFields, CustomExtractor, KeyPolicy, SingleField, extract_keys, key_policy
from .pagination import UNBOUNDED, Pagination, PaginationState
from .sort import Sort, SortDirection, SortSpec, normalize, sort_records, sort_value
from .datasources import (
    BaseDataProvider,
    CollectionDataProvider,
    DataProvider,
    FrameDataProvider,
    Query,
    QueryDataProvider,
    SqlQuery,
)

__all__ = [
    "Settings",
    "get_settings",
    "DataProviderError",
    "InvalidConfiguration",
    "InvalidSortColumn",
    "MissingField",
    "KeyPolicy",
    "SingleField",
    "CompositeFields",
    "CustomExtractor",
    "key_policy",
    "extract_keys",
    "UNBOUNDED",
    "Pagination",
    "PaginationState",
    "Sort",
    "SortDirection",
    "SortSpec",
    "normalize",
    "sort_records",
    "sort_value",
    "DataProvider",
    "BaseDataProvider",
    "Query",
    "QueryDataProvider",
    "SqlQuery",
    "CollectionDataProvider",
    "FrameDataProvider",
]
