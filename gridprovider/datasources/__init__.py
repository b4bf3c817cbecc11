"""Data layer package: provider core and its adapters.

Public exports:
- DataProvider protocol, BaseDataProvider core
- Query protocol, QueryDataProvider, SqlQuery
- CollectionDataProvider, FrameDataProvider
"""
from .base import BaseDataProvider, DataProvider, LoadState
from .query import Query, QueryDataProvider
from .sql import SqlQuery
from .collection import CollectionDataProvider
from .frame import FrameDataProvider

__all__ = [
    "DataProvider",
    "BaseDataProvider",
    "LoadState",
    "Query",
    "QueryDataProvider",
    "SqlQuery",
    "CollectionDataProvider",
    "FrameDataProvider",
]
