import pandas as pd
import pytest

from gridprovider.config import Settings
from gridprovider.datasources.frame import FrameDataProvider
from gridprovider.exceptions import InvalidConfiguration, MissingField
from gridprovider.pagination import Pagination
from gridprovider.sort import Sort


def make_df():
    return pd.DataFrame(
        {
            "product": ["A", "B", "A", "C", "B"],
            "region": ["EMEA", "APAC", "APAC", "EMEA", "EMEA"],
            "revenue": [100.0, 50.0, 70.0, 20.0, 50.0],
        },
        index=["r1", "r2", "r3", "r4", "r5"],
    )


def test_records_are_dicts_and_keys_are_index_labels():
    provider = FrameDataProvider(make_df(), pagination=Pagination(page_size=2, settings=Settings()), settings=Settings())
    assert provider.get_records() == [
        {"product": "A", "region": "EMEA", "revenue": 100.0},
        {"product": "B", "region": "APAC", "revenue": 50.0},
    ]
    assert provider.get_keys() == ["r1", "r2"]
    assert provider.get_total_count() == 5


def test_stable_multi_column_sort_and_paging():
    sort = Sort(["product", "revenue"], multi_sort=True, settings=Settings()).params({"sort": "product,-revenue"})
    provider = FrameDataProvider(
        make_df(), sort=sort, pagination=Pagination(page_size=2, current_page=2, settings=Settings()), settings=Settings()
    )
    # A: r1 100, r3 70 | B: r2 50, r5 50 (tie keeps frame order) | C: r4
    assert provider.get_keys() == ["r2", "r5"]


def test_key_field_and_disabled_pagination():
    provider = FrameDataProvider(
        make_df(), key=["product", "region"], pagination=Pagination.disabled(settings=Settings()), settings=Settings()
    )
    keys = provider.get_keys()
    assert len(keys) == 5
    assert keys[0] == {"product": "A", "region": "EMEA"}


def test_frame_not_mutated():
    df = make_df()
    sort = Sort(["revenue"], settings=Settings()).params({"sort": "revenue"})
    FrameDataProvider(df, sort=sort, settings=Settings()).get_records()
    assert df.index.tolist() == ["r1", "r2", "r3", "r4", "r5"]


def test_unknown_sort_column_in_definition():
    sort = Sort({"amount": {"asc": {"amount_usd": "asc"}}}, settings=Settings()).params({"sort": "amount"})
    provider = FrameDataProvider(make_df(), sort=sort, settings=Settings())
    with pytest.raises(MissingField):
        provider.get_records()


def test_empty_frame_and_type_check():
    provider = FrameDataProvider(settings=Settings())
    assert provider.get_records() == []
    with pytest.raises(InvalidConfiguration):
        provider.set_frame([{"a": 1}])
