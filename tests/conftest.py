import os

import pytest

# Ensure predictable provider defaults before importing the package
for _name in list(os.environ):
    if _name.startswith("GRID_"):
        del os.environ[_name]


@pytest.fixture
def settings():
    from gridprovider.config import Settings

    return Settings(page_size_default=10, page_size_limit=50, multi_sort=False, strict_sort=False)


@pytest.fixture
def people():
    return [
        {"id": 1, "name": "carol", "age": 41, "team": "Data"},
        {"id": 2, "name": "alice", "age": 35, "team": "Platform"},
        {"id": 3, "name": "bob", "age": 35, "team": "Data"},
        {"id": 4, "name": "dave", "age": 29, "team": "Retail"},
        {"id": 5, "name": "erin", "age": None, "team": "Platform"},
    ]


@pytest.fixture
def numbered():
    """25 records with ids 0..24."""
    return [{"id": i, "value": f"row-{i}"} for i in range(25)]
