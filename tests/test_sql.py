from __future__ import annotations

import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from gridprovider.config import Settings
from gridprovider.datasources.query import QueryDataProvider
from gridprovider.datasources.sql import SqlQuery
from gridprovider.exceptions import InvalidConfiguration
from gridprovider.pagination import Pagination
from gridprovider.sort import Sort, SortDirection


class Base(DeclarativeBase):
    pass


class Customer(Base):
    __tablename__ = "customer"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    city: Mapped[str] = mapped_column(String(50))


class OrderItem(Base):
    __tablename__ = "order_item"

    order_id: Mapped[int] = mapped_column(primary_key=True)
    item_id: Mapped[int] = mapped_column(primary_key=True)
    quantity: Mapped[int] = mapped_column(Integer)


class Product(Base):
    __tablename__ = "product"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column("product_name", String(50))


metadata = MetaData()
audit = Table(
    "audit",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("action", String(20)),
)


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    metadata.create_all(engine)
    with Session(engine) as s:
        cities = ["Oslo", "Lima", "Pune"]
        s.add_all(Customer(id=i, name=f"customer-{i:02d}", city=cities[i % 3]) for i in range(1, 26))
        s.add_all(OrderItem(order_id=o, item_id=i, quantity=o * i) for o in (1, 2) for i in (1, 2, 3))
        s.execute(audit.insert(), [{"id": 1, "action": "login"}, {"id": 2, "action": "logout"}])
        s.add_all(Product(id=i, title=t) for i, t in enumerate(["kettle", "anvil", "lamp"], start=1))
        s.commit()
        yield s
    engine.dispose()


def test_orm_paging_with_scalar_primary_keys(session):
    provider = QueryDataProvider(
        SqlQuery(session, select(Customer)),
        pagination=Pagination(page_size=10, current_page=3, settings=Settings()),
        settings=Settings(),
    )
    assert provider.get_total_count() == 25
    records = provider.get_records()
    assert all(isinstance(r, Customer) for r in records)
    assert provider.get_count() == 5
    assert provider.get_keys() == [21, 22, 23, 24, 25]


def test_orm_multi_column_sort(session):
    sort = Sort(multi_sort=True, settings=Settings())
    provider = QueryDataProvider(
        SqlQuery(session, select(Customer)),
        sort=sort,
        pagination=Pagination(page_size=3, settings=Settings()),
        settings=Settings(),
    )
    assert sort.attribute_names() == ["id", "name", "city"]
    sort.params({"sort": "city,-id"})
    provider.refresh()
    assert [c.city for c in provider.get_records()] == ["Lima", "Lima", "Lima"]
    assert provider.get_keys() == [25, 22, 19]


def test_compound_primary_key(session):
    provider = QueryDataProvider(SqlQuery(session, select(OrderItem)), settings=Settings())
    keys = provider.get_keys()
    assert len(keys) == 6
    assert {"order_id": 1, "item_id": 1} in keys


def test_core_table_returns_mappings(session):
    query = SqlQuery(session, select(audit))
    assert query.primary_key_fields() == ["id"]
    assert query.new_instance_attribute_names() == ["id", "action"]
    provider = QueryDataProvider(query, key="action", settings=Settings())
    assert provider.get_keys() == ["login", "logout"]
    assert provider.get_records()[0]["action"] == "login"


def test_column_selection_without_primary_key_uses_positions(session):
    query = SqlQuery(session, select(Customer.name, Customer.city).where(Customer.city == "Oslo"))
    provider = QueryDataProvider(query, pagination=Pagination(page_size=2, settings=Settings()), settings=Settings())
    assert provider.get_total_count() == 8
    assert provider.get_keys() == [0, 1]


def test_clone_and_modifiers_are_independent(session):
    base = SqlQuery(session, select(Customer).order_by(Customer.name).limit(2))
    counted = base.clone().limit(-1).offset(-1).order_by({})
    assert counted.count() == 25
    assert base.count() == 25
    assert len(base.all()) == 2
    assert counted.statement is not base.statement
    ordered = base.order_by({"id": SortDirection.DESC}).limit(1)
    assert ordered.all()[0].id == 25


def test_requires_select_and_session(session):
    with pytest.raises(InvalidConfiguration):
        SqlQuery(session, "SELECT 1")
    with pytest.raises(InvalidConfiguration):
        SqlQuery(None, select(Customer))


def test_sort_by_attribute_whose_column_is_named_differently(session):
    query = SqlQuery(session, select(Product))
    assert query.new_instance_attribute_names() == ["id", "title"]
    sort = Sort(settings=Settings()).params({"sort": "-title"})
    provider = QueryDataProvider(query, sort=sort, settings=Settings())
    assert [p.title for p in provider.get_records()] == ["lamp", "kettle", "anvil"]
    assert provider.get_keys() == [3, 1, 2]


def test_request_sort_survives_attribute_discovery(session):
    sort = Sort(settings=Settings()).params({"sort": "-id"})
    provider = QueryDataProvider(
        SqlQuery(session, select(Customer)),
        sort=sort,
        pagination=Pagination(page_size=3, settings=Settings()),
        settings=Settings(),
    )
    assert provider.get_keys() == [25, 24, 23]
