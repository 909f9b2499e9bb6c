"""Tests for pager construction and in-memory paging."""

from starlette.datastructures import QueryParams

from Multitenant_API.models import DomainObject, Pager


def test_pager_defaults() -> None:
    pager = Pager.from_params(QueryParams(""))
    assert pager.page == 0
    assert pager.limit == 30
    assert pager.desc is True
    assert pager.sortby is None
    assert pager.count == 0
    assert pager.offset == 0


def test_pager_reads_params() -> None:
    pager = Pager.from_params(QueryParams("page=3&limit=10&sort=name&desc=false"))
    assert (pager.page, pager.limit, pager.sortby, pager.desc) == (3, 10, "name", False)
    assert pager.offset == 20


def test_pager_ignores_malformed_numbers() -> None:
    pager = Pager.from_params(QueryParams("page=abc&limit=-4"), default_limit=15)
    assert pager.page == 0
    assert pager.limit == 15


def test_pager_caps_limit() -> None:
    pager = Pager.from_params(QueryParams("limit=5000"), max_limit=1000)
    assert pager.limit == 1000


def test_first_page_aliases() -> None:
    """Pages 0 and 1 both address the first page."""
    assert Pager(page=1, limit=10).offset == 0
    assert Pager(page=0, limit=10).offset == 0
    assert Pager(page=2, limit=10).offset == 10


def test_paginate_sorts_counts_and_slices() -> None:
    hits = [
        DomainObject(id="a", type="book", name="Dune", timestamp=1),
        DomainObject(id="b", type="book", name="Emma", timestamp=3),
        DomainObject(id="c", type="book", timestamp=2),
    ]
    pager = Pager(limit=2)
    assert [obj.id for obj in pager.paginate(hits)] == ["b", "c"]
    assert pager.count == 3

    by_name = Pager(sortby="name", desc=False)
    assert [obj.id for obj in by_name.paginate(hits)] == ["a", "b", "c"]

    second = Pager(page=2, limit=2)
    assert [obj.id for obj in second.paginate(hits, presorted=True)] == ["c"]
