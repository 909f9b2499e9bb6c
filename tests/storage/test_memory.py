"""Tests for the in-memory persistence and search backends."""

import pytest

from Multitenant_API.models import Address, DomainObject, Pager, User
from Multitenant_API.storage import InMemoryDAO, InMemorySearchIndex


@pytest.fixture
def dao() -> InMemoryDAO:
    return InMemoryDAO()


@pytest.fixture
async def index() -> InMemorySearchIndex:
    search = InMemorySearchIndex()
    documents = [
        User(id="u1", appid="demo", name="Ann Lee", email="ann@example.org", tags=["vip", "active"], timestamp=1),
        User(id="u2", appid="demo", name="Bob Stone", email="bob@example.org", tags=["active"], timestamp=2),
        User(id="u3", appid="demo", name="Annie Hall", email="annie@example.org", tags=["vip"], timestamp=3),
        Address(id="a1", appid="demo", address="Sofia center", latlng="42.6977,23.3219", timestamp=4),
        Address(id="a2", appid="demo", address="Plovdiv", latlng="42.1354,24.7453", timestamp=5),
        DomainObject(id="b1", type="book", appid="other", name="Dune"),
    ]
    for doc in documents:
        await search.index(doc.appid, doc)
    return search


@pytest.mark.anyio("asyncio")
async def test_dao_round_trip_isolates_copies(dao: InMemoryDAO) -> None:
    obj = DomainObject(type="book", name="Dune")
    object_id = await dao.create("demo", obj)
    assert object_id is not None and obj.id == object_id

    stored = await dao.read("demo", object_id)
    stored.name = "changed"
    assert (await dao.read("demo", object_id)).name == "Dune"
    assert await dao.read("other", object_id) is None

    await dao.delete("demo", obj)
    assert await dao.read("demo", object_id) is None
    await dao.delete("demo", obj)


@pytest.mark.anyio("asyncio")
async def test_dao_read_all_skips_missing(dao: InMemoryDAO) -> None:
    await dao.create("demo", DomainObject(id="1", type="book"))
    await dao.create("demo", DomainObject(id="2", type="book"))
    found = await dao.read_all("demo", ["2", "missing", "1"])
    assert list(found) == ["2", "1"]


@pytest.mark.anyio("asyncio")
async def test_find_query_matches_tokens_and_wildcards(index: InMemorySearchIndex) -> None:
    pager = Pager()
    hits = await index.find_query("demo", "user", "ann", pager)
    assert {hit.id for hit in hits} == {"u1", "u3"}
    assert pager.count == 2

    hits = await index.find_query("demo", None, "*", Pager())
    assert len(hits) == 5

    hits = await index.find_query("demo", "user", "bob*", Pager())
    assert [hit.id for hit in hits] == ["u2"]


@pytest.mark.anyio("asyncio")
async def test_results_sorted_by_timestamp_descending(index: InMemorySearchIndex) -> None:
    hits = await index.find_query("demo", "user", "*", Pager())
    assert [hit.id for hit in hits] == ["u3", "u2", "u1"]
    hits = await index.find_query("demo", "user", "*", Pager(sortby="name", desc=False))
    assert [hit.id for hit in hits] == ["u1", "u3", "u2"]


@pytest.mark.anyio("asyncio")
async def test_paging_reports_total_hits(index: InMemorySearchIndex) -> None:
    pager = Pager(page=2, limit=2)
    hits = await index.find_query("demo", "user", "*", pager)
    assert pager.count == 3
    assert [hit.id for hit in hits] == ["u1"]


@pytest.mark.anyio("asyncio")
async def test_find_tagged_requires_every_tag(index: InMemorySearchIndex) -> None:
    hits = await index.find_tagged("demo", "user", ["vip", "active"], Pager())
    assert [hit.id for hit in hits] == ["u1"]


@pytest.mark.anyio("asyncio")
async def test_find_nearby_uses_radius(index: InMemorySearchIndex) -> None:
    hits = await index.find_nearby("demo", "address", "*", 10, 42.69, 23.32, Pager())
    assert [hit.id for hit in hits] == ["a1"]
    hits = await index.find_nearby("demo", "address", "*", 200, 42.69, 23.32, Pager())
    assert {hit.id for hit in hits} == {"a1", "a2"}


@pytest.mark.anyio("asyncio")
async def test_find_prefix_and_wildcard(index: InMemorySearchIndex) -> None:
    hits = await index.find_prefix("demo", "user", "name", "ann", Pager())
    assert {hit.id for hit in hits} == {"u1", "u3"}
    pager = Pager()
    assert await index.find_prefix("demo", "user", None, "ann", pager) == []
    assert pager.count == 0

    hits = await index.find_wildcard("demo", "user", "email", "b*@example.org", Pager())
    assert [hit.id for hit in hits] == ["u2"]


@pytest.mark.anyio("asyncio")
async def test_find_similar_excludes_filter_id(index: InMemorySearchIndex) -> None:
    hits = await index.find_similar("demo", "user", "u1", ["name"], "Ann Lee", Pager())
    assert "u1" not in {hit.id for hit in hits}
    assert await index.find_similar("demo", "user", None, ["name"], "zzz", Pager()) == []


@pytest.mark.anyio("asyncio")
async def test_find_terms_and_term_in_list(index: InMemorySearchIndex) -> None:
    hits = await index.find_terms("demo", "user", {"name": "Ann Lee", "email": "bob@example.org"}, False, Pager())
    assert {hit.id for hit in hits} == {"u1", "u2"}
    hits = await index.find_terms("demo", "user", {"name": "Ann Lee", "email": "bob@example.org"}, True, Pager())
    assert hits == []
    assert await index.find_terms("demo", "user", {}, True, Pager()) == []

    hits = await index.find_term_in_list("demo", "user", "email", ["ann@example.org", "x@y.z"], Pager())
    assert [hit.id for hit in hits] == ["u1"]


@pytest.mark.anyio("asyncio")
async def test_get_count(index: InMemorySearchIndex) -> None:
    assert await index.get_count("demo", "user") == 3
    assert await index.get_count("demo", None) == 5
    assert await index.get_count("demo", "user", {"tags": "vip"}) == 2
    assert await index.get_count("demo", "user", {}) == 0
    assert await index.get_count("other", "user") == 0


@pytest.mark.anyio("asyncio")
async def test_find_by_ids_and_unindex(index: InMemorySearchIndex) -> None:
    hits = await index.find_by_ids("demo", ["u2", "nope", "a1"])
    assert [hit.id for hit in hits] == ["u2", "a1"]
    doc = await index.find_by_id("demo", "u2")
    await index.unindex("demo", doc)
    assert await index.find_by_id("demo", "u2") is None
