"""Collection fetcher tests."""

import asyncio

import pytest

from clubsearch.cms import CmsDocument, CollectionPage, UpstreamHTTPError
from clubsearch.search import (
    CancellationToken,
    CollectionFetcher,
    OperationCancelled,
    TTLCache,
)
from clubsearch.search.fetcher import PEOPLE_CACHE_KEY
from fakes import FakeCms, person_doc, team_doc


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _fetcher(cms: FakeCms, cache: TTLCache | None = None, **kwargs) -> CollectionFetcher:
    return CollectionFetcher(
        cms.client(),
        cache if cache is not None else TTLCache(ttl=300.0),
        page_sizes={"articles": 2, "people": 2, "teams": 2},
        **kwargs,
    )


@pytest.mark.asyncio
async def test_follows_pages_until_last() -> None:
    """All pages are read in order."""
    cms = FakeCms(teams=[team_doc(f"t{i}", f"Team {i}") for i in range(5)])

    teams = await _fetcher(cms).fetch_all("teams")

    assert [team.id for team in teams] == ["t0", "t1", "t2", "t3", "t4"]
    assert cms.requests == [("teams", 1, 2), ("teams", 2, 2), ("teams", 3, 2)]


@pytest.mark.asyncio
async def test_stops_at_page_limit() -> None:
    """Never requests more than max_pages pages."""
    cms = FakeCms(teams=[team_doc(f"t{i}", f"Team {i}") for i in range(9)])

    teams = await _fetcher(cms, max_pages=3).fetch_all("teams")

    assert len(teams) == 6
    assert cms.calls("teams") == 3


@pytest.mark.asyncio
async def test_stops_on_empty_page() -> None:
    """An empty page ends pagination even if more pages are claimed."""

    class EndlessEmptySource:
        def __init__(self) -> None:
            self.calls = 0

        async def fetch_page(self, collection, page, page_size):
            self.calls += 1
            return CollectionPage[CmsDocument](docs=[], has_next_page=True)

    source = EndlessEmptySource()
    fetcher = CollectionFetcher(source, TTLCache(ttl=300.0))

    assert await fetcher.fetch_all("articles") == ()
    assert source.calls == 1


@pytest.mark.asyncio
async def test_default_page_size() -> None:
    """Collections without an override use 50 per page."""
    cms = FakeCms()
    await CollectionFetcher(cms.client(), TTLCache(ttl=300.0)).fetch_all("teams")
    assert cms.requests == [("teams", 1, 50)]


@pytest.mark.asyncio
async def test_page_failure_fails_whole_fetch() -> None:
    """A failing page raises instead of returning a partial collection."""
    cms = FakeCms()
    cms.failures["teams"] = 500

    with pytest.raises(UpstreamHTTPError):
        await _fetcher(cms).fetch_all("teams")


@pytest.mark.asyncio
async def test_cancelled_token_stops_before_request() -> None:
    """No page is requested once the token is cancelled."""
    cms = FakeCms(teams=[team_doc("t1", "U15")])
    token = CancellationToken()
    token.cancel("superseded")

    with pytest.raises(OperationCancelled):
        await _fetcher(cms).fetch_all("teams", token)
    assert cms.requests == []


@pytest.mark.asyncio
async def test_people_served_from_cache() -> None:
    """People are fetched once while the cache entry is fresh."""
    cms = FakeCms(people=[person_doc("p1", "Jan", "Peeters")])
    cache: TTLCache = TTLCache(ttl=300.0)
    fetcher = _fetcher(cms, cache)

    first = await fetcher.fetch_all("people")
    second = await fetcher.fetch_all("people")

    assert first == second
    assert cms.calls("people") == 1
    assert cache.get(PEOPLE_CACHE_KEY) == first


@pytest.mark.asyncio
async def test_people_refetched_after_ttl() -> None:
    """An expired people entry triggers a fresh fetch."""
    cms = FakeCms(people=[person_doc("p1", "Jan", "Peeters")])
    clock = FakeClock()
    fetcher = _fetcher(cms, TTLCache(ttl=300.0, clock=clock))

    await fetcher.fetch_all("people")
    clock.now = 301.0
    await fetcher.fetch_all("people")

    assert cms.calls("people") == 2


@pytest.mark.asyncio
async def test_failed_people_fetch_is_not_cached() -> None:
    """A failure leaves the cache empty so the next request retries."""
    cms = FakeCms(people=[person_doc("p1", "Jan", "Peeters")])
    cache: TTLCache = TTLCache(ttl=300.0)
    fetcher = _fetcher(cms, cache)
    cms.failures["people"] = 500

    with pytest.raises(UpstreamHTTPError):
        await fetcher.fetch_all("people")
    assert len(cache) == 0

    del cms.failures["people"]
    people = await fetcher.fetch_all("people")
    assert [person.id for person in people] == ["p1"]


@pytest.mark.asyncio
async def test_other_collections_are_not_cached() -> None:
    """Articles and teams are read fresh every time."""
    cms = FakeCms(teams=[team_doc("t1", "U15")])
    fetcher = _fetcher(cms)

    await fetcher.fetch_all("teams")
    await fetcher.fetch_all("teams")

    assert cms.calls("teams") == 2


class GatedSource:
    """Page source that holds every request until the gate opens."""

    def __init__(self, cms: FakeCms) -> None:
        self._inner = cms.client()
        self.gate = asyncio.Event()

    async def fetch_page(self, collection, page, page_size):
        await self.gate.wait()
        return await self._inner.fetch_page(collection, page, page_size)


@pytest.mark.asyncio
async def test_shared_people_load_ignores_first_callers_token() -> None:
    """Cancelling the caller that started a shared load does not fail the others."""
    cms = FakeCms(people=[person_doc(f"p{i}", "Jan", f"Nr{i}") for i in range(3)])
    source = GatedSource(cms)
    fetcher = CollectionFetcher(
        source,
        TTLCache(ttl=300.0, single_flight=True),
        page_sizes={"people": 2},
    )
    starter = CancellationToken()

    first = asyncio.ensure_future(fetcher.fetch_all("people", starter))
    second = asyncio.ensure_future(fetcher.fetch_all("people", CancellationToken()))
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    starter.cancel("superseded")
    source.gate.set()

    people = await second
    assert [person.id for person in people] == ["p0", "p1", "p2"]
    assert cms.calls("people") == 2
    await asyncio.wait([first])
