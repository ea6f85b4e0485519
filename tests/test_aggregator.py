"""Result aggregator tests."""

import pytest

from clubsearch.cms import UpstreamHTTPError
from clubsearch.search import (
    CancellationToken,
    CollectionFetcher,
    ResultAggregator,
    SearchResultType,
    TTLCache,
)
from fakes import FakeCms, article_doc, person_doc, team_doc


def _aggregator(cms: FakeCms) -> ResultAggregator:
    return ResultAggregator(CollectionFetcher(cms.client(), TTLCache(ttl=300.0)))


@pytest.fixture
def club() -> FakeCms:
    return FakeCms(
        articles=[article_doc("1", "Elewijt wint"), article_doc("2", "Beker")],
        people=[person_doc("1", "Jan", "Elewijt")],
        teams=[team_doc("1", "Elewijt A")],
    )


@pytest.mark.asyncio
async def test_concatenates_in_type_order(club: FakeCms) -> None:
    """Articles, then people, then teams; same ids across types are kept."""
    results = await _aggregator(club).aggregate("elewijt", None, CancellationToken())

    assert [(r.type.value, r.id) for r in results] == [
        ("article", "1"),
        ("person", "1"),
        ("team", "1"),
    ]


@pytest.mark.asyncio
async def test_filter_selects_one_matcher(club: FakeCms) -> None:
    """A type filter fetches only that collection."""
    results = await _aggregator(club).aggregate(
        "elewijt", SearchResultType.TEAM, CancellationToken()
    )

    assert [r.type for r in results] == [SearchResultType.TEAM]
    assert {name for name, _, _ in club.requests} == {"teams"}


def test_select_all_when_unfiltered(club: FakeCms) -> None:
    """No filter selects every matcher in type order."""
    selected = _aggregator(club).select(None)
    assert [m.type for m in selected] == list(SearchResultType)


@pytest.mark.asyncio
async def test_any_failure_fails_aggregation(club: FakeCms) -> None:
    """One failing collection fails the whole aggregation."""
    club.failures["people"] = 500

    with pytest.raises(UpstreamHTTPError) as exc_info:
        await _aggregator(club).aggregate("elewijt", None, CancellationToken())
    assert exc_info.value.collection == "people"
