"""Relevance ranking tests."""

from clubsearch.search import SearchResult, SearchResultType
from clubsearch.search.ranking import rank


def _result(id: str, title: str, type: SearchResultType = SearchResultType.ARTICLE):
    return SearchResult(id=id, type=type, title=title, url=f"/x/{id}")


def test_exact_match_first() -> None:
    """Exact title beats prefix and alphabetical order."""
    results = [_result("1", "Alpha KCVV"), _result("2", "KCVV Elewijt"), _result("3", "kcvv")]
    assert [r.id for r in rank(results, "KCVV")] == ["3", "2", "1"]


def test_prefix_matches_before_others() -> None:
    """Titles starting with the query come next."""
    results = [_result("1", "Beker"), _result("2", "Zomerkamp"), _result("3", "Zom")]
    assert [r.id for r in rank(results, "zo")] == ["3", "2", "1"]


def test_alphabetical_ignores_case() -> None:
    """Remaining titles sort alphabetically without case."""
    results = [_result("1", "delta"), _result("2", "Charlie"), _result("3", "bravo")]
    assert [r.id for r in rank(results, "xx")] == ["3", "2", "1"]


def test_ties_keep_input_order() -> None:
    """Equal titles keep their aggregation order."""
    results = [
        _result("a", "Elewijt"),
        _result("p", "Elewijt", SearchResultType.PERSON),
        _result("t", "Elewijt", SearchResultType.TEAM),
    ]
    assert [r.id for r in rank(results, "elewijt")] == ["a", "p", "t"]


def test_rank_does_not_mutate_input() -> None:
    """Ranking returns a new list."""
    results = [_result("1", "b"), _result("2", "a")]
    rank(results, "zz")
    assert [r.id for r in results] == ["1", "2"]
