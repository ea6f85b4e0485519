"""Pytest configuration and fixtures."""

import sys
from collections.abc import Iterator
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from fastapi.testclient import TestClient

from clubsearch.app import create_app
from clubsearch.config import Settings
from fakes import FakeCms, article_doc, person_doc, team_doc


@pytest.fixture
def settings() -> Settings:
    """Create test settings with a small page size to exercise pagination."""
    return Settings(
        host="127.0.0.1",
        port=8000,
        debug=True,
        search_page_size=2,
    )


@pytest.fixture
def cms() -> FakeCms:
    """Content repository seeded with a small club."""
    return FakeCms(
        articles=[
            article_doc(
                "a1",
                "Overwinning voor KCVV tegen Hofstade",
                summary="KCVV wint met 3-1.",
                tags=("A-ploeg",),
                image="/media/match.jpg",
            ),
            article_doc("a2", "KCVV", body="<p>Welkom bij <b>KCVV</b> Elewijt</p>"),
            article_doc(
                "a3",
                "Jeugdtornooi",
                body="<p>Het tornooi van KCVV Elewijt</p>",
                tags=("Jeugd",),
            ),
            article_doc("a4", "KCVV Elewijt viert jubileum", tags=("Club",)),
            article_doc("a5", "Nieuwe sponsor", tags=("Sponsors",)),
        ],
        people=[
            person_doc(
                "p1",
                "Jan",
                "Peeters",
                position="Aanvaller",
                shirt_number=9,
                photo="/media/jan.jpg",
            ),
            person_doc("p2", "Tom", "Janssens", position="Verdediger", shirt_number=4),
            person_doc("p3", "Luc", "Van Kcvv", position_short="T1"),
        ],
        teams=[
            team_doc("t1", "KCVV Elewijt A", image="/media/a.jpg"),
            team_doc("t2", "U15"),
        ],
    )


@pytest.fixture
def client(settings: Settings, cms: FakeCms) -> Iterator[TestClient]:
    """Create test client with the app lifespan running."""
    app = create_app(settings, cms=cms.client())
    with TestClient(app) as test_client:
        yield test_client
