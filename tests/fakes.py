"""In-memory content repository and document builders for tests."""

from typing import Any

import httpx

from clubsearch.cms.client import CmsClient

CMS_URL = "http://cms.test"


def _slug(title: str) -> str:
    return title.lower().replace(" ", "-")


def article_doc(
    id: str,
    title: str,
    *,
    summary: str | None = None,
    body: str | None = None,
    tags: tuple[str, ...] = (),
    image: str | None = None,
    published_at: str | None = "2024-05-01T10:00:00.000Z",
) -> dict[str, Any]:
    return {
        "id": id,
        "title": title,
        "slug": _slug(title),
        "summary": summary,
        "body": body,
        "tags": [{"id": index, "name": name} for index, name in enumerate(tags)],
        "coverImage": {"url": image} if image else None,
        "publishedAt": published_at,
        "createdAt": published_at,
    }


def person_doc(
    id: str,
    first_name: str | None,
    last_name: str | None,
    *,
    title: str | None = None,
    position: str | None = None,
    position_short: str | None = None,
    shirt_number: int | None = None,
    photo: str | None = None,
) -> dict[str, Any]:
    name = f"{first_name or ''} {last_name or ''}".strip() or title or id
    return {
        "id": id,
        "title": title,
        "slug": _slug(name),
        "firstName": first_name,
        "lastName": last_name,
        "position": position,
        "positionShort": position_short,
        "shirtNumber": shirt_number,
        "photo": {"url": photo} if photo else None,
    }


def team_doc(id: str, title: str, *, image: str | None = None) -> dict[str, Any]:
    return {
        "id": id,
        "title": title,
        "slug": _slug(title),
        "image": {"url": image} if image else None,
    }


class FakeCms:
    """Serves collections the way the content repository paginates them.

    Attributes:
        collections: Raw documents per collection name.
        failures: Collections that answer with the given HTTP status.
        malformed: Collections that answer with a non-JSON body.
        requests: ``(collection, page, limit)`` for every request received.
    """

    def __init__(self, **collections: list[dict[str, Any]]) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {
            "articles": [],
            "people": [],
            "teams": [],
        }
        self.collections.update(collections)
        self.failures: dict[str, int] = {}
        self.malformed: set[str] = set()
        self.requests: list[tuple[str, int, int]] = []

    def calls(self, collection: str) -> int:
        return sum(1 for name, _, _ in self.requests if name == collection)

    def handler(self, request: httpx.Request) -> httpx.Response:
        collection = request.url.path.rsplit("/", 1)[-1]
        page = int(request.url.params["page"])
        limit = int(request.url.params["limit"])
        self.requests.append((collection, page, limit))

        if collection in self.failures:
            return httpx.Response(
                self.failures[collection],
                json={"errors": [{"message": "database connection lost"}]},
            )
        if collection in self.malformed:
            return httpx.Response(200, content=b"<html>maintenance</html>")

        docs = self.collections.get(collection, [])
        start = (page - 1) * limit
        return httpx.Response(
            200,
            json={
                "docs": docs[start : start + limit],
                "hasNextPage": start + limit < len(docs),
                "page": page,
                "totalDocs": len(docs),
            },
        )

    def client(self, max_retries: int = 0) -> CmsClient:
        async def no_sleep(_: float) -> None:
            return None

        return CmsClient(
            CMS_URL,
            max_retries=max_retries,
            http=httpx.AsyncClient(transport=httpx.MockTransport(self.handler)),
            sleep=no_sleep,
        )
