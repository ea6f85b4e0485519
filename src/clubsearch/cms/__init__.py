"""Content repository access: HTTP client, document schemas and errors."""

from clubsearch.cms.client import CmsClient
from clubsearch.cms.errors import (
    UpstreamDecodeError,
    UpstreamFetchError,
    UpstreamHTTPError,
    UpstreamTransportError,
)
from clubsearch.cms.schemas import (
    ArticleDoc,
    CmsDocument,
    CollectionName,
    CollectionPage,
    PersonDoc,
    TeamDoc,
)

__all__ = [
    "ArticleDoc",
    "CmsClient",
    "CmsDocument",
    "CollectionName",
    "CollectionPage",
    "PersonDoc",
    "TeamDoc",
    "UpstreamDecodeError",
    "UpstreamFetchError",
    "UpstreamHTTPError",
    "UpstreamTransportError",
]
