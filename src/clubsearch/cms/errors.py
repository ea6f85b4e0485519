"""Errors raised while reading collections from the content repository."""


class UpstreamFetchError(Exception):
    """Raised when a collection page cannot be fetched or decoded.

    Attributes:
        collection: Name of the collection being read.
        page: Page number that failed, if known.
    """

    def __init__(
        self, message: str, collection: str, page: int | None = None
    ) -> None:
        """Initialize upstream fetch error.

        Args:
            message: Error description.
            collection: Collection that failed.
            page: Page number that failed.
        """
        super().__init__(message)
        self.collection = collection
        self.page = page


class UpstreamHTTPError(UpstreamFetchError):
    """Raised when the content repository answers with an error status."""

    def __init__(
        self, message: str, collection: str, page: int | None, status: int
    ) -> None:
        """Initialize HTTP error.

        Args:
            message: Error description.
            collection: Collection that failed.
            page: Page number that failed.
            status: HTTP status code returned by the repository.
        """
        super().__init__(message, collection, page)
        self.status = status

    @property
    def retryable(self) -> bool:
        """Server-side failures may succeed on a later attempt."""
        return self.status >= 500


class UpstreamTransportError(UpstreamFetchError):
    """Raised on connection failures and timeouts."""


class UpstreamDecodeError(UpstreamFetchError):
    """Raised when a page payload is not valid JSON or fails schema validation."""
