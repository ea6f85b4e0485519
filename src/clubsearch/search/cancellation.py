"""Explicit cancellation signal shared by every stage of a search."""


class OperationCancelled(Exception):
    """Raised when work continues past the cancellation of its token."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Operation cancelled: {reason}")
        self.reason = reason


class CancellationToken:
    """One-shot cancellation flag handed to each stage of a request.

    A token is created per request and never reset. Identity matters:
    the client controller compares tokens to decide whether a resolving
    request is still the current one.
    """

    def __init__(self) -> None:
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "superseded") -> None:
        """Mark the token cancelled. Later calls keep the first reason."""
        if self._reason is None:
            self._reason = reason

    def raise_if_cancelled(self) -> None:
        """Stop the current stage if the token has been cancelled.

        Raises:
            OperationCancelled: If ``cancel()`` has been called.
        """
        if self._reason is not None:
            raise OperationCancelled(self._reason)
