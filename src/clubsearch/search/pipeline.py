"""Result union and stage combinator for the search request pipeline.

Each stage takes the previous stage's value plus the request's
cancellation token and returns ``Ok`` or ``Err``. ``pipeline`` threads
the value through the stages and stops at the first ``Err``.
"""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from clubsearch.search.cancellation import CancellationToken, OperationCancelled

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful stage output."""

    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed stage output carrying the error that ended the pipeline."""

    error: E


Result = Union[Ok[T], Err[Exception]]

Stage = Callable[
    [Any, CancellationToken],
    Union[Result[Any], Awaitable[Result[Any]]],
]


async def pipeline(
    value: Any,
    *stages: Stage,
    token: CancellationToken,
) -> Result[Any]:
    """Run ``value`` through ``stages`` in order.

    Stages may be plain functions or coroutines. The token is checked
    before every stage; a cancelled token ends the pipeline with
    ``Err(OperationCancelled)``.

    Args:
        value: Input to the first stage.
        *stages: Stage callables.
        token: Cancellation token for this run.

    Returns:
        The last stage's ``Ok`` or the first ``Err`` produced.
    """
    current: Result[Any] = Ok(value)
    for stage in stages:
        if token.cancelled:
            return Err(OperationCancelled(token.reason or "cancelled"))

        outcome = stage(current.value, token)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        current = outcome

        if isinstance(current, Err):
            return current
    return current
