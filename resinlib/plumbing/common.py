"""
Shared helpers for asynchronous operations.
"""

import asyncio
from functools import wraps
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar


LOG = logging.getLogger(__name__)

T = TypeVar("T")

Callback = Callable[..., Any]
"""
Completion handler for an operation, called as `callback(None, result)` on success or
`callback(error)` on failure.
"""


def subscribe(future: "asyncio.Future[T]", callback: Callback) -> None:
    """
    Notify a completion handler once the given future is done.

    Cancellation isn't offered by any operation, but a cancelled future is still reported, as an
    error, so that the handler is always called exactly once.
    """
    def done(fut: "asyncio.Future[T]") -> None:
        if fut.cancelled():
            callback(asyncio.CancelledError())
            return
        error = fut.exception()
        if error is not None:
            callback(error)
        else:
            callback(None, fut.result())
    future.add_done_callback(done)


def deferred(fn: Callable[..., Awaitable[T]]) -> Callable[..., "asyncio.Future[T]"]:
    """
    Decorator: schedule a coroutine function as a task, and optionally report its outcome to a
    `callback` keyword argument:

        @deferred
        async def get_all(self, name: str) -> List[Record]: ...

        # Either await the result...
        variables = await service.get_all("device")
        # ...or pass a callback, or both.
        service.get_all("device", callback=lambda err, value=None: ...)

    The wrapped function returns an `asyncio.Future` straight away, so it must be called while an
    event loop is running.  Errors are never caught here: they surface on the future and, if given,
    as the callback's only argument.
    """
    @wraps(fn)
    def inner(*args: Any, callback: Optional[Callback] = None, **kwargs: Any) -> "asyncio.Future[T]":
        future = asyncio.ensure_future(fn(*args, **kwargs))
        if callback:
            LOG.debug("Subscribed %r to %s", callback, fn.__qualname__)
            subscribe(future, callback)
        return future
    return inner
