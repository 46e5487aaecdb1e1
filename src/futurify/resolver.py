"""
Error-first completion callbacks that settle an ``asyncio.Future``.

The callback handed to a wrapped callable has the signature
``callback(error, *values)``. A non-``None`` error rejects the future; otherwise
the future resolves with the first value, or with every value when
``multi_args`` is enabled.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
import typing as t

import structlog

from futurify.exceptions import as_exception

log = structlog.get_logger(__name__)

Callback = t.Callable[..., None]


def _settle_with_exception(*, future: asyncio.Future[t.Any], error: t.Any) -> None:
    if future.done():
        log.warning(
            event="Ignoring error reported after future settled",
            cancelled=future.cancelled(),
            error=repr(error),
        )
        return
    future.set_exception(as_exception(error=error))


def _settle_with_result(*, future: asyncio.Future[t.Any], value: t.Any) -> None:
    if future.done():
        log.warning(
            event="Ignoring value reported after future settled",
            cancelled=future.cancelled(),
        )
        return
    future.set_result(value)


def _copy_outcome(*, source: asyncio.Future[t.Any], target: asyncio.Future[t.Any]) -> None:
    """
    Transfer the outcome of an aggregate future to the adapter's future.
    """
    if source.cancelled():
        if not target.done():
            target.cancel()
        return
    error = source.exception()
    if error is not None:
        _settle_with_exception(future=target, error=error)
    else:
        _settle_with_result(future=target, value=source.result())


def _adopt(*, future: asyncio.Future[t.Any], awaitable: t.Awaitable[t.Any]) -> None:
    """
    Settle ``future`` with the outcome of ``awaitable`` once it completes.
    """
    source = asyncio.ensure_future(awaitable, loop=future.get_loop())
    source.add_done_callback(lambda done: _copy_outcome(source=done, target=future))


def _settle_with_values(*, future: asyncio.Future[t.Any], values: tuple[t.Any, ...]) -> None:
    """
    Resolve ``future`` with every value, waiting on the awaitable ones.

    Parameters
    ----------
    future : asyncio.Future[typing.Any]
        Future owned by the adapted call.
    values : tuple[typing.Any, ...]
        Success values in the order the callback received them.
    """
    if not any(inspect.isawaitable(value) for value in values):
        _settle_with_result(future=future, value=list(values))
        return

    loop = future.get_loop()
    awaitables = []
    for value in values:
        if inspect.isawaitable(value):
            awaitables.append(value)
        else:
            ready = loop.create_future()
            ready.set_result(value)
            awaitables.append(ready)

    _adopt(future=future, awaitable=asyncio.gather(*awaitables))


def _on_loop_thread(*, loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


def create_resolver(*, future: asyncio.Future[t.Any], multi_args: bool = False) -> Callback:
    """
    Build the error-first callback that settles ``future``.

    Parameters
    ----------
    future : asyncio.Future[typing.Any]
        Future returned to the caller of the adapted function.
    multi_args : bool, optional
        If ``True``, resolve with a list of every success value. Awaitable
        values are gathered so the list resolves once all of them settle.
        Otherwise an awaitable first value is adopted: the future settles with
        its outcome.

    Returns
    -------
    Callback
        ``callback(error, *values)``. Safe to call from any thread; settlement
        always happens on the future's loop.
    """
    loop = future.get_loop()

    def settle(error: t.Any, values: tuple[t.Any, ...]) -> None:
        if error is not None:
            _settle_with_exception(future=future, error=error)
        elif multi_args:
            _settle_with_values(future=future, values=values)
        elif values and inspect.isawaitable(values[0]):
            _adopt(future=future, awaitable=values[0])
        else:
            _settle_with_result(future=future, value=values[0] if values else None)

    def callback(error: t.Any = None, *values: t.Any) -> None:
        if _on_loop_thread(loop=loop):
            settle(error, values)
            return
        log.debug(
            event="Marshalling callback onto event loop",
            thread=threading.current_thread().name,
        )
        loop.call_soon_threadsafe(settle, error, values)

    return callback
