"""
Main endpoints for users.
Exposes ``promisify`` to adapt one error-first callback function,
``promisify_all`` to patch every eligible function reachable from an object,
and ``from_callback`` to run a one-off callback-based operation as a future.
"""

import asyncio
import typing as t

import pydantic
import structlog

from futurify.core import BulkConverter
from futurify.exceptions import PromisifyConfigError
from futurify.models import USE_THIS, BulkOptions, Filter, Promisifier
from futurify.proxy import PromisifiedFunction, promisify_function
from futurify.resolver import create_resolver

log = structlog.get_logger(__name__)

T = t.TypeVar(name="T")


def promisify(
    fn: t.Callable[..., t.Any],
    *,
    context: t.Any = USE_THIS,
    multi_args: bool = False,
) -> PromisifiedFunction:
    """
    Adapt an error-first callback function into one returning a future.

    Parameters
    ----------
    fn : typing.Callable[..., typing.Any]
        Function taking a ``callback(error, *values)`` as its last positional
        argument.
    context : typing.Any, optional
        Receiver ``fn`` is bound to on every call. Defaults to ``USE_THIS``:
        the receiver the adapter itself is accessed through, if any.
    multi_args : bool, optional
        Resolve with a list of every success value instead of the first one.

    Returns
    -------
    PromisifiedFunction
        Callable returning an ``asyncio.Future``.

    Raises
    ------
    TypeError
        If ``fn`` is not callable.

    Notes
    -----
    >>> read_async = promisify(read_file)
    >>> contents = await read_async("notes.txt")
    """
    if not callable(fn):
        raise TypeError(f"promisify expects a callable, got {type(fn).__name__}")
    return promisify_function(fn, context=context, multi_args=multi_args)


def promisify_all(
    obj: T,
    *,
    context: t.Any = None,
    multi_args: bool = False,
    suffix: str = "Async",
    filter: Filter | None = None,
    promisifier: Promisifier | None = None,
) -> T:
    """
    Install a future-returning twin for every eligible callback function of ``obj``.

    Parameters
    ----------
    obj : T
        Object, class, module or function to patch in place.
    context : typing.Any, optional
        Accepted for compatibility; installed adapters always bind to the
        receiver they are called through.
    multi_args : bool, optional
        Resolve with a list of every success value.
    suffix : str, optional
        Appended to each converted name. Must match ``[A-Za-z_][A-Za-z0-9_]*``.
    filter : Filter | None, optional
        ``filter(name, fn, target, default_verdict) -> bool`` deciding which
        names are converted.
    promisifier : Promisifier | None, optional
        ``promisifier(fn, default_factory) -> callable`` building each installed
        callable. ``default_factory()`` returns the default adapter.

    Returns
    -------
    T
        ``obj`` itself.

    Raises
    ------
    PromisifyConfigError
        If the options are invalid. ``obj`` is left untouched.
    """
    try:
        options = BulkOptions(
            context=context,
            multi_args=multi_args,
            suffix=suffix,
            filter=filter,
            promisifier=promisifier,
        )
    except pydantic.ValidationError as error:
        raise PromisifyConfigError(str(object=error)) from error

    if context is not None:
        log.debug(
            event="Ignoring bulk context; adapters bind to their receiver",
            context=repr(context),
        )

    return BulkConverter(options=options).run(obj=obj)


def from_callback(
    fn: t.Callable[[t.Callable[..., None]], t.Any],
    *,
    multi_args: bool = False,
) -> asyncio.Future[t.Any]:
    """
    Run ``fn(callback)`` and return a future settled by that callback.

    Parameters
    ----------
    fn : typing.Callable[[typing.Callable[..., None]], typing.Any]
        Function receiving an error-first ``callback(error, *values)``.
    multi_args : bool, optional
        Resolve with a list of every success value.

    Returns
    -------
    asyncio.Future[typing.Any]
        Future settled when ``callback`` is invoked.

    Notes
    -----
    As with ``promisify``, exceptions raised synchronously by ``fn`` propagate
    from this call and the pending future is cancelled.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[t.Any] = loop.create_future()
    try:
        fn(create_resolver(future=future, multi_args=multi_args))
    except Exception as error:
        log.debug(
            event="Callback operation raised synchronously",
            function=repr(fn),
            error=str(object=error),
        )
        future.cancel()
        raise
    return future
