"""
Future-returning adapters for error-first callback functions.

``PromisifiedFunction`` behaves like a plain function descriptor: stored on a
class and accessed through an instance, it binds to that instance, the same
way a method binds ``self``. Bound views are ``wrapt`` proxies so that
``isinstance(bound, PromisifiedFunction)`` keeps working, which is how
converted callables are recognized.
"""

import asyncio
import functools
import types
import typing as t

import structlog
import wrapt

from futurify.models import USE_THIS, AdapterOptions
from futurify.resolver import create_resolver

log = structlog.get_logger(__name__)


class _Unbound:
    def __repr__(self) -> str:
        return "<unbound>"


UNBOUND: t.Any = _Unbound()


def _bind(*, fn: t.Callable[..., t.Any], receiver: t.Any) -> t.Callable[..., t.Any]:
    """
    Bind a plain function to ``receiver`` as its first argument.

    Bound methods, built-ins and callable objects already carry their own
    receiver and are returned unchanged, as is everything when there is no
    receiver.
    """
    if receiver is UNBOUND or receiver is None:
        return fn
    if isinstance(fn, types.FunctionType):
        return types.MethodType(fn, receiver)
    return fn


class PromisifiedFunction:
    """
    Callable returning an ``asyncio.Future`` settled by an injected callback.

    Parameters
    ----------
    fn : typing.Callable[..., typing.Any]
        Callback-style callable. With a lookup key, only used for metadata.
    options : AdapterOptions
        Receiver policy, result aggregation and optional lookup key.
    owner : typing.Any, optional
        Object the adapter was installed on; receiver of unbound calls when
        ``options.context`` is ``USE_THIS``.
    """

    def __init__(
        self,
        fn: t.Callable[..., t.Any],
        options: AdapterOptions,
        owner: t.Any = UNBOUND,
    ) -> None:
        self._self_fn = fn
        self._self_options = options
        self._self_owner = owner
        functools.update_wrapper(wrapper=self, wrapped=fn, updated=())

    @property
    def options(self) -> AdapterOptions:
        return self._self_options

    def __repr__(self) -> str:
        name = getattr(self._self_fn, "__qualname__", None) or repr(self._self_fn)
        return f"<PromisifiedFunction {name}>"

    def __get__(self, instance: t.Any, owner: type | None = None) -> t.Any:
        if instance is not None:
            return BoundPromisifiedFunction(self, instance)
        if self._self_options.lookup_key is not None and owner is not None:
            return BoundPromisifiedFunction(self, owner)
        return self

    def __call__(self, *args: t.Any, **kwargs: t.Any) -> asyncio.Future[t.Any]:
        return self.invoke(UNBOUND, args, kwargs)

    def _resolve_context(self, receiver: t.Any) -> t.Any:
        if not self._self_options.uses_receiver:
            return self._self_options.context
        if receiver is UNBOUND:
            return self._self_owner
        return receiver

    def _resolve_target(self, context: t.Any) -> t.Callable[..., t.Any]:
        lookup_key = self._self_options.lookup_key
        if lookup_key is None:
            return _bind(fn=self._self_fn, receiver=context)
        if context is UNBOUND or context is None:
            raise TypeError(f"{self!r} has no receiver to look up {lookup_key!r} on")
        return getattr(context, lookup_key)

    def invoke(
        self,
        receiver: t.Any,
        args: tuple[t.Any, ...],
        kwargs: dict[str, t.Any],
    ) -> asyncio.Future[t.Any]:
        """
        Call the wrapped callable with an injected callback and return its future.

        Parameters
        ----------
        receiver : typing.Any
            Object the adapter was bound to, or ``UNBOUND``.
        args : tuple[typing.Any, ...]
            Positional arguments, placed before the callback.
        kwargs : dict[str, typing.Any]
            Keyword arguments forwarded unchanged.

        Returns
        -------
        asyncio.Future[typing.Any]
            Future settled when the callback is invoked.

        Raises
        ------
        RuntimeError
            If no event loop is running.

        Notes
        -----
        Exceptions raised synchronously by the wrapped callable propagate from
        this call. They are not stored in the returned future.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[t.Any] = loop.create_future()

        context = self._resolve_context(receiver)
        target = self._resolve_target(context)
        callback = create_resolver(future=future, multi_args=self._self_options.multi_args)

        try:
            target(*args, callback, **kwargs)
        except Exception as error:
            log.debug(
                event="Wrapped callable raised synchronously",
                function=repr(self),
                error=str(object=error),
            )
            future.cancel()
            raise
        return future


class BoundPromisifiedFunction(wrapt.ObjectProxy):
    """
    A ``PromisifiedFunction`` bound to the receiver it was accessed through.
    """

    def __init__(self, wrapped: PromisifiedFunction, receiver: t.Any) -> None:
        super().__init__(wrapped)
        self._self_receiver = receiver

    @property
    def __self__(self) -> t.Any:
        return self._self_receiver

    def __call__(self, *args: t.Any, **kwargs: t.Any) -> asyncio.Future[t.Any]:
        return self.__wrapped__.invoke(self._self_receiver, args, kwargs)


def is_promisified(value: t.Any) -> bool:
    """
    Check whether ``value`` was produced by this package's adapters.

    Parameters
    ----------
    value : typing.Any
        Value to inspect.

    Returns
    -------
    bool
        ``True`` for ``PromisifiedFunction`` instances and their bound views.
    """
    return isinstance(value, PromisifiedFunction)


def promisify_function(
    fn: t.Callable[..., t.Any],
    *,
    context: t.Any = USE_THIS,
    multi_args: bool = False,
    lookup_key: str | None = None,
    owner: t.Any = UNBOUND,
) -> PromisifiedFunction:
    """
    Build a ``PromisifiedFunction`` around ``fn``.

    Parameters
    ----------
    fn : typing.Callable[..., typing.Any]
        Callback-style callable.
    context : typing.Any, optional
        Fixed receiver, or ``USE_THIS``.
    multi_args : bool, optional
        Resolve with every success value.
    lookup_key : str | None, optional
        Re-read this attribute on the receiver at call time.
    owner : typing.Any, optional
        Receiver of unbound calls.

    Returns
    -------
    PromisifiedFunction
        The adapter.
    """
    options = AdapterOptions(context=context, multi_args=multi_args, lookup_key=lookup_key)
    return PromisifiedFunction(fn, options, owner)
