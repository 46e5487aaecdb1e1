"""
Tests for PromisifiedFunction in futurify.proxy.
"""

import asyncio

import pytest

from futurify.models import USE_THIS
from futurify.proxy import (
    BoundPromisifiedFunction,
    PromisifiedFunction,
    is_promisified,
    promisify_function,
)
from tests.mocks.callbacks import add, explode, later


def whoami(self, callback):
    """Report the receiver the function was called with."""
    later(callback, None, self)


def nothing(callback):
    later(callback, None, "nothing")


@pytest.mark.asyncio
async def test_returns_pending_future_immediately():
    adapted = promisify_function(add)

    future = adapted(1, 2)

    assert isinstance(future, asyncio.Future)
    assert not future.done()
    assert await future == 3


@pytest.mark.asyncio
async def test_forwards_keyword_arguments_after_callback():
    received = {}

    def configure(name, callback, *, verbose=False):
        received.update(name=name, verbose=verbose)
        later(callback, None, name)

    adapted = promisify_function(configure)

    assert await adapted("db", verbose=True) == "db"
    assert received == {"name": "db", "verbose": True}


@pytest.mark.asyncio
async def test_binds_to_instance_it_is_accessed_through():
    class Holder:
        whoami_async = promisify_function(whoami)

    holder = Holder()

    assert await holder.whoami_async() is holder


@pytest.mark.asyncio
async def test_unbound_access_through_class_takes_receiver_as_argument():
    class Holder:
        whoami_async = promisify_function(whoami)

    holder = Holder()

    assert Holder.whoami_async is Holder.__dict__["whoami_async"]
    assert await Holder.whoami_async(holder) is holder


@pytest.mark.asyncio
async def test_fixed_context_ignores_receiver():
    marker = object()

    class Holder:
        whoami_async = promisify_function(whoami, context=marker)

    assert await Holder().whoami_async() is marker
    assert await promisify_function(whoami, context=marker)() is marker


@pytest.mark.asyncio
async def test_none_context_calls_without_receiver():
    class Holder:
        nothing_async = promisify_function(nothing, context=None)

    assert await Holder().nothing_async() == "nothing"


@pytest.mark.asyncio
async def test_lookup_key_reads_function_at_call_time():
    class Service:
        def ping(self, callback):
            later(callback, None, "old")

    Service.ping_async = promisify_function(Service.ping, lookup_key="ping", owner=Service)
    service = Service()

    assert await service.ping_async() == "old"

    def replacement(self, callback):
        later(callback, None, "new")

    Service.ping = replacement

    assert await service.ping_async() == "new"


@pytest.mark.asyncio
async def test_lookup_key_falls_back_to_owner_when_unbound():
    class Namespace:
        pass

    namespace = Namespace()
    namespace.ping = lambda callback: later(callback, None, "owned")
    namespace.ping_async = promisify_function(namespace.ping, lookup_key="ping", owner=namespace)

    assert await namespace.ping_async() == "owned"


@pytest.mark.asyncio
async def test_lookup_key_without_receiver_raises():
    adapted = promisify_function(nothing, lookup_key="nothing")

    with pytest.raises(TypeError, match="no receiver"):
        adapted()


@pytest.mark.asyncio
async def test_sync_exception_propagates_from_call():
    adapted = promisify_function(explode)

    with pytest.raises(RuntimeError, match="sync failure"):
        adapted()


def test_call_without_running_loop_raises():
    adapted = promisify_function(add)

    with pytest.raises(RuntimeError):
        adapted(1, 2)


def test_bound_view_is_recognized_as_promisified():
    class Holder:
        whoami_async = promisify_function(whoami)

    holder = Holder()
    bound = holder.whoami_async

    assert type(bound) is BoundPromisifiedFunction
    assert isinstance(bound, PromisifiedFunction)
    assert bound.__self__ is holder
    assert is_promisified(bound)


def test_plain_functions_are_not_promisified():
    assert not is_promisified(add)
    assert not is_promisified(lambda callback: None)


def test_wrapper_metadata_copied_from_original():
    adapted = promisify_function(add)

    assert adapted.__name__ == "add"
    assert adapted.__wrapped__ is add
    assert adapted.__doc__ == add.__doc__
    assert "add" in repr(adapted)


def test_options_are_captured():
    adapted = promisify_function(add, multi_args=True)

    assert adapted.options.context is USE_THIS
    assert adapted.options.multi_args is True
    assert adapted.options.lookup_key is None
