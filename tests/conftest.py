import logging

import pytest
import structlog

from tests.mocks.callbacks import CallbackClient


@pytest.fixture
def client_cls() -> type[CallbackClient]:
    """
    Fresh subclass of ``CallbackClient`` so conversions never leak between tests.

    Returns
    -------
    type[CallbackClient]
        Empty subclass inheriting every callback method.
    """
    return type("IsolatedClient", (CallbackClient,), {})


@pytest.fixture
def reset_structlog():
    """Restore structlog defaults after a test configures logging."""
    yield
    structlog.reset_defaults()
    logging.getLogger(name="futurify").setLevel(level=logging.NOTSET)
