import logging
import typing as t
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

PACKAGE_LOGGER = "futurify"


def _processors(*, colors: bool) -> list[t.Any]:
    # Events carry keyword fields only, so no positional formatting step.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(colors=colors),
    ]


def setup_logging(*, level: int = logging.WARNING, colors: bool = False) -> None:
    """
    Route futurify events through the stdlib ``futurify`` logger.

    Parameters
    ----------
    level : int, optional
        Level applied to the ``futurify`` stdlib logger. Adapter internals log
        at ``DEBUG``; ignored late callbacks log at ``WARNING``.
    colors : bool, optional
        Whether the console renderer emits ANSI colors.
    """
    logging.getLogger(name=PACKAGE_LOGGER).setLevel(level=level)
    structlog.configure(
        processors=_processors(colors=colors),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


@contextmanager
def logging_context(**fields: t.Any) -> Iterator[None]:
    """
    Bind ``fields`` for the duration of the block.

    Fields already bound by an enclosing block keep their outer value, so a
    nested bulk conversion reports the suffix of the outermost call.
    """
    bound = structlog.contextvars.get_contextvars()
    tokens = structlog.contextvars.bind_contextvars(
        **{key: value for key, value in fields.items() if key not in bound}
    )
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)
