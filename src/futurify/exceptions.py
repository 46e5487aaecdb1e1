"""
futurify-specific runtime exceptions.
"""

from __future__ import annotations

import typing as t


class PromisifyConfigError(ValueError):
    """
    Signal invalid options passed to ``promisify_all``.

    Notes
    -----
    Raised synchronously, before the target object is mutated.
    """


class CallbackError(RuntimeError):
    """
    Wrap a non-exception value passed in the error slot of a completion callback.

    Parameters
    ----------
    reason : typing.Any
        Value the wrapped callable reported as its error.
    """

    def __init__(self, reason: t.Any) -> None:
        super().__init__(f"Callback reported an error: {reason!r}")
        self.reason = reason


def as_exception(*, error: t.Any) -> BaseException:
    """
    Normalize a callback error slot into an exception usable by ``asyncio``.

    Parameters
    ----------
    error : typing.Any
        Value received in the error slot.

    Returns
    -------
    BaseException
        ``error`` itself when it already is an exception instance, otherwise a
        ``CallbackError`` carrying it.
    """
    if isinstance(error, BaseException):
        return error
    return CallbackError(reason=error)
