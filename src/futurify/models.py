"""
Option models shared by the single-callable and bulk adapters.
"""

import re
import typing as t

from pydantic import BaseModel, ConfigDict, field_validator


class _UseThis:
    """Sentinel type for "bind to the receiver the adapter is called through"."""

    _instance: "_UseThis | None" = None

    def __new__(cls) -> "_UseThis":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "USE_THIS"

    def __reduce__(self) -> str:
        return "USE_THIS"


USE_THIS = _UseThis()

IDENTIFIER_PATTERN = re.compile(pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")

Filter = t.Callable[[str, t.Callable[..., t.Any], t.Any, bool], bool]
Promisifier = t.Callable[[t.Callable[..., t.Any], t.Callable[[], t.Callable[..., t.Any]]], t.Any]


def is_identifier(name: t.Any) -> bool:
    """
    Check that ``name`` is a string matching ``[A-Za-z_][A-Za-z0-9_]*``.

    Parameters
    ----------
    name : typing.Any
        Candidate attribute name or suffix.

    Returns
    -------
    bool
        ``True`` if ``name`` is identifier-shaped.
    """
    return isinstance(name, str) and IDENTIFIER_PATTERN.match(name) is not None


class AdapterOptions(BaseModel):
    """
    Options captured by a ``PromisifiedFunction`` when it is built.

    Attributes
    ----------
    context : typing.Any
        Fixed receiver for every call, or ``USE_THIS`` to use the receiver the
        adapter is bound to at call time.
    multi_args : bool
        Resolve with every success value instead of only the first one.
    lookup_key : str | None
        Attribute re-read on the receiver at call time instead of calling a
        captured callable.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    context: t.Any = USE_THIS
    multi_args: bool = False
    lookup_key: str | None = None

    @property
    def uses_receiver(self) -> bool:
        return self.context is USE_THIS


class BulkOptions(BaseModel):
    """
    Options accepted by ``promisify_all``, validated once per call.

    Attributes
    ----------
    context : typing.Any
        Accepted for API compatibility; installed adapters always bind to
        their receiver.
    multi_args : bool
        Forwarded to every installed adapter.
    suffix : str
        Appended to each converted name. Must be identifier-shaped.
    filter : Filter | None
        ``filter(name, fn, target, default_verdict) -> bool``; its return value
        is authoritative.
    promisifier : Promisifier | None
        ``promisifier(fn, default_factory) -> callable``; builds the installed
        callable instead of the default adapter.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    context: t.Any = None
    multi_args: bool = False
    suffix: t.Any = "Async"
    filter: Filter | None = None
    promisifier: Promisifier | None = None

    @field_validator("suffix")
    @classmethod
    def _check_suffix(cls, value: t.Any) -> str:
        if not is_identifier(value):
            raise ValueError(f"The suffix should be a string matching {IDENTIFIER_PATTERN.pattern}")
        return value
