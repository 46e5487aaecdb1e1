"""
Eligibility rules deciding which discovered names get a future-returning twin.
"""

import typing as t

from futurify.discovery import inherited_data_keys, is_accessor, own_namespace
from futurify.models import Filter, is_identifier
from futurify.proxy import is_promisified

CONSTRUCTOR_NAMES = frozenset({"constructor", "__init__", "__new__", "__class__"})


def default_filter(name: str, *_: t.Any) -> bool:
    """
    Default verdict for a candidate name.

    Parameters
    ----------
    name : str
        Candidate attribute name.

    Returns
    -------
    bool
        ``True`` if ``name`` is identifier-shaped, public, and not a
        constructor name.
    """
    return is_identifier(name) and not name.startswith("_") and name not in CONSTRUCTOR_NAMES


def has_promisified(obj: t.Any, name: str, suffix: str) -> bool:
    """
    Check whether ``obj`` already owns a converted twin for ``name``.

    Parameters
    ----------
    obj : typing.Any
        Conversion target.
    name : str
        Original attribute name.
    suffix : str
        Suffix appended to converted names.

    Returns
    -------
    bool
        ``True`` if ``obj``'s own namespace holds ``name + suffix`` as an
        accessor or as a converted callable.
    """
    raw = own_namespace(link=obj).get(f"{name}{suffix}")
    if raw is None:
        return False
    if is_accessor(raw=raw):
        return True
    return is_promisified(raw)


def should_promisify(
    name: str,
    suffix: str,
    obj: t.Any,
    filter: Filter | None = None,
) -> bool:
    """
    Decide whether ``obj.<name>`` should be converted.

    Parameters
    ----------
    name : str
        Candidate attribute name.
    suffix : str
        Suffix appended to converted names.
    obj : typing.Any
        Conversion target.
    filter : Filter | None, optional
        Caller predicate ``filter(name, fn, obj, default_verdict)`` whose
        return value replaces the default verdict.

    Returns
    -------
    bool
        ``True`` if the name should get a converted twin.
    """
    fn = getattr(obj, name, None)

    if not callable(fn):
        return False

    if is_promisified(fn) or has_promisified(obj=obj, name=name, suffix=suffix):
        return False

    passes_filter = default_filter(name, fn, obj, True)
    if filter is not None:
        passes_filter = bool(filter(name, fn, obj, passes_filter))
    return passes_filter


def functions_to_promisify(
    obj: t.Any,
    suffix: str,
    filter: Filter | None = None,
) -> list[str]:
    """
    Names of ``obj`` that need a converted twin, in discovery order.
    """
    return [
        name
        for name in inherited_data_keys(obj=obj)
        if should_promisify(name=name, suffix=suffix, obj=obj, filter=filter)
    ]
