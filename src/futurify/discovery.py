"""
Inheritance-chain key discovery.

Walks a value and the classes it inherits from, collecting every plain
(non-accessor) attribute name. The closest link defining a name wins, and the
walk stops at the foundational roots so built-in namespaces are never touched.
"""

import functools
import inspect
import types
import typing as t
from dataclasses import dataclass

import structlog

from futurify.heuristics import is_builtin_type

log = structlog.get_logger(__name__)

# Roots backing sequences, functions and plain objects.
FORBIDDEN_ROOTS: tuple[type, ...] = (list, types.FunctionType, object)


@dataclass(frozen=True)
class CandidateKey:
    """An attribute name and the chain link whose namespace defines it."""

    name: str
    link: t.Any


def inheritance_chain(obj: t.Any) -> t.Iterator[t.Any]:
    """
    Yield ``obj``'s links from most to least specific.

    Parameters
    ----------
    obj : typing.Any
        Class, instance, module or function to walk.

    Yields
    ------
    typing.Any
        ``obj.__mro__`` entries for a class; otherwise ``obj`` followed by the
        entries of ``type(obj).__mro__``. Stops at the first forbidden root and
        skips other built-in types, whose namespaces cannot be patched.
    """
    links = obj.__mro__ if isinstance(obj, type) else (obj, *type(obj).__mro__)
    for link in links:
        if link is None or is_forbidden_root(link):
            return
        if is_builtin_type(link):
            continue
        yield link


def is_forbidden_root(link: t.Any) -> bool:
    """Check whether ``link`` is one of the foundational roots ending every walk."""
    return any(link is root for root in FORBIDDEN_ROOTS)


def is_accessor(raw: t.Any) -> bool:
    """
    Check whether a raw namespace entry computes its value on access.

    Parameters
    ----------
    raw : typing.Any
        Value stored in a ``__dict__``, before descriptor binding.

    Returns
    -------
    bool
        ``True`` for data descriptors (``property``, slot members, ...) and
        ``functools.cached_property``.
    """
    return inspect.isdatadescriptor(raw) or isinstance(raw, functools.cached_property)


def own_namespace(link: t.Any) -> t.Mapping[str, t.Any]:
    """
    Return the mapping holding ``link``'s own attributes.

    Links without a ``__dict__`` (slotted instances, most built-in values) have
    no own names.
    """
    namespace = getattr(link, "__dict__", None)
    if namespace is None:
        return {}
    return namespace


def discover_candidates(obj: t.Any) -> list[CandidateKey]:
    """
    Collect the candidate keys reachable through ``obj``'s inheritance chain.

    Parameters
    ----------
    obj : typing.Any
        Value to inspect.

    Returns
    -------
    list[CandidateKey]
        Candidates in discovery order. Names already seen on a closer link are
        skipped, and names bound to accessors are remembered but never returned.
        If a link cannot be enumerated, the candidates gathered so far are
        returned.
    """
    found: list[CandidateKey] = []
    visited: set[str] = set()

    for link in inheritance_chain(obj=obj):
        try:
            entries = list(own_namespace(link=link).items())
        except Exception as error:
            log.debug(
                event="Stopping key discovery on unreadable link",
                link=repr(link),
                error=str(object=error),
            )
            return found

        for name, raw in entries:
            if not isinstance(name, str) or name in visited:
                continue
            visited.add(name)
            if not is_accessor(raw=raw):
                found.append(CandidateKey(name=name, link=link))

    return found


def inherited_data_keys(obj: t.Any) -> list[str]:
    """
    Return the candidate names of ``obj`` in discovery order.

    Parameters
    ----------
    obj : typing.Any
        Value to inspect.

    Returns
    -------
    list[str]
        Names of ``discover_candidates(obj)``.
    """
    return [candidate.name for candidate in discover_candidates(obj=obj)]
