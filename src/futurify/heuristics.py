"""
Decide whether a value is a class-like capability provider.

Class-like values found on a bulk-converted object get their own methods and
static callables converted too. Plain utility functions only get converted
themselves.
"""

import inspect
import re
import types
import typing as t

import structlog

log = structlog.get_logger(__name__)

CLASS_LIKE_ATTRIBUTE = "__futurify_class_like__"

SELF_ASSIGNMENT_PATTERN = re.compile(pattern=r"self\s*\.\s*[A-Za-z_]\w*\s*=(?!=)")

# Entries the interpreter adds to every class namespace.
_INTERPRETER_NAMES = frozenset(
    {
        "__module__",
        "__qualname__",
        "__doc__",
        "__dict__",
        "__weakref__",
        "__annotations__",
        "__annotate__",
        "__annotate_func__",
        "__annotations_cache__",
        "__firstlineno__",
        "__static_attributes__",
        "__orig_bases__",
        "__parameters__",
        "__type_params__",
        "__classcell__",
        "__slots__",
        "__abstractmethods__",
        "_abc_impl",
        CLASS_LIKE_ATTRIBUTE,
    }
)

CONSTRUCTOR_NAME = "__init__"

# Py_TPFLAGS_HEAPTYPE: set on classes created by a ``class`` statement.
_HEAPTYPE_FLAG = 1 << 9

T = t.TypeVar("T")


def is_builtin_type(value: t.Any) -> bool:
    """
    Check whether ``value`` is a type whose namespace cannot be patched.

    Parameters
    ----------
    value : typing.Any
        Value to inspect.

    Returns
    -------
    bool
        ``True`` for built-in and extension types such as ``object`` or ``dict``.
    """
    return isinstance(value, type) and not (value.__flags__ & _HEAPTYPE_FLAG)


def capability_names(value: t.Any) -> list[str]:
    """
    Names of a class namespace meant to be shared by its instances.

    Parameters
    ----------
    value : typing.Any
        Candidate class.

    Returns
    -------
    list[str]
        Author-defined names of ``value.__dict__``; empty for anything that is
        not a class.
    """
    if not isinstance(value, type):
        return []
    return [name for name in vars(value) if name not in _INTERPRETER_NAMES]


def static_names(value: t.Any) -> list[str]:
    """
    Own attribute names of a callable that are not instance capabilities.

    For a class these are its ``staticmethod`` and ``classmethod`` entries, for
    a plain function its public and single-underscore attributes. Other
    callables have none.
    """
    if isinstance(value, type):
        return [
            name
            for name, raw in vars(value).items()
            if isinstance(raw, (staticmethod, classmethod))
        ]
    if isinstance(value, types.FunctionType):
        return [name for name in vars(value) if not name.startswith("__")]
    return []


def _has_self_assignment(value: t.Any) -> bool:
    source = inspect.getsource(value)
    return SELF_ASSIGNMENT_PATTERN.search(source) is not None


def is_class_like(value: t.Any) -> bool:
    """
    Decide whether ``value`` should be recursed into by ``promisify_all``.

    A callable is class-like when an explicit ``class_like`` marker says so, or
    when, without a marker, any of the following holds:

    - its capability set has more than one name;
    - it has a capability name other than ``__init__``;
    - its source assigns ``self.<name> = ...`` and it has own static names.

    Parameters
    ----------
    value : typing.Any
        Value to inspect.

    Returns
    -------
    bool
        ``True`` if ``value`` is class-like. Inspection errors yield ``False``.
    """
    try:
        if not callable(value) or is_builtin_type(value):
            return False

        declared = vars(value).get(CLASS_LIKE_ATTRIBUTE) if hasattr(value, "__dict__") else None
        if declared is not None:
            return bool(declared)

        names = capability_names(value)
        has_methods = len(names) > 1
        has_methods_other_than_constructor = len(names) > 0 and names != [CONSTRUCTOR_NAME]
        if has_methods or has_methods_other_than_constructor:
            return True

        return bool(static_names(value)) and _has_self_assignment(value)
    except Exception as error:
        log.debug(
            event="Class-likeness inspection failed",
            value=repr(value),
            error=str(object=error),
        )
        return False


def class_like(flag: bool = True) -> t.Callable[[T], T]:
    """
    Declare explicitly whether a class or function is class-like.

    Overrides the shape heuristic used by ``promisify_all``.

    Parameters
    ----------
    flag : bool, optional
        ``True`` to always recurse into the decorated value, ``False`` to never
        recurse into it.

    Returns
    -------
    typing.Callable[[T], T]
        Decorator returning its argument unchanged apart from the marker.

    Example::

        @class_like(False)
        class Plain:
            def fetch(self, key, callback): ...
    """

    def decorator(value: T) -> T:
        setattr(value, CLASS_LIKE_ATTRIBUTE, flag)
        return value

    return decorator
