"""
Bulk conversion of every callback-style callable reachable from an object.
"""

from __future__ import annotations

import typing as t

import structlog

from futurify.discovery import inherited_data_keys
from futurify.filters import CONSTRUCTOR_NAMES, functions_to_promisify
from futurify.heuristics import is_class_like
from futurify.logging import logging_context
from futurify.models import USE_THIS, BulkOptions
from futurify.proxy import PromisifiedFunction, promisify_function

log = structlog.get_logger(__name__)


class BulkConverter:
    """
    Install ``<name><suffix>`` adapters on an object and its class-like members.

    Parameters
    ----------
    options : BulkOptions
        Validated options of the ``promisify_all`` call.

    Notes
    -----
    Installed adapters always bind to the receiver they are called through and
    look the original callable up again by name on every call, so overrides
    defined after conversion are honored.
    """

    def __init__(self, options: BulkOptions) -> None:
        self._options = options

    def _default_adapter(self, *, target: t.Any, name: str) -> PromisifiedFunction:
        return promisify_function(
            getattr(target, name),
            context=USE_THIS,
            multi_args=self._options.multi_args,
            lookup_key=name,
            owner=target,
        )

    def _build(self, *, target: t.Any, name: str) -> t.Any:
        promisifier = self._options.promisifier
        if promisifier is None:
            return self._default_adapter(target=target, name=name)
        return promisifier(
            getattr(target, name),
            lambda: self._default_adapter(target=target, name=name),
        )

    def convert(self, target: t.Any) -> list[str]:
        """
        Install adapters for every eligible name of ``target``.

        Parameters
        ----------
        target : typing.Any
            Object, class, module or function to patch in place.

        Returns
        -------
        list[str]
            Names of the installed attributes, in installation order.
        """
        suffix = self._options.suffix
        installed: list[str] = []
        for name in functions_to_promisify(obj=target, suffix=suffix, filter=self._options.filter):
            converted_name = f"{name}{suffix}"
            setattr(target, converted_name, self._build(target=target, name=name))
            installed.append(converted_name)

        if installed:
            log.debug(
                event="Installed promisified functions",
                target=repr(target),
                count=len(installed),
            )
        return installed

    def convert_class_like(self, value: t.Any) -> None:
        """
        Convert a class-like value's instance capabilities and its statics.

        A class keeps both in its own namespace and is converted once. Any other
        class-like callable only has its own attributes converted.
        """
        instance_provider = value if isinstance(value, type) else None
        if instance_provider is not None:
            self.convert(target=instance_provider)
        if instance_provider is not value:
            self.convert(target=value)

    def run(self, obj: t.Any) -> t.Any:
        """
        Convert class-like members of ``obj``, then ``obj`` itself.

        Parameters
        ----------
        obj : typing.Any
            Conversion target.

        Returns
        -------
        typing.Any
            ``obj``, mutated in place.
        """
        with logging_context(suffix=self._options.suffix):
            for name in inherited_data_keys(obj=obj):
                if name in CONSTRUCTOR_NAMES:
                    continue
                value = getattr(obj, name, None)
                if value is not obj and is_class_like(value):
                    log.debug(event="Recursing into class-like member", name=name)
                    self.convert_class_like(value=value)

            self.convert(target=obj)
        return obj
