"""
Tests for inheritance-chain key discovery in futurify.discovery.
"""

import functools
import types

import futurify.discovery as discovery
from futurify.discovery import (
    discover_candidates,
    inheritance_chain,
    inherited_data_keys,
    is_accessor,
    is_forbidden_root,
)
from tests.mocks.callbacks import CallbackClient, FrenchClient, make_namespace_function


class Base:
    def shared(self, callback): ...

    def masked(self, callback): ...

    def base_only(self, callback): ...


class Derived(Base):
    def shared(self, callback): ...

    @property
    def masked(self):
        return "computed"


def test_chain_of_class_is_its_mro_without_object():
    assert list(inheritance_chain(obj=Derived)) == [Derived, Base]


def test_chain_of_instance_starts_with_instance():
    instance = Derived()

    assert list(inheritance_chain(obj=instance)) == [instance, Derived, Base]


def test_chain_stops_at_builtin_types():
    module = types.ModuleType("fake_module")

    assert list(inheritance_chain(obj=module)) == [module]
    assert list(inheritance_chain(obj={})) == [{}]
    assert list(inheritance_chain(obj=dict)) == []


def test_forbidden_roots():
    assert is_forbidden_root(object)
    assert is_forbidden_root(list)
    assert is_forbidden_root(types.FunctionType)
    assert not is_forbidden_root(dict)
    assert not is_forbidden_root(Base)


def test_list_subclass_stops_at_list():
    class Batch(list):
        def flush(self, callback): ...

    assert list(inheritance_chain(obj=Batch)) == [Batch]


def test_builtin_links_in_the_middle_are_skipped():
    class Registry(dict, Base):
        def lookup(self, callback): ...

    keys = inherited_data_keys(obj=Registry)

    assert dict not in list(inheritance_chain(obj=Registry))
    assert "lookup" in keys
    assert "base_only" in keys
    assert "keys" not in keys


def test_closest_link_wins():
    candidates = discover_candidates(obj=Derived)
    by_name = {candidate.name: candidate for candidate in candidates}

    assert [candidate.name for candidate in candidates].count("shared") == 1
    assert by_name["shared"].link is Derived
    assert by_name["base_only"].link is Base


def test_accessor_hides_deeper_definitions():
    keys = inherited_data_keys(obj=Derived)

    assert "masked" not in keys
    assert "shared" in keys
    assert "base_only" in keys


def test_instance_attributes_come_first():
    client = FrenchClient()

    keys = inherited_data_keys(obj=client)

    assert keys[0] == "calls"
    assert "status" not in keys
    assert keys.index("fetch") < keys.index("remove")


def test_shadowed_name_tied_to_subclass():
    by_name = {c.name: c for c in discover_candidates(obj=FrenchClient)}

    assert by_name["fetch"].link is FrenchClient
    assert by_name["remove"].link is CallbackClient
    assert by_name["region"].link is FrenchClient


def test_function_attributes_are_discovered():
    service = make_namespace_function()

    assert inherited_data_keys(obj=service) == ["ping"]


def test_plain_mapping_has_no_candidates():
    assert inherited_data_keys(obj={"fetch": lambda callback: None}) == []


def test_is_accessor_classification():
    class Sample:
        __slots__ = ("slot",)

        @property
        def prop(self):
            return 1

        @functools.cached_property
        def cached(self):
            return 2

        def method(self):
            return 3

    namespace = vars(Sample)

    assert is_accessor(raw=namespace["prop"])
    assert is_accessor(raw=namespace["cached"])
    assert is_accessor(raw=namespace["slot"])
    assert not is_accessor(raw=namespace["method"])
    assert not is_accessor(raw=staticmethod(len))


def test_enumeration_failure_returns_partial_candidates(monkeypatch):
    original = discovery.own_namespace

    def flaky_namespace(link):
        if link is Base:
            raise RuntimeError("unreadable")
        return original(link=link)

    monkeypatch.setattr(discovery, "own_namespace", flaky_namespace)

    keys = inherited_data_keys(obj=Derived)

    assert "shared" in keys
    assert "base_only" not in keys
