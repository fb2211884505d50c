"""Tests for the reflective introspector."""

import collections
import collections.abc
import functools
import inspect
import types
import typing
import weakref

import jax.numpy as jnp
import jax.tree_util as jtu
import numpy as np
import pytest

from refwalker import (
    ABSENT,
    Aggregate,
    Associative,
    EnumerationError,
    Member,
    ReferenceHandle,
    ReflectiveIntrospector,
    Sequence,
    find_all,
    find_by_origin,
)


class Parent:
    __slots__ = ("parent_field",)


class Child(Parent):
    __slots__ = ("child_field",)


class Plain:
    counter = 0
    shared = None

    def __init__(self, value=None):
        self.value = value

    def method(self):
        return self.value

    @property
    def computed(self):
        raise AssertionError("properties must not be evaluated")

    @staticmethod
    def helper():
        pass


class Boom(RuntimeError):
    pass


class FailingList(collections.abc.Sequence):
    def __init__(self, payload=None):
        self.payload = payload

    def __getitem__(self, index):
        raise Boom("Boom!")

    def __len__(self):
        raise Boom("Boom!")


class Sealed:
    """
    Keeps its content outside of any attribute, only visible as a pytree.
    """

    __slots__ = ()
    contents: dict = {}

    def tree_flatten_with_keys(self):
        return ((jtu.GetAttrKey("content"), Sealed.contents[id(self)]),), None

    @classmethod
    def tree_unflatten(cls, aux_data, children):
        return cls()


jtu.register_pytree_with_keys_class(Sealed)


@pytest.fixture
def introspector():
    return ReflectiveIntrospector()


def _values(container):
    if isinstance(container, Aggregate):
        return {name: handle.value for name, handle in container.members.items()}

    if isinstance(container, Sequence):
        return [handle.value for handle in container.elements]

    return [(k.value, v.value) for k, v in container.pairs]


class TestLeaves:
    """Objects without children."""

    @pytest.mark.parametrize(
        "value",
        [None, "text", b"bytes", int, Plain, jnp.zeros(3)],
    )
    def test_leaf(self, introspector, value):
        assert introspector.describe_container(value) is None

    def test_weak_reference_is_leaf(self, introspector):
        target = Plain()
        assert introspector.describe_container(weakref.ref(target)) is None

    def test_opaque_object(self, introspector):
        """Objects without any instance state are leaves."""
        assert introspector.describe_container(object()) is None


class TestCollections:
    """Enumeration of sequences, sets and mappings."""

    def test_list(self, introspector):
        a, b = object(), object()
        container = introspector.describe_container([a, None, b])

        assert isinstance(container, Sequence)
        assert _values(container) == [a, None, b]
        assert container.elements[1] is ABSENT

    def test_numbers_are_absent(self, introspector):
        container = introspector.describe_container((1, 2.0, "x"))
        assert _values(container) == [None, None, "x"]

    def test_deque_and_set(self, introspector):
        a = object()

        assert _values(introspector.describe_container(collections.deque([a]))) == [a]
        assert _values(introspector.describe_container({a})) == [a]

    def test_mapping(self, introspector):
        key, value = object(), object()
        container = introspector.describe_container({key: "v", "k": value})

        assert isinstance(container, Associative)
        assert _values(container) == [(key, "v"), ("k", value)]

    def test_mapping_proxy(self, introspector):
        value = object()
        container = introspector.describe_container(
            types.MappingProxyType({"k": value})
        )
        assert _values(container) == [("k", value)]

    def test_failing_enumeration(self, introspector):
        with pytest.raises(EnumerationError) as info:
            introspector.describe_container(FailingList())

        assert info.value.cls is FailingList
        assert isinstance(info.value.__cause__, Boom)

    def test_failing_enumeration_as_aggregate(self, introspector):
        payload = object()
        container = introspector.describe_container(
            FailingList(payload),
            aggregate=True,
        )
        assert _values(container) == {"payload": payload}

    def test_weak_key_dictionary_reads_storage(self, introspector):
        key, value = Plain(), object()
        cache = weakref.WeakKeyDictionary({key: value})

        container = introspector.describe_container(cache)

        assert isinstance(container, Aggregate)
        assert "data" in container.members


class TestArrays:
    """Numpy and jax arrays."""

    def test_object_array(self, introspector):
        a, b = object(), object()
        array = np.empty((2, 2), dtype=object)
        array[0, 1] = a
        array[1, 0] = b

        container = introspector.describe_container(array)
        assert _values(container) == [None, a, b, None]

    def test_numeric_array(self, introspector):
        container = introspector.describe_container(np.arange(4))
        assert container == Sequence(())


class TestObjects:
    """Generic aggregate introspection."""

    def test_instance_dict(self, introspector):
        value = object()
        container = introspector.describe_container(Plain(value))
        assert _values(container) == {"value": value}

    def test_empty_instance_dict(self, introspector):
        """An object that could have attributes is not a leaf."""
        container = introspector.describe_container(Plain())
        assert container == Aggregate({})

    def test_inherited_slots(self, introspector):
        target = object()
        child = Child()
        child.parent_field = target

        container = introspector.describe_container(child)
        assert _values(container) == {"parent_field": target}

    def test_instance_members(self, introspector):
        names = [member.name for member in introspector.instance_members(Child)]
        assert names == ["parent_field", "child_field"]

    def test_instance_members_are_cached(self, introspector):
        assert introspector.instance_members(Child) is introspector.instance_members(
            Child
        )

    def test_ancestor_chain(self, introspector):
        assert introspector.ancestor_chain(Child) == [Parent, object]

    def test_closure(self, introspector):
        target = object()

        def callback():
            return target

        container = introspector.describe_container(callback)
        assert _values(container) == {"target": target}

    def test_function_defaults(self, introspector):
        default = object()

        def function(x=default):
            return x

        container = introspector.describe_container(function)
        assert _values(container)["__defaults__"] == (default,)

    def test_bound_method(self, introspector):
        obj = Plain()
        container = introspector.describe_container(obj.method)

        assert _values(container)["__self__"] is obj
        assert _values(container)["__func__"] is Plain.method

    def test_partial(self, introspector):
        target = object()
        container = introspector.describe_container(functools.partial(print, target))

        assert _values(container)["args"] == (target,)

    def test_module(self, introspector):
        module = types.ModuleType("fake_module")
        module.thing = target = object()

        container = introspector.describe_container(module)
        assert _values(container) == {"thing": target}

    def test_pytree_fallback(self, introspector):
        target = object()
        sealed = Sealed()
        Sealed.contents[id(sealed)] = target

        try:
            container = introspector.describe_container(sealed)
        finally:
            del Sealed.contents[id(sealed)]

        assert _values(container) == {"content": target}


class TestClassMembers:
    """Class level members."""

    def test_only_state(self, introspector):
        names = [member.name for member in introspector.module_members(Plain)]
        assert names == ["counter", "shared"]

    def test_read(self, introspector):
        members = introspector.module_members(Plain)
        assert [member.read(Plain) for member in members] == [0, None]

    def test_origin(self, introspector):
        assert introspector.origin_of(Plain) == __name__
        assert introspector.origin_of(dict) == "builtins"


def test_handles_in_containers_are_identity_based(introspector):
    a = []
    container = introspector.describe_container([a, a, []])

    assert container.elements[0] == container.elements[1]
    assert container.elements[0] != container.elements[2]
    assert container.elements[0] == ReferenceHandle(a)


def _hint(function, name):
    return inspect.unwrap(function).__annotations__[name]


class TestAnnotations:
    """Hints use the builtin generic aliases, which beartype does not deprecate."""

    @pytest.mark.parametrize(
        "hint",
        [
            _hint(Aggregate.children, "return"),
            _hint(Sequence.children, "return"),
            Member.__annotations__["read"],
            _hint(find_all, "roots"),
        ],
    )
    def test_generic_alias(self, hint):
        assert isinstance(hint, types.GenericAlias)

    def test_hashable_origin(self):
        hint = _hint(find_by_origin, "origin")
        assert any(arg is collections.abc.Hashable for arg in typing.get_args(hint))
