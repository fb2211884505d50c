"""
Reflective access to the children of arbitrary Python objects.

The walker only talks to an `Introspector`, the `ReflectiveIntrospector` is
the implementation used by default. It reads the raw storage of objects
(`__dict__`, slots, closure cells, ...) and never triggers properties or other
descriptors, such that walking an object graph has no side effects on it.
"""

import collections.abc as cabc
import dataclasses
import functools
import logging
import weakref
from types import (
    BuiltinMethodType,
    CellType,
    ClassMethodDescriptorType,
    FunctionType,
    GetSetDescriptorType,
    MemberDescriptorType,
    MethodDescriptorType,
    MethodType,
    ModuleType,
    WrapperDescriptorType,
)
from typing import Any, Protocol, runtime_checkable

import jax.tree_util as jtu

from ._arrays import (
    array_elements,
    holds_references,
    is_array,
    is_primitive_array,
)
from ._container import Aggregate, Associative, Container, Sequence
from ._errors import EnumerationError, is_fatal
from ._handle import reference, type_name
from ._tcheck import typecheck

__all__ = [
    "Member",
    "Introspector",
    "ReflectiveIntrospector",
]

logger = logging.getLogger(__name__)

# objects that cannot keep anything alive that is worth reporting
_LEAF_TYPES = (
    type,
    str,
    bytes,
    bytearray,
    memoryview,
    weakref.ReferenceType,
    weakref.ProxyType,
    weakref.CallableProxyType,
)

# enumerating these would report weakly held objects, their raw storage is
# read instead
_WEAK_CONTAINERS = (
    weakref.WeakKeyDictionary,
    weakref.WeakValueDictionary,
    weakref.WeakSet,
)

# class level attributes that belong to the behaviour of a class, not its state
_CLASS_BEHAVIOUR = (
    FunctionType,
    staticmethod,
    classmethod,
    property,
    functools.cached_property,
    MemberDescriptorType,
    GetSetDescriptorType,
    WrapperDescriptorType,
    MethodDescriptorType,
    ClassMethodDescriptorType,
)

# references held by builtin types outside of `__dict__` and `__slots__`
_BUILTIN_MEMBERS: dict[type, tuple[str, ...]] = {
    FunctionType: ("__defaults__", "__kwdefaults__"),
    MethodType: ("__self__", "__func__"),
    BuiltinMethodType: ("__self__",),
    functools.partial: ("func", "args", "keywords"),
    property: ("fget", "fset", "fdel"),
    staticmethod: ("__func__",),
    classmethod: ("__func__",),
    CellType: ("cell_contents",),
}


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _attr_reader(name: str) -> cabc.Callable[[Any], Any]:
    def read(obj):
        return getattr(obj, name)

    return read


def _dict_reader(name: str) -> cabc.Callable[[Any], Any]:
    # bypasses the descriptor protocol, which `getattr` on a class would use
    def read(owner):
        return vars(owner)[name]

    return read


def _slot_reader(descriptor: MemberDescriptorType) -> cabc.Callable[[Any], Any]:
    def read(obj):
        return descriptor.__get__(obj, type(obj))

    return read


@typecheck
@dataclasses.dataclass(frozen=True)
class Member:
    """
    A named member of a type, together with a function that reads it from an
    instance (or from the type itself for class level members).
    """

    name: str
    read: cabc.Callable[[Any], Any]


@runtime_checkable
class Introspector(Protocol):
    def describe_container(
        self, value: Any, /, aggregate: bool = False
    ) -> Container | None: ...

    def ancestor_chain(self, cls: type, /) -> list[type]: ...

    def instance_members(self, cls: type, /) -> list[Member]: ...

    def module_members(self, owner: type | ModuleType, /) -> list[Member]: ...

    def origin_of(self, cls: type, /) -> cabc.Hashable: ...


class ReflectiveIntrospector:
    """
    Introspector based on the data model of CPython.

    Sequences, sets and mappings are enumerated through their public
    interface, numpy arrays of objects element wise, modules through their
    globals. All other objects are described by their instance dictionary,
    the slots of their class and its ancestors, and the hidden references of
    builtin types like closures and bound methods. Opaque objects without any
    of these are given a last chance as registered jax pytree nodes.

    Member lists are cached per type. The cache holds its types weakly, such
    that a long lived introspector does not itself keep reloaded classes alive.
    """

    def __init__(self) -> None:
        self._members = weakref.WeakKeyDictionary()

    def ancestor_chain(self, cls: type, /) -> list[type]:
        try:
            return list(cls.__mro__[1:])
        except Exception as error:
            if is_fatal(error):
                raise

            logger.debug("No ancestors for %s: %r", type_name(cls), error)
            return []

    def instance_members(self, cls: type, /) -> list[Member]:
        try:
            return self._members[cls]
        except KeyError:
            pass
        except TypeError:
            # not weakly referenceable, e.g. some extension types
            return self._collect_instance_members(cls)

        members = self._collect_instance_members(cls)
        self._members[cls] = members
        return members

    def _collect_instance_members(self, cls: type) -> list[Member]:
        members = []
        seen = set()

        # ancestors first, such that inherited members come before own ones
        for base in [*reversed(self.ancestor_chain(cls)), cls]:
            try:
                namespace = dict(vars(base))
            except Exception as error:
                if is_fatal(error):
                    raise

                logger.debug("Cannot list %s: %r", type_name(base), error)
                continue

            for name, attr in namespace.items():
                if not isinstance(attr, MemberDescriptorType):
                    continue

                # interpreter internals like `__globals__` of functions
                if _is_dunder(name) or name in seen:
                    continue

                seen.add(name)
                members.append(Member(name, _slot_reader(attr)))

            for name in _BUILTIN_MEMBERS.get(base, ()):
                if name in seen:
                    continue

                seen.add(name)
                members.append(Member(name, _attr_reader(name)))

        return members

    def module_members(self, owner: type | ModuleType, /) -> list[Member]:
        try:
            namespace = dict(vars(owner))
        except Exception as error:
            if is_fatal(error):
                raise

            logger.debug("Cannot list %r: %r", owner, error)
            return []

        members = []

        for name, attr in namespace.items():
            if _is_dunder(name):
                continue

            # methods and descriptors of a class are not part of its state
            if isinstance(owner, type) and isinstance(attr, _CLASS_BEHAVIOUR):
                continue

            members.append(Member(name, _dict_reader(name)))

        return members

    def origin_of(self, cls: type, /) -> cabc.Hashable:
        return getattr(cls, "__module__", None)

    def describe_container(
        self,
        value: Any,
        /,
        aggregate: bool = False,
    ) -> Container | None:
        """
        Describe how the children of `value` are enumerated.

        Parameters
        ---
        value: Any
            Object to describe.

        aggregate: bool
            Skip the enumeration of sequences and mappings and describe them
            by their attributes instead. Used after an enumeration failed.

        Returns
        ---
        Container | None
            None if the value is a leaf and all objects of its type can be
            skipped from now on.

        Raises
        ---
        EnumerationError
            If iterating a sequence, set or mapping raised.
        """
        if value is None or isinstance(value, _LEAF_TYPES):
            return None

        if is_array(value):
            if holds_references(value):
                return Sequence(tuple(map(reference, array_elements(value))))

            if is_primitive_array(value):
                return None

            # the dtype of a numpy array is a property of the instance, so
            # its type must not be ignored
            return Sequence(())

        if isinstance(value, ModuleType):
            return Aggregate(self._read_members(value, self.module_members(value)))

        if not aggregate and not isinstance(value, _WEAK_CONTAINERS):
            if isinstance(value, cabc.Mapping):
                return Associative(self._enumerate_items(value))

            if isinstance(value, (cabc.Sequence, cabc.Set)):
                return Sequence(self._enumerate_elements(value))

        return self._describe_object(value)

    def _enumerate_items(self, value: cabc.Mapping) -> tuple:
        try:
            return tuple((reference(k), reference(v)) for k, v in value.items())
        except Exception as error:
            if is_fatal(error):
                raise

            raise EnumerationError(type(value), repr(error)) from error

    def _enumerate_elements(self, value: cabc.Iterable) -> tuple:
        try:
            return tuple(map(reference, value))
        except Exception as error:
            if is_fatal(error):
                raise

            raise EnumerationError(type(value), repr(error)) from error

    def _describe_object(self, value: Any) -> Aggregate | None:
        cls = type(value)
        members = self._read_members(value, self.instance_members(cls))

        for name, read in self._instance_state(value):
            self._read_member(members, value, name, read)

        if members or self._has_instance_state(cls):
            return Aggregate(members)

        members = self._pytree_members(value)
        if members:
            return Aggregate(members)

        return None

    def _has_instance_state(self, cls: type) -> bool:
        if self.instance_members(cls):
            return True

        return bool(getattr(cls, "__dictoffset__", 0))

    def _instance_state(self, value: Any):
        """
        Members that are a property of the instance rather than of its type.
        """
        try:
            namespace = getattr(value, "__dict__", None)
        except Exception as error:
            if is_fatal(error):
                raise

            namespace = None

        if isinstance(namespace, cabc.Mapping):
            for name in list(namespace):
                if isinstance(name, str):
                    yield name, _dict_reader(name)

        if isinstance(value, FunctionType) and value.__closure__:
            names = value.__code__.co_freevars

            for name, cell in zip(names, value.__closure__):
                yield name, functools.partial(_cell_contents, cell)

    def _read_members(self, owner: Any, members: list[Member]) -> dict:
        result = {}

        for member in members:
            self._read_member(result, owner, member.name, member.read)

        return result

    def _read_member(self, result: dict, owner: Any, name: str, read) -> None:
        try:
            value = read(owner)
        except Exception as error:
            if is_fatal(error):
                raise

            # unset slots and empty cells end up here
            logger.debug("Skipping member %s of %r: %r", name, type(owner), error)
            return

        handle = reference(value)
        if handle.is_absent:
            return

        result[name] = handle

    def _pytree_members(self, value: Any) -> dict:
        try:
            leaves, _ = jtu.tree_flatten_with_path(
                value,
                is_leaf=lambda x: x is not value,
            )
        except Exception as error:
            if is_fatal(error):
                raise

            logger.debug("Cannot flatten %s: %r", type_name(type(value)), error)
            return {}

        members = {}

        for path, child in leaves:
            # an unregistered type is its own single leaf
            if not path:
                return {}

            handle = reference(child)
            if not handle.is_absent:
                members[_key_name(path[0])] = handle

        return members


def _cell_contents(cell: CellType, _owner: Any) -> Any:
    return cell.cell_contents


def _key_name(key: Any) -> str:
    if isinstance(key, jtu.GetAttrKey):
        return key.name

    if isinstance(key, jtu.DictKey):
        return str(key.key)

    if isinstance(key, jtu.SequenceKey):
        return str(key.idx)

    if isinstance(key, jtu.FlattenedIndexKey):
        return str(key.key)

    return str(key)
