from typing import Any, Self

__all__ = [
    "ReferenceHandle",
    "ABSENT",
    "PRIMITIVE_TYPES",
    "reference",
    "type_name",
]

# values, not references, never reported as part of a path
PRIMITIVE_TYPES = frozenset({type(None), bool, int, float, complex})

# stable hash for the handle of `None`
_ABSENT_HASH = 0xCAFEBABE


def type_name(cls: type) -> str:
    """
    Fully qualified name of a class, builtins are shown without module.
    """
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", None) or repr(cls)

    if module is None or module == "builtins":
        return qualname

    return f"{module}.{qualname}"


class ReferenceHandle:
    """
    Wrap an arbitrary object such that equality and hashing are based on the
    identity of the object and not on its value.

    Two empty lists are equal as values but are two different objects that
    might keep different things alive, so they need to be distinguishable.
    The handle keeps a strong reference to the object, such that its `id`
    cannot be reused while the handle exists.
    """

    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value

    @classmethod
    def of(cls, value: Any) -> Self:
        """
        Wrap `value`, unless it already is a handle.
        """
        if isinstance(value, cls):
            return value

        return reference(value)

    @property
    def is_absent(self: Self) -> bool:
        return self.value is None

    def __eq__(self: Self, other: object) -> bool:
        if not isinstance(other, ReferenceHandle):
            return False

        return other.value is self.value

    def __ne__(self: Self, other: object) -> bool:
        return not self == other

    def __hash__(self: Self) -> int:
        if self.value is None:
            return _ABSENT_HASH

        return id(self.value)

    def __repr__(self: Self) -> str:
        if self.value is None:
            return "None"

        return f"{type_name(type(self.value))}@{id(self.value):#x}"


ABSENT = ReferenceHandle(None)


def reference(value: Any) -> ReferenceHandle:
    """
    Handle of `value`, or `ABSENT` if the value is a plain number or None.
    """
    if type(value) in PRIMITIVE_TYPES:
        return ABSENT

    return ReferenceHandle(value)
