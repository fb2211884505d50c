import dataclasses
import decimal
import fractions
import logging
import types
from typing import Self

from ._handle import PRIMITIVE_TYPES
from ._introspect import Introspector, ReflectiveIntrospector
from ._tcheck import typecheck

__all__ = [
    "DEFAULT_IGNORED_TYPES",
    "WalkConfig",
]

# types whose instances are never looked into
DEFAULT_IGNORED_TYPES = frozenset(
    {
        *PRIMITIVE_TYPES,
        type,
        str,
        bytes,
        range,
        slice,
        decimal.Decimal,
        fractions.Fraction,
        logging.Logger,
        types.CodeType,
        types.FrameType,
        types.TracebackType,
    }
)


@typecheck
@dataclasses.dataclass(frozen=True)
class WalkConfig:
    """
    Settings of a reference search.

    Attributes:
    ---
    ignored_types: frozenset[type]
        Objects of exactly these types are never expanded. They can still be
        found as the target of a search.

    scan_class_members: bool
        Also follow the class level attributes of every class that is
        encountered, once per class and search.

    introspector: Introspector | None
        Provides access to the children of objects. A fresh
        `ReflectiveIntrospector` is used for every search if not given.
    """

    ignored_types: frozenset[type] | set[type] = DEFAULT_IGNORED_TYPES
    scan_class_members: bool = True
    introspector: Introspector | None = None

    def __post_init__(self: Self) -> None:
        if not isinstance(self.ignored_types, frozenset):
            object.__setattr__(self, "ignored_types", frozenset(self.ignored_types))

        if not all(isinstance(t, type) for t in self.ignored_types):
            raise TypeError("All ignored types must be classes")

        if self.introspector is not None:
            if not isinstance(self.introspector, Introspector):
                error = f"{self.introspector!r} does not implement Introspector"
                raise TypeError(error)

    def with_ignored(self: Self, *ignored: type) -> Self:
        return dataclasses.replace(
            self,
            ignored_types=self.ignored_types | frozenset(ignored),
        )

    def make_introspector(self: Self) -> Introspector:
        if self.introspector is None:
            return ReflectiveIntrospector()

        return self.introspector
