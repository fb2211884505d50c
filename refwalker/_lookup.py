import dataclasses
from collections.abc import Iterator
from types import ModuleType
from typing import NamedTuple, Self

from ._handle import type_name
from ._tcheck import typecheck

__all__ = [
    "MemberAccess",
    "ModuleMemberAccess",
    "IndexAccess",
    "Step",
    "Path",
    "MappingEntry",
    "ROOT",
]


class MappingEntry(NamedTuple):
    """
    Stand-in owner for the key and value of a mapping item, such that a path
    into a mapping reads `[i] -> MappingEntry::key`.
    """

    key: object
    value: object


@typecheck
@dataclasses.dataclass(frozen=True)
class MemberAccess:
    """
    Describes reading an attribute of an instance.
    """

    owner: type
    name: str

    def __str__(self) -> str:
        return f"{type_name(self.owner)}::{self.name}"


@typecheck
@dataclasses.dataclass(frozen=True)
class ModuleMemberAccess:
    """
    Describes reading an attribute of a class or a global of a module.
    """

    owner: type | ModuleType
    name: str

    def __str__(self) -> str:
        if isinstance(self.owner, ModuleType):
            return f"{self.owner.__name__}.{self.name}"

        return f"{type_name(self.owner)}.{self.name}"


@typecheck
@dataclasses.dataclass(frozen=True)
class IndexAccess:
    """
    Describes reading the n-th element of a sequence or the n-th item of a
    mapping.
    """

    index: int

    def __str__(self) -> str:
        return f"[{self.index}]"


Step = MemberAccess | ModuleMemberAccess | IndexAccess

_STEP_TYPES = (MemberAccess, ModuleMemberAccess, IndexAccess)


@dataclasses.dataclass(frozen=True, eq=False)
class Path:
    """
    Describes how an object was reached from a root, as a chain of steps.

    The path is stored as a linked list with the last step at the head, such
    that extending a path is O(1) and all paths branching off a common prefix
    share it. Many frontier entries of a search point to the same prefix.
    """

    last: Step | None = None
    parent: "Path | None" = None
    length: int = 0

    @property
    def steps(self) -> tuple[Step, ...]:
        """
        The steps of the path, from the root to the described object.
        """
        reversed_steps = []
        node = self

        while node.last is not None:
            reversed_steps.append(node.last)
            node = node.parent

        return tuple(reversed(reversed_steps))

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __len__(self) -> int:
        return self.length

    def __add__(self, other) -> Self:
        if isinstance(other, Path):
            path = self
            for step in other.steps:
                path = path + step

            return path

        if not isinstance(other, _STEP_TYPES):
            raise TypeError(f"Cannot add {type(other)} to Path.")

        return Path(other, self, self.length + 1)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return False

        if self.length != other.length:
            return False

        return self.steps == other.steps

    def __hash__(self) -> int:
        return hash(self.steps)

    def __str__(self) -> str:
        if self.length == 0:
            return "<root>"

        return " -> ".join(map(str, self.steps))

    def __repr__(self) -> str:
        return f"Path({self})"


# the path of a root object
ROOT = Path()
