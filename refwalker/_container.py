"""
Descriptions of how the children of an object are enumerated.
"""

import dataclasses
from collections.abc import Iterator, Mapping

from ._handle import ReferenceHandle
from ._lookup import IndexAccess, MappingEntry, MemberAccess, Step
from ._tcheck import typecheck

__all__ = [
    "Aggregate",
    "Sequence",
    "Associative",
    "Container",
]

_KEY = MemberAccess(MappingEntry, "key")
_VALUE = MemberAccess(MappingEntry, "value")


@typecheck
@dataclasses.dataclass(frozen=True)
class Aggregate:
    """
    An object with named attributes.
    """

    members: Mapping[str, ReferenceHandle]

    def __len__(self) -> int:
        return len(self.members)

    def children(self, owner: type) -> Iterator[tuple[tuple[Step, ...], ReferenceHandle]]:
        for name, handle in self.members.items():
            yield (MemberAccess(owner, name),), handle


@typecheck
@dataclasses.dataclass(frozen=True)
class Sequence:
    """
    An object whose children are addressed by their position.
    """

    elements: tuple[ReferenceHandle, ...]

    def __len__(self) -> int:
        return len(self.elements)

    def children(self, owner: type) -> Iterator[tuple[tuple[Step, ...], ReferenceHandle]]:
        for i, handle in enumerate(self.elements):
            yield (IndexAccess(i),), handle


@typecheck
@dataclasses.dataclass(frozen=True)
class Associative:
    """
    A mapping flattened into its items. Both the key and the value of an item
    are children, addressed by the position of the item followed by a key or
    value marker.
    """

    pairs: tuple[tuple[ReferenceHandle, ReferenceHandle], ...]

    def __len__(self) -> int:
        return len(self.pairs)

    def children(self, owner: type) -> Iterator[tuple[tuple[Step, ...], ReferenceHandle]]:
        for i, (key, value) in enumerate(self.pairs):
            index = IndexAccess(i)
            yield (index, _KEY), key
            yield (index, _VALUE), value


Container = Aggregate | Sequence | Associative
