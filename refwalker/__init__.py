"""
Find the chains of attribute and item accesses through which objects are
reachable, to track down what keeps an object or a reloaded module alive.
"""

from ._config import DEFAULT_IGNORED_TYPES, WalkConfig
from ._container import Aggregate, Associative, Container, Sequence
from ._errors import EnumerationError, RefWalkerError
from ._handle import ABSENT, ReferenceHandle
from ._introspect import Introspector, Member, ReflectiveIntrospector
from ._lookup import (
    ROOT,
    IndexAccess,
    MappingEntry,
    MemberAccess,
    ModuleMemberAccess,
    Path,
    Step,
)
from ._walker import find_all, find_by_origin, is_stale

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_IGNORED_TYPES",
    "WalkConfig",
    "Aggregate",
    "Associative",
    "Container",
    "Sequence",
    "EnumerationError",
    "RefWalkerError",
    "ABSENT",
    "ReferenceHandle",
    "Introspector",
    "Member",
    "ReflectiveIntrospector",
    "ROOT",
    "IndexAccess",
    "MappingEntry",
    "MemberAccess",
    "ModuleMemberAccess",
    "Path",
    "Step",
    "find_all",
    "find_by_origin",
    "is_stale",
]
