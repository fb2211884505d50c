"""
Breadth first searches for the paths through which objects are reachable.
"""

import logging
import sys
from collections.abc import Hashable, Iterable
from types import ModuleType
from typing import Any

from ._config import WalkConfig
from ._handle import ReferenceHandle
from ._lookup import ROOT, Path
from ._state import SearchState
from ._tcheck import typecheck

__all__ = [
    "find_all",
    "find_by_origin",
    "is_stale",
]

logger = logging.getLogger(__name__)


@typecheck
def find_all(
    roots: Iterable[Any],
    target: Any,
    config: WalkConfig | None = None,
) -> list[Path]:
    """
    Find the paths through which `target` is reachable from `roots`.

    The object graph is searched breadth first. Every object is expanded at
    most once, but an object that is reached through several parents before
    it is processed is reported once per parent. The search does not continue
    through the target itself.

    Parameters
    ---
    roots: Iterable[Any]
        Objects to start the search from. `ReferenceHandle` objects are used
        as they are, anything else is wrapped.

    target: Any
        Object to look for, compared by identity. Plain numbers and None are
        values and are never found.

    config: WalkConfig, optional
        Settings of the search.

    Returns
    ---
    list[Path]
        The paths in the order in which they were found. Empty if the target
        is not reachable.
    """
    state = SearchState(config or WalkConfig())
    target = ReferenceHandle.of(target)
    found = []

    for root in roots:
        state.enqueue(ReferenceHandle.of(root), ROOT)

    while state.frontier:
        handle, path = state.pop()

        if handle == target:
            found.append(path)
        else:
            state.expand(handle, path)

        state.visited.add(handle)

    logger.debug(
        "Expanded %d objects, found %d paths to %r",
        state.expansions,
        len(found),
        target,
    )
    return found


def is_stale(cls: type) -> bool:
    """
    Whether `cls` is no longer the class that its module binds to its
    qualified name, because the module was reloaded, unloaded or the name
    was rebound.

    Classes defined inside functions cannot be looked up and always count as
    stale.
    """
    module = sys.modules.get(cls.__module__)

    if module is None:
        return True

    current = module
    for name in cls.__qualname__.split("."):
        current = getattr(current, name, None)

        if current is None:
            return True

    return current is not cls


def _origin_matcher(introspector, origin, stale):
    # a module matches both itself and its name, whichever `origin_of` returns
    tokens = [origin]
    if isinstance(origin, ModuleType):
        tokens.append(origin.__name__)

    decided = {}

    def matches(cls):
        try:
            return decided[cls]
        except KeyError:
            pass

        found = introspector.origin_of(cls)
        result = any(found == token for token in tokens)

        if result and stale:
            result = is_stale(cls)

        decided[cls] = result
        return result

    return matches


@typecheck
def find_by_origin(
    roots: Iterable[Any],
    origin: ModuleType | Hashable,
    config: WalkConfig | None = None,
    stale: bool = False,
) -> list[Path]:
    """
    Find the paths through which objects of any type that is defined in
    `origin` are reachable from `roots`.

    This is mostly useful to find the objects that keep a module alive after
    it was reloaded or should have been unloaded. The search does not continue
    through matching objects, and every matching type is only looked at as a
    match from then on.

    Parameters
    ---
    roots: Iterable[Any]
        Objects to start the search from.

    origin: ModuleType | Hashable
        A module, or the name of a module. It is compared against what the
        introspector's `origin_of` returns for the type of every object, a
        module also matches its name.

    config: WalkConfig, optional
        Settings of the search.

    stale: bool
        Only match objects whose class is no longer the one the module
        currently defines under that name. After `importlib.reload` this
        reports the instances of the old classes and skips the new ones.

    Returns
    ---
    list[Path]
        The paths to all matching objects, in the order in which they were
        found.
    """
    state = SearchState(config or WalkConfig())
    matches = _origin_matcher(state.introspector, origin, stale)
    found = []

    for root in roots:
        handle = ReferenceHandle.of(root)

        if not handle.is_absent:
            cls = type(handle.value)

            # the class attributes of a match are never needed
            if matches(cls):
                state.class_scanned.add(cls)

        state.enqueue(handle, ROOT)

    while state.frontier:
        handle, path = state.pop()
        cls = type(handle.value)

        if matches(cls):
            state.class_scanned.add(cls)
            state.ignored_types.add(cls)
            found.append(path)
        else:
            state.expand(handle, path)

        state.visited.add(handle)

    logger.debug(
        "Expanded %d objects, found %d paths into %r",
        state.expansions,
        len(found),
        origin,
    )
    return found
