import collections
import logging
from types import ModuleType
from typing import Any

from ._config import WalkConfig
from ._container import Container
from ._errors import EnumerationError, is_fatal
from ._handle import ReferenceHandle, reference, type_name
from ._lookup import ROOT, ModuleMemberAccess, Path

__all__ = [
    "SearchState",
]

logger = logging.getLogger(__name__)


class SearchState:
    """
    Bookkeeping of a single breadth first search through an object graph.

    A new state is created for every search and dropped afterwards, nothing
    is shared between searches.

    Attributes:
    ---
    frontier: deque[tuple[ReferenceHandle, Path]]
        Objects that still have to be processed, together with the path
        through which they were reached. The same object can be queued
        several times through different paths before it is processed.

    visited: set[ReferenceHandle]
        Objects that have been processed. Only grows.

    ignored_types: set[type]
        Objects of exactly these types are not expanded. Only grows.

    class_scanned: set[type | ModuleType]
        Classes whose class level attributes have already been queued.

    failed_enumeration: set[type]
        Sequence and mapping types that raised while being iterated, their
        instances are only looked at through their attributes.
    """

    def __init__(self, config: WalkConfig) -> None:
        self.introspector = config.make_introspector()
        self.scan_class_members = config.scan_class_members

        self.frontier = collections.deque()
        self.visited: set[ReferenceHandle] = set()
        self.ignored_types: set[type] = set(config.ignored_types)
        self.class_scanned: set[type | ModuleType] = set()
        self.failed_enumeration: set[type] = set()

        # number of objects whose children were enumerated
        self.expansions = 0

    def enqueue(self, handle: ReferenceHandle, path: Path) -> None:
        if handle.is_absent or handle in self.visited:
            return

        self.frontier.append((handle, path))

    def pop(self) -> tuple[ReferenceHandle, Path]:
        return self.frontier.popleft()

    def scan_class(self, owner: type | ModuleType) -> None:
        """
        Queue the class level attributes of `owner`, once per search.

        Classes are reachable from everywhere, so the paths of their
        attributes start at the class itself.
        """
        if owner in self.class_scanned:
            return

        self.class_scanned.add(owner)

        for member in self.introspector.module_members(owner):
            try:
                value = member.read(owner)
            except Exception as error:
                if is_fatal(error):
                    raise

                logger.debug("Skipping %r.%s: %r", owner, member.name, error)
                continue

            path = ROOT + ModuleMemberAccess(owner, member.name)
            self.enqueue(reference(value), path)

    def describe(self, value: Any) -> Container | None:
        cls = type(value)

        if cls in self.failed_enumeration:
            return self.introspector.describe_container(value, aggregate=True)

        try:
            return self.introspector.describe_container(value)
        except EnumerationError as error:
            logger.debug("%s, using its attributes instead", error)
            self.failed_enumeration.add(cls)

        return self.introspector.describe_container(value, aggregate=True)

    def expand(self, handle: ReferenceHandle, path: Path) -> None:
        """
        Queue all children of an object that have not been visited yet.
        """
        value = handle.value

        if value is None or handle in self.visited:
            return

        cls = type(value)

        if self.scan_class_members:
            self.scan_class(value if isinstance(value, type) else cls)

        if cls in self.ignored_types:
            return

        container = self.describe(value)
        self.expansions += 1

        if container is None:
            logger.debug("Not looking into %s objects anymore", type_name(cls))
            self.ignored_types.add(cls)
            return

        # module globals are reachable from everywhere, like class attributes
        if isinstance(value, ModuleType):
            for name, child in container.members.items():
                self.enqueue(child, ROOT + ModuleMemberAccess(value, name))

            return

        for steps, child in container.children(cls):
            if child.is_absent or child in self.visited:
                continue

            child_path = path
            for step in steps:
                child_path = child_path + step

            self.enqueue(child, child_path)
