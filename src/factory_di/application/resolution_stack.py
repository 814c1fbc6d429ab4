"""Application layer - Tracking of in-flight resolutions."""

import threading
from contextlib import contextmanager
from typing import Iterator, List, Type

from factory_di.domain import CircularDependencyError


class ResolutionStack:
    """Types currently being resolved on each thread.

    One stack is shared by a root container and every scope created from it, so
    a graph that crosses from a scope into the root (singletons are built against
    the root) is still checked as a whole.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    @property
    def types(self) -> List[Type]:
        """The calling thread's stack, outermost resolution first."""
        if not hasattr(self._local, "types"):
            self._local.types = []
        return self._local.types

    @contextmanager
    def resolving(self, dependency_type: Type) -> Iterator[None]:
        """Mark ``dependency_type`` as being resolved for the duration of the block.

        Raises:
            CircularDependencyError: If the type is already being resolved on this
                thread. The chain runs from its first occurrence back to itself.
        """
        types = self.types
        if dependency_type in types:
            raise CircularDependencyError(types[types.index(dependency_type) :] + [dependency_type])

        types.append(dependency_type)
        try:
            yield
        finally:
            types.pop()

    def clear(self) -> None:
        self.types.clear()
