import threading
from typing import Any, Callable, Dict, Optional, Tuple

from factory_di.domain import DependencyMetadata, ILifetimeManager, Lifetime


class _InstanceCache:
    """Instances keyed by the identity of their registration entry.

    Each entry has its own creation lock, so building one instance never blocks
    the creation of another. The shared ``_guard`` is only held to look up or
    store entries, never while a builder runs.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # id(metadata) -> (metadata, instance); holding metadata keeps its id reserved
        self._instances: Dict[int, Tuple[DependencyMetadata, Any]] = {}
        self._locks: Dict[int, Any] = {}

    def get_or_create(self, metadata: DependencyMetadata, factory: Callable[[], Any]) -> Any:
        key = id(metadata)
        entry = self._instances.get(key)
        if entry is not None:
            return entry[1]

        with self._guard:
            lock = self._locks.setdefault(key, threading.RLock())

        with lock:
            # Another thread may have built it while we waited
            entry = self._instances.get(key)
            if entry is None:
                instance = factory()
                with self._guard:
                    self._instances[key] = (metadata, instance)
                return instance
            return entry[1]

    def clear(self) -> None:
        with self._guard:
            self._instances.clear()
            self._locks.clear()

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, metadata: DependencyMetadata) -> bool:
        return id(metadata) in self._instances

    def __getitem__(self, metadata: DependencyMetadata) -> Any:
        return self._instances[id(metadata)][1]


class LifetimeManager(ILifetimeManager):
    """Manages instance lifetimes for singleton, transient, and scoped registrations.

    Caches are keyed by registration entry, so a type registered several times keeps
    a separate cached instance per registration, even when the registrations share
    a builder.

    Attributes:
        _singleton_cache: Cache for singleton instances, shared with child scopes.
        _scoped_cache: Cache for scoped instances (owned by this scope).
    """

    def __init__(self, parent: Optional["LifetimeManager"] = None) -> None:
        """Initialize the lifetime manager.

        Args:
            parent: Lifetime manager of the parent container. When given, singletons
                are shared with it and only the scoped cache is new.
        """
        if parent is not None:
            self._singleton_cache = parent._singleton_cache
        else:
            self._singleton_cache = _InstanceCache()
        self._scoped_cache = _InstanceCache()

    def get_or_create(self, metadata: DependencyMetadata, factory: Callable[[], Any]) -> Any:
        """Get existing instance or create new one based on lifetime.

        Failures raised by ``factory`` propagate unchanged and nothing is cached.

        Args:
            metadata: Registration metadata containing lifetime info.
            factory: Function to create new instance if needed.

        Returns:
            Instance according to lifetime rules:
            - Singleton: Returns cached instance or creates and caches new one
            - Transient: Always creates new instance
            - Scoped: Returns cached instance within scope or creates new one
        """
        lifetime = metadata.registration.lifetime

        if lifetime == Lifetime.SINGLETON:
            return self._singleton_cache.get_or_create(metadata, factory)

        if lifetime == Lifetime.SCOPED:
            return self._scoped_cache.get_or_create(metadata, factory)

        return factory()

    def clear_cache(self) -> None:
        """Clear all cached instances (singletons and scoped).

        Useful for testing or resetting container state.
        """
        self._singleton_cache.clear()
        self._scoped_cache.clear()

    def clear_scoped_cache(self) -> None:
        """Clear only the scoped instance cache.

        Called when a scope ends (e.g., end of HTTP request).
        """
        self._scoped_cache.clear()
