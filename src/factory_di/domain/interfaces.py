from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from factory_di.domain.enums import Lifetime
from factory_di.domain.models import DependencyMetadata, Registration

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class IFactory(ABC, Generic[T_co]):
    """Factory capability: produces one instance of a declared service type.

    Subclassing is optional. Any class exposing a callable ``provide`` attribute
    is treated as an ``IFactory`` by ``isinstance``/``issubclass``.

    Example:
        >>> class ConnectionFactory(IFactory[Connection]):
        ...     def __init__(self, settings: Settings):
        ...         self.settings = settings
        ...
        ...     def provide(self) -> Connection:
        ...         return Connection(self.settings.dsn)
    """

    @abstractmethod
    def provide(self) -> T_co:
        """Provide an instance of the service type.

        Called each time the container builds the service, which depends on the
        lifetime the service was registered with.
        """

    @classmethod
    def __subclasshook__(cls, subclass: type) -> Any:
        if cls is IFactory:
            if callable(getattr(subclass, "provide", None)):
                return True
        return NotImplemented


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def register(
        self,
        dependency_type: Type,
        builder: Callable[["IContainer"], Any],
        lifetime: Lifetime,
        factory_type: Optional[Type] = None,
    ) -> "IContainer":
        """Append a registration for a type.

        Args:
            dependency_type: The type to register.
            builder: Construction rule receiving the container and returning an instance.
            lifetime: How long built instances live.
            factory_type: Factory backing the registration, if any.

        Returns:
            The container, for chaining.
        """

    @abstractmethod
    def try_register(
        self,
        dependency_type: Type,
        builder: Callable[["IContainer"], Any],
        lifetime: Lifetime,
    ) -> bool:
        """Register a type only if it has no registration yet.

        Returns:
            True if the registration was added, False if one already existed.
        """

    @abstractmethod
    def is_registered(self, dependency_type: Type) -> bool:
        """Check whether a type has at least one registration."""

    @abstractmethod
    def get_registrations(self, dependency_type: Type) -> List[Registration]:
        """Get all registrations for a type, in registration order."""

    @abstractmethod
    def register_singletons(self, dependencies: Dict[Type, Callable[["IContainer"], Any]]) -> None:
        """Register multiple singleton dependencies at once.

        Args:
            dependencies: A dictionary mapping types to their builder functions.
        """

    @abstractmethod
    def register_transients(self, dependencies: Dict[Type, Callable[["IContainer"], Any]]) -> None:
        """Register multiple transient dependencies at once.

        Args:
            dependencies: A dictionary mapping types to their builder functions.
        """

    @abstractmethod
    def register_scoped(self, dependencies: Dict[Type, Callable[["IContainer"], Any]]) -> None:
        """Register multiple scoped dependencies at once.

        Args:
            dependencies: A dictionary mapping types to their builder functions.
        """

    @abstractmethod
    def resolve(self, dependency_type: Type[T]) -> T:
        """Resolve and return an instance of the requested class type.

        Args:
            dependency_type: The type to resolve.
        """

    @abstractmethod
    def create_scope(self) -> "IContainer":
        """Create and return a new scoped container instance."""

    @abstractmethod
    def close(self) -> None:
        """Release the instances cached by this scope."""

    @abstractmethod
    def clear(self) -> None:
        """Clear all registrations and instances from the container."""

    @abstractmethod
    def get_registry_copy(self) -> Dict[Type, List[DependencyMetadata]]:
        """Get a copy of the current registry of dependencies."""

    def __enter__(self) -> "IContainer":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.close()
        return False


class IResolver(ABC):
    """Abstract interface for auto-wiring unregistered types."""

    @abstractmethod
    def resolve_dependencies(
        self,
        dependency_type: Type,
        container: IContainer,
    ) -> Any:
        """Resolve all constructor dependencies and create instance.

        Args:
            dependency_type: The type to resolve.
            container: The DI container to use for resolving dependencies.

        Returns:
            Instance with all dependencies injected.

        Raises:
            UnresolvableError: If a dependency cannot be resolved.
        """


class ILifetimeManager(ABC):
    """Abstract interface for managing dependency lifetimes."""

    @abstractmethod
    def get_or_create(
        self,
        metadata: DependencyMetadata,
        factory: Callable[[], Any],
    ) -> Any:
        """Get existing instance or create a new one based on lifetime.

        Args:
            metadata: The dependency metadata containing registration info.
            factory: A callable to create a new instance if needed.
        """

    @abstractmethod
    def clear_cache(self) -> None:
        """Clear any cached instances managed by this lifetime manager."""

    @abstractmethod
    def clear_scoped_cache(self) -> None:
        """Clear only the scoped instances cache."""
