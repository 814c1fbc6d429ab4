import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from factory_di.application import factory_registrar
from factory_di.application.lifetime_manager import LifetimeManager
from factory_di.application.resolution_stack import ResolutionStack
from factory_di.application.resolver import DependencyResolver
from factory_di.domain import (
    ContainerOptions,
    DependencyMetadata,
    IContainer,
    IResolver,
    Lifetime,
    Registration,
    ScopeError,
    UnresolvableError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class DIContainer(IContainer):
    """Main dependency injection container.

    Keeps an ordered list of registrations per type; the most recent one is used
    for resolution. Supports singleton, transient, and scoped lifetimes,
    factory-backed registrations and auto-wiring of unregistered types.

    Attributes:
        _options: Behavioral switches inherited by scopes.
        _registry: Dictionary mapping dependency types to their registrations.
        _resolver: Component responsible for auto-wiring dependencies.
        _lifetime_manager: Component managing instance lifetimes.
        _resolution_stack: Types being resolved, shared by the root and its scopes.
        _root: The root container; ``self`` unless this is a scope.
    """

    def __init__(self, options: Optional[ContainerOptions] = None) -> None:
        """Initialize the DI container with an empty registry.

        Args:
            options: Container options. Defaults to ``ContainerOptions()``.
        """
        self._options = options or ContainerOptions()
        self._registry: Dict[Type, List[DependencyMetadata]] = {}
        self._resolver: IResolver = DependencyResolver()
        self._lifetime_manager = LifetimeManager()
        self._resolution_stack = ResolutionStack()
        self._root: "DIContainer" = self

    @property
    def options(self) -> ContainerOptions:
        return self._options

    @property
    def is_scope(self) -> bool:
        return self._root is not self

    def register(
        self,
        dependency_type: Type,
        builder: Callable[[IContainer], Any],
        lifetime: Lifetime,
        factory_type: Optional[Type] = None,
    ) -> "DIContainer":
        """Append a registration for a type.

        Earlier registrations of the same type are kept; resolution uses the
        most recent one.

        Args:
            dependency_type: The type to register.
            builder: Factory function receiving the container and returning an instance.
            lifetime: How long the instance should live.
            factory_type: Factory backing the registration, if any.

        Returns:
            This container, for chaining.

        Example:
            >>> container.register(Clock, lambda c: SystemClock(), Lifetime.SINGLETON)
        """
        registration = Registration(
            dependency_type=dependency_type,
            builder=builder,
            lifetime=lifetime,
            factory_type=factory_type,
        )
        self._registry.setdefault(dependency_type, []).append(DependencyMetadata(registration=registration))
        logger.debug("Registered %s as %s", getattr(dependency_type, "__name__", dependency_type), lifetime)
        return self

    def try_register(
        self,
        dependency_type: Type,
        builder: Callable[[IContainer], Any],
        lifetime: Lifetime,
    ) -> bool:
        """Register a type only if it has no registration yet.

        Returns:
            True if the registration was added, False if one already existed.
        """
        if self.is_registered(dependency_type):
            logger.debug(
                "Skipped registration of %s: already registered",
                getattr(dependency_type, "__name__", dependency_type),
            )
            return False
        self.register(dependency_type, builder, lifetime)
        return True

    def is_registered(self, dependency_type: Type) -> bool:
        return bool(self._registry.get(dependency_type))

    def get_registrations(self, dependency_type: Type) -> List[Registration]:
        return [metadata.registration for metadata in self._registry.get(dependency_type, [])]

    def register_singletons(self, dependencies: Dict[Type, Callable[[IContainer], Any]]) -> None:
        """Register multiple singleton dependencies at once.

        Singleton dependencies are created once and shared by the root container
        and every scope created from it.

        Args:
            dependencies: Dictionary mapping dependency types to builder functions.
                         Each builder receives the container and returns an instance.

        Example:
            >>> container.register_singletons({
            ...     DatabaseConfig: lambda c: DatabaseConfig.from_env(),
            ...     DatabaseConnection: lambda c: DatabaseConnection(c.resolve(DatabaseConfig)),
            ... })
        """
        for dependency_type, builder in dependencies.items():
            self.register(dependency_type, builder, Lifetime.SINGLETON)

    def register_transients(self, dependencies: Dict[Type, Callable[[IContainer], Any]]) -> None:
        """Register multiple transient dependencies at once.

        Transient dependencies are created fresh on each resolution.

        Args:
            dependencies: Dictionary mapping dependency types to builder functions.
        """
        for dependency_type, builder in dependencies.items():
            self.register(dependency_type, builder, Lifetime.TRANSIENT)

    def register_scoped(self, dependencies: Dict[Type, Callable[[IContainer], Any]]) -> None:
        """Register multiple scoped dependencies at once.

        Scoped dependencies are created once per scope.

        Args:
            dependencies: Dictionary mapping dependency types to builder functions.
        """
        for dependency_type, builder in dependencies.items():
            self.register(dependency_type, builder, Lifetime.SCOPED)

    def register_with_factory(
        self,
        service_type: Type,
        factory_type: Type,
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> "DIContainer":
        """Register a service built by a factory's ``provide()``.

        The factory type is registered as transient if it has no registration yet.

        Example:
            >>> container.register_with_factory(Connection, ConnectionFactory, Lifetime.SCOPED)
        """
        factory_registrar.add_with_factory(self, service_type, factory_type, lifetime)
        return self

    def register_factories(
        self,
        factories: Dict[Type, Type],
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> "DIContainer":
        """Register multiple factory-backed services with the same lifetime.

        Args:
            factories: Dictionary mapping service types to factory types.
            lifetime: Lifetime applied to every service.

        Example:
            >>> container.register_factories({
            ...     Connection: ConnectionFactory,
            ...     Mailer: MailerFactory,
            ... }, Lifetime.SINGLETON)
        """
        for service_type, factory_type in factories.items():
            factory_registrar.add_with_factory(self, service_type, factory_type, lifetime)
        return self

    def resolve(self, dependency_type: Type[T]) -> T:
        """Resolve and return an instance of the specified type.

        Uses the most recent registration for the type, or auto-wiring if the
        type has none and auto-wiring is enabled.

        Args:
            dependency_type: The type to resolve.

        Returns:
            Instance of the requested type with all dependencies injected.

        Raises:
            UnresolvableError: If the dependency cannot be resolved.
            CircularDependencyError: If a circular dependency is detected.
            ScopeError: If a scoped dependency is resolved from the root container
                while scope validation is enabled.

        Example:
            >>> user_service = container.resolve(UserService)
        """
        with self._resolution_stack.resolving(dependency_type):
            entries = self._registry.get(dependency_type)
            if entries:
                metadata = entries[-1]
                lifetime = metadata.registration.lifetime
                if lifetime == Lifetime.SCOPED and self._options.validate_scopes and not self.is_scope:
                    raise ScopeError(
                        f"Cannot resolve scoped dependency {getattr(dependency_type, '__name__', dependency_type)} "
                        "from the root container"
                    )
                # Root-registered singletons resolve their dependencies from the root
                owner = self
                if lifetime == Lifetime.SINGLETON and self._root.is_registered(dependency_type):
                    owner = self._root
                instance = self._lifetime_manager.get_or_create(
                    metadata,
                    lambda: metadata.registration.builder(owner),
                )
                metadata.resolution_count += 1
                return instance

            if not self._options.auto_wire:
                raise UnresolvableError(dependency_type, "No registration exists and auto-wiring is disabled.")

            return self._resolver.resolve_dependencies(dependency_type, self)

    def get_registry_copy(self) -> Dict[Type, List[DependencyMetadata]]:
        """Get a copy of the registry for scope inheritance.

        Per-type lists are copied so registrations added to the copy do not leak back.
        """
        return {dependency_type: list(entries) for dependency_type, entries in self._registry.items()}

    def set_registry(self, registry: Dict[Type, List[DependencyMetadata]]) -> None:
        self._registry = registry

    def create_scope(self) -> "DIContainer":
        """Create a child container for scoped lifetime.

        The scope starts from a snapshot of this container's registrations, shares
        the root's singletons and keeps its own scoped instances. Leaving a
        ``with`` block closes the scope.

        Returns:
            New scoped container.

        Example:
            >>> with container.create_scope() as scoped:
            ...     ctx1 = scoped.resolve(RequestContext)
            ...     ctx2 = scoped.resolve(RequestContext)
            ...     assert ctx1 is ctx2
        """
        scope = DIContainer(self._options)
        scope.set_registry(self.get_registry_copy())
        scope._lifetime_manager = LifetimeManager(parent=self._root._lifetime_manager)
        scope._resolution_stack = self._root._resolution_stack
        scope._root = self._root
        logger.debug("Created scope %#x", id(scope))
        return scope

    def close(self) -> None:
        """Release the instances cached by this scope."""
        self._lifetime_manager.clear_scoped_cache()
        logger.debug("Closed scope %#x", id(self))

    def clear(self) -> None:
        """Clear all registrations and cached instances.

        A scope only drops its own scoped instances; singletons and the resolution
        stack belong to the root.
        """
        self._registry.clear()
        if self.is_scope:
            self._lifetime_manager.clear_scoped_cache()
        else:
            self._lifetime_manager.clear_cache()
            self._resolution_stack.clear()
