"""Application layer - Registration of services built by factories.

A factory-backed service is not constructed by the container. The container
resolves the factory registered for it and returns whatever the factory's
``provide()`` produces. The factory itself is registered as transient unless
the container already knows it.

Example:
    >>> class ConnectionFactory(IFactory[Connection]):
    ...     def __init__(self, settings: Settings):
    ...         self.settings = settings
    ...
    ...     def provide(self) -> Connection:
    ...         return Connection(self.settings.dsn)
    >>>
    >>> add_scoped_with_factory(container, Connection, ConnectionFactory)
    >>> with container.create_scope() as scope:
    ...     connection = scope.resolve(Connection)
"""

import logging
from typing import Any, Type, TypeVar, Union

from factory_di.application.resolver import DependencyResolver
from factory_di.domain import (
    FactoryContractError,
    IContainer,
    IFactory,
    InvalidArgumentError,
    Lifetime,
    LifetimeError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class FactoryInvoker:
    """Construction rule of a factory-backed registration.

    Resolves the factory from the container it is handed and returns the result of
    its ``provide()``. Holds no mutable state, so concurrent resolutions may share it.

    Attributes:
        service_type: The service type the factory provides.
        factory_type: The factory type resolved on each call.
    """

    def __init__(self, service_type: Type, factory_type: Type) -> None:
        self.service_type = service_type
        self.factory_type = factory_type

    def __call__(self, container: IContainer) -> Any:
        factory = container.resolve(self.factory_type)
        if not isinstance(factory, IFactory):
            raise FactoryContractError(self.factory_type, self.service_type)
        logger.debug("Providing %s from %s", _name(self.service_type), type(factory).__name__)
        return factory.provide()

    def __repr__(self) -> str:
        return f"FactoryInvoker({_name(self.service_type)}, {_name(self.factory_type)})"


class _AutoWiredBuilder:
    """Builds a type from its constructor type hints, independent of container options."""

    _resolver = DependencyResolver()

    def __init__(self, dependency_type: Type) -> None:
        self.dependency_type = dependency_type

    def __call__(self, container: IContainer) -> Any:
        return self._resolver.resolve_dependencies(self.dependency_type, container)


def _name(cls: Any) -> str:
    return getattr(cls, "__name__", repr(cls))


def _to_lifetime(lifetime: Union[Lifetime, str]) -> Lifetime:
    try:
        return Lifetime(lifetime)
    except ValueError as e:
        raise LifetimeError(
            f"Invalid lifetime {lifetime!r}, expected one of: {', '.join(item.value for item in Lifetime)}"
        ) from e


def add_with_factory(
    container: IContainer,
    service_type: Type[T],
    factory_type: Type[IFactory[T]],
    lifetime: Union[Lifetime, str],
) -> IContainer:
    """Register a service whose instances come from a factory's ``provide()``.

    If ``factory_type`` has no registration in ``container`` it is registered as
    transient and auto-wired from its constructor. An existing registration of the
    factory is left untouched, whatever its lifetime.

    The types may also be runtime values (e.g. loaded from plugins). A factory type
    without ``provide()`` is then only detected when the service is resolved.

    Args:
        container: The container to add the service to.
        service_type: The type requested at resolution time.
        factory_type: The factory type that provides ``service_type``.
        lifetime: Lifetime of the service registration.

    Returns:
        The same container, for chaining.

    Raises:
        InvalidArgumentError: If ``container``, ``service_type`` or ``factory_type`` is None.
        LifetimeError: If ``lifetime`` is not a valid lifetime.
    """
    if container is None:
        raise InvalidArgumentError("container")
    if service_type is None:
        raise InvalidArgumentError("service_type")
    if factory_type is None:
        raise InvalidArgumentError("factory_type")
    lifetime = _to_lifetime(lifetime)

    if container.try_register(factory_type, _AutoWiredBuilder(factory_type), Lifetime.TRANSIENT):
        logger.debug("Registered factory %s as %s", _name(factory_type), Lifetime.TRANSIENT)

    container.register(
        service_type,
        FactoryInvoker(service_type, factory_type),
        lifetime,
        factory_type=factory_type,
    )
    logger.debug("Registered %s via %s as %s", _name(service_type), _name(factory_type), lifetime)

    return container


def add_transient_with_factory(
    container: IContainer,
    service_type: Type[T],
    factory_type: Type[IFactory[T]],
) -> IContainer:
    """Register a transient service built by a factory.

    A new instance is provided on every resolution.

    Example:
        >>> add_transient_with_factory(container, ReportBuilder, ReportBuilderFactory)
    """
    return add_with_factory(container, service_type, factory_type, Lifetime.TRANSIENT)


def add_scoped_with_factory(
    container: IContainer,
    service_type: Type[T],
    factory_type: Type[IFactory[T]],
) -> IContainer:
    """Register a scoped service built by a factory.

    One instance is provided per scope.
    """
    return add_with_factory(container, service_type, factory_type, Lifetime.SCOPED)


def add_singleton_with_factory(
    container: IContainer,
    service_type: Type[T],
    factory_type: Type[IFactory[T]],
) -> IContainer:
    """Register a singleton service built by a factory.

    The factory is invoked once; every resolution gets that instance.
    """
    return add_with_factory(container, service_type, factory_type, Lifetime.SINGLETON)
