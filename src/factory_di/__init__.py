"""
factory-di: Dependency injection where services are built by factory objects.

Public API exports for the factory-di package.
"""

# Application exports
from factory_di.application.container import DIContainer
from factory_di.application.factory_registrar import (
    add_scoped_with_factory,
    add_singleton_with_factory,
    add_transient_with_factory,
    add_with_factory,
)

# Domain exports
from factory_di.domain.enums import Lifetime
from factory_di.domain.exceptions import (
    CircularDependencyError,
    DIException,
    FactoryContractError,
    InvalidArgumentError,
    LifetimeError,
    ScopeError,
    UnresolvableError,
)
from factory_di.domain.interfaces import IContainer, IFactory
from factory_di.domain.models import ContainerOptions

__version__ = "0.1.0"

__all__ = [
    # Container
    "DIContainer",
    "IContainer",
    "ContainerOptions",
    # Factories
    "IFactory",
    "add_with_factory",
    "add_transient_with_factory",
    "add_scoped_with_factory",
    "add_singleton_with_factory",
    # Enums
    "Lifetime",
    # Exceptions
    "DIException",
    "InvalidArgumentError",
    "CircularDependencyError",
    "UnresolvableError",
    "FactoryContractError",
    "LifetimeError",
    "ScopeError",
]
