"""
Domain layer - Core models and contracts.

This layer contains the lifetimes, registrations, options, errors and the
container and factory capabilities. It has no dependencies on other layers.
"""

from .enums import Lifetime
from .exceptions import (
    CircularDependencyError,
    DIException,
    FactoryContractError,
    InvalidArgumentError,
    LifetimeError,
    ScopeError,
    UnresolvableError,
)
from .interfaces import IContainer, IFactory, ILifetimeManager, IResolver
from .models import ContainerOptions, DependencyMetadata, Registration

# Rebuild Pydantic models to resolve forward references
Registration.model_rebuild()

__all__ = [
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
    # Interfaces
    "IContainer",
    "IFactory",
    "IResolver",
    "ILifetimeManager",
    # Models
    "Registration",
    "DependencyMetadata",
    "ContainerOptions",
]
