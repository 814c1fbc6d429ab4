"""
Application layer - Use cases and orchestration.

This layer contains the container, its collaborators and the factory registrar.
It depends only on the Domain layer.
"""

from .container import DIContainer
from .factory_registrar import (
    FactoryInvoker,
    add_scoped_with_factory,
    add_singleton_with_factory,
    add_transient_with_factory,
    add_with_factory,
)
from .lifetime_manager import LifetimeManager
from .resolution_stack import ResolutionStack
from .resolver import DependencyResolver

__all__ = [
    "DIContainer",
    "DependencyResolver",
    "LifetimeManager",
    "ResolutionStack",
    "FactoryInvoker",
    "add_with_factory",
    "add_transient_with_factory",
    "add_scoped_with_factory",
    "add_singleton_with_factory",
]
