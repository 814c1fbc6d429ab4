from typing import TYPE_CHECKING, Any, Callable, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

from factory_di.domain.enums import Lifetime

if TYPE_CHECKING:
    from factory_di.domain.interfaces import IContainer


class Registration(BaseModel):
    """Value object representing one binding in a container.

    Attributes:
        dependency_type: The type being registered.
        builder: Construction rule that receives the container and returns an instance.
        lifetime: How long the instance should live.
        factory_type: Factory type backing the registration, if any.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dependency_type: Type = Field(..., description="The dependency type to be registered.")
    builder: Callable[["IContainer"], Any] = Field(
        ..., description="The builder function to create an instance of the class."
    )
    lifetime: Lifetime = Field(..., description="The lifetime of the registered dependency.")
    factory_type: Optional[Type] = Field(
        default=None,
        description="The factory type whose provide() builds the instance, for factory-backed bindings.",
    )

    @property
    def is_factory_backed(self) -> bool:
        return self.factory_type is not None


class DependencyMetadata(BaseModel):
    """Tracks a registration and how often it has been resolved.

    Attributes:
        registration: The original registration configuration.
        resolution_count: Number of times this registration has been resolved.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    registration: Registration = Field(..., description="The registration details of the dependency.")
    resolution_count: int = Field(
        default=0,
        description="Number of times this dependency has been resolved.",
    )


class ContainerOptions(BaseModel):
    """Behavioral switches for a container and the scopes created from it.

    Attributes:
        auto_wire: Build unregistered types from their constructor type hints.
        validate_scopes: Reject resolving scoped registrations from the root container.
    """

    model_config = ConfigDict(frozen=True)

    auto_wire: bool = Field(default=True, description="Auto-wire types that have no registration.")
    validate_scopes: bool = Field(
        default=False,
        description="Raise ScopeError when a scoped dependency is resolved outside a scope.",
    )
