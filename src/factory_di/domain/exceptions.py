from typing import Any, List, Optional, Type


def _type_name(cls: Any) -> str:
    return getattr(cls, "__name__", repr(cls))


class DIException(Exception):
    """Base exception for DI-related errors."""


class InvalidArgumentError(DIException, ValueError):
    """Raised when a required argument is missing.

    Attributes:
        argument_name: Name of the offending argument.
    """

    def __init__(self, argument_name: str) -> None:
        self.argument_name = argument_name
        super().__init__(f"Argument '{argument_name}' must not be None")


class CircularDependencyError(DIException):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: List of types involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[Type]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join([_type_name(cls) for cls in dependency_chain])}"
        super().__init__(message)


class UnresolvableError(DIException):
    """Raised when a dependency cannot be resolved.

    This occurs when:
    - No registration exists for the requested type and auto-wiring is disabled.
    - Constructor parameters lack type hints.
    - A constructor dependency cannot be resolved.

    Attributes:
        cls: The class type that could not be resolved.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Type, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Cannot resolve dependency for type: {_type_name(cls)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class FactoryContractError(DIException):
    """Raised when a resolved factory does not expose a callable ``provide()``.

    Attributes:
        factory_type: The factory type registered for the service.
        service_type: The service type the factory was expected to provide.
    """

    def __init__(self, factory_type: Type, service_type: Type) -> None:
        self.factory_type = factory_type
        self.service_type = service_type
        super().__init__(
            f"Factory {_type_name(factory_type)} registered for {_type_name(service_type)} "
            "does not implement provide()"
        )


class LifetimeError(DIException):
    """Raised for invalid lifetime values."""


class ScopeError(DIException):
    """Raised for invalid scope operations.

    This occurs when a scoped dependency is resolved from the root container
    while scope validation is enabled.
    """
