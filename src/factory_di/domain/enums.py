from enum import Enum


class Lifetime(str, Enum):
    """Defines how long an instance produced by a registration lives.

    Attributes:
        TRANSIENT: New instance created on each resolution.
        SCOPED: Single instance per scope (e.g., per HTTP request).
        SINGLETON: Single instance shared by the root container and all its scopes.
    """

    TRANSIENT = "transient"
    SCOPED = "scoped"
    SINGLETON = "singleton"

    def __str__(self) -> str:
        return self.value
