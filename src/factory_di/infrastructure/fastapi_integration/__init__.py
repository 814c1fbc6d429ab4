"""
FastAPI integration module.

Resolves container dependencies, factory-backed services included, through
FastAPI's Depends() with one scope per request.
"""

from .integration import (
    ScopedContainerMiddleware,
    create_fastapi_dependency,
    create_scoped_dependency,
)

__all__ = [
    "create_fastapi_dependency",
    "create_scoped_dependency",
    "ScopedContainerMiddleware",
]
