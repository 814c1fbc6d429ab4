"""
Testing utilities module.

Helpers for swapping real services and factories for test doubles.
"""

from .utilities import TestContainer, create_mock_container

__all__ = [
    "TestContainer",
    "create_mock_container",
]
