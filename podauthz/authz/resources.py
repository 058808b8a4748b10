"""
Resource existence checks used by the authorizer to decide between 404 and 401/403.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Set
import asyncio

from .types import ResourceIdentifier


class ResourceSet(ABC):
    """Answers whether a resource currently exists."""

    @abstractmethod
    async def has_resource(self, identifier: ResourceIdentifier) -> bool:
        """Check whether the identified resource exists."""
        pass


class MemoryResourceSet(ResourceSet):
    """
    In-memory set of existing resource paths.
    """

    def __init__(self, paths: Optional[Iterable[str]] = None):
        self._paths: Set[str] = set(paths or [])
        self._lock = asyncio.Lock()

    async def add(self, identifier: ResourceIdentifier) -> None:
        """Mark a resource as existing."""
        async with self._lock:
            self._paths.add(identifier.path)

    async def remove(self, identifier: ResourceIdentifier) -> None:
        """Mark a resource as deleted."""
        async with self._lock:
            self._paths.discard(identifier.path)

    async def has_resource(self, identifier: ResourceIdentifier) -> bool:
        async with self._lock:
            return identifier.path in self._paths
