"""
Collaborator interfaces consumed by the decision core, with in-memory implementations.

The core never fetches or parses grant documents itself. Hosts plug in
implementations of these interfaces; the memory variants serve development
and testing.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional
import asyncio
import logging

from ..authz.types import AccessRequest
from .types import DataGrant, RegistryLookup


logger = logging.getLogger(__name__)


class GrantResolver(ABC):
    """Looks up the data grants a client application holds."""

    @abstractmethod
    async def resolve(self, authorization_agent: Any, client: str) -> Optional[List[DataGrant]]:
        """
        Resolve the data grants available to a client.

        Args:
            authorization_agent: Authorization agent of the data owner
            client: IRI of the client application

        Returns:
            The client's data grants, or None when the client has no delegation

        Raises:
            Any failure of the underlying lookup, which must not be treated as "no grants"
        """
        pass


class AuthorizationAgentFactory(ABC):
    """Provides the authorization agent responsible for a request."""

    @abstractmethod
    async def get_authorization_agent(self, request: AccessRequest) -> Any:
        """Get the authorization agent for the target of a request."""
        pass


class MemoryGrantResolver(GrantResolver):
    """
    In-memory grant resolver.
    """

    def __init__(self, grants: Optional[Dict[str, Iterable[DataGrant]]] = None):
        self._grants: Dict[str, List[DataGrant]] = defaultdict(list)
        self._lock = asyncio.Lock()
        for client, client_grants in (grants or {}).items():
            self._grants[client].extend(client_grants)

    async def add_grant(self, client: str, grant: DataGrant) -> None:
        """Register a data grant for a client."""
        async with self._lock:
            self._grants[client].append(grant)

    async def revoke_grant(self, client: str, grant_iri: str) -> bool:
        """Remove a client's grant by IRI."""
        async with self._lock:
            grants = self._grants.get(client, [])
            remaining = [grant for grant in grants if grant.iri != grant_iri]
            if len(remaining) == len(grants):
                return False
            self._grants[client] = remaining
            return True

    async def resolve(self, authorization_agent: Any, client: str) -> Optional[List[DataGrant]]:
        async with self._lock:
            if client not in self._grants:
                logger.debug(f"No delegation found for client {client}")
                return None
            return list(self._grants[client])


class MemoryRegistryLookup(RegistryLookup):
    """
    In-memory data registrations.
    """

    def __init__(self, registries: Optional[Dict[str, Iterable[str]]] = None):
        self._registries: Dict[str, List[str]] = {
            registry: list(instances) for registry, instances in (registries or {}).items()
        }
        self._lock = asyncio.Lock()

    async def add_instance(self, registry: str, instance: str) -> None:
        """Add a data instance to a registration."""
        async with self._lock:
            self._registries.setdefault(registry, []).append(instance)

    async def remove_instance(self, registry: str, instance: str) -> None:
        """Remove a data instance from a registration."""
        async with self._lock:
            instances = self._registries.get(registry, [])
            if instance in instances:
                instances.remove(instance)

    async def contained_instances(self, registry: str) -> List[str]:
        async with self._lock:
            return list(self._registries.get(registry, []))


class StaticAuthorizationAgentFactory(AuthorizationAgentFactory):
    """
    Factory that hands out the same authorization agent for every request.
    """

    def __init__(self, authorization_agent: Any):
        self.authorization_agent = authorization_agent

    async def get_authorization_agent(self, request: AccessRequest) -> Any:
        return self.authorization_agent
