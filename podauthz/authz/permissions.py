"""
Permission readers produce the permission set the authorizer decides on.

Several readers can contribute to one request; their results are merged so
that a mode is allowed for a credential source as soon as one reader allows it.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Iterable, List, Set
import logging

from .context import AuthorizationContext
from .types import AccessMode, AccessRequest, PermissionSet, ResourceIdentifier, permission_from_modes


logger = logging.getLogger(__name__)


# Computes the modes a client holds for a request
ClientModes = Callable[[AccessRequest, str], Awaitable[Set[AccessMode]]]


class PermissionReader(ABC):
    """
    Base class for permission readers.
    """

    @abstractmethod
    async def read(self, context: AuthorizationContext) -> PermissionSet:
        """
        Read the permissions available to the request.

        Args:
            context: The authorization context of the request

        Returns:
            PermissionSet: Permissions keyed by credential source
        """
        pass


class StrategyPermissionReader(PermissionReader):
    """
    Reads the permissions of the client application named in a ticket credential.
    """

    def __init__(self, client_modes: ClientModes, source: str = "client"):
        self.client_modes = client_modes
        self.source = source

    async def read(self, context: AuthorizationContext) -> PermissionSet:
        client = context.credentials.client_id
        if not client:
            return {self.source: {}}

        modes = await self.client_modes(context.request, client)
        return {self.source: permission_from_modes(modes)}

    @classmethod
    def for_data_instances(cls, strategy: Any, agent_factory: Any,
                           source: str = "client") -> 'StrategyPermissionReader':
        """Build a reader backed by a DataInstanceStrategy."""
        async def client_modes(request: AccessRequest, client: str) -> Set[AccessMode]:
            authorization_agent = await agent_factory.get_authorization_agent(request)
            return await strategy.authorize(authorization_agent, request, client)

        return cls(client_modes, source)

    @classmethod
    def for_data_grants(cls, strategy: Any, source: str = "client") -> 'StrategyPermissionReader':
        """Build a reader backed by a DataGrantStrategy."""
        return cls(strategy.authorize, source)


class ScopedPermissionReader(PermissionReader):
    """
    Consults another reader only for the resources it applies to.
    """

    def __init__(self, reader: PermissionReader, applies_to: Callable[[ResourceIdentifier], bool]):
        self.reader = reader
        self.applies_to = applies_to

    async def read(self, context: AuthorizationContext) -> PermissionSet:
        if not self.applies_to(context.identifier):
            return {}
        return await self.reader.read(context)


class StaticPermissionReader(PermissionReader):
    """
    Returns a fixed permission set, e.g. for public resources.
    """

    def __init__(self, permission_set: PermissionSet):
        self.permission_set = permission_set

    async def read(self, context: AuthorizationContext) -> PermissionSet:
        return {source: dict(permissions) for source, permissions in self.permission_set.items()}


class UnionPermissionReader(PermissionReader):
    """
    Merges the results of several readers.
    """

    def __init__(self, readers: Iterable[PermissionReader]):
        self.readers: List[PermissionReader] = list(readers)

    async def read(self, context: AuthorizationContext) -> PermissionSet:
        merged: PermissionSet = {}
        for reader in self.readers:
            result = await reader.read(context)
            for source, permissions in result.items():
                target = merged.setdefault(source, {})
                for mode, allowed in permissions.items():
                    target[mode] = bool(target.get(mode)) or bool(allowed)

        logger.debug(f"Merged permissions of {len(self.readers)} readers for {context.identifier.path}")
        return merged
