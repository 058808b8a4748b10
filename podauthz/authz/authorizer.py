"""
Core authorization decision for PodAuthz.
Checks requested access modes against an aggregated permission set.
"""

from abc import ABC, abstractmethod
from typing import Set
import logging

from ..errors import ForbiddenError, NotFoundError, UnauthorizedError
from .context import AuthorizationContext
from .resources import ResourceSet
from .types import AccessMode, CredentialSet, has_mode_permission


logger = logging.getLogger(__name__)


class Authorizer(ABC):
    """
    Base class for authorizers.
    """

    @abstractmethod
    async def authorize(self, context: AuthorizationContext) -> None:
        """
        Verify that the request described by the context is allowed.

        Args:
            context: The authorization context of the request

        Raises:
            AuthzError: If the request is denied
        """
        pass


class ModePermissionAuthorizer(Authorizer):
    """
    Authorizer that bases its decision on the permission set of the context.

    For each requested mode it checks whether at least one credential source
    allows that mode. Modes missing from a source count as not allowed.
    """

    def __init__(self, resource_set: ResourceSet):
        """
        Args:
            resource_set: Verifies target existence, which decides the error
                raised for read-entitled agents
        """
        self.resource_set = resource_set

    async def authorize(self, context: AuthorizationContext) -> None:
        credentials = context.credentials
        modes = context.modes
        identifier = context.identifier
        permission_set = context.permission_set

        mode_string = ','.join(sorted(mode.value for mode in modes))
        logger.debug(
            f"Checking if {credentials.web_id} has {mode_string} permissions for {identifier.path}"
        )

        for mode in modes:
            if has_mode_permission(permission_set, mode):
                continue

            # A read-entitled agent may learn that the target does not exist.
            # Unless it is being created, the request ends in a 404 anyway.
            expose_existence = has_mode_permission(permission_set, AccessMode.READ)
            if (expose_existence and AccessMode.CREATE not in modes
                    and not await self.resource_set.has_resource(identifier)):
                logger.debug(f"{identifier.path} does not exist, denying with not found")
                raise NotFoundError()

            self._deny(credentials, mode, modes, identifier.path)

        logger.debug(f"{credentials.web_id} has {mode_string} permissions for {identifier.path}")

    def _deny(self, credentials: CredentialSet, mode: AccessMode,
              modes: Set[AccessMode], path: str) -> None:
        """Raise the denial matching the authentication state of the credentials."""
        if credentials.is_authenticated():
            logger.warning(f"Agent {credentials.web_id} has no {mode.value} permissions")
            raise ForbiddenError()

        # Anonymous agents get a challenge (401) rather than a 403
        logger.warning(f"Unauthenticated agent has no {mode.value} permissions")
        raise UnauthorizedError(sorted(modes, key=lambda m: m.value), path)
