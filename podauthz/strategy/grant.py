"""
Authorization of client applications on the description of their own data grants.
"""

from typing import Optional, Set
import logging

from ..authz.types import AccessMode, AccessRequest
from ..grants.resolver import AuthorizationAgentFactory, GrantResolver
from ..monitoring.metrics import MetricsCollector


logger = logging.getLogger(__name__)


class DataGrantStrategy:
    """
    Grants read access to a data grant resource when the client holds any grant.
    """

    name = "data_grant"

    def __init__(self, agent_factory: AuthorizationAgentFactory, resolver: GrantResolver,
                 metrics: Optional[MetricsCollector] = None):
        self.agent_factory = agent_factory
        self.resolver = resolver
        self.metrics = metrics

    async def authorize(self, request: AccessRequest, client: str) -> Set[AccessMode]:
        """
        Determine the access modes of a client on a data grant resource.

        Returns:
            Set[AccessMode]: ``{READ}`` if the client holds any grant, else empty
        """
        authorization_agent = await self.agent_factory.get_authorization_agent(request)
        try:
            grants = await self.resolver.resolve(authorization_agent, client)
        except Exception:
            if self.metrics:
                self.metrics.record_grant_resolution(self.name, "error")
            raise

        if not grants:
            logger.debug(f"Client {client} holds no data grants, denying {request.identifier.path}")
            if self.metrics:
                self.metrics.record_grant_resolution(self.name, "empty")
            return set()

        if self.metrics:
            self.metrics.record_grant_resolution(self.name, "granted")
        return {AccessMode.READ}
