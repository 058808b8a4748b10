"""
Authorization of client applications on individual data instances.
"""

from typing import Any, Optional, Set
import logging

from ..authz.types import AccessMode, AccessRequest, filter_modes
from ..grants.resolver import GrantResolver
from ..monitoring.metrics import MetricsCollector


logger = logging.getLogger(__name__)


class DataInstanceStrategy:
    """
    Computes the modes a client holds on the data instance targeted by a request.

    Every grant of the client is scanned and the modes of all grants covering
    the instance are combined. The result only contains recognized modes that
    the request asks for.
    """

    name = "data_instance"

    def __init__(self, resolver: GrantResolver, accept_acl_iris: bool = True,
                 metrics: Optional[MetricsCollector] = None):
        self.resolver = resolver
        self.accept_acl_iris = accept_acl_iris
        self.metrics = metrics

    async def authorize(self, authorization_agent: Any, request: AccessRequest,
                        client: str) -> Set[AccessMode]:
        """
        Determine the access modes of a client on the requested data instance.

        Args:
            authorization_agent: Authorization agent of the data owner
            request: Target instance and requested modes
            client: IRI of the client application

        Returns:
            Set[AccessMode]: Granted modes, empty when the client has no access

        Raises:
            Any failure of the grant resolver or a registry lookup
        """
        try:
            grants = await self.resolver.resolve(authorization_agent, client)
        except Exception:
            self._record("error")
            raise

        if not grants:
            logger.debug(f"Client {client} holds no data grants")
            self._record("empty")
            return set()

        target = request.identifier.path
        granted = set()
        try:
            for grant in grants:
                async for instance in grant.data_instances():
                    if instance.iri == target:
                        granted.update(instance.access_modes)
        except Exception:
            self._record("error")
            raise

        modes = filter_modes(granted, self.accept_acl_iris) & set(request.modes)
        logger.debug(
            f"Client {client} holds {sorted(mode.value for mode in modes)} on {target}"
        )
        self._record("granted" if modes else "empty")
        return modes

    def _record(self, result: str) -> None:
        if self.metrics:
            self.metrics.record_grant_resolution(self.name, result)
