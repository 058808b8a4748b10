"""
Authorization engine for PodAuthz.

Runs one complete decision: build the context, read permissions, authorize.
"""

from typing import Callable, Iterable, Optional
import logging
import time

from ..authz.authorizer import Authorizer, ModePermissionAuthorizer
from ..authz.context import AuthorizationContext, create_authorization_context
from ..authz.permissions import (
    PermissionReader, ScopedPermissionReader, StrategyPermissionReader, UnionPermissionReader
)
from ..authz.resources import ResourceSet
from ..authz.types import AccessMode, CredentialSet, ResourceIdentifier
from ..errors import ForbiddenError, NotFoundError, UnauthorizedError
from ..grants.resolver import AuthorizationAgentFactory, GrantResolver
from ..monitoring.metrics import MetricsCollector
from ..strategy.grant import DataGrantStrategy
from ..strategy.instance import DataInstanceStrategy
from ..util.config import configure_logging
from .config import EngineConfig


logger = logging.getLogger(__name__)


class AuthorizationEngine:
    """
    Decides whether a request may use the requested modes on a resource.
    """

    def __init__(self, reader: PermissionReader, authorizer: Authorizer,
                 metrics: Optional[MetricsCollector] = None):
        self.reader = reader
        self.authorizer = authorizer
        self.metrics = metrics

    @classmethod
    def build(
        cls,
        config: EngineConfig,
        resource_set: ResourceSet,
        resolver: GrantResolver,
        agent_factory: AuthorizationAgentFactory,
        extra_readers: Iterable[PermissionReader] = (),
        grant_resources: Optional[Callable[[ResourceIdentifier], bool]] = None
    ) -> "AuthorizationEngine":
        """
        Create an engine that authorizes client applications through their data grants.

        Args:
            config: Engine configuration
            resource_set: Existence checks for target resources
            resolver: Resolves the data grants of a client
            agent_factory: Provides the authorization agent of a request
            extra_readers: Further permission sources, e.g. owner ACLs
            grant_resources: Recognizes data grant descriptions; a client holding any
                grant may read those resources

        Returns:
            AuthorizationEngine: Ready to use engine
        """
        config.validate()
        configure_logging(config.log_level)

        metrics = MetricsCollector(config.metrics)
        strategy = DataInstanceStrategy(resolver, config.accept_acl_iris, metrics)
        readers = [
            StrategyPermissionReader.for_data_instances(
                strategy, agent_factory, config.permission_source
            ),
        ]
        if grant_resources is not None:
            grant_strategy = DataGrantStrategy(agent_factory, resolver, metrics)
            readers.append(ScopedPermissionReader(
                StrategyPermissionReader.for_data_grants(grant_strategy, config.permission_source),
                grant_resources,
            ))
        readers.extend(extra_readers)
        return cls(UnionPermissionReader(readers), ModePermissionAuthorizer(resource_set), metrics)

    async def decide(
        self,
        credentials: CredentialSet,
        identifier: ResourceIdentifier,
        modes: Iterable[AccessMode],
        request_id: Optional[str] = None
    ) -> AuthorizationContext:
        """
        Authorize a request.

        Returns:
            AuthorizationContext: The context, including the permission set the decision was based on

        Raises:
            ForbiddenError, UnauthorizedError, NotFoundError: If the request is denied
            Any collaborator failure raised while reading permissions
        """
        context = create_authorization_context(credentials, identifier, modes, request_id)
        start = time.perf_counter()
        outcome = None
        try:
            context.permission_set = await self.reader.read(context)
            await self.authorizer.authorize(context)
            outcome = "allowed"
            return context
        except (ForbiddenError, UnauthorizedError, NotFoundError) as e:
            outcome = e.error_code.value
            raise
        except Exception as e:
            outcome = "error"
            logger.error(f"Authorization of {identifier.path} failed (request {context.request_id}): {e}")
            raise
        finally:
            if self.metrics and outcome:
                self.metrics.record_decision(outcome, time.perf_counter() - start)
