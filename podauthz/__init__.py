"""
PodAuthz Python Package

Access mode authorization for personal data pods, including delegated access
by client applications through data grants.
"""

__version__ = "0.1.0"

from .core.engine import AuthorizationEngine
from .core.config import EngineConfig
from .authz.types import (
    AccessMode,
    ResourceIdentifier,
    Credential,
    CredentialSet,
    AccessRequest,
)
from .authz.authorizer import ModePermissionAuthorizer
from .strategy import DataInstanceStrategy, DataGrantStrategy
from .errors import (
    AuthzError,
    ForbiddenError,
    UnauthorizedError,
    NotFoundError,
)

__all__ = [
    "AuthorizationEngine",
    "EngineConfig",
    "AccessMode",
    "ResourceIdentifier",
    "Credential",
    "CredentialSet",
    "AccessRequest",
    "ModePermissionAuthorizer",
    "DataInstanceStrategy",
    "DataGrantStrategy",
    "AuthzError",
    "ForbiddenError",
    "UnauthorizedError",
    "NotFoundError",
]
