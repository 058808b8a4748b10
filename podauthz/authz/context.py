"""
Authorization context for PodAuthz.
Bundles everything a single authorization decision needs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Set
import uuid

from .types import AccessMode, AccessRequest, CredentialSet, PermissionSet, ResourceIdentifier


@dataclass
class AuthorizationContext:
    """
    Per-request aggregate of credentials, target, requested modes and permissions.

    Created once for an incoming request and discarded after the decision.
    """
    credentials: CredentialSet
    identifier: ResourceIdentifier
    modes: Set[AccessMode]
    permission_set: PermissionSet = field(default_factory=dict)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def request(self) -> AccessRequest:
        """The target and modes of this context as an access request."""
        return AccessRequest(identifier=self.identifier, modes=set(self.modes))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'request_id': self.request_id,
            'timestamp': self.timestamp.isoformat(),
            'credentials': self.credentials.to_dict(),
            'identifier': self.identifier.path,
            'modes': sorted(mode.value for mode in self.modes),
            'permission_set': {
                source: {mode.value: allowed for mode, allowed in permissions.items()}
                for source, permissions in self.permission_set.items()
            }
        }


def create_authorization_context(
    credentials: CredentialSet,
    identifier: ResourceIdentifier,
    modes: Iterable[AccessMode],
    request_id: Optional[str] = None
) -> AuthorizationContext:
    """
    Create a new authorization context with an empty permission set.

    Args:
        credentials: Credentials extracted from the request
        identifier: Target resource
        modes: Requested access modes
        request_id: Optional identifier for correlating log lines

    Returns:
        AuthorizationContext: New context instance
    """
    context = AuthorizationContext(
        credentials=credentials,
        identifier=identifier,
        modes=set(modes)
    )
    if request_id:
        context.request_id = request_id
    return context
