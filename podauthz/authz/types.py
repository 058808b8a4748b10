"""
Authorization types for PodAuthz.
Implements the access mode vocabulary, resource identifiers, credentials and permission sets.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Set


ACL_NAMESPACE = "http://www.w3.org/ns/auth/acl#"


class AccessMode(Enum):
    """Operation kinds an agent can be authorized for."""
    READ = "read"
    WRITE = "write"
    APPEND = "append"
    CREATE = "create"
    DELETE = "delete"

    @property
    def iri(self) -> str:
        """Web Access Control IRI of this mode."""
        return f"{ACL_NAMESPACE}{self.value.capitalize()}"

    @classmethod
    def parse(cls, value: Any, accept_iris: bool = True) -> Optional['AccessMode']:
        """
        Parse a mode value found in a grant.

        Args:
            value: An AccessMode, a short mode name or an ACL mode IRI
            accept_iris: Whether ACL mode IRIs are recognized

        Returns:
            The matching AccessMode, or None for anything outside the vocabulary
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None

        if value.startswith(ACL_NAMESPACE):
            if not accept_iris:
                return None
            for mode in cls:
                if mode.iri == value:
                    return mode
            return None

        try:
            return cls(value)
        except ValueError:
            return None


def filter_modes(values: Iterable[Any], accept_iris: bool = True) -> Set[AccessMode]:
    """Keep only values from the recognized mode vocabulary."""
    modes = set()
    for value in values:
        mode = AccessMode.parse(value, accept_iris)
        if mode is not None:
            modes.add(mode)
    return modes


@dataclass(frozen=True)
class ResourceIdentifier:
    """Identifies a target resource by its path or IRI."""
    path: str

    def __str__(self) -> str:
        return self.path


@dataclass
class Credential:
    """A single identity proof extracted from a request."""
    web_id: Optional[str] = None
    client_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'web_id': self.web_id,
            'client_id': self.client_id
        }


@dataclass
class CredentialSet:
    """
    Credentials presented with one request.

    ``agent`` holds the primary (logged in) identity, ``ticket`` the identity
    carried by a delegated access ticket.
    """
    agent: Optional[Credential] = None
    ticket: Optional[Credential] = None

    def is_authenticated(self) -> bool:
        """Check whether the agent is logged in rather than public/anonymous."""
        return bool(self.agent and self.agent.web_id) or bool(self.ticket and self.ticket.web_id)

    @property
    def web_id(self) -> Optional[str]:
        """WebID reported for this request, preferring the ticket."""
        if self.ticket:
            return self.ticket.web_id
        if self.agent:
            return self.agent.web_id
        return None

    @property
    def client_id(self) -> Optional[str]:
        """Client application acting through a ticket, if any."""
        if self.ticket:
            return self.ticket.client_id
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'agent': self.agent.to_dict() if self.agent else None,
            'ticket': self.ticket.to_dict() if self.ticket else None
        }


# Per-mode grants of a single credential source, missing modes count as False
Permission = Dict[AccessMode, bool]

# Credential source name -> permissions of that source
PermissionSet = Dict[str, Permission]


def has_mode_permission(permission_set: PermissionSet, mode: AccessMode) -> bool:
    """Check if one of the sources in the permission set grants the given mode."""
    for permissions in permission_set.values():
        if permissions.get(mode):
            return True
    return False


def permission_from_modes(modes: Iterable[AccessMode]) -> Permission:
    """Build a per-mode map that grants exactly the given modes."""
    granted = set(modes)
    return {mode: mode in granted for mode in AccessMode}


@dataclass
class AccessRequest:
    """Target resource and requested modes handed to a grant strategy."""
    identifier: ResourceIdentifier
    modes: Set[AccessMode] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'identifier': self.identifier.path,
            'modes': sorted(mode.value for mode in self.modes)
        }
