# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package authz implements access mode authorization decisions for PodAuthz.
"""

from .types import (
    AccessMode,
    ResourceIdentifier,
    Credential,
    CredentialSet,
    Permission,
    PermissionSet,
    AccessRequest,
    filter_modes,
    has_mode_permission,
    permission_from_modes
)

from .context import (
    AuthorizationContext,
    create_authorization_context
)

from .resources import (
    ResourceSet,
    MemoryResourceSet
)

from .authorizer import (
    Authorizer,
    ModePermissionAuthorizer
)

from .permissions import (
    PermissionReader,
    StrategyPermissionReader,
    ScopedPermissionReader,
    StaticPermissionReader,
    UnionPermissionReader
)

__all__ = [
    # Types
    'AccessMode',
    'ResourceIdentifier',
    'Credential',
    'CredentialSet',
    'Permission',
    'PermissionSet',
    'AccessRequest',
    'filter_modes',
    'has_mode_permission',
    'permission_from_modes',

    # Context
    'AuthorizationContext',
    'create_authorization_context',

    # Resources
    'ResourceSet',
    'MemoryResourceSet',

    # Core authorization
    'Authorizer',
    'ModePermissionAuthorizer',

    # Permission readers
    'PermissionReader',
    'StrategyPermissionReader',
    'ScopedPermissionReader',
    'StaticPermissionReader',
    'UnionPermissionReader'
]
