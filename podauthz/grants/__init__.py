# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package grants models delegation data grants and the collaborators that resolve them.
"""

from .types import (
    RegistryLookup,
    DataInstance,
    DataGrant,
    InstanceDataGrant,
    SelectedFromRegistryDataGrant,
    AllFromRegistryDataGrant
)

from .resolver import (
    GrantResolver,
    AuthorizationAgentFactory,
    MemoryGrantResolver,
    MemoryRegistryLookup,
    StaticAuthorizationAgentFactory
)

__all__ = [
    # Types
    'RegistryLookup',
    'DataInstance',
    'DataGrant',
    'InstanceDataGrant',
    'SelectedFromRegistryDataGrant',
    'AllFromRegistryDataGrant',

    # Collaborators
    'GrantResolver',
    'AuthorizationAgentFactory',
    'MemoryGrantResolver',
    'MemoryRegistryLookup',
    'StaticAuthorizationAgentFactory'
]
