"""
Basic PodAuthz usage example.

This example demonstrates the fundamental PodAuthz operations:
- Registering data grants for a client application
- Building an authorization engine
- Allowed and denied decisions for delegated access
"""

import asyncio

from podauthz import AccessMode, AuthorizationEngine, Credential, CredentialSet, EngineConfig
from podauthz.authz import MemoryResourceSet, ResourceIdentifier, StaticPermissionReader
from podauthz.errors import AuthzError, create_error_response
from podauthz.grants import (
    AllFromRegistryDataGrant, MemoryGrantResolver, MemoryRegistryLookup,
    SelectedFromRegistryDataGrant, StaticAuthorizationAgentFactory
)

PROJECTS = "https://pod.example.org/alice/projects/"
TASKS = "https://pod.example.org/alice/tasks/"
CLIENT = "https://projectron.example/#app"


async def basic_example():
    """Demonstrate basic PodAuthz usage"""
    print("Basic PodAuthz Example")
    print("=" * 30)

    # 1. Data registrations and existing resources of the pod
    registries = MemoryRegistryLookup({TASKS: [f"{TASKS}1", f"{TASKS}2"]})
    resources = MemoryResourceSet([f"{PROJECTS}1", f"{PROJECTS}2", f"{TASKS}1", f"{TASKS}2"])

    # 2. Grants the owner issued to the client
    resolver = MemoryGrantResolver({
        CLIENT: [
            SelectedFromRegistryDataGrant(
                iri="https://pod.example.org/alice/grants/projects",
                access_modes={AccessMode.READ},
                has_data_registration=PROJECTS,
                has_data_instance=(f"{PROJECTS}1",),
            ),
            AllFromRegistryDataGrant(
                iri="https://pod.example.org/alice/grants/tasks",
                access_modes={AccessMode.READ, AccessMode.WRITE,
                              "http://www.w3.org/ns/auth/acl#Update"},
                has_data_registration=TASKS,
                registry_lookup=registries,
            ),
        ]
    })
    print("✓ Registered data grants")

    # 3. Engine with an empty public source; access comes from the grants alone
    engine = AuthorizationEngine.build(
        EngineConfig.from_env(),
        resources,
        resolver,
        StaticAuthorizationAgentFactory(None),
        extra_readers=[StaticPermissionReader({"public": {}})],
    )
    credentials = CredentialSet(ticket=Credential(web_id="https://bob.example/profile#me",
                                                  client_id=CLIENT))

    checks = [
        (f"{PROJECTS}1", {AccessMode.READ}),
        (f"{PROJECTS}2", {AccessMode.READ}),
        (f"{TASKS}2", {AccessMode.READ, AccessMode.WRITE}),
        (f"{TASKS}3", {AccessMode.WRITE}),
    ]

    # 4. Decide
    for path, modes in checks:
        mode_names = ",".join(sorted(mode.value for mode in modes))
        try:
            await engine.decide(credentials, ResourceIdentifier(path), modes)
            print(f"✓ {mode_names} on {path} allowed")
        except AuthzError as e:
            response = create_error_response(e)
            print(f"✗ {mode_names} on {path} denied ({response['http_status']})")

    print(engine.metrics.export().decode())


if __name__ == "__main__":
    asyncio.run(basic_example())
