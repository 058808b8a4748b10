"""
Tests for data grants and the strategies that evaluate them.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from podauthz.authz import AccessMode, AccessRequest, ResourceIdentifier
from podauthz.errors import ResolutionError
from podauthz.grants import (
    AllFromRegistryDataGrant, DataInstance, InstanceDataGrant, MemoryGrantResolver,
    MemoryRegistryLookup, SelectedFromRegistryDataGrant, StaticAuthorizationAgentFactory
)
from podauthz.monitoring import MetricsCollector
from podauthz.strategy import DataGrantStrategy, DataInstanceStrategy


MOCK_RESOURCE = "https://pod.example.org/alice/projects/1"
MOCK_OTHER_RESOURCE = "https://pod.example.org/bob/123"
MOCK_REGISTRATION = "https://pod.example.org/alice/projects/"
MOCK_APPLICATION = "https://projectron.example/#app"
MOCK_AUTHORIZATION_AGENT = object()
MOCK_REQUEST = AccessRequest(ResourceIdentifier(MOCK_RESOURCE), {AccessMode.READ})

READ = AccessMode.READ
WRITE = AccessMode.WRITE
ACL_UPDATE = "http://www.w3.org/ns/auth/acl#Update"


def make_resolver(grants):
    resolver = Mock()
    resolver.resolve = AsyncMock(return_value=grants)
    return resolver


def make_lookup(instances):
    lookup = Mock()
    lookup.contained_instances = AsyncMock(return_value=instances)
    return lookup


def instance_grant(instances, modes=(READ,)):
    return InstanceDataGrant(
        iri="https://pod.example.org/alice/grants/instance",
        access_modes=modes,
        data_instance=tuple(DataInstance(iri, instance_modes) for iri, instance_modes in instances)
    )


def selected_grant(instances, modes):
    return SelectedFromRegistryDataGrant(
        iri="https://pod.example.org/alice/grants/selected",
        access_modes=modes,
        has_data_registration=MOCK_REGISTRATION,
        has_data_instance=tuple(instances)
    )


def all_grant(lookup, modes):
    return AllFromRegistryDataGrant(
        iri="https://pod.example.org/alice/grants/all",
        access_modes=modes,
        has_data_registration=MOCK_REGISTRATION,
        registry_lookup=lookup
    )


class TestDataGrantTypes:
    """Test the covered instances of each grant kind."""

    @pytest.mark.asyncio
    async def test_instance_grant_yields_own_modes(self):
        """Test that individual instances keep their own modes."""
        grant = instance_grant([(MOCK_RESOURCE, {WRITE})], modes={READ})

        instances = [instance async for instance in grant.data_instances()]

        assert instances == [DataInstance(MOCK_RESOURCE, frozenset({WRITE}))]

    @pytest.mark.asyncio
    async def test_selected_grant_applies_grant_modes(self):
        """Test that selected instances carry the grant modes."""
        grant = selected_grant([MOCK_RESOURCE, MOCK_OTHER_RESOURCE], {READ, WRITE})

        instances = [instance async for instance in grant.data_instances()]

        assert [instance.iri for instance in instances] == [MOCK_RESOURCE, MOCK_OTHER_RESOURCE]
        assert all(instance.access_modes == frozenset({READ, WRITE}) for instance in instances)

    @pytest.mark.asyncio
    async def test_all_from_registry_reads_membership_per_iteration(self):
        """Test that each iteration resolves the registry once."""
        lookup = make_lookup([MOCK_RESOURCE])
        grant = all_grant(lookup, {READ})

        first = [instance.iri async for instance in grant.data_instances()]
        second = [instance.iri async for instance in grant.data_instances()]

        assert first == second == [MOCK_RESOURCE]
        assert lookup.contained_instances.await_count == 2
        lookup.contained_instances.assert_awaited_with(MOCK_REGISTRATION)

    @pytest.mark.asyncio
    async def test_all_from_registry_sees_live_membership(self):
        """Test that registry changes show up in the next iteration."""
        lookup = MemoryRegistryLookup({MOCK_REGISTRATION: []})
        grant = all_grant(lookup, {READ})

        assert [i async for i in grant.data_instances()] == []

        await lookup.add_instance(MOCK_REGISTRATION, MOCK_RESOURCE)
        assert [i.iri async for i in grant.data_instances()] == [MOCK_RESOURCE]

        await lookup.remove_instance(MOCK_REGISTRATION, MOCK_RESOURCE)
        assert [i async for i in grant.data_instances()] == []

    def test_all_from_registry_requires_lookup(self):
        """Test that an all-from-registry grant cannot be built without a lookup."""
        with pytest.raises(ValueError):
            AllFromRegistryDataGrant(iri="https://pod.example.org/alice/grants/all",
                                     has_data_registration=MOCK_REGISTRATION)

    def test_grants_are_immutable(self):
        """Test that grants cannot be changed after creation."""
        grant = selected_grant([MOCK_RESOURCE], [READ, READ])

        assert grant.access_modes == frozenset({READ})
        with pytest.raises(AttributeError):
            grant.access_modes = frozenset({WRITE})


class TestDataInstanceStrategy:
    """Test authorization of clients on data instances."""

    @pytest.mark.asyncio
    async def test_authorizes_with_instance_grant(self):
        """Test permissions of an individual instance grant."""
        resolver = make_resolver([instance_grant([(MOCK_RESOURCE, [READ, WRITE])])])
        strategy = DataInstanceStrategy(resolver)

        result = await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION)

        assert result == {READ}
        resolver.resolve.assert_awaited_once_with(MOCK_AUTHORIZATION_AGENT, MOCK_APPLICATION)

    @pytest.mark.asyncio
    async def test_uses_instance_modes_not_grant_modes(self):
        """Test that per-instance modes override the default modes of the grant."""
        resolver = make_resolver([instance_grant([(MOCK_RESOURCE, [WRITE])], modes=[READ])])
        strategy = DataInstanceStrategy(resolver)
        request = AccessRequest(ResourceIdentifier(MOCK_RESOURCE), {READ, WRITE})

        assert await strategy.authorize(MOCK_AUTHORIZATION_AGENT, request, MOCK_APPLICATION) == {WRITE}

    @pytest.mark.asyncio
    async def test_authorizes_with_selected_from_registry_grant(self):
        """Test permissions of a selected from registry grant."""
        resolver = make_resolver([selected_grant([MOCK_RESOURCE], [READ, WRITE])])
        strategy = DataInstanceStrategy(resolver)

        result = await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION)

        assert result == {READ}

    @pytest.mark.asyncio
    async def test_authorizes_with_all_from_registry_grant(self):
        """Test permissions of an all from registry grant."""
        lookup = make_lookup([MOCK_RESOURCE])
        resolver = make_resolver([all_grant(lookup, [READ, WRITE])])
        strategy = DataInstanceStrategy(resolver)

        result = await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION)

        assert result == {READ}
        lookup.contained_instances.assert_awaited_once_with(MOCK_REGISTRATION)

    @pytest.mark.asyncio
    async def test_all_from_registry_excludes_absent_instances(self):
        """Test that instances outside the registry are not authorized."""
        resolver = make_resolver([all_grant(make_lookup([MOCK_OTHER_RESOURCE]), [READ])])
        strategy = DataInstanceStrategy(resolver)

        assert await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION) == set()

    @pytest.mark.asyncio
    async def test_ignores_additional_interop_modes(self):
        """Test that modes outside the vocabulary, such as acl:Update, are dropped."""
        resolver = make_resolver([instance_grant([(MOCK_RESOURCE, [READ, WRITE, ACL_UPDATE])])])
        strategy = DataInstanceStrategy(resolver)
        request = AccessRequest(ResourceIdentifier(MOCK_RESOURCE), set(AccessMode))

        assert await strategy.authorize(MOCK_AUTHORIZATION_AGENT, request, MOCK_APPLICATION) == {READ, WRITE}

    @pytest.mark.asyncio
    async def test_recognizes_acl_mode_iris(self):
        """Test that ACL IRIs of recognized modes are accepted unless disabled."""
        grants = [selected_grant([MOCK_RESOURCE], [READ.iri, "http://www.w3.org/ns/auth/acl#Control"])]

        accepting = DataInstanceStrategy(make_resolver(grants))
        strict = DataInstanceStrategy(make_resolver(grants), accept_acl_iris=False)

        assert await accepting.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION) == {READ}
        assert await strict.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION) == set()

    @pytest.mark.asyncio
    async def test_unions_modes_of_overlapping_grants(self):
        """Test that overlapping grants contribute the union of their modes."""
        lookup = make_lookup([MOCK_RESOURCE])
        resolver = make_resolver([
            selected_grant([MOCK_RESOURCE], [READ]),
            all_grant(lookup, [WRITE]),
        ])
        strategy = DataInstanceStrategy(resolver)
        request = AccessRequest(ResourceIdentifier(MOCK_RESOURCE), {READ, WRITE})

        assert await strategy.authorize(MOCK_AUTHORIZATION_AGENT, request, MOCK_APPLICATION) == {READ, WRITE}

    @pytest.mark.asyncio
    async def test_does_not_authorize_other_instance(self):
        """Test that grants on a different instance give no permissions."""
        resolver = make_resolver([instance_grant([(MOCK_OTHER_RESOURCE, [READ, WRITE])])])
        strategy = DataInstanceStrategy(resolver)

        assert await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION) == set()

    @pytest.mark.asyncio
    async def test_no_data_grants(self):
        """Test that an empty grant list gives no permissions."""
        resolver = make_resolver([])
        strategy = DataInstanceStrategy(resolver)

        assert await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION) == set()
        resolver.resolve.assert_awaited_once_with(MOCK_AUTHORIZATION_AGENT, MOCK_APPLICATION)

    @pytest.mark.asyncio
    async def test_no_access_grant(self):
        """Test that a client without delegation gets no permissions."""
        resolver = make_resolver(None)
        strategy = DataInstanceStrategy(resolver)

        assert await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION) == set()

    @pytest.mark.asyncio
    async def test_resolver_failure_propagates(self):
        """Test that resolution failures are not turned into an empty result."""
        resolver = Mock()
        resolver.resolve = AsyncMock(side_effect=ResolutionError("grant store offline", MOCK_APPLICATION))
        strategy = DataInstanceStrategy(resolver)

        with pytest.raises(ResolutionError) as exc_info:
            await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION)

        assert exc_info.value.details['client'] == MOCK_APPLICATION

    @pytest.mark.asyncio
    async def test_registry_failure_propagates(self):
        """Test that registry lookup failures reach the caller."""
        lookup = Mock()
        lookup.contained_instances = AsyncMock(side_effect=ConnectionError("registry unreachable"))
        strategy = DataInstanceStrategy(make_resolver([all_grant(lookup, [READ])]))

        with pytest.raises(ConnectionError):
            await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION)

    @pytest.mark.asyncio
    async def test_registry_failure_is_counted(self):
        """Test that a failing registry lookup is recorded as an error resolution."""
        lookup = Mock()
        lookup.contained_instances = AsyncMock(side_effect=ConnectionError("registry unreachable"))
        metrics = MetricsCollector()
        strategy = DataInstanceStrategy(make_resolver([all_grant(lookup, [READ])]), metrics=metrics)

        with pytest.raises(ConnectionError):
            await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION)

        assert metrics.get_count("grants_data_instance_error") == 1
        assert metrics.get_count("grants_data_instance_empty") == 0

    @pytest.mark.asyncio
    async def test_records_metrics(self):
        """Test that grant resolutions are counted by result."""
        metrics = MetricsCollector()
        granted = DataInstanceStrategy(make_resolver([selected_grant([MOCK_RESOURCE], [READ])]), metrics=metrics)
        empty = DataInstanceStrategy(make_resolver(None), metrics=metrics)

        await granted.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION)
        await empty.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION)

        assert metrics.get_count("grants_data_instance_granted") == 1
        assert metrics.get_count("grants_data_instance_empty") == 1

    @pytest.mark.asyncio
    async def test_memory_grant_resolver(self):
        """Test the strategy against the in-memory resolver."""
        resolver = MemoryGrantResolver()
        strategy = DataInstanceStrategy(resolver)
        grant = selected_grant([MOCK_RESOURCE], [READ])

        assert await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION) == set()

        await resolver.add_grant(MOCK_APPLICATION, grant)
        assert await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION) == {READ}

        assert await resolver.revoke_grant(MOCK_APPLICATION, grant.iri) is True
        assert await resolver.revoke_grant(MOCK_APPLICATION, grant.iri) is False
        assert await strategy.authorize(MOCK_AUTHORIZATION_AGENT, MOCK_REQUEST, MOCK_APPLICATION) == set()


class TestDataGrantStrategy:
    """Test authorization of clients on data grant resources."""

    @pytest.mark.asyncio
    async def test_read_when_data_grant_exists(self):
        """Test that holding any grant allows reading the grant description."""
        factory = Mock()
        factory.get_authorization_agent = AsyncMock(return_value=MOCK_AUTHORIZATION_AGENT)
        resolver = make_resolver([selected_grant([MOCK_OTHER_RESOURCE], [WRITE])])
        strategy = DataGrantStrategy(factory, resolver)

        assert await strategy.authorize(MOCK_REQUEST, MOCK_APPLICATION) == {READ}
        factory.get_authorization_agent.assert_awaited_once_with(MOCK_REQUEST)
        resolver.resolve.assert_awaited_once_with(MOCK_AUTHORIZATION_AGENT, MOCK_APPLICATION)

    @pytest.mark.asyncio
    async def test_no_read_when_no_access_grant(self):
        """Test that clients without grants get nothing."""
        strategy = DataGrantStrategy(StaticAuthorizationAgentFactory(MOCK_AUTHORIZATION_AGENT), make_resolver(None))

        assert await strategy.authorize(MOCK_REQUEST, MOCK_APPLICATION) == set()

    @pytest.mark.asyncio
    async def test_no_read_when_grant_list_empty(self):
        """Test that an empty grant list gives nothing."""
        strategy = DataGrantStrategy(StaticAuthorizationAgentFactory(MOCK_AUTHORIZATION_AGENT), make_resolver([]))

        assert await strategy.authorize(MOCK_REQUEST, MOCK_APPLICATION) == set()

    @pytest.mark.asyncio
    async def test_resolver_failure_propagates(self):
        """Test that resolution failures are raised and counted."""
        resolver = Mock()
        resolver.resolve = AsyncMock(side_effect=ResolutionError("grant store offline"))
        metrics = MetricsCollector()
        strategy = DataGrantStrategy(StaticAuthorizationAgentFactory(MOCK_AUTHORIZATION_AGENT), resolver, metrics)

        with pytest.raises(ResolutionError):
            await strategy.authorize(MOCK_REQUEST, MOCK_APPLICATION)

        assert metrics.get_count("grants_data_grant_error") == 1
