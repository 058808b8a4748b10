"""
Delegation grant types for PodAuthz.

A data grant states that a client application may use certain access modes on
data instances of a data owner. Three kinds exist and they differ only in how
the covered instances are found:

- InstanceDataGrant lists the instances itself, each with its own modes
- SelectedFromRegistryDataGrant lists instance IRIs inside one registry
- AllFromRegistryDataGrant covers whatever its registry contains right now

All of them expose the covered instances through ``data_instances()``, an
async iterator meant to be drained once per authorization decision.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, FrozenSet, List, Optional, Tuple


class RegistryLookup(ABC):
    """Reads the live membership of a data registration."""

    @abstractmethod
    async def contained_instances(self, registry: str) -> List[str]:
        """
        List the data instances a registration currently contains.

        Args:
            registry: IRI of the data registration

        Returns:
            List[str]: IRIs of the contained data instances
        """
        pass


@dataclass(frozen=True)
class DataInstance:
    """A data instance covered by a grant together with the modes granted on it."""
    iri: str
    access_modes: FrozenSet[Any] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, 'access_modes', frozenset(self.access_modes))


@dataclass(frozen=True)
class DataGrant(ABC):
    """
    Base class of the three data grant kinds.

    ``access_modes`` holds the raw mode values of the grant as issued, which
    may include values outside the recognized vocabulary.
    """
    iri: str
    access_modes: FrozenSet[Any] = frozenset()
    data_owner: Optional[str] = None
    registered_shape_tree: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'access_modes', frozenset(self.access_modes))

    @abstractmethod
    def data_instances(self) -> AsyncIterator[DataInstance]:
        """Iterate the data instances this grant covers."""
        pass


@dataclass(frozen=True)
class InstanceDataGrant(DataGrant):
    """Grant on individually listed data instances."""
    data_instance: Tuple[DataInstance, ...] = ()

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, 'data_instance', tuple(self.data_instance))

    async def data_instances(self) -> AsyncIterator[DataInstance]:
        for instance in self.data_instance:
            yield instance


@dataclass(frozen=True)
class SelectedFromRegistryDataGrant(DataGrant):
    """Grant on selected instances of a data registration."""
    has_data_registration: Optional[str] = None
    has_data_instance: Tuple[str, ...] = ()

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, 'has_data_instance', tuple(self.has_data_instance))

    async def data_instances(self) -> AsyncIterator[DataInstance]:
        for iri in self.has_data_instance:
            yield DataInstance(iri=iri, access_modes=self.access_modes)


@dataclass(frozen=True)
class AllFromRegistryDataGrant(DataGrant):
    """Grant on every instance a data registration contains."""
    has_data_registration: Optional[str] = None
    registry_lookup: Optional[RegistryLookup] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        super().__post_init__()
        if self.registry_lookup is None:
            raise ValueError(f"All-from-registry grant {self.iri} requires a registry lookup")

    async def data_instances(self) -> AsyncIterator[DataInstance]:
        # Membership is read once per iteration and then served from the snapshot
        contained = list(await self.registry_lookup.contained_instances(self.has_data_registration))
        for iri in contained:
            yield DataInstance(iri=iri, access_modes=self.access_modes)
