"""
Ring repository over discovered topology.

Rings are a projection of the live inventory. Nothing is cached: every call
fetches the manifest once, resolves it, and answers from that snapshot.
Two concurrent callers may see different snapshots if the inventory changes
between their fetches.

The projection is read only. save and delete fail immediately, changes to
membership happen by retagging hosts in the inventory.
"""

from __future__ import annotations

from typing import Protocol

import structlog

from cassandra_topology.core.errors import UnsupportedOperation
from cassandra_topology.core.types import Ring
from cassandra_topology.inventory.manifest import hosts_from_manifest
from cassandra_topology.inventory.source import InventorySource
from cassandra_topology.topology.resolver import Topology, TopologyResolver

logger = structlog.get_logger(__name__)


class RingRepository(Protocol):
    """Ring query surface used by services."""

    def list_rings(self) -> frozenset[Ring]:
        """Return every known ring."""

    def find_ring(self, name: str) -> Ring | None:
        """Return the ring with this name, or None."""

    def save(self, ring: Ring) -> None:
        """Persist a ring."""

    def delete(self, ring: Ring) -> None:
        """Remove a ring."""


class DiscoveryRingRepository(RingRepository):
    """
    Read only rings resolved from an InventorySource.

    Inventory failures propagate unchanged as BackingStoreUnavailable.
    """

    def __init__(self, source: InventorySource, resolver: TopologyResolver | None = None) -> None:
        self._source = source
        self._resolver = resolver or TopologyResolver()

    def topology(self) -> Topology:
        """Fetch and resolve one fresh snapshot."""
        manifest = self._source.fetch()
        return self._resolver.resolve(hosts_from_manifest(manifest))

    def list_rings(self) -> frozenset[Ring]:
        topology = self.topology()
        return frozenset(_build_ring(name, topology) for name in topology.rings())

    def find_ring(self, name: str) -> Ring | None:
        topology = self.topology()
        if name not in topology.rings():
            logger.debug("Ring not found in inventory", ring=name)
            return None
        return _build_ring(name, topology)

    def save(self, ring: Ring) -> None:
        raise UnsupportedOperation(f"save is not supported for {type(self).__name__}")

    def delete(self, ring: Ring) -> None:
        raise UnsupportedOperation(f"delete is not supported for {type(self).__name__}")


def _build_ring(name: str, topology: Topology) -> Ring:
    return Ring(name=name, instances=topology.members_of(name))
