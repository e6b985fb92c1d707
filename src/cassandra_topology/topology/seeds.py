"""
Seed selection.

Every node of a ring asks for seeds independently, and gossip only converges
when they all get the same answer. So the selection must depend only on the
member set, never on the order the inventory happened to list hosts.

Algorithm
1. Group members by datacenter.
2. Order each group by instance_sort_key (ascending id).
3. Take the first seeds_per_datacenter of each group, or the whole group if smaller.
4. Return the union of their public addresses.
"""

from __future__ import annotations

import structlog

from cassandra_topology.core.errors import ConfigurationError
from cassandra_topology.core.types import ClusterInstance, Ring

logger = structlog.get_logger(__name__)


class SeedSelector:
    """Per datacenter seed selection with a fixed count."""

    def __init__(self, seeds_per_datacenter: int = 2) -> None:
        if isinstance(seeds_per_datacenter, bool) or not isinstance(seeds_per_datacenter, int):
            raise ConfigurationError("seeds_per_datacenter must be an integer")
        if seeds_per_datacenter < 1:
            raise ConfigurationError("seeds_per_datacenter must be positive")
        self._count = seeds_per_datacenter

    @property
    def seeds_per_datacenter(self) -> int:
        return self._count

    def seed_instances(self, ring: Ring) -> list[ClusterInstance]:
        """
        Selected instances ordered by datacenter name, then by sort key.

        A datacenter smaller than the count contributes all of its members.
        """
        selected: list[ClusterInstance] = []
        groups = ring.by_datacenter()
        for datacenter in sorted(groups):
            selected.extend(groups[datacenter][: self._count])
        return selected

    def ordered_seeds(self, ring: Ring) -> list[str]:
        """Seed addresses in a stable order, suitable for a seeds: line."""
        seeds: list[str] = []
        missing = []
        for inst in self.seed_instances(ring):
            if not inst.public_ip_address:
                missing.append(inst.id)
                continue
            if inst.public_ip_address not in seeds:
                seeds.append(inst.public_ip_address)

        if missing:
            logger.warning(
                "Seed instances without a public address",
                ring=ring.name,
                instance_ids=[str(i) for i in missing],
            )
        return seeds

    def select_seeds(self, ring: Ring) -> frozenset[str]:
        """Return the seed address set for a ring. An empty ring gives an empty set."""
        return frozenset(self.ordered_seeds(ring))
