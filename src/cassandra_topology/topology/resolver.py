"""
Topology resolution.

This module turns raw inventory hosts into ring membership.

Rules
1. A host without the generic membership tag is not a Cassandra host. Drop it.
2. Every ring qualified tag makes the host a member of that ring. A host tagged
   for two rings is a member of both.
3. A host with the membership tag but no ring tag belongs to no ring. It is
   logged and excluded, never an error.
4. The zone is converted to (datacenter, rack) by the configured ZoneSplitter.

The resolver is pure. It keeps no state between calls and never fetches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

import structlog

from cassandra_topology.config import TopologyConfig
from cassandra_topology.core.types import ClusterInstance, HostRecord, InstanceId
from cassandra_topology.topology.tags import TagRules
from cassandra_topology.topology.zones import ZoneSplitter, region_zone_split

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Topology:
    """
    Immutable membership snapshot.

    members maps ring name to its member instances.
    A ring exists if and only if it appears in rings().

    members is stored as a read only view, so a snapshot can be hashed and
    shared between callers.
    """

    members: Mapping[str, frozenset[ClusterInstance]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {ring: frozenset(instances) for ring, instances in self.members.items()}
        object.__setattr__(self, "members", MappingProxyType(frozen))

    def __hash__(self) -> int:
        return hash(frozenset(self.members.items()))

    def rings(self) -> frozenset[str]:
        """All ring names observed in the inventory. Empty input gives an empty set."""
        return frozenset(self.members.keys())

    def members_of(self, ring_name: str) -> frozenset[ClusterInstance]:
        """Members of a ring, or an empty set for a ring that was never observed."""
        return self.members.get(ring_name, frozenset())


def _preference_key(instance: ClusterInstance) -> tuple[str, str, str, str]:
    return (
        instance.hostname,
        instance.public_ip_address,
        instance.datacenter,
        instance.rack,
    )


class TopologyResolver:
    """
    Resolve HostRecord values into a Topology.

    zone_splitter
    Function converting a zone string to (datacenter, rack).
    """

    def __init__(
        self,
        config: TopologyConfig | None = None,
        zone_splitter: ZoneSplitter = region_zone_split,
    ) -> None:
        self._config = config or TopologyConfig()
        self._rules = TagRules.from_config(self._config)
        self._zone_splitter = zone_splitter

    @property
    def config(self) -> TopologyConfig:
        return self._config

    def to_instance(self, host: HostRecord) -> ClusterInstance:
        """Convert one host record into a ClusterInstance."""
        datacenter, rack = self._zone_splitter(host.zone)
        instance_id: InstanceId = host.host_id or host.hostname

        fqdn = host.hostname
        suffix = self._config.domain_suffix.strip(".")
        if suffix and fqdn and not fqdn.endswith("." + suffix):
            fqdn = f"{fqdn}.{suffix}"

        return ClusterInstance(
            id=instance_id,
            datacenter=datacenter,
            rack=rack,
            hostname=host.hostname,
            public_ip_address=host.public_ip,
            fully_qualified_domain_name=fqdn,
        )

    def resolve(self, hosts: Iterable[HostRecord]) -> Topology:
        """
        Build a Topology in a single pass over hosts.

        When two hosts in one ring share an id, the one with the smallest
        hostname wins, so the outcome does not depend on input order.
        """
        by_ring: dict[str, dict[InstanceId, ClusterInstance]] = {}
        discarded = 0
        unassigned = []

        for host in hosts:
            if not self._rules.is_member(host.roles):
                discarded += 1
                continue

            ring_names = self._rules.ring_names(host.roles)
            if not ring_names:
                unassigned.append(host.hostname)
                continue

            instance = self.to_instance(host)
            for ring in ring_names:
                members = by_ring.setdefault(ring, {})
                current = members.get(instance.id)
                if current is None:
                    members[instance.id] = instance
                    continue
                if current == instance:
                    continue
                logger.warning(
                    "Duplicate instance id in ring",
                    ring=ring,
                    instance_id=instance.id,
                    hostnames=sorted([current.hostname, instance.hostname]),
                )
                if _preference_key(instance) < _preference_key(current):
                    members[instance.id] = instance

        if unassigned:
            logger.info(
                "Hosts carry the membership tag but no ring tag",
                hostnames=sorted(unassigned),
            )

        topology = Topology(
            members={ring: frozenset(members.values()) for ring, members in by_ring.items()}
        )
        logger.debug(
            "Resolved topology",
            rings=sorted(topology.rings()),
            discarded=discarded,
        )
        return topology
