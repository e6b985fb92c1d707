"""
Core types.

This file defines the shared data structures used across the engine.

Important design choice
Every value here is immutable. A Ring or ClusterInstance is a snapshot built
fresh from the inventory on each query, nothing mutates it afterwards.

HostRecord is the raw, untrusted shape read from the inventory manifest.
ClusterInstance is the normalized view the rest of the system works with.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

InstanceId = int | str


@dataclass(frozen=True)
class HostRecord:
    """
    One host entry from the inventory manifest.

    roles keeps the manifest order. Tags are free form and may contain
    anything, the resolver decides which ones matter.

    region is the manifest key the record was listed under.
    """

    host_id: str
    hostname: str
    roles: tuple[str, ...] = ()
    zone: str = ""
    public_ip: str = ""
    private_ip: str = ""
    region: str = ""


@dataclass(frozen=True)
class ClusterInstance:
    """
    A Cassandra node as seen by the ring.

    id is unique within the owning ring. Discovered instances use the inventory
    host id, instances from the writable store use integers.

    String fields default to empty rather than None so persistence round trips
    never have to special case missing attributes.

    token is the assigned bootstrap token when one exists.
    """

    id: InstanceId
    datacenter: str = ""
    rack: str = ""
    hostname: str = ""
    public_ip_address: str = ""
    fully_qualified_domain_name: str = ""
    token: int | None = None


def instance_sort_key(instance: ClusterInstance) -> tuple[int, int, str, str]:
    """
    Total ordering over instances.

    Integer ids sort numerically before string ids, string ids sort lexically.
    Hostname breaks ties so two instances never compare equal by accident.
    """
    if isinstance(instance.id, int) and not isinstance(instance.id, bool):
        return (0, instance.id, "", instance.hostname)
    return (1, 0, str(instance.id), instance.hostname)


@dataclass(frozen=True)
class Ring:
    """
    A named Cassandra cluster and its members.

    A ring has no identity beyond its name and member set.
    Member ids must be unique, constructing a ring with duplicates fails.
    """

    name: str
    instances: frozenset[ClusterInstance] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.instances, frozenset):
            object.__setattr__(self, "instances", frozenset(self.instances))

        seen: set = set()
        for inst in self.instances:
            if inst.id in seen:
                raise ValueError(f"duplicate instance id {inst.id!r} in ring {self.name!r}")
            seen.add(inst.id)

    def datacenters(self) -> list[str]:
        """Return sorted datacenter names present in this ring."""
        return sorted({inst.datacenter for inst in self.instances})

    def by_datacenter(self) -> dict[str, list[ClusterInstance]]:
        """Group members by datacenter, each group ordered by instance_sort_key."""
        groups: dict[str, list[ClusterInstance]] = defaultdict(list)
        for inst in self.instances:
            groups[inst.datacenter].append(inst)
        return {dc: sorted(members, key=instance_sort_key) for dc, members in groups.items()}

    def find_instance(self, instance_id: InstanceId) -> ClusterInstance | None:
        """Return the member with this id, or None."""
        for inst in self.instances:
            if inst.id == instance_id:
                return inst
        return None

    def sorted_instances(self) -> list[ClusterInstance]:
        """Members in deterministic order. Useful for stable output."""
        return sorted(self.instances, key=instance_sort_key)
