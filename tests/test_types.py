import pytest

from cassandra_topology.core.serialization import instance_to_json, ring_to_json
from cassandra_topology.core.types import ClusterInstance, Ring, instance_sort_key
from cassandra_topology.topology.tokens import AssignedTokenService


def test_ring_rejects_duplicate_ids():
    with pytest.raises(ValueError):
        Ring(
            name="r",
            instances=[
                ClusterInstance(id=1, hostname="a"),
                ClusterInstance(id=1, hostname="b"),
            ],
        )


def test_ring_groups_by_datacenter():
    ring = Ring(
        name="r",
        instances=[
            ClusterInstance(id=3, datacenter="dc2"),
            ClusterInstance(id=2, datacenter="dc1"),
            ClusterInstance(id=1, datacenter="dc1"),
        ],
    )

    assert ring.datacenters() == ["dc1", "dc2"]
    assert [i.id for i in ring.by_datacenter()["dc1"]] == [1, 2]
    assert ring.find_instance(3) == ClusterInstance(id=3, datacenter="dc2")
    assert ring.find_instance(4) is None


def test_sort_key_orders_ints_before_strings():
    instances = [ClusterInstance(id="b"), ClusterInstance(id=10), ClusterInstance(id="a"), ClusterInstance(id=2)]

    assert [i.id for i in sorted(instances, key=instance_sort_key)] == [2, 10, "a", "b"]


def test_assigned_token_service():
    token = 2**127 - 1
    service = AssignedTokenService()

    assert service.get_token(ClusterInstance(id=1, token=token)) == token
    assert service.get_token(ClusterInstance(id=2)) is None


def test_json_shapes():
    big = ClusterInstance(id=1, datacenter="dc1", token=2**100)
    ring = Ring(name="r", instances=[ClusterInstance(id=2), big])

    assert instance_to_json(big)["token"] == str(2**100)
    assert instance_to_json(ClusterInstance(id=5, token=42))["token"] == 42

    payload = ring_to_json(ring)
    assert payload["name"] == "r"
    assert [i["id"] for i in payload["instances"]] == [1, 2]
