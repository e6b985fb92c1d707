import random

import pytest

from cassandra_topology.core.errors import ConfigurationError
from cassandra_topology.core.types import ClusterInstance, Ring
from cassandra_topology.topology.seeds import SeedSelector


def make_instance(instance_id, datacenter: str, ip: str) -> ClusterInstance:
    return ClusterInstance(id=instance_id, datacenter=datacenter, public_ip_address=ip)


def test_two_per_datacenter():
    ring = Ring(
        name="r",
        instances=frozenset(
            {
                make_instance(1, "dc1", "1.1.1.1"),
                make_instance(2, "dc1", "2.2.2.2"),
                make_instance(3, "dc2", "3.3.3.3"),
                make_instance(4, "dc2", "4.4.4.4"),
            }
        ),
    )

    seeds = SeedSelector(2).select_seeds(ring)

    assert seeds == frozenset({"1.1.1.1", "2.2.2.2", "3.3.3.3", "4.4.4.4"})


def test_small_datacenter_contributes_all_members():
    ring = Ring(
        name="r",
        instances=frozenset(
            {
                make_instance(1, "dc1", "1.1.1.1"),
                make_instance(2, "dc2", "2.2.2.2"),
                make_instance(3, "dc2", "3.3.3.3"),
            }
        ),
    )

    seeds = SeedSelector(2).select_seeds(ring)

    assert seeds == frozenset({"1.1.1.1", "2.2.2.2", "3.3.3.3"})


def test_lowest_ids_win_within_datacenter():
    ring = Ring(
        name="r",
        instances=frozenset(
            {
                make_instance(10, "dc1", "10.0.0.10"),
                make_instance(3, "dc1", "10.0.0.3"),
                make_instance(7, "dc1", "10.0.0.7"),
                make_instance(5, "dc2", "10.1.0.5"),
            }
        ),
    )

    selector = SeedSelector(2)

    assert selector.select_seeds(ring) == frozenset({"10.0.0.3", "10.0.0.7", "10.1.0.5"})
    assert selector.ordered_seeds(ring) == ["10.0.0.3", "10.0.0.7", "10.1.0.5"]


def test_integer_ids_sort_numerically():
    ring = Ring(
        name="r",
        instances=[make_instance(i, "dc1", f"10.0.0.{i}") for i in (2, 10, 1)],
    )

    assert SeedSelector(2).ordered_seeds(ring) == ["10.0.0.1", "10.0.0.2"]


def test_selection_is_deterministic_across_orderings():
    instances = [make_instance(f"h{i:02d}", f"dc{i % 3}", f"10.0.{i % 3}.{i}") for i in range(20)]
    selector = SeedSelector(2)

    expected = selector.ordered_seeds(Ring(name="r", instances=instances))
    for seed in range(5):
        shuffled = list(instances)
        random.Random(seed).shuffle(shuffled)
        assert selector.ordered_seeds(Ring(name="r", instances=shuffled)) == expected


def test_empty_ring():
    assert SeedSelector(2).select_seeds(Ring(name="empty")) == frozenset()


def test_count_larger_than_cluster():
    ring = Ring(name="r", instances=[make_instance(1, "dc1", "1.1.1.1")])

    assert SeedSelector(5).select_seeds(ring) == frozenset({"1.1.1.1"})


def test_missing_address_is_counted_but_not_returned():
    ring = Ring(
        name="r",
        instances=[
            make_instance(1, "dc1", ""),
            make_instance(2, "dc1", "2.2.2.2"),
            make_instance(3, "dc1", "3.3.3.3"),
        ],
    )

    assert SeedSelector(2).select_seeds(ring) == frozenset({"2.2.2.2"})


@pytest.mark.parametrize("count", [0, -1, True])
def test_invalid_count_rejected(count):
    with pytest.raises(ConfigurationError):
        SeedSelector(count)
