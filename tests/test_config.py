from pathlib import Path

import pytest

from cassandra_topology.config import InventoryConfig, TopologyConfig, load_config
from cassandra_topology.core.errors import ConfigurationError


def test_defaults():
    cfg = load_config({})

    assert cfg.topology.membership_tag == "cassandra"
    assert cfg.topology.ring_tag_prefix == "cassandra_"
    assert cfg.topology.seeds_per_datacenter == 2
    assert cfg.inventory.url is None
    assert cfg.inventory.timeout_seconds == 10.0
    assert cfg.store.domain_prefix == "cassandra_"


def test_environment_overrides():
    cfg = load_config(
        {
            "CASSANDRA_TOPOLOGY_INVENTORY_URL": "http://inventory/hosts",
            "CASSANDRA_TOPOLOGY_INVENTORY_FILE": "/etc/hosts.json",
            "CASSANDRA_TOPOLOGY_INVENTORY_TIMEOUT": "2.5",
            "CASSANDRA_TOPOLOGY_SEEDS_PER_DATACENTER": "3",
            "CASSANDRA_TOPOLOGY_MEMBERSHIP_TAG": "db",
            "CASSANDRA_TOPOLOGY_RING_TAG_PREFIX": "db_",
            "CASSANDRA_TOPOLOGY_SDB_REGION": "us-east-1",
        }
    )

    assert cfg.inventory.url == "http://inventory/hosts"
    assert cfg.inventory.path == Path("/etc/hosts.json")
    assert cfg.inventory.timeout_seconds == 2.5
    assert cfg.topology.seeds_per_datacenter == 3
    assert cfg.topology.membership_tag == "db"
    assert cfg.store.region_name == "us-east-1"


@pytest.mark.parametrize(
    "env",
    [
        {"CASSANDRA_TOPOLOGY_SEEDS_PER_DATACENTER": "two"},
        {"CASSANDRA_TOPOLOGY_SEEDS_PER_DATACENTER": "0"},
        {"CASSANDRA_TOPOLOGY_INVENTORY_TIMEOUT": "soon"},
        {"CASSANDRA_TOPOLOGY_INVENTORY_TIMEOUT": "-1"},
    ],
)
def test_malformed_values_rejected(env):
    with pytest.raises(ConfigurationError):
        load_config(env)


def test_tag_convention_validation():
    with pytest.raises(ConfigurationError):
        TopologyConfig(membership_tag="")
    with pytest.raises(ConfigurationError):
        TopologyConfig(membership_tag="x", ring_tag_prefix="x")


def test_timeout_must_be_positive():
    with pytest.raises(ConfigurationError):
        InventoryConfig(timeout_seconds=0)
