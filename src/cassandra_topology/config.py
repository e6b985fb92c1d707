"""
Configuration.

All tunables live in frozen dataclasses that are passed into constructors.
There is no process wide mutable state, two resolvers with different tag
conventions can run side by side.

load_config builds the full configuration from environment variables:

CASSANDRA_TOPOLOGY_INVENTORY_URL
CASSANDRA_TOPOLOGY_INVENTORY_FILE
CASSANDRA_TOPOLOGY_INVENTORY_TIMEOUT
CASSANDRA_TOPOLOGY_MEMBERSHIP_TAG
CASSANDRA_TOPOLOGY_RING_TAG_PREFIX
CASSANDRA_TOPOLOGY_SEEDS_PER_DATACENTER
CASSANDRA_TOPOLOGY_DOMAIN_SUFFIX
CASSANDRA_TOPOLOGY_SDB_DOMAIN_PREFIX
CASSANDRA_TOPOLOGY_SDB_REGION
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from cassandra_topology.core.errors import ConfigurationError

ENV_PREFIX = "CASSANDRA_TOPOLOGY_"


@dataclass(frozen=True)
class TopologyConfig:
    """
    Tag conventions and seed policy.

    membership_tag
    Literal role every Cassandra host carries.

    ring_tag_prefix
    Prefix of the ring qualified role. cassandra_myring names ring myring.

    seeds_per_datacenter
    How many seeds each datacenter contributes.

    domain_suffix
    Appended to hostnames to build the fully qualified domain name.
    Empty means the hostname is used as is.
    """

    membership_tag: str = "cassandra"
    ring_tag_prefix: str = "cassandra_"
    seeds_per_datacenter: int = 2
    domain_suffix: str = ""

    def __post_init__(self) -> None:
        if not self.membership_tag:
            raise ConfigurationError("membership_tag must not be empty")
        if not self.ring_tag_prefix:
            raise ConfigurationError("ring_tag_prefix must not be empty")
        if self.ring_tag_prefix == self.membership_tag:
            raise ConfigurationError("ring_tag_prefix must differ from membership_tag")
        if isinstance(self.seeds_per_datacenter, bool) or not isinstance(self.seeds_per_datacenter, int):
            raise ConfigurationError("seeds_per_datacenter must be an integer")
        if self.seeds_per_datacenter < 1:
            raise ConfigurationError("seeds_per_datacenter must be positive")


@dataclass(frozen=True)
class InventoryConfig:
    """
    Where the inventory manifest comes from.

    url
    HTTP endpoint returning the manifest. Takes precedence over path.

    path
    Local JSON file with the same shape, useful for dev and tests.

    timeout_seconds
    Upper bound for the HTTP fetch.
    """

    url: str | None = None
    path: Path | None = None
    timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be positive")


@dataclass(frozen=True)
class StoreConfig:
    """
    SimpleDB settings for the writable instance store.

    domain_prefix
    Each ring lives in its own domain named prefix plus ring name.

    region_name
    AWS region passed to boto3. None defers to the boto3 default chain.
    """

    domain_prefix: str = "cassandra_"
    region_name: str | None = None


@dataclass(frozen=True)
class AppConfig:
    """Everything the CLI and service need, grouped."""

    topology: TopologyConfig = field(default_factory=TopologyConfig)
    inventory: InventoryConfig = field(default_factory=InventoryConfig)
    store: StoreConfig = field(default_factory=StoreConfig)


def _env(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(ENV_PREFIX + name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from exc


def load_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """
    Build AppConfig from environment variables.

    Unset variables keep their defaults. Malformed values raise ConfigurationError.
    """
    env = os.environ if environ is None else environ
    defaults_topology = TopologyConfig()
    defaults_inventory = InventoryConfig()
    defaults_store = StoreConfig()

    seeds_raw = _env(env, "SEEDS_PER_DATACENTER")
    timeout_raw = _env(env, "INVENTORY_TIMEOUT")
    path_raw = _env(env, "INVENTORY_FILE")

    topology = TopologyConfig(
        membership_tag=_env(env, "MEMBERSHIP_TAG") or defaults_topology.membership_tag,
        ring_tag_prefix=_env(env, "RING_TAG_PREFIX") or defaults_topology.ring_tag_prefix,
        seeds_per_datacenter=(
            _parse_int("SEEDS_PER_DATACENTER", seeds_raw)
            if seeds_raw is not None
            else defaults_topology.seeds_per_datacenter
        ),
        domain_suffix=_env(env, "DOMAIN_SUFFIX") or defaults_topology.domain_suffix,
    )

    inventory = InventoryConfig(
        url=_env(env, "INVENTORY_URL"),
        path=Path(path_raw) if path_raw else None,
        timeout_seconds=(
            _parse_float("INVENTORY_TIMEOUT", timeout_raw)
            if timeout_raw is not None
            else defaults_inventory.timeout_seconds
        ),
    )

    store = StoreConfig(
        domain_prefix=_env(env, "SDB_DOMAIN_PREFIX") or defaults_store.domain_prefix,
        region_name=_env(env, "SDB_REGION"),
    )

    return AppConfig(topology=topology, inventory=inventory, store=store)
