"""
Seed service.

Composition of ring lookup and seed selection. This is what an API layer or
a node bootstrap script calls.

The service is stateless. Each call performs exactly one inventory fetch.
"""

from __future__ import annotations

import structlog

from cassandra_topology.config import AppConfig
from cassandra_topology.core.errors import ConfigurationError
from cassandra_topology.inventory.source import (
    HttpInventorySource,
    InventorySource,
    StaticInventorySource,
    UrllibHttpClient,
)
from cassandra_topology.repository.instances import SimpleDbInstanceRepository
from cassandra_topology.repository.rings import DiscoveryRingRepository, RingRepository
from cassandra_topology.topology.resolver import TopologyResolver
from cassandra_topology.topology.seeds import SeedSelector
from cassandra_topology.topology.zones import ZoneSplitter, region_zone_split

logger = structlog.get_logger(__name__)


class SeedService:
    """Seeds for a ring by name."""

    def __init__(self, rings: RingRepository, selector: SeedSelector) -> None:
        self._rings = rings
        self._selector = selector

    def seeds_for(self, ring_name: str) -> frozenset[str] | None:
        """Seed set for the ring, or None when the ring is unknown."""
        seeds = self.ordered_seeds_for(ring_name)
        if seeds is None:
            return None
        return frozenset(seeds)

    def ordered_seeds_for(self, ring_name: str) -> list[str] | None:
        """Seed addresses in stable order, or None when the ring is unknown."""
        ring = self._rings.find_ring(ring_name)
        if ring is None:
            logger.info("Unknown ring", ring=ring_name)
            return None
        seeds = self._selector.ordered_seeds(ring)
        logger.info("Selected seeds", ring=ring_name, members=len(ring.instances), seeds=len(seeds))
        return seeds


def build_inventory_source(config: AppConfig) -> InventorySource:
    """Pick the HTTP source when a url is configured, else the file source."""
    inv = config.inventory
    if inv.url:
        return HttpInventorySource(url=inv.url, http=UrllibHttpClient(timeout_seconds=inv.timeout_seconds))
    if inv.path is not None:
        return StaticInventorySource(path=inv.path)
    raise ConfigurationError("either an inventory url or an inventory file is required")


def build_ring_repository(
    config: AppConfig,
    source: InventorySource | None = None,
    zone_splitter: ZoneSplitter = region_zone_split,
) -> DiscoveryRingRepository:
    resolver = TopologyResolver(config.topology, zone_splitter=zone_splitter)
    return DiscoveryRingRepository(source or build_inventory_source(config), resolver)


def build_seed_service(
    config: AppConfig,
    source: InventorySource | None = None,
    zone_splitter: ZoneSplitter = region_zone_split,
) -> SeedService:
    return SeedService(
        rings=build_ring_repository(config, source, zone_splitter),
        selector=SeedSelector(config.topology.seeds_per_datacenter),
    )


def build_instance_repository(config: AppConfig, consistent_read: bool = False) -> SimpleDbInstanceRepository:
    """SimpleDB backed instance store using the configured region and domain prefix."""
    logger.debug(
        "Building instance repository",
        region=config.store.region_name,
        domain_prefix=config.store.domain_prefix,
    )
    return SimpleDbInstanceRepository.from_config(config.store, consistent_read=consistent_read)
