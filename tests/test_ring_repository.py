from __future__ import annotations

from typing import Any

import pytest

from cassandra_topology.core.errors import BackingStoreUnavailable, UnsupportedOperation
from cassandra_topology.core.types import Ring
from cassandra_topology.repository.rings import DiscoveryRingRepository


class CountingSource:
    def __init__(self, manifest: dict[str, Any]) -> None:
        self.manifest = manifest
        self.fetches = 0

    def fetch(self) -> dict[str, Any]:
        self.fetches += 1
        return self.manifest


class FailingSource:
    def fetch(self) -> dict[str, Any]:
        raise BackingStoreUnavailable("inventory down")


def test_list_rings(manifest):
    source = CountingSource(manifest)
    repo = DiscoveryRingRepository(source)

    rings = {r.name: r for r in repo.list_rings()}

    assert set(rings) == {"myring", "stats"}
    assert {i.hostname for i in rings["myring"].instances} == {"cass01we2", "cass01ea1", "cass02ea1"}
    assert source.fetches == 1


def test_find_ring(manifest):
    source = CountingSource(manifest)
    repo = DiscoveryRingRepository(source)

    ring = repo.find_ring("stats")

    assert ring is not None
    assert ring.name == "stats"
    assert [i.id for i in ring.instances] == ["ghi3"]
    assert source.fetches == 1


def test_find_unknown_ring_returns_none(manifest):
    assert DiscoveryRingRepository(CountingSource(manifest)).find_ring("nope") is None


def test_every_call_fetches_fresh(manifest):
    source = CountingSource(manifest)
    repo = DiscoveryRingRepository(source)

    assert repo.find_ring("stats") is not None
    source.manifest = {}
    assert repo.find_ring("stats") is None
    assert repo.list_rings() == frozenset()
    assert source.fetches == 3


def test_fetch_failure_propagates():
    repo = DiscoveryRingRepository(FailingSource())

    with pytest.raises(BackingStoreUnavailable):
        repo.list_rings()
    with pytest.raises(BackingStoreUnavailable):
        repo.find_ring("myring")


def test_writes_are_rejected_without_fetching(manifest):
    source = CountingSource(manifest)
    repo = DiscoveryRingRepository(source)
    ring = Ring(name="myring")

    with pytest.raises(UnsupportedOperation):
        repo.save(ring)
    with pytest.raises(UnsupportedOperation):
        repo.delete(ring)

    assert source.fetches == 0
    assert {r.name for r in repo.list_rings()} == {"myring", "stats"}
