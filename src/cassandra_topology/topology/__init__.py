"""
Topology package.

Tag rules, zone conventions, ring resolution and seed selection.
"""

from cassandra_topology.topology.resolver import Topology, TopologyResolver
from cassandra_topology.topology.seeds import SeedSelector

__all__ = ["SeedSelector", "Topology", "TopologyResolver"]
