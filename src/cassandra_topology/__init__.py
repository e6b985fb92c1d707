"""
cassandra_topology

This package resolves Cassandra ring membership from a dynamic host inventory
and computes the seed hosts each member needs to join gossip.

We keep modules small and well separated:
core contains shared data structures and errors
inventory contains manifest sources and parsing
topology contains tag rules, zone conventions, resolution and seed selection
repository contains the read only ring view and the writable instance store
service and cli compose the pieces for callers
"""

__version__ = "0.1.0"
