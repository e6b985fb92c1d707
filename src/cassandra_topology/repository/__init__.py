"""
Repository package.

rings is the read only view over discovered topology.
instances is the writable per ring store for owned topology.
"""
