"""
Inventory package.

Sources fetch the raw manifest, manifest turns it into HostRecord values.
"""
