"""
Zone conventions.

An availability zone string like us-east-1a encodes both the datacenter and
the rack. The split is a fixed external convention, so it is a plain function
the resolver receives rather than logic buried inside it.

Two conventions are provided.

region_zone_split (default)
  us-east-1a -> datacenter us-east-1, rack a
  The region is the datacenter, the trailing zone letter is the rack.

ec2_snitch_split
  us-east-1a -> datacenter us-east, rack 1a
  Matches the naming used by Cassandra's Ec2Snitch.

Zones that do not follow the region plus letter shape map to the whole zone
as datacenter and an empty rack, so every host still lands somewhere.
"""

from __future__ import annotations

import re
from typing import Callable

ZoneSplitter = Callable[[str], tuple[str, str]]

_ZONE_RE = re.compile(r"^(?P<region>(?P<area>[a-z]+(?:-[a-z]+)+)-(?P<number>\d+))(?P<letter>[a-z])$")


def region_zone_split(zone: str) -> tuple[str, str]:
    """Split us-east-1a into (us-east-1, a)."""
    zone = zone.strip()
    m = _ZONE_RE.match(zone)
    if not m:
        return zone, ""
    return m.group("region"), m.group("letter")


def ec2_snitch_split(zone: str) -> tuple[str, str]:
    """Split us-east-1a into (us-east, 1a)."""
    zone = zone.strip()
    m = _ZONE_RE.match(zone)
    if not m:
        return zone, ""
    return m.group("area"), m.group("number") + m.group("letter")


ZONE_SPLITTERS: dict[str, ZoneSplitter] = {
    "region": region_zone_split,
    "ec2-snitch": ec2_snitch_split,
}
