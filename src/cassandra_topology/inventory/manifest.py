"""
Manifest parsing.

Converts the decoded inventory document into HostRecord values.

The manifest is controlled by another team and is loosely typed, so parsing
is tolerant: anything that is not shaped like a host entry is skipped rather
than failing the whole fetch. Missing string fields become empty strings.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from cassandra_topology.core.types import HostRecord

logger = structlog.get_logger(__name__)

ROLES_KEY = "roles"
ZONE_KEY = "zone"
PUBLIC_IP_KEY = "public ip"
PRIVATE_IP_KEY = "private ip"
ID_KEY = "id"


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _parse_roles(raw: Any) -> tuple[str, ...]:
    """Keep string tags in manifest order. Anything else is ignored."""
    if not isinstance(raw, list):
        return ()
    return tuple(tag for tag in raw if isinstance(tag, str))


def host_from_dict(hostname: str, obj: Mapping[str, Any], region: str = "") -> HostRecord:
    """Convert a single host entry into a HostRecord."""
    return HostRecord(
        host_id=_as_str(obj.get(ID_KEY)),
        hostname=hostname,
        roles=_parse_roles(obj.get(ROLES_KEY)),
        zone=_as_str(obj.get(ZONE_KEY)),
        public_ip=_as_str(obj.get(PUBLIC_IP_KEY)),
        private_ip=_as_str(obj.get(PRIVATE_IP_KEY)),
        region=region,
    )


def hosts_from_manifest(manifest: Mapping[str, Any]) -> list[HostRecord]:
    """
    Flatten region to hostname to record into a list of HostRecord.

    Empty regions contribute nothing. Region values and host entries that are
    not objects are skipped.
    """
    hosts: list[HostRecord] = []
    skipped = 0

    for region, region_hosts in manifest.items():
        if not isinstance(region_hosts, dict):
            skipped += 1
            continue
        for hostname, obj in region_hosts.items():
            if not isinstance(obj, dict):
                skipped += 1
                continue
            hosts.append(host_from_dict(str(hostname), obj, region=str(region)))

    if skipped:
        logger.warning("Skipped malformed inventory entries", skipped=skipped)
    return hosts
