"""
Command line entry point.

Examples
  cassandra-topology --inventory-url http://inventory/hosts.json rings
  cassandra-topology --inventory-file hosts.json ring myring
  cassandra-topology seeds myring --format csv
  cassandra-topology --sdb-region us-east-1 instances myring

Flags override CASSANDRA_TOPOLOGY_* environment variables.

Exit codes
0 success
1 ring not found
2 inventory or instance store unavailable, or invalid configuration
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path
from typing import Any, Sequence

import structlog

from cassandra_topology.config import AppConfig, load_config
from cassandra_topology.core.errors import BackingStoreUnavailable, ConfigurationError
from cassandra_topology.core.serialization import instance_to_json, ring_to_json
from cassandra_topology.core.types import instance_sort_key
from cassandra_topology.logging_setup import configure_logging
from cassandra_topology.service import build_instance_repository, build_ring_repository, build_seed_service
from cassandra_topology.topology.zones import ZONE_SPLITTERS

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_UNAVAILABLE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cassandra-topology",
        description="Resolve Cassandra rings and seeds from the host inventory",
    )
    parser.add_argument("--inventory-url", help="HTTP endpoint serving the inventory manifest")
    parser.add_argument("--inventory-file", type=Path, help="local manifest file")
    parser.add_argument("--timeout", type=float, help="fetch timeout in seconds")
    parser.add_argument("--seeds-per-dc", type=int, help="seeds selected per datacenter")
    parser.add_argument("--sdb-region", help="AWS region of the SimpleDB instance store")
    parser.add_argument("--sdb-domain-prefix", help="SimpleDB domain prefix, one domain per ring")
    parser.add_argument(
        "--zone-convention",
        choices=sorted(ZONE_SPLITTERS),
        default="region",
        help="how zones map to datacenter and rack",
    )
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--json-logs", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("rings", help="list all rings with their members")

    ring = sub.add_parser("ring", help="show one ring")
    ring.add_argument("name")

    seeds = sub.add_parser("seeds", help="seed addresses for a ring")
    seeds.add_argument("name")
    seeds.add_argument("--format", choices=["json", "csv"], default="json")

    instances = sub.add_parser("instances", help="instances recorded in the SimpleDB store for a ring")
    instances.add_argument("name")
    instances.add_argument("--consistent-read", action="store_true")

    return parser


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    inventory = config.inventory
    if args.inventory_url:
        inventory = dataclasses.replace(inventory, url=args.inventory_url, path=None)
    elif args.inventory_file:
        inventory = dataclasses.replace(inventory, url=None, path=args.inventory_file)
    if args.timeout is not None:
        inventory = dataclasses.replace(inventory, timeout_seconds=args.timeout)

    topology = config.topology
    if args.seeds_per_dc is not None:
        topology = dataclasses.replace(topology, seeds_per_datacenter=args.seeds_per_dc)

    store = config.store
    if args.sdb_region:
        store = dataclasses.replace(store, region_name=args.sdb_region)
    if args.sdb_domain_prefix:
        store = dataclasses.replace(store, domain_prefix=args.sdb_domain_prefix)

    return dataclasses.replace(config, inventory=inventory, topology=topology, store=store)


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, sort_keys=True) + "\n")


def run(args: argparse.Namespace) -> int:
    config = _apply_overrides(load_config(), args)
    splitter = ZONE_SPLITTERS[args.zone_convention]

    if args.command == "instances":
        store = build_instance_repository(config, consistent_read=args.consistent_read)
        stored = sorted(store.find_all(args.name), key=instance_sort_key)
        _emit({"ring": args.name, "instances": [instance_to_json(i) for i in stored]})
        return EXIT_OK

    if args.command == "seeds":
        seeds = build_seed_service(config, zone_splitter=splitter).ordered_seeds_for(args.name)
        if seeds is None:
            sys.stderr.write(f"ring {args.name!r} not found\n")
            return EXIT_NOT_FOUND
        if args.format == "csv":
            sys.stdout.write(",".join(seeds) + "\n")
        else:
            _emit({"ring": args.name, "seeds": seeds})
        return EXIT_OK

    rings = build_ring_repository(config, zone_splitter=splitter)

    if args.command == "rings":
        all_rings = sorted(rings.list_rings(), key=lambda r: r.name)
        _emit([ring_to_json(r) for r in all_rings])
        return EXIT_OK

    ring = rings.find_ring(args.name)
    if ring is None:
        sys.stderr.write(f"ring {args.name!r} not found\n")
        return EXIT_NOT_FOUND
    _emit(ring_to_json(ring))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json_output=args.json_logs)

    try:
        return run(args)
    except ConfigurationError as exc:
        sys.stderr.write(f"configuration error: {exc}\n")
        return EXIT_UNAVAILABLE
    except BackingStoreUnavailable as exc:
        logger.error("Backing store unavailable", command=args.command, error=str(exc))
        sys.stderr.write(f"backing store unavailable: {exc}\n")
        return EXIT_UNAVAILABLE


if __name__ == "__main__":
    sys.exit(main())
