from __future__ import annotations

from dataclasses import asdict
from typing import Any

from cassandra_topology.core.types import ClusterInstance, Ring


def _normalize(obj: Any) -> Any:
    if hasattr(obj, "value"):
        return obj.value
    if isinstance(obj, dict):
        return {str(k): _normalize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_normalize(v) for v in obj]
    if isinstance(obj, int) and obj.bit_length() > 53:
        # tokens exceed what JSON consumers can hold as numbers
        return str(obj)
    return obj


def instance_to_json(instance: ClusterInstance) -> dict[str, Any]:
    """
    Convert a ClusterInstance into a JSON safe dict.

    This is intended for transport only.
    """
    normalized = _normalize(asdict(instance))
    if not isinstance(normalized, dict):
        raise TypeError("expected dict after normalization")
    return normalized


def ring_to_json(ring: Ring) -> dict[str, Any]:
    """
    Ring transport shape.

    Instances are emitted in deterministic order so two nodes print identical output.
    """
    return {
        "name": ring.name,
        "instances": [instance_to_json(inst) for inst in ring.sorted_instances()],
    }
