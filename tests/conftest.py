from __future__ import annotations

from typing import Any

import pytest

MANIFEST: dict[str, Any] = {
    # empty region
    "ap-southeast-1": {},
    # region without cassandra hosts
    "ap-northeast-1": {
        "web01ap1": {
            "private ip": "10.0.1.1",
            "roles": ["web"],
            "public ip": "54.0.1.1",
            "id": "abc1",
            "zone": "ap-northeast-1a",
        }
    },
    # region with a single cassandra host
    "us-west-2": {
        "cass01we2": {
            "private ip": "10.1.1.1",
            "roles": ["cassandra", "cassandra_myring"],
            "public ip": "54.1.1.1",
            "id": "def2",
            "zone": "us-west-2a",
        }
    },
    # region mixing two rings
    "us-east-1": {
        "stats01ea1": {
            "private ip": "10.2.1.1",
            "roles": ["cassandra", "cassandra_stats"],
            "public ip": "54.2.1.1",
            "id": "ghi3",
            "zone": "us-east-1c",
        },
        "cass01ea1": {
            "private ip": "10.2.1.2",
            "roles": ["cassandra", "cassandra_myring"],
            "public ip": "54.2.1.2",
            "id": "jkl4",
            "zone": "us-east-1a",
        },
        "cass02ea1": {
            "private ip": "10.2.1.3",
            "roles": ["cassandra", "cassandra_myring"],
            "public ip": "54.2.1.3",
            "id": "mno5",
            "zone": "us-east-1b",
        },
    },
}


@pytest.fixture
def manifest() -> dict[str, Any]:
    return MANIFEST
