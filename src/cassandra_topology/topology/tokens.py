"""
Token services.

Bootstrap tokens are never computed here. An instance either carries a token
that an operator assigned, or it has none and Cassandra picks its own.
"""

from __future__ import annotations

from typing import Protocol

from cassandra_topology.core.types import ClusterInstance


class TokenService(Protocol):
    """Return the bootstrap token for an instance, or None."""

    def get_token(self, instance: ClusterInstance) -> int | None:
        """Token for instance."""


class AssignedTokenService(TokenService):
    """Returns the token attached to the instance itself."""

    def get_token(self, instance: ClusterInstance) -> int | None:
        return instance.token
