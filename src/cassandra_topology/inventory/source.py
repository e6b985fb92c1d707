"""
Inventory sources.

Goal
Fetch the raw host manifest so topology resolution is source agnostic.

Manifest shape
{
  "us-east-1": {
    "cass01ea1": {
      "roles": ["cassandra", "cassandra_myring"],
      "zone": "us-east-1a",
      "public ip": "54.2.1.2",
      "private ip": "10.2.1.2",
      "id": "jkl4"
    }
  }
}

Every failure to obtain or decode the document surfaces as
BackingStoreUnavailable. A reachable but empty manifest is a valid result.
"""

from __future__ import annotations

import http.client
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol
from urllib.error import URLError
from urllib.request import Request, urlopen

import structlog

from cassandra_topology.core.errors import BackingStoreUnavailable

logger = structlog.get_logger(__name__)

Manifest = dict[str, Any]

# OSError covers URLError, HTTPError, timeouts and interruption.
# ValueError covers JSONDecodeError and UnicodeDecodeError.
# HTTPException covers truncated bodies and malformed status lines.
TRANSPORT_ERRORS = (OSError, ValueError, http.client.HTTPException)


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, TimeoutError):
        return True
    return isinstance(exc, URLError) and isinstance(exc.reason, TimeoutError)


def unavailable(url: str, exc: BaseException) -> BackingStoreUnavailable:
    """Describe a transport failure as BackingStoreUnavailable."""
    if _is_timeout(exc):
        return BackingStoreUnavailable(f"inventory fetch from {url} timed out")
    if isinstance(exc, URLError):
        return BackingStoreUnavailable(f"inventory fetch from {url} failed: {exc.reason}")
    return BackingStoreUnavailable(f"inventory fetch from {url} failed: {type(exc).__name__}: {exc}")


class InventorySource(Protocol):
    """
    Inventory source interface.

    fetch returns the decoded manifest, region to hostname to record.
    """

    def fetch(self) -> Manifest:
        """Fetch the current manifest."""


class HttpClient(Protocol):
    """
    Http client interface for testability.

    get_json returns the decoded body. Implementations may raise
    BackingStoreUnavailable themselves or let transport errors escape.
    """

    def get_json(self, url: str, headers: dict[str, str]) -> Any:
        """Return parsed json for the given url."""


@dataclass
class UrllibHttpClient(HttpClient):
    """
    Default http client using urllib.

    One blocking GET bounded by timeout_seconds. The body is read in full
    before decoding, so a connection dropped mid body is a failure rather
    than a short document. Every failure is raised as BackingStoreUnavailable.
    """

    timeout_seconds: float = 10.0

    def get_json(self, url: str, headers: dict[str, str]) -> Any:
        req = Request(url, headers=headers, method="GET")
        try:
            with urlopen(req, timeout=self.timeout_seconds) as resp:
                body = resp.read().decode("utf-8")
            return json.loads(body)
        except TRANSPORT_ERRORS as exc:
            raise unavailable(url, exc) from exc


def _require_mapping(data: Any, origin: str) -> Manifest:
    if not isinstance(data, dict):
        raise BackingStoreUnavailable(
            f"inventory from {origin} is not a JSON object (got {type(data).__name__})"
        )
    return data


@dataclass(frozen=True)
class HttpInventorySource(InventorySource):
    """
    Load the manifest from an HTTP endpoint.

    The client owns the timeout. Transport errors that a custom client lets
    escape are wrapped the same way UrllibHttpClient wraps its own.
    """

    url: str
    http: HttpClient = field(default_factory=UrllibHttpClient)

    def fetch(self) -> Manifest:
        headers = {"Accept": "application/json"}
        logger.debug("Fetching inventory", url=self.url)
        try:
            data = self.http.get_json(self.url, headers=headers)
        except TRANSPORT_ERRORS as exc:
            raise unavailable(self.url, exc) from exc

        manifest = _require_mapping(data, self.url)
        logger.debug("Fetched inventory", url=self.url, regions=len(manifest))
        return manifest


@dataclass(frozen=True)
class StaticInventorySource(InventorySource):
    """
    Load the manifest from a local json file.

    Same schema as the HTTP endpoint. Handy for dev, tests and air gapped hosts.
    """

    path: Path

    def fetch(self) -> Manifest:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise BackingStoreUnavailable(f"cannot read inventory file {self.path}: {exc}") from exc
        return _require_mapping(data, str(self.path))
