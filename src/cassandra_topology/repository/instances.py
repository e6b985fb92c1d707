"""
Instance repositories.

Used by rings whose membership is owned (written) directly rather than
discovered from the inventory. Each ring is stored separately.

Two implementations share one contract:

SimpleDbInstanceRepository
  AWS SimpleDB through boto3. One domain per ring, one item per instance.

InMemoryInstanceRepository
  Dict backed. Used by tests and local runs.

Consistency
There is no compare and swap and no versioning. The last writer wins, and
SimpleDB reads are eventually consistent unless consistent_read is enabled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError, NoRegionError

from cassandra_topology.config import StoreConfig
from cassandra_topology.core.errors import BackingStoreUnavailable, ConfigurationError
from cassandra_topology.core.types import ClusterInstance, InstanceId

logger = structlog.get_logger(__name__)

ID_KEY = "id"
DATACENTER_KEY = "datacenter"
RACK_KEY = "rack"
HOSTNAME_KEY = "hostname"
PUBLIC_IP_ADDRESS_KEY = "publicIpAddress"
FULLY_QUALIFIED_DOMAIN_NAME_KEY = "fullyQualifiedDomainName"

# attribute key -> (ClusterInstance field, replace on write)
ATTRIBUTE_SCHEMA: dict[str, tuple[str, bool]] = {
    ID_KEY: ("id", False),
    DATACENTER_KEY: ("datacenter", True),
    RACK_KEY: ("rack", True),
    HOSTNAME_KEY: ("hostname", True),
    PUBLIC_IP_ADDRESS_KEY: ("public_ip_address", True),
    FULLY_QUALIFIED_DOMAIN_NAME_KEY: ("fully_qualified_domain_name", True),
}

NO_SUCH_DOMAIN = "NoSuchDomain"


class InstanceRepository(Protocol):
    """Per ring CRUD for ClusterInstance values."""

    def find_all(self, ring: str) -> frozenset[ClusterInstance]:
        """All instances of a ring. Pagination is handled internally."""

    def find_by_id(self, ring: str, instance_id: InstanceId) -> ClusterInstance | None:
        """One instance, or None."""

    def save(self, ring: str, instance: ClusterInstance) -> None:
        """Insert or replace the instance with the same id."""

    def delete(self, ring: str, instance: ClusterInstance) -> None:
        """Remove the instance."""


def _parse_id(raw: str) -> InstanceId:
    try:
        return int(raw)
    except ValueError:
        logger.warning("Non numeric instance id in store", instance_id=raw)
        return raw


def instance_from_attributes(attributes: list[dict[str, str]]) -> ClusterInstance:
    """
    Convert SimpleDB attributes into a ClusterInstance.

    Unknown keys are ignored. Missing keys keep their empty defaults.
    """
    values: dict[str, Any] = {}
    for attr in attributes:
        name = attr.get("Name")
        if name not in ATTRIBUTE_SCHEMA:
            continue
        field_name, _ = ATTRIBUTE_SCHEMA[name]
        value = attr.get("Value", "")
        values[field_name] = _parse_id(value) if name == ID_KEY else value

    if "id" not in values:
        raise BackingStoreUnavailable("stored instance has no id attribute")
    return ClusterInstance(**values)


def save_attributes(instance: ClusterInstance) -> list[dict[str, Any]]:
    """Every field as a replaceable attribute, except id which is written once."""
    return [
        {"Name": key, "Value": str(getattr(instance, field_name)), "Replace": replace}
        for key, (field_name, replace) in ATTRIBUTE_SCHEMA.items()
    ]


def delete_attributes(instance: ClusterInstance) -> list[dict[str, str]]:
    return [
        {"Name": key, "Value": str(getattr(instance, field_name))}
        for key, (field_name, _) in ATTRIBUTE_SCHEMA.items()
    ]


def quote_name(name: str) -> str:
    """Quote a SimpleDB domain or attribute name."""
    return "`" + name.replace("`", "``") + "`"


def quote_value(value: str) -> str:
    """Quote a SimpleDB select value."""
    return "'" + value.replace("'", "''") + "'"


@dataclass(frozen=True)
class RingDomainFactory:
    """Maps a ring name to its SimpleDB domain."""

    prefix: str = "cassandra_"

    def domain_for(self, ring: str) -> str:
        return f"{self.prefix}{ring}"


class SimpleDbInstanceRepository(InstanceRepository):
    """
    SimpleDB implementation of InstanceRepository.

    client is a boto3 sdb client. Any botocore failure is raised as
    BackingStoreUnavailable with the original error chained.
    """

    def __init__(
        self,
        client: Any,
        domains: RingDomainFactory | None = None,
        consistent_read: bool = False,
    ) -> None:
        self._client = client
        self._domains = domains or RingDomainFactory()
        self._consistent_read = consistent_read

    @classmethod
    def from_config(cls, config: StoreConfig, consistent_read: bool = False) -> SimpleDbInstanceRepository:
        """Build a repository with a boto3 client. Credentials come from the boto3 chain."""
        try:
            client = boto3.client("sdb", region_name=config.region_name)
        except NoRegionError as exc:
            raise ConfigurationError("no AWS region configured for the SimpleDB store") from exc
        return cls(
            client=client,
            domains=RingDomainFactory(prefix=config.domain_prefix),
            consistent_read=consistent_read,
        )

    def _domain(self, ring: str) -> str:
        return self._domains.domain_for(ring)

    def _select(self, expression: str, next_token: str | None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "SelectExpression": expression,
            "ConsistentRead": self._consistent_read,
        }
        if next_token:
            kwargs["NextToken"] = next_token
        return self._client.select(**kwargs)

    def find_all(self, ring: str) -> frozenset[ClusterInstance]:
        expression = f"select * from {quote_name(self._domain(ring))}"
        instances: list[ClusterInstance] = []
        next_token: str | None = None
        pages = 0

        try:
            while True:
                result = self._select(expression, next_token)
                pages += 1
                for item in result.get("Items", []):
                    instances.append(instance_from_attributes(item.get("Attributes", [])))
                next_token = result.get("NextToken")
                if not next_token:
                    break
        except ClientError as exc:
            if _error_code(exc) == NO_SUCH_DOMAIN:
                logger.debug("Ring domain does not exist", ring=ring)
                return frozenset()
            raise BackingStoreUnavailable(f"select on ring {ring!r} failed: {exc}") from exc
        except BotoCoreError as exc:
            raise BackingStoreUnavailable(f"select on ring {ring!r} failed: {exc}") from exc

        logger.debug("Loaded instances", ring=ring, count=len(instances), pages=pages)
        return frozenset(instances)

    def find_by_id(self, ring: str, instance_id: InstanceId) -> ClusterInstance | None:
        expression = (
            f"select * from {quote_name(self._domain(ring))} "
            f"where {quote_name(ID_KEY)} = {quote_value(str(instance_id))} limit 1"
        )
        try:
            result = self._select(expression, None)
        except ClientError as exc:
            if _error_code(exc) == NO_SUCH_DOMAIN:
                return None
            raise BackingStoreUnavailable(f"select on ring {ring!r} failed: {exc}") from exc
        except BotoCoreError as exc:
            raise BackingStoreUnavailable(f"select on ring {ring!r} failed: {exc}") from exc

        items = result.get("Items", [])
        if not items:
            return None
        return instance_from_attributes(items[0].get("Attributes", []))

    def ensure_ring(self, ring: str) -> None:
        """Create the ring domain. SimpleDB treats this as idempotent."""
        try:
            self._client.create_domain(DomainName=self._domain(ring))
        except (BotoCoreError, ClientError) as exc:
            raise BackingStoreUnavailable(f"create domain for ring {ring!r} failed: {exc}") from exc

    def save(self, ring: str, instance: ClusterInstance) -> None:
        try:
            self._client.put_attributes(
                DomainName=self._domain(ring),
                ItemName=str(instance.id),
                Attributes=save_attributes(instance),
            )
        except (BotoCoreError, ClientError) as exc:
            raise BackingStoreUnavailable(f"save of {instance.id!r} in ring {ring!r} failed: {exc}") from exc
        logger.info("Saved instance", ring=ring, instance_id=str(instance.id))

    def delete(self, ring: str, instance: ClusterInstance) -> None:
        try:
            self._client.delete_attributes(
                DomainName=self._domain(ring),
                ItemName=str(instance.id),
                Attributes=delete_attributes(instance),
            )
        except (BotoCoreError, ClientError) as exc:
            raise BackingStoreUnavailable(f"delete of {instance.id!r} in ring {ring!r} failed: {exc}") from exc
        logger.info("Deleted instance", ring=ring, instance_id=str(instance.id))


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


@dataclass
class InMemoryInstanceRepository(InstanceRepository):
    """
    In memory instance store.

    Behaves like the SimpleDB store without pagination or eventual consistency.
    Tokens are kept, since nothing is serialized. Ids are keyed by their
    string form, matching the itemName lookup of the SimpleDB store.
    """

    rings: dict[str, dict[str, ClusterInstance]] = field(default_factory=dict)

    def find_all(self, ring: str) -> frozenset[ClusterInstance]:
        return frozenset(self.rings.get(ring, {}).values())

    def find_by_id(self, ring: str, instance_id: InstanceId) -> ClusterInstance | None:
        return self.rings.get(ring, {}).get(str(instance_id))

    def save(self, ring: str, instance: ClusterInstance) -> None:
        self.rings.setdefault(ring, {})[str(instance.id)] = instance

    def delete(self, ring: str, instance: ClusterInstance) -> None:
        self.rings.get(ring, {}).pop(str(instance.id), None)
