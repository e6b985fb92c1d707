"""
Error taxonomy.

We separate error types so callers can react correctly.
Example:
BackingStoreUnavailable means the inventory or store could not be read at all.
UnsupportedOperation means a write was sent to a read only view.
ConfigurationError means a value passed at startup is unusable.

Not found is never an error. Lookups return None instead.
"""


class TopologyError(Exception):
    """Base class for all topology exceptions."""


class BackingStoreUnavailable(TopologyError):
    """
    Raised when the inventory or instance store cannot be read or written.

    Network failures, timeouts, interruption and malformed payloads all map here.
    Callers cannot tell retryable causes from fatal ones, the original exception
    is kept as __cause__ for diagnostics.
    """


class UnsupportedOperation(TopologyError, NotImplementedError):
    """Raised when a write is attempted against a discovery backed repository."""


class ConfigurationError(TopologyError, ValueError):
    """Raised when configuration values are missing or malformed."""
