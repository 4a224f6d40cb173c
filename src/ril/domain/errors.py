"""Exception hierarchy for ril.

Only catalog, storage and sandbox failures are modelled; malformed
progress data, unknown ids and unknown filter values are represented as data instead.
"""


class RilError(Exception):
    """Base class for all ril errors."""


class StorageError(RilError):
    """A durable-storage write could not be completed."""


class StorageQuotaExceededError(StorageError):
    """A write would push the store past its configured quota."""


class CatalogError(RilError):
    """The challenge collection could not be loaded or is invalid."""


class SandboxError(RilError):
    """Challenge code could not be handed to the sandbox."""
