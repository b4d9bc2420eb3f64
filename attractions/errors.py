"""
Exception hierarchy for the attraction sync service.

Storage faults abort the request or sync run that hit them. Network,
decode and transform faults are local to one record: the sync pipeline
catches them and records the id in the run's failure list.
"""

from typing import Any, Dict, Optional


class AttractionError(Exception):
    """Base exception for the service."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AttractionError):
    """Submitted attraction was rejected by the validation gate."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


# === Storage ===


class StorageFault(AttractionError):
    """Cache or external store unreachable, or a constraint was violated."""


class CacheWriteError(StorageFault):
    """Writing an attraction (and its title) to the cache failed."""


class CacheReadError(StorageFault):
    """Reading from the cache failed."""


class EmptyCacheError(StorageFault):
    """The cache holds no attraction rows to synchronize."""

    def __init__(self, message: str = "Cache is empty"):
        super().__init__(message)


class ExternalStoreError(StorageFault):
    """Opening or writing to the external store failed."""


# === Per-record pipeline faults ===


class NetworkFault(AttractionError):
    """Image fetch or remote delivery failed at the transport level."""


class DecodeFault(AttractionError):
    """Fetched bytes are not a decodable image."""


class TransformFault(AttractionError):
    """Resize or crop preconditions were not met."""
