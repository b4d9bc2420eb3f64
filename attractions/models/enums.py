"""
Enums for type-safe string constants in the attraction sync service.
"""

from enum import Enum


class Category(str, Enum):
    """Accepted attraction categories."""
    NATURE = "nature"
    HERITAGE = "heritage"
    MUSEUMS = "museums"


class SinkMode(str, Enum):
    """Where a sync run delivers its images."""
    LOCAL = "local"
    REMOTE = "remote"


class FailureStage(str, Enum):
    """Pipeline stage at which a record dropped out of a sync run."""
    NO_URL = "no_url"
    FETCH = "fetch"
    DECODE = "decode"
    TRANSFORM = "transform"
    DELIVER = "deliver"
