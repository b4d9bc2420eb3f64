from .enums import (
    Category,
    SinkMode,
    FailureStage,
)
from .records import (
    AttractionRecord,
    Title,
    Downloadable,
    Failure,
    FailureList,
    SinkResult,
    SyncResult,
)
from .submission import (
    RawAttraction,
    parse_submission,
    validate_attraction,
)

__all__ = [
    "Category",
    "SinkMode",
    "FailureStage",
    "AttractionRecord",
    "Title",
    "Downloadable",
    "Failure",
    "FailureList",
    "SinkResult",
    "SyncResult",
    "RawAttraction",
    "parse_submission",
    "validate_attraction",
]
