"""
Data classes for cached attractions and the sync pipeline.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from PIL import Image

from .enums import FailureStage, SinkMode


@dataclass
class AttractionRecord:
    """An accepted attraction as stored in the cache."""
    id: str
    category: str
    description: str  # JSON text: name, hours, info
    location: str     # JSON text: city, coordinates
    name: str
    image_url: Optional[str] = None
    image_copyright: Optional[str] = None


@dataclass
class Title:
    """Normalized id and display name pair used for duplicate lookup."""
    compare: str
    display: str


@dataclass
class Downloadable:
    """An image travelling through acquisition, transform and delivery."""
    id: str
    url: str
    image_bytes: Optional[bytes] = None
    decoded_image: Optional[Image.Image] = None


@dataclass
class Failure:
    """A record that dropped out of a sync run."""
    id: str
    stage: FailureStage
    reason: str = ""


@dataclass
class FailureList:
    """
    Ordered accumulator of failed record ids for one sync run.

    Each stage appends to the same list, so ids appear in the order
    they failed. Nothing here is ever retried.
    """
    items: list[Failure] = field(default_factory=list)

    def add(self, record_id: str, stage: FailureStage, reason: str = "") -> None:
        self.items.append(Failure(id=record_id, stage=stage, reason=reason))

    def merge(self, other: "FailureList") -> None:
        self.items.extend(other.items)

    @property
    def ids(self) -> list[str]:
        return [f.id for f in self.items]

    def by_stage(self, stage: FailureStage) -> list[str]:
        return [f.id for f in self.items if f.stage == stage]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Failure]:
        return iter(self.items)


@dataclass
class SinkResult:
    """Summary returned by both sink modes."""
    mode: SinkMode
    delivered: int
    failures: FailureList
    transport_error: Optional[str] = None

    @property
    def failed(self) -> int:
        return len(self.failures)


@dataclass
class SyncResult:
    """Outcome of one sync run."""
    total: int
    written: int
    sink: SinkResult
    endpoint: Optional[str] = None

    @property
    def failures(self) -> FailureList:
        return self.sink.failures

    @property
    def all_failed(self) -> bool:
        return self.total > 0 and len(self.failures) == self.total

    def status(self) -> str:
        """Human-readable summary printed by the command console."""
        failed = self.failures.ids
        summary = f"Finished with {len(failed)} failed images\n\t{failed}"
        if self.sink.mode == SinkMode.REMOTE:
            sent = f"Sent {self.sink.delivered} images to {self.endpoint}."
            if self.sink.transport_error:
                sent += f" Delivery failed: {self.sink.transport_error}"
            return f"{sent}\n{summary}"
        return summary
