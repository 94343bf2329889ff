"""Persisted and reported models for the safe-move protocol.

Every model ignores unknown fields on load so manifests written by newer
versions stay readable.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class OperationStatus(str, Enum):
    """Lifecycle status of a move operation."""

    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    FAILED = "failed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self is not OperationStatus.IN_PROGRESS


class ChunkStatus(str, Enum):
    """Progress of one chunk through copy, verify and delete."""

    PENDING = "pending"
    COPIED_NOT_VERIFIED = "copied_not_verified"
    VERIFIED_NOT_DELETED = "verified_not_deleted"
    COMPLETE = "complete"
    FAILED = "failed"


class Fingerprint(_Record):
    """Identity evidence for one source message, captured before it is copied."""

    uid: str
    message_id: str | None = None
    sender: str = ""
    date: str | None = None  # normalized UTC timestamp
    subject: str = ""


class Chunk(_Record):
    """A fixed-size slice of an operation's UIDs, processed as one unit."""

    index: int
    uids: list[str]
    fingerprints: list[Fingerprint] = []
    status: ChunkStatus = ChunkStatus.PENDING
    moved_uids: list[str] = []
    copied_at: datetime | None = None
    verified_at: datetime | None = None
    deleted_at: datetime | None = None
    failure_reason: str | None = None

    @property
    def size(self) -> int:
        return len(self.uids)


class OperationSummary(_Record):
    """Rollup of chunk states, recomputed on every chunk update."""

    chunks_complete: int = 0
    moved: int = 0
    pending: int = 0
    failed: int = 0


class OperationRecord(_Record):
    """Summary of a finished operation, as kept in the manifest history."""

    operation_id: str
    source: str
    target: str
    status: OperationStatus
    total: int
    moved: int = 0
    pending: int = 0
    failed: int = 0
    chunks_complete: int = 0
    started_at: datetime
    updated_at: datetime
    failure_reason: str | None = None


class Operation(_Record):
    """Execution record of one move request."""

    operation_id: str
    source: str
    target: str
    total: int
    status: OperationStatus = OperationStatus.IN_PROGRESS
    chunks: list[Chunk] = []
    summary: OperationSummary = Field(default_factory=OperationSummary)
    started_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    failure_reason: str | None = None

    def recompute_summary(self) -> None:
        """Derive the summary from the current state of all chunks."""
        moved = sum(c.size for c in self.chunks if c.status == ChunkStatus.COMPLETE)
        failed = sum(c.size for c in self.chunks if c.status == ChunkStatus.FAILED)
        self.summary = OperationSummary(
            chunks_complete=sum(1 for c in self.chunks if c.status == ChunkStatus.COMPLETE),
            moved=moved,
            failed=failed,
            pending=self.total - moved - failed,
        )

    def to_record(self) -> OperationRecord:
        return OperationRecord(
            operation_id=self.operation_id,
            source=self.source,
            target=self.target,
            status=self.status,
            total=self.total,
            moved=self.summary.moved,
            pending=self.summary.pending,
            failed=self.summary.failed,
            chunks_complete=self.summary.chunks_complete,
            started_at=self.started_at,
            updated_at=self.updated_at,
            failure_reason=self.failure_reason,
        )

    def detail(self) -> dict[str, Any]:
        """JSON-ready view for status reports; fingerprints are left out."""
        return self.model_dump(
            mode="json",
            exclude={"chunks": {"__all__": {"fingerprints"}}},
        )


class Manifest(_Record):
    """The whole persisted state: one current slot plus bounded history."""

    current: Operation | None = None
    history: list[OperationRecord] = []


class ChunkOutcome(BaseModel):
    """Result of running one chunk through the executor."""

    index: int
    success: bool
    moved: int = 0
    attempt_size: int
    reason: str | None = None


class MoveResult(BaseModel):
    """What a caller gets back from a move."""

    status: Literal["complete", "partial"]
    operation_id: str | None = None
    source: str
    target: str
    total: int
    moved: int
    failed: int = 0
    pending: int = 0
    message: str | None = None


class MoveStatusReport(BaseModel):
    """Current operation detail (or no_operation) plus summarized history."""

    status: str
    current: dict[str, Any] | None = None
    history: list[OperationRecord] = []


class AbandonResult(BaseModel):
    abandoned: bool
    operation_id: str | None = None
    message: str | None = None
