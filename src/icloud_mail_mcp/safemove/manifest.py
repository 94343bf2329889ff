"""Durable record of the running move operation and a bounded history.

The manifest is the single source of truth for single-flight and for
resuming after a crash. Every mutation reads, modifies and rewrites the
stored manifest inside one transaction; nothing is cached in memory
between calls, since each tool invocation may be its own process.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from icloud_mail_mcp.exceptions import ConflictError, OperationNotActiveError
from icloud_mail_mcp.safemove.models import (
    AbandonResult,
    Chunk,
    ChunkStatus,
    Manifest,
    Operation,
    OperationRecord,
    OperationStatus,
    utcnow,
)
from icloud_mail_mcp.storage import atomic_write_text, exclusive_lock, read_text

logger = structlog.get_logger()

DEFAULT_CHUNK_SIZE = 250
DEFAULT_HISTORY_LIMIT = 5


def new_operation_id() -> str:
    """Time-derived operation identifier, unique to the microsecond."""
    return utcnow().strftime("op_%Y%m%dT%H%M%S%f")


class ManifestStore(ABC):
    """Read-modify-write store for the move manifest.

    Subclasses supply raw load/save and, where needed, a cross-process lock.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self.chunk_size = chunk_size
        self.history_limit = history_limit

    @abstractmethod
    def _load(self) -> str | None:
        """Return the serialized manifest, or None if nothing is stored."""
        ...

    @abstractmethod
    def _save(self, data: str) -> None:
        """Replace the stored manifest."""
        ...

    @contextmanager
    def _locked(self) -> Iterator[None]:
        yield

    def _parse(self, raw: str | None) -> Manifest:
        if not raw:
            return Manifest()
        try:
            return Manifest.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            # An empty manifest is always a safe starting point
            logger.warning("manifest_unreadable_reset", error=str(e))
            return Manifest()

    @contextmanager
    def _transaction(self) -> Iterator[Manifest]:
        with self._locked():
            manifest = self._parse(self._load())
            yield manifest
            self._save(manifest.model_dump_json(indent=2))

    def _archive(self, manifest: Manifest) -> OperationRecord | None:
        """Move a terminal current operation into history."""
        current = manifest.current
        if current is None:
            return None
        record = current.to_record()
        manifest.history.insert(0, record)
        del manifest.history[self.history_limit :]
        manifest.current = None
        return record

    def read_manifest(self) -> Manifest:
        """Return the stored manifest; missing or corrupt storage reads as empty."""
        with self._locked():
            return self._parse(self._load())

    @staticmethod
    def _refuse_if_busy(manifest: Manifest) -> None:
        current = manifest.current
        if current is not None and current.status == OperationStatus.IN_PROGRESS:
            raise ConflictError(
                operation_id=current.operation_id,
                source=current.source,
                target=current.target,
                moved=current.summary.moved,
                total=current.total,
                started_at=current.started_at,
            )

    def ensure_idle(self) -> None:
        """Check the single-flight slot without claiming it.

        Raises:
            ConflictError: If an operation is in progress.
        """
        with self._locked():
            self._refuse_if_busy(self._parse(self._load()))

    def start_operation(self, source: str, target: str, uids: list[str]) -> Operation:
        """Open a new in-progress operation partitioned into chunks.

        Raises:
            ConflictError: If another operation is still in progress.
        """
        with self._transaction() as manifest:
            self._refuse_if_busy(manifest)
            self._archive(manifest)

            chunks = [
                Chunk(index=i, uids=uids[start : start + self.chunk_size])
                for i, start in enumerate(range(0, len(uids), self.chunk_size))
            ]
            operation = Operation(
                operation_id=new_operation_id(),
                source=source,
                target=target,
                total=len(uids),
                chunks=chunks,
            )
            operation.recompute_summary()
            manifest.current = operation

        logger.info(
            "operation_started",
            operation_id=operation.operation_id,
            source=source,
            target=target,
            total=operation.total,
            chunks=len(chunks),
        )
        return operation

    def _require_in_progress(self, manifest: Manifest, action: str) -> Operation:
        current = manifest.current
        if current is None or current.status != OperationStatus.IN_PROGRESS:
            raise OperationNotActiveError(action)
        return current

    def update_chunk(self, index: int, **patch: Any) -> Operation:
        """Merge `patch` into chunk `index` and recompute the operation summary.

        Raises:
            OperationNotActiveError: If no operation is in progress.
            IndexError: If the chunk does not exist.
        """
        with self._transaction() as manifest:
            operation = self._require_in_progress(manifest, f"update chunk {index}")
            if not 0 <= index < len(operation.chunks):
                raise IndexError(f"Chunk {index} out of range")
            chunk = operation.chunks[index]
            updated = Chunk.model_validate({**chunk.model_dump(), **patch})
            if updated.status == ChunkStatus.COMPLETE:
                # Only needed to verify and resume; a finished chunk keeps its UIDs
                updated.fingerprints = []
            operation.chunks[index] = updated
            operation.updated_at = utcnow()
            operation.recompute_summary()
        return operation

    def _finish(
        self, status: OperationStatus, reason: str | None = None
    ) -> OperationRecord:
        with self._transaction() as manifest:
            operation = self._require_in_progress(manifest, f"mark operation {status.value}")
            operation.status = status
            operation.failure_reason = reason
            operation.updated_at = utcnow()
            operation.recompute_summary()
            record = self._archive(manifest)
        assert record is not None
        logger.info(
            "operation_finished",
            operation_id=record.operation_id,
            status=status.value,
            moved=record.moved,
            total=record.total,
        )
        return record

    def complete_operation(self) -> OperationRecord:
        """Mark the current operation complete and archive it."""
        return self._finish(OperationStatus.COMPLETE)

    def fail_operation(self, reason: str) -> OperationRecord:
        """Mark the current operation failed and archive it."""
        return self._finish(OperationStatus.FAILED, reason)

    def abandon_move(self) -> AbandonResult:
        """Release the single-flight slot without touching the mail store.

        Copies and deletions already done stay done. Returns
        `abandoned=False` when there is nothing to abandon.
        """
        with self._transaction() as manifest:
            current = manifest.current
            if current is None or current.status != OperationStatus.IN_PROGRESS:
                return AbandonResult(
                    abandoned=False,
                    message="No in-progress operation to abandon.",
                )
            current.status = OperationStatus.ABANDONED
            current.updated_at = utcnow()
            current.recompute_summary()
            record = self._archive(manifest)

        assert record is not None
        logger.info("operation_abandoned", operation_id=record.operation_id)
        return AbandonResult(
            abandoned=True,
            operation_id=record.operation_id,
            message=(
                f"Abandoned {record.operation_id} ({record.source} -> {record.target}): "
                f"{record.moved} of {record.total} emails had been moved."
            ),
        )


class FileManifestStore(ManifestStore):
    """Manifest stored as a JSON file, guarded by an advisory lock file."""

    def __init__(
        self,
        path: Path,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        super().__init__(chunk_size=chunk_size, history_limit=history_limit)
        self.path = path

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with exclusive_lock(self.path):
            yield

    def _load(self) -> str | None:
        try:
            return read_text(self.path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("manifest_read_failed", path=str(self.path), error=str(e))
            return None

    def _save(self, data: str) -> None:
        atomic_write_text(self.path, data)


class MemoryManifestStore(ManifestStore):
    """Manifest kept in process memory, serialized exactly as the file store does."""

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        data: str | None = None,
    ) -> None:
        super().__init__(chunk_size=chunk_size, history_limit=history_limit)
        self.data = data

    def _load(self) -> str | None:
        return self.data

    def _save(self, data: str) -> None:
        self.data = data

