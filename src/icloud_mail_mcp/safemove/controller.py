"""Lifecycle of whole move operations: start, run chunks in order, finish."""

import structlog

from icloud_mail_mcp.exceptions import MoveInterruptedError, OperationNotActiveError
from icloud_mail_mcp.safemove.executor import ChunkExecutor
from icloud_mail_mcp.safemove.manifest import ManifestStore
from icloud_mail_mcp.safemove.models import (
    AbandonResult,
    MoveResult,
    MoveStatusReport,
    Operation,
)

logger = structlog.get_logger()


class MoveController:
    """Single-flight entry point for moves, plus status and abandon.

    `status()` and `abandon()` only touch the manifest store, so the
    controller can be built without an executor (and without a connection
    to the mail store) to serve them.
    """

    def __init__(self, manifest: ManifestStore, executor: ChunkExecutor | None = None) -> None:
        self._manifest = manifest
        self._executor = executor

    def move(self, source: str, target: str, uids: list[str]) -> MoveResult:
        """Safely move `uids` from `source` to `target`.

        Returns a `complete` result when every chunk was moved, or a
        `partial` result when a chunk failed verification after the
        size-degradation retry. Chunks after the failed one are not touched.

        Raises:
            ConflictError: If another operation is in progress.
            MoveInterruptedError: If a chunk stopped on an unrecoverable error.
        """
        if self._executor is None:
            raise RuntimeError("MoveController was created without a chunk executor")

        self.ensure_idle()
        if not uids:
            return MoveResult(
                status="complete",
                source=source,
                target=target,
                total=0,
                moved=0,
                message=f"No matching emails in {source}; nothing to move.",
            )

        operation = self._manifest.start_operation(source, target, uids)
        log = logger.bind(operation_id=operation.operation_id)

        for chunk in operation.chunks:
            try:
                outcome = self._executor.run_chunk(chunk, source, target)
            except OperationNotActiveError:
                log.warning("operation_released_during_move", chunk=chunk.index)
                raise
            except Exception as e:
                reason = f"chunk {chunk.index + 1} of {len(operation.chunks)}: {e}"
                log.error("move_interrupted", chunk=chunk.index, error=str(e))
                record = self._manifest.fail_operation(reason)
                raise MoveInterruptedError(
                    operation_id=record.operation_id,
                    source=source,
                    moved=record.moved,
                    pending=record.pending + record.failed,
                    reason=reason,
                ) from e

            if not outcome.success:
                reason = f"chunk {chunk.index + 1} failed verification: {outcome.reason}"
                record = self._manifest.fail_operation(reason)
                untouched = record.pending
                message = (
                    f"{record.moved} emails moved successfully. "
                    f"Chunk {chunk.index + 1} failed verification: {outcome.reason}."
                )
                if outcome.moved:
                    message += (
                        f" {outcome.moved} of its {chunk.size} emails had already been "
                        "verified and moved."
                    )
                message += (
                    f" {untouched} remain in {source} untouched. "
                    "Call get_move_status for chunk-level detail."
                )
                return MoveResult(
                    status="partial",
                    operation_id=record.operation_id,
                    source=source,
                    target=target,
                    total=record.total,
                    moved=record.moved,
                    failed=record.failed,
                    pending=untouched,
                    message=message,
                )

        record = self._manifest.complete_operation()
        return MoveResult(
            status="complete",
            operation_id=record.operation_id,
            source=source,
            target=target,
            total=record.total,
            moved=record.moved,
        )

    def ensure_idle(self) -> None:
        """Raise ConflictError if an operation is in progress."""
        self._manifest.ensure_idle()

    def status(self) -> MoveStatusReport:
        """Current operation detail (or `no_operation`) plus summarized history."""
        manifest = self._manifest.read_manifest()
        current: Operation | None = manifest.current
        return MoveStatusReport(
            status=current.status.value if current else "no_operation",
            current=current.detail() if current else None,
            history=manifest.history,
        )

    def abandon(self) -> AbandonResult:
        """Release the single-flight slot held by an in-progress operation."""
        return self._manifest.abandon_move()
