"""Copy, verify, delete: the per-chunk move protocol.

A sub-batch is only deleted from the source after every one of its
fingerprints has been observed in the target. When verification fails the
whole chunk is retried at the next smaller sub-batch size; a failure at
the smallest size marks the chunk failed.
"""

from collections.abc import Callable, Iterator
from typing import TypeVar

import structlog

from icloud_mail_mcp.email.connectors.base import BaseConnector
from icloud_mail_mcp.safemove.fingerprint import fingerprint, identity_key
from icloud_mail_mcp.safemove.manifest import ManifestStore
from icloud_mail_mcp.safemove.models import (
    Chunk,
    ChunkOutcome,
    ChunkStatus,
    Fingerprint,
    utcnow,
)
from icloud_mail_mcp.safemove.retry import (
    DEFAULT_BACKOFF_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
    reconnect_on_fault,
    with_retry,
)

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_ATTEMPT_SIZES: tuple[int, ...] = (250, 100)
DEFAULT_VERIFY_MARGIN = 50


def _batched(items: list[str], size: int) -> Iterator[list[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class ChunkExecutor:
    """Runs chunks of an in-progress operation against the mail store."""

    def __init__(
        self,
        connector: BaseConnector,
        manifest: ManifestStore,
        attempt_sizes: tuple[int, ...] | list[int] = DEFAULT_ATTEMPT_SIZES,
        verify_margin: int = DEFAULT_VERIFY_MARGIN,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
    ) -> None:
        """Initialize the executor.

        Args:
            connector: Connected mail-store connector.
            manifest: Store holding the in-progress operation.
            attempt_sizes: Sub-batch sizes to try, largest first.
            verify_margin: Extra messages scanned in the target beyond twice
                the expected count, to tolerate concurrent arrivals.
            max_attempts: Attempts per network call.
            backoff_seconds: Linear backoff base per network call.
        """
        self._connector = connector
        self._manifest = manifest
        self._attempt_sizes = tuple(attempt_sizes)
        self._verify_margin = verify_margin
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds
        self._recover = reconnect_on_fault(connector)

    def _call(self, label: str, action: Callable[[], T]) -> T:
        return with_retry(
            label,
            action,
            max_attempts=self._max_attempts,
            backoff_seconds=self._backoff_seconds,
            on_retry=self._recover,
        )

    def _capture_fingerprints(self, source: str, uids: list[str]) -> list[Fingerprint]:
        metas = self._call("fetch_metadata", lambda: self._connector.fetch_metadata(source, uids))
        return [fingerprint(meta) for meta in metas]

    def _verify(self, target: str, expected: list[Fingerprint]) -> list[Fingerprint]:
        """Return the fingerprints that could not be found among the newest target messages."""
        target_count = self._call("open_target", lambda: self._connector.open_folder(target))
        window = min(target_count, 2 * len(expected) + self._verify_margin)
        recent = self._call(
            "fetch_target_window",
            lambda: self._connector.fetch_recent_metadata(target, window),
        )
        present = {identity_key(fingerprint(meta)) for meta in recent}
        return [fp for fp in expected if identity_key(fp) not in present]

    def run_chunk(self, chunk: Chunk, source: str, target: str) -> ChunkOutcome:
        """Move one chunk from `source` to `target`.

        Progress is written to the manifest after every step, so a crash at
        any point leaves the chunk in a state that says what was done.
        """
        log = logger.bind(chunk=chunk.index, source=source, target=target)
        fingerprints = {fp.uid: fp for fp in chunk.fingerprints}
        moved_uids = list(chunk.moved_uids)
        attempt_size = self._attempt_sizes[0]
        reason: str | None = None

        for attempt_size in self._attempt_sizes:
            # Sub-batches deleted in an earlier attempt no longer exist in the source
            done = set(moved_uids)
            remaining = [uid for uid in chunk.uids if uid not in done]
            reason = None

            for batch in _batched(remaining, attempt_size):
                captured = self._capture_fingerprints(source, batch)
                if len(captured) < len(batch):
                    log.warning(
                        "uids_missing_from_source",
                        requested=len(batch),
                        found=len(captured),
                    )
                if not captured:
                    continue
                for fp in captured:
                    fingerprints[fp.uid] = fp
                self._manifest.update_chunk(
                    chunk.index,
                    fingerprints=list(fingerprints.values()),
                    status=ChunkStatus.PENDING,
                )

                batch_uids = [fp.uid for fp in captured]
                self._call("copy", lambda: self._connector.copy(source, batch_uids, target))
                self._manifest.update_chunk(
                    chunk.index,
                    status=ChunkStatus.COPIED_NOT_VERIFIED,
                    copied_at=utcnow(),
                )

                missing = self._verify(target, captured)
                if missing:
                    reason = (
                        f"{len(missing)} of {len(captured)} copied emails not found in "
                        f"{target} (sub-batch size {attempt_size})"
                    )
                    log.warning(
                        "verification_failed",
                        attempt_size=attempt_size,
                        missing=len(missing),
                        expected=len(captured),
                    )
                    break

                self._manifest.update_chunk(
                    chunk.index,
                    status=ChunkStatus.VERIFIED_NOT_DELETED,
                    verified_at=utcnow(),
                )
                self._call("delete", lambda: self._connector.delete(source, batch_uids))
                moved_uids.extend(batch)
                self._manifest.update_chunk(chunk.index, moved_uids=moved_uids)
                log.debug("sub_batch_moved", size=len(batch_uids))

            if reason is None:
                self._manifest.update_chunk(
                    chunk.index,
                    status=ChunkStatus.COMPLETE,
                    deleted_at=utcnow(),
                    failure_reason=None,
                )
                log.info("chunk_complete", size=chunk.size, attempt_size=attempt_size)
                return ChunkOutcome(
                    index=chunk.index,
                    success=True,
                    moved=chunk.size,
                    attempt_size=attempt_size,
                )

            if attempt_size != self._attempt_sizes[-1]:
                log.info("chunk_retry_smaller", failed_size=attempt_size)

        self._manifest.update_chunk(
            chunk.index,
            status=ChunkStatus.FAILED,
            failure_reason=f"Verification failed: {reason}",
        )
        log.error("chunk_failed", reason=reason)
        return ChunkOutcome(
            index=chunk.index,
            success=False,
            moved=len(moved_uids),
            attempt_size=attempt_size,
            reason=reason,
        )
