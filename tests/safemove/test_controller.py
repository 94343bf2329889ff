"""Tests for the move lifecycle controller."""

import pytest
from fakes import FakeMailStore

from icloud_mail_mcp.exceptions import (
    ConflictError,
    MoveInterruptedError,
    OperationNotActiveError,
)
from icloud_mail_mcp.safemove.controller import MoveController
from icloud_mail_mcp.safemove.executor import ChunkExecutor
from icloud_mail_mcp.safemove.manifest import MemoryManifestStore
from icloud_mail_mcp.safemove.models import ChunkStatus, OperationStatus

ALL_UIDS = [str(i) for i in range(1, 601)]


@pytest.fixture
def controller(store: FakeMailStore, manifest: MemoryManifestStore) -> MoveController:
    return MoveController(manifest, ChunkExecutor(store, manifest, backoff_seconds=0))


def _assert_nothing_lost(store: FakeMailStore) -> None:
    present = set(store.message_ids("INBOX")) | set(store.message_ids("Archive"))
    assert all(f"<msg{i}@example.com>" in present for i in range(600))


class TestMove:
    def test_moves_everything_in_three_chunks(
        self, controller: MoveController, store: FakeMailStore, manifest: MemoryManifestStore
    ) -> None:
        result = controller.move("INBOX", "Archive", ALL_UIDS)

        assert result.status == "complete"
        assert result.total == 600
        assert result.moved == 600
        assert store.folders["INBOX"] == []
        assert len(store.folders["Archive"]) == 600
        assert [len(uids) for uids in store.calls_to("copy")] == [250, 250, 100]
        assert store.premature_deletes == []

        manifest_state = manifest.read_manifest()
        assert manifest_state.current is None
        record = manifest_state.history[0]
        assert record.operation_id == result.operation_id
        assert record.status == OperationStatus.COMPLETE
        assert record.chunks_complete == 3

    def test_failed_chunk_stops_the_operation(
        self, controller: MoveController, store: FakeMailStore, manifest: MemoryManifestStore
    ) -> None:
        # A message in the second chunk never shows up in the target
        store.lost = {"<msg300@example.com>"}

        result = controller.move("INBOX", "Archive", ALL_UIDS)

        assert result.status == "partial"
        assert result.moved == 250
        assert result.failed == 250
        assert result.pending == 100
        assert result.message is not None
        assert "250 emails moved successfully" in result.message
        assert "100 remain in INBOX untouched" in result.message
        assert "get_move_status" in result.message

        # The third chunk was never attempted
        assert all(int(uid) <= 500 for uids in store.calls_to("copy") for uid in uids)
        assert len(store.folders["INBOX"]) == 350
        assert store.premature_deletes == []
        _assert_nothing_lost(store)

        record = manifest.read_manifest().history[0]
        assert record.status == OperationStatus.FAILED
        assert record.failure_reason is not None
        assert "chunk 2" in record.failure_reason

    def test_no_uids(self, controller: MoveController, manifest: MemoryManifestStore) -> None:
        result = controller.move("INBOX", "Archive", [])

        assert result.status == "complete"
        assert result.moved == 0
        assert result.total == 0
        assert manifest.read_manifest().history == []

    def test_conflict_with_running_operation(
        self, controller: MoveController, store: FakeMailStore, manifest: MemoryManifestStore
    ) -> None:
        manifest.start_operation("INBOX", "Receipts", ["1"])

        with pytest.raises(ConflictError):
            controller.move("INBOX", "Archive", ALL_UIDS)

        assert store.calls == []

    def test_no_uids_during_running_operation_conflicts(
        self, controller: MoveController, manifest: MemoryManifestStore
    ) -> None:
        running = manifest.start_operation("INBOX", "Receipts", ["1"])

        with pytest.raises(ConflictError) as exc_info:
            controller.move("INBOX", "Archive", [])

        assert exc_info.value.operation_id == running.operation_id
        current = manifest.read_manifest().current
        assert current is not None
        assert current.operation_id == running.operation_id

    def test_unrecoverable_error_fails_operation(
        self, controller: MoveController, store: FakeMailStore, manifest: MemoryManifestStore
    ) -> None:
        controller.move("INBOX", "Archive", ALL_UIDS[:250])
        store.failures["copy"] = [RuntimeError("NO [TRYCREATE] Mailbox does not exist")]

        with pytest.raises(MoveInterruptedError) as exc_info:
            controller.move("INBOX", "Archive", ALL_UIDS[250:])

        err = exc_info.value
        assert err.moved == 0
        assert err.pending == 350
        assert "TRYCREATE" in err.reason
        assert "get_move_status" in str(err)
        record = manifest.read_manifest().history[0]
        assert record.operation_id == err.operation_id
        assert record.status == OperationStatus.FAILED

    def test_retries_exhausted_fails_operation(
        self, controller: MoveController, store: FakeMailStore
    ) -> None:
        store.failures["delete"] = [TimeoutError("timed out")] * 3

        with pytest.raises(MoveInterruptedError) as exc_info:
            controller.move("INBOX", "Archive", ALL_UIDS)

        assert exc_info.value.moved == 0
        # Copied and verified but not deleted: duplicated, never lost
        assert len(store.folders["INBOX"]) == 600
        assert len(store.folders["Archive"]) == 250

    def test_abandoned_from_elsewhere_stops_move(
        self, controller: MoveController, store: FakeMailStore, manifest: MemoryManifestStore
    ) -> None:
        store.on_copy = manifest.abandon_move

        with pytest.raises(OperationNotActiveError):
            controller.move("INBOX", "Archive", ALL_UIDS)

        assert store.calls_to("delete") == []
        assert manifest.read_manifest().history[0].status == OperationStatus.ABANDONED

    def test_requires_executor(self, manifest: MemoryManifestStore) -> None:
        with pytest.raises(RuntimeError):
            MoveController(manifest).move("INBOX", "Archive", ["1"])


class TestStatus:
    def test_no_operation(self, manifest: MemoryManifestStore) -> None:
        report = MoveController(manifest).status()

        assert report.status == "no_operation"
        assert report.current is None
        assert report.history == []

    def test_in_progress_detail(self, manifest: MemoryManifestStore) -> None:
        manifest.start_operation("INBOX", "Archive", ALL_UIDS)
        manifest.update_chunk(0, status=ChunkStatus.COMPLETE)

        report = MoveController(manifest).status()

        assert report.status == "in_progress"
        assert report.current is not None
        assert report.current["summary"]["moved"] == 250
        assert report.current["chunks"][0]["status"] == "complete"
        assert "fingerprints" not in report.current["chunks"][0]

    def test_status_is_idempotent(
        self, controller: MoveController, manifest: MemoryManifestStore
    ) -> None:
        controller.move("INBOX", "Archive", ALL_UIDS[:10])
        before = manifest.data

        first = controller.status()
        second = controller.status()

        assert first == second
        assert manifest.data == before
        assert first.history[0].status == OperationStatus.COMPLETE


class TestAbandon:
    def test_nothing_active(self, manifest: MemoryManifestStore) -> None:
        result = MoveController(manifest).abandon()

        assert result.abandoned is False
        assert result.message is not None
        assert result.message.startswith("No in-progress operation")

    def test_abandon_in_progress(self, manifest: MemoryManifestStore) -> None:
        operation = manifest.start_operation("INBOX", "Archive", ALL_UIDS)

        result = MoveController(manifest).abandon()

        assert result.abandoned is True
        assert result.operation_id == operation.operation_id
        assert MoveController(manifest).status().status == "no_operation"
