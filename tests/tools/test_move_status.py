"""Tests for get_move_status and abandon_move tools."""

import json
from unittest.mock import patch

from icloud_mail_mcp.safemove.controller import MoveController
from icloud_mail_mcp.safemove.manifest import MemoryManifestStore
from icloud_mail_mcp.tools.move_status import abandon_move, get_move_status


def _controller(manifest: MemoryManifestStore) -> MoveController:
    return MoveController(manifest)


class TestGetMoveStatus:
    def test_no_operation(self) -> None:
        manifest = MemoryManifestStore()

        with patch(
            "icloud_mail_mcp.tools.move_status.get_move_controller",
            return_value=_controller(manifest),
        ):
            result = get_move_status.fn()

        data = json.loads(result)
        assert data["status"] == "no_operation"
        assert data["current"] is None
        assert data["history"] == []

    def test_in_progress_shows_chunks_without_fingerprints(self) -> None:
        manifest = MemoryManifestStore(chunk_size=2)
        manifest.start_operation("INBOX", "Archive", ["1", "2", "3"])

        with patch(
            "icloud_mail_mcp.tools.move_status.get_move_controller",
            return_value=_controller(manifest),
        ):
            result = get_move_status.fn()

        data = json.loads(result)
        assert data["status"] == "in_progress"
        current = data["current"]
        assert current["source"] == "INBOX"
        assert current["target"] == "Archive"
        assert [chunk["uids"] for chunk in current["chunks"]] == [["1", "2"], ["3"]]
        assert all("fingerprints" not in chunk for chunk in current["chunks"])

    def test_history_after_abandon(self) -> None:
        manifest = MemoryManifestStore()
        op = manifest.start_operation("INBOX", "Archive", ["1"])
        manifest.abandon_move()

        with patch(
            "icloud_mail_mcp.tools.move_status.get_move_controller",
            return_value=_controller(manifest),
        ):
            result = get_move_status.fn()

        data = json.loads(result)
        assert data["status"] == "no_operation"
        assert data["history"][0]["operation_id"] == op.operation_id
        assert data["history"][0]["status"] == "abandoned"


class TestAbandonMove:
    def test_abandons_in_progress_operation(self) -> None:
        manifest = MemoryManifestStore()
        op = manifest.start_operation("INBOX", "Archive", ["1", "2"])

        with patch(
            "icloud_mail_mcp.tools.move_status.get_move_controller",
            return_value=_controller(manifest),
        ):
            result = abandon_move.fn()

        data = json.loads(result)
        assert data["abandoned"] is True
        assert data["operation_id"] == op.operation_id
        assert "0 of 2 emails had been moved" in data["message"]

    def test_nothing_to_abandon(self) -> None:
        manifest = MemoryManifestStore()

        with patch(
            "icloud_mail_mcp.tools.move_status.get_move_controller",
            return_value=_controller(manifest),
        ):
            result = abandon_move.fn()

        data = json.loads(result)
        assert data == {"abandoned": False, "message": "No in-progress operation to abandon."}

    def test_manifest_error_is_reported(self) -> None:
        with patch(
            "icloud_mail_mcp.tools.move_status.get_move_controller",
            side_effect=PermissionError("state dir not writable"),
        ):
            result = abandon_move.fn()

        assert result == "Cannot access local state: state dir not writable"
