"""Tests for the session journal tools."""

from pathlib import Path
from unittest.mock import patch

from icloud_mail_mcp.journal import SessionJournal
from icloud_mail_mcp.tools.session_log import log_clear, log_read, log_write


class TestSessionLogTools:
    def test_write_then_read(self, tmp_path: Path) -> None:
        journal = SessionJournal(tmp_path / "journal.json")

        with patch("icloud_mail_mcp.tools.session_log.get_journal", return_value=journal):
            first = log_write.fn(step="Archived newsletters")
            second = log_write.fn(step="Flagged receipts")
            result = log_read.fn()

        assert first == "Logged step 1: Archived newsletters"
        assert second == "Logged step 2: Flagged receipts"
        lines = result.split("\n")
        assert lines[0].startswith("Session started ")
        assert lines[0].endswith(" UTC")
        assert lines[1].startswith("1. [")
        assert lines[1].endswith("] Archived newsletters")
        assert lines[2].endswith("] Flagged receipts")

    def test_read_empty(self, tmp_path: Path) -> None:
        journal = SessionJournal(tmp_path / "journal.json")

        with patch("icloud_mail_mcp.tools.session_log.get_journal", return_value=journal):
            result = log_read.fn()

        assert result == "Session log is empty."

    def test_clear(self, tmp_path: Path) -> None:
        journal = SessionJournal(tmp_path / "journal.json")
        journal.write("one")
        journal.write("two")

        with patch("icloud_mail_mcp.tools.session_log.get_journal", return_value=journal):
            result = log_clear.fn()
            after = log_read.fn()

        assert result == "Cleared 2 steps from the session log."
        assert after == "Session log is empty."

    def test_write_empty_step(self, tmp_path: Path) -> None:
        journal = SessionJournal(tmp_path / "journal.json")

        with patch("icloud_mail_mcp.tools.session_log.get_journal", return_value=journal):
            result = log_write.fn(step="   ")

        assert result == "Invalid input: step must not be empty"
