"""Tests for flag_email and mark_as_read tools."""

from unittest.mock import MagicMock, patch

from icloud_mail_mcp.tools.message_flags import flag_email, mark_as_read


def _mock_service() -> MagicMock:
    service = MagicMock()
    service.__enter__ = MagicMock(return_value=service)
    service.__exit__ = MagicMock(return_value=None)
    return service


class TestFlagEmail:
    def test_flags(self) -> None:
        service = _mock_service()
        service.flag_email.return_value = True

        with patch(
            "icloud_mail_mcp.tools.message_flags.create_mail_service", return_value=service
        ):
            result = flag_email.fn(uid=12)

        assert result == "Flagged email INBOX/12."
        service.flag_email.assert_called_once_with("INBOX", 12, True)

    def test_unflags(self) -> None:
        service = _mock_service()
        service.flag_email.return_value = True

        with patch(
            "icloud_mail_mcp.tools.message_flags.create_mail_service", return_value=service
        ):
            result = flag_email.fn(uid=12, flagged=False, mailbox="Archive")

        assert result == "Unflagged email Archive/12."

    def test_not_found(self) -> None:
        service = _mock_service()
        service.flag_email.return_value = False

        with patch(
            "icloud_mail_mcp.tools.message_flags.create_mail_service", return_value=service
        ):
            result = flag_email.fn(uid=999)

        assert result == "Email not found: INBOX/999"

    def test_invalid_uid(self) -> None:
        assert flag_email.fn(uid=0) == "Invalid parameter: uid must be a positive integer"


class TestMarkAsRead:
    def test_marks_unread(self) -> None:
        service = _mock_service()
        service.mark_email_read.return_value = True

        with patch(
            "icloud_mail_mcp.tools.message_flags.create_mail_service", return_value=service
        ):
            result = mark_as_read.fn(uid=3, read=False)

        assert result == "Marked email INBOX/3 as unread."
        service.mark_email_read.assert_called_once_with("INBOX", 3, False)

    def test_not_found(self) -> None:
        service = _mock_service()
        service.mark_email_read.return_value = False

        with patch(
            "icloud_mail_mcp.tools.message_flags.create_mail_service", return_value=service
        ):
            result = mark_as_read.fn(uid=4)

        assert result == "Email not found: INBOX/4"
