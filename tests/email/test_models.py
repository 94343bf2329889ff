"""Tests for email data models."""

from datetime import datetime

from icloud_mail_mcp.email.models import Email, EmailAddress, MessageMeta


class TestEmailAddress:
    def test_str_with_name(self) -> None:
        assert str(EmailAddress(name="Alice", address="alice@example.com")) == (
            "Alice <alice@example.com>"
        )

    def test_str_without_name(self) -> None:
        assert str(EmailAddress(address="alice@example.com")) == "alice@example.com"


class TestMessageMeta:
    def test_defaults(self) -> None:
        meta = MessageMeta(uid="12")

        assert meta.sender == ""
        assert meta.subject == ""
        assert meta.date is None
        assert meta.message_id is None


class TestEmail:
    def test_extends_summary(self) -> None:
        email = Email(
            uid=1,
            folder="INBOX",
            subject="Hello",
            sender=EmailAddress(address="alice@example.com"),
            date=datetime(2024, 3, 1, 12, 0),
            body_plain="Hi there",
        )

        assert email.is_seen is False
        assert email.to == []
        assert email.body_plain == "Hi there"
