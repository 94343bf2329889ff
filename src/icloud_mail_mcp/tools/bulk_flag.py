"""Bulk flag and read-state MCP tools."""

from datetime import date

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._filters import build_filters, describe_filters
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def bulk_flag(
    flagged: bool,
    mailbox: str = "INBOX",
    sender: str | None = None,
    domain: str | None = None,
    subject: str | None = None,
    before: date | None = None,
    since: date | None = None,
    unread: bool | None = None,
    larger: int | None = None,
    smaller: int | None = None,
    has_attachment: bool = False,
) -> str:
    """Flag or unflag every email matching the filters.

    Args:
        flagged: True to flag, False to unflag.
        mailbox: Mailbox to update (default: INBOX).
        sender: Exact sender email address.
        domain: Any sender from this domain.
        subject: Keyword to match in the subject.
        before: Only emails before this date (YYYY-MM-DD).
        since: Only emails on or after this date (YYYY-MM-DD).
        unread: True for unread only, False for read only.
        larger: Only emails larger than this size in KB.
        smaller: Only emails smaller than this size in KB.
        has_attachment: Only emails with attachments.
    """
    filters = build_filters(
        sender=sender,
        domain=domain,
        subject=subject,
        before=before,
        since=since,
        unread=unread,
        larger=larger,
        smaller=smaller,
        has_attachment=has_attachment,
    )

    with create_mail_service() as service:
        count = service.bulk_flag(mailbox, filters, flagged)
        action = "Flagged" if flagged else "Unflagged"
        return f"{action} {count} emails in {mailbox} ({describe_filters(filters)})."


@mcp.tool
@handle_tool_errors
def bulk_mark_read(mailbox: str = "INBOX", sender: str | None = None) -> str:
    """Mark all unread emails as read, optionally only those from one sender.

    Args:
        mailbox: Mailbox to update (default: INBOX).
        sender: Only emails from this sender.
    """
    with create_mail_service() as service:
        count = service.mark_read(mailbox, sender=sender)
        scope = f"from {sender}" if sender else "in total"
        return f"Marked {count} emails as read in {mailbox} ({scope})."


@mcp.tool
@handle_tool_errors
def bulk_mark_unread(mailbox: str = "INBOX", sender: str | None = None) -> str:
    """Mark all read emails as unread, optionally only those from one sender.

    Args:
        mailbox: Mailbox to update (default: INBOX).
        sender: Only emails from this sender.
    """
    with create_mail_service() as service:
        count = service.mark_read(mailbox, sender=sender, read=False)
        scope = f"from {sender}" if sender else "in total"
        return f"Marked {count} emails as unread in {mailbox} ({scope})."
