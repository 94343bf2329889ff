"""Count emails MCP tool."""

from datetime import date

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._filters import build_filters, describe_filters
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def count_emails(
    mailbox: str = "INBOX",
    sender: str | None = None,
    domain: str | None = None,
    subject: str | None = None,
    before: date | None = None,
    since: date | None = None,
    unread: bool | None = None,
    flagged: bool | None = None,
    larger: int | None = None,
    smaller: int | None = None,
    has_attachment: bool = False,
) -> str:
    """Count emails matching the filters. With no filters, counts every email.

    Args:
        mailbox: Mailbox to count in (default: INBOX).
        sender: Exact sender email address.
        domain: Any sender from this domain (e.g. "newsletter.com").
        subject: Keyword to match in the subject.
        before: Only emails before this date (YYYY-MM-DD).
        since: Only emails on or after this date (YYYY-MM-DD).
        unread: True for unread only, False for read only.
        flagged: True for flagged only, False for unflagged only.
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
        flagged=flagged,
        larger=larger,
        smaller=smaller,
        has_attachment=has_attachment,
    )

    with create_mail_service() as service:
        count = service.count(mailbox, filters)
        return f"{count} emails in {mailbox} match ({describe_filters(filters)})."
