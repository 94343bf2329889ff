"""Search emails MCP tool."""

from datetime import date

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._filters import build_filters
from icloud_mail_mcp.tools._formatting import format_listing
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def search_emails(
    query: str | None = None,
    mailbox: str = "INBOX",
    limit: int = 10,
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
    """Search emails by text and/or filters, newest first.

    Args:
        query: Text to match in subject, sender or body.
        mailbox: Mailbox to search (default: INBOX).
        limit: Maximum number of emails to return (default: 10).
        sender: Exact sender email address.
        domain: Any sender from this domain.
        subject: Keyword to match in the subject.
        before: Only emails before this date (YYYY-MM-DD).
        since: Only emails on or after this date (YYYY-MM-DD).
        unread: True for unread only, False for read only.
        flagged: True for flagged only, False for unflagged only.
        larger: Only emails larger than this size in KB.
        smaller: Only emails smaller than this size in KB.
        has_attachment: Only emails with attachments.
    """
    if limit < 1:
        return "Invalid parameter: limit must be a positive integer"
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
        page = service.search(mailbox, filters, query=query, limit=limit)
        return format_listing(page.emails, page.total)
