"""Sender and date-range listing MCP tools."""

from datetime import date

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._filters import build_filters
from icloud_mail_mcp.tools._formatting import format_listing
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def get_emails_by_sender(sender: str, mailbox: str = "INBOX", limit: int = 10) -> str:
    """List the newest emails from one sender.

    Args:
        sender: Sender email address.
        mailbox: Mailbox to search (default: INBOX).
        limit: Maximum number of emails to return (default: 10).
    """
    if not sender or not sender.strip():
        return "Invalid parameter: sender must not be empty"
    if limit < 1:
        return "Invalid parameter: limit must be a positive integer"
    filters = build_filters(sender=sender.strip())

    with create_mail_service() as service:
        page = service.search(mailbox, filters, limit=limit)
        return format_listing(page.emails, page.total)


@mcp.tool
@handle_tool_errors
def get_emails_by_date_range(
    start_date: date,
    end_date: date,
    mailbox: str = "INBOX",
    limit: int = 10,
) -> str:
    """List the newest emails received in a date range.

    Args:
        start_date: First day to include (YYYY-MM-DD).
        end_date: Day after the last one to include (YYYY-MM-DD, exclusive).
        mailbox: Mailbox to search (default: INBOX).
        limit: Maximum number of emails to return (default: 10).
    """
    if end_date <= start_date:
        return "Invalid parameter: end_date must be after start_date"
    if limit < 1:
        return "Invalid parameter: limit must be a positive integer"
    filters = build_filters(since=start_date, before=end_date)

    with create_mail_service() as service:
        page = service.search(mailbox, filters, limit=limit)
        return format_listing(page.emails, page.total)
