"""Paged mailbox reading MCP tool."""

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._formatting import format_summary
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def read_inbox(
    page: int = 1,
    limit: int = 10,
    unread_only: bool = False,
    mailbox: str = "INBOX",
) -> str:
    """Read a mailbox page by page, newest emails first.

    Args:
        page: Page number, starting at 1 (default: 1).
        limit: Emails per page (default: 10).
        unread_only: Only list unread emails.
        mailbox: Mailbox to read (default: INBOX).
    """
    if page < 1:
        return "Invalid parameter: page must be a positive integer"
    if limit < 1:
        return "Invalid parameter: limit must be a positive integer"

    with create_mail_service() as service:
        result = service.read_page(mailbox, page=page, limit=limit, unread_only=unread_only)

        if not result.total:
            return "No emails found."
        if not result.emails:
            return f"Page {page} is past the end ({result.total_pages} pages)."

        kind = "unread emails" if unread_only else "emails"
        lines = [f"{mailbox}: page {page} of {result.total_pages} ({result.total} {kind})"]
        lines.extend(format_summary(email) for email in result.emails)
        if result.has_more:
            lines.append(f"\nMore: read_inbox(page={page + 1})")
        return "\n".join(lines)
