"""Mailbox summary MCP tool."""

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def get_mailbox_summary(mailbox: str = "INBOX") -> str:
    """Get total, unread and recent message counts for a mailbox.

    Args:
        mailbox: Mailbox to summarize (default: INBOX).
    """
    if not mailbox or not mailbox.strip():
        return "Invalid parameter: mailbox must not be empty"

    with create_mail_service() as service:
        status = service.summary(mailbox)
        return (
            f"{status.name}: {status.total} total, {status.unseen} unread, {status.recent} recent"
        )
