"""Single-email flag and read-state MCP tools."""

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def flag_email(uid: int, flagged: bool = True, mailbox: str = "INBOX") -> str:
    """Flag or unflag one email.

    Args:
        uid: Unique identifier of the email.
        flagged: True to flag, False to unflag (default: True).
        mailbox: Mailbox containing the email (default: INBOX).
    """
    if uid < 1:
        return "Invalid parameter: uid must be a positive integer"

    with create_mail_service() as service:
        if not service.flag_email(mailbox, uid, flagged):
            return f"Email not found: {mailbox}/{uid}"
        return f"{'Flagged' if flagged else 'Unflagged'} email {mailbox}/{uid}."


@mcp.tool
@handle_tool_errors
def mark_as_read(uid: int, read: bool = True, mailbox: str = "INBOX") -> str:
    """Mark one email as read or unread.

    Args:
        uid: Unique identifier of the email.
        read: True for read, False for unread (default: True).
        mailbox: Mailbox containing the email (default: INBOX).
    """
    if uid < 1:
        return "Invalid parameter: uid must be a positive integer"

    with create_mail_service() as service:
        if not service.mark_email_read(mailbox, uid, read):
            return f"Email not found: {mailbox}/{uid}"
        return f"Marked email {mailbox}/{uid} as {'read' if read else 'unread'}."
