"""Single-email move MCP tool."""

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def move_email(uid: int, target_mailbox: str, source_mailbox: str = "INBOX") -> str:
    """Safely move one email to another mailbox.

    The email is copied, verified present in the target, and only then
    deleted from the source, exactly as bulk_move does. It is refused while
    another move is in progress.

    Args:
        uid: Unique identifier of the email.
        target_mailbox: Destination mailbox (created if missing).
        source_mailbox: Mailbox containing the email (default: INBOX).
    """
    if uid < 1:
        return "Invalid parameter: uid must be a positive integer"
    if not target_mailbox or not target_mailbox.strip():
        return "Invalid parameter: target_mailbox must not be empty"

    with create_mail_service() as service:
        result = service.move_email(source_mailbox, uid, target_mailbox)
        if result is None:
            return f"Email not found: {source_mailbox}/{uid}"
        return result.model_dump_json(indent=2, exclude_none=True)
