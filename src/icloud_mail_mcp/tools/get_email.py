"""Get email MCP tool."""

from icloud_mail_mcp.email.models import Email
from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def get_email(uid: int, mailbox: str = "INBOX") -> str:
    """Get full email content by UID.

    Args:
        uid: Unique identifier of the email.
        mailbox: Mailbox containing the email (default: INBOX).
    """
    if uid < 1:
        return "Invalid parameter: uid must be a positive integer"

    with create_mail_service() as service:
        email_result: Email | None = service.get_email(mailbox, uid)

        if not email_result:
            return f"Email not found: {mailbox}/{uid}"

        lines = [
            f"Subject: {email_result.subject}",
            f"From: {email_result.sender}",
            f"To: {', '.join(str(addr) for addr in email_result.to)}",
            f"Date: {email_result.date.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Status: {'Read' if email_result.is_seen else 'Unread'}"
            f"{', Flagged' if email_result.is_flagged else ''}",
        ]

        if email_result.cc:
            lines.append(f"CC: {', '.join(str(addr) for addr in email_result.cc)}")

        if email_result.message_id:
            lines.append(f"Message-ID: {email_result.message_id}")

        lines.append("")  # Empty line before body

        if email_result.body_plain:
            lines.append(email_result.body_plain)
        elif email_result.body_html:
            lines.append("[HTML content - plain text not available]")
            lines.append(email_result.body_html)
        else:
            lines.append("[No body content]")

        return "\n".join(lines)
