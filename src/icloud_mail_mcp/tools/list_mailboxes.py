"""List mailboxes MCP tool."""

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def list_mailboxes() -> str:
    """List all mailboxes (folders) in the account."""
    with create_mail_service() as service:
        folders = service.list_folders()
        if not folders:
            return "No mailboxes found."
        return "\n".join(f"- {f.name}" for f in folders)
