"""Create, rename and delete mailbox MCP tools."""

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._service import create_mail_service


def _blank(value: str) -> bool:
    return not value or not value.strip()


@mcp.tool
@handle_tool_errors
def create_mailbox(name: str) -> str:
    """Create a new mailbox.

    Args:
        name: Name of the mailbox to create.
    """
    if _blank(name):
        return "Invalid parameter: name must not be empty"

    with create_mail_service() as service:
        service.create_folder(name)
        return f"Created mailbox {name}."


@mcp.tool
@handle_tool_errors
def rename_mailbox(old_name: str, new_name: str) -> str:
    """Rename a mailbox.

    Args:
        old_name: Current mailbox name.
        new_name: New mailbox name.
    """
    if _blank(old_name) or _blank(new_name):
        return "Invalid parameter: old_name and new_name must not be empty"

    with create_mail_service() as service:
        service.rename_folder(old_name, new_name)
        return f"Renamed mailbox {old_name} to {new_name}."


@mcp.tool
@handle_tool_errors
def delete_mailbox(name: str) -> str:
    """Delete a mailbox and every email in it.

    Args:
        name: Name of the mailbox to delete.
    """
    if _blank(name):
        return "Invalid parameter: name must not be empty"
    if name.upper() == "INBOX":
        return "Invalid parameter: INBOX cannot be deleted"

    with create_mail_service() as service:
        service.delete_folder(name)
        return f"Deleted mailbox {name}."
