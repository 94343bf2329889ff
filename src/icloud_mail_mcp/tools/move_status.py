"""Move status and abandon MCP tools."""

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._service import get_move_controller


@mcp.tool
@handle_tool_errors
def get_move_status() -> str:
    """Show the in-progress bulk move (chunk by chunk) and the last finished moves.

    Reads only local state; does not connect to the mail server.
    """
    report = get_move_controller().status()
    return report.model_dump_json(indent=2)


@mcp.tool
@handle_tool_errors
def abandon_move() -> str:
    """Release an in-progress bulk move so a new one can start.

    Nothing is undone: emails already moved stay in the target, and emails
    not yet moved stay in the source.
    """
    result = get_move_controller().abandon()
    return result.model_dump_json(indent=2, exclude_none=True)
