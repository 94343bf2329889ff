"""Session journal MCP tools."""

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._service import get_journal


@mcp.tool
@handle_tool_errors
def log_write(step: str) -> str:
    """Record a completed step of a long cleanup session, to resume from later.

    Args:
        step: Short description of what was just done.
    """
    state = get_journal().write(step)
    return f"Logged step {len(state.steps)}: {state.steps[-1].step}"


@mcp.tool
@handle_tool_errors
def log_read() -> str:
    """Read back every step recorded since the session log was last cleared."""
    state = get_journal().read()
    if not state.steps:
        return "Session log is empty."
    lines = [f"Session started {state.started_at:%Y-%m-%d %H:%M} UTC"]
    for i, entry in enumerate(state.steps, start=1):
        lines.append(f"{i}. [{entry.time:%Y-%m-%d %H:%M}] {entry.step}")
    return "\n".join(lines)


@mcp.tool
@handle_tool_errors
def log_clear() -> str:
    """Clear the session log once the session is finished."""
    removed = get_journal().clear()
    return f"Cleared {removed} steps from the session log."
