"""MCP tools registered on the shared FastMCP app."""

# isort: skip_file

from icloud_mail_mcp.tools._app import mcp

# Import tool modules to trigger registration via decorators
from icloud_mail_mcp.tools import browse_emails as _browse_emails  # noqa: F401
from icloud_mail_mcp.tools import bulk_flag as _bulk_flag  # noqa: F401
from icloud_mail_mcp.tools import bulk_move as _bulk_move  # noqa: F401
from icloud_mail_mcp.tools import count_emails as _count_emails  # noqa: F401
from icloud_mail_mcp.tools import get_email as _get_email  # noqa: F401
from icloud_mail_mcp.tools import list_mailboxes as _list_mailboxes  # noqa: F401
from icloud_mail_mcp.tools import mailbox_admin as _mailbox_admin  # noqa: F401
from icloud_mail_mcp.tools import mailbox_summary as _mailbox_summary  # noqa: F401
from icloud_mail_mcp.tools import message_flags as _message_flags  # noqa: F401
from icloud_mail_mcp.tools import move_email as _move_email  # noqa: F401
from icloud_mail_mcp.tools import move_status as _move_status  # noqa: F401
from icloud_mail_mcp.tools import read_inbox as _read_inbox  # noqa: F401
from icloud_mail_mcp.tools import search_emails as _search_emails  # noqa: F401
from icloud_mail_mcp.tools import sender_stats as _sender_stats  # noqa: F401
from icloud_mail_mcp.tools import session_log as _session_log  # noqa: F401

__all__ = ["mcp"]
