"""Bulk move MCP tool."""

from datetime import date

from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._filters import build_filters
from icloud_mail_mcp.tools._service import create_mail_service


@mcp.tool
@handle_tool_errors
def bulk_move(
    target_mailbox: str,
    source_mailbox: str = "INBOX",
    dry_run: bool = False,
    sender: str | None = None,
    domain: str | None = None,
    subject: str | None = None,
    before: date | None = None,
    since: date | None = None,
    unread: bool | None = None,
    flagged: bool | None = None,
    larger: int | None = None,
    smaller: int | None = None,
    has_attachment: bool = False,
) -> str:
    """Safely move every email matching the filters to another mailbox.

    Emails are copied in chunks, verified present in the target, and only
    then deleted from the source. Only one move runs at a time; if another
    is in progress the request is refused. Use dry_run=True to preview the
    count first, and get_move_status to inspect progress.

    Args:
        target_mailbox: Destination mailbox (created if missing).
        source_mailbox: Mailbox to move from (default: INBOX).
        dry_run: Only report how many emails would be moved.
        sender: Exact sender email address.
        domain: Any sender from this domain.
        subject: Keyword to match in the subject.
        before: Only emails before this date (YYYY-MM-DD).
        since: Only emails on or after this date (YYYY-MM-DD).
        unread: True for unread only, False for read only.
        flagged: True for flagged only, False for unflagged only.
        larger: Only emails larger than this size in KB.
        smaller: Only emails smaller than this size in KB.
        has_attachment: Only emails with attachments.
    """
    if not target_mailbox or not target_mailbox.strip():
        return "Invalid parameter: target_mailbox must not be empty"
    if not source_mailbox or not source_mailbox.strip():
        return "Invalid parameter: source_mailbox must not be empty"
    filters = build_filters(
        sender=sender,
        domain=domain,
        subject=subject,
        before=before,
        since=since,
        unread=unread,
        flagged=flagged,
        larger=larger,
        smaller=smaller,
        has_attachment=has_attachment,
    )

    with create_mail_service() as service:
        result = service.bulk_move(
            filters, target=target_mailbox, source=source_mailbox, dry_run=dry_run
        )
        return result.model_dump_json(indent=2, exclude_none=True)
