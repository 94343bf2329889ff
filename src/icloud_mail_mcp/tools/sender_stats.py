"""Sender statistics MCP tools."""

from icloud_mail_mcp.service import SenderStats
from icloud_mail_mcp.tools._app import mcp
from icloud_mail_mcp.tools._error_handler import handle_tool_errors
from icloud_mail_mcp.tools._service import create_mail_service


def _validate(sample_size: int, max_results: int) -> str | None:
    if sample_size < 1:
        return "Invalid parameter: sample_size must be a positive integer"
    if max_results < 1:
        return "Invalid parameter: max_results must be a positive integer"
    return None


def _render(stats: SenderStats, heading: str) -> str:
    if not stats.sampled:
        return "No emails found."

    lines = [f"{heading} (newest {stats.sampled} of {stats.total} emails):"]
    lines.extend(f"{count:>6}  {address}" for address, count in stats.top_addresses.items())
    lines.append("\nTop domains:")
    lines.extend(f"{count:>6}  {domain}" for domain, count in stats.top_domains.items())
    return "\n".join(lines)


@mcp.tool
@handle_tool_errors
def get_top_senders(mailbox: str = "INBOX", sample_size: int = 500, max_results: int = 20) -> str:
    """Show who sends the most email, by address and by domain.

    Counts over the newest emails only, so large mailboxes stay fast. Use the
    result to pick candidates for bulk_move or bulk_mark_read.

    Args:
        mailbox: Mailbox to analyze (default: INBOX).
        sample_size: Number of newest emails to count over (default: 500).
        max_results: Number of top senders and domains to list (default: 20).
    """
    invalid = _validate(sample_size, max_results)
    if invalid:
        return invalid

    with create_mail_service() as service:
        stats = service.sender_stats(mailbox, sample_size=sample_size, max_results=max_results)
        return _render(stats, f"Top senders in {mailbox}")


@mcp.tool
@handle_tool_errors
def get_unread_senders(
    mailbox: str = "INBOX", sample_size: int = 500, max_results: int = 20
) -> str:
    """Show who sends the most unread email, by address and by domain.

    Args:
        mailbox: Mailbox to analyze (default: INBOX).
        sample_size: Number of newest unread emails to count over (default: 500).
        max_results: Number of top senders and domains to list (default: 20).
    """
    invalid = _validate(sample_size, max_results)
    if invalid:
        return invalid

    with create_mail_service() as service:
        stats = service.sender_stats(
            mailbox, sample_size=sample_size, max_results=max_results, unread_only=True
        )
        return _render(stats, f"Top unread senders in {mailbox}")
