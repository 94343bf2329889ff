"""Text rendering shared by the tools that list emails."""

from icloud_mail_mcp.email.models import EmailSummary


def format_summary(email: EmailSummary) -> str:
    """One line per email: UID, date, sender, subject and state markers."""
    date_str = email.date.strftime("%Y-%m-%d %H:%M")
    attachment_marker = " [+]" if email.has_attachments else ""
    seen_marker = "" if email.is_seen else " [UNREAD]"
    flag_marker = " [FLAGGED]" if email.is_flagged else ""
    return (
        f"[{email.uid}] {date_str} | {email.sender.address} | "
        f"{email.subject}{attachment_marker}{seen_marker}{flag_marker}"
    )


def format_listing(emails: list[EmailSummary], total: int) -> str:
    """Render the newest matches, noting when more matched than are shown."""
    if not emails:
        return "No emails found."
    lines = [format_summary(email) for email in emails]
    if len(emails) < total:
        lines.append(f"\nShowing {len(emails)} of {total} matching emails.")
    return "\n".join(lines)
