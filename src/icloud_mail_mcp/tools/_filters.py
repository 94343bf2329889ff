"""Filter arguments shared by the search, count, move and flag tools."""

from datetime import date

from icloud_mail_mcp.email.search import SearchFilters


def build_filters(
    sender: str | None = None,
    domain: str | None = None,
    subject: str | None = None,
    before: date | str | None = None,
    since: date | str | None = None,
    unread: bool | None = None,
    flagged: bool | None = None,
    larger: int | None = None,
    smaller: int | None = None,
    has_attachment: bool = False,
) -> SearchFilters:
    """Validate tool filter arguments.

    Raises:
        ValueError: If a filter value is invalid (e.g. an unparseable date).
    """
    return SearchFilters(
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


def describe_filters(filters: SearchFilters) -> str:
    """One-line rendering of the filters that are set."""
    parts = [f"{k}={v}" for k, v in filters.model_dump(exclude_defaults=True).items()]
    return ", ".join(parts) if parts else "all emails"
