"""Agent-facing search filters and their translation to IMAP search criteria."""

from datetime import date

from imap_tools import AND, OR, H
from imap_tools.query import LogicOperator
from pydantic import BaseModel, Field, field_validator


class SearchFilters(BaseModel):
    """Optional filters shared by the search, count, move and flag tools.

    All filters are combined with AND. An empty filter set matches every
    message in the folder.
    """

    sender: str | None = Field(default=None, description="Exact sender email address")
    domain: str | None = Field(default=None, description="Any sender from this domain")
    subject: str | None = Field(default=None, description="Keyword to match in the subject")
    before: date | None = Field(default=None, description="Only emails before this date")
    since: date | None = Field(default=None, description="Only emails on or after this date")
    unread: bool | None = Field(default=None, description="True = unread only, False = read only")
    flagged: bool | None = Field(default=None, description="True = flagged only, False = unflagged")
    larger: int | None = Field(default=None, ge=0, description="Larger than this size in KB")
    smaller: int | None = Field(default=None, ge=0, description="Smaller than this size in KB")
    has_attachment: bool = Field(default=False, description="Only emails with attachments")

    @field_validator("domain")
    @classmethod
    def _strip_at(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.lstrip("@") or None

    def is_empty(self) -> bool:
        """Return True if no filter is set."""
        return not self.model_dump(exclude_defaults=True)

    def to_criteria(self) -> LogicOperator:
        """Build an imap-tools criteria object from the filters."""
        kwargs: dict[str, object] = {}
        # A domain match is broader than an exact sender and wins when both are given
        if self.domain:
            kwargs["from_"] = self.domain
        elif self.sender:
            kwargs["from_"] = self.sender
        if self.subject:
            kwargs["subject"] = self.subject
        if self.before:
            kwargs["date_lt"] = self.before
        if self.since:
            kwargs["date_gte"] = self.since
        if self.unread is not None:
            kwargs["seen"] = not self.unread
        if self.flagged is not None:
            kwargs["flagged"] = self.flagged
        if self.larger:
            kwargs["size_gt"] = self.larger * 1024
        if self.smaller:
            kwargs["size_lt"] = self.smaller * 1024
        if self.has_attachment:
            kwargs["header"] = H("Content-Type", "multipart/mixed")

        if not kwargs:
            return AND(all=True)
        return AND(**kwargs)


def text_search_criteria(query: str, filters: SearchFilters) -> LogicOperator:
    """Match `query` in subject, sender or body, narrowed by `filters`."""
    text = OR(subject=query, from_=query, body=query)
    if filters.is_empty():
        return AND(text)
    return AND(text, filters.to_criteria())


def uid_criteria(uid: int) -> LogicOperator:
    """Match a single message by UID."""
    return AND(uid=str(uid))
