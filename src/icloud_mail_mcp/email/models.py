"""Email data models."""

from datetime import datetime

from pydantic import BaseModel


class EmailAddress(BaseModel):
    """Parsed email address with optional display name."""

    name: str | None = None
    address: str

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.address}>"
        return self.address


class Folder(BaseModel):
    """IMAP folder/mailbox."""

    name: str
    delimiter: str = "/"
    flags: list[str] = []


class FolderStatus(BaseModel):
    """Aggregate message counts for a folder."""

    name: str
    total: int = 0
    unseen: int = 0
    recent: int = 0


class MessageMeta(BaseModel):
    """Envelope metadata for one message, as needed to fingerprint it.

    `date` is None when the Date header is missing or unparseable.
    """

    uid: str
    sender: str = ""
    subject: str = ""
    date: datetime | None = None
    message_id: str | None = None
    size: int | None = None


class EmailSummary(BaseModel):
    """Lightweight email representation for list views."""

    uid: int
    folder: str
    subject: str
    sender: EmailAddress
    date: datetime
    has_attachments: bool = False
    is_seen: bool = False
    is_flagged: bool = False


class Email(EmailSummary):
    """Full email content."""

    to: list[EmailAddress] = []
    cc: list[EmailAddress] = []
    body_plain: str | None = None
    body_html: str | None = None
    flags: list[str] = []
    message_id: str | None = None
