"""IMAP connector for the mail store using imap-tools."""

import logging
from datetime import datetime

from imap_tools import AND, MailBox, MailBoxUnencrypted, MailMessage
from imap_tools import EmailAddress as IMAPEmailAddress

from icloud_mail_mcp.email.connectors.base import BaseConnector
from icloud_mail_mcp.email.connectors.config import IMAPConfig
from icloud_mail_mcp.email.models import (
    Email,
    EmailAddress,
    EmailSummary,
    Folder,
    FolderStatus,
    MessageMeta,
)

logger = logging.getLogger(__name__)

# Default sender for emails without from address
_DEFAULT_SENDER = EmailAddress(address="unknown@unknown")

# imap-tools substitutes this when the Date header is missing or unparseable
_UNPARSED_DATE = datetime(1900, 1, 1)


def _convert_address(addr: IMAPEmailAddress | None) -> EmailAddress:
    """Convert imap-tools EmailAddress to our EmailAddress model."""
    if addr is None or not addr.email:
        return _DEFAULT_SENDER
    return EmailAddress(name=addr.name or None, address=addr.email)


def _convert_addresses(addrs: tuple[IMAPEmailAddress, ...]) -> list[EmailAddress]:
    """Convert tuple of imap-tools EmailAddress to list of our EmailAddress model."""
    return [
        EmailAddress(name=addr.name or None, address=addr.email) for addr in addrs if addr.email
    ]


def _message_id(msg: MailMessage) -> str | None:
    values = msg.headers.get("message-id", ())
    return values[0].strip() if values and values[0].strip() else None


def _message_date(msg: MailMessage) -> datetime | None:
    if not msg.date_str or msg.date.replace(tzinfo=None) == _UNPARSED_DATE:
        return None
    return msg.date


def _to_meta(msg: MailMessage) -> MessageMeta:
    return MessageMeta(
        uid=msg.uid or "",
        sender=msg.from_ or "",
        subject=msg.subject or "",
        date=_message_date(msg),
        message_id=_message_id(msg),
        size=msg.size_rfc822 or None,
    )


class IMAPConnector(BaseConnector):
    """Connector for an IMAP mail store using imap-tools."""

    def __init__(self, config: IMAPConfig) -> None:
        """Initialize IMAP connector.

        Args:
            config: IMAP server configuration.
        """
        self.config = config
        self._mailbox: MailBox | MailBoxUnencrypted | None = None

    def connect(self) -> None:
        """Establish connection to IMAP server."""
        if self.config.ssl:
            mailbox: MailBox | MailBoxUnencrypted = MailBox(self.config.host, self.config.port)
        else:
            mailbox = MailBoxUnencrypted(self.config.host, self.config.port)

        mailbox.login(
            self.config.username,
            self.config.password.get_secret_value(),
        )
        self._mailbox = mailbox

    def disconnect(self) -> None:
        """Close connection to IMAP server."""
        if self._mailbox:
            try:
                self._mailbox.logout()
            except Exception:
                logger.debug("IMAP logout failed (connection may already be closed)")
            self._mailbox = None

    def _require_mailbox(self) -> MailBox | MailBoxUnencrypted:
        if not self._mailbox:
            raise RuntimeError("Not connected. Call connect() first.")
        return self._mailbox

    def list_folders(self) -> list[Folder]:
        """List all folders/mailboxes."""
        mailbox = self._require_mailbox()

        folders = []
        for folder_info in mailbox.folder.list():
            folders.append(
                Folder(
                    name=folder_info.name,
                    delimiter=folder_info.delim,
                    flags=list(folder_info.flags),
                )
            )
        return folders

    def folder_exists(self, folder: str) -> bool:
        return self._require_mailbox().folder.exists(folder)

    def create_folder(self, folder: str) -> None:
        self._require_mailbox().folder.create(folder)

    def rename_folder(self, folder: str, new_name: str) -> None:
        self._require_mailbox().folder.rename(folder, new_name)

    def delete_folder(self, folder: str) -> None:
        self._require_mailbox().folder.delete(folder)

    def folder_status(self, folder: str) -> FolderStatus:
        """Get message counts without selecting the folder."""
        mailbox = self._require_mailbox()
        status = mailbox.folder.status(folder, ["MESSAGES", "UNSEEN", "RECENT"])
        return FolderStatus(
            name=folder,
            total=status.get("MESSAGES", 0),
            unseen=status.get("UNSEEN", 0),
            recent=status.get("RECENT", 0),
        )

    def open_folder(self, folder: str) -> int:
        """Select a folder and return its message count from the SELECT response."""
        mailbox = self._require_mailbox()
        _, data = mailbox.folder.set(folder)
        try:
            return int(data[0])
        except (TypeError, ValueError, IndexError):
            logger.debug("SELECT response had no message count (folder=%s)", folder)
            return len(mailbox.uids("ALL"))

    def search(self, folder: str, criteria: object) -> list[str]:
        mailbox = self._require_mailbox()
        mailbox.folder.set(folder)
        return mailbox.uids(criteria)

    def fetch_metadata(self, folder: str, uids: list[str]) -> list[MessageMeta]:
        """Fetch header-only metadata for a set of UIDs."""
        if not uids:
            return []
        mailbox = self._require_mailbox()
        mailbox.folder.set(folder)

        metas = []
        for msg in mailbox.fetch(AND(uid=uids), mark_seen=False, headers_only=True, bulk=True):
            if not msg.uid:
                logger.warning("Skipping email with missing UID (subject=%r)", msg.subject)
                continue
            metas.append(_to_meta(msg))
        return metas

    def fetch_recent_metadata(self, folder: str, count: int) -> list[MessageMeta]:
        """Fetch header-only metadata for the newest `count` messages, newest first."""
        if count <= 0:
            return []
        mailbox = self._require_mailbox()
        mailbox.folder.set(folder)

        return [
            _to_meta(msg)
            for msg in mailbox.fetch(
                "ALL",
                limit=count,
                reverse=True,
                mark_seen=False,
                headers_only=True,
                bulk=True,
            )
        ]

    def fetch_summaries(self, folder: str, uids: list[str]) -> list[EmailSummary]:
        if not uids:
            return []
        mailbox = self._require_mailbox()
        mailbox.folder.set(folder)

        summaries = []
        for msg in mailbox.fetch(
            AND(uid=uids), mark_seen=False, reverse=True, headers_only=True, bulk=True
        ):
            if not msg.uid:
                logger.warning("Skipping email with missing UID (subject=%r)", msg.subject)
                continue
            content_type = msg.headers.get("content-type", ("",))[0]
            summaries.append(
                EmailSummary(
                    uid=int(msg.uid),
                    folder=folder,
                    subject=msg.subject or "(no subject)",
                    sender=_convert_address(msg.from_values),
                    date=msg.date,
                    has_attachments=content_type.lower().startswith("multipart/mixed"),
                    is_seen="\\Seen" in msg.flags,
                    is_flagged="\\Flagged" in msg.flags,
                )
            )
        return summaries

    def get_email(self, folder: str, uid: int) -> Email | None:
        """Fetch full email content by UID."""
        mailbox = self._require_mailbox()
        mailbox.folder.set(folder)

        for msg in mailbox.fetch(AND(uid=str(uid)), mark_seen=False):
            if not msg.uid:
                logger.warning("Skipping email with missing UID (subject=%r)", msg.subject)
                continue

            return Email(
                uid=int(msg.uid),
                folder=folder,
                subject=msg.subject or "(no subject)",
                sender=_convert_address(msg.from_values),
                date=msg.date,
                has_attachments=len(msg.attachments) > 0,
                is_seen="\\Seen" in msg.flags,
                is_flagged="\\Flagged" in msg.flags,
                to=_convert_addresses(msg.to_values),
                cc=_convert_addresses(msg.cc_values),
                body_plain=msg.text or None,
                body_html=msg.html or None,
                flags=list(msg.flags),
                message_id=_message_id(msg),
            )

        return None

    def copy(self, folder: str, uids: list[str], target_folder: str) -> None:
        mailbox = self._require_mailbox()
        mailbox.folder.set(folder)
        mailbox.copy(uids, target_folder)

    def delete(self, folder: str, uids: list[str]) -> None:
        mailbox = self._require_mailbox()
        mailbox.folder.set(folder)
        # MailBox.delete sets \Deleted and expunges in one call
        mailbox.delete(uids)

    def set_flag(self, folder: str, uids: list[str], flag: str, value: bool) -> None:
        mailbox = self._require_mailbox()
        mailbox.folder.set(folder)
        mailbox.flag(uids, flag, value)
