"""Abstract base class for mail-store connectors."""

from abc import ABC, abstractmethod
from types import TracebackType

from icloud_mail_mcp.email.models import (
    Email,
    EmailSummary,
    Folder,
    FolderStatus,
    MessageMeta,
)


class BaseConnector(ABC):
    """Abstract base class defining the mail-store primitives.

    UIDs are passed around as strings and are only meaningful within the
    folder they were obtained from.
    """

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the email server."""
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Close connection to the email server."""
        ...

    def reconnect(self) -> None:
        """Drop the current session and open a new one.

        Used after a connection fault; `disconnect` must tolerate a session
        that is already dead.
        """
        self.disconnect()
        self.connect()

    @abstractmethod
    def list_folders(self) -> list[Folder]:
        """List all available folders/mailboxes."""
        ...

    @abstractmethod
    def folder_exists(self, folder: str) -> bool:
        """Return True if the folder exists on the server."""
        ...

    @abstractmethod
    def create_folder(self, folder: str) -> None:
        """Create a folder."""
        ...

    @abstractmethod
    def rename_folder(self, folder: str, new_name: str) -> None:
        """Rename a folder."""
        ...

    @abstractmethod
    def delete_folder(self, folder: str) -> None:
        """Delete a folder."""
        ...

    @abstractmethod
    def folder_status(self, folder: str) -> FolderStatus:
        """Get aggregate counts (total, unseen, recent) for a folder."""
        ...

    @abstractmethod
    def open_folder(self, folder: str) -> int:
        """Select a folder and return the number of messages it holds."""
        ...

    @abstractmethod
    def search(self, folder: str, criteria: object) -> list[str]:
        """Search a folder.

        Args:
            folder: Folder to search.
            criteria: imap-tools criteria object or raw IMAP search string.

        Returns:
            Matching UIDs in ascending order.
        """
        ...

    @abstractmethod
    def fetch_metadata(self, folder: str, uids: list[str]) -> list[MessageMeta]:
        """Fetch envelope metadata for the given UIDs.

        UIDs that no longer exist are silently absent from the result.
        """
        ...

    @abstractmethod
    def fetch_recent_metadata(self, folder: str, count: int) -> list[MessageMeta]:
        """Fetch envelope metadata for the `count` most recent messages of a folder."""
        ...

    @abstractmethod
    def fetch_summaries(self, folder: str, uids: list[str]) -> list[EmailSummary]:
        """Fetch list-view summaries for the given UIDs, newest first."""
        ...

    @abstractmethod
    def get_email(self, folder: str, uid: int) -> Email | None:
        """Fetch full email content by UID, or None if not found."""
        ...

    @abstractmethod
    def copy(self, folder: str, uids: list[str], target_folder: str) -> None:
        """Copy messages into another folder. The source is left untouched."""
        ...

    @abstractmethod
    def delete(self, folder: str, uids: list[str]) -> None:
        """Delete (and expunge) messages from a folder."""
        ...

    @abstractmethod
    def set_flag(self, folder: str, uids: list[str], flag: str, value: bool) -> None:
        """Add (`value=True`) or remove a flag such as \\Seen or \\Flagged."""
        ...

    def __enter__(self) -> "BaseConnector":
        """Context manager entry - connect to server."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit - disconnect from server."""
        self.disconnect()
