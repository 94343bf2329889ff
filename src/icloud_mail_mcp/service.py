"""Mail service that orchestrates the connector and the safe-move core."""

import logging
import math
from collections import Counter
from types import TracebackType

from pydantic import BaseModel

from icloud_mail_mcp.config import MoveConfig
from icloud_mail_mcp.email.connectors.base import BaseConnector
from icloud_mail_mcp.email.models import Email, EmailSummary, Folder, FolderStatus
from icloud_mail_mcp.email.search import SearchFilters, text_search_criteria, uid_criteria
from icloud_mail_mcp.safemove.controller import MoveController
from icloud_mail_mcp.safemove.executor import ChunkExecutor
from icloud_mail_mcp.safemove.manifest import ManifestStore
from icloud_mail_mcp.safemove.models import MoveResult
from icloud_mail_mcp.safemove.retry import reconnect_on_fault, with_retry

logger = logging.getLogger(__name__)

SEEN_FLAG = "\\Seen"
FLAGGED_FLAG = "\\Flagged"


class SearchPage(BaseModel):
    """Newest matches of a search, plus the total number of matches."""

    total: int
    emails: list[EmailSummary]


class MailPage(BaseModel):
    """One page of a folder listing, newest first."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool
    emails: list[EmailSummary]


class SenderStats(BaseModel):
    """Most frequent senders among the newest messages of a folder.

    `top_addresses` and `top_domains` map a sender to its message count,
    most frequent first.
    """

    total: int
    sampled: int
    top_addresses: dict[str, int]
    top_domains: dict[str, int]


class MovePreview(BaseModel):
    """What a move would do, without doing it."""

    dry_run: bool = True
    would_move: int
    source: str
    target: str


class MailService:
    """Service layer for mail operations.

    The thin read/flag/folder operations go straight to the connector. Moves
    resolve their UID set once and are handed to the move controller, which
    needs a manifest store.
    """

    def __init__(
        self,
        connector: BaseConnector,
        manifest: ManifestStore | None = None,
        move_config: MoveConfig | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            connector: Mail-store connector to use for operations.
            manifest: Manifest store backing safe moves. Required for `bulk_move`
                and `move_email`.
            move_config: Safe-move tuning (defaults apply when omitted).
        """
        self._connector = connector
        self._manifest = manifest
        self._move_config = move_config or MoveConfig()

    def connect(self) -> None:
        """Connect to the email server."""
        self._connector.connect()

    def disconnect(self) -> None:
        """Disconnect from the email server."""
        self._connector.disconnect()

    def __enter__(self) -> "MailService":
        """Enter context manager, connecting to the server."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager, disconnecting from the server."""
        self.disconnect()

    def _search(self, folder: str, criteria: object) -> list[str]:
        return with_retry(
            "search",
            lambda: self._connector.search(folder, criteria),
            max_attempts=self._move_config.max_attempts,
            backoff_seconds=self._move_config.backoff_seconds,
            on_retry=reconnect_on_fault(self._connector),
        )

    def summary(self, folder: str = "INBOX") -> FolderStatus:
        """Total, unread and recent counts for a folder."""
        return self._connector.folder_status(folder)

    def list_folders(self) -> list[Folder]:
        return self._connector.list_folders()

    def count(self, folder: str, filters: SearchFilters) -> int:
        """Count messages in `folder` matching `filters`."""
        return len(self._search(folder, filters.to_criteria()))

    def search(
        self,
        folder: str,
        filters: SearchFilters,
        query: str | None = None,
        limit: int = 10,
    ) -> SearchPage:
        """Search a folder and return the newest `limit` matches.

        Args:
            folder: Folder to search.
            filters: Structured filters, combined with AND.
            query: Free text matched against subject, sender and body.
            limit: Maximum number of summaries to return.
        """
        if query:
            criteria = text_search_criteria(query, filters)
        else:
            criteria = filters.to_criteria()
        uids = self._search(folder, criteria)
        newest = uids[-limit:] if limit > 0 else []
        emails = self._connector.fetch_summaries(folder, newest)
        return SearchPage(total=len(uids), emails=emails)

    def read_page(
        self,
        folder: str,
        page: int = 1,
        limit: int = 10,
        unread_only: bool = False,
    ) -> MailPage:
        """Page through a folder newest first; page 1 holds the newest `limit` messages."""
        filters = SearchFilters(unread=True) if unread_only else SearchFilters()
        uids = self._search(folder, filters.to_criteria())
        total = len(uids)
        end = total - (page - 1) * limit
        window = uids[max(end - limit, 0) : end] if end > 0 else []
        total_pages = math.ceil(total / limit) if limit > 0 else 0
        return MailPage(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_more=page < total_pages,
            emails=self._connector.fetch_summaries(folder, window),
        )

    def sender_stats(
        self,
        folder: str,
        sample_size: int = 500,
        max_results: int = 20,
        unread_only: bool = False,
    ) -> SenderStats:
        """Count senders and sender domains over the newest `sample_size` messages."""
        filters = SearchFilters(unread=True) if unread_only else SearchFilters()
        uids = self._search(folder, filters.to_criteria())
        sample = uids[-sample_size:] if sample_size > 0 else []
        metas = self._connector.fetch_metadata(folder, sample)

        addresses: Counter[str] = Counter()
        domains: Counter[str] = Counter()
        for meta in metas:
            address = meta.sender.strip().lower()
            if not address:
                continue
            addresses[address] += 1
            domains[address.rpartition("@")[2]] += 1

        return SenderStats(
            total=len(uids),
            sampled=len(metas),
            top_addresses=dict(addresses.most_common(max_results)),
            top_domains=dict(domains.most_common(max_results)),
        )

    def get_email(self, folder: str, uid: int) -> Email | None:
        """Get full email content by UID, or None if not found."""
        return self._connector.get_email(folder, uid)

    def _exists(self, folder: str, uid: int) -> bool:
        return bool(self._search(folder, uid_criteria(uid)))

    def flag_email(self, folder: str, uid: int, flagged: bool) -> bool:
        """Flag or unflag one message. Returns False if it does not exist."""
        if not self._exists(folder, uid):
            return False
        self._connector.set_flag(folder, [str(uid)], FLAGGED_FLAG, flagged)
        return True

    def mark_email_read(self, folder: str, uid: int, read: bool) -> bool:
        """Mark one message read or unread. Returns False if it does not exist."""
        if not self._exists(folder, uid):
            return False
        self._connector.set_flag(folder, [str(uid)], SEEN_FLAG, read)
        return True

    def bulk_flag(self, folder: str, filters: SearchFilters, flagged: bool) -> int:
        """Set or clear the flagged state on every match. Returns the number changed."""
        uids = self._search(folder, filters.to_criteria())
        if uids:
            self._connector.set_flag(folder, uids, FLAGGED_FLAG, flagged)
        return len(uids)

    def mark_read(self, folder: str, sender: str | None = None, read: bool = True) -> int:
        """Mark every unread (or, with `read=False`, every read) message.

        Args:
            folder: Folder to update.
            sender: Only messages from this sender.
            read: Target state.

        Returns:
            Number of messages whose state changed.
        """
        filters = SearchFilters(sender=sender, unread=read)
        uids = self._search(folder, filters.to_criteria())
        if uids:
            self._connector.set_flag(folder, uids, SEEN_FLAG, read)
        return len(uids)

    def create_folder(self, folder: str) -> None:
        self._connector.create_folder(folder)

    def rename_folder(self, folder: str, new_name: str) -> None:
        self._connector.rename_folder(folder, new_name)

    def delete_folder(self, folder: str) -> None:
        self._connector.delete_folder(folder)

    def _controller(self) -> MoveController:
        if self._manifest is None:
            raise RuntimeError("MailService was created without a manifest store")
        config = self._move_config
        executor = ChunkExecutor(
            self._connector,
            self._manifest,
            attempt_sizes=config.attempt_sizes,
            verify_margin=config.verify_margin,
            max_attempts=config.max_attempts,
            backoff_seconds=config.backoff_seconds,
        )
        return MoveController(self._manifest, executor)

    def bulk_move(
        self,
        filters: SearchFilters,
        target: str,
        source: str = "INBOX",
        dry_run: bool = False,
    ) -> MoveResult | MovePreview:
        """Move every message in `source` matching `filters` to `target`.

        The source is searched exactly once; the move then works on that
        fixed UID set. A running operation is refused before the search, so
        a conflicting call touches nothing. A missing target folder is
        created first, and a failure to create it is raised before any
        operation is opened. Dry runs only read and skip the conflict check.

        Raises:
            ValueError: If source and target are the same folder.
            ConflictError: If another move is in progress.
            MoveInterruptedError: If the move stopped on an unrecoverable error.
        """
        if source == target:
            raise ValueError("source and target folders must differ")

        if dry_run:
            uids = self._search(source, filters.to_criteria())
            return MovePreview(would_move=len(uids), source=source, target=target)

        controller = self._controller()
        controller.ensure_idle()
        uids = self._search(source, filters.to_criteria())
        return self._run_move(controller, source, target, uids)

    def move_email(self, folder: str, uid: int, target: str) -> MoveResult | None:
        """Move one message through the safe-move protocol.

        Returns None if the message does not exist in `folder`.

        Raises:
            ValueError: If source and target are the same folder.
            ConflictError: If another move is in progress.
            MoveInterruptedError: If the move stopped on an unrecoverable error.
        """
        if folder == target:
            raise ValueError("source and target folders must differ")

        controller = self._controller()
        controller.ensure_idle()
        uids = self._search(folder, uid_criteria(uid))
        if not uids:
            return None
        return self._run_move(controller, folder, target, uids)

    def _run_move(
        self, controller: MoveController, source: str, target: str, uids: list[str]
    ) -> MoveResult:
        if uids and not self._connector.folder_exists(target):
            logger.info("Creating missing target folder %s", target)
            self._connector.create_folder(target)
        return controller.move(source, target, uids)
