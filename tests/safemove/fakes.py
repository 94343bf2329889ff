"""In-memory mail store for exercising the safe-move protocol."""

import imaplib
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from icloud_mail_mcp.email.connectors.base import BaseConnector
from icloud_mail_mcp.email.models import (
    Email,
    EmailSummary,
    Folder,
    FolderStatus,
    MessageMeta,
)
from icloud_mail_mcp.safemove.retry import is_connection_fault

BASE_DATE = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_messages(count: int, start: int = 0) -> list[MessageMeta]:
    return [
        MessageMeta(
            uid=str(i + 1),
            sender=f"sender{i}@example.com",
            subject=f"Newsletter {i}",
            date=BASE_DATE + timedelta(minutes=i),
            message_id=f"<msg{i}@example.com>",
        )
        for i in range(start, start + count)
    ]


class FakeMailStore(BaseConnector):
    """Folders of MessageMeta with per-folder UID counters.

    Knobs for failure injection:
        lost: Message-IDs that are silently never copied.
        lost_once: Message-IDs silently dropped on their next copy only.
        max_reliable_batch: Copies larger than this silently drop their last message.
        failures: Method name -> exceptions to raise on the next calls, in order.
            A connection fault also kills the session: every later call fails
            until connect() is called again.
        on_copy: Called after every copy.
    """

    def __init__(self, folders: dict[str, list[MessageMeta]] | None = None) -> None:
        self.folders: dict[str, list[MessageMeta]] = {}
        self._next_uid: dict[str, int] = {}
        for name, messages in (folders or {}).items():
            self.folders[name] = list(messages)
            self._next_uid[name] = max((int(m.uid) for m in messages), default=0) + 1
        self.lost: set[str] = set()
        self.lost_once: set[str] = set()
        self.max_reliable_batch: int | None = None
        self.failures: dict[str, list[Exception]] = {}
        self.on_copy: Callable[[], None] | None = None
        self.calls: list[tuple[str, str, list[str]]] = []
        self.premature_deletes: list[str] = []
        self.connected = False
        self.session_dead = False
        self.connections = 0

    def _maybe_fail(self, method: str) -> None:
        if self.session_dead:
            raise imaplib.IMAP4.abort("socket error: [Errno 32] Broken pipe")
        pending = self.failures.get(method)
        if pending:
            exc = pending.pop(0)
            if is_connection_fault(exc):
                self.session_dead = True
            raise exc

    def _folder(self, folder: str) -> list[MessageMeta]:
        if folder not in self.folders:
            raise RuntimeError(f"NO [NONEXISTENT] Unknown Mailbox: {folder}")
        return self.folders[folder]

    def message_ids(self, folder: str) -> list[str | None]:
        return [m.message_id for m in self.folders.get(folder, [])]

    def connect(self) -> None:
        self.connected = True
        self.session_dead = False
        self.connections += 1

    def disconnect(self) -> None:
        self.connected = False

    def list_folders(self) -> list[Folder]:
        return [Folder(name=name) for name in self.folders]

    def folder_exists(self, folder: str) -> bool:
        return folder in self.folders

    def create_folder(self, folder: str) -> None:
        self.folders.setdefault(folder, [])
        self._next_uid.setdefault(folder, 1)

    def rename_folder(self, folder: str, new_name: str) -> None:
        self.folders[new_name] = self.folders.pop(folder)
        self._next_uid[new_name] = self._next_uid.pop(folder)

    def delete_folder(self, folder: str) -> None:
        del self.folders[folder]

    def folder_status(self, folder: str) -> FolderStatus:
        return FolderStatus(name=folder, total=len(self._folder(folder)))

    def open_folder(self, folder: str) -> int:
        self._maybe_fail("open_folder")
        return len(self._folder(folder))

    def search(self, folder: str, criteria: object) -> list[str]:
        self._maybe_fail("search")
        return [m.uid for m in self._folder(folder)]

    def fetch_metadata(self, folder: str, uids: list[str]) -> list[MessageMeta]:
        self._maybe_fail("fetch_metadata")
        self.calls.append(("fetch_metadata", folder, list(uids)))
        wanted = set(uids)
        return [m for m in self._folder(folder) if m.uid in wanted]

    def fetch_recent_metadata(self, folder: str, count: int) -> list[MessageMeta]:
        self._maybe_fail("fetch_recent_metadata")
        if count <= 0:
            return []
        return list(reversed(self._folder(folder)[-count:]))

    def fetch_summaries(self, folder: str, uids: list[str]) -> list[EmailSummary]:
        raise NotImplementedError

    def get_email(self, folder: str, uid: int) -> Email | None:
        raise NotImplementedError

    def copy(self, folder: str, uids: list[str], target_folder: str) -> None:
        self._maybe_fail("copy")
        self.calls.append(("copy", folder, list(uids)))
        wanted = set(uids)
        batch = [m for m in self._folder(folder) if m.uid in wanted]
        if self.max_reliable_batch is not None and len(batch) > self.max_reliable_batch:
            batch = batch[:-1]
        target = self._folder(target_folder)
        for meta in batch:
            if meta.message_id in self.lost:
                continue
            if meta.message_id in self.lost_once:
                self.lost_once.discard(meta.message_id)
                continue
            uid = self._next_uid[target_folder]
            self._next_uid[target_folder] += 1
            target.append(meta.model_copy(update={"uid": str(uid)}))
        if self.on_copy is not None:
            self.on_copy()

    def delete(self, folder: str, uids: list[str]) -> None:
        self._maybe_fail("delete")
        self.calls.append(("delete", folder, list(uids)))
        wanted = set(uids)
        source = self._folder(folder)
        elsewhere = {
            m.message_id for name, msgs in self.folders.items() if name != folder for m in msgs
        }
        for meta in source:
            if meta.uid in wanted and meta.message_id not in elsewhere:
                self.premature_deletes.append(meta.uid)
        self.folders[folder] = [m for m in source if m.uid not in wanted]

    def set_flag(self, folder: str, uids: list[str], flag: str, value: bool) -> None:
        raise NotImplementedError

    def calls_to(self, method: str) -> list[list[str]]:
        return [uids for name, _, uids in self.calls if name == method]


