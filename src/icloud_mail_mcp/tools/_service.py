"""Shared service creation helpers for tools."""

from functools import lru_cache

from icloud_mail_mcp.config import Settings, get_settings_eager
from icloud_mail_mcp.email.connectors.imap import IMAPConnector
from icloud_mail_mcp.journal import SessionJournal
from icloud_mail_mcp.paths import get_journal_path, get_manifest_path
from icloud_mail_mcp.safemove.controller import MoveController
from icloud_mail_mcp.safemove.manifest import FileManifestStore
from icloud_mail_mcp.service import MailService


@lru_cache
def get_settings() -> Settings:
    """Get or load the settings singleton.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    return get_settings_eager()


def get_manifest_store() -> FileManifestStore:
    """Manifest store at the configured state directory."""
    settings = get_settings()
    return FileManifestStore(
        get_manifest_path(settings.state_dir),
        chunk_size=settings.move.chunk_size,
        history_limit=settings.move.history_limit,
    )


def create_mail_service() -> MailService:
    """Create a MailService for the configured iCloud account.

    Raises:
        ConfigError: If IMAP credentials are missing.
    """
    settings = get_settings()
    connector = IMAPConnector(settings.imap_config())
    return MailService(connector, manifest=get_manifest_store(), move_config=settings.move)


def get_move_controller() -> MoveController:
    """Controller for status and abandon; needs no mail-store connection."""
    return MoveController(get_manifest_store())


def get_journal() -> SessionJournal:
    return SessionJournal(get_journal_path(get_settings().state_dir))
