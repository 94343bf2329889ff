"""An MCP server for iCloud Mail with verified, resumable bulk moves."""

from icloud_mail_mcp.config import MoveConfig, Settings
from icloud_mail_mcp.email.connectors.base import BaseConnector
from icloud_mail_mcp.email.connectors.imap import IMAPConnector
from icloud_mail_mcp.email.models import Email, EmailSummary, Folder, FolderStatus
from icloud_mail_mcp.email.search import SearchFilters
from icloud_mail_mcp.exceptions import (
    ConfigError,
    ConflictError,
    IcloudMailError,
    MoveInterruptedError,
    OperationNotActiveError,
)
from icloud_mail_mcp.safemove import (
    FileManifestStore,
    MemoryManifestStore,
    MoveController,
    MoveResult,
)
from icloud_mail_mcp.service import MailService

__version__ = "0.1.0"

__all__ = [
    "BaseConnector",
    "ConfigError",
    "ConflictError",
    "Email",
    "EmailSummary",
    "FileManifestStore",
    "Folder",
    "FolderStatus",
    "IMAPConnector",
    "IcloudMailError",
    "MailService",
    "MemoryManifestStore",
    "MoveConfig",
    "MoveController",
    "MoveInterruptedError",
    "MoveResult",
    "OperationNotActiveError",
    "SearchFilters",
    "Settings",
]
