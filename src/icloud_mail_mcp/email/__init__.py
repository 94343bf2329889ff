"""Email connectors and models for icloud-mail-mcp."""

from icloud_mail_mcp.email.connectors.base import BaseConnector
from icloud_mail_mcp.email.connectors.config import IMAPConfig
from icloud_mail_mcp.email.connectors.imap import IMAPConnector
from icloud_mail_mcp.email.models import (
    Email,
    EmailAddress,
    EmailSummary,
    Folder,
    FolderStatus,
    MessageMeta,
)
from icloud_mail_mcp.email.search import SearchFilters

__all__ = [
    "BaseConnector",
    "Email",
    "EmailAddress",
    "EmailSummary",
    "Folder",
    "FolderStatus",
    "IMAPConfig",
    "IMAPConnector",
    "MessageMeta",
    "SearchFilters",
]
