"""Mail-store connectors for icloud-mail-mcp."""

from icloud_mail_mcp.email.connectors.base import BaseConnector
from icloud_mail_mcp.email.connectors.config import IMAPConfig
from icloud_mail_mcp.email.connectors.imap import IMAPConnector

__all__ = [
    "BaseConnector",
    "IMAPConfig",
    "IMAPConnector",
]
