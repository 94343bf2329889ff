"""Connector configuration models."""

from pydantic import BaseModel, SecretStr


class IMAPConfig(BaseModel):
    """IMAP server configuration."""

    host: str = "imap.mail.me.com"
    port: int = 993
    username: str
    password: SecretStr
    ssl: bool = True
