"""MCP server entry point for icloud-mail-mcp."""

import logging
import os

from icloud_mail_mcp.exceptions import ConfigError
from icloud_mail_mcp.logging_config import configure_logging
from icloud_mail_mcp.tools import mcp
from icloud_mail_mcp.tools._service import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the MCP server.

    Uses stdio by default. Set ICLOUD_MAIL_TRANSPORT=http to serve over HTTP on
    ICLOUD_MAIL_HTTP_HOST (default 0.0.0.0) and ICLOUD_MAIL_HTTP_PORT (default 8000).
    """
    try:
        configure_logging(get_settings().log_level)
    except ConfigError as e:
        # Tools report the same error on every call
        configure_logging()
        logger.error("%s", e)

    transport = os.environ.get("ICLOUD_MAIL_TRANSPORT", "stdio")
    if transport == "http":
        host = os.environ.get("ICLOUD_MAIL_HTTP_HOST", "0.0.0.0")
        port = int(os.environ.get("ICLOUD_MAIL_HTTP_PORT", "8000"))
        logger.info("Serving over HTTP on %s:%d", host, port)
        mcp.run(transport="http", host=host, port=port)
    else:
        mcp.run()


if __name__ == "__main__":
    main()
