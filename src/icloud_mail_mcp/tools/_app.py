"""Shared FastMCP application instance."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastmcp import FastMCP

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Warn at startup about a move left in progress by an earlier run."""
    from icloud_mail_mcp.tools._service import get_manifest_store

    try:
        current = get_manifest_store().read_manifest().current
    except Exception:
        logger.exception("Could not read the move manifest at startup")
        current = None
    if current is not None and not current.status.is_terminal:
        logger.warning(
            "Move %s (%s -> %s) was left in progress: %d of %d moved. "
            "Call get_move_status to inspect it or abandon_move to release it.",
            current.operation_id,
            current.source,
            current.target,
            current.summary.moved,
            current.total,
        )
    yield


# Create the shared FastMCP server instance
mcp = FastMCP(name="icloud-mail-mcp", lifespan=_lifespan)
