"""Common error handling for MCP tools."""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from imap_tools import ImapToolsError

from icloud_mail_mcp.exceptions import (
    ConfigError,
    ConflictError,
    MoveInterruptedError,
    OperationNotActiveError,
)

logger = logging.getLogger(__name__)


def handle_tool_errors(func: Callable[..., str]) -> Callable[..., str]:
    """Wrap an MCP tool function to turn exceptions into one-line messages."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> str:
        try:
            return func(*args, **kwargs)
        except ConflictError as e:
            return f"Move refused: {e}"
        except MoveInterruptedError as e:
            return f"Move interrupted: {e}"
        except OperationNotActiveError as e:
            return f"Move stopped: {e}"
        except ConfigError as e:
            return f"Configuration error: {e}"
        except ImapToolsError as e:
            return f"Email server error: {e}"
        except ValueError as e:
            return f"Invalid input: {e}"
        except RuntimeError as e:
            return f"Error: {e}"
        except TimeoutError:
            return "Connection timed out. The email server did not respond."
        except ConnectionError as e:
            return f"Could not connect to email server: {e}"
        except PermissionError as e:
            return f"Cannot access local state: {e}"
        except OSError as e:
            return f"Network error: {e}"
        except Exception:
            logger.exception("Unexpected error in tool %s", func.__name__)
            return "An unexpected error occurred. Check the server logs for details."

    return wrapper
