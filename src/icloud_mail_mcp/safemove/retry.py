"""Retry policy for mail-store round trips.

Only faults that are known to clear up on their own are retried. Anything
else (unknown folder, bad credentials, protocol errors) propagates on the
first attempt so misconfiguration never looks like slowness.
"""

import imaplib
import socket
import ssl
import time
from collections.abc import Callable
from typing import TypeVar

import structlog

from icloud_mail_mcp.email.connectors.base import BaseConnector

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_SECONDS = 2.0

# Exception types that always indicate a transport-level fault
TRANSIENT_EXCEPTIONS: tuple[type[BaseException], ...] = (
    ConnectionResetError,
    ConnectionRefusedError,
    ConnectionAbortedError,
    BrokenPipeError,
    TimeoutError,
    socket.timeout,
    ssl.SSLEOFError,
    EOFError,
    imaplib.IMAP4.abort,
)

# Lower-cased message fragments of faults that clear up on retry, including
# server rejections that iCloud returns spuriously under load
TRANSIENT_MESSAGE_MARKERS: tuple[str, ...] = (
    "econnreset",
    "connection reset",
    "econnrefused",
    "connection refused",
    "etimedout",
    "timed out",
    "timeout",
    "epipe",
    "broken pipe",
    "socket error: eof",
    "unexpected eof",
    "connection closed",
    "connection lost",
    "too many connections",
    "too many simultaneous connections",
    "maximum number of connections",
    "connection pool",
    "command failed",
    "[unavailable]",
    "server unavailable",
    "server busy",
    "try again",
)

# Faults after which the current session cannot be reused
CONNECTION_FAULT_EXCEPTIONS: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    socket.timeout,
    ssl.SSLEOFError,
    EOFError,
    imaplib.IMAP4.abort,
)

CONNECTION_FAULT_MARKERS: tuple[str, ...] = (
    "econnreset",
    "connection reset",
    "etimedout",
    "timed out",
    "epipe",
    "broken pipe",
    "socket error",
    "unexpected eof",
    "connection closed",
    "connection lost",
)


def is_transient(exc: BaseException) -> bool:
    """Return True if `exc` is worth retrying."""
    if isinstance(exc, TRANSIENT_EXCEPTIONS):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in TRANSIENT_MESSAGE_MARKERS)


def is_connection_fault(exc: BaseException) -> bool:
    """Return True if `exc` means the session itself is gone and must be reopened.

    Server-side rejections (busy, unavailable, too many connections) leave the
    session usable and are not connection faults.
    """
    if isinstance(exc, CONNECTION_FAULT_EXCEPTIONS):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in CONNECTION_FAULT_MARKERS)


def with_retry(
    label: str,
    action: Callable[[], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
    on_retry: Callable[[Exception], None] | None = None,
) -> T:
    """Run `action`, retrying transient failures with linear backoff.

    Waits `attempt * backoff_seconds` before each retry (2s, 4s, ... by
    default). Non-transient failures and the failure of the last attempt
    are re-raised unchanged.

    `on_retry` runs with the previous failure right before each retry, as
    part of that attempt: a transient failure inside it uses up the attempt
    like a failure of `action` would.

    Args:
        label: Short name of the operation, used in log events.
        action: Zero-argument callable doing one round trip.
        max_attempts: Total number of attempts, including the first.
        backoff_seconds: Base delay multiplied by the attempt number.
        on_retry: Recovery step before a retry, e.g. reopening a dropped session.

    Returns:
        Whatever `action` returns.
    """
    attempt = 1
    previous: Exception | None = None
    while True:
        try:
            if previous is not None and on_retry is not None:
                on_retry(previous)
            return action()
        except Exception as e:
            if not is_transient(e) or attempt >= max_attempts:
                raise
            delay = attempt * backoff_seconds
            logger.warning(
                "retrying",
                label=label,
                attempt=attempt,
                max_attempts=max_attempts,
                delay_seconds=delay,
                error=str(e) or type(e).__name__,
            )
            time.sleep(delay)
            attempt += 1
            previous = e


def reconnect_on_fault(connector: BaseConnector) -> Callable[[Exception], None]:
    """Build an `on_retry` hook that reopens `connector` after a connection fault."""

    def _recover(exc: Exception) -> None:
        if is_connection_fault(exc):
            logger.info("reconnecting", error=str(exc) or type(exc).__name__)
            connector.reconnect()

    return _recover
