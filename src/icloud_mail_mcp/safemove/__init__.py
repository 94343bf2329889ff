"""Safe-move protocol: verified, resumable bulk moves between folders."""

from icloud_mail_mcp.safemove.controller import MoveController
from icloud_mail_mcp.safemove.executor import ChunkExecutor
from icloud_mail_mcp.safemove.fingerprint import fingerprint, identity_key
from icloud_mail_mcp.safemove.manifest import (
    FileManifestStore,
    ManifestStore,
    MemoryManifestStore,
)
from icloud_mail_mcp.safemove.models import (
    AbandonResult,
    Chunk,
    ChunkOutcome,
    ChunkStatus,
    Fingerprint,
    Manifest,
    MoveResult,
    MoveStatusReport,
    Operation,
    OperationRecord,
    OperationStatus,
)
from icloud_mail_mcp.safemove.retry import (
    is_connection_fault,
    is_transient,
    reconnect_on_fault,
    with_retry,
)

__all__ = [
    "AbandonResult",
    "Chunk",
    "ChunkExecutor",
    "ChunkOutcome",
    "ChunkStatus",
    "FileManifestStore",
    "Fingerprint",
    "Manifest",
    "ManifestStore",
    "MemoryManifestStore",
    "MoveController",
    "MoveResult",
    "MoveStatusReport",
    "Operation",
    "OperationRecord",
    "OperationStatus",
    "fingerprint",
    "identity_key",
    "is_connection_fault",
    "is_transient",
    "reconnect_on_fault",
    "with_retry",
]
