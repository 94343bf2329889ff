"""Custom exceptions for icloud-mail-mcp."""

from datetime import datetime


class IcloudMailError(Exception):
    """Base exception for icloud-mail-mcp."""


class ConfigError(IcloudMailError):
    """Raised when there is a configuration error."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        line: int | None = None,
        col: int | None = None,
    ) -> None:
        self.file_path = file_path
        self.line = line
        self.col = col
        full_message = message
        if file_path:
            location = f" in {file_path}"
            if line is not None:
                location += f" at line {line}"
                if col is not None:
                    location += f", column {col}"
            full_message = f"Configuration error{location}: {message}"
        super().__init__(full_message)


class ConflictError(IcloudMailError):
    """Raised when a move is requested while another one is still in progress."""

    def __init__(
        self,
        operation_id: str,
        source: str,
        target: str,
        moved: int,
        total: int,
        started_at: datetime,
    ) -> None:
        self.operation_id = operation_id
        self.source = source
        self.target = target
        self.moved = moved
        self.total = total
        self.started_at = started_at
        super().__init__(
            f"Another move is already in progress ({operation_id}: {source} -> {target}, "
            f"{moved} of {total} emails moved, started {started_at.isoformat()}). "
            "Call get_move_status to inspect it, or abandon_move to release it "
            "before starting a new move."
        )


class OperationNotActiveError(IcloudMailError):
    """Raised when a manifest update targets an operation that is no longer in progress."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(
            f"Cannot {action}: no move operation is in progress "
            "(it may have been abandoned by another process)."
        )


class MoveInterruptedError(IcloudMailError):
    """Raised when a move stops on an error that the retry policy could not absorb."""

    def __init__(
        self,
        operation_id: str,
        source: str,
        moved: int,
        pending: int,
        reason: str,
    ) -> None:
        self.operation_id = operation_id
        self.source = source
        self.moved = moved
        self.pending = pending
        self.reason = reason
        super().__init__(
            f"Move {operation_id} stopped: {reason}. "
            f"{moved} emails moved successfully; {pending} not confirmed moved out of {source}. "
            "Call get_move_status for chunk-level detail."
        )
