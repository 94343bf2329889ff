"""Append-only progress journal for the calling agent.

Lets an agent note what it has done so far in a long cleanup session and
pick up from there after a restart. It has no bearing on move safety.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ValidationError

from icloud_mail_mcp.storage import atomic_write_text, exclusive_lock, read_text

logger = logging.getLogger(__name__)


class JournalStep(BaseModel):
    step: str
    time: datetime


class JournalState(BaseModel):
    """All steps written since the journal was last cleared."""

    started_at: datetime | None = None
    steps: list[JournalStep] = []


class SessionJournal:
    """Journal persisted as a JSON file next to the move manifest."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _load(self) -> JournalState:
        raw = read_text(self.path)
        if not raw:
            return JournalState()
        try:
            return JournalState.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning("Session journal %s unreadable, starting fresh: %s", self.path, e)
            return JournalState()

    def write(self, step: str) -> JournalState:
        """Append a step and return the updated journal.

        Raises:
            ValueError: If `step` is empty.
        """
        if not step or not step.strip():
            raise ValueError("step must not be empty")
        now = datetime.now(timezone.utc)
        with exclusive_lock(self.path):
            state = self._load()
            if state.started_at is None:
                state.started_at = now
            state.steps.append(JournalStep(step=step.strip(), time=now))
            atomic_write_text(self.path, state.model_dump_json(indent=2))
        return state

    def read(self) -> JournalState:
        with exclusive_lock(self.path):
            return self._load()

    def clear(self) -> int:
        """Delete every step. Returns how many were removed."""
        with exclusive_lock(self.path):
            removed = len(self._load().steps)
            self.path.unlink(missing_ok=True)
        return removed
