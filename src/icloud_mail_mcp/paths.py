"""State path helpers."""

import os
from pathlib import Path

import platformdirs

APP_NAME = "icloud-mail-mcp"


def get_state_dir(override: Path | None = None) -> Path:
    """Get the directory holding persisted state (move manifest, session journal).

    Uses the configured override, then XDG_STATE_HOME, then platformdirs.
    """
    if override is not None:
        state_dir = Path(override).expanduser()
    else:
        xdg_state = os.environ.get("XDG_STATE_HOME")
        if xdg_state:
            state_dir = Path(xdg_state) / APP_NAME
        else:
            state_dir = Path(platformdirs.user_state_dir(APP_NAME))

    # Ensure directory exists
    state_dir.mkdir(parents=True, exist_ok=True)
    return state_dir


def get_manifest_path(override: Path | None = None) -> Path:
    """Get the move manifest file path."""
    return get_state_dir(override) / "move-manifest.json"


def get_journal_path(override: Path | None = None) -> Path:
    """Get the session journal file path."""
    return get_state_dir(override) / "session-log.json"
