"""
State file persistence — atomic read/write for SourceState.

State is stored as JSON in <output_dir>/sources.json, beside (never
inside) the regenerated pods tree.  Writes are atomic (write to temp
file, then rename) to prevent corruption if the process crashes
mid-write.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from pydantic import ValidationError

from podforge.core.models.config import SourceState

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = "sources.json"


def default_state_path(output_dir: Path) -> Path:
    """Get the source state file path for an output directory."""
    return output_dir / DEFAULT_STATE_FILE


def load_state(path: Path) -> SourceState:
    """Load source state from a JSON file.

    Returns a fresh state if the file is missing or unreadable.
    """
    if not path.is_file():
        logger.debug("No source state at %s — starting fresh", path)
        return SourceState()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return SourceState.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning("Cannot load source state from %s: %s — starting fresh", path, e)
        return SourceState()


def save_state(state: SourceState, path: Path) -> None:
    """Save source state to a JSON file (atomic write)."""
    state.touch()
    path.parent.mkdir(parents=True, exist_ok=True)

    content = json.dumps(state.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".sources_", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with open(fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
        logger.debug("Source state saved to %s", path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
