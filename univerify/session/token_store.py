import json
import os
from pathlib import Path
from typing import Any

from univerify.logging.logger import Log

FILE_MODE = 0o600


class TokenStore:
    """Persists the current bearer token and account to a JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any] | None:
        """Read the stored session, or None when nothing usable is stored."""
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            Log.warning(f"Ignoring unreadable session file {self._path}: {exc}")
            return None
        if not isinstance(data, dict) or not isinstance(data.get("token"), str):
            Log.warning(f"Ignoring malformed session file {self._path}")
            return None
        return data

    def save(self, data: dict[str, Any]) -> None:
        """Write the session; the file is readable by its owner only."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(json.dumps(data))
        # O_CREAT leaves the mode of an existing file unchanged.
        self._path.chmod(FILE_MODE)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
