"""Application configuration — JSON-based, with file locking and batch update support."""

from __future__ import annotations

import json
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

# Default data directory
_DEFAULT_DATA_DIR = Path.home() / "Documents" / "SaveKeeper"


class Config:
    """JSON-based application configuration with file locking."""

    _DEFAULTS: dict[str, Any] = {
        "export_root": "",
        "username": "User",
        "max_copy_workers": 8,
        "cleanup_partial_backups": False,
        "log_to_file": True,
    }

    def __init__(self, config_dir: Path | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._dir = config_dir or _DEFAULT_DATA_DIR
        self._path = self._dir / "config.json"
        self._lock = threading.Lock()
        self._defer_save = False
        self._load()

    def _load(self) -> None:
        """Load config from disk, merging with defaults."""
        self._data = dict(self._DEFAULTS)
        if self._path.exists():
            try:
                with open(self._path, encoding="utf-8") as f:
                    user_data = json.load(f)
                if isinstance(user_data, dict):
                    self._data.update(user_data)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Failed to load config, using defaults: {e}")

    def _save(self) -> None:
        """Persist config to disk with file locking."""
        if self._defer_save:
            return
        with self._lock:
            self._dir.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(".tmp")
            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(self._data, f, ensure_ascii=False, indent=2)
                tmp_path.replace(self._path)
            except OSError as e:
                logger.error(f"Failed to save config: {e}")
                if tmp_path.exists():
                    tmp_path.unlink(missing_ok=True)

    @contextmanager
    def batch_update(self) -> Iterator[None]:
        """Context manager for batching multiple config changes into a single write."""
        self._defer_save = True
        try:
            yield
        finally:
            self._defer_save = False
            self._save()

    # ── Generic access ──

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    # ── Typed properties ──

    @property
    def data_dir(self) -> Path:
        return self._dir

    @property
    def log_dir(self) -> Path | None:
        return self._dir / "logs" if self.log_to_file else None

    @property
    def export_root(self) -> Path | None:
        raw = self._data.get("export_root", "")
        return Path(raw) if raw else None

    @export_root.setter
    def export_root(self, value: Path | None) -> None:
        self.set("export_root", str(value) if value else "")

    @property
    def username(self) -> str:
        return self._data.get("username", "User")

    @username.setter
    def username(self, value: str) -> None:
        self.set("username", value)

    @property
    def max_copy_workers(self) -> int:
        return max(1, int(self._data.get("max_copy_workers", 8)))

    @max_copy_workers.setter
    def max_copy_workers(self, value: int) -> None:
        self.set("max_copy_workers", value)

    @property
    def cleanup_partial_backups(self) -> bool:
        return bool(self._data.get("cleanup_partial_backups", False))

    @cleanup_partial_backups.setter
    def cleanup_partial_backups(self, value: bool) -> None:
        self.set("cleanup_partial_backups", value)

    @property
    def log_to_file(self) -> bool:
        return bool(self._data.get("log_to_file", True))
