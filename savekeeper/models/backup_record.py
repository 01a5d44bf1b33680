"""Backup record models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from savekeeper.errors import ConfigError, ExportRootNotFoundError

if TYPE_CHECKING:
    from savekeeper.config import Config

JKSV_ROOT_NAME = "JKSV"


@dataclass(frozen=True)
class BackupRecord:
    """A discovered backup folder or ZIP archive."""

    path: str  # As given to the parser, never normalised
    username: str
    timestamp: datetime  # Always UTC

    @property
    def is_archive(self) -> bool:
        return self.path.lower().endswith(".zip")


def sorted_by_timestamp(
    records: Iterable[BackupRecord], newest_first: bool = False
) -> list[BackupRecord]:
    """Return records in chronological order (oldest first by default)."""
    return sorted(records, key=lambda r: r.timestamp, reverse=newest_first)


@dataclass(frozen=True)
class ExportRoot:
    """
    Configured export base directory.

    ``is_jksv_style`` is derived from the final path segment when the value is
    built and cannot be changed afterwards.
    """

    root_path: Path
    is_jksv_style: bool = field(init=False)
    raw_root: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        root = Path(self.root_path)
        if not root.is_dir():
            raise ExportRootNotFoundError(self.root_path)
        object.__setattr__(self, "raw_root", str(self.root_path))
        object.__setattr__(self, "root_path", root)
        object.__setattr__(self, "is_jksv_style", root.name.casefold() == JKSV_ROOT_NAME.casefold())

    @classmethod
    def from_config(cls, config: Config) -> ExportRoot:
        root = config.get("export_root")
        if not root:
            raise ConfigError("export_root is not configured")
        return cls(root)

    def contains(self, path: str | Path) -> bool:
        """
        String prefix check: is *path* inside this export root?

        Accepts the root exactly as configured (``./exports/JKSV``) and its
        ``Path`` rendering (``exports/JKSV``), which is how paths built from
        ``root_path`` start.
        """
        text = str(path)
        return text.startswith(self.raw_root) or text.startswith(str(self.root_path))
