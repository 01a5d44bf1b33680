"""Exception hierarchy for save-backup operations."""

from __future__ import annotations

from pathlib import Path


class SaveKeeperError(Exception):
    """Base error for savekeeper operations."""


class ConfigError(SaveKeeperError):
    """Missing or unusable configuration value."""


class InvalidArgumentError(SaveKeeperError, ValueError):
    """Blank or otherwise unusable argument."""

    def __init__(self, name: str, message: str = "Value cannot be empty or whitespace.") -> None:
        super().__init__(f"{name}: {message}")
        self.name = name


class BackupNameFormatError(SaveKeeperError, ValueError):
    """A backup folder/archive name does not follow ``<username> - <timestamp>``."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"{path!r} is not a valid backup name ({reason}); "
            f"expected '<username> - yyyy.MM.dd @ HH.mm.ss' with an optional .zip extension"
        )
        self.path = path
        self.reason = reason


class NotFoundError(SaveKeeperError, FileNotFoundError):
    """An expected directory is absent."""

    what = "Directory"

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"{self.what} does not exist: {path}")
        self.path = Path(path)


class ExportRootNotFoundError(NotFoundError):
    what = "Export root"


class SaveDirectoryNotFoundError(NotFoundError):
    what = "Save directory"


class BackupFolderNotFoundError(NotFoundError):
    what = "Backup folder"


class AmbiguousMatchError(SaveKeeperError):
    """More than one export folder matches a title id."""

    def __init__(self, title_id: str, root: Path, matches: list[Path]) -> None:
        names = ", ".join(sorted(m.name for m in matches))
        super().__init__(
            f"{len(matches)} folders under {root} match title id {title_id}: {names}. "
            f"Remove or rename the duplicates so exactly one remains."
        )
        self.title_id = title_id
        self.matches = matches


class OutOfScopeError(SaveKeeperError):
    """A target path lies outside the configured export root."""

    def __init__(self, path: str | Path, root: str) -> None:
        super().__init__(f"{path} is not under the export root {root}")
        self.path = Path(path)
        self.root = root


class BackupExistsError(SaveKeeperError, FileExistsError):
    """The timestamped backup directory already exists."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Backup directory already exists: {path}")
        self.path = path


class BackupCancelledError(SaveKeeperError):
    """A backup was cancelled before every file was copied."""

    def __init__(self, path: Path, copied: int, total: int) -> None:
        super().__init__(f"Backup to {path} cancelled after {copied}/{total} files")
        self.path = path
        self.copied = copied
        self.total = total
