"""Backup manager — timestamped snapshot folders and backup discovery."""

from __future__ import annotations

import shutil
import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from loguru import logger

from savekeeper.core.name_codec import format_backup_name, parse_backup_name
from savekeeper.errors import (
    BackupCancelledError,
    BackupExistsError,
    BackupFolderNotFoundError,
    InvalidArgumentError,
    OutOfScopeError,
    SaveDirectoryNotFoundError,
)
from savekeeper.models.backup_record import BackupRecord, ExportRoot

if TYPE_CHECKING:
    from savekeeper.config import Config


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _require(value: str | Path | None, name: str) -> Path:
    if value is None or not str(value).strip():
        raise InvalidArgumentError(name)
    return Path(value)


class BackupManager:
    """Creates timestamped backup snapshots and lists existing ones."""

    def __init__(self, config: Config, clock: Callable[[], datetime] = _utc_now) -> None:
        self._config = config
        self._clock = clock

    @property
    def max_workers(self) -> int:
        return max(1, int(self._config.max_copy_workers))

    # ── Listing ──

    def list_backups(self, game_folder: str | Path) -> list[BackupRecord]:
        """
        Parse every backup in a game folder: top-level ``*.zip`` files, then
        top-level directories.  Order follows the filesystem; a single badly
        named entry raises :class:`BackupNameFormatError`.
        """
        folder = _require(game_folder, "game_folder")
        if not folder.is_dir():
            raise BackupFolderNotFoundError(folder)

        entries = list(folder.iterdir())
        archives = [e for e in entries if e.is_file() and e.suffix.lower() == ".zip"]
        directories = [e for e in entries if e.is_dir()]

        return [parse_backup_name(str(e)) for e in archives + directories]

    # ── Creation ──

    def create_backup(
        self,
        export_root: ExportRoot,
        save_dir: str | Path,
        backup_root: str | Path,
        username: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> Path:
        """
        Copy every file of *save_dir* into a new ``<username> - <timestamp>``
        folder under *backup_root* and return that folder.

        Files from nested directories are copied flat, keyed by file name; a
        repeated name fails the backup with ``FileExistsError``.  Copies run
        on a thread pool and the first failure is re-raised.  Files already
        copied are left in place unless ``cleanup_partial_backups`` is set.
        """
        source = _require(save_dir, "save_dir")
        _require(backup_root, "backup_root")
        if not username or not username.strip():
            raise InvalidArgumentError("username")
        if not source.is_dir():
            raise SaveDirectoryNotFoundError(source)

        self._ensure_backup_root(export_root, backup_root)
        backup_dir = self._create_backup_dir(export_root, backup_root, username)

        save_files = [f for f in source.rglob("*") if f.is_file()]
        logger.info(f"Copying {len(save_files)} save files to {backup_dir}")

        try:
            self._copy_files(save_files, backup_dir, cancel_event)
        except BackupCancelledError:
            self._discard_partial(backup_dir)
            raise
        except Exception as e:
            logger.warning(f"Copy into {backup_dir} failed: {e}")
            self._discard_partial(backup_dir)
            raise

        logger.info(f"Created backup: {backup_dir.name} ({len(save_files)} files)")
        return backup_dir

    def _ensure_backup_root(self, export_root: ExportRoot, backup_root: str | Path) -> None:
        if not export_root.contains(backup_root):
            raise OutOfScopeError(backup_root, export_root.raw_root)
        root = Path(backup_root)
        if not root.exists():
            logger.debug(f"Creating backup root {root}")
            root.mkdir(parents=True)

    def _create_backup_dir(self, export_root: ExportRoot, backup_root: str | Path, username: str) -> Path:
        if not export_root.contains(backup_root):
            raise OutOfScopeError(backup_root, export_root.raw_root)

        backup_dir = Path(backup_root) / format_backup_name(username, self._clock())
        try:
            backup_dir.mkdir()
        except FileExistsError as e:
            raise BackupExistsError(backup_dir) from e
        return backup_dir

    def _copy_files(
        self,
        files: list[Path],
        backup_dir: Path,
        cancel_event: threading.Event | None,
    ) -> None:
        if not files:
            return

        lock = threading.Lock()
        copied: list[Path] = []
        errors: list[Exception] = []

        def copy_one(src: Path) -> None:
            if cancel_event is not None and cancel_event.is_set():
                return
            dest = backup_dir / src.name
            try:
                # "xb" refuses to overwrite, so flattened name clashes fail
                with open(src, "rb") as fsrc, open(dest, "xb") as fdst:
                    shutil.copyfileobj(fsrc, fdst)
                shutil.copystat(src, dest)
            except Exception as e:
                with lock:
                    errors.append(e)
                raise
            with lock:
                copied.append(dest)

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(files))) as pool:
            futures: list[Future[None]] = [pool.submit(copy_one, f) for f in files]
            _, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()

        if errors:
            raise errors[0]
        if len(copied) < len(files):
            raise BackupCancelledError(backup_dir, len(copied), len(files))

    def _discard_partial(self, backup_dir: Path) -> None:
        if not self._config.cleanup_partial_backups:
            logger.warning(f"Partial backup left at {backup_dir}")
            return
        logger.warning(f"Removing partial backup {backup_dir}")
        shutil.rmtree(backup_dir, ignore_errors=True)
