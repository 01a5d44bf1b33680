"""Application context — service container passed to commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from savekeeper.config import Config
    from savekeeper.core.backup import BackupManager
    from savekeeper.models.backup_record import ExportRoot


@dataclass
class AppContext:
    """
    Central service container.

    ``export_root`` is built once from config and handed explicitly to every
    operation that needs it.
    """

    config: Config
    export_root: ExportRoot
    backup_manager: BackupManager
