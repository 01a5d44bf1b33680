"""Export locator — find a title's folder inside the export root."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from savekeeper.errors import AmbiguousMatchError, InvalidArgumentError
from savekeeper.models.backup_record import ExportRoot


def _matches(folder_name: str, title_id: str, jksv_style: bool) -> bool:
    if jksv_style:
        # JKSV names folders "<Game Title> [<title id>]"
        return folder_name.endswith(f"[{title_id}]")
    return folder_name == title_id


def find_export_path(export_root: ExportRoot, title_id: str) -> Path | None:
    """
    Return the export folder for *title_id*, or ``None`` if there is none yet.

    Only immediate subdirectories of the root are considered.  More than one
    match is a misconfigured root and raises :class:`AmbiguousMatchError`.
    """
    if not title_id or not title_id.strip():
        raise InvalidArgumentError("title_id")

    root = export_root.root_path
    matches = [
        child
        for child in root.iterdir()
        if child.is_dir() and _matches(child.name, title_id, export_root.is_jksv_style)
    ]

    if len(matches) > 1:
        raise AmbiguousMatchError(title_id, root, matches)
    if not matches:
        logger.debug(f"No export folder for {title_id} under {root}")
        return None

    logger.debug(f"Export folder for {title_id}: {matches[0]}")
    return matches[0]
