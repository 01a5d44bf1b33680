"""Backup name codec: ``<username> - <yyyy.MM.dd @ HH.mm.ss>`` folders and ZIPs."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import PurePath

from savekeeper.errors import BackupNameFormatError
from savekeeper.models.backup_record import BackupRecord

NAME_SEPARATOR = " - "
BACKUP_TIMESTAMP_FORMAT = "%Y.%m.%d @ %H.%M.%S"

# strptime accepts unpadded and non-ASCII digits, so the exact shape is checked first
_TIMESTAMP_RE = re.compile(r"[0-9]{4}\.[0-9]{2}\.[0-9]{2} @ [0-9]{2}\.[0-9]{2}\.[0-9]{2}")


def _base_name(path_or_name: str) -> str:
    path = PurePath(path_or_name)
    if path_or_name.lower().endswith(".zip"):
        return path.name[: -len(".zip")]
    return path.name


def parse_backup_name(path_or_name: str) -> BackupRecord:
    """Parse a backup folder or ZIP path into a :class:`BackupRecord`.

    ``"/JKSV/Game [0100000000010000]/User - 2023.06.07 @ 15.47.27"`` →
    ``BackupRecord(username="User", timestamp=2023-06-07 15:47:27 UTC)``
    """
    if not path_or_name or not path_or_name.strip():
        raise BackupNameFormatError(path_or_name, "empty path")

    name = _base_name(path_or_name)
    if not name.strip():
        raise BackupNameFormatError(path_or_name, "no folder or file name")

    parts = name.split(NAME_SEPARATOR)
    if len(parts) != 2:
        raise BackupNameFormatError(
            path_or_name, f"expected exactly one {NAME_SEPARATOR!r} separator, found {len(parts) - 1}"
        )

    username, stamp = parts[0].strip(), parts[1].strip()
    if not username or not stamp:
        raise BackupNameFormatError(path_or_name, "username and timestamp must both be present")

    if not _TIMESTAMP_RE.fullmatch(stamp):
        raise BackupNameFormatError(path_or_name, f"timestamp {stamp!r} does not match yyyy.MM.dd @ HH.mm.ss")
    try:
        timestamp = datetime.strptime(stamp, BACKUP_TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise BackupNameFormatError(path_or_name, f"invalid timestamp {stamp!r}: {e}") from e

    return BackupRecord(path=path_or_name, username=username, timestamp=timestamp)


def format_backup_name(username: str, timestamp: datetime) -> str:
    """Build a backup name.  Naive timestamps are taken to be UTC already."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return f"{username}{NAME_SEPARATOR}{timestamp.strftime(BACKUP_TIMESTAMP_FORMAT)}"


def is_backup_name(path_or_name: str) -> bool:
    try:
        parse_backup_name(path_or_name)
    except BackupNameFormatError:
        return False
    return True
