"""Command-line entry point — wires services and runs a backup command.

Usage:
    savekeeper find <title_id>
    savekeeper list <game_folder> [--newest-first]
    savekeeper backup <save_dir> <title_id> [--username NAME] [--title-name NAME] [--backup-root PATH]

Examples:
    savekeeper --export-root /media/sd/JKSV find 0100000000010000
    savekeeper backup ~/.config/Ryujinx/bis/user/save/0000000000000001 0100000000010000 --title-name "Super Mario Odyssey"
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from savekeeper.config import Config
from savekeeper.context import AppContext
from savekeeper.core.backup import BackupManager
from savekeeper.core.locator import find_export_path
from savekeeper.errors import SaveKeeperError
from savekeeper.logger import setup_logger
from savekeeper.models.backup_record import ExportRoot, sorted_by_timestamp


def create_context(config_dir: Path | None = None, export_root: str | None = None) -> AppContext:
    """Wire all services and return an AppContext."""
    config = Config(config_dir)

    return AppContext(
        config=config,
        export_root=ExportRoot(export_root) if export_root else ExportRoot.from_config(config),
        backup_manager=BackupManager(config),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="savekeeper",
        description="Create and list per-title save-game backups.",
    )
    parser.add_argument("--config-dir", type=Path, help="directory holding config.json")
    parser.add_argument("--export-root", help="override the configured export root")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on the console")
    sub = parser.add_subparsers(dest="command", required=True)

    p_find = sub.add_parser("find", help="print the export folder of a title")
    p_find.add_argument("title_id")

    p_list = sub.add_parser("list", help="list the backups in a game folder")
    p_list.add_argument("game_folder", type=Path)
    p_list.add_argument("--newest-first", action="store_true")

    p_backup = sub.add_parser("backup", help="snapshot a save directory")
    p_backup.add_argument("save_dir", type=Path)
    p_backup.add_argument("title_id")
    p_backup.add_argument("--username", help="owner name (defaults to config 'username')")
    p_backup.add_argument("--title-name", help="game title used when a JKSV folder must be created")
    p_backup.add_argument("--backup-root", help="explicit folder to back up into")

    return parser


def _resolve_backup_root(ctx: AppContext, title_id: str, title_name: str | None) -> Path:
    """Existing export folder for the title, or where a new one should go."""
    existing = find_export_path(ctx.export_root, title_id)
    if existing is not None:
        return existing
    if not ctx.export_root.is_jksv_style:
        return ctx.export_root.root_path / title_id
    if not title_name:
        raise SaveKeeperError(
            f"No folder for {title_id} under {ctx.export_root.root_path}; "
            f"pass --title-name to create '<title> [{title_id}]'"
        )
    return ctx.export_root.root_path / f"{title_name} [{title_id}]"


def run(args: argparse.Namespace, ctx: AppContext) -> int:
    if args.command == "find":
        found = find_export_path(ctx.export_root, args.title_id)
        if found is None:
            print(f"No export folder for {args.title_id} under {ctx.export_root.root_path}")
            return 1
        print(found)
        return 0

    if args.command == "list":
        records = ctx.backup_manager.list_backups(args.game_folder)
        for record in sorted_by_timestamp(records, newest_first=args.newest_first):
            kind = "zip" if record.is_archive else "dir"
            print(f"{record.timestamp:%Y-%m-%d %H:%M:%S}  {record.username:<16}  {kind}  {record.path}")
        return 0

    backup_root = args.backup_root or _resolve_backup_root(ctx, args.title_id, args.title_name)
    created = ctx.backup_manager.create_backup(
        ctx.export_root,
        args.save_dir,
        backup_root,
        args.username or ctx.config.username,
    )
    print(created)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Application entry point."""
    args = build_parser().parse_args(argv)

    try:
        ctx = create_context(args.config_dir, args.export_root)
        setup_logger(ctx.config.log_dir, verbose=args.verbose)
        return run(args, ctx)
    except (SaveKeeperError, OSError) as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
