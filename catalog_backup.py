"""Command line front end for pnpm catalog backups.

Examples::

    pcc-backup create pnpm-workspace.yaml packages/a/package.json -m "split lint"
    pcc-backup create --workspace
    pcc-backup list
    pcc-backup restore            # latest snapshot
    pcc-backup restore 20240501_102030 -y --delete-after
    pcc-backup clear -y
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from backup import BackupError, BackupInfo, BackupService, collect_workspace_files, format_backup_time
from core.logging_utils import configure_logging
from core.settings import coerce_bool

LOGGER = logging.getLogger("pcc.cli")

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_FAILED = 2


def _confirm(message: str, *, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    try:
        answer = input(f"{message} (y/n) > ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _print_summary(info: BackupInfo) -> None:
    manifest = info.manifest
    print(f"  {manifest.id}")
    print(f"    Time:  {format_backup_time(manifest.timestamp)}")
    print(f"    Files: {len(manifest.files)}")
    if manifest.description:
        print(f"    Description: {manifest.description}")
    print("")


def _print_details(info: BackupInfo) -> None:
    manifest = info.manifest
    print(f"  ID:          {manifest.id}")
    print(f"  Time:        {format_backup_time(manifest.timestamp)}")
    print(f"  Version:     {manifest.version}")
    print(f"  Description: {manifest.description or '(none)'}")
    print("  Files:")
    for path in manifest.relative_paths:
        print(f"    - {path}")
    print("")


def _missing_message(backup_id: Optional[str]) -> str:
    return f"Backup not found: {backup_id}" if backup_id else "No backups found."


# ----------------------------------------------------------------------
def _cmd_create(service: BackupService, args: argparse.Namespace) -> int:
    paths: List[Union[str, Path]] = list(args.files)
    if args.workspace:
        paths.extend(collect_workspace_files(service.working_dir))
    if not paths:
        print("Nothing to back up: pass file paths or --workspace.", file=sys.stderr)
        return EXIT_NOT_FOUND
    backup_id = service.create_snapshot(paths, args.description)
    info = service.get_backup(backup_id)
    captured = info.file_count if info else 0
    print(f"Created backup {backup_id}: captured {captured} of {len(paths)} file(s).")
    return EXIT_OK


def _cmd_list(service: BackupService, args: argparse.Namespace) -> int:
    backups = service.list_backups()
    if not backups:
        print("No backups found.")
        return EXIT_OK
    print(f"Found {len(backups)} backup(s):\n")
    for info in backups:
        _print_summary(info)
    return EXIT_OK


def _cmd_show(service: BackupService, args: argparse.Namespace) -> int:
    info = service.get_backup(args.backup_id)
    if info is None:
        print(_missing_message(args.backup_id), file=sys.stderr)
        return EXIT_NOT_FOUND
    _print_details(info)
    return EXIT_OK


def _cmd_restore(service: BackupService, args: argparse.Namespace) -> int:
    info = service.get_backup(args.backup_id)
    if info is None:
        print(_missing_message(args.backup_id), file=sys.stderr)
        return EXIT_NOT_FOUND

    print("Backup:")
    _print_details(info)
    assume_yes = args.yes or not service.options["confirm"]
    if not _confirm(f"Restore these {info.file_count} file(s)?", assume_yes=assume_yes):
        print("Cancelled.")
        return EXIT_OK

    report = service.restore_snapshot(info.backup_id, target_dir=args.target)
    if report is None:
        print(f"Restore failed: backup {info.backup_id} disappeared.", file=sys.stderr)
        return EXIT_FAILED
    print(f"Restored {report.count} of {report.total} file(s).")
    for path in report.skipped:
        print(f"  skipped (missing from backup): {path}")

    if args.delete_after or service.options["delete_after_restore"]:
        if service.delete_snapshot(info.backup_id):
            print(f"Deleted backup {info.backup_id}.")
    return EXIT_OK


def _cmd_delete(service: BackupService, args: argparse.Namespace) -> int:
    if service.delete_snapshot(args.backup_id):
        print(f"Deleted backup {args.backup_id}.")
        return EXIT_OK
    print(_missing_message(args.backup_id), file=sys.stderr)
    return EXIT_NOT_FOUND


def _cmd_clear(service: BackupService, args: argparse.Namespace) -> int:
    backups = service.list_backups()
    if not backups:
        print("No backups found.")
        return EXIT_OK
    assume_yes = args.yes or not service.options["confirm"]
    if not _confirm(f"Delete all {len(backups)} backup(s)?", assume_yes=assume_yes):
        print("Cancelled.")
        return EXIT_OK
    deleted = service.clear()
    print(f"Deleted {deleted} backup(s).")
    return EXIT_OK


def _cmd_prune(service: BackupService, args: argparse.Namespace) -> int:
    keep = args.keep if args.keep is not None else service.options["keep_last"]
    if keep <= 0:
        print("Nothing to prune: pass --keep N or set backup.keep_last.")
        return EXIT_OK
    summary = service.prune(keep)
    print(f"Removed {len(summary.removed)} backup(s), kept {len(summary.kept)}.")
    return EXIT_OK


_COMMANDS: Dict[str, Callable[[BackupService, argparse.Namespace], int]] = {
    "create": _cmd_create,
    "list": _cmd_list,
    "show": _cmd_show,
    "restore": _cmd_restore,
    "delete": _cmd_delete,
    "clear": _cmd_clear,
    "prune": _cmd_prune,
}


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pcc-backup",
        description="Back up and restore files rewritten by pnpm catalog changes.",
    )
    parser.add_argument("--cwd", help="Working directory (defaults to $PCC_CWD or the current directory).")
    parser.add_argument(
        "--log-level",
        help="Log level for diagnostics (defaults to the logging.level setting).",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit diagnostics as JSON lines.")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Snapshot files before rewriting them.")
    create.add_argument("files", nargs="*", help="Files to capture, absolute or relative to the working directory.")
    create.add_argument("-m", "--description", default="", help="Free-form note stored with the backup.")
    create.add_argument(
        "--workspace",
        action="store_true",
        help="Also capture pnpm-workspace.yaml and every package.json.",
    )

    sub.add_parser("list", help="List backups, most recent first.")

    show = sub.add_parser("show", help="Show one backup (latest by default).")
    show.add_argument("backup_id", nargs="?")

    restore = sub.add_parser("restore", help="Restore a backup (latest by default).")
    restore.add_argument("backup_id", nargs="?")
    restore.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation.")
    restore.add_argument("--delete-after", action="store_true", help="Delete the backup once restored.")
    restore.add_argument("--target", help="Restore into this directory instead of the working directory.")

    delete = sub.add_parser("delete", help="Delete one backup.")
    delete.add_argument("backup_id")

    clear = sub.add_parser("clear", help="Delete all backups.")
    clear.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation.")

    prune = sub.add_parser("prune", help="Keep only the most recent backups.")
    prune.add_argument("--keep", type=int, default=None, help="Number of backups to keep.")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    service = BackupService(working_dir=args.cwd)
    log_settings = service.settings.get("logging") or {}
    configure_logging(
        args.log_level or log_settings.get("level") or "WARNING",
        json_output=args.json_logs or bool(coerce_bool(log_settings.get("json"))),
    )
    LOGGER.debug("Working directory: %s", service.working_dir)

    handler = _COMMANDS[args.command]
    try:
        return handler(service, args)
    except (BackupError, OSError) as exc:
        LOGGER.error("%s failed: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
