#!/usr/bin/env python3
"""
tcx-backup command line.

Usage:
    tcx-backup create project.tcx
    tcx-backup update --all
    tcx-backup restore project.tcx
    tcx-backup restore --force project.tcx
    tcx-backup list
    tcx-backup --backend minio restore --all
"""

import argparse
import logging
import sys

from minio.error import S3Error

from .core.config import STORAGE_BACKENDS, BackupConfig
from .core.dependencies import get_storage
from .core.logging import setup_logging
from .services.backup_service import BackupService
from .services.domain.errors import BackupError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tcx-backup",
        description="Back up and restore the named domains of .tcx model documents.",
    )
    parser.add_argument("--data-dir", help="Directory holding documents (local backend)")
    parser.add_argument("--backend", choices=STORAGE_BACKENDS, help="Storage backend")
    parser.add_argument("--log-format", choices=("console", "json"), help="Log output format")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, ...)")

    sub = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (
        ("create", "Create a backup of each document"),
        ("update", "Recreate the backup of each document"),
        ("restore", "Restore each document from its backup"),
    ):
        cmd = sub.add_parser(command, help=help_text)
        cmd.add_argument("files", nargs="*", help="Document names, e.g. project.tcx")
        cmd.add_argument("--all", action="store_true", help="Process every document in storage")
        if command == "restore":
            cmd.add_argument(
                "--force",
                action="store_true",
                help="Skip the check that a backup exists",
            )

    sub.add_parser("list", help="List documents and whether each has a backup")

    return parser


def run(argv: list[str] = None, config: BackupConfig = None, storage=None) -> int:
    """Run the CLI. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    config = config or BackupConfig()
    if args.data_dir:
        config.DATA_DIR = args.data_dir
    if args.backend:
        config.STORAGE_BACKEND = args.backend
    if args.log_format:
        config.LOG_FORMAT = args.log_format
    if args.log_level:
        config.LOG_LEVEL = args.log_level.upper()

    setup_logging(level=config.LOG_LEVEL, log_format=config.LOG_FORMAT)

    try:
        service = BackupService(storage or get_storage(config), config=config)

        if args.command == "list":
            for name in service.documents():
                marker = "backup" if service.has_backup(name) else "no backup"
                print(f"{name}\t{marker}")
            return 0

        if args.all:
            if args.command == "create":
                service.create_all()
            elif args.command == "update":
                service.create_all(action="updated")
            elif args.command == "restore":
                service.restore_all(check=not args.force)
            return 0

        if not args.files:
            logger.error(f"{args.command}: give document names or --all")
            return 2

        for name in args.files:
            if args.command == "create":
                service.create(name)
            elif args.command == "update":
                service.update(name)
            elif args.command == "restore":
                service.restore(name, check=not args.force)

        return 0

    except (BackupError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    except (OSError, S3Error) as e:
        logger.error(f"{args.command} failed: storage error: {e}")
        return 1


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
