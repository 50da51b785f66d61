"""Command-line inspector for a release logger directory.

Examples:
    release-logger files
    release-logger --dir ./logs --prefix app export
    release-logger write error "payment failed" '{"order": 42}'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from release_logger.core.config import LoggerConfig
from release_logger.core.logger import ReleaseLogger
from release_logger.core.models import LogLevel

LOG_LEVEL_ENV = "RELEASE_LOGGER_LOG_LEVEL"
MUTATING_COMMANDS = ("write", "clear")


def _configure_logging() -> None:
    """Send the package's diagnostics to stderr."""
    level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _parse_level(s: str) -> LogLevel:
    try:
        return LogLevel.parse(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_arg(s: str) -> Any:
    # JSON literals become structured args; anything else stays a string
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        return s


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="release-logger", description="Inspect and manage rotated log files.")
    p.add_argument("--dir", dest="log_directory", default=None, help="Log directory (default: platform user-data dir + /logs)")
    p.add_argument("--prefix", dest="file_prefix", default=None, help="Log file name prefix (default: app-log)")
    p.add_argument("--max-files", type=int, default=None, help="Retention ceiling; files, show and export apply it only when given")
    p.add_argument("--max-file-size", type=int, default=None, help="Rotation threshold in bytes")

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("files", help="List log files, oldest first, with sizes")
    sub.add_parser("show", help="Print the active log file")
    sub.add_parser("export", help="Print every log file with === name === headers")
    sub.add_parser("clear", help="Delete every log file")
    sub.add_parser("device", help="Print device metadata as JSON")

    w = sub.add_parser("write", help="Append one entry and wait for it to be written")
    w.add_argument("level", type=_parse_level)
    w.add_argument("message")
    w.add_argument("args", nargs="*", type=_parse_arg, help="Extra values; JSON is parsed")
    return p


def _applies_retention(args: argparse.Namespace) -> bool:
    # read-only commands never delete files unless --max-files asks for it
    return args.command in MUTATING_COMMANDS or args.max_files is not None


async def _run(args: argparse.Namespace, config: LoggerConfig) -> int:
    log = ReleaseLogger(config)
    await log.start(cleanup=_applies_retention(args))
    async with log:
        if args.command == "files":
            infos = await log.get_log_file_info()
            if not infos:
                print("No log files found.")
            for info in infos:
                print(f"  {info.name}  ({_format_size(info.size)})")
        elif args.command == "show":
            sys.stdout.write(await log.get_logs())
        elif args.command == "export":
            sys.stdout.write(await log.export_logs())
        elif args.command == "clear":
            await log.clear_logs()
            print(f"Cleared log files in {log.directory}")
        elif args.command == "device":
            info = await log.get_device_info()
            print(json.dumps({
                "platform": info.platform,
                "model": info.model,
                "version": info.version,
                "manufacturer": info.manufacturer,
            }))
        elif args.command == "write":
            log.submit(args.level, args.message, *args.args)
            await log.flush()
        if log.degraded:
            print(f"Error: log directory {log.directory} is not usable", file=sys.stderr)
            return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    _configure_logging()
    args = build_parser().parse_args(argv)

    try:
        config = LoggerConfig.from_env(
            log_directory=args.log_directory,
            file_prefix=args.file_prefix,
            max_files=args.max_files,
            max_file_size=args.max_file_size,
        )
    except (ValueError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    raise SystemExit(main())
