"""
GarageDash Client - CLI Mode Module

Implements command-line access to the GarageDash server for headless use:
listing folders, transferring files, trash operations, and a watch mode
that polls a folder and prints it whenever it changes.

Author: GarageDash Project
"""

import sys
import logging
from pathlib import Path
from datetime import datetime
from typing import Optional

from settings import ConfigManager
from api import GarageDashAPI
from exceptions import GarageDashAPIError, GarageDashNotFoundError, GarageDashValidationError
from operations import BrowserState, ListingPoller


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_NOT_FOUND = 3
EXIT_INVALID_INPUT = 4

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]

# File name prefix of CLI log files; cleanup only touches files with this prefix
LOG_FILE_PREFIX = "garagedash-"


def setup_cli_logging(config_manager: ConfigManager) -> Path:
    """
    Setup logging for CLI mode with timestamped log file.

    Creates log file with format: garagedash-YYYY-MM-DD-HH-MM-SS.log
    in a "logs" subdirectory next to the executable or in the current directory.
    Only warnings and errors are echoed to the console so command output stays readable.

    Args:
        config_manager: ConfigManager instance for log settings

    Returns:
        Path to the created log file
    """
    log_level = config_manager.get("log_level", "INFO")

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_file = log_directory() / f"{LOG_FILE_PREFIX}{timestamp}.log"

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            console_handler
        ]
    )

    logger = logging.getLogger(__name__)
    logger.info(f"GarageDash CLI Mode - Log file: {log_file}")
    logger.info(f"Log level: {log_level}")

    return log_file


def log_directory() -> Path:
    """The "logs" folder next to the executable (or the working directory), created if needed."""
    if getattr(sys, 'frozen', False):
        base_dir = Path(sys.executable).parent
    else:
        base_dir = Path.cwd()

    log_dir = base_dir / "logs"
    log_dir.mkdir(exist_ok=True)
    return log_dir


def cleanup_old_logs(current_log: Path, retention_days: int) -> int:
    """
    Delete CLI log files in the same folder that are older than retention_days.

    Only files named like the ones setup_cli_logging writes are considered,
    and current_log is always kept. A retention of 0 or less keeps everything.

    Returns:
        Number of deleted log files
    """
    if retention_days <= 0:
        return 0

    logger = logging.getLogger(__name__)
    cutoff_time = datetime.now().timestamp() - retention_days * 86400

    expired = [
        log_file for log_file in current_log.parent.glob(f"{LOG_FILE_PREFIX}*.log")
        if log_file != current_log and log_file.stat().st_mtime < cutoff_time
    ]

    deleted_count = 0
    for log_file in expired:
        try:
            log_file.unlink()
            deleted_count += 1
        except OSError as e:
            logger.warning(f"Failed to delete old log file {log_file}: {e}")

    if deleted_count:
        logger.info(f"Deleted {deleted_count} CLI log file(s) older than {retention_days} days")
    return deleted_count


def format_size(size_bytes: int) -> str:
    """Human readable size using 1024-based units."""
    if not size_bytes:
        return "0 B"
    value = float(size_bytes)
    unit_index = 0
    while value >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.1f}".rstrip("0").rstrip(".") + f" {SIZE_UNITS[unit_index]}"


def format_listing(state: BrowserState) -> str:
    """Render the current view as text, one entry per line."""
    lines = [f"/{state.current_path}"]
    for entry in state.sorted_entries():
        marker = "*" if state.is_pinned(entry) else " "
        if entry.get("kind") == "folder":
            lines.append(f"{marker} {state.display_name(entry)}/")
        else:
            lines.append(f"{marker} {state.display_name(entry):<40} {format_size(entry.get('size', 0)):>10}")
    if len(lines) == 1:
        lines.append("  (empty)")
    return "\n".join(lines)


def run_cli_command(args, config_mgr: Optional[ConfigManager] = None, api_client=None) -> int:
    """
    Execute one CLI command.

    Args:
        args: Parsed argparse namespace (args.command selects the command)
        config_mgr: Optional pre-loaded ConfigManager
        api_client: Optional GarageDashAPI (built from config when omitted)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logger = None

    try:
        if config_mgr is None:
            config_mgr = ConfigManager()
            config_mgr.load_config()
            log_file = setup_cli_logging(config_mgr)
            cleanup_old_logs(log_file, config_mgr.get("log_retention_days", 30))
        logger = logging.getLogger(__name__)

        if api_client is None:
            server_url = config_mgr.get("server_url")
            server_port = config_mgr.get("server_port")
            if not server_url or not server_port:
                logger.error("server_url and server_port must be set in config.json")
                return EXIT_CONFIG_ERROR
            api_client = GarageDashAPI(server_url, server_port, config_mgr.get("verify_ssl", True))

        logger.info(f"Running command: {args.command}")
        state = BrowserState(config_mgr)

        if args.command == "ls":
            listing = api_client.list_trash(args.path) if args.trash else api_client.list_files(args.path)
            state.navigate(args.path)
            state.reconcile(listing)
            print(format_listing(state))

        elif args.command == "get":
            destination = Path(args.output) if args.output else Path(args.path.rsplit("/", 1)[-1])
            written = api_client.download_file(args.path, destination)
            print(f"Saved {args.path} to {destination} ({format_size(written)})")

        elif args.command == "put":
            local_file = Path(args.local)
            if not local_file.is_file():
                logger.error(f"Local file not found: {local_file}")
                return EXIT_INVALID_INPUT
            with open(local_file, 'rb') as f:
                api_client.upload_file(args.remote, f, args.content_type)
            print(f"Uploaded {local_file} to {args.remote}")

        elif args.command == "save":
            text = Path(args.local).read_text(encoding="utf-8")
            api_client.update_text(args.remote, text)
            print(f"Saved text to {args.remote}")

        elif args.command == "rm":
            if len(args.paths) == 1:
                result = api_client.delete_file(args.paths[0])
                print(f"Moved {result['path']} to trash as {result['trash_key']}")
            else:
                result = api_client.delete_files(args.paths)
                for item in result["results"]:
                    if item["success"]:
                        print(f"Moved {item['path']} to trash as {item['trash_key']}")
                    else:
                        print(f"FAILED {item['path']}: {item['error']}")
                if not result["success"]:
                    return EXIT_FAILURE

        elif args.command == "restore":
            result = api_client.restore_file(args.trash_key)
            print(f"Restored {result['path']}")

        elif args.command == "purge":
            api_client.purge_file(args.trash_key)
            print(f"Permanently deleted {args.trash_key}")

        elif args.command == "pin":
            pinned = config_mgr.toggle_pin(args.path)
            print(f"{'Pinned' if pinned else 'Unpinned'} {args.path}")

        elif args.command == "nickname":
            config_mgr.set_nickname(args.path, args.nickname)
            print(f"Nickname for {args.path}: {args.nickname or '(cleared)'}")

        elif args.command == "watch":
            interval = args.interval if args.interval is not None else config_mgr.get("poll_interval_seconds", 5)
            poller = ListingPoller(
                api_client, state, interval,
                on_change=lambda changed_state: print(format_listing(changed_state) + "\n")
            )
            state.navigate(args.path)
            try:
                poller.run(max_polls=args.count)
            except KeyboardInterrupt:
                logger.info("Watch stopped by user")

        else:
            logger.error(f"Unknown command: {args.command}")
            return EXIT_FAILURE

        return EXIT_SUCCESS

    except GarageDashNotFoundError as e:
        logger.error(f"Not found: {e}")
        return EXIT_NOT_FOUND

    except GarageDashValidationError as e:
        logger.error(f"Rejected by server: {e}")
        return EXIT_INVALID_INPUT

    except GarageDashAPIError as e:
        logger.error(f"API Error: {e}")
        return EXIT_FAILURE

    except KeyboardInterrupt:
        if logger:
            logger.warning("Operation cancelled by user (Ctrl+C)")
        else:
            print("\nOperation cancelled by user", file=sys.stderr)
        return EXIT_FAILURE

    except Exception as e:
        if logger:
            logger.exception(f"Unexpected error: {e}")
        else:
            print(f"Unexpected error: {e}", file=sys.stderr)
        return EXIT_FAILURE
