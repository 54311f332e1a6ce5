#!/usr/bin/env python
"""Command line entry point for notegit."""
import argparse
import logging
import os
import sys

from notegit import __version__
from notegit.config import SETTINGS_SECTION, describe_settings, load_config
from notegit.exceptions import ConfigurationError
from notegit.models.schema import RunResult
from notegit.observability import configure_logging, metrics
from notegit.services.scheduler import SyncScheduler
from notegit.services.sync_orchestrator import SyncCollaborators, run_once

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="notegit",
        description="Export notes to a directory tree and sync it with git",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--env-file",
        help="Extra .env file with NOTEGIT_* settings",
        default=os.environ.get("NOTEGIT_ENV_FILE"),
    )
    parser.add_argument(
        "--log-dir",
        help="Directory for rotating log files",
        default=os.environ.get("NOTEGIT_LOG_DIR"),
    )
    parser.add_argument(
        "--log-level",
        help="Logging level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.environ.get("NOTEGIT_LOG_LEVEL", "INFO"),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("run-once", help="Run one export-and-sync pass and exit")
    subparsers.add_parser("serve", help="Sync every configured interval until interrupted")
    subparsers.add_parser("settings", help="Show the available settings")
    return parser.parse_args(argv)


def sync_tick(env_file=None) -> RunResult:
    """One scheduled pass; settings are re-read every time."""
    config = load_config(env_file)
    return run_once(config, SyncCollaborators.from_config(config))


def cmd_run_once(args) -> int:
    result = sync_tick(args.env_file)
    return 0 if result.success else 1


def cmd_serve(args) -> int:
    config = load_config(args.env_file)
    scheduler = SyncScheduler(
        lambda: sync_tick(args.env_file), config.sync_interval_seconds
    )
    # First pass right away, then on the timer
    scheduler.trigger()
    scheduler.start()
    try:
        scheduler.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping scheduler")
    finally:
        scheduler.stop()
        logger.info(f"Sync metrics: {metrics.get_summary()}")
    return 0


def cmd_settings(args) -> int:
    print(f"{SETTINGS_SECTION['label']} ({SETTINGS_SECTION['name']})")
    print(SETTINGS_SECTION["description"])
    for entry in describe_settings():
        print(f"  {entry['key']} [{entry['type']}] - {entry['label']}")
        print(f"      {entry['description']}")
    return 0


COMMANDS = {
    "run-once": cmd_run_once,
    "serve": cmd_serve,
    "settings": cmd_settings,
}


def main(argv=None) -> int:
    """Run the notegit CLI."""
    args = parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    try:
        log_dir = configure_logging(log_dir=args.log_dir, level=log_level, console=True)
        logger.debug(f"Persistent logging enabled: {log_dir}")
    except OSError as e:
        # Fall back to console logging if the log directory is unusable
        logging.basicConfig(level=log_level)
        logger.warning(f"Failed to configure file logging: {e}")

    try:
        return COMMANDS[args.command](args)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
