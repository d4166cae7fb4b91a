# ABOUTME: CLI entry point for notion-publish.
# ABOUTME: Provides 'run', 'page', 'validate' and 'serve' commands.

import argparse
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import PublishConfig, config_from_env, load_config
from .errors import ConfigurationError
from .scheduler import run_scheduler
from .sync import Publisher, SyncResult


def setup_logging(log_path: Path | None = None, level: int = logging.INFO) -> None:
    """Configure logging for the application.

    Args:
        log_path: Optional path for log file. If provided, enables rotating file logging.
        level: Root log level.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Console handler (stderr keeps stdout free for JSON results)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        root_logger.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def get_config(args: argparse.Namespace) -> PublishConfig:
    """Load config from --config if given, otherwise from the environment."""
    if args.config:
        return load_config(args.config)
    return config_from_env()


def print_result(result: SyncResult) -> None:
    print(json.dumps(result.to_dict(), indent=2))


def cmd_run(args: argparse.Namespace) -> int:
    """Publish every page in the database as one commit."""
    result = Publisher(get_config(args)).publish_all()
    print_result(result)
    return 0 if result.success else 1


def cmd_page(args: argparse.Namespace) -> int:
    """Publish a single page."""
    result = Publisher(get_config(args)).publish_page(args.page_id)
    print_result(result)
    return 0 if result.success else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Check configuration without calling any API."""
    try:
        get_config(args)
    except ConfigurationError as e:
        print_result(SyncResult(success=False, message="Configuration has errors", errors=e.missing))
        return 1
    print_result(SyncResult(success=True, message="Configuration is valid", errors=[]))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the scheduler and publish on each cron trigger."""
    logger = logging.getLogger(__name__)
    config = get_config(args)

    def scheduled_publish(cfg: PublishConfig) -> None:
        result = Publisher(cfg).publish_all()
        if result.success:
            logger.info(result.message)
        else:
            logger.error(f"{result.message}: {'; '.join(result.errors or [])}")

    run_scheduler(config, scheduled_publish)
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="notion-publish",
        description="Publish a Notion database to a GitHub repository as MDX files",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: read settings from environment variables)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file (rotated at 10 MB)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run", help="Publish all pages in a single commit")

    page_parser = subparsers.add_parser("page", help="Publish one page")
    page_parser.add_argument("page_id", help="Notion page ID")

    subparsers.add_parser("validate", help="Validate configuration")

    subparsers.add_parser("serve", help="Run scheduler and publish on cron triggers")

    args = parser.parse_args()

    setup_logging(args.log_file, logging.DEBUG if args.verbose else logging.INFO)
    logger = logging.getLogger(__name__)

    commands = {
        "run": cmd_run,
        "page": cmd_page,
        "validate": cmd_validate,
        "serve": cmd_serve,
    }

    try:
        exit_code = commands[args.command](args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
