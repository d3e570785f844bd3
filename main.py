#!/usr/bin/env python3
"""
Main entry point for the integration app scaffolder.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from src.core.errors import ScaffoldError
from src.core.orchestrator import ScaffoldOrchestrator
from src.core.prompts import ConsoleInputProvider, NonInteractiveInputProvider
from src.utils.logging import setup_root_logger, get_logger
from config.settings import Settings


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Provision developer tools and scaffold an integration app"
    )

    parser.add_argument("--name", dest="project_name", help="Project name (default: my-integration)")
    parser.add_argument("--email", dest="contact_email", help="Developer contact email")
    parser.add_argument("--support-url", dest="support_url", help="Support page URL")
    parser.add_argument("--api-key", dest="api_key", help="Platform API key")
    parser.add_argument("--vendor", help="Vendor or company name")

    parser.add_argument(
        "--directory",
        type=Path,
        help="Directory to create the project in (default: current directory)"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (JSON format)"
    )

    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt; fail if required answers are missing"
    )

    parser.add_argument(
        "--skip-tools",
        action="store_true",
        help="Skip checking and installing node, yarn and git"
    )

    parser.add_argument(
        "--no-install",
        action="store_true",
        help="Skip dependency installation and build"
    )

    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the local dev server after validation"
    )

    parser.add_argument(
        "--credentials-path",
        type=Path,
        help="Credentials file location (default: ~/.appkit/credentials.json)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Log file path (default: logs/scaffold.log)"
    )

    return parser.parse_args(argv)


def load_config(args) -> Settings:
    """Load configuration from file or command line."""
    config_data = {}
    if args.config:
        if not args.config.exists():
            raise FileNotFoundError(f"Config file not found: {args.config}")
        with open(args.config) as f:
            config_data = json.load(f)

    # Override with command line args
    if args.directory:
        config_data.setdefault("project", {})["base_dir"] = str(args.directory)
    if args.credentials_path:
        config_data.setdefault("credentials", {})["path"] = str(args.credentials_path)
    if args.skip_tools:
        config_data["skip_tools"] = True
    if args.no_install:
        config_data["install_dependencies"] = False
    if args.serve:
        config_data["serve"] = True
    if args.log_level:
        config_data.setdefault("logging", {})["level"] = args.log_level
    if args.log_file:
        config_data.setdefault("logging", {})["file_path"] = str(args.log_file)

    return Settings(**config_data)


def project_values(args, config_values: Optional[dict] = None) -> dict:
    """Project answers from the config file's "answers" section, overridden by flags."""
    values = dict(config_values or {})
    for field in ("project_name", "contact_email", "support_url", "api_key", "vendor"):
        value = getattr(args, field)
        if value:
            values[field] = value
    return values


def print_summary(logger, summary: dict, warnings: List[str]) -> None:
    logger.info("=" * 60)
    logger.info("SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Project: {summary['project_id']}")
    logger.info(f"Location: {summary['project_dir']}")
    logger.info(f"Tools present: {summary['tools_present']}, installed: {summary['tools_installed']}")
    logger.info(
        f"Files created: {summary['files_created']}, kept: {summary['files_skipped']}, "
        f"regenerated: {summary['files_overwritten']}"
    )
    for warning in warnings:
        logger.warning(f"Warning: {warning}")
    logger.info(f"Duration: {summary['duration_seconds']:.2f} seconds")
    logger.info("=" * 60)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = parse_arguments(argv)

    try:
        settings = load_config(args)
    except (OSError, ValueError) as e:
        setup_root_logger(level=args.log_level or "INFO")
        get_logger(__name__).error(f"Fatal error: invalid configuration: {e}")
        return 1

    # Setup logging
    setup_root_logger(
        settings.logging.file_path,
        settings.logging.level,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
        file_format=settings.logging.format
    )
    logger = get_logger(__name__)

    logger.debug(f"Arguments: {vars(args)}")

    try:
        answers = None
        if args.config:
            with open(args.config) as f:
                answers = json.load(f).get("answers")

        if args.non_interactive:
            provider = NonInteractiveInputProvider()
        else:
            provider = ConsoleInputProvider()

        orchestrator = ScaffoldOrchestrator(settings=settings, input_provider=provider)
        report = orchestrator.run(project_values(args, answers))

        print_summary(logger, orchestrator.summary(report), report.warnings)
        return 0

    except ScaffoldError as e:
        logger.error(f"Fatal error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
