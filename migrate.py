#!/usr/bin/env python3
"""
WordPress to Markdown Export Tool - Main CLI Entry Point

This script provides the command-line interface for exporting the posts of a
WordPress site (REST API v2) to Markdown files with YAML frontmatter, with
images downloaded next to them.
"""

import argparse
import logging
import sys
from typing import List

import requests
import yaml

from config_loader import ConfigLoader, get_nested
from logger import log_config, log_section, setup_logging
from models import ExportSettings
from orchestrator import ExportOrchestrator, ExportSetupError
from plugins import PluginError
from wordpress_client import WordPressApiError

# Version
__version__ = "1.0.0"


def comma_list(value: str) -> List[str]:
    """Split a comma-separated option, dropping empty items."""
    return [item.strip() for item in value.split(',') if item.strip()]


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Export WordPress posts to Markdown files with YAML frontmatter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export every post
  python migrate.py -u https://blog.example.com

  # Authenticated export of the first 10 posts
  python migrate.py -u https://blog.example.com --username me --password secret -l 10

  # Enlighter code blocks and the Yoast plugin
  python migrate.py -u https://blog.example.com --code-classes EnlighterJSRAW --plugins Yoast

  # Settings from a file
  python migrate.py --config config.yaml -v
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration YAML file'
    )

    parser.add_argument(
        '-u', '--url',
        type=str,
        help='WordPress site URL'
    )

    parser.add_argument(
        '--username',
        type=str,
        help='WordPress username'
    )

    parser.add_argument(
        '--password',
        type=str,
        help='WordPress (application) password'
    )

    parser.add_argument(
        '-l', '--limit',
        type=int,
        help='Limit the number of posts to export'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        help='Output directory (default: blog_export)'
    )

    parser.add_argument(
        '--images-dir',
        type=str,
        help='Images directory (default: blog_export/images)'
    )

    parser.add_argument(
        '--custom-post-type',
        type=str,
        help='Custom post type to export instead of posts'
    )

    parser.add_argument(
        '--plugins',
        type=comma_list,
        help='Comma-separated list of plugins to use, in order'
    )

    parser.add_argument(
        '--plugin-dir',
        dest='plugin_dirs',
        action='append',
        help='Directory containing additional plugin files (repeatable)'
    )

    parser.add_argument(
        '--preserve-tags',
        type=comma_list,
        help='Comma-separated list of HTML tags to keep as they are (default: iframe,script)'
    )

    parser.add_argument(
        '--code-classes',
        type=comma_list,
        help='Comma-separated list of class names to treat as code blocks'
    )

    parser.add_argument(
        '--no-verify-ssl',
        dest='verify_ssl',
        action='store_false',
        default=None,
        help='Disable SSL certificate verification'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Write logs to this file as well'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def run_export(settings: ExportSettings, logger: logging.Logger) -> int:
    """Execute the export and map its outcome to an exit code."""
    try:
        orchestrator = ExportOrchestrator.from_settings(settings)
        report = orchestrator.run()
    except (WordPressApiError, ExportSetupError, PluginError, requests.RequestException) as e:
        logger.error(f"Export failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.error("Export interrupted by user")
        return 130

    if not report.success:
        logger.warning(f"Export completed with {len(report.failures)} failed posts")
        return 1

    logger.info(f"Exported {len(report.exported)} posts to {settings.output_directory}")
    return 0


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        # Minimal logging until the configuration is loaded
        setup_logging(verbosity=args.verbose)

        config = ConfigLoader.load(args.config) if args.config else {}

        # CLI takes precedence
        config = ConfigLoader.merge_with_args(config, args)
        ConfigLoader.validate(config)

        logger = setup_logging(
            verbosity=args.verbose,
            log_file=get_nested(config, 'logging.file'),
            level=None if args.verbose else get_nested(config, 'logging.level'),
        )

        log_section("WordPress to Markdown Export")
        logger.info(f"Version: {__version__}")
        log_config(config)

        settings = ExportSettings.from_config(config)

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except yaml.YAMLError as e:
        print(f"ERROR: Invalid configuration file: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2

    return run_export(settings, logger)


def cli_main() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli_main()
