"""
Command-line interface for the version generator.

Main entry point that wires configuration, fact gathering, evaluation and
output together and turns the outcome into an exit status.
"""

import argparse
import sys
from typing import List, Optional

from loguru import logger
from rich.console import Console

from . import __version__
from .config import Config, load_config
from .engine import evaluate
from .errors import VersionGenError
from .logging_config import setup_logging
from .models import EvaluatedInfo
from .output import report_mismatches, write_outputs
from .workspace import gather_facts

# Standard output carries the results; logs go to standard error
console = Console(soft_wrap=True, highlight=False, emoji=False)
log_console = Console(stderr=True)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='ghaction-version-gen',
        description='Generate version strings for CI artifacts from git tags and the GitHub Actions context'
    )

    # Repository
    parser.add_argument('--repo', help='Path to the git repository (default: $GITHUB_WORKSPACE or current directory)')
    parser.add_argument('--unshallow', action=argparse.BooleanOptionalAction, default=None,
                        help='Fetch full history before describing (default: true)')

    # CI event context
    parser.add_argument('--event-name', help='Triggering event name (default: $GITHUB_EVENT_NAME)')
    parser.add_argument('--ref', help='Triggering git ref, e.g. refs/tags/v1.0.0 (default: $GITHUB_REF)')

    # Output
    parser.add_argument('--github-output', help='File to append key=value outputs to (default: $GITHUB_OUTPUT)')

    # Overrides
    parser.add_argument('--override-version-tagged', help='Use this value as version_tagged on tag pushes')
    parser.add_argument('--override-version-commit', help='Use this value as version_commit')
    parser.add_argument('--override-version-docker-ci', help='Use this value as version_docker_ci')

    # Logging
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'debug', 'info', 'warning', 'error'], help='Logging level (default: INFO)')

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    return parser.parse_args(argv)


def setup_application(argv: Optional[List[str]] = None) -> Optional[Config]:
    """Set up logging, parse arguments and load the configuration."""
    setup_logging(console=log_console)

    args = parse_arguments(argv)

    if args.log_level:
        setup_logging(args.log_level.upper(), console=log_console)

    config = load_config(args)
    if config is None:
        return None

    setup_logging(config.log_level, console=log_console)
    return config


def run(config: Config) -> EvaluatedInfo:
    """
    Gather facts, evaluate and write the outputs.

    Raises:
        VersionGenError: If git or a manifest file fails
        OSError: If the output file cannot be written
    """
    facts = gather_facts(config.repo, unshallow=config.unshallow)
    info = evaluate(facts, config.flags(), config.overrides())
    write_outputs(info, console, config.github_output)
    return info


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the application."""
    config = setup_application(argv)
    if config is None:
        sys.exit(1)

    try:
        info = run(config)
    except VersionGenError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"❌ Could not write outputs: {e}")
        sys.exit(1)

    if report_mismatches(info, console):
        sys.exit(1)


if __name__ == '__main__':
    main()
