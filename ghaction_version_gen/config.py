"""
Configuration management for the version generator.

Reads the GitHub Actions environment once, at the process boundary, and
turns it into a Config object. The evaluation engine never touches the
environment itself: it receives the EnvironmentFlags and Overrides built here.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from .models import EnvironmentFlags, Overrides, Tristate

# Load environment variables from .env file
load_dotenv()

TAG_REF_PREFIX = 'refs/tags/'
MAIN_BRANCH_REFS = ('refs/heads/main', 'refs/heads/master')
PUSH_EVENT = 'push'

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def get_config_value(cli_args, field_name: str, env_key: str, default, value_type: type = str):
    """
    Get configuration value with proper precedence: CLI args > env vars > defaults.

    Args:
        cli_args: CLI arguments object or None
        field_name: Name of the CLI argument field
        env_key: Environment variable key
        default: Default value if neither CLI nor env var is set
        value_type: Type to convert the value to (str, int, bool)

    Returns:
        The configuration value converted to the specified type
    """
    cli_value = getattr(cli_args, field_name, None) if cli_args else None
    if cli_value is not None:
        return cli_value

    env_value = os.environ.get(env_key, '')

    # Handle boolean conversion specially
    if value_type == bool:
        if env_value.strip().lower() in ('true', '1', 'yes'):
            return True
        elif env_value.strip().lower() in ('false', '0', 'no'):
            return False
        return default

    if not env_value:
        return default

    try:
        return value_type(env_value)
    except (ValueError, TypeError):
        return default


def get_config_value_str(cli_args, field_name: str, env_key: str, default: str = '') -> str:
    """Get string configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, str)


def get_config_value_bool(cli_args, field_name: str, env_key: str, default: bool = False) -> bool:
    """Get boolean configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, bool)


def _optional(value: str) -> Optional[str]:
    # GitHub Actions passes unset inputs as empty strings
    return value if value else None


@dataclass(frozen=True)
class Config:
    """Configuration object containing all application settings."""

    # Repository
    repo: str
    unshallow: bool

    # CI event context; empty when not supplied
    event_name: str
    ref: str

    # Output
    github_output: Optional[str]

    # Overrides
    override_version_tagged: Optional[str]
    override_version_commit: Optional[str]
    override_version_docker_ci: Optional[str]

    # Logging
    log_level: str

    def flags(self) -> EnvironmentFlags:
        """Classify the CI event; signals that were not supplied stay unknown."""
        if self.event_name:
            is_push = Tristate.from_optional(self.event_name == PUSH_EVENT)
        else:
            is_push = Tristate.UNKNOWN
        if self.ref:
            is_tag = Tristate.from_optional(self.ref.startswith(TAG_REF_PREFIX))
            is_main = Tristate.from_optional(self.ref in MAIN_BRANCH_REFS)
        else:
            is_tag = is_main = Tristate.UNKNOWN
        return EnvironmentFlags(is_push=is_push, is_tag=is_tag, is_main=is_main)

    def overrides(self) -> Overrides:
        return Overrides(
            version_tagged=self.override_version_tagged,
            version_commit=self.override_version_commit,
            version_docker_ci=self.override_version_docker_ci,
        )


def load_config(cli_args=None) -> Optional[Config]:
    """
    Load and validate configuration from CLI arguments and environment variables.
    CLI arguments take precedence over environment variables.

    Args:
        cli_args: Parsed CLI arguments or None

    Returns:
        Config: Validated configuration object, or None if validation failed
    """
    repo = get_config_value_str(cli_args, 'repo', 'GITHUB_WORKSPACE', os.getcwd())
    unshallow = get_config_value_bool(cli_args, 'unshallow', 'UNSHALLOW', True)
    event_name = get_config_value_str(cli_args, 'event_name', 'GITHUB_EVENT_NAME', '')
    ref = get_config_value_str(cli_args, 'ref', 'GITHUB_REF', '')
    github_output = get_config_value_str(cli_args, 'github_output', 'GITHUB_OUTPUT', '')
    override_version_tagged = get_config_value_str(cli_args, 'override_version_tagged', 'OVERRIDE_VERSION_TAGGED', '')
    override_version_commit = get_config_value_str(cli_args, 'override_version_commit', 'OVERRIDE_VERSION_COMMIT', '')
    override_version_docker_ci = get_config_value_str(cli_args, 'override_version_docker_ci', 'OVERRIDE_VERSION_DOCKER_CI', '')
    log_level = get_config_value_str(cli_args, 'log_level', 'LOG_LEVEL', 'INFO').upper()

    validation_errors = []

    if log_level not in VALID_LOG_LEVELS:
        validation_errors.append(f'LOG_LEVEL must be one of {VALID_LOG_LEVELS} (got: {log_level})')

    if not os.path.isdir(repo):
        validation_errors.append(f'Repository directory does not exist: {repo}')

    if validation_errors:
        logger.error('❌ Configuration Error:')
        for i, error_msg in enumerate(validation_errors, 1):
            logger.error(f'   {i}. {error_msg}')
        return None

    config = Config(
        repo=repo,
        unshallow=unshallow,
        event_name=event_name,
        ref=ref,
        github_output=_optional(github_output),
        override_version_tagged=_optional(override_version_tagged),
        override_version_commit=_optional(override_version_commit),
        override_version_docker_ci=_optional(override_version_docker_ci),
        log_level=log_level,
    )

    logger.debug(f'REPO = {config.repo}')
    logger.debug(f'UNSHALLOW = {config.unshallow}')
    logger.debug(f'GITHUB_EVENT_NAME = {config.event_name}')
    logger.debug(f'GITHUB_REF = {config.ref}')
    logger.debug(f'GITHUB_OUTPUT = {config.github_output}')
    logger.debug(f'OVERRIDE_VERSION_TAGGED = {config.override_version_tagged}')
    logger.debug(f'OVERRIDE_VERSION_COMMIT = {config.override_version_commit}')
    logger.debug(f'OVERRIDE_VERSION_DOCKER_CI = {config.override_version_docker_ci}')

    return config
