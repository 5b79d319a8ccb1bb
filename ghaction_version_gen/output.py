"""
Rendering of evaluated version fields.

Fields are emitted in a fixed order as ``key=value`` lines: printed to
standard output for humans and appended to the GitHub Actions output file
($GITHUB_OUTPUT) for later workflow steps. Fields without a value are left
out entirely.
"""

import uuid
from typing import Iterable, List, Optional, Tuple

from loguru import logger
from rich.console import Console

from .models import EvaluatedInfo, Tristate

FIELD_ORDER = (
    'git_describe_tags',
    'commit',
    'commit_main',
    'is_main_here',
    'is_push',
    'is_tag',
    'is_main',
    'is_push_tag',
    'is_push_main',
    'tag_latest',
    'distance',
    'dash_distance',
    'tag_distance',
    'tag_head',
    'tag_latest_ltrimv',
    'tag_distance_ltrimv',
    'tag_head_ltrimv',
    'rust_crate_name',
    'rust_crate_version',
    'python_module_name',
    'python_module_version',
    'override_version_tagged',
    'override_version_commit',
    'override_version_docker_ci',
    'name',
    'version_tagged',
    'version_commit',
    'version_docker_ci',
    'version_mismatch',
    'rpm_basename',
    'deb_basename',
)


def _render_value(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Tristate):
        if value is Tristate.UNKNOWN:
            return None
        return value.value
    return str(value)


def output_pairs(info: EvaluatedInfo) -> List[Tuple[str, str]]:
    """
    Return the fields that have a value, in output order.

    Booleans are rendered as "true"/"false"; unknown and absent fields are
    omitted.
    """
    pairs = []
    for key in FIELD_ORDER:
        value = _render_value(getattr(info, key))
        if value is not None:
            pairs.append((key, value))
    return pairs


def format_lines(pairs: Iterable[Tuple[str, str]]) -> List[str]:
    """Format pairs as ``key=value`` lines."""
    return [f"{key}={value}" for key, value in pairs]


def _github_output_entry(key: str, value: str) -> str:
    if '\n' not in value:
        return f"{key}={value}\n"
    # Multiline values need the heredoc-style delimiter syntax
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{key}<<{delimiter}\n{value}\n{delimiter}\n"


def append_github_output(path: str, pairs: Iterable[Tuple[str, str]]) -> None:
    """
    Append pairs to the GitHub Actions output file.

    Raises:
        OSError: If the file cannot be written
    """
    with open(path, 'a', encoding='utf-8') as f:
        for key, value in pairs:
            f.write(_github_output_entry(key, value))
    logger.debug(f"Wrote outputs to {path}")


def print_lines(lines: Iterable[str], console: Console) -> None:
    for line in lines:
        console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)


def annotation(level: str, message: str) -> str:
    """
    Format a GitHub Actions workflow command.

    Messages that already carry parameters (``file=...::text``) are joined with
    a space, plain messages with ``::``.
    """
    if "::" in message:
        return f"::{level} {message}"
    return f"::{level}::{message}"


def report_mismatches(info: EvaluatedInfo, console: Console) -> bool:
    """
    Report version mismatches as workflow annotations and log records.

    A mismatch during a tag push is an error; during any other event it is
    a warning.

    Returns:
        bool: True if any mismatch is an error
    """
    if not info.mismatches:
        return False
    fatal = info.is_push_tag is Tristate.TRUE
    level = 'error' if fatal else 'warning'
    for mismatch in info.mismatches:
        console.print(annotation(level, mismatch), markup=False, highlight=False, emoji=False, soft_wrap=True)
        if fatal:
            logger.error(mismatch)
        else:
            logger.warning(mismatch)
    return fatal


def write_outputs(info: EvaluatedInfo, console: Console, github_output: Optional[str] = None) -> None:
    """Print the fields and, when configured, append them to $GITHUB_OUTPUT."""
    pairs = output_pairs(info)
    print_lines(format_lines(pairs), console)
    if github_output:
        append_github_output(github_output, pairs)
