"""
Read-only git queries.

Thin wrappers around the git executable. Mandatory queries raise GitError;
optional ones return None so the caller can treat the data as absent.
"""

import os
import subprocess
from typing import Optional, Sequence

from loguru import logger

from .errors import GitError

# Candidate refs for the main branch tip, in lookup order
MAIN_REFS = ('origin/main', 'origin/master', 'main', 'master')

GIT_TIMEOUT = 60


def run(repo: str, args: Sequence[str]) -> str:
    """
    Run git in a repository and return its stripped standard output.

    Args:
        repo: Repository directory
        args: Arguments passed to git

    Returns:
        str: Standard output with surrounding whitespace removed

    Raises:
        GitError: If git cannot be started, times out or exits non-zero
    """
    cmd = ['git', *args]
    logger.debug(f"Running {' '.join(cmd)} in {repo}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='replace',
            timeout=GIT_TIMEOUT,
            cwd=os.fspath(repo),
        )
    except FileNotFoundError as e:
        raise GitError(args, stderr=f"git executable not found: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise GitError(args, stderr=f"timed out after {GIT_TIMEOUT}s") from e
    if result.returncode != 0:
        raise GitError(args, result.returncode, result.stderr)
    return result.stdout.strip()


def describe(repo: str) -> Optional[str]:
    """Return ``git describe --tags`` output, or None when no tag is reachable."""
    try:
        return run(repo, ['describe', '--tags'])
    except GitError as e:
        logger.debug(f"No tag description available: {e}")
        return None


def head_commit(repo: str) -> str:
    """
    Return the short hash of HEAD.

    Raises:
        GitError: If HEAD cannot be resolved (e.g. not a git repository)
    """
    return run(repo, ['rev-parse', '--short', 'HEAD'])


def ref_commit(repo: str, ref: str) -> str:
    """Return the short hash of an arbitrary ref."""
    return run(repo, ['rev-parse', '--short', ref])


def main_commit(repo: str, refs: Sequence[str] = MAIN_REFS) -> Optional[str]:
    """
    Return the short hash of the main branch tip.

    Tries each ref in order and returns the first that resolves.
    """
    for ref in refs:
        try:
            commit = ref_commit(repo, ref)
        except GitError:
            continue
        logger.debug(f"Main branch tip resolved from {ref}: {commit}")
        return commit
    logger.debug("Could not resolve the main branch tip")
    return None


def unshallow(repo: str) -> bool:
    """
    Fetch the full history of a shallow clone so tags become reachable.

    Best effort: failures are logged and ignored.

    Returns:
        bool: True if the fetch succeeded
    """
    try:
        run(repo, ['fetch', '--unshallow', 'origin'])
    except GitError as e:
        logger.debug(f"Unshallow skipped: {e}")
        return False
    return True
