"""
Gathering of repository facts.

Runs the git queries and manifest readers once and packs the answers into a
RawFacts value for the evaluation engine.
"""

import os

from loguru import logger

from . import git
from .manifests import crate_data, module_data
from .models import RawFacts


def gather_facts(repo: str, unshallow: bool = True) -> RawFacts:
    """
    Collect everything the engine needs from a repository.

    Args:
        repo: Repository directory
        unshallow: Try ``git fetch --unshallow`` first so tags are reachable

    Returns:
        RawFacts: Facts for evaluation

    Raises:
        GitError: If HEAD cannot be resolved
        ManifestError: If a manifest file exists but is malformed
    """
    if unshallow:
        git.unshallow(repo)

    commit = git.head_commit(repo)
    commit_main = git.main_commit(repo)
    describe_output = git.describe(repo)
    rust = crate_data(repo)
    python = module_data(repo)

    facts = RawFacts(
        commit=commit,
        commit_main=commit_main,
        describe_output=describe_output,
        rust=rust,
        python=python,
        pwd_basename=os.path.basename(os.path.abspath(repo)),
    )
    logger.debug(f"Gathered facts: {facts}")
    return facts
