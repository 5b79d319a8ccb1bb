"""
GitHub Action version generator

Derives version identifiers for CI artifacts (package basenames, docker tags,
release versions) from git tags, the GitHub Actions event context and the
versions declared in Cargo.toml or setup.cfg.
"""

from ._version import __version__

__author__ = "lpenz"
__description__ = "Generate version strings for CI artifacts from git tags"
