"""
Package manifest readers.

Reads the version (and name, when declared) from the manifest files of the
supported ecosystems: Rust's Cargo.toml and Python's setup.cfg. A missing
file is not an error; a file that exists but cannot be interpreted is.
"""

import configparser
import os
import tomllib
from typing import Optional

from loguru import logger

from .errors import ManifestError
from .models import Manifest

CARGO_TOML = 'Cargo.toml'
SETUP_CFG = 'setup.cfg'


def _read_text(path: str) -> Optional[str]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise ManifestError(os.path.basename(path), str(e)) from e


def crate_data(repo: str) -> Optional[Manifest]:
    """
    Read the package name and version from Cargo.toml.

    Args:
        repo: Repository directory

    Returns:
        Manifest or None if there is no Cargo.toml or it declares a workspace

    Raises:
        ManifestError: If the file is not valid TOML, has no [package]
            section, or its version (or name) is missing or not a string
    """
    contents = _read_text(os.path.join(repo, CARGO_TOML))
    if contents is None:
        return None
    try:
        data = tomllib.loads(contents)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(CARGO_TOML, str(e)) from e
    if 'workspace' in data:
        logger.debug(f"{CARGO_TOML} declares a workspace, ignoring it")
        return None
    package = data.get('package')
    if not isinstance(package, dict):
        raise ManifestError(CARGO_TOML, 'could not find package section')
    if 'version' not in package:
        raise ManifestError(CARGO_TOML, 'could not find version in package section')
    version = package['version']
    if not isinstance(version, str):
        raise ManifestError(CARGO_TOML, 'could not convert version to string')
    name = package.get('name')
    if name is not None and not isinstance(name, str):
        raise ManifestError(CARGO_TOML, 'could not convert name to string')
    return Manifest(filename=CARGO_TOML, version=version, name=name)


def module_data(repo: str) -> Optional[Manifest]:
    """
    Read metadata.version (and metadata.name, if present) from setup.cfg.

    Raises:
        ManifestError: If the file is not valid INI or lacks metadata.version
    """
    contents = _read_text(os.path.join(repo, SETUP_CFG))
    if contents is None:
        return None
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read_string(contents, source=SETUP_CFG)
    except configparser.Error as e:
        raise ManifestError(SETUP_CFG, str(e)) from e
    version = parser.get('metadata', 'version', fallback=None)
    if version is None:
        raise ManifestError(SETUP_CFG, 'could not find metadata.version')
    name = parser.get('metadata', 'name', fallback=None)
    return Manifest(filename=SETUP_CFG, version=version, name=name or None)
