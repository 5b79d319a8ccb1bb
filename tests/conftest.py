"""
Pytest configuration and shared fixtures for test suite.

Provides a temporary git repository helper, a clean GitHub Actions
environment, and ready-made RawFacts for engine tests.
"""

import os
import shutil
import subprocess
import pytest

from ghaction_version_gen import git
from ghaction_version_gen.models import RawFacts, Manifest, EnvironmentFlags, Tristate

GITHUB_ENV_VARS = (
    'GITHUB_EVENT_NAME',
    'GITHUB_REF',
    'GITHUB_OUTPUT',
    'GITHUB_WORKSPACE',
    'OVERRIDE_VERSION_TAGGED',
    'OVERRIDE_VERSION_COMMIT',
    'OVERRIDE_VERSION_DOCKER_CI',
    'UNSHALLOW',
    'LOG_LEVEL',
)



@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove GitHub Actions variables so tests never see the real CI context."""
    for key in GITHUB_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


class TmpGit:
    """A throwaway git repository on the main branch."""

    def __init__(self, path):
        self.path = str(path)
        self.run('git', 'init', '-b', 'main')
        self.run('git', 'config', '--local', 'user.name', 'username')
        self.run('git', 'config', '--local', 'user.email', 'user@email.net')
        self.run('git', 'config', '--local', 'commit.gpgsign', 'false')
        self.run('git', 'config', '--local', 'tag.gpgsign', 'false')

    def run(self, *cmd):
        subprocess.run(list(cmd), cwd=self.path, check=True, capture_output=True, text=True)

    def file_write(self, basename, contents):
        with open(os.path.join(self.path, basename), 'w', encoding='utf-8') as f:
            f.write(contents)

    def commit_file(self, basename, contents, message=None):
        """Write a file, stage it and commit; returns the new short HEAD hash."""
        self.file_write(basename, contents)
        self.run('git', 'add', basename)
        self.run('git', 'commit', '-m', message or f'add {basename}')
        return self.head()

    def tag(self, name):
        self.run('git', 'tag', name)

    def head(self):
        return git.head_commit(self.path)


@pytest.fixture
def tmp_git(tmp_path):
    """Create an empty git repository in a temporary directory."""
    if shutil.which('git') is None:
        pytest.skip('git executable not available')
    repo_dir = tmp_path / 'project'
    repo_dir.mkdir()
    return TmpGit(repo_dir)


@pytest.fixture
def facts_on_tag():
    """HEAD exactly on tag v1.0.0, which is also the main tip."""
    return RawFacts(
        commit='abc1234',
        commit_main='abc1234',
        describe_output='v1.0.0',
        pwd_basename='project',
    )


@pytest.fixture
def facts_after_tag():
    """HEAD one commit after tag v1.0.0, which is also the main tip."""
    return RawFacts(
        commit='def5678',
        commit_main='def5678',
        describe_output='v1.0.0-1-gdef5678',
        pwd_basename='project',
    )


@pytest.fixture
def facts_no_tag():
    """Repository with commits but no tags."""
    return RawFacts(
        commit='abc1234',
        commit_main='abc1234',
        describe_output=None,
        pwd_basename='project',
    )


@pytest.fixture
def push_tag_flags():
    return EnvironmentFlags(is_push=Tristate.TRUE, is_tag=Tristate.TRUE, is_main=Tristate.TRUE)


@pytest.fixture
def push_main_flags():
    return EnvironmentFlags(is_push=Tristate.TRUE, is_tag=Tristate.FALSE, is_main=Tristate.TRUE)


@pytest.fixture
def rust_manifest():
    return Manifest(filename='Cargo.toml', version='9.7', name='mycrate')
