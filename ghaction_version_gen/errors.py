"""
Exception types for the version generator.

Only conditions that must abort a run are exceptions: a failed mandatory git
query or a manifest file that exists but cannot be interpreted. Optional data
that is simply missing is represented as None, and version mismatches are
reported as data on the evaluation result.
"""

from typing import Optional, Sequence


class VersionGenError(Exception):
    """Base class for errors that abort a version generation run."""
    pass


class GitError(VersionGenError):
    """
    Exception raised when a git command cannot be executed or exits non-zero.

    Attributes:
        args_: The git arguments that were run (without the "git" prefix)
        returncode: Process exit status, or None if git could not be started
        stderr: Captured standard error output
    """

    def __init__(self, args_: Sequence[str], returncode: Optional[int] = None, stderr: str = ''):
        self.args_ = list(args_)
        self.returncode = returncode
        self.stderr = stderr.strip()
        message = f"error running git {' '.join(self.args_)}"
        if returncode is not None:
            message += f" (exit status {returncode})"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)


class ManifestError(VersionGenError):
    """Exception raised when a manifest file exists but is malformed."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"parsing {filename}: {reason}")
