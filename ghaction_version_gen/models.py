"""
Data model for version generation.

Every stage of the pipeline takes immutable inputs and returns an immutable
result: RawFacts -> ParsedDescribe -> EvaluatedInfo. Tri-state booleans are
modelled by Tristate so that "unknown" never silently becomes "false".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Tristate(str, Enum):
    """Three-valued boolean: TRUE, FALSE or UNKNOWN (signal never supplied)."""
    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"

    @classmethod
    def from_optional(cls, value: Optional[bool]) -> "Tristate":
        """Convert None/False/True into the matching state."""
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

    def to_optional(self) -> Optional[bool]:
        """Convert back into None/False/True."""
        if self is Tristate.UNKNOWN:
            return None
        return self is Tristate.TRUE

    @property
    def known(self) -> bool:
        return self is not Tristate.UNKNOWN

    def __and__(self, other: "Tristate") -> "Tristate":
        # Unknown on either side makes the conjunction unknown, even FALSE & UNKNOWN.
        if not isinstance(other, Tristate):
            return NotImplemented
        if self is Tristate.UNKNOWN or other is Tristate.UNKNOWN:
            return Tristate.UNKNOWN
        if self is Tristate.TRUE and other is Tristate.TRUE:
            return Tristate.TRUE
        return Tristate.FALSE

    def __bool__(self) -> bool:
        return self is Tristate.TRUE


@dataclass(frozen=True)
class Manifest:
    """Name and version declared by a package manifest file."""
    filename: str
    version: str
    name: Optional[str] = None


@dataclass(frozen=True)
class RawFacts:
    """Facts gathered once from the repository before evaluation."""
    commit: str
    pwd_basename: str
    commit_main: Optional[str] = None
    describe_output: Optional[str] = None
    rust: Optional[Manifest] = None
    python: Optional[Manifest] = None

    def manifests(self) -> Tuple[Manifest, ...]:
        """Declared manifests in checking order (Rust first, then Python)."""
        return tuple(m for m in (self.rust, self.python) if m is not None)


@dataclass(frozen=True)
class ParsedDescribe:
    """Normalized output of ``git describe --tags``."""
    describe: str
    tag_latest: str
    distance: str
    tag_head: Optional[str] = None


@dataclass(frozen=True)
class EnvironmentFlags:
    """CI event classification."""
    is_push: Tristate = Tristate.UNKNOWN
    is_tag: Tristate = Tristate.UNKNOWN
    is_main: Tristate = Tristate.UNKNOWN


@dataclass(frozen=True)
class Overrides:
    """User-supplied values that replace the computed versions."""
    version_tagged: Optional[str] = None
    version_commit: Optional[str] = None
    version_docker_ci: Optional[str] = None


@dataclass(frozen=True)
class EvaluatedInfo:
    """Complete, internally consistent set of version fields."""
    commit: str
    name: str
    tag_latest: str
    tag_latest_ltrimv: str
    version_docker_ci: str
    rpm_basename: str
    deb_basename: str

    git_describe_tags: Optional[str] = None
    commit_main: Optional[str] = None
    is_main_here: Tristate = Tristate.UNKNOWN
    is_push: Tristate = Tristate.UNKNOWN
    is_tag: Tristate = Tristate.UNKNOWN
    is_main: Tristate = Tristate.UNKNOWN
    is_push_tag: Tristate = Tristate.UNKNOWN
    is_push_main: Tristate = Tristate.UNKNOWN

    distance: Optional[str] = None
    dash_distance: Optional[str] = None
    tag_distance: Optional[str] = None
    tag_head: Optional[str] = None
    tag_distance_ltrimv: Optional[str] = None
    tag_head_ltrimv: Optional[str] = None

    rust_crate_name: Optional[str] = None
    rust_crate_version: Optional[str] = None
    python_module_name: Optional[str] = None
    python_module_version: Optional[str] = None

    override_version_tagged: Optional[str] = None
    override_version_commit: Optional[str] = None
    override_version_docker_ci: Optional[str] = None

    version_tagged: Optional[str] = None
    version_commit: Optional[str] = None
    version_mismatch: Optional[str] = None
    mismatches: Tuple[str, ...] = ()
