"""
Version evaluation engine.

Combines the facts gathered from git and manifest files with the CI event
flags and user overrides into an EvaluatedInfo. Each step is a small pure
function so the precedence rules can be tested in isolation; ``evaluate``
chains them. Calling ``evaluate`` again with the same inputs returns an equal
result, and callers re-evaluate with different flags by building new inputs
with ``dataclasses.replace``.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .describe import ltrimv, parse_describe
from .models import (
    EnvironmentFlags,
    EvaluatedInfo,
    Overrides,
    ParsedDescribe,
    RawFacts,
    Tristate,
)

DOCKER_TAG_LATEST = 'latest'
DOCKER_TAG_NONE = 'null'


@dataclass(frozen=True)
class DerivedFlags:
    """Flags computed from the event flags and the main branch tip."""
    is_push_tag: Tristate
    is_push_main: Tristate
    is_main_here: Tristate


@dataclass(frozen=True)
class TagFields:
    """Tag-derived strings; everything but tag_latest is None without tags."""
    tag_latest: str = ''
    tag_latest_ltrimv: str = ''
    distance: Optional[str] = None
    dash_distance: Optional[str] = None
    tag_distance: Optional[str] = None
    tag_distance_ltrimv: Optional[str] = None
    tag_head: Optional[str] = None
    tag_head_ltrimv: Optional[str] = None

    @property
    def has_tag(self) -> bool:
        return self.distance is not None


@dataclass(frozen=True)
class Versions:
    """Result of version selection."""
    version_docker_ci: str
    version_tagged: Optional[str] = None
    version_commit: Optional[str] = None


def derive_flags(flags: EnvironmentFlags, commit: str, commit_main: Optional[str]) -> DerivedFlags:
    """Combine event flags and compare HEAD against the main branch tip."""
    if commit_main is None:
        is_main_here = Tristate.UNKNOWN
    else:
        is_main_here = Tristate.from_optional(commit_main == commit)
    return DerivedFlags(
        is_push_tag=flags.is_push & flags.is_tag,
        is_push_main=flags.is_push & flags.is_main,
        is_main_here=is_main_here,
    )


def derive_tags(parsed: Optional[ParsedDescribe]) -> TagFields:
    """Build the tag, distance and ltrimv strings."""
    if parsed is None:
        return TagFields()
    dash_distance = f"-{parsed.distance}"
    tag_distance = parsed.tag_latest + dash_distance
    return TagFields(
        tag_latest=parsed.tag_latest,
        tag_latest_ltrimv=ltrimv(parsed.tag_latest),
        distance=parsed.distance,
        dash_distance=dash_distance,
        tag_distance=tag_distance,
        tag_distance_ltrimv=ltrimv(tag_distance),
        tag_head=parsed.tag_head,
        tag_head_ltrimv=ltrimv(parsed.tag_head),
    )


def project_name(facts: RawFacts) -> str:
    """First manifest-declared name, falling back to the directory name."""
    for manifest in facts.manifests():
        if manifest.name:
            return manifest.name
    return facts.pwd_basename


def _distance_positive(distance: Optional[str]) -> bool:
    if distance is None:
        return False
    try:
        return int(distance) > 0
    except ValueError:
        return False


def select_versions(derived: DerivedFlags, tags: TagFields, overrides: Overrides) -> Versions:
    """
    Pick the published versions for the current event.

    Precedence:
    1. Push of a tag: everything comes from the tag.
    2. Push to main: commit version is tag plus distance, docker tag "latest".
       At distance 0 no commit version is produced; the tag push already
       published that version.
    3. Anything else: docker tag "null", nothing else.

    Overrides replace the computed value of the field they name, but only on
    the branch that assigns that field.
    """
    if derived.is_push_tag is Tristate.TRUE:
        return Versions(
            version_tagged=overrides.version_tagged or tags.tag_head_ltrimv,
            version_commit=overrides.version_commit or tags.tag_latest_ltrimv,
            version_docker_ci=overrides.version_docker_ci or tags.tag_latest_ltrimv,
        )
    if derived.is_push_main is Tristate.TRUE:
        version_commit = None
        if _distance_positive(tags.distance):
            version_commit = overrides.version_commit or tags.tag_distance_ltrimv
        return Versions(
            version_commit=version_commit,
            version_docker_ci=overrides.version_docker_ci or DOCKER_TAG_LATEST,
        )
    return Versions(version_docker_ci=overrides.version_docker_ci or DOCKER_TAG_NONE)


def basenames(name: str, commit: str, version_commit: Optional[str],
              tag_distance_ltrimv: Optional[str]) -> Tuple[str, str]:
    """
    Build the rpm and deb package basenames.

    Returns:
        tuple: (rpm_basename, deb_basename)
    """
    if version_commit:
        return f"{name}-{version_commit}", f"{name}_{version_commit}"
    if tag_distance_ltrimv:
        return (f"{name}-{tag_distance_ltrimv}-{commit}",
                f"{name}_{tag_distance_ltrimv}-{commit}")
    return name, name


def manifest_mismatches(facts: RawFacts, derived: DerivedFlags, tags: TagFields) -> List[str]:
    """
    Compare manifest versions against the latest tag.

    Only checked on release events (tag push or main push) and only when a
    tag exists. Manifests are checked Rust first, then Python.
    """
    release_event = (derived.is_push_tag is Tristate.TRUE
                     or derived.is_push_main is Tristate.TRUE)
    if not release_event or not tags.has_tag:
        return []
    return [
        f"file={manifest.filename}::Version mismatch: "
        f"tag {tags.tag_latest_ltrimv} != {manifest.version} from {manifest.filename}"
        for manifest in facts.manifests()
        if manifest.version != tags.tag_latest_ltrimv
    ]


def lineage_mismatch(facts: RawFacts, derived: DerivedFlags, tags: TagFields) -> Optional[str]:
    """Diagnose a tag pushed on a commit that is not the main branch tip."""
    if derived.is_push_tag is Tristate.TRUE and derived.is_main_here is not Tristate.TRUE:
        return (f"Version tag {tags.tag_latest} pushed over {facts.commit}, "
                f"but main branch is at {facts.commit_main}")
    return None


def evaluate(facts: RawFacts, flags: Optional[EnvironmentFlags] = None,
             overrides: Optional[Overrides] = None) -> EvaluatedInfo:
    """
    Evaluate all version fields.

    Args:
        facts: Facts gathered from the repository
        flags: CI event flags (all unknown when omitted)
        overrides: Version overrides (none when omitted)

    Returns:
        EvaluatedInfo: The complete field set
    """
    flags = flags or EnvironmentFlags()
    overrides = overrides or Overrides()

    parsed = parse_describe(facts.describe_output) if facts.describe_output is not None else None
    derived = derive_flags(flags, facts.commit, facts.commit_main)
    tags = derive_tags(parsed)
    name = project_name(facts)
    versions = select_versions(derived, tags, overrides)
    rpm_basename, deb_basename = basenames(name, facts.commit, versions.version_commit,
                                           tags.tag_distance_ltrimv)
    mismatches = manifest_mismatches(facts, derived, tags)
    lineage = lineage_mismatch(facts, derived, tags)
    if lineage is not None:
        mismatches.append(lineage)

    return EvaluatedInfo(
        git_describe_tags=facts.describe_output,
        commit=facts.commit,
        commit_main=facts.commit_main,
        is_main_here=derived.is_main_here,
        is_push=flags.is_push,
        is_tag=flags.is_tag,
        is_main=flags.is_main,
        is_push_tag=derived.is_push_tag,
        is_push_main=derived.is_push_main,
        tag_latest=tags.tag_latest,
        tag_latest_ltrimv=tags.tag_latest_ltrimv,
        distance=tags.distance,
        dash_distance=tags.dash_distance,
        tag_distance=tags.tag_distance,
        tag_distance_ltrimv=tags.tag_distance_ltrimv,
        tag_head=tags.tag_head,
        tag_head_ltrimv=tags.tag_head_ltrimv,
        rust_crate_name=facts.rust.name if facts.rust else None,
        rust_crate_version=facts.rust.version if facts.rust else None,
        python_module_name=facts.python.name if facts.python else None,
        python_module_version=facts.python.version if facts.python else None,
        override_version_tagged=overrides.version_tagged,
        override_version_commit=overrides.version_commit,
        override_version_docker_ci=overrides.version_docker_ci,
        name=name,
        version_tagged=versions.version_tagged,
        version_commit=versions.version_commit,
        version_docker_ci=versions.version_docker_ci,
        version_mismatch=lineage or (mismatches[0] if mismatches else None),
        mismatches=tuple(mismatches),
        rpm_basename=rpm_basename,
        deb_basename=deb_basename,
    )
