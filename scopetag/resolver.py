"""
Scope version resolution.

Reads the latest commit of a branch, classifies it, picks the highest
stable tag of the commit's scope and computes the version to tag next.
Nothing is written to the repository.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

import semver

from .commits import CommitClassification, classify_commit
from .config import ScopeConfig
from .errors import (
    BranchResolutionError,
    GitError,
    NoStableVersionError,
    TagCommitResolutionError,
    TagListError,
)
from .tags import ScopedTag, format_scope_tag, match_scope_tag
from .vcs.git import Commit, Repository
from .version import Clock, bump_level, is_stable, next_version


logger = logging.getLogger(__name__)


class SkipReason(str, Enum):
    NO_SCOPE = "no_scope"
    PATTERN_MISMATCH = "pattern_mismatch"
    SCOPE_MISMATCH = "scope_mismatch"
    INVALID_VERSION = "invalid_version"
    PRERELEASE = "prerelease"


@dataclass(frozen=True)
class SkipEvent:
    """Something the resolver passed over without failing."""

    reason: SkipReason
    subject: str
    detail: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"reason": self.reason.value, "subject": self.subject, "detail": self.detail}


SkipHandler = Callable[[SkipEvent], None]


@dataclass(frozen=True)
class TagCandidate:
    """A same-scope tag with a parsed version and the commit it names."""

    tag: ScopedTag
    version: semver.Version
    commit: Commit


@dataclass
class ResolutionResult:
    """
    Outcome of one resolution run.

    When the latest commit has no scope, only ``branch``, ``head_commit``
    and ``classification`` are set and ``changed`` is False.
    """

    branch: str
    head_commit: Optional[Commit] = None
    classification: CommitClassification = field(default_factory=CommitClassification)
    scope: str = ""
    current_version: Optional[semver.Version] = None
    current_commit: Optional[Commit] = None
    new_version: Optional[semver.Version] = None
    skipped: List[SkipEvent] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.new_version is not None

    @property
    def tag_name(self) -> Optional[str]:
        if self.new_version is None:
            return None
        return format_scope_tag(self.scope, self.new_version)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "branch": self.branch,
            "head_commit": self.head_commit.sha if self.head_commit else None,
            "classification": self.classification.to_dict(),
            "scope": self.scope,
            "bump": bump_level(self.classification).value if self.changed else None,
            "current_version": str(self.current_version) if self.current_version else None,
            "current_commit": self.current_commit.sha if self.current_commit else None,
            "new_version": str(self.new_version) if self.new_version else None,
            "tag": self.tag_name,
            "skipped": [event.to_dict() for event in self.skipped],
        }


class _SkipLog:
    """Collects skip events and forwards them to an optional handler."""

    def __init__(self, handler: Optional[SkipHandler] = None):
        self.events: List[SkipEvent] = []
        self.handler = handler

    def __call__(self, reason: SkipReason, subject: str, detail: str = "") -> None:
        event = SkipEvent(reason, subject, detail)
        logger.debug(f"Skipping {subject}: {reason.value} {detail}".rstrip())
        self.events.append(event)
        if self.handler:
            self.handler(event)


def collect_scope_tags(
    scope: str,
    tag_names: Iterable[str],
    repo: Repository,
    skip: Optional[Callable[..., None]] = None,
) -> List[TagCandidate]:
    """Return the tags of ``scope`` whose version parses, with their commits.

    Raises TagCommitResolutionError if such a tag's commit cannot be read.
    """
    skip = skip or _SkipLog()
    candidates: List[TagCandidate] = []
    for name in tag_names:
        tag = match_scope_tag(name)
        if tag is None:
            skip(SkipReason.PATTERN_MISMATCH, name)
            continue
        if tag.scope != scope:
            skip(SkipReason.SCOPE_MISMATCH, name, f"scope '{tag.scope}'")
            continue
        if not tag.is_valid:
            skip(SkipReason.INVALID_VERSION, name, f"version '{tag.version_text}'")
            continue
        try:
            commit = repo.commit_for_tag(name)
        except (GitError, OSError) as e:
            raise TagCommitResolutionError(name, str(e)) from e
        candidates.append(TagCandidate(tag, tag.version, commit))
    return candidates


def select_current_version(
    scope: str,
    candidates: Iterable[TagCandidate],
    skip: Optional[Callable[..., None]] = None,
) -> TagCandidate:
    """Pick the highest stable version among same-scope candidates.

    Candidates are ordered by version, highest first; equal versions are
    ordered by tag name so the choice does not depend on input order.
    Pre-releases ranked above the first stable version are skipped.

    Raises NoStableVersionError if no candidate is stable.
    """
    skip = skip or _SkipLog()
    ordered = sorted(candidates, key=lambda c: c.tag.name, reverse=True)
    ordered = sorted(ordered, key=lambda c: c.version, reverse=True)
    for candidate in ordered:
        if is_stable(candidate.version):
            return candidate
        skip(SkipReason.PRERELEASE, candidate.tag.name, f"version {candidate.version}")
    raise NoStableVersionError(scope)


def resolve(
    config: ScopeConfig,
    repo: Repository,
    on_skip: Optional[SkipHandler] = None,
    now: Optional[Clock] = None,
) -> ResolutionResult:
    """Compute the next version for the scope of the branch's latest commit.

    Args:
        config: Branch and decoration settings
        repo: Repository to read from
        on_skip: Called for every skipped tag or commit
        now: Clock used for pre-release timestamps (defaults to UTC now)

    Returns:
        A ResolutionResult; ``changed`` is False when the commit has no scope.

    Raises:
        BranchResolutionError, TagListError, TagCommitResolutionError,
        NoStableVersionError, DecorationParseError
    """
    skip = _SkipLog(on_skip)
    result = ResolutionResult(branch=config.branch, skipped=skip.events)

    try:
        head = repo.branch_head(config.branch)
        message = repo.commit_message(head)
    except (GitError, OSError) as e:
        raise BranchResolutionError(config.branch, str(e)) from e
    result.head_commit = head
    result.classification = classify_commit(message)

    if not result.classification.scope:
        skip(SkipReason.NO_SCOPE, head.sha, "latest commit has no scope, no tag planned")
        return result
    result.scope = result.classification.scope

    try:
        tag_names = repo.tag_names()
    except (GitError, OSError) as e:
        raise TagListError(str(e)) from e

    candidates = collect_scope_tags(result.scope, tag_names, repo, skip)
    current = select_current_version(result.scope, candidates, skip)
    result.current_version = current.version
    result.current_commit = current.commit
    logger.info(
        f"currentVersion: {current.version}, currentTagCommit: {current.commit.short_sha} {current.commit.title}"
    )

    result.new_version = next_version(
        current.version,
        result.classification,
        pre_release_name=config.pre_release_name,
        pre_release_timestamp_layout=config.pre_release_timestamp_layout,
        build_metadata=config.build_metadata,
        now=now,
    )
    logger.info(f"newVersion: {result.new_version} ({result.tag_name})")
    return result
