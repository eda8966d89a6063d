"""
scopetag: next-version planning for independently versioned scopes in a monorepo.

This package provides core primitives:
- classify_commit: reads type, scope and breaking marker from a conventional commit header.
- match_scope_tag: splits ``<scope>-v<version>`` tag names.
- resolve: picks the highest stable tag of the latest commit's scope and computes the next version.
- GitRepository: read-only git access through subprocess.
- Config: hierarchical YAML configuration (repository, then global).

Nothing here creates or pushes tags; callers decide what to do with the plan.
"""

from .commits import CommitClassification, classify_commit
from .config import Config, ScopeConfig
from .errors import (
    ScopeTagError,
    GitError,
    BranchResolutionError,
    TagListError,
    TagCommitResolutionError,
    NoStableVersionError,
    DecorationParseError,
    InvalidConfigError,
)
from .resolver import (
    ResolutionResult,
    SkipEvent,
    SkipReason,
    TagCandidate,
    collect_scope_tags,
    resolve,
    select_current_version,
)
from .tags import ScopedTag, format_scope_tag, match_scope_tag
from .vcs import Commit, GitRepository, Repository
from .version import (
    BumpLevel,
    apply_build_metadata,
    apply_pre_release,
    bump_level,
    bump_version,
    maybe_version,
    next_version,
    parse_version,
)

__version__ = "0.1.0"

__all__ = [
    # Commits
    "CommitClassification",
    "classify_commit",
    # Tags
    "ScopedTag",
    "format_scope_tag",
    "match_scope_tag",
    # Versions
    "BumpLevel",
    "apply_build_metadata",
    "apply_pre_release",
    "bump_level",
    "bump_version",
    "maybe_version",
    "next_version",
    "parse_version",
    # Resolution
    "ResolutionResult",
    "SkipEvent",
    "SkipReason",
    "TagCandidate",
    "collect_scope_tags",
    "resolve",
    "select_current_version",
    # Repository access
    "Commit",
    "GitRepository",
    "Repository",
    # Configuration
    "Config",
    "ScopeConfig",
    # Errors
    "ScopeTagError",
    "GitError",
    "BranchResolutionError",
    "TagListError",
    "TagCommitResolutionError",
    "NoStableVersionError",
    "DecorationParseError",
    "InvalidConfigError",
]
