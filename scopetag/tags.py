"""Splitting tag names into a scope and a version.

Scoped tags follow ``<scope>-v<version>`` (the ``v`` is optional), for
example ``account-v1.0.0``. The scope prefix is matched greedily: the
split happens at the last ``-`` followed by an optional ``v`` and a digit,
so ``a-b-v1.0.0`` belongs to scope ``a-b`` and ``svc-v1.0.0-1`` belongs to
scope ``svc-v1.0.0``.

Version text is read as strict semantic versioning, except that a missing
minor or patch part is allowed. Four-part versions (``svc-v1.2.3.4``) and
numbers with leading zeros (``svc-v01.0.0``) therefore do not parse and the
tag is skipped, although more lenient version parsers accept them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import semver

from .version import maybe_version


DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class ScopedTag:
    """A tag name split into scope and version text.

    ``version`` is None when the version text does not parse.
    """

    name: str
    scope: str
    version_text: str
    version: Optional[semver.Version] = None

    @property
    def is_valid(self) -> bool:
        return self.version is not None


def split_scope_tag(name: str) -> Optional[tuple[str, str]]:
    """Return ``(scope, version_text)`` or None if the name does not match."""
    index = name.rfind("-")
    while index >= 0:
        rest = name[index + 1:]
        if rest[:1] == "v" and rest[1:2] in DIGITS:
            return name[:index], rest[1:]
        if rest[:1] in DIGITS:
            return name[:index], rest
        index = name.rfind("-", 0, index)
    return None


def match_scope_tag(name: str) -> Optional[ScopedTag]:
    """Match a tag name against the scoped tag convention."""
    parts = split_scope_tag(name)
    if parts is None:
        return None
    scope, version_text = parts
    return ScopedTag(
        name=name,
        scope=scope,
        version_text=version_text,
        version=maybe_version(version_text),
    )


def format_scope_tag(scope: str, version: semver.Version) -> str:
    """Build the tag name for a scope version."""
    return f"{scope}-v{version}"
