"""Semantic version parsing, bumping and decoration.

Versions are `semver.Version` instances. They compare by major, minor and
patch, then by pre-release precedence; build metadata never takes part in
ordering.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

import semver

from .commits import CommitClassification
from .errors import DecorationParseError


TIMESTAMP_EPOCH = "epoch"
TIMESTAMP_DATETIME = "datetime"
DATETIME_FORMAT = "%Y%m%d%H%M%S"

Clock = Callable[[], datetime]


class BumpLevel(str, Enum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_version(text: str) -> semver.Version:
    """Parse a version string, tolerating a missing minor or patch part.

    Raises ValueError when the text is not a semantic version.
    """
    return semver.Version.parse(text, optional_minor_and_patch=True)


def maybe_version(text: str) -> Optional[semver.Version]:
    """Return the parsed version or None if the text is not one."""
    if not text:
        return None
    try:
        return parse_version(text)
    except (ValueError, TypeError):
        return None


def is_stable(version: semver.Version) -> bool:
    return not version.prerelease


def bump_level(classification: CommitClassification) -> BumpLevel:
    """Pick the increment for a commit; first match wins.

    A breaking marker bumps major, a ``feat`` type bumps minor, anything else
    bumps patch.
    """
    if classification.breaking == "!":
        return BumpLevel.MAJOR
    if classification.type == "feat":
        return BumpLevel.MINOR
    return BumpLevel.PATCH


def bump_version(version: semver.Version, level: BumpLevel) -> semver.Version:
    """Apply an increment. The result never carries pre-release or build data."""
    if level is BumpLevel.MAJOR:
        return version.bump_major()
    if level is BumpLevel.MINOR:
        return version.bump_minor()
    return version.bump_patch()


def format_timestamp(layout: str, moment: datetime) -> str:
    """Render a pre-release timestamp.

    ``epoch`` gives seconds since the Unix epoch, ``datetime`` gives
    ``YYYYMMDDhhmmss``; any other layout is used as a strftime format.
    """
    moment = moment.astimezone(timezone.utc)
    if layout == TIMESTAMP_EPOCH:
        return str(int(moment.timestamp()))
    if layout == TIMESTAMP_DATETIME:
        return moment.strftime(DATETIME_FORMAT)
    return moment.strftime(layout)


def _reparse(text: str) -> semver.Version:
    try:
        return semver.Version.parse(text)
    except ValueError as e:
        raise DecorationParseError(text, str(e)) from e


def apply_pre_release(
    version: semver.Version,
    name: Optional[str] = None,
    timestamp_layout: Optional[str] = None,
    now: Optional[Clock] = None,
) -> semver.Version:
    """Append ``-<name>.<timestamp>`` (or whichever part is set) to a version."""
    parts = []
    if name:
        parts.append(name)
    if timestamp_layout:
        parts.append(format_timestamp(timestamp_layout, (now or _utcnow)()))
    if not parts:
        return version
    return _reparse(f"{version}-{'.'.join(parts)}")


def apply_build_metadata(version: semver.Version, metadata: Optional[str]) -> semver.Version:
    """Append ``+<metadata>`` to a version."""
    if not metadata:
        return version
    return _reparse(f"{version}+{metadata}")


def next_version(
    current: semver.Version,
    classification: CommitClassification,
    pre_release_name: Optional[str] = None,
    pre_release_timestamp_layout: Optional[str] = None,
    build_metadata: Optional[str] = None,
    now: Optional[Clock] = None,
) -> semver.Version:
    """Bump ``current`` for a commit and layer on the optional decorations."""
    bumped = bump_version(current, bump_level(classification))
    if pre_release_name or pre_release_timestamp_layout:
        bumped = apply_pre_release(bumped, pre_release_name, pre_release_timestamp_layout, now)
    if build_metadata:
        bumped = apply_build_metadata(bumped, build_metadata)
    return bumped
