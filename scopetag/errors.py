"""Exception types raised while resolving a scope version."""
from __future__ import annotations

from typing import Optional


class ScopeTagError(Exception):
    """Base class for every fatal resolution error."""


class GitError(ScopeTagError):
    """Raised when a git command fails"""

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"git {' '.join(command)} exited with {returncode}{detail}")


class BranchResolutionError(ScopeTagError):
    """Raised when the head commit of a branch cannot be found"""

    def __init__(self, branch: str, reason: Optional[str] = None):
        self.branch = branch
        message = f"cannot resolve branch '{branch}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TagListError(ScopeTagError):
    """Raised when the repository tags cannot be listed"""

    def __init__(self, reason: str):
        super().__init__(f"failed to fetch tags: {reason}")


class TagCommitResolutionError(ScopeTagError):
    """Raised when a matching tag does not point at a readable commit"""

    def __init__(self, tag: str, reason: str):
        self.tag = tag
        super().__init__(f"error reading tag '{tag}': {reason}")


class NoStableVersionError(ScopeTagError):
    """Raised when a scope has no stable (non pre-release) tag"""

    def __init__(self, scope: str):
        self.scope = scope
        super().__init__(f"no stable (non pre-release) version tags found for scope '{scope}'")


class DecorationParseError(ScopeTagError):
    """Raised when pre-release or build metadata produces an invalid version"""

    def __init__(self, value: str, reason: str):
        self.value = value
        super().__init__(f"'{value}' is not a valid semantic version: {reason}")


class InvalidConfigError(ScopeTagError):
    """Raised for malformed configuration values"""
