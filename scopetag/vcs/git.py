from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..errors import GitError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Commit:
    """A commit as seen by the resolver."""

    sha: str
    message: str

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def title(self) -> str:
        lines = self.message.strip().splitlines()
        return lines[0] if lines else ""


class Repository(ABC):
    """Read-only view of a repository: branch heads, commits and tags."""

    @abstractmethod
    def branch_head(self, branch: str) -> Commit:
        """Return the latest commit of a branch."""

    @abstractmethod
    def commit_message(self, commit: Commit) -> str:
        """Return the full message of a commit."""

    @abstractmethod
    def tag_names(self) -> List[str]:
        """List every tag name in the repository."""

    @abstractmethod
    def commit_for_tag(self, tag: str) -> Commit:
        """Return the commit a tag points to (annotated tags are peeled)."""


class GitRepository(Repository):
    """Repository backed by the ``git`` binary.

    Every query is a blocking subprocess call; nothing is cached, so callers
    needing a consistent snapshot should read the tag list once.
    """

    def __init__(self, path: Optional[Path] = None, git: str = "git") -> None:
        self.path = Path(path or Path.cwd())
        self.git = git

    def _run(self, *args: str) -> str:
        cmd = [self.git, *args]
        logger.debug(f"Running {' '.join(cmd)} in {self.path}")
        try:
            proc = subprocess.run(
                cmd,
                cwd=self.path,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise GitError(list(args), -1, str(e)) from e
        if proc.returncode != 0:
            raise GitError(list(args), proc.returncode, proc.stderr)
        return proc.stdout

    def _commit(self, revision: str) -> Commit:
        sha = self._run("rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}").strip()
        return Commit(sha=sha, message=self._run("log", "-1", "--format=%B", sha))

    def branch_head(self, branch: str) -> Commit:
        return self._commit(f"refs/heads/{branch}")

    def commit_message(self, commit: Commit) -> str:
        return commit.message

    def tag_names(self) -> List[str]:
        out = self._run("tag", "--list")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def commit_for_tag(self, tag: str) -> Commit:
        return self._commit(f"refs/tags/{tag}")
