"""Pytest configuration and fixtures for scopetag tests"""
import shutil
import subprocess
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

from scopetag.errors import GitError
from scopetag.vcs.git import Commit, Repository


class FakeRepository(Repository):
    """In-memory repository: one branch head and a tag -> commit map"""

    def __init__(
        self,
        head_message: str,
        tags: Optional[Dict[str, str]] = None,
        branch: str = "main",
        broken_tags: Optional[List[str]] = None,
        fail_tag_list: bool = False,
    ):
        self.branch = branch
        self.head = Commit(sha="f" * 40, message=head_message)
        # tag name -> commit sha; message mirrors the tag for readability
        self.tags = {name: Commit(sha=sha, message=f"release {name}") for name, sha in (tags or {}).items()}
        self.broken_tags = set(broken_tags or [])
        self.fail_tag_list = fail_tag_list
        self.calls: List[str] = []

    def branch_head(self, branch: str) -> Commit:
        self.calls.append(f"branch_head:{branch}")
        if branch != self.branch:
            raise GitError(["rev-parse", branch], 128, f"unknown revision {branch}")
        return self.head

    def commit_message(self, commit: Commit) -> str:
        return commit.message

    def tag_names(self) -> List[str]:
        self.calls.append("tag_names")
        if self.fail_tag_list:
            raise GitError(["tag", "--list"], 128, "not a git repository")
        return list(self.tags) + sorted(self.broken_tags)

    def commit_for_tag(self, tag: str) -> Commit:
        self.calls.append(f"commit_for_tag:{tag}")
        if tag in self.broken_tags:
            raise GitError(["rev-parse", tag], 128, "bad object")
        return self.tags[tag]


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fixed_now():
    """A clock frozen at 2024-05-06 07:08:09 UTC"""
    moment = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def svc_tags():
    """Tags of the svc scope plus noise from other scopes"""
    return {
        "svc-v1.0.0": "a" * 40,
        "svc-v1.1.0": "b" * 40,
        "svc-v2.0.0-rc.1": "c" * 40,
        "web-v3.0.0": "d" * 40,
        "v0.9.0": "e" * 40,
    }


@pytest.fixture
def make_repo(svc_tags):
    """Factory for a FakeRepository whose head carries the given message"""

    def factory(message: str, tags: Optional[Dict[str, str]] = None, **kwargs) -> FakeRepository:
        return FakeRepository(message, svc_tags if tags is None else tags, **kwargs)

    return factory


def _git(path: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args],
        cwd=path,
        check=True,
        capture_output=True,
        text=True,
    ).stdout.strip()


@pytest.fixture
def git_repo(temp_dir):
    """Provide a real git repository on branch main with an svc history"""
    if shutil.which("git") is None:
        pytest.skip("git binary not available")

    repo = temp_dir / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(repo, "config", "user.email", "dev@example.com")
    _git(repo, "config", "user.name", "Dev")
    _git(repo, "config", "commit.gpgsign", "false")
    _git(repo, "config", "tag.gpgsign", "false")

    def commit(message: str) -> str:
        _git(repo, "commit", "-q", "--allow-empty", "-m", message)
        return _git(repo, "rev-parse", "HEAD")

    def tag(name: str, annotated: bool = False) -> None:
        if annotated:
            _git(repo, "tag", "-a", name, "-m", f"release {name}")
        else:
            _git(repo, "tag", name)

    commit("chore: initial import")
    tag("svc-v1.0.0")
    commit("feat(svc): add endpoint")
    tag("svc-v1.1.0", annotated=True)
    commit("feat(svc): try new thing")
    tag("svc-v2.0.0-rc.1")
    tag("web-v0.3.0")

    return SimpleNamespace(
        path=repo,
        commit=commit,
        tag=tag,
        rev_parse=lambda rev: _git(repo, "rev-parse", rev),
    )
