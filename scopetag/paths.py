"""Path utilities for finding the git repository root and config files."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from .errors import InvalidConfigError


GIT_DIRNAME = ".git"
CONFIG_FILENAME = ".scopetag.yaml"


def find_repo_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """Find the git repository root by walking up the directory tree.

    A ``.git`` directory marks a regular checkout; a ``.git`` file marks a
    worktree or submodule and counts as well.

    Args:
        start_path: Starting directory (defaults to current working directory)

    Returns:
        Path to repo root (directory containing .git), or None if not found

    Example:
        >>> # From REPO/services/account, finds REPO
        >>> root = find_repo_root()
        >>> print(root)
        /path/to/REPO
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    for parent in [current] + list(current.parents):
        if (parent / GIT_DIRNAME).exists():
            return parent

    return None


def get_repo_config_path(start_path: Optional[Path] = None) -> Optional[Path]:
    """Get the local config file path for the current repo.

    Returns:
        Path to .scopetag.yaml at the repo root, or None if not in a repo
    """
    root = find_repo_root(start_path)
    if root:
        return root / CONFIG_FILENAME
    return None


def ensure_in_repo(start_path: Optional[Path] = None) -> Path:
    """Ensure we're in a git repository and return the root.

    Raises:
        InvalidConfigError: If not in a git repository
    """
    root = find_repo_root(start_path)
    if not root:
        raise InvalidConfigError(
            "Not in a git repository. Run scopetag from inside a checkout "
            "or pass --repo."
        )
    return root
