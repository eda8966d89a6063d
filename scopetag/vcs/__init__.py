from .git import (
    Commit,
    GitRepository,
    Repository,
)

__all__ = [
    "Commit",
    "GitRepository",
    "Repository",
]
