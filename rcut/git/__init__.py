"""Git operations module.

Usage:
    from rcut.git import Repository

    repo = Repository(Path("/path/to/repo"))
    status = repo.status()
    if status.is_ok():
        print(f"Branch: {status.unwrap().branch}")
"""

from rcut.git.repository import (
    GitError,
    GitStatus,
    LogEntry,
    Repository,
    StatusEntry,
    find_toplevel,
)

__all__ = [
    "GitError",
    "GitStatus",
    "LogEntry",
    "Repository",
    "StatusEntry",
    "find_toplevel",
]
