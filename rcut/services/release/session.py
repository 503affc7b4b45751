"""Release session: the repository, config and console a run works against.

The session also remembers where the run started (branch and commit) so
the caller is returned to that branch on every exit path and rollback
advice can name the commit to reset to.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from rcut.core.config import Config
from rcut.core.result import Err
from rcut.git.repository import Repository
from rcut.output.console import ConsoleProtocol


@dataclass(slots=True)
class ReleaseSession:
    root: Path
    repo: Repository
    config: Config
    console: ConsoleProtocol
    start_branch: str | None = None
    start_sha: str | None = None

    @property
    def main_branch(self) -> str:
        return self.config.project.main_branch

    @property
    def remote(self) -> str:
        return self.config.project.remote

    @property
    def tag_prefix(self) -> str:
        return self.config.project.prefix(self.root)

    @property
    def project_name(self) -> str:
        return self.config.project.display_name(self.root)

    @property
    def marker_path(self) -> Path:
        return self.root / self.config.project.version_file

    @property
    def changelog_path(self) -> Path:
        return self.root / self.config.project.changelog_file

    @property
    def output_dir(self) -> Path:
        out = Path(self.config.artifacts.output_dir).expanduser()
        return out if out.is_absolute() else self.root / out


@contextmanager
def open_session(
    *,
    root: Path,
    config: Config,
    console: ConsoleProtocol,
) -> Iterator[ReleaseSession]:
    """Open a session and switch back to the starting branch on exit."""
    repo = Repository(root)
    head = repo.head_sha()
    session = ReleaseSession(
        root=root,
        repo=repo,
        config=config,
        console=console,
        start_branch=repo.current_branch(),
        start_sha=None if isinstance(head, Err) else head.value,
    )
    try:
        yield session
    finally:
        _restore_branch(session)


def _restore_branch(session: ReleaseSession) -> None:
    start = session.start_branch
    if start is None or session.repo.current_branch() == start:
        return

    session.console.command(["git", "checkout", start])
    restored = session.repo.checkout(start)
    if isinstance(restored, Err):
        session.console.warning(f"could not switch back to {start}: {restored.error.message}")
