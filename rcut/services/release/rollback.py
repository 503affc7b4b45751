"""Manual rollback advice for a release run that failed half-way.

Nothing is undone automatically. Once the repository starts being
mutated, the guard stays armed until the run disarms it on success; any
other exit (an error result or an exception) prints the commands that
restore the repository to its pre-run state.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from rcut.output.console import ConsoleProtocol, Style
from rcut.services.release.model import ReleaseVersions

_UNKNOWN_SHA = "<commit before the release run>"


@dataclass(slots=True)
class RollbackGuard:
    armed: bool = True

    def disarm(self) -> None:
        self.armed = False


def rollback_commands(
    *,
    main_branch: str,
    start_sha: str | None,
    versions: ReleaseVersions,
    artifacts_dir: Path | None = None,
) -> list[list[str]]:
    cmds = [
        ["git", "checkout", main_branch],
        ["git", "reset", "--hard", start_sha or _UNKNOWN_SHA],
        ["git", "tag", "-d", versions.rc_tag],
        ["git", "branch", "-D", versions.staging_branch],
    ]
    if artifacts_dir is not None:
        cmds.append(["rm", "-r", str(artifacts_dir)])
    return cmds


def print_rollback_advice(
    *,
    console: ConsoleProtocol,
    main_branch: str,
    start_sha: str | None,
    versions: ReleaseVersions,
    artifacts_dir: Path | None = None,
) -> None:
    console.header("Release aborted: manual rollback")
    console.warning(
        f"{main_branch} may already carry the changelog and "
        f"{versions.new_snapshot_version} commits."
    )
    console.print("To restore the repository, run:", Style.BOLD)
    for cmd in rollback_commands(
        main_branch=main_branch,
        start_sha=start_sha,
        versions=versions,
        artifacts_dir=artifacts_dir,
    ):
        console.print(f"  {' '.join(cmd)}")
    console.print(
        "Skip the deletions for whatever was not created yet.",
        Style.DIM,
    )


@contextmanager
def rollback_advice(
    *,
    console: ConsoleProtocol,
    main_branch: str,
    start_sha: str | None,
    versions: ReleaseVersions,
    artifacts_dir: Path | None = None,
) -> Iterator[RollbackGuard]:
    guard = RollbackGuard()
    try:
        yield guard
    finally:
        if guard.armed:
            print_rollback_advice(
                console=console,
                main_branch=main_branch,
                start_sha=start_sha,
                versions=versions,
                artifacts_dir=artifacts_dir,
            )
