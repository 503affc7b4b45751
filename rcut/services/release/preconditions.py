from __future__ import annotations

from rcut.core.result import Err, Ok, Result
from rcut.output.console import Style
from rcut.platform.process import is_available
from rcut.services.release.errors import ReleaseError
from rcut.services.release.model import ReleaseOptions
from rcut.services.release.semver import Version, is_snapshot_marker, parse_version
from rcut.services.release.session import ReleaseSession

_MAX_LISTED_CHANGES = 5


def check_preconditions(
    *,
    session: ReleaseSession,
    options: ReleaseOptions,
) -> Result[Version, ReleaseError]:
    """Validate the repository is in a releasable state.

    Checks run in a fixed order and stop at the first failure. On success
    the returned version is the marker content, or the override if one was
    given.
    """
    console = session.console
    repo = session.repo
    console.header("Checking preconditions")

    console.command(["git", "fetch", "--tags", session.remote])
    fetched = repo.fetch(session.remote)
    if isinstance(fetched, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message=f"failed to refresh refs from {session.remote}",
                hint=fetched.error.message,
            )
        )

    status = repo.status()
    if isinstance(status, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message="failed to check git status",
                hint=status.error.message,
            )
        )
    if not status.value.is_clean:
        entries = status.value.entries
        listed = ", ".join(e.path for e in entries[:_MAX_LISTED_CHANGES])
        if len(entries) > _MAX_LISTED_CHANGES:
            listed += f", ... ({len(entries)} total)"
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message=f"working tree has uncommitted changes: {listed}",
                hint="Commit or stash your changes, then retry.",
            )
        )
    console.print("working tree clean", Style.DIM)

    branch = repo.current_branch()
    if branch != session.main_branch:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message=f"not on {session.main_branch} (current: {branch or 'detached HEAD'})",
                hint=f"git checkout {session.main_branch}",
            )
        )

    marker_path = session.marker_path
    if not marker_path.is_file():
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message=f"version file not found: {marker_path.name}",
                hint=f"Create {marker_path} holding e.g. 1.0.0-SNAPSHOT.",
            )
        )

    try:
        marker = marker_path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to read {marker_path.name}: {e}",
            )
        )

    if not is_snapshot_marker(marker):
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message=f"{marker_path.name} is not a snapshot version: {marker.strip()!r}",
                hint="Releases are cut from X.Y.Z-SNAPSHOT.",
            )
        )

    if options.version_override is not None:
        return parse_version(options.version_override)

    parsed = parse_version(marker)
    if isinstance(parsed, Err):
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message=f"{marker_path.name}: {parsed.error.message}",
                hint=parsed.error.hint,
            )
        )
    console.print(f"{marker_path.name}: {parsed.value}", Style.DIM)
    return parsed


def check_tools(
    *,
    session: ReleaseSession,
    options: ReleaseOptions,
) -> Result[None, ReleaseError]:
    """Make sure everything a run needs exists before anything is mutated."""
    tools = ["gpg", "svn"] if options.publish else ["gpg"]
    missing = [t for t in tools if not is_available(t)]
    if missing:
        return Err(
            ReleaseError(
                kind="tool_missing",
                message=f"required tool(s) not found on PATH: {', '.join(missing)}",
            )
        )

    if options.publish and session.config.dist.url is None:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message="publishing requires a distribution URL",
                hint="Set [dist].url in .rcut.toml.",
            )
        )

    return Ok(None)
