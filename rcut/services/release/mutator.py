"""Repository mutation steps of a release run.

The steps are sequential and not transactional: the changelog and the
next snapshot version are committed on the main line before the staging
branch exists, so a later failure leaves the main line advanced. The
rollback advice printed on failure covers that case.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from rcut.core.result import Err, Ok, Result
from rcut.git.repository import GitError
from rcut.output.console import Style
from rcut.services.release.changelog import collect_entries, write_changelog
from rcut.services.release.errors import ReleaseError
from rcut.services.release.model import ReleaseVersions
from rcut.services.release.semver import parse_version
from rcut.services.release.session import ReleaseSession


def _git_failed(message: str, error: GitError) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="git_failed", message=message, hint=error.message))


def write_marker(path: Path, version: str) -> Result[None, ReleaseError]:
    try:
        path.write_text(f"{version}\n", encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to write {path.name}: {e}"))
    return Ok(None)


def _commit(
    session: ReleaseSession,
    *,
    path: Path,
    message: str,
) -> Result[str, ReleaseError]:
    rel = path.relative_to(session.root).as_posix()
    session.console.command(["git", "add", "--", rel])
    added = session.repo.add([rel])
    if isinstance(added, Err):
        return _git_failed(f"git add {rel} failed", added.error)

    session.console.command(["git", "commit", "-m", message])
    committed = session.repo.commit(message)
    if isinstance(committed, Err):
        return _git_failed("git commit failed", committed.error)

    session.console.print(f"committed {committed.value[:8]}: {message}", Style.DIM)
    return Ok(committed.value)


def commit_changelog(
    *,
    session: ReleaseSession,
    versions: ReleaseVersions,
    day: date,
) -> Result[str | None, ReleaseError]:
    """Commit the changelog section; None when an earlier candidate already did."""
    current = parse_version(versions.current_version)
    if isinstance(current, Err):
        return current

    entries = collect_entries(repo=session.repo, prefix=session.tag_prefix, current=current.value)
    if isinstance(entries, Err):
        return entries

    written = write_changelog(
        path=session.changelog_path,
        version=versions.current_version,
        entries=entries.value,
        day=day,
    )
    if isinstance(written, Err):
        return written
    path = session.changelog_path
    if not written.value:
        session.console.info(
            f"{path.name} already has a {versions.current_version} section; not committed"
        )
        return Ok(None)

    return _commit(
        session,
        path=path,
        message=f"Update changelog for {versions.current_version}",
    )


def commit_snapshot_bump(
    *,
    session: ReleaseSession,
    versions: ReleaseVersions,
) -> Result[str | None, ReleaseError]:
    """Commit the next snapshot version; None when the marker already holds it."""
    marker = session.marker_path
    try:
        held = parse_version(marker.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to read {marker.name}: {e}"))
    if isinstance(held, Ok) and str(held.value) == versions.new_snapshot_version:
        session.console.info(
            f"{marker.name} already holds {versions.new_snapshot_version}; no bump commit"
        )
        return Ok(None)

    written = write_marker(session.marker_path, versions.new_snapshot_version)
    if isinstance(written, Err):
        return written
    return _commit(
        session,
        path=session.marker_path,
        message=f"Bump version to {versions.new_snapshot_version}",
    )


def create_staging_branch(
    *,
    session: ReleaseSession,
    versions: ReleaseVersions,
) -> Result[None, ReleaseError]:
    branch = versions.staging_branch
    session.console.command(["git", "checkout", "-b", branch])
    created = session.repo.checkout(branch, create=True)
    if isinstance(created, Err):
        return _git_failed(f"failed to create branch {branch}", created.error)
    return Ok(None)


def commit_release_version(
    *,
    session: ReleaseSession,
    versions: ReleaseVersions,
) -> Result[str, ReleaseError]:
    written = write_marker(session.marker_path, versions.current_version)
    if isinstance(written, Err):
        return written
    return _commit(
        session,
        path=session.marker_path,
        message=f"Release {versions.current_version} ({versions.rc_tag})",
    )


def mutate_repository(
    *,
    session: ReleaseSession,
    versions: ReleaseVersions,
    day: date,
) -> Result[str, ReleaseError]:
    """Run the four mutation steps in order.

    Returns the hash of the release commit at the head of the staging branch.
    """
    session.console.header(f"Updating {session.main_branch}")
    changelog = commit_changelog(session=session, versions=versions, day=day)
    if isinstance(changelog, Err):
        return changelog

    bumped = commit_snapshot_bump(session=session, versions=versions)
    if isinstance(bumped, Err):
        return bumped

    session.console.header(f"Preparing staging branch {versions.staging_branch}")
    branch = create_staging_branch(session=session, versions=versions)
    if isinstance(branch, Err):
        return branch

    return commit_release_version(session=session, versions=versions)
