from __future__ import annotations

from rcut.core.result import Err, Ok, Result
from rcut.git.repository import Repository
from rcut.services.release.errors import ReleaseError
from rcut.services.release.model import IncrementLevel, ReleaseVersions
from rcut.services.release.semver import Version


def plan_versions(
    *,
    base: Version,
    level: IncrementLevel,
    rc_number: int,
    prefix: str,
) -> ReleaseVersions:
    """Derive every version string and tag name of a run from ``base``.

    ``base`` is the version being released; its snapshot flag is ignored.
    """
    current = base.release()
    next_snapshot = current.bump(level).as_snapshot()
    rc_version = f"{current}-rc{rc_number}"
    return ReleaseVersions(
        current_version=str(current),
        new_snapshot_version=str(next_snapshot),
        rc_number=rc_number,
        rc_version=rc_version,
        release_tag=f"{prefix}-{current}",
        rc_tag=f"{prefix}-{rc_version}",
    )


def ensure_tags_absent(
    *,
    repo: Repository,
    versions: ReleaseVersions,
) -> Result[None, ReleaseError]:
    """Refuse to cut a candidate whose release or rc tag already exists."""
    for tag in (versions.release_tag, versions.rc_tag):
        exists = repo.tag_exists(tag)
        if isinstance(exists, Err):
            return Err(
                ReleaseError(
                    kind="git_failed",
                    message="failed to list tags",
                    hint=exists.error.message,
                )
            )
        if exists.value:
            return Err(
                ReleaseError(
                    kind="tag_exists",
                    message=f"tag already exists: {tag}",
                    hint="Pick another rc number (-r) or version (-v).",
                )
            )
    return Ok(None)


def ensure_staging_branch_absent(
    *,
    repo: Repository,
    versions: ReleaseVersions,
) -> Result[None, ReleaseError]:
    """Refuse to reuse a staging branch left over from an earlier run."""
    branch = versions.staging_branch
    exists = repo.branch_exists(branch)
    if isinstance(exists, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message="failed to list branches",
                hint=exists.error.message,
            )
        )
    if exists.value:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message=f"staging branch already exists: {branch}",
                hint=f"Delete it (git branch -D {branch}) or pick another rc number (-r).",
            )
        )
    return Ok(None)
