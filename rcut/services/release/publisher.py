from __future__ import annotations

from rcut.core.result import Err, Ok, Result
from rcut.services.release.dist_repo import upload_candidate
from rcut.services.release.errors import ReleaseError
from rcut.services.release.model import ArtifactSet, ReleaseVersions
from rcut.services.release.session import ReleaseSession


def after_release_refspec(*, main_branch: str, rc_tag: str) -> str:
    """Refspec recording the post-release main line without touching the shared branch."""
    return f"{main_branch}:{main_branch}-after-{rc_tag}"


def publish_candidate(
    *,
    session: ReleaseSession,
    versions: ReleaseVersions,
    artifacts: ArtifactSet,
) -> Result[str, ReleaseError]:
    """Upload artifacts, then push the signed rc tag and the main line.

    Returns the distribution URL the candidate was uploaded to.
    """
    console = session.console
    repo = session.repo
    dist_url = session.config.dist.url
    if dist_url is None:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message="publishing requires a distribution URL",
                hint="Set [dist].url in .rcut.toml.",
            )
        )

    console.header("Publishing to the distribution store")
    uploaded = upload_candidate(
        dist_url=dist_url,
        versions=versions,
        artifacts=artifacts,
        console=console,
        work_dir=session.root,
    )
    if isinstance(uploaded, Err):
        return uploaded

    console.header(f"Tagging {versions.rc_tag}")
    key = session.config.artifacts.signing_key
    message = f"Release candidate {versions.rc_number} for {versions.current_version}"
    sign = ["-u", key] if key else ["-s"]
    console.command(["git", "tag", *sign, "-m", message, versions.rc_tag, versions.staging_branch])
    tagged = repo.tag_signed(
        name=versions.rc_tag,
        ref=versions.staging_branch,
        message=message,
        key=key,
    )
    if isinstance(tagged, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message=f"failed to create signed tag {versions.rc_tag}",
                hint=tagged.error.message,
            )
        )

    remote = session.remote
    console.command(["git", "push", remote, versions.rc_tag])
    pushed = repo.push(remote, versions.rc_tag)
    if isinstance(pushed, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message=f"failed to push tag {versions.rc_tag}",
                hint=pushed.error.message,
            )
        )

    console.command(["git", "checkout", session.main_branch])
    switched = repo.checkout(session.main_branch)
    if isinstance(switched, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message=f"failed to switch to {session.main_branch}",
                hint=switched.error.message,
            )
        )

    refspec = after_release_refspec(main_branch=session.main_branch, rc_tag=versions.rc_tag)
    console.command(["git", "push", remote, refspec])
    pushed_main = repo.push(remote, refspec)
    if isinstance(pushed_main, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message=f"failed to push {refspec}",
                hint=pushed_main.error.message,
            )
        )

    console.success(f"published {versions.rc_tag}")
    return Ok(uploaded.value)
