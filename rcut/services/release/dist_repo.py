from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from rcut.core.result import Err, Ok, Result
from rcut.output.console import ConsoleProtocol
from rcut.platform.process import run as run_process
from rcut.services.release.errors import ReleaseError
from rcut.services.release.model import ArtifactSet, ReleaseVersions
from rcut.services.release.timeouts import SVN_TIMEOUT_SECONDS


def _run_svn_command(
    *,
    cmd: list[str],
    cwd: Path,
    console: ConsoleProtocol,
    failure: str,
) -> Result[str, ReleaseError]:
    console.command(cmd)
    result = run_process(cmd, cwd=cwd, timeout=SVN_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(ReleaseError(kind="dist_failed", message=failure, hint=result.error.detail))
    return Ok(result.value)


def candidate_url(*, dist_url: str, versions: ReleaseVersions) -> str:
    return f"{dist_url.rstrip('/')}/{versions.rc_tag}"


def upload_candidate(
    *,
    dist_url: str,
    versions: ReleaseVersions,
    artifacts: ArtifactSet,
    console: ConsoleProtocol,
    work_dir: Path,
) -> Result[str, ReleaseError]:
    """Import the artifacts into a new ``<dist_url>/<rc tag>`` directory.

    Returns the URL of the created directory.
    """
    url = candidate_url(dist_url=dist_url, versions=versions)
    message = f"Add {versions.rc_tag} release candidate"

    created = _run_svn_command(
        cmd=["svn", "mkdir", "-m", f"Create {versions.rc_tag} directory", url],
        cwd=work_dir,
        console=console,
        failure=f"svn mkdir failed: {url}",
    )
    if isinstance(created, Err):
        return created

    with tempfile.TemporaryDirectory(prefix="rcut-dist-") as tmp:
        checkout = Path(tmp) / versions.rc_tag
        co = _run_svn_command(
            cmd=["svn", "checkout", "--depth=empty", url, str(checkout)],
            cwd=Path(tmp),
            console=console,
            failure=f"svn checkout failed: {url}",
        )
        if isinstance(co, Err):
            return co

        names: list[str] = []
        for src in artifacts.files:
            try:
                shutil.copy2(src, checkout / src.name)
            except OSError as e:
                return Err(
                    ReleaseError(kind="io_failed", message=f"failed to copy {src.name}: {e}")
                )
            names.append(src.name)

        added = _run_svn_command(
            cmd=["svn", "add", *names],
            cwd=checkout,
            console=console,
            failure="svn add failed",
        )
        if isinstance(added, Err):
            return added

        committed = _run_svn_command(
            cmd=["svn", "commit", "-m", message],
            cwd=checkout,
            console=console,
            failure="svn commit failed",
        )
        if isinstance(committed, Err):
            return committed

    return Ok(url)
