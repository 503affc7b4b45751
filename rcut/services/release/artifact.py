"""Source archive, detached signature and checksum files.

Each candidate gets its own directory, ``<output dir>/<rc tag>/``. File
names are derived from the release tag:

- ``<tag>.tar.gz``
- ``<tag>.tar.gz.asc`` (armored detached gpg signature)
- ``<tag>.tar.gz.{md5,sha1,sha256,sha512}`` in ``sha256sum`` format
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from rcut.core.result import Err, Ok, Result
from rcut.output.console import ConsoleProtocol, Style
from rcut.platform.process import run as run_process
from rcut.services.release.errors import ReleaseError
from rcut.services.release.model import CHECKSUM_ALGORITHMS, ArtifactSet, ReleaseVersions
from rcut.services.release.session import ReleaseSession
from rcut.services.release.timeouts import GPG_TIMEOUT_SECONDS


def archive_name(versions: ReleaseVersions) -> str:
    return f"{versions.release_tag}.tar.gz"


def candidate_dir(*, output_dir: Path, versions: ReleaseVersions) -> Path:
    return output_dir / versions.rc_tag


def artifact_paths(directory: Path, versions: ReleaseVersions) -> tuple[Path, ...]:
    """Archive, signature and checksum paths, in that order."""
    archive = directory / archive_name(versions)
    return (
        archive,
        archive.with_name(f"{archive.name}.asc"),
        *(archive.with_name(f"{archive.name}.{algo}") for algo in CHECKSUM_ALGORITHMS),
    )


def ensure_artifacts_absent(
    *,
    output_dir: Path,
    versions: ReleaseVersions,
) -> Result[None, ReleaseError]:
    """Refuse to build over artifacts left by an earlier run of the same candidate."""
    directory = candidate_dir(output_dir=output_dir, versions=versions)
    existing = [p for p in artifact_paths(directory, versions) if p.exists()]
    if existing:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message=f"artifacts for {versions.rc_tag} already exist: {existing[0]}",
                hint=f"Remove {directory} if it is stale.",
            )
        )
    return Ok(None)


def _hash_file(path: Path, algorithm: str) -> str:
    h = hashlib.new(algorithm)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def write_checksums(archive: Path) -> Result[tuple[Path, ...], ReleaseError]:
    written: list[Path] = []
    for algorithm in CHECKSUM_ALGORITHMS:
        out = archive.with_name(f"{archive.name}.{algorithm}")
        try:
            digest = _hash_file(archive, algorithm)
            out.write_text(f"{digest}  {archive.name}\n", encoding="utf-8")
        except (OSError, ValueError) as e:
            return Err(
                ReleaseError(
                    kind="checksum_failed",
                    message=f"failed to write {out.name}: {e}",
                )
            )
        written.append(out)
    return Ok(tuple(written))


def sign_archive(
    *,
    archive: Path,
    key: str | None,
    console: ConsoleProtocol,
) -> Result[Path, ReleaseError]:
    """Create ``<archive>.asc`` with gpg, running inside the archive's directory."""
    signature = archive.with_name(f"{archive.name}.asc")
    cmd = ["gpg", "--yes", "--armor", "--detach-sign"]
    if key:
        cmd += ["--local-user", key]
    cmd += ["--output", signature.name, archive.name]
    console.command(cmd)

    result = run_process(cmd, cwd=archive.parent, timeout=GPG_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind="sign_failed",
                message=f"gpg failed to sign {archive.name} (exit {e.returncode})",
                hint=e.detail,
            )
        )
    if not signature.is_file():
        return Err(
            ReleaseError(
                kind="sign_failed",
                message=f"gpg did not produce {signature.name}",
            )
        )
    return Ok(signature)


def build_artifacts(
    *,
    session: ReleaseSession,
    versions: ReleaseVersions,
) -> Result[ArtifactSet, ReleaseError]:
    console = session.console
    console.header("Building release artifacts")

    out_dir = candidate_dir(output_dir=session.output_dir, versions=versions)
    archive = out_dir / archive_name(versions)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to create {out_dir}: {e}"))

    console.command(
        [
            "git",
            "archive",
            "--format=tar.gz",
            f"--prefix={versions.release_tag}/",
            "-o",
            str(archive),
            versions.staging_branch,
        ]
    )
    archived = session.repo.archive(
        ref=versions.staging_branch,
        output=archive,
        prefix=versions.release_tag,
    )
    if isinstance(archived, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message="git archive failed",
                hint=archived.error.message,
            )
        )

    signature = sign_archive(
        archive=archive,
        key=session.config.artifacts.signing_key,
        console=console,
    )
    if isinstance(signature, Err):
        return signature

    checksums = write_checksums(archive)
    if isinstance(checksums, Err):
        return checksums

    artifacts = ArtifactSet(archive=archive, signature=signature.value, checksums=checksums.value)
    for path in artifacts.files:
        console.print(f"  {path.relative_to(out_dir)}", Style.DIM)
    console.success(f"built {archive.name}")
    return Ok(artifacts)
