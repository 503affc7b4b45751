from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal


IncrementLevel = Literal["patch", "minor", "major"]

CHECKSUM_ALGORITHMS: tuple[str, ...] = ("md5", "sha1", "sha256", "sha512")


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """What the operator asked for on the command line."""

    level: IncrementLevel = "patch"
    rc_number: int = 0
    version_override: str | None = None
    publish: bool = False


@dataclass(frozen=True, slots=True)
class ReleaseVersions:
    current_version: str  # no -SNAPSHOT suffix
    new_snapshot_version: str
    rc_number: int
    rc_version: str  # <current>-rc<N>
    release_tag: str  # <prefix>-<current>
    rc_tag: str  # <prefix>-<rc_version>

    @property
    def staging_branch(self) -> str:
        return self.rc_version


@dataclass(frozen=True, slots=True)
class ArtifactSet:
    """A built archive and its sibling signature/checksum files."""

    archive: Path
    signature: Path
    checksums: tuple[Path, ...]

    @property
    def files(self) -> tuple[Path, ...]:
        return (self.archive, self.signature, *self.checksums)


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    versions: ReleaseVersions
    artifacts: ArtifactSet
    commit_sha: str
    published: bool
    vote_email: str
    vote_email_path: Path
