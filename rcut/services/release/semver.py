from __future__ import annotations

import re
from dataclasses import dataclass

from rcut.core.result import Err, Ok, Result
from rcut.services.release.errors import ReleaseError
from rcut.services.release.model import IncrementLevel


SNAPSHOT_SUFFIX = "-SNAPSHOT"

_VERSION_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)(-snapshot)?$",
    re.IGNORECASE,
)

_LEVEL_ALIASES: dict[str, IncrementLevel] = {
    "p": "patch",
    "patch": "patch",
    "m": "minor",
    "minor": "minor",
    "M": "major",
    "major": "major",
}


@dataclass(frozen=True, slots=True, order=True)
class Version:
    major: int
    minor: int
    patch: int
    snapshot: bool = False

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return base + SNAPSHOT_SUFFIX if self.snapshot else base

    def release(self) -> Version:
        """Same version without the snapshot marker."""
        return Version(self.major, self.minor, self.patch)

    def as_snapshot(self) -> Version:
        return Version(self.major, self.minor, self.patch, snapshot=True)

    def bump(self, level: IncrementLevel) -> Version:
        """Next version; the snapshot flag is kept as-is."""
        match level:
            case "major":
                return Version(self.major + 1, 0, 0, self.snapshot)
            case "minor":
                return Version(self.major, self.minor + 1, 0, self.snapshot)
            case "patch":
                return Version(self.major, self.minor, self.patch + 1, self.snapshot)
            case _:
                raise AssertionError(f"unexpected increment level: {level}")


def parse_version(text: str) -> Result[Version, ReleaseError]:
    """Parse ``X.Y.Z`` with an optional, case-insensitive ``-SNAPSHOT`` suffix."""
    s = text.strip()
    m = _VERSION_RE.match(s)
    if m is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"invalid version: {s!r}",
                hint="Expected MAJOR.MINOR.PATCH, optionally followed by -SNAPSHOT.",
            )
        )
    return Ok(
        Version(
            int(m.group(1)),
            int(m.group(2)),
            int(m.group(3)),
            snapshot=m.group(4) is not None,
        )
    )


def is_snapshot_marker(text: str) -> bool:
    return "snapshot" in text.lower()


def parse_level(value: str) -> Result[IncrementLevel, ReleaseError]:
    """Map a level name or its short form (p, m, M) to an increment level."""
    level = _LEVEL_ALIASES.get(value.strip())
    if level is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"invalid increment level: {value!r}",
                hint="Use one of: p|patch, m|minor, M|major.",
            )
        )
    return Ok(level)


def parse_release_tag(tag: str, *, prefix: str) -> Version | None:
    """Version of a final release tag ``<prefix>-X.Y.Z``; None for rc or foreign tags."""
    head = f"{prefix}-"
    if not tag.startswith(head):
        return None
    m = _VERSION_RE.match(tag[len(head) :])
    if m is None or m.group(4) is not None:
        return None
    return Version(int(m.group(1)), int(m.group(2)), int(m.group(3)))
