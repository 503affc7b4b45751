"""Changelog generation from git history.

A release section lists the non-merge commits since the previous final
release tag and is inserted at the top of the changelog file, below its
title.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from rcut.core.result import Err, Ok, Result
from rcut.git.repository import LogEntry, Repository
from rcut.services.release.errors import ReleaseError
from rcut.services.release.semver import Version, parse_release_tag

_DEFAULT_TITLE = "# Changelog"


def previous_release_tag(*, tags: list[str], prefix: str, current: Version) -> str | None:
    """Newest final release tag strictly older than ``current``."""
    best: tuple[Version, str] | None = None
    for tag in tags:
        v = parse_release_tag(tag, prefix=prefix)
        if v is None or v >= current.release():
            continue
        if best is None or v > best[0]:
            best = (v, tag)
    return best[1] if best else None


def render_section(*, version: str, entries: list[LogEntry], day: date) -> str:
    lines = [f"## {version} ({day.isoformat()})", ""]
    if entries:
        lines.extend(f"- {e.short_sha} {e.subject}" for e in entries)
    else:
        lines.append("- No changes.")
    return "\n".join(lines) + "\n"


def has_section(existing: str | None, version: str) -> bool:
    """True if ``existing`` already holds a ``## <version>`` section."""
    if not existing:
        return False
    heading = f"## {version}"
    return any(
        line.rstrip() == heading or line.startswith(f"{heading} ")
        for line in existing.splitlines()
    )


def insert_section(existing: str | None, section: str) -> str:
    """Place ``section`` after the document title, keeping older sections below."""
    if not existing or not existing.strip():
        return f"{_DEFAULT_TITLE}\n\n{section}"

    head, _, rest = existing.partition("\n")
    if head.startswith("# "):
        body = rest.lstrip("\n")
        out = f"{head}\n\n{section}"
        return f"{out}\n{body}" if body else out

    return f"{_DEFAULT_TITLE}\n\n{section}\n{existing}"


def collect_entries(
    *,
    repo: Repository,
    prefix: str,
    current: Version,
) -> Result[list[LogEntry], ReleaseError]:
    tags = repo.list_tags(f"{prefix}-*")
    if isinstance(tags, Err):
        return Err(
            ReleaseError(kind="git_failed", message="failed to list tags", hint=tags.error.message)
        )

    previous = previous_release_tag(tags=tags.value, prefix=prefix, current=current)
    rev_range = f"{previous}..HEAD" if previous else "HEAD"
    log = repo.log(rev_range)
    if isinstance(log, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message=f"failed to read history ({rev_range})",
                hint=log.error.message,
            )
        )
    return Ok(log.value)


def write_changelog(
    *,
    path: Path,
    version: str,
    entries: list[LogEntry],
    day: date,
) -> Result[bool, ReleaseError]:
    """Insert the section for ``version``; False if the file already has one."""
    try:
        existing = path.read_text(encoding="utf-8") if path.exists() else None
        if has_section(existing, version):
            return Ok(False)
        section = render_section(version=version, entries=entries, day=day)
        path.write_text(insert_section(existing, section), encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to write {path.name}: {e}"))
    return Ok(True)
